"""Scalar type mappings for GraphQL code generation.

Maps GraphQL scalar names to the Python type used in generated code and the
import that type needs.

Example usage:
    from gql_typegen.core.scalars import ScalarRegistry

    registry = ScalarRegistry()
    registry.register_dotted("Money", "decimal.Decimal")

    mapping = registry.get("Money")
    mapping.python_type        # "Decimal"
    mapping.import_statement   # "from decimal import Decimal"
"""

import builtins
from dataclasses import dataclass


@dataclass(frozen=True)
class ScalarMapping:
    """How one GraphQL scalar appears in generated Python code.

    Attributes:
        python_type: The name used in annotations (e.g., "datetime", "str")
        import_statement: Import needed for that name, or None for builtins
    """

    python_type: str
    import_statement: str | None = None

    @classmethod
    def from_dotted(cls, target: str) -> "ScalarMapping":
        """Build a mapping from ``module.Name`` or a bare builtin name."""
        target = target.strip()
        if not target:
            raise ValueError("Scalar target type must not be empty")
        module, _, name = target.rpartition(".")
        if not module:
            if name not in vars(builtins):
                raise ValueError(f"Scalar target '{target}' must be a builtin or a dotted path")
            return cls(python_type=name)
        if module == "builtins":
            return cls(python_type=name)
        return cls(python_type=name, import_statement=f"from {module} import {name}")


BUILT_IN_MAPPINGS = {
    "String": ScalarMapping("str"),
    "ID": ScalarMapping("str"),
    "Int": ScalarMapping("int"),
    "Float": ScalarMapping("float"),
    "Boolean": ScalarMapping("bool"),
}

# Common custom scalars served by many GraphQL APIs
DEFAULT_CUSTOM_MAPPINGS = {
    "DateTime": ScalarMapping("datetime", "from datetime import datetime"),
    "Date": ScalarMapping("date", "from datetime import date"),
    "Time": ScalarMapping("time", "from datetime import time"),
    "UUID": ScalarMapping("UUID", "from uuid import UUID"),
    "Long": ScalarMapping("int"),
    "BigDecimal": ScalarMapping("Decimal", "from decimal import Decimal"),
    "BigInteger": ScalarMapping("int"),
    "JSON": ScalarMapping("Any", "from typing import Any"),
}

# Schema scalars nobody mapped are passed through untyped
FALLBACK_MAPPING = ScalarMapping("Any", "from typing import Any")


class ScalarRegistry:
    """Registry of scalar mappings.

    Lookup order is: overrides registered on this instance, then the
    built-in GraphQL scalars, then the default custom scalars.

    Example:
        registry = ScalarRegistry({"Money": "decimal.Decimal"})
        registry.get("Money").python_type  # "Decimal"
    """

    def __init__(self, overrides: dict[str, str] | None = None):
        self._overrides: dict[str, ScalarMapping] = {}
        for scalar_name, target in (overrides or {}).items():
            self.register_dotted(scalar_name, target)

    def register(self, scalar_name: str, mapping: ScalarMapping):
        """Register a mapping for a scalar type."""
        self._overrides[scalar_name] = mapping

    def register_dotted(self, scalar_name: str, target: str):
        """Register a mapping given as a dotted Python path."""
        self.register(scalar_name, ScalarMapping.from_dotted(target))

    def get(self, scalar_name: str) -> ScalarMapping | None:
        """Get the mapping for a scalar type, or None if not registered."""
        if scalar_name in self._overrides:
            return self._overrides[scalar_name]
        if scalar_name in BUILT_IN_MAPPINGS:
            return BUILT_IN_MAPPINGS[scalar_name]
        return DEFAULT_CUSTOM_MAPPINGS.get(scalar_name)

    def is_overridden(self, scalar_name: str) -> bool:
        """Check if a mapping was registered explicitly on this registry."""
        return scalar_name in self._overrides

    def has(self, scalar_name: str) -> bool:
        """Check if a mapping is known for a scalar type."""
        return self.get(scalar_name) is not None
