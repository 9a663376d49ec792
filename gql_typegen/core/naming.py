"""Naming convention for generated identifiers.

Every generator and the type mapper compute generated class names through a
single :class:`NamingConvention`, so a type referenced from one artifact
always matches the name under which another artifact defines it.
"""

import keyword
import re
from dataclasses import dataclass


def capitalize(name: str) -> str:
    """Upper-case the first letter only: ``userProfile`` -> ``UserProfile``."""
    return name[:1].upper() + name[1:]


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def safe_identifier(name: str, reserved: frozenset[str] = frozenset()) -> str:
    """Suffix Python keywords and reserved names with an underscore."""
    while keyword.iskeyword(name) or name in reserved:
        name = f"{name}_"
    return name


@dataclass(frozen=True)
class NamingConvention:
    """Converts schema names into generated class names per category.

    The default policy capitalizes the name and appends a category suffix.
    Enum, interface and union names are only capitalized. A name that already
    ends with its category suffix is returned unchanged, so applying a
    category function twice gives the same result as applying it once.

    Example:
        naming = NamingConvention()
        naming.type_name("user")             # "UserDTO"
        naming.input_type_name("UserInput")  # "UserInput"
    """

    type_suffix: str = "DTO"
    input_suffix: str = "Input"
    query_suffix: str = "Query"
    mutation_suffix: str = "Mutation"
    projection_suffix: str = "Projection"

    @classmethod
    def with_suffixes(
        cls,
        type_suffix: str = "DTO",
        input_suffix: str = "Input",
        query_suffix: str = "Query",
        mutation_suffix: str = "Mutation",
        projection_suffix: str = "Projection",
    ) -> "NamingConvention":
        """Create a convention with custom category suffixes."""
        return cls(type_suffix, input_suffix, query_suffix, mutation_suffix, projection_suffix)

    @staticmethod
    def _suffixed(name: str, suffix: str) -> str:
        name = capitalize(name)
        if name.endswith(suffix):
            return name
        return name + suffix

    def type_name(self, graphql_name: str) -> str:
        return self._suffixed(graphql_name, self.type_suffix)

    def input_type_name(self, graphql_name: str) -> str:
        return self._suffixed(graphql_name, self.input_suffix)

    def query_name(self, graphql_name: str) -> str:
        return self._suffixed(graphql_name, self.query_suffix)

    def mutation_name(self, graphql_name: str) -> str:
        return self._suffixed(graphql_name, self.mutation_suffix)

    def projection_name(self, graphql_name: str) -> str:
        return self._suffixed(graphql_name, self.projection_suffix)

    def enum_name(self, graphql_name: str) -> str:
        return capitalize(graphql_name)

    def interface_name(self, graphql_name: str) -> str:
        return capitalize(graphql_name)

    def union_name(self, graphql_name: str) -> str:
        return capitalize(graphql_name)

    @staticmethod
    def module_name(class_name: str) -> str:
        """File stem of the module holding ``class_name``."""
        return safe_identifier(snake_case(class_name))
