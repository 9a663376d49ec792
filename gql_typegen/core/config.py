"""Configuration for a generation run.

A configuration is built directly, or loaded from ``gql-typegen.yaml`` or the
``[tool.gql-typegen]`` table of ``pyproject.toml``:

    config = load_configuration()  # searches the current directory
    config = CodegenConfiguration.create(
        schema_file="schema.json",
        output_directory="src",
        package_name="example.graphql",
    )
"""

import keyword
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, ValidationError, field_validator

from .errors import ConfigurationError
from .naming import NamingConvention
from .scalars import ScalarMapping

DEFAULT_FILENAMES = ["gql-typegen.yaml", "gql-typegen.yml"]
TOOL_TABLE = "gql-typegen"


class CodegenConfiguration(BaseModel):
    """Settings of one generation run."""

    model_config = ConfigDict(frozen=True)

    schema_file: Path = Field(..., description="Introspection JSON or SDL file to generate from.")
    output_directory: Path = Field(..., description="Root directory the package is written below.")
    package_name: str = Field(..., description="Dotted package prefix of the generated code.")
    custom_scalars: dict[str, str] = Field(
        default_factory=dict,
        description="Scalar name to dotted Python type, e.g. {'Money': 'decimal.Decimal'}.",
    )
    naming: InstanceOf[NamingConvention] = Field(default_factory=NamingConvention)
    skip_if_up_to_date: bool = Field(
        True, description="Skip generation when the schema fingerprint is unchanged."
    )

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("package_name must not be blank")
        for part in value.split("."):
            if not part.isidentifier() or keyword.iskeyword(part):
                raise ValueError(f"'{value}' is not a valid dotted package name")
        return value

    @field_validator("custom_scalars")
    @classmethod
    def _check_custom_scalars(cls, value: dict[str, str]) -> dict[str, str]:
        for target in value.values():
            ScalarMapping.from_dotted(target)
        return value

    @classmethod
    def create(cls, **values: Any) -> "CodegenConfiguration":
        """Validate ``values``, raising ConfigurationError on any problem."""
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_describe(e)}") from e

    @property
    def package_directory(self) -> Path:
        return self.output_directory.joinpath(*self.package_name.split("."))

    def package_path(self, group: str | None = None) -> str:
        """Dotted module path of the package, or of one output group."""
        return f"{self.package_name}.{group}" if group else self.package_name


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in item['loc']) or 'configuration'}: {item['msg']}" for item in error.errors()
    )


def load_yaml(path: str | Path) -> dict:
    import yaml

    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    return data or {}


def load_pyproject(path: str | Path) -> dict:
    import tomllib

    try:
        pyproject = tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
    tools = pyproject.get("tool", {})
    if TOOL_TABLE not in tools:
        raise ConfigurationError(f"No [tool.{TOOL_TABLE}] table in {path}")
    return tools[TOOL_TABLE]


def configuration_from_mapping(data: dict, base_dir: Path | None = None, **overrides: Any) -> CodegenConfiguration:
    """Build a configuration from file data.

    Relative paths are resolved against ``base_dir``; a ``naming`` table is
    turned into a NamingConvention; non-None ``overrides`` win over the file.
    """
    values = {key.replace("-", "_"): value for key, value in data.items()}
    if isinstance(values.get("naming"), dict):
        try:
            values["naming"] = NamingConvention.with_suffixes(**values["naming"])
        except TypeError as e:
            raise ConfigurationError(f"Invalid naming configuration: {e}") from e
    if base_dir is not None:
        for key in ("schema_file", "output_directory"):
            if key in values and not Path(values[key]).is_absolute():
                values[key] = base_dir / values[key]
    values.update({key: value for key, value in overrides.items() if value is not None})
    return CodegenConfiguration.create(**values)


def load_configuration(path: str | Path | None = None, **overrides: Any) -> CodegenConfiguration:
    """Load configuration from a YAML or pyproject file.

    Without ``path`` the current directory is searched for the default YAML
    file names, then for a pyproject.toml with a ``[tool.gql-typegen]`` table.
    """
    if path is None:
        path = _find_config_file(Path(os.getcwd()))
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    if path.suffix == ".toml":
        data = load_pyproject(path)
    else:
        data = load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")
    return configuration_from_mapping(data, path.parent, **overrides)


def _find_config_file(cwd: Path) -> Path:
    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return candidate
    candidate = cwd / "pyproject.toml"
    if candidate.exists():
        return candidate
    raise ConfigurationError(f"No configuration found in {cwd}")
