"""Core modules for GraphQL type generation."""

from .config import CodegenConfiguration, load_configuration
from .errors import (
    CodegenError,
    CodegenIOError,
    ConfigurationError,
    RootTypeReferenceError,
    SchemaParseError,
    UnresolvedTypeError,
)
from .generator import CodeGenerator, CodegenResult, CodegenStatus
from .ir import (
    ArgumentDefinition,
    EnumDefinition,
    EnumValueDefinition,
    FieldDefinition,
    InputTypeDefinition,
    InterfaceDefinition,
    ListOf,
    Named,
    NonNull,
    ScalarDefinition,
    SchemaModel,
    TypeDefinition,
    TypeReference,
    UnionDefinition,
)
from .naming import NamingConvention
from .parser import SchemaParser
from .render import Artifact
from .scalars import ScalarMapping, ScalarRegistry
from .type_mapper import ResolvedType, TypeMapper

__all__ = [
    # Configuration
    "CodegenConfiguration",
    "load_configuration",
    # Errors
    "CodegenError",
    "CodegenIOError",
    "ConfigurationError",
    "RootTypeReferenceError",
    "SchemaParseError",
    "UnresolvedTypeError",
    # Orchestrator
    "Artifact",
    "CodeGenerator",
    "CodegenResult",
    "CodegenStatus",
    # Schema model
    "ArgumentDefinition",
    "EnumDefinition",
    "EnumValueDefinition",
    "FieldDefinition",
    "InputTypeDefinition",
    "InterfaceDefinition",
    "ListOf",
    "Named",
    "NonNull",
    "ScalarDefinition",
    "SchemaModel",
    "TypeDefinition",
    "TypeReference",
    "UnionDefinition",
    # Parser
    "SchemaParser",
    # Type resolution
    "NamingConvention",
    "ResolvedType",
    "ScalarMapping",
    "ScalarRegistry",
    "TypeMapper",
]
