"""Schema model for GraphQL introspection documents.

This module defines immutable dataclasses that describe a parsed GraphQL
schema: the three-variant type reference algebra (``Named``, ``NonNull``,
``ListOf``) and one definition class per schema kind. The model is built once
per generation run by the parser and shared read-only by every generator.
"""

from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Mapping, Union

from graphql import GraphQLSyntaxError, ListTypeNode, NamedTypeNode, NonNullTypeNode, TypeNode, parse_type

from .errors import SchemaParseError

BUILT_IN_SCALARS = frozenset({"String", "Int", "Float", "Boolean", "ID"})


@dataclass(frozen=True)
class Named:
    """A reference to a named schema type, e.g. ``User``."""
    name: str


@dataclass(frozen=True)
class NonNull:
    """A non-null wrapper, rendered as ``Inner!``."""
    inner: "TypeReference"

    def __post_init__(self):
        if isinstance(self.inner, NonNull):
            raise ValueError("NonNull cannot wrap another NonNull")


@dataclass(frozen=True)
class ListOf:
    """A list wrapper, rendered as ``[Inner]``."""
    inner: "TypeReference"


TypeReference = Union[Named, NonNull, ListOf]


def is_non_null(ref: TypeReference) -> bool:
    """Return True if the outermost layer of the reference is non-null."""
    return isinstance(ref, NonNull)


def is_list(ref: TypeReference) -> bool:
    """Return True if the reference is a list, ignoring an outer non-null."""
    match ref:
        case ListOf():
            return True
        case NonNull(inner):
            return is_list(inner)
        case Named():
            return False


def base_name(ref: TypeReference) -> str:
    """Unwrap every layer and return the innermost type name."""
    match ref:
        case Named(name):
            return name
        case NonNull(inner) | ListOf(inner):
            return base_name(inner)


def to_wire_string(ref: TypeReference) -> str:
    """Render a reference in GraphQL notation, e.g. ``[String!]!``."""
    match ref:
        case Named(name):
            return name
        case NonNull(inner):
            return f"{to_wire_string(inner)}!"
        case ListOf(inner):
            return f"[{to_wire_string(inner)}]"


def parse_wire_type(text: str) -> TypeReference:
    """Parse GraphQL type notation back into a reference.

    This is the inverse of :func:`to_wire_string`.
    """
    try:
        node = parse_type(text)
    except GraphQLSyntaxError as e:
        raise SchemaParseError(f"Invalid type reference '{text}': {e.message}") from e
    return _from_type_node(node)


def _from_type_node(node: TypeNode) -> TypeReference:
    if isinstance(node, NonNullTypeNode):
        return NonNull(_from_type_node(node.type))
    if isinstance(node, ListTypeNode):
        return ListOf(_from_type_node(node.type))
    assert isinstance(node, NamedTypeNode), f"Expected NamedTypeNode, got {type(node)}"
    return Named(node.name.value)


@dataclass(frozen=True)
class ArgumentDefinition:
    """An argument of a field, or a field of an input object."""
    name: str
    type: TypeReference
    description: str | None = None
    # Raw GraphQL literal, e.g. "10" or "ACTIVE"
    default_value: str | None = None

    @property
    def is_required(self) -> bool:
        """Non-null with no schema default: callers must supply a value."""
        return is_non_null(self.type) and self.default_value is None


@dataclass(frozen=True)
class FieldDefinition:
    """A field of an object or interface type."""
    name: str
    type: TypeReference
    description: str | None = None
    arguments: tuple[ArgumentDefinition, ...] = ()
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class TypeDefinition:
    """A GraphQL object type."""
    name: str
    fields: tuple[FieldDefinition, ...] = ()
    interfaces: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class InputTypeDefinition:
    """A GraphQL input object type."""
    name: str
    input_fields: tuple[ArgumentDefinition, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class InterfaceDefinition:
    """A GraphQL interface type."""
    name: str
    fields: tuple[FieldDefinition, ...] = ()
    interfaces: tuple[str, ...] = ()
    possible_types: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class EnumValueDefinition:
    """A single value of a GraphQL enum."""
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class EnumDefinition:
    """A GraphQL enum type."""
    name: str
    values: tuple[EnumValueDefinition, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class UnionDefinition:
    """A GraphQL union type."""
    name: str
    members: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class ScalarDefinition:
    """A custom GraphQL scalar declared by the schema."""
    name: str
    description: str | None = None


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class SchemaModel:
    """Complete model of a GraphQL schema.

    Every lookup table is keyed by schema name in document order, and a name
    appears in at most one table.
    """
    query_type: TypeDefinition
    mutation_type: TypeDefinition | None = None
    subscription_type: TypeDefinition | None = None
    types: Mapping[str, TypeDefinition] = field(default_factory=dict)
    enums: Mapping[str, EnumDefinition] = field(default_factory=dict)
    input_types: Mapping[str, InputTypeDefinition] = field(default_factory=dict)
    interfaces: Mapping[str, InterfaceDefinition] = field(default_factory=dict)
    unions: Mapping[str, UnionDefinition] = field(default_factory=dict)
    scalars: Mapping[str, ScalarDefinition] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("types", "enums", "input_types", "interfaces", "unions", "scalars"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def root_type_names(self) -> frozenset[str]:
        """Names of the Query/Mutation/Subscription root types."""
        roots = [self.query_type, self.mutation_type, self.subscription_type]
        return frozenset(t.name for t in roots if t is not None)

    def is_root_type(self, name: str) -> bool:
        return name in self.root_type_names

    def is_scalar(self, name: str) -> bool:
        return name in BUILT_IN_SCALARS or name in self.scalars

    def is_enum(self, name: str) -> bool:
        return name in self.enums

    def is_input_type(self, name: str) -> bool:
        return name in self.input_types

    def is_object_type(self, name: str) -> bool:
        return name in self.types

    def is_interface(self, name: str) -> bool:
        return name in self.interfaces

    def is_union(self, name: str) -> bool:
        return name in self.unions

    def is_composite(self, name: str) -> bool:
        """Object, interface or union: types that need a selection set."""
        return self.is_object_type(name) or self.is_interface(name) or self.is_union(name)

    @cached_property
    def _union_index(self) -> Mapping[str, tuple[str, ...]]:
        index: dict[str, list[str]] = {}
        for union in self.unions.values():
            for member in union.members:
                index.setdefault(member, []).append(union.name)
        return MappingProxyType({k: tuple(v) for k, v in index.items()})

    def unions_containing(self, type_name: str) -> tuple[str, ...]:
        """Return the unions that list ``type_name`` as a member."""
        return self._union_index.get(type_name, ())

    @property
    def data_types(self) -> list[TypeDefinition]:
        """Object types that describe data shapes (root types excluded)."""
        return [t for t in self.types.values() if not self.is_root_type(t.name)]

    @property
    def field_count(self) -> int:
        return sum(len(t.fields) for t in self.types.values()) + sum(
            len(i.fields) for i in self.interfaces.values()
        )
