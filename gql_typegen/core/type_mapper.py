"""Resolution of GraphQL type references to Python types.

The type mapper is the one place that decides how a wire type such as
``[User!]!`` appears in generated code: which class or builtin it names, which
output group and module define it, and whether each layer is nullable.
"""

from dataclasses import dataclass, replace
from enum import Enum

from .errors import RootTypeReferenceError, UnresolvedTypeError
from .ir import BUILT_IN_SCALARS, ListOf, Named, NonNull, SchemaModel, TypeReference
from .naming import NamingConvention
from .scalars import FALLBACK_MAPPING, ScalarRegistry


class TypeCategory(str, Enum):
    """The kind of generated artifact a named type resolves to."""
    SCALAR = "scalar"
    ENUM = "enum"
    INPUT = "input"
    OBJECT = "object"
    INTERFACE = "interface"
    UNION = "union"


# Output group (sub-package) holding each category's artifacts
GROUPS = {
    TypeCategory.ENUM: "enumeration",
    TypeCategory.INPUT: "input",
    TypeCategory.OBJECT: "type",
    TypeCategory.INTERFACE: "type",
    TypeCategory.UNION: "union",
}


@dataclass(frozen=True)
class NamedDescriptor:
    """A resolved named type.

    For scalars ``python_type`` is a builtin or imported name and ``group`` is
    None; for every other category it is the generated class name defined in
    ``<group>/<module>.py``.
    """
    graphql_name: str
    python_type: str
    category: TypeCategory
    group: str | None = None
    module: str | None = None
    import_statement: str | None = None

    @property
    def is_scalar(self) -> bool:
        return self.category is TypeCategory.SCALAR

    @property
    def is_composite(self) -> bool:
        """Whether the type needs a selection set when queried."""
        return self.category in (TypeCategory.OBJECT, TypeCategory.INTERFACE, TypeCategory.UNION)


@dataclass(frozen=True)
class ListDescriptor:
    """A list whose items resolve independently, nullability included."""
    item: "ResolvedType"


@dataclass(frozen=True)
class ResolvedType:
    """A target type descriptor plus the nullability of this layer."""
    descriptor: NamedDescriptor | ListDescriptor
    nullable: bool = True

    @property
    def is_list(self) -> bool:
        return isinstance(self.descriptor, ListDescriptor)

    @property
    def named(self) -> NamedDescriptor:
        """The innermost named descriptor."""
        descriptor = self.descriptor
        while isinstance(descriptor, ListDescriptor):
            descriptor = descriptor.item.descriptor
        return descriptor

    @property
    def annotation(self) -> str:
        """Python annotation text, e.g. ``Optional[List[UserDTO]]``."""
        text = self.bare_annotation
        if self.nullable:
            return f"Optional[{text}]"
        return text

    @property
    def bare_annotation(self) -> str:
        """Annotation text ignoring the nullability of the outer layer."""
        if isinstance(self.descriptor, ListDescriptor):
            return f"List[{self.descriptor.item.annotation}]"
        return self.descriptor.python_type

    @property
    def imports(self) -> set[str]:
        """Import statements the annotation needs for scalar types."""
        named = self.named
        return {named.import_statement} if named.import_statement else set()


class TypeMapper:
    """Maps type references to :class:`ResolvedType` values.

    Named types resolve in this order: scalar overrides and the built-in
    scalars, custom scalars declared by the schema, then enums, input types,
    object types, interfaces and unions. A name found nowhere raises
    :class:`UnresolvedTypeError`; a root operation type raises
    :class:`RootTypeReferenceError` since no data artifact is generated for it.
    """

    def __init__(
        self,
        schema: SchemaModel,
        naming: NamingConvention | None = None,
        scalars: ScalarRegistry | None = None,
    ):
        self.schema = schema
        self.naming = naming or NamingConvention()
        self.scalars = scalars or ScalarRegistry()

    def resolve(self, ref: TypeReference, context: str | None = None) -> ResolvedType:
        """Resolve a reference; ``context`` names the referencing element for errors."""
        match ref:
            case NonNull(inner):
                return replace(self.resolve(inner, context), nullable=False)
            case ListOf(inner):
                return ResolvedType(ListDescriptor(self.resolve(inner, context)))
            case Named(name):
                return ResolvedType(self.resolve_named(name, context))

    def resolve_named(self, name: str, context: str | None = None) -> NamedDescriptor:
        if self.scalars.is_overridden(name) or name in BUILT_IN_SCALARS:
            return self._scalar(name, self.scalars.get(name))
        if self.schema.is_scalar(name):
            return self._scalar(name, self.scalars.get(name) or FALLBACK_MAPPING)
        if self.schema.is_enum(name):
            return self._generated(name, TypeCategory.ENUM, self.naming.enum_name(name))
        if self.schema.is_input_type(name):
            return self._generated(name, TypeCategory.INPUT, self.naming.input_type_name(name))
        if self.schema.is_root_type(name):
            raise RootTypeReferenceError(name, context)
        if self.schema.is_object_type(name):
            return self._generated(name, TypeCategory.OBJECT, self.naming.type_name(name))
        if self.schema.is_interface(name):
            return self._generated(name, TypeCategory.INTERFACE, self.naming.interface_name(name))
        if self.schema.is_union(name):
            return self._generated(name, TypeCategory.UNION, self.naming.union_name(name))
        raise UnresolvedTypeError(name, context)

    def projection_class(self, name: str) -> str:
        """Generated projection class name for an object or interface type."""
        return self.naming.projection_name(name)

    @staticmethod
    def _scalar(name: str, mapping) -> NamedDescriptor:
        return NamedDescriptor(
            graphql_name=name,
            python_type=mapping.python_type,
            category=TypeCategory.SCALAR,
            import_statement=mapping.import_statement,
        )

    def _generated(self, name: str, category: TypeCategory, class_name: str) -> NamedDescriptor:
        return NamedDescriptor(
            graphql_name=name,
            python_type=class_name,
            category=category,
            group=GROUPS[category],
            module=self.naming.module_name(class_name),
        )
