"""Query and mutation generators.

One artifact per field of the Query or Mutation root type. Each artifact
defines a ``GraphQLOperation`` subclass and its builder:

    UserQuery(id="1", projection=UserProjection().id().name()).to_graphql()
    # query User($id: ID!) { user(id: $id) { id name } }
"""

import logging
from dataclasses import dataclass

from ..ir import FieldDefinition, SchemaModel, TypeDefinition, to_wire_string
from ..naming import capitalize
from ..render import Artifact
from ..type_mapper import ResolvedType, TypeCategory
from .base import BaseGenerator, GenerationContext, ImportSet, attribute_name, unique_name

logger = logging.getLogger(__name__)

RESERVED_PARAM_NAMES = frozenset({
    "self", "cls", "projection", "build", "builder", "selecting",
    "operation_name", "to_graphql", "variables", "response_type", "to_request",
})


@dataclass(frozen=True)
class ParamSpec:
    attribute: str
    graphql_name: str
    annotation: str
    setter_annotation: str


@dataclass(frozen=True)
class SelectionSpec:
    type: str


def response_expression(resolved: ResolvedType) -> str:
    """Runtime expression naming the response type, e.g. ``List[UserDTO]``."""
    if resolved.is_list:
        return f"List[{response_expression(resolved.descriptor.item)}]"
    return resolved.named.python_type


def document_head(operation_type: str, operation_name: str, field: FieldDefinition) -> str:
    """Render the operation up to and including the root field's arguments."""
    head = f"{operation_type} {operation_name}"
    if field.arguments:
        head += f"({', '.join(f'${arg.name}: {to_wire_string(arg.type)}' for arg in field.arguments)})"
    head += f" {{ {field.name}"
    if field.arguments:
        head += f"({', '.join(f'{arg.name}: ${arg.name}' for arg in field.arguments)})"
    return head


class OperationGenerator(BaseGenerator):
    """Shared implementation of the query and mutation generators."""

    operation_type: str
    template = "operation.py.j2"

    def root_type(self, schema: SchemaModel) -> TypeDefinition | None:
        raise NotImplementedError

    def class_name(self, context: GenerationContext, field_name: str) -> str:
        raise NotImplementedError

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        root = self.root_type(schema)
        if root is None:
            return []
        artifacts = [self._generate_operation(context, root, field) for field in root.fields]
        logger.debug("Generated %d %s operations", len(artifacts), self.operation_type)
        return artifacts

    def _generate_operation(self, context: GenerationContext, root: TypeDefinition, field: FieldDefinition) -> Artifact:
        class_name = self.class_name(context, field.name)
        builder_name = f"{class_name}Builder"
        operation_name = capitalize(field.name)
        field_context = f"{root.name}.{field.name}"

        imports = ImportSet(self.group)
        imports.add_runtime("GraphQLOperation")
        imports.add_typing("Any", "Dict")

        params = []
        used: set[str] = set()
        for arg in field.arguments:
            resolved = context.mapper.resolve(arg.type, f"{field_context}.{arg.name}")
            imports.add_resolved(resolved)
            imports.add_typing("Optional")
            annotation = resolved.annotation if resolved.nullable else f"Optional[{resolved.bare_annotation}]"
            params.append(
                ParamSpec(
                    attribute=unique_name(attribute_name(arg.name, RESERVED_PARAM_NAMES), used),
                    graphql_name=arg.name,
                    annotation=annotation,
                    setter_annotation=resolved.annotation,
                )
            )
        if params:
            imports.add_runtime("serialize_variable")

        returned = context.mapper.resolve(field.type, field_context)
        named = returned.named
        if named.is_scalar:
            if named.import_statement:
                imports.add_statement(named.import_statement)
        else:
            imports.add_local(named)
        if returned.is_list:
            imports.add_typing("List")

        selection = None
        if named.category is TypeCategory.UNION:
            selection = SelectionSpec("UnionSelection")
            imports.add_runtime("UnionSelection")
        elif named.is_composite:
            projection = context.mapper.projection_class(named.graphql_name)
            selection = SelectionSpec(projection)
            imports.add_class("type", context.naming.module_name(projection), projection)
        if selection is not None:
            imports.add_typing("Callable", "Optional")
        if params or selection is not None:
            imports.add_runtime("check_required")

        return self.render(
            context,
            class_name,
            {
                "title": f"{capitalize(self.operation_type)} operation for the ``{field.name}`` field.",
                "future_annotations": True,
                "description": field.description,
                "operation_type": self.operation_type,
                "operation_name": operation_name,
                "field_name": field.name,
                "builder_name": builder_name,
                "params": params,
                "required": [p.attribute for p, arg in zip(params, field.arguments) if arg.is_required],
                "selection": selection,
                "document_head": document_head(self.operation_type, operation_name, field),
                "response_type": response_expression(returned),
                **imports.as_context(),
            },
            extra_exports=(builder_name,),
        )


class QueryGenerator(OperationGenerator):
    name = "query"
    group = "query"
    operation_type = "query"

    def root_type(self, schema: SchemaModel) -> TypeDefinition | None:
        return schema.query_type

    def class_name(self, context: GenerationContext, field_name: str) -> str:
        return context.naming.query_name(field_name)


class MutationGenerator(OperationGenerator):
    name = "mutation"
    group = "mutation"
    operation_type = "mutation"

    def root_type(self, schema: SchemaModel) -> TypeDefinition | None:
        return schema.mutation_type

    def class_name(self, context: GenerationContext, field_name: str) -> str:
        return context.naming.mutation_name(field_name)
