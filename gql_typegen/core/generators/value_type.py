"""Value-type generator: one pydantic model per non-root object type."""

import logging
from dataclasses import dataclass

from ..ir import SchemaModel, TypeDefinition
from ..render import Artifact
from .base import (
    BaseGenerator,
    GenerationContext,
    ImportSet,
    attribute_name,
    field_declaration,
    unique_name,
)

logger = logging.getLogger(__name__)

# BaseModel API that generated attributes must not shadow
RESERVED_MODEL_NAMES = frozenset({
    "model_config", "model_fields", "model_computed_fields", "model_extra",
    "model_fields_set", "model_construct", "model_copy", "model_dump",
    "model_dump_json", "model_json_schema", "model_parametrized_name",
    "model_post_init", "model_rebuild", "model_validate", "model_validate_json",
    "model_validate_strings", "copy", "dict", "json", "parse_obj", "parse_raw",
    "parse_file", "from_orm", "construct", "schema", "schema_json", "validate",
    "update_forward_refs", "to_variables", "permits",
})


@dataclass(frozen=True)
class FieldSpec:
    attribute: str
    graphql_name: str
    declaration: str


class ValueTypeGenerator(BaseGenerator):
    """Generates value types for object types.

    Each model subclasses ``GraphQLModel``, every interface marker the type
    declares and every union marker that lists it as a member.
    """

    name = "value-type"
    group = "type"
    template = "value_type.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [self._generate_type(schema, context, t) for t in schema.data_types]
        logger.debug("Generated %d value types", len(artifacts))
        return artifacts

    def _generate_type(self, schema: SchemaModel, context: GenerationContext, type_def: TypeDefinition) -> Artifact:
        class_name = context.naming.type_name(type_def.name)
        imports = ImportSet(self.group, own_class=class_name)
        imports.add_runtime("GraphQLModel")

        bases = ["GraphQLModel"]
        for marker_name in (*type_def.interfaces, *schema.unions_containing(type_def.name)):
            marker = context.mapper.resolve_named(marker_name, f"type '{type_def.name}'")
            imports.add_local(marker)
            if marker.python_type not in bases:
                bases.append(marker.python_type)

        fields = []
        used: set[str] = set()
        for field in type_def.fields:
            resolved = context.mapper.resolve(field.type, f"{type_def.name}.{field.name}")
            imports.add_resolved(resolved, defer=("object",))
            attribute = unique_name(attribute_name(field.name, RESERVED_MODEL_NAMES), used)
            declaration, needs_field = field_declaration(
                attribute,
                field.name,
                resolved.annotation,
                optional=resolved.nullable,
                description=field.description,
                deprecated=field.is_deprecated,
                deprecation_reason=field.deprecation_reason,
            )
            if needs_field:
                imports.add("pydantic", "Field")
            fields.append(FieldSpec(attribute, field.name, declaration))

        return self.render(
            context,
            class_name,
            {
                "title": f"Value type for the ``{type_def.name}`` GraphQL type.",
                "future_annotations": True,
                "graphql_name": type_def.name,
                "description": type_def.description,
                "bases": bases,
                "fields": fields,
                **imports.as_context(),
            },
            rebuild=True,
        )
