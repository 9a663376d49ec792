"""Input-type generator: frozen pydantic models plus a builder per input object."""

import logging
from dataclasses import dataclass

from ..ir import InputTypeDefinition, SchemaModel
from ..render import Artifact
from .base import (
    BaseGenerator,
    GenerationContext,
    ImportSet,
    attribute_name,
    field_declaration,
    unique_name,
)
from .value_type import RESERVED_MODEL_NAMES

logger = logging.getLogger(__name__)

RESERVED_INPUT_NAMES = RESERVED_MODEL_NAMES | {"build", "builder", "REQUIRED_FIELDS"}


@dataclass(frozen=True)
class InputFieldSpec:
    attribute: str
    graphql_name: str
    declaration: str
    setter_annotation: str
    required: bool


class InputTypeGenerator(BaseGenerator):
    """Generates input types.

    A field is required when it is non-null and has no schema default. Such
    fields have no default on the model; everything else defaults to None
    and is left out of the wire form when unset.
    """

    name = "input-type"
    group = "input"
    template = "input_type.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [self._generate_input(context, t) for t in schema.input_types.values()]
        logger.debug("Generated %d input types", len(artifacts))
        return artifacts

    def _generate_input(self, context: GenerationContext, input_def: InputTypeDefinition) -> Artifact:
        class_name = context.naming.input_type_name(input_def.name)
        builder_name = f"{class_name}Builder"
        imports = ImportSet(self.group, own_class=class_name)
        imports.add_runtime("GraphQLInput", "check_required")
        imports.add_typing("Any", "Dict")

        fields = []
        used: set[str] = set()
        for input_field in input_def.input_fields:
            resolved = context.mapper.resolve(input_field.type, f"{input_def.name}.{input_field.name}")
            imports.add_resolved(resolved, defer=("input",))
            required = input_field.is_required
            if required or resolved.nullable:
                annotation = resolved.annotation
            else:
                # Non-null with a schema default: the server fills it in
                imports.add_typing("Optional")
                annotation = f"Optional[{resolved.bare_annotation}]"
            attribute = unique_name(attribute_name(input_field.name, RESERVED_INPUT_NAMES), used)
            declaration, needs_field = field_declaration(
                attribute,
                input_field.name,
                annotation,
                optional=not required,
                description=input_field.description,
            )
            if needs_field:
                imports.add("pydantic", "Field")
            fields.append(
                InputFieldSpec(
                    attribute=attribute,
                    graphql_name=input_field.name,
                    declaration=declaration,
                    setter_annotation=resolved.annotation,
                    required=required,
                )
            )

        return self.render(
            context,
            class_name,
            {
                "title": f"Input type for the ``{input_def.name}`` GraphQL input object.",
                "future_annotations": True,
                "graphql_name": input_def.name,
                "description": input_def.description,
                "builder_name": builder_name,
                "fields": fields,
                "required": [f.attribute for f in fields if f.required],
                **imports.as_context(),
            },
            extra_exports=(builder_name,),
            rebuild=True,
        )
