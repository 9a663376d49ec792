"""Projection generator: one field-selection builder per object and interface type.

Composite fields refer to the projection of the field's base type by name and
import it when the selector runs, so cyclic type graphs produce exactly one
projection per type.
"""

import logging
from dataclasses import dataclass

from ..ir import FieldDefinition, SchemaModel
from ..render import Artifact
from ..type_mapper import TypeCategory
from .base import BaseGenerator, GenerationContext, ImportSet, attribute_name, unique_name

logger = logging.getLogger(__name__)

RESERVED_SELECTOR_NAMES = frozenset({"typename", "selection", "to_graphql", "selected_fields", "nested"})


@dataclass(frozen=True)
class SelectorSpec:
    kind: str
    method: str
    field: str
    description: str | None = None
    projection: str | None = None
    module: str | None = None


class ProjectionGenerator(BaseGenerator):
    name = "projection"
    group = "type"
    template = "projection.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [
            self._generate_projection(context, t.name, t.fields, "type") for t in schema.data_types
        ]
        artifacts.extend(
            self._generate_projection(context, i.name, i.fields, "interface") for i in schema.interfaces.values()
        )
        logger.debug("Generated %d projections", len(artifacts))
        return artifacts

    def _generate_projection(
        self,
        context: GenerationContext,
        type_name: str,
        fields: tuple[FieldDefinition, ...],
        kind: str,
    ) -> Artifact:
        class_name = context.mapper.projection_class(type_name)
        imports = ImportSet(self.group, own_class=class_name)
        imports.add_runtime("Projection")

        selectors = []
        used: set[str] = set()
        for field in fields:
            named = context.mapper.resolve(field.type, f"{type_name}.{field.name}").named
            method = unique_name(attribute_name(field.name, RESERVED_SELECTOR_NAMES), used)
            if named.category is TypeCategory.UNION:
                imports.add_runtime("UnionSelection")
                imports.add_typing("Any", "Callable")
                selectors.append(SelectorSpec("union", method, field.name, field.description))
            elif named.is_composite:
                projection = context.mapper.projection_class(named.graphql_name)
                module = context.naming.module_name(projection)
                imports.add_typing("Any", "Callable")
                imports.add_class(self.group, module, projection, deferred=True)
                selectors.append(SelectorSpec("nested", method, field.name, field.description, projection, module))
            else:
                selectors.append(SelectorSpec("leaf", method, field.name, field.description))

        return self.render(
            context,
            class_name,
            {
                "title": f"Projection for the ``{type_name}`` GraphQL {kind}.",
                "future_annotations": True,
                "graphql_name": type_name,
                "kind": kind,
                "selectors": selectors,
                **imports.as_context(),
            },
        )
