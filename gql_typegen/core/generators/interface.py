"""Interface generator: one marker class per GraphQL interface."""

import logging

from ..ir import InterfaceDefinition, SchemaModel
from ..render import Artifact
from .base import BaseGenerator, GenerationContext, ImportSet

logger = logging.getLogger(__name__)


class InterfaceGenerator(BaseGenerator):
    name = "interface"
    group = "type"
    template = "interface.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [self._generate_interface(context, i) for i in schema.interfaces.values()]
        logger.debug("Generated %d interfaces", len(artifacts))
        return artifacts

    def _generate_interface(self, context: GenerationContext, interface_def: InterfaceDefinition) -> Artifact:
        imports = ImportSet(self.group).add_runtime("InterfaceMarker")
        permitted = [
            context.mapper.resolve_named(name, f"interface '{interface_def.name}'").python_type
            for name in interface_def.possible_types
        ]
        return self.render(
            context,
            context.naming.interface_name(interface_def.name),
            {
                "title": f"Marker for the ``{interface_def.name}`` GraphQL interface.",
                "future_annotations": False,
                "graphql_name": interface_def.name,
                "description": interface_def.description,
                "permitted": permitted,
                "fields": [field.name for field in interface_def.fields],
                **imports.as_context(),
            },
        )
