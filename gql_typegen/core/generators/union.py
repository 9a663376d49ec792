"""Union generator: one closed-membership marker per GraphQL union."""

import logging

from ..ir import SchemaModel, UnionDefinition
from ..render import Artifact
from .base import BaseGenerator, GenerationContext, ImportSet

logger = logging.getLogger(__name__)


class UnionGenerator(BaseGenerator):
    """Generates union markers.

    The permitted set is exactly the union's declared members, each named by
    its value type. Value types subclass the markers of the unions that list
    them.
    """

    name = "union"
    group = "union"
    template = "union.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [self._generate_union(context, u) for u in schema.unions.values()]
        logger.debug("Generated %d unions", len(artifacts))
        return artifacts

    def _generate_union(self, context: GenerationContext, union_def: UnionDefinition) -> Artifact:
        imports = ImportSet(self.group).add_runtime("UnionMarker")
        permitted = [
            context.mapper.resolve_named(member, f"union '{union_def.name}'").python_type
            for member in union_def.members
        ]
        return self.render(
            context,
            context.naming.union_name(union_def.name),
            {
                "title": f"Marker for the ``{union_def.name}`` GraphQL union.",
                "future_annotations": False,
                "graphql_name": union_def.name,
                "description": union_def.description,
                "permitted": permitted,
                **imports.as_context(),
            },
        )
