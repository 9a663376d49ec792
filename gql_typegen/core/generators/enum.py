"""Enum generator: one ``str`` enum per GraphQL enum type."""

import logging
from dataclasses import dataclass

from ..ir import EnumDefinition, SchemaModel
from ..naming import safe_identifier
from ..render import Artifact
from .base import BaseGenerator, GenerationContext, ImportSet, one_line, unique_name

logger = logging.getLogger(__name__)

RESERVED_MEMBER_NAMES = frozenset({
    "name", "value", "from_value", "to_value", "is_deprecated", "deprecation_reason", "mro",
})


@dataclass(frozen=True)
class EnumMemberSpec:
    member: str
    wire: str
    deprecated: bool
    reason: str | None
    comment: str | None


def member_name(wire_value: str) -> str:
    """Enum member name for a wire value; names beginning with '_' are not members."""
    return safe_identifier(wire_value.lstrip("_") or "VALUE", RESERVED_MEMBER_NAMES)


class EnumGenerator(BaseGenerator):
    name = "enum"
    group = "enumeration"
    template = "enum.py.j2"

    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        artifacts = [self._generate_enum(context, e) for e in schema.enums.values()]
        logger.debug("Generated %d enums", len(artifacts))
        return artifacts

    def _generate_enum(self, context: GenerationContext, enum_def: EnumDefinition) -> Artifact:
        imports = ImportSet(self.group)
        imports.add("enum", "Enum")
        imports.add_typing("Dict", "Optional")

        values = []
        used: set[str] = set()
        for value in enum_def.values:
            comment = one_line(value.description)
            if value.is_deprecated:
                note = f"Deprecated: {one_line(value.deprecation_reason)}" if value.deprecation_reason else "Deprecated"
                comment = f"{comment} ({note})" if comment else note
            values.append(
                EnumMemberSpec(
                    member=unique_name(member_name(value.name), used),
                    wire=value.name,
                    deprecated=value.is_deprecated,
                    reason=value.deprecation_reason,
                    comment=comment,
                )
            )

        return self.render(
            context,
            context.naming.enum_name(enum_def.name),
            {
                "title": f"Enum for the ``{enum_def.name}`` GraphQL enum.",
                "future_annotations": False,
                "graphql_name": enum_def.name,
                "description": enum_def.description,
                "values": values,
                **imports.as_context(),
            },
        )
