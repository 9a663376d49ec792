"""GraphQL schema parser.

Builds a :class:`SchemaModel` from an introspection result (JSON), or from an
SDL file converted to an introspection result with graphql-core.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable

from graphql import GraphQLError, build_schema, introspection_from_schema

from .errors import SchemaParseError
from .ir import (
    BUILT_IN_SCALARS,
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

logger = logging.getLogger(__name__)

SCHEMA_FIELD = "__schema"
DATA_FIELD = "data"
SDL_SUFFIXES = (".graphql", ".graphqls", ".gql")


class SchemaParser:
    """Parses introspection documents into a SchemaModel.

    Each type entry is classified by its ``kind`` tag through a dispatch
    table. Kinds missing from the table are skipped, so documents produced by
    newer servers still parse.
    """

    def __init__(self):
        self._classifiers: dict[str, tuple[str, Callable[[dict], Any]]] = {
            "OBJECT": ("types", self._process_object_type),
            "ENUM": ("enums", self._process_enum),
            "INPUT_OBJECT": ("input_types", self._process_input_type),
            "INTERFACE": ("interfaces", self._process_interface),
            "UNION": ("unions", self._process_union),
            "SCALAR": ("scalars", self._process_scalar),
        }

    def parse_file(self, path: str | Path) -> SchemaModel:
        """Parse a ``.json`` introspection file or an SDL file."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaParseError(f"Failed to read schema file {path}: {e}") from e
        return self.parse_source(content, path.name)

    def parse_source(self, text: str, filename: str) -> SchemaModel:
        """Parse schema text, picking SDL or JSON by the file name's suffix."""
        if Path(filename).suffix.lower() in SDL_SUFFIXES:
            return self.parse_sdl(text)
        return self.parse_json(text)

    def parse_json(self, text: str) -> SchemaModel:
        """Parse an introspection result given as JSON text."""
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaParseError(f"Failed to parse schema JSON: {e}") from e
        return self.parse(document)

    def parse_sdl(self, text: str) -> SchemaModel:
        """Parse a schema written in the GraphQL schema definition language."""
        try:
            schema = build_schema(text)
        except (GraphQLError, TypeError) as e:
            raise SchemaParseError(f"Failed to parse schema SDL: {e}") from e
        return self.parse(introspection_from_schema(schema))

    def parse(self, document: Any) -> SchemaModel:
        """Parse an already-decoded introspection document."""
        schema_node = self._locate_schema(document)
        if schema_node is None:
            raise SchemaParseError(f"Missing required field '{SCHEMA_FIELD}'", "introspection result")
        return self._parse_schema(schema_node)

    @staticmethod
    def _locate_schema(document: Any) -> dict | None:
        if not isinstance(document, dict):
            return None
        if isinstance(document.get(SCHEMA_FIELD), dict):
            return document[SCHEMA_FIELD]
        data = document.get(DATA_FIELD)
        if isinstance(data, dict) and isinstance(data.get(SCHEMA_FIELD), dict):
            return data[SCHEMA_FIELD]
        return None

    def _parse_schema(self, node: dict) -> SchemaModel:
        query_type_node = node.get("queryType")
        if not isinstance(query_type_node, dict):
            raise SchemaParseError("Missing required field 'queryType'", "schema")
        query_type_name = self._required_string(query_type_node, "name", "queryType")
        mutation_type_name = self._optional_root_name(node, "mutationType")
        subscription_type_name = self._optional_root_name(node, "subscriptionType")

        types_node = node.get("types")
        if not isinstance(types_node, list):
            raise SchemaParseError("Missing or invalid 'types' array", "schema")

        tables: dict[str, dict[str, Any]] = {table: {} for table, _ in self._classifiers.values()}
        for type_node in types_node:
            name = self._required_string(type_node, "name", "type")
            if self._is_skippable(name):
                continue
            kind = self._required_string(type_node, "kind", f"type '{name}'")
            classifier = self._classifiers.get(kind)
            if classifier is None:
                logger.debug("Skipping type %s with unrecognized kind %s", name, kind)
                continue
            table, process = classifier
            tables[table][name] = process(type_node)

        types = tables["types"]
        query_type = types.get(query_type_name)
        if query_type is None:
            raise SchemaParseError(f"Query type '{query_type_name}' not found in schema", "queryType")

        return SchemaModel(
            query_type=query_type,
            mutation_type=types.get(mutation_type_name) if mutation_type_name else None,
            subscription_type=types.get(subscription_type_name) if subscription_type_name else None,
            types=types,
            enums=tables["enums"],
            input_types=tables["input_types"],
            interfaces=tables["interfaces"],
            unions=tables["unions"],
            scalars=tables["scalars"],
        )

    @staticmethod
    def _is_skippable(name: str) -> bool:
        """Introspection types and built-in scalars never produce artifacts."""
        return name.startswith("__") or name in BUILT_IN_SCALARS

    def _optional_root_name(self, node: dict, field: str) -> str | None:
        root = node.get(field)
        if isinstance(root, dict):
            return self._optional_string(root, "name")
        return None

    def _process_object_type(self, node: dict) -> TypeDefinition:
        name = node["name"]
        return TypeDefinition(
            name=name,
            fields=self._process_fields(node.get("fields"), name),
            interfaces=self._names(node.get("interfaces")),
            description=self._optional_string(node, "description"),
        )

    def _process_interface(self, node: dict) -> InterfaceDefinition:
        name = node["name"]
        return InterfaceDefinition(
            name=name,
            fields=self._process_fields(node.get("fields"), name),
            interfaces=self._names(node.get("interfaces")),
            possible_types=self._names(node.get("possibleTypes")),
            description=self._optional_string(node, "description"),
        )

    def _process_input_type(self, node: dict) -> InputTypeDefinition:
        name = node["name"]
        return InputTypeDefinition(
            name=name,
            input_fields=self._process_arguments(node.get("inputFields"), name, "input field"),
            description=self._optional_string(node, "description"),
        )

    def _process_enum(self, node: dict) -> EnumDefinition:
        name = node["name"]
        values = tuple(
            EnumValueDefinition(
                name=self._required_string(value, "name", f"enum value in {name}"),
                description=self._optional_string(value, "description"),
                is_deprecated=bool(value.get("isDeprecated")),
                deprecation_reason=self._optional_string(value, "deprecationReason"),
            )
            for value in self._list(node.get("enumValues"))
        )
        return EnumDefinition(
            name=name,
            values=values,
            description=self._optional_string(node, "description"),
        )

    def _process_union(self, node: dict) -> UnionDefinition:
        return UnionDefinition(
            name=node["name"],
            members=self._names(node.get("possibleTypes")),
            description=self._optional_string(node, "description"),
        )

    def _process_scalar(self, node: dict) -> ScalarDefinition:
        return ScalarDefinition(
            name=node["name"],
            description=self._optional_string(node, "description"),
        )

    def _process_fields(self, field_nodes: Any, type_name: str) -> tuple[FieldDefinition, ...]:
        fields = []
        for node in self._list(field_nodes):
            name = self._required_string(node, "name", f"field in {type_name}")
            context = f"{type_name}.{name}"
            fields.append(
                FieldDefinition(
                    name=name,
                    type=self.parse_type_reference(node.get("type"), context),
                    description=self._optional_string(node, "description"),
                    arguments=self._process_arguments(node.get("args"), context, "argument"),
                    is_deprecated=bool(node.get("isDeprecated")),
                    deprecation_reason=self._optional_string(node, "deprecationReason"),
                )
            )
        return tuple(fields)

    def _process_arguments(self, arg_nodes: Any, context: str, label: str) -> tuple[ArgumentDefinition, ...]:
        args = []
        for node in self._list(arg_nodes):
            name = self._required_string(node, "name", f"{label} in {context}")
            args.append(
                ArgumentDefinition(
                    name=name,
                    type=self.parse_type_reference(node.get("type"), f"{context}.{name}"),
                    description=self._optional_string(node, "description"),
                    default_value=self._optional_string(node, "defaultValue"),
                )
            )
        return tuple(args)

    def parse_type_reference(self, node: Any, context: str) -> TypeReference:
        """Recursively parse a ``{kind, name, ofType}`` type reference."""
        if not isinstance(node, dict):
            raise SchemaParseError("Missing type reference", context)
        kind = node.get("kind")
        if kind is None:
            raise SchemaParseError("Missing 'kind' in type reference", context)

        if kind == "NON_NULL":
            inner = self.parse_type_reference(node.get("ofType"), context)
            if isinstance(inner, NonNull):
                raise SchemaParseError("NON_NULL cannot wrap another NON_NULL", context)
            return NonNull(inner)
        if kind == "LIST":
            return ListOf(self.parse_type_reference(node.get("ofType"), context))

        name = node.get("name")
        if name is None:
            raise SchemaParseError("Missing 'name' in named type reference", context)
        return Named(str(name))

    @staticmethod
    def _required_string(node: Any, field: str, context: str) -> str:
        value = node.get(field) if isinstance(node, dict) else None
        if value is None:
            raise SchemaParseError(f"Missing required field '{field}'", context)
        return str(value)

    @staticmethod
    def _optional_string(node: dict, field: str) -> str | None:
        value = node.get(field)
        return None if value is None else str(value)

    @staticmethod
    def _list(value: Any) -> list:
        return value if isinstance(value, list) else []

    def _names(self, nodes: Any) -> tuple[str, ...]:
        return tuple(
            node["name"] for node in self._list(nodes) if isinstance(node, dict) and node.get("name") is not None
        )
