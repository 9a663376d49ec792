"""Tests for the schema parser."""

import json

import pytest

from builders import (
    arg,
    enum_type,
    field,
    input_type,
    list_of,
    named,
    non_null,
    object_type,
    schema_document,
    union_type,
    user_schema_document,
)
from gql_typegen.core.errors import SchemaParseError
from gql_typegen.core.ir import ListOf, Named, NonNull
from gql_typegen.core.parser import SchemaParser


@pytest.fixture
def parser():
    return SchemaParser()


class TestLocateSchema:
    """Tests for finding the schema section."""

    def test_top_level_schema(self, parser):
        schema = parser.parse(user_schema_document())
        assert schema.query_type.name == "Query"

    def test_schema_under_data(self, parser):
        document = user_schema_document()
        schema = parser.parse({"data": document})
        assert "User" in schema.types

    def test_missing_schema(self, parser):
        with pytest.raises(SchemaParseError, match="Missing required field '__schema'"):
            parser.parse({"data": {}})

    def test_not_an_object(self, parser):
        with pytest.raises(SchemaParseError):
            parser.parse([])


class TestClassification:
    """Tests for sorting type entries into lookup tables."""

    @pytest.fixture
    def schema(self, parser):
        document = schema_document(
            [
                object_type("Query", [field("ping", named("String"))]),
                object_type("User", [field("id", non_null(named("ID")))]),
                enum_type("Role", ["ADMIN", "USER"]),
                input_type("UserFilter", [arg("name", named("String"))]),
                union_type("Result", ["User"]),
                {"kind": "SCALAR", "name": "DateTime"},
                {"kind": "SCALAR", "name": "String"},
                {"kind": "OBJECT", "name": "__Type", "fields": []},
                {"kind": "FUTURE_KIND", "name": "Mystery"},
            ]
        )
        return parser.parse(document)

    def test_each_kind_lands_in_its_table(self, schema):
        assert list(schema.types) == ["Query", "User"]
        assert list(schema.enums) == ["Role"]
        assert list(schema.input_types) == ["UserFilter"]
        assert list(schema.unions) == ["Result"]
        assert list(schema.scalars) == ["DateTime"]

    def test_introspection_types_and_built_in_scalars_skipped(self, schema):
        assert "__Type" not in schema.types
        assert "String" not in schema.scalars

    def test_unknown_kind_skipped(self, schema):
        tables = [schema.types, schema.enums, schema.input_types, schema.interfaces, schema.unions, schema.scalars]
        assert all("Mystery" not in table for table in tables)

    def test_unknown_kind_logged(self, parser, caplog):
        document = schema_document(
            [object_type("Query", [field("ping", named("String"))]), {"kind": "FUTURE_KIND", "name": "Mystery"}]
        )
        with caplog.at_level("DEBUG", logger="gql_typegen.core.parser"):
            parser.parse(document)
        assert "Mystery" in caplog.text

    def test_union_members(self, schema):
        assert schema.unions["Result"].members == ("User",)

    def test_mutation_root_absent(self, schema):
        assert schema.mutation_type is None


class TestTypeReferences:
    """Tests for parsing wrapped type references."""

    def test_nested_wrappers(self, parser):
        ref = parser.parse_type_reference(non_null(list_of(non_null(named("String")))), "ctx")
        assert ref == NonNull(ListOf(NonNull(Named("String"))))

    def test_double_non_null_rejected(self, parser):
        with pytest.raises(SchemaParseError, match="NON_NULL"):
            parser.parse_type_reference(non_null(non_null(named("String"))), "User.name")

    def test_missing_kind(self, parser):
        with pytest.raises(SchemaParseError, match="Missing 'kind' in type reference at User.name"):
            parser.parse_type_reference({"name": "String"}, "User.name")

    def test_missing_name(self, parser):
        with pytest.raises(SchemaParseError, match="Missing 'name' in named type reference"):
            parser.parse_type_reference({"kind": "SCALAR"}, "User.name")

    def test_missing_reference(self, parser):
        with pytest.raises(SchemaParseError, match="Missing type reference"):
            parser.parse_type_reference(None, "User.name")


class TestRequiredFields:
    """Tests for structural validation with context locations."""

    def test_missing_query_type(self, parser):
        document = user_schema_document()
        del document["__schema"]["queryType"]
        with pytest.raises(SchemaParseError, match="queryType"):
            parser.parse(document)

    def test_query_type_not_in_document(self, parser):
        document = schema_document([object_type("User", [])], query="Query")
        with pytest.raises(SchemaParseError, match="Query type 'Query' not found"):
            parser.parse(document)

    def test_missing_types_array(self, parser):
        document = user_schema_document()
        document["__schema"]["types"] = None
        with pytest.raises(SchemaParseError, match="'types'"):
            parser.parse(document)

    def test_missing_type_kind(self, parser):
        document = user_schema_document()
        document["__schema"]["types"].append({"name": "Broken"})
        with pytest.raises(SchemaParseError, match="Missing required field 'kind' at type 'Broken'"):
            parser.parse(document)

    def test_missing_field_name_reports_type(self, parser):
        document = schema_document(
            [object_type("Query", [{"type": named("String"), "args": []}])]
        )
        with pytest.raises(SchemaParseError) as exc_info:
            parser.parse(document)
        assert exc_info.value.location == "field in Query"

    def test_bad_field_type_reports_field(self, parser):
        document = schema_document([object_type("Query", [field("ping", {"name": "String"})])])
        with pytest.raises(SchemaParseError) as exc_info:
            parser.parse(document)
        assert exc_info.value.location == "Query.ping"


class TestFieldDetails:
    """Tests for arguments, defaults and deprecation."""

    def test_arguments_and_defaults(self, parser):
        document = schema_document(
            [
                object_type(
                    "Query",
                    [
                        field(
                            "users",
                            list_of(named("User", "OBJECT")),
                            args=[arg("limit", named("Int"), default="10"), arg("id", non_null(named("ID")))],
                        )
                    ],
                ),
                object_type("User", []),
            ]
        )
        schema = parser.parse(document)
        limit, id_arg = schema.query_type.fields[0].arguments
        assert limit.default_value == "10"
        assert not limit.is_required
        assert id_arg.is_required

    def test_deprecation(self, parser):
        document = schema_document(
            [object_type("Query", [field("old", named("String"), deprecated=True, reason="Use new")])]
        )
        old = parser.parse(document).query_type.fields[0]
        assert old.is_deprecated
        assert old.deprecation_reason == "Use new"


class TestSources:
    """Tests for JSON and SDL input."""

    def test_parse_json(self, parser):
        schema = parser.parse_json(json.dumps(user_schema_document()))
        assert [f.name for f in schema.types["User"].fields] == ["id", "name", "email"]

    def test_invalid_json(self, parser):
        with pytest.raises(SchemaParseError, match="Failed to parse schema JSON"):
            parser.parse_json("{not json")

    def test_parse_sdl(self, parser, sample_schema):
        assert sample_schema.query_type.name == "Query"
        assert sample_schema.mutation_type.name == "Mutation"
        assert set(sample_schema.interfaces["Node"].possible_types) == {"User", "Post"}
        assert sample_schema.types["User"].interfaces == ("Node",)
        assert set(sample_schema.scalars) == {"DateTime", "Money"}

    def test_sdl_enum_deprecation(self, sample_schema):
        guest = sample_schema.enums["Role"].values[-1]
        assert guest.is_deprecated
        assert guest.deprecation_reason == "Use USER"

    def test_invalid_sdl(self, parser):
        with pytest.raises(SchemaParseError, match="Failed to parse schema SDL"):
            parser.parse_sdl("type Query {")

    def test_parse_file_by_suffix(self, parser, tmp_path):
        json_file = tmp_path / "schema.json"
        json_file.write_text(json.dumps(user_schema_document()))
        sdl_file = tmp_path / "schema.graphql"
        sdl_file.write_text("type Query { ping: String }")

        assert "User" in parser.parse_file(json_file).types
        assert parser.parse_file(sdl_file).query_type.fields[0].name == "ping"

    def test_parse_missing_file(self, parser, tmp_path):
        with pytest.raises(SchemaParseError, match="Failed to read schema file"):
            parser.parse_file(tmp_path / "missing.json")
