"""Tests for the generation run orchestrator."""

import json
import logging
from pathlib import PurePosixPath

import pytest

from builders import user_schema_document
from gql_typegen.core.config import CodegenConfiguration
from gql_typegen.core.errors import (
    CodegenIOError,
    ConfigurationError,
    RootTypeReferenceError,
    SchemaParseError,
    UnresolvedTypeError,
)
from gql_typegen.core.generator import HASH_FILE, CodeGenerator, CodegenStatus, fingerprint
from gql_typegen.core.generators import ValueTypeGenerator


def make_config(schema_file, output, **values):
    return CodegenConfiguration.create(
        schema_file=schema_file,
        output_directory=output,
        package_name=values.pop("package_name", "example.graphql"),
        **values,
    )


@pytest.fixture
def output(tmp_path):
    return tmp_path / "src"


@pytest.fixture
def config(schema_file, output):
    return make_config(schema_file, output)


class TestGenerate:
    """Tests for a full run against the sample schema."""

    def test_success(self, config):
        result = CodeGenerator(config).generate()
        assert result.status is CodegenStatus.SUCCESS
        assert result.files_generated == len(result.artifacts)
        assert result.files_generated > 0

    def test_artifact_count(self, config):
        result = CodeGenerator(config).generate()
        # 2 value types, 2 inputs, 1 enum, 5 queries, 2 mutations,
        # 3 projections, 1 union, 1 interface
        assert result.files_generated == 17

    def test_files_written_under_package(self, config, output):
        CodeGenerator(config).generate()
        package = output / "example" / "graphql"
        assert (package / "__init__.py").is_file()
        assert (package / "type" / "user_dto.py").is_file()
        assert (package / "type" / "user_projection.py").is_file()
        assert (package / "type" / "node.py").is_file()
        assert (package / "input" / "create_user_input.py").is_file()
        assert (package / "enumeration" / "role.py").is_file()
        assert (package / "query" / "user_query.py").is_file()
        assert (package / "mutation" / "create_user_mutation.py").is_file()
        assert (package / "union" / "search_result.py").is_file()

    def test_parent_packages_created(self, config, output):
        CodeGenerator(config).generate()
        assert (output / "example" / "__init__.py").read_text() == ""

    def test_existing_parent_package_kept(self, config, output):
        (output / "example").mkdir(parents=True)
        (output / "example" / "__init__.py").write_text("VERSION = 1\n")
        CodeGenerator(config).generate()
        assert (output / "example" / "__init__.py").read_text() == "VERSION = 1\n"

    def test_fingerprint_written(self, config, output, schema_file):
        CodeGenerator(config).generate()
        assert (output / HASH_FILE).read_text() == fingerprint(schema_file.read_bytes())

    def test_group_init_reexports(self, config, output):
        CodeGenerator(config).generate()
        content = (output / "example" / "graphql" / "input" / "__init__.py").read_text()
        assert "from .create_user_input import CreateUserInput, CreateUserInputBuilder" in content
        assert "_MODELS = (CreateUserInput, PostFilterInput, )" in content
        assert "    'CreateUserInputBuilder'," in content

    def test_package_init_lists_groups(self, config, output):
        CodeGenerator(config).generate()
        content = (output / "example" / "graphql" / "__init__.py").read_text()
        assert "``example.graphql``" in content
        assert "    mutation\n" in content

    def test_json_schema(self, tmp_path, output):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text(json.dumps(user_schema_document()))
        result = CodeGenerator(make_config(schema_file, output)).generate()
        assert [a.class_name for a in result.artifacts] == ["UserDTO", "UserQuery", "UserProjection"]

    def test_logs_progress(self, config, caplog):
        with caplog.at_level(logging.INFO, logger="gql_typegen.core.generator"):
            CodeGenerator(config).generate()
        assert "Generated 17 artifacts" in caplog.text

    def test_colliding_artifacts_logged(self, tmp_path, output, caplog):
        schema_file = tmp_path / "schema.graphql"
        schema_file.write_text("type Query { u: User }\ntype User { id: ID }\ninterface UserDTO { id: ID }")
        with caplog.at_level(logging.WARNING, logger="gql_typegen.core.generator"):
            CodeGenerator(make_config(schema_file, output)).generate()
        assert "UserDTO overwrites an earlier artifact at type/user_dto.py" in caplog.text
        content = (output / "example" / "graphql" / "type" / "user_dto.py").read_text()
        assert "class UserDTO(InterfaceMarker):" in content


class TestDeterminism:
    """Identical input produces byte-identical output."""

    def test_two_runs_identical(self, schema_file, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        CodeGenerator(make_config(schema_file, first)).generate()
        CodeGenerator(make_config(schema_file, second)).generate()

        first_files = sorted(p.relative_to(first) for p in first.rglob("*") if p.is_file())
        second_files = sorted(p.relative_to(second) for p in second.rglob("*") if p.is_file())
        assert first_files == second_files
        for relative in first_files:
            assert (first / relative).read_bytes() == (second / relative).read_bytes()

    def test_package_files_order(self, config, sample_schema):
        generator = CodeGenerator(config)
        files = generator.package_files(generator.render(sample_schema))
        groups = [path.parts[0] for path in files if path.name == "__init__.py" and len(path.parts) == 2]
        assert groups == ["type", "input", "enumeration", "query", "mutation", "union"]
        assert PurePosixPath("__init__.py") in files


class TestSkip:
    """Tests for fingerprint-based skipping."""

    def test_second_run_skipped(self, config):
        CodeGenerator(config).generate()
        result = CodeGenerator(config).generate()
        assert result.was_skipped
        assert result.files_generated == 0

    def test_skip_leaves_files_alone(self, config, output):
        CodeGenerator(config).generate()
        user_file = output / "example" / "graphql" / "type" / "user_dto.py"
        user_file.write_text("# edited\n")
        CodeGenerator(config).generate()
        assert user_file.read_text() == "# edited\n"

    def test_changed_schema_regenerates(self, config, schema_file):
        CodeGenerator(config).generate()
        schema_file.write_text(schema_file.read_text() + "\nscalar Extra\n")
        assert CodeGenerator(config).generate().status is CodegenStatus.SUCCESS

    def test_force(self, schema_file, output):
        CodeGenerator(make_config(schema_file, output)).generate()
        forced = make_config(schema_file, output, skip_if_up_to_date=False)
        assert CodeGenerator(forced).generate().status is CodegenStatus.SUCCESS

    def test_stored_fingerprint(self, config):
        generator = CodeGenerator(config)
        assert generator.stored_fingerprint() is None
        generator.generate()
        assert generator.stored_fingerprint() == fingerprint(config.schema_file.read_bytes())


class TestFailures:
    """Failed runs leave the output untouched."""

    def test_missing_schema_file(self, tmp_path, output):
        config = make_config(tmp_path / "missing.graphql", output)
        with pytest.raises(ConfigurationError, match="does not exist"):
            CodeGenerator(config).generate()
        assert not output.exists()

    def test_schema_path_is_directory(self, tmp_path, output):
        with pytest.raises(ConfigurationError, match="not a file"):
            CodeGenerator(make_config(tmp_path, output)).generate()

    def test_output_is_a_file(self, schema_file, tmp_path):
        output = tmp_path / "taken"
        output.write_text("")
        with pytest.raises(ConfigurationError, match="not a directory"):
            CodeGenerator(make_config(schema_file, output)).generate()

    def test_parse_error_writes_nothing(self, tmp_path, output):
        schema_file = tmp_path / "schema.graphql"
        schema_file.write_text("type Query {")
        with pytest.raises(SchemaParseError):
            CodeGenerator(make_config(schema_file, output)).generate()
        assert not (output / "example").exists()
        assert not (output / HASH_FILE).exists()

    def test_invalid_utf8(self, tmp_path, output):
        schema_file = tmp_path / "schema.graphql"
        schema_file.write_bytes(b"\xff\xfe type Query")
        with pytest.raises(SchemaParseError, match="UTF-8"):
            CodeGenerator(make_config(schema_file, output)).generate()

    def test_unresolved_type_writes_nothing(self, tmp_path, output):
        document = user_schema_document()
        document["__schema"]["types"][1]["fields"].append(
            {"name": "ghost", "args": [], "type": {"kind": "OBJECT", "name": "Ghost", "ofType": None}}
        )
        schema_file = tmp_path / "schema.json"
        schema_file.write_text(json.dumps(document))
        with pytest.raises(UnresolvedTypeError, match="User.ghost"):
            CodeGenerator(make_config(schema_file, output)).generate()
        assert not (output / HASH_FILE).exists()

    @pytest.mark.parametrize(
        "sdl, context",
        [
            ("type Query { viewer: User relay: Query! }\ntype User { id: ID! }", "Query.relay"),
            (
                "type Query { ping: String }\ntype Mutation { touch: Payload }\n"
                "type Payload { ok: Boolean query: Query }",
                "Payload.query",
            ),
        ],
    )
    def test_root_type_reference_writes_nothing(self, tmp_path, output, sdl, context):
        schema_file = tmp_path / "schema.graphql"
        schema_file.write_text(sdl)
        with pytest.raises(RootTypeReferenceError, match=context):
            CodeGenerator(make_config(schema_file, output)).generate()
        assert not (output / "example").exists()
        assert not (output / HASH_FILE).exists()

    def test_write_failure(self, config, monkeypatch):
        def fail(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr("pathlib.Path.write_text", fail)
        with pytest.raises(CodegenIOError, match="Failed to write file") as exc_info:
            CodeGenerator(config).generate()
        assert isinstance(exc_info.value.cause, PermissionError)


class TestCustomisation:
    """Tests for custom generator lists and templates."""

    def test_generator_subset(self, config):
        result = CodeGenerator(config, generators=[ValueTypeGenerator()]).generate()
        assert {a.group for a in result.artifacts} == {"type"}
        assert result.files_generated == 2

    def test_template_override(self, config, output, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "package_init.py.j2").write_text('"""Custom package for {{ package_name }}."""\n')
        CodeGenerator(config, template_dir=templates).generate()
        content = (output / "example" / "graphql" / "__init__.py").read_text()
        assert content == '"""Custom package for example.graphql."""\n'

    def test_custom_scalars(self, schema_file, output):
        config = make_config(schema_file, output, custom_scalars={"Money": "decimal.Decimal"})
        CodeGenerator(config).generate()
        content = (output / "example" / "graphql" / "type" / "post_dto.py").read_text()
        assert "price: Optional[Decimal] = None" in content
