"""Generation run orchestration.

Validates the configuration, parses the schema, runs every generator and
writes the artifacts:

    result = CodeGenerator(config).generate()
    result.status           # CodegenStatus.SUCCESS or CodegenStatus.SKIPPED
    result.files_generated  # number of artifacts written

A run is all-or-nothing. Every artifact is rendered and validated before the
first file is written, and the schema fingerprint is stored only after all
writes succeeded.
"""

import hashlib
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterable

from .config import CodegenConfiguration
from .errors import CodegenIOError, ConfigurationError, SchemaParseError
from .generators import BaseGenerator, GenerationContext, default_generators
from .ir import SchemaModel
from .parser import SchemaParser
from .render import Artifact, create_environment, render_template
from .scalars import ScalarRegistry
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)

HASH_FILE = ".gql-typegen-hash"

# Output groups in the order their packages are listed
GROUP_TITLES = {
    "type": "Value types, interfaces and projections.",
    "input": "Input types and their builders.",
    "enumeration": "Enums.",
    "query": "Query operations.",
    "mutation": "Mutation operations.",
    "union": "Union markers.",
}


class CodegenStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CodegenResult:
    """Outcome of a generation run."""

    status: CodegenStatus
    files_generated: int = 0
    artifacts: tuple[Artifact, ...] = ()

    @classmethod
    def success(cls, artifacts: Iterable[Artifact]) -> "CodegenResult":
        artifacts = tuple(artifacts)
        return cls(CodegenStatus.SUCCESS, len(artifacts), artifacts)

    @classmethod
    def skipped(cls) -> "CodegenResult":
        return cls(CodegenStatus.SKIPPED)

    @property
    def was_skipped(self) -> bool:
        return self.status is CodegenStatus.SKIPPED


def fingerprint(content: bytes) -> str:
    """SHA-256 hex digest of the schema source."""
    return hashlib.sha256(content).hexdigest()


class CodeGenerator:
    """Runs the generators for one configuration.

    Custom templates can override the built-in ones via ``template_dir``;
    ``generators`` replaces the default generator list.
    """

    def __init__(
        self,
        configuration: CodegenConfiguration,
        generators: list[BaseGenerator] | None = None,
        template_dir: str | Path | None = None,
    ):
        self.configuration = configuration
        self.generators = generators if generators is not None else default_generators()
        self.env = create_environment(template_dir)
        self.parser = SchemaParser()

    @property
    def hash_file(self) -> Path:
        return self.configuration.output_directory / HASH_FILE

    def generate(self) -> CodegenResult:
        """Run generation, or skip it when the schema is unchanged."""
        self.validate()
        config = self.configuration
        logger.info("Generating %s from %s", config.package_name, config.schema_file)

        source = self._read_bytes(config.schema_file)
        digest = fingerprint(source)
        if config.skip_if_up_to_date and self.stored_fingerprint() == digest:
            logger.info("Schema unchanged since last run, skipping generation")
            return CodegenResult.skipped()

        self._ensure_directory(config.output_directory)
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaParseError(f"Schema file is not valid UTF-8: {e}", str(config.schema_file)) from e
        schema = self.parser.parse_source(text, config.schema_file.name)

        artifacts = self.render(schema)
        files = self.package_files(artifacts)
        package_dir = config.package_directory
        self._ensure_parent_packages()
        for relative_path, content in files.items():
            self._write(package_dir.joinpath(*relative_path.parts), content)
        self._write(self.hash_file, digest)

        logger.info("Generated %d artifacts in %s", len(artifacts), package_dir)
        return CodegenResult.success(artifacts)

    def validate(self):
        """Check the schema source before any other I/O."""
        schema_file = self.configuration.schema_file
        if not schema_file.exists():
            raise ConfigurationError(f"Schema file does not exist: {schema_file}")
        if not schema_file.is_file():
            raise ConfigurationError(f"Schema path is not a file: {schema_file}")
        if not os.access(schema_file, os.R_OK):
            raise ConfigurationError(f"Schema file is not readable: {schema_file}")
        output = self.configuration.output_directory
        if output.exists() and not output.is_dir():
            raise ConfigurationError(f"Output path is not a directory: {output}")

    def stored_fingerprint(self) -> str | None:
        try:
            return self.hash_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CodegenIOError("Failed to read fingerprint", self.hash_file, e) from e

    def context(self, schema: SchemaModel) -> GenerationContext:
        config = self.configuration
        return GenerationContext(
            mapper=TypeMapper(schema, config.naming, ScalarRegistry(config.custom_scalars)),
            naming=config.naming,
            env=self.env,
        )

    def render(self, schema: SchemaModel) -> list[Artifact]:
        """Run every generator against ``schema`` without touching the disk."""
        context = self.context(schema)
        artifacts: list[Artifact] = []
        for generator in self.generators:
            produced = generator.generate(schema, context)
            logger.debug("%s generator produced %d artifacts", generator.name, len(produced))
            artifacts.extend(produced)
        return artifacts

    def package_files(self, artifacts: list[Artifact]) -> dict[PurePosixPath, str]:
        """Map paths below the package directory to file content.

        Besides the artifacts this includes the package ``__init__.py`` and
        one ``__init__.py`` per output group re-exporting its classes.
        """
        by_group: dict[str, list[Artifact]] = {}
        for artifact in artifacts:
            by_group.setdefault(artifact.group, []).append(artifact)
        groups = [g for g in GROUP_TITLES if g in by_group] + sorted(set(by_group) - set(GROUP_TITLES))

        files: dict[PurePosixPath, str] = {
            PurePosixPath("__init__.py"): render_template(
                self.env,
                "package_init.py.j2",
                "__init__.py",
                {"package_name": self.configuration.package_name, "groups": groups},
            )
        }
        for group in groups:
            members = by_group[group]
            files[PurePosixPath(group, "__init__.py")] = render_template(
                self.env,
                "group_init.py.j2",
                f"{group}/__init__.py",
                {
                    "title": GROUP_TITLES.get(group, f"Generated {group} classes."),
                    "artifacts": members,
                    "models": [a.class_name for a in members if a.rebuild],
                },
            )
            for artifact in members:
                if artifact.relative_path in files:
                    logger.warning(
                        "%s overwrites an earlier artifact at %s", artifact.class_name, artifact.relative_path
                    )
                files[artifact.relative_path] = artifact.content
        return files

    def _ensure_parent_packages(self):
        """Create missing ``__init__.py`` files between the output root and the package."""
        current = self.configuration.output_directory
        for part in self.configuration.package_name.split(".")[:-1]:
            current = current / part
            self._ensure_directory(current)
            init = current / "__init__.py"
            if not init.exists():
                self._write(init, "")

    @staticmethod
    def _read_bytes(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise CodegenIOError("Failed to read schema file", path, e) from e

    @staticmethod
    def _ensure_directory(path: Path):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CodegenIOError("Failed to create directory", path, e) from e

    @staticmethod
    def _write(path: Path, content: str):
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8", newline="\n")
        except OSError as e:
            raise CodegenIOError("Failed to write file", path, e) from e
