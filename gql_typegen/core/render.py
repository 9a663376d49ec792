"""Template rendering shared by all generators.

Every artifact is rendered from a Jinja2 template and checked with
``ast.parse`` before anything is written to disk.

Custom templates can be supplied through ``template_dir``:
    env = create_environment(template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined, select_autoescape

from .errors import CodegenError
from .naming import capitalize, snake_case

HEADER_NOTE = "Generated by gql-typegen. Do not edit."


def safe_docstring(text: str | None) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: str | None) -> str:
    """Make text safe for a single-line Python comment."""
    if not text:
        return ""
    text = re.sub(r"\s+", " ", text)
    if len(text) > 120:
        text = text[:117] + "..."
    return text.strip()


def indent_docstring(text: str | None, width: int = 4) -> str:
    """Escape a multi-line description and indent continuation lines."""
    text = safe_docstring(text)
    pad = " " * width
    return "\n".join(line if i == 0 or not line else pad + line for i, line in enumerate(text.splitlines()))


def create_environment(template_dir: str | Path | None = None) -> Environment:
    """Create the Jinja2 environment used by every generator."""
    loaders = []
    if template_dir:
        template_path = Path(template_dir)
        if template_path.is_dir():
            loaders.append(FileSystemLoader(str(template_path)))
    loaders.append(PackageLoader("gql_typegen", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["snake_case"] = snake_case
    env.filters["capitalize_first"] = capitalize
    env.filters["repr"] = repr
    env.filters["safe_docstring"] = safe_docstring
    env.filters["safe_comment"] = safe_comment
    env.filters["docstring"] = indent_docstring
    env.globals["header_note"] = HEADER_NOTE
    return env


@dataclass(frozen=True)
class Artifact:
    """One generated source file.

    Attributes:
        group: Output group (sub-package), e.g. "type" or "query"
        module: Module file stem, e.g. "user_dto"
        class_name: Primary class defined by the module
        content: Rendered Python source
        extra_exports: Further public names, e.g. a builder class
        rebuild: Whether the class is a pydantic model to rebuild on import
    """

    group: str
    module: str
    class_name: str
    content: str
    extra_exports: tuple[str, ...] = ()
    rebuild: bool = False

    @property
    def exports(self) -> tuple[str, ...]:
        """Names the group package re-exports from this module."""
        return (self.class_name, *self.extra_exports)

    @property
    def relative_path(self) -> PurePosixPath:
        """Path of the file below the package directory."""
        return PurePosixPath(self.group, f"{self.module}.py")

    def path_in(self, package_dir: Path) -> Path:
        return package_dir / self.group / f"{self.module}.py"


def validate_python(content: str, label: str) -> None:
    """Raise CodegenError if rendered content is not valid Python."""
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise CodegenError(f"Generated invalid Python for {label}: {e}") from e


def render_template(env: Environment, template_name: str, label: str, context: dict[str, Any]) -> str:
    """Render a template and validate the result."""
    template = env.get_template(template_name)
    content = template.render(context)
    validate_python(content, f"{label} (template: {template_name})")
    return content
