"""Shared contract and helpers for artifact generators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable

from jinja2 import Environment

from ..ir import SchemaModel
from ..naming import NamingConvention, safe_identifier, snake_case
from ..render import Artifact, render_template
from ..type_mapper import NamedDescriptor, ResolvedType, TypeMapper

RUNTIME_MODULE = "gql_typegen.core.runtime"


@dataclass(frozen=True)
class GenerationContext:
    """Read-only collaborators handed to every generator."""

    mapper: TypeMapper
    naming: NamingConvention
    env: Environment


class BaseGenerator(ABC):
    """A producer of one artifact family.

    Generators select their schema entries, build one artifact per entry and
    return the list. They keep no state between calls and never look at the
    output of other generators.
    """

    name: ClassVar[str]
    group: ClassVar[str]
    template: ClassVar[str]

    @abstractmethod
    def generate(self, schema: SchemaModel, context: GenerationContext) -> list[Artifact]:
        """Produce the artifacts for ``schema``."""

    def render(
        self,
        context: GenerationContext,
        class_name: str,
        values: dict[str, Any],
        extra_exports: tuple[str, ...] = (),
        rebuild: bool = False,
    ) -> Artifact:
        module = context.naming.module_name(class_name)
        content = render_template(
            context.env,
            self.template,
            f"{self.group}/{module}.py",
            {"class_name": class_name, **values},
        )
        return Artifact(
            group=self.group,
            module=module,
            class_name=class_name,
            content=content,
            extra_exports=extra_exports,
            rebuild=rebuild,
        )


def attribute_name(graphql_name: str, reserved: Iterable[str] = ()) -> str:
    """Python attribute name for a schema field or argument.

    Leading underscores are dropped since pydantic treats such names as
    private attributes.
    """
    name = snake_case(graphql_name).lstrip("_") or "field"
    return safe_identifier(name, frozenset(reserved))


def unique_name(name: str, used: set[str]) -> str:
    """Suffix ``name`` with ``_`` until it is not in ``used``, then claim it.

    Two schema names can collapse to one identifier (``fooBar`` and
    ``foo_bar``, or ``_A`` and ``A``); the later one gets the suffix.
    """
    while name in used:
        name += "_"
    used.add(name)
    return name


def relative_module(from_group: str, target_group: str, module: str) -> str:
    if from_group == target_group:
        return f".{module}"
    return f"..{target_group}.{module}"


class ImportSet:
    """Collects the imports of one generated module.

    ``from`` imports are merged per module and rendered sorted, so the same
    set of references always produces the same header.
    """

    def __init__(self, group: str, own_class: str | None = None):
        self.group = group
        self.own_class = own_class
        self._from: dict[str, set[str]] = {}
        self._local: dict[str, set[str]] = {}
        self._deferred: dict[str, set[str]] = {}

    def add(self, module: str, *names: str) -> "ImportSet":
        self._from.setdefault(module, set()).update(names)
        return self

    def add_statement(self, statement: str) -> "ImportSet":
        module, _, names = statement.removeprefix("from ").partition(" import ")
        return self.add(module, *(n.strip() for n in names.split(",")))

    def add_typing(self, *names: str) -> "ImportSet":
        return self.add("typing", *names)

    def add_runtime(self, *names: str) -> "ImportSet":
        return self.add(RUNTIME_MODULE, *names)

    def add_local(self, descriptor: NamedDescriptor, deferred: bool = False) -> "ImportSet":
        """Import a generated class; ``deferred`` puts it under TYPE_CHECKING."""
        return self.add_class(descriptor.group, descriptor.module, descriptor.python_type, deferred)

    def add_class(self, group: str, module: str, class_name: str, deferred: bool = False) -> "ImportSet":
        if class_name == self.own_class:
            return self
        target = self._deferred if deferred else self._local
        target.setdefault(relative_module(self.group, group, module), set()).add(class_name)
        return self

    def add_resolved(self, resolved: ResolvedType, defer: Iterable[str] = ()) -> "ImportSet":
        """Add everything an annotation of ``resolved`` needs.

        Generated classes whose category value is listed in ``defer`` are
        imported under TYPE_CHECKING.
        """
        if resolved.nullable:
            self.add_typing("Optional")
        if resolved.is_list:
            self.add_typing("List")
            self.add_resolved(resolved.descriptor.item, defer)
            return self
        named = resolved.named
        if named.is_scalar:
            if named.import_statement:
                self.add_statement(named.import_statement)
        else:
            self.add_local(named, deferred=named.category.value in set(defer))
        return self

    @property
    def has_deferred(self) -> bool:
        return bool(self._deferred)

    @staticmethod
    def _render(imports: dict[str, set[str]]) -> list[str]:
        return [f"from {module} import {', '.join(sorted(names))}" for module, names in sorted(imports.items())]

    def third_party(self) -> list[str]:
        """Absolute imports: standard library, typing and runtime support."""
        if self._deferred:
            self.add_typing("TYPE_CHECKING")
        std = {m: n for m, n in self._from.items() if m != RUNTIME_MODULE and m != "pydantic"}
        lines = self._render(std)
        extra = {m: n for m, n in self._from.items() if m in (RUNTIME_MODULE, "pydantic")}
        if extra:
            lines.append("")
            lines.extend(self._render(extra))
        return lines

    def local(self) -> list[str]:
        return self._render(self._local)

    def deferred(self) -> list[str]:
        return self._render(self._deferred)

    def as_context(self) -> dict[str, list[str]]:
        return {
            "imports": self.third_party(),
            "local_imports": self.local(),
            "deferred_imports": self.deferred(),
        }


def one_line(text: str | None) -> str | None:
    """Collapse a description into a single line, or None if blank."""
    if not text:
        return None
    return " ".join(text.split()) or None


def field_declaration(
    attribute: str,
    graphql_name: str,
    annotation: str,
    *,
    optional: bool,
    description: str | None = None,
    deprecated: bool = False,
    deprecation_reason: str | None = None,
) -> tuple[str, bool]:
    """Render a pydantic field line.

    Returns the declaration and whether it needs ``pydantic.Field``.
    """
    kwargs = []
    if attribute != graphql_name:
        kwargs.append(f"alias={graphql_name!r}")
    description = one_line(description)
    if description:
        kwargs.append(f"description={description!r}")
    if deprecated:
        kwargs.append(f"deprecated={deprecation_reason!r}" if deprecation_reason else "deprecated=True")
    if not kwargs:
        return f"{attribute}: {annotation}" + (" = None" if optional else ""), False
    if optional:
        kwargs.insert(0, "default=None")
    return f"{attribute}: {annotation} = Field({', '.join(kwargs)})", True
