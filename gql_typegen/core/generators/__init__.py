"""Artifact generators.

``DEFAULT_GENERATORS`` lists the generator classes in the order the
orchestrator runs them; the order fixes the order of the reported artifacts.
"""

from .base import BaseGenerator, GenerationContext, ImportSet
from .enum import EnumGenerator
from .input_type import InputTypeGenerator
from .interface import InterfaceGenerator
from .operation import MutationGenerator, OperationGenerator, QueryGenerator
from .projection import ProjectionGenerator
from .union import UnionGenerator
from .value_type import ValueTypeGenerator

DEFAULT_GENERATORS: tuple[type[BaseGenerator], ...] = (
    ValueTypeGenerator,
    InputTypeGenerator,
    EnumGenerator,
    QueryGenerator,
    MutationGenerator,
    ProjectionGenerator,
    UnionGenerator,
    InterfaceGenerator,
)


def default_generators() -> list[BaseGenerator]:
    return [generator() for generator in DEFAULT_GENERATORS]


__all__ = [
    "BaseGenerator",
    "GenerationContext",
    "ImportSet",
    "ValueTypeGenerator",
    "InputTypeGenerator",
    "EnumGenerator",
    "OperationGenerator",
    "QueryGenerator",
    "MutationGenerator",
    "ProjectionGenerator",
    "UnionGenerator",
    "InterfaceGenerator",
    "DEFAULT_GENERATORS",
    "default_generators",
]
