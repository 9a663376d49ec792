"""Typed Python client code generation for GraphQL schemas."""

from .core import CodeGenerator, CodegenConfiguration, CodegenResult, CodegenStatus, load_configuration

__version__ = "0.1.0"

__all__ = [
    "CodeGenerator",
    "CodegenConfiguration",
    "CodegenResult",
    "CodegenStatus",
    "load_configuration",
    "__version__",
]
