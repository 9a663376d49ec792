"""Exceptions raised by gql-typegen.

Every error raised during a generation run derives from :class:`CodegenError`,
so callers can catch the whole family with one except clause:

    try:
        CodeGenerator(config).generate()
    except CodegenError as e:
        print(f"Generation failed: {e}")
"""


class CodegenError(Exception):
    """Base exception for all code generation errors."""

    def __init__(self, message: str, *args):
        self.message = message
        super().__init__(message, *args)


class ConfigurationError(CodegenError):
    """A required configuration value is missing or invalid."""


class SchemaParseError(CodegenError):
    """The schema document is malformed or misses a required field.

    Attributes:
        location: Human-readable path to the offending element,
            e.g. ``"User.posts"`` or ``"field in User"``.
    """

    def __init__(self, message: str, location: str | None = None):
        self.location = location
        if location:
            message = f"{message} at {location}"
        super().__init__(message)


class UnresolvedTypeError(CodegenError):
    """A referenced type name is not defined anywhere in the schema."""

    def __init__(self, type_name: str, context: str | None = None):
        self.type_name = type_name
        self.context = context
        super().__init__(self.describe(type_name, context))

    @staticmethod
    def describe(type_name: str, context: str | None) -> str:
        message = f"Unknown type '{type_name}'"
        if context:
            message += f" referenced by {context}"
        return message


class RootTypeReferenceError(UnresolvedTypeError):
    """A field or argument refers to a Query/Mutation/Subscription root type.

    Root types only become operations; no value type or projection exists
    for them to resolve to.
    """

    @staticmethod
    def describe(type_name: str, context: str | None) -> str:
        message = f"Root operation type '{type_name}' cannot be used as a field type"
        if context:
            message += f" (referenced by {context})"
        return message


class CodegenIOError(CodegenError):
    """Reading the schema or writing generated files failed.

    Attributes:
        path: The file or directory involved.
        cause: The underlying OSError.
    """

    def __init__(self, message: str, path=None, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        if path is not None:
            message = f"{message}: {path}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)
