"""Runtime support imported by generated code.

Generated artifacts subclass the bases defined here:

    - GraphQLModel / GraphQLInput: pydantic bases for value and input types
    - GraphQLOperation: query and mutation wrappers
    - Projection / UnionSelection: field selection builders
    - UnionMarker / InterfaceMarker: closed-membership marker classes
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic_core import to_jsonable_python

P = TypeVar("P", bound="Projection")
S = TypeVar("S")


class RequiredFieldError(ValueError):
    """A builder or operation was finalized without its required fields."""

    def __init__(self, owner: str, missing: list[str]):
        self.owner = owner
        self.missing = list(missing)
        super().__init__(f"{owner}: missing required field(s): {', '.join(self.missing)}")


class EmptySelectionError(ValueError):
    """A projection was rendered without any selected field."""


def check_required(owner: str, values: Mapping[str, Any], required: Iterable[str]) -> None:
    """Raise RequiredFieldError naming every required key whose value is None."""
    missing = [name for name in required if values.get(name) is None]
    if missing:
        raise RequiredFieldError(owner, missing)


def serialize_variable(value: Any) -> Any:
    """Convert an argument value into its JSON form for the variables map."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [serialize_variable(item) for item in value]
    return to_jsonable_python(value)


class GraphQLModel(BaseModel):
    """Base class of generated value types."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class GraphQLInput(GraphQLModel):
    """Base class of generated input types. Instances are immutable."""

    model_config = ConfigDict(frozen=True)

    def to_variables(self) -> dict[str, Any]:
        """Wire form of this input: schema field names, unset fields dropped."""
        return serialize_variable(self)


class GraphQLOperation(ABC):
    """A query or mutation ready to be sent to a GraphQL endpoint."""

    @abstractmethod
    def operation_name(self) -> str:
        """Name of the operation in the document, e.g. ``CreateUser``."""

    @abstractmethod
    def to_graphql(self) -> str:
        """Render the complete operation document."""

    def variables(self) -> dict[str, Any]:
        """Variables for the operation; only arguments that were set."""
        return {}

    @abstractmethod
    def response_type(self) -> Any:
        """Python type of the operation's response field."""

    def to_request(self) -> dict[str, Any]:
        """Build the JSON body of a GraphQL-over-HTTP request."""
        return {
            "query": self.to_graphql(),
            "operationName": self.operation_name(),
            "variables": self.variables(),
        }

    def __str__(self) -> str:
        return self.to_graphql()


class Selection(ABC):
    """Anything that renders a ``{ ... }`` selection set."""

    @abstractmethod
    def selection(self) -> str:
        """Render the selection set without its surrounding braces."""

    def to_graphql(self) -> str:
        body = self.selection()
        if not body:
            raise EmptySelectionError(f"{type(self).__name__} has no selected fields")
        return f"{{ {body} }}"

    def __str__(self) -> str:
        return self.to_graphql()


class Projection(Selection):
    """Base class of generated projections.

    Leaf fields are kept in selection order without duplicates. Nested
    selections are stored per field; selecting a field again replaces its
    sub-selection.
    """

    __graphql_type__ = ""

    def __init__(self):
        self._fields: dict[str, None] = {}
        self._nested: dict[str, Selection] = {}

    def _select(self: P, name: str) -> P:
        self._fields[name] = None
        return self

    def _nest(self: P, name: str, selection: S, config: Callable[[S], Any]) -> P:
        config(selection)
        self._nested[name] = selection
        return self

    def typename(self: P) -> P:
        """Select the ``__typename`` meta field."""
        return self._select("__typename")

    @property
    def selected_fields(self) -> tuple[str, ...]:
        return tuple(self._fields)

    @property
    def nested(self) -> dict[str, Selection]:
        return dict(self._nested)

    def selection(self) -> str:
        parts = list(self._fields)
        parts.extend(f"{name} {nested.to_graphql()}" for name, nested in self._nested.items())
        return " ".join(parts)


class UnionSelection(Selection):
    """Selection for union-typed (or interface-typed) positions.

    Each concrete type gets an inline fragment:

        selection.on("User", UserProjection().id())
        selection.to_graphql()  # "{ __typename ... on User { id } }"
    """

    def __init__(self):
        self._fragments: dict[str, Projection] = {}

    def on(self, type_name: str, projection: Projection) -> "UnionSelection":
        self._fragments[type_name] = projection
        return self

    @property
    def fragments(self) -> dict[str, Projection]:
        return dict(self._fragments)

    def selection(self) -> str:
        if not self._fragments:
            return ""
        parts = ["__typename"]
        parts.extend(f"... on {name} {projection.to_graphql()}" for name, projection in self._fragments.items())
        return " ".join(parts)


class _SealedMarker:
    """Marker base whose direct definitions list their permitted subclasses.

    A marker definition sets ``__permitted__`` in its own body. Any other
    class deriving from it must be named in that tuple.
    """

    __permitted__ = ()
    __graphql_name__ = ""

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "__permitted__" in cls.__dict__:
            return
        for base in cls.__mro__[1:]:
            if base is _SealedMarker or not issubclass(base, _SealedMarker):
                continue
            if "__permitted__" in base.__dict__ and cls.__name__ not in base.__permitted__:
                raise TypeError(
                    f"{cls.__name__} is not a permitted member of {base.__name__}; "
                    f"permitted: {', '.join(base.__permitted__) or 'none'}"
                )

    @classmethod
    def permits(cls, type_name: str) -> bool:
        return type_name in cls.__permitted__


class UnionMarker(_SealedMarker):
    """Base of generated union markers."""


class InterfaceMarker(_SealedMarker):
    """Base of generated interface markers."""

    __graphql_fields__ = ()
