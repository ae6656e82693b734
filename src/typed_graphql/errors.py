"""Error types raised while building and resolving GraphQL interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Position:
    """Line/column location of a construct in the query document (1-based)."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class GraphQLError(Exception):
    """Base class for errors reported as part of a (partial) response."""

    def __init__(self, message: str, position: Position | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def with_position(self, position: Position | None) -> GraphQLError:
        """Attach a source position unless one is already set.

        The innermost attribution wins, so an error raised deep inside a
        nested selection keeps pointing at the field that produced it.
        """
        if self.position is None:
            self.position = position
        return self

    def to_dict(self) -> dict[str, Any]:
        """Render the error in the shape used by GraphQL responses."""
        data: dict[str, Any] = {"message": self.message}
        if self.position is not None:
            data["locations"] = [{"line": self.position.line, "column": self.position.column}]
        return data

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at {self.position})"


class QueryError(GraphQLError):
    """An error caused by the shape of the incoming query."""


class FieldNotFound(QueryError):
    """The requested field is not declared on the object or interface."""

    def __init__(self, field_name: str, object_name: str, position: Position | None = None) -> None:
        super().__init__(f'Cannot query field "{field_name}" on type "{object_name}".', position)
        self.field_name = field_name
        self.object_name = object_name


class UnrecognizedInlineFragment(QueryError):
    """An inline fragment's type condition names no possible type."""

    def __init__(self, object_name: str, name: str, position: Position | None = None) -> None:
        super().__init__(f'Unknown fragment type condition "{name}" on type "{object_name}".', position)
        self.object_name = object_name
        self.name = name


class ArgumentBindingError(QueryError):
    """A supplied argument is missing or cannot be coerced to its declared type."""

    def __init__(self, argument_name: str, reason: str, position: Position | None = None) -> None:
        super().__init__(f'Invalid value for argument "{argument_name}": {reason}', position)
        self.argument_name = argument_name
        self.reason = reason


class FieldResolutionError(GraphQLError):
    """A field's resolver method failed.

    The original exception is kept as ``__cause__``.
    """


class InterfaceDefinitionError(ValueError):
    """An interface declaration is malformed and cannot be served."""
