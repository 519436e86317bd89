"""textrouter exception hierarchy."""

from __future__ import annotations

from enum import StrEnum


class TextRouterError(Exception):
    """Base exception for all textrouter errors."""


class SchemaErrorKind(StrEnum):
    MALFORMED = "malformed"
    INVALID_FIELD = "invalid_field"
    INVALID_DESTINATION = "invalid_destination"
    EMPTY_FIELDS = "empty_fields"


class SchemaError(TextRouterError):
    """The schema document cannot be turned into a usable Schema."""

    kind: SchemaErrorKind = SchemaErrorKind.MALFORMED

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{self.kind}: {message}")


class MalformedSchemaError(SchemaError):
    """Schema is not parseable structured data or is missing required keys."""

    kind = SchemaErrorKind.MALFORMED


class InvalidFieldError(SchemaError):
    """A field definition is invalid or conflicts with another field."""

    kind = SchemaErrorKind.INVALID_FIELD

    def __init__(self, message: str, field: str | None = None, source: str | None = None) -> None:
        self.field = field
        super().__init__(message, source=source)


class InvalidDestinationError(SchemaError):
    """Destination is unknown or storage_name is missing."""

    kind = SchemaErrorKind.INVALID_DESTINATION


class EmptyFieldsError(SchemaError):
    """Schema declares no fields."""

    kind = SchemaErrorKind.EMPTY_FIELDS


class FatalIOError(TextRouterError):
    """Data file could not be opened or read."""

    def __init__(self, path: str, message: str, line_number: int | None = None) -> None:
        self.path = path
        self.line_number = line_number
        where = f" (after line {line_number})" if line_number else ""
        super().__init__(f"Cannot read {path}{where}: {message}")


class SinkUnavailableError(TextRouterError):
    """The schema routes to a sink that was not provided."""

    def __init__(self, sink: str, destination: str) -> None:
        self.sink = sink
        self.destination = destination
        super().__init__(f"Destination {destination!r} requires a {sink} sink, none configured")


class SinkErrorKind(StrEnum):
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    SERIALIZATION = "serialization"
    REJECTION = "rejection"


class SinkError(TextRouterError):
    """Delivery of one record to one sink failed."""

    def __init__(self, sink: str, kind: SinkErrorKind, message: str) -> None:
        self.sink = sink
        self.kind = SinkErrorKind(kind)
        self.message = message
        super().__init__(f"{sink} {self.kind}: {message}")
