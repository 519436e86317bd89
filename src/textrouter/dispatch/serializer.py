"""Record serialization for queue messages and repository documents."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation

from textrouter.core.exceptions import SinkError, SinkErrorKind
from textrouter.core.types import Document
from textrouter.models.record import Record
from textrouter.models.schema import FieldType, Schema


def to_message(
    record: Record, schema: Schema, sink: str = "queue", line_attribute: str | None = None,
) -> str:
    """Compact JSON object with keys in schema order."""
    try:
        body = {name: record.values[name] for name in schema.field_names}
        if line_attribute:
            body[line_attribute] = record.line_number
        return json.dumps(
            body,
            allow_nan=False,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SinkError(sink, SinkErrorKind.SERIALIZATION, f"line {record.line_number}: {exc}") from exc


def to_document(
    record: Record, schema: Schema, sink: str = "repository", line_attribute: str | None = None,
) -> Document:
    """Storage document with keys in schema order; floats become Decimal."""
    document: Document = {}
    try:
        for spec in schema.fields:
            value = record.values[spec.name]
            if spec.field_type is FieldType.FLOAT and value is not None:
                # str() keeps the shortest repr, so 0.1 stays Decimal("0.1").
                value = Decimal(str(value))
            document[spec.name] = value
        if line_attribute:
            document[line_attribute] = record.line_number
    except (KeyError, InvalidOperation) as exc:
        raise SinkError(sink, SinkErrorKind.SERIALIZATION, f"line {record.line_number}: {exc}") from exc
    return document
