"""Schema loader: parses a JSON layout document into a validated Schema.

Every structural problem is reported here, before any data line is read, so
that decoding only ever fails on the data itself.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from textrouter.core.exceptions import (
    EmptyFieldsError,
    InvalidDestinationError,
    InvalidFieldError,
    MalformedSchemaError,
    SchemaError,
)
from textrouter.models.schema import FileType, Schema

logger = logging.getLogger(__name__)

_DESTINATION_KEYS = {"destination", "storage_name"}


def load(source: str | Path) -> Schema:
    """Read and validate the schema file at ``source``."""
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedSchemaError(f"cannot read schema: {exc}", source=str(path)) from exc
    schema = loads(text, source=str(path))
    logger.info(
        "loaded schema %s v%d (%s, %d fields) -> %s %s",
        schema.name, schema.version, schema.file_type, len(schema.fields),
        schema.destination, schema.storage_name,
        extra={"schema": schema.name},
    )
    return schema


def loads(text: str, source: str | None = None) -> Schema:
    """Validate a schema document held in memory."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedSchemaError(f"not valid JSON: {exc}", source=source) from exc
    if not isinstance(raw, dict):
        raise MalformedSchemaError("top-level value must be an object", source=source)

    fields = raw.get("fields")
    if fields is None or fields == []:
        raise EmptyFieldsError("schema declares no fields", source=source)
    if not isinstance(fields, list):
        raise MalformedSchemaError("'fields' must be a list", source=source)

    try:
        schema = Schema.model_validate(raw)
    except ValidationError as exc:
        raise _classify(exc, raw, source) from exc

    _check_layout(schema, source)
    return schema


def _classify(exc: ValidationError, raw: dict[str, Any], source: str | None) -> SchemaError:
    """Map the first pydantic error onto the matching SchemaError kind."""
    errors = exc.errors()
    # Field problems win over top-level ones: they point at the exact culprit.
    for err in errors:
        loc = err["loc"]
        if len(loc) >= 2 and loc[0] == "fields" and isinstance(loc[1], int):
            index = loc[1]
            name = _field_name(raw, index)
            attr = ".".join(str(part) for part in loc[2:]) or "field"
            return InvalidFieldError(
                f"field #{index + 1} ({name or 'unnamed'}) {attr}: {err['msg']}",
                field=name,
                source=source,
            )
    for err in errors:
        loc = err["loc"]
        if loc and loc[0] in _DESTINATION_KEYS:
            return InvalidDestinationError(f"{loc[0]}: {err['msg']}", source=source)
    first = errors[0]
    where = ".".join(str(part) for part in first["loc"]) or "schema"
    return MalformedSchemaError(f"{where}: {first['msg']}", source=source)


def _field_name(raw: dict[str, Any], index: int) -> str | None:
    try:
        name = raw["fields"][index].get("name")
    except (AttributeError, IndexError, KeyError, TypeError):
        return None
    return name if isinstance(name, str) else None


def _check_layout(schema: Schema, source: str | None) -> None:
    """Cross-field checks pydantic cannot express per field."""
    if schema.file_type is FileType.CSV and not schema.delimiter:
        raise MalformedSchemaError("csv schemas require a non-empty delimiter", source=source)

    seen_names: set[str] = set()
    seen_positions: dict[int, str] = {}
    for f in schema.fields:
        if f.name in seen_names:
            raise InvalidFieldError(f"duplicate field name {f.name!r}", field=f.name, source=source)
        seen_names.add(f.name)
        if f.position in seen_positions:
            raise InvalidFieldError(
                f"field {f.name!r} reuses position {f.position} of {seen_positions[f.position]!r}",
                field=f.name,
                source=source,
            )
        seen_positions[f.position] = f.name

    if schema.file_type is FileType.FIXED:
        ordered = sorted(schema.fields, key=lambda f: f.position)
        for before, after in zip(ordered, ordered[1:]):
            if after.position < before.end:
                raise InvalidFieldError(
                    f"field {after.name!r} [{after.position}, {after.end}) overlaps "
                    f"{before.name!r} [{before.position}, {before.end})",
                    field=after.name,
                    source=source,
                )
