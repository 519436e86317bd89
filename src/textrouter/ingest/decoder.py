"""Record decoder: slices a raw line by schema and coerces each field.

Decoding never fails for the line as a whole. Each field either yields a
typed value or a :class:`FieldFailure`, and the caller decides what a
partially decoded record is worth.
"""

from __future__ import annotations

import math
import re
from typing import Callable

from textrouter.core.types import FieldValue
from textrouter.ingest.line_source import RawLine
from textrouter.models.record import DecodeErrorKind, FieldFailure, Record
from textrouter.models.schema import FieldSpec, FieldType, FileType, Schema

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BOOLEANS = {"true": True, "false": False, "1": True, "0": False}


class _Mismatch(ValueError):
    """Raised by a coercer when the text does not fit the declared type."""


def _to_string(text: str) -> str:
    return text


def _to_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise _Mismatch(f"{text!r} is not a base-10 integer")
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise _Mismatch(f"{text} overflows a 64-bit integer")
    return value


def _to_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise _Mismatch(f"{text!r} is not a decimal number")
    value = float(text)
    if not math.isfinite(value):
        raise _Mismatch(f"{text} is out of range for a float")
    return value


def _to_boolean(text: str) -> bool:
    try:
        return _BOOLEANS[text.lower()]
    except KeyError:
        raise _Mismatch(f"{text!r} is not one of true/false/1/0") from None


_COERCERS: dict[FieldType, Callable[[str], FieldValue]] = {
    FieldType.STRING: _to_string,
    FieldType.INT: _to_int,
    FieldType.FLOAT: _to_float,
    FieldType.BOOLEAN: _to_boolean,
}


def decode(line: RawLine, schema: Schema) -> Record:
    """Decode one line into a Record; failures are captured per field."""
    csv = schema.file_type is FileType.CSV
    tokens = line.text.split(schema.delimiter) if csv and line.text else []

    values: dict[str, FieldValue] = {}
    failures: list[FieldFailure] = []
    for spec in schema.fields:
        raw = _csv_slice(tokens, spec) if csv else _fixed_slice(line.text, spec)
        if raw is None:
            values[spec.name] = None
            failures.append(FieldFailure(
                spec.name, DecodeErrorKind.MISSING_FIELD, _missing_detail(spec, schema.file_type),
            ))
            continue
        text = raw.strip()
        if csv:
            text = _unquote(text)
        try:
            values[spec.name] = _COERCERS[spec.field_type](text)
        except _Mismatch as exc:
            values[spec.name] = None
            failures.append(FieldFailure(spec.name, DecodeErrorKind.TYPE_MISMATCH, str(exc), raw))
    return Record(line.number, values, tuple(failures))


def _csv_slice(tokens: list[str], spec: FieldSpec) -> str | None:
    if spec.position > len(tokens):
        return None
    return tokens[spec.position - 1]


def _fixed_slice(text: str, spec: FieldSpec) -> str | None:
    start = spec.position - 1
    stop = start + spec.size
    if stop > len(text):
        return None
    return text[start:stop]


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _missing_detail(spec: FieldSpec, file_type: FileType) -> str:
    if file_type is FileType.CSV:
        return f"line has no token #{spec.position}"
    return f"line ends before column {spec.end - 1}"
