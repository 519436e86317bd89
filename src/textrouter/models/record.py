"""Decoded record and per-field decode failures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from textrouter.core.types import FieldValue


class DecodeErrorKind(StrEnum):
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True, slots=True)
class FieldFailure:
    """Why a single field of a line could not be decoded."""

    field: str
    kind: DecodeErrorKind
    detail: str
    raw: str | None = None  # None when the field was not present at all


@dataclass(frozen=True, slots=True)
class Record:
    """Typed values of one input line, in schema field order.

    Fields that failed to decode hold ``None`` and appear in ``failures``.
    """

    line_number: int
    values: Mapping[str, FieldValue]
    failures: tuple[FieldFailure, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_fields(self) -> list[str]:
        return [f.field for f in self.failures]

    def as_dict(self) -> dict[str, FieldValue]:
        return dict(self.values)
