"""Schema models describing a text file layout and where its records go."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class FieldType(StrEnum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"


class FileType(StrEnum):
    CSV = "csv"
    FIXED = "fixed"


class Destination(StrEnum):
    QUEUE = "queue"
    REPOSITORY = "repository"
    BOTH = "both"


class SinkKind(StrEnum):
    QUEUE = "queue"
    REPOSITORY = "repository"


def sinks_for(destination: Destination) -> tuple[SinkKind, ...]:
    if destination is Destination.QUEUE:
        return (SinkKind.QUEUE,)
    if destination is Destination.REPOSITORY:
        return (SinkKind.REPOSITORY,)
    return (SinkKind.QUEUE, SinkKind.REPOSITORY)


# Older layout files spell these differently.
_FIELD_TYPE_ALIASES = {"bool": FieldType.BOOLEAN}
_FILE_TYPE_ALIASES = {"delimited": FileType.CSV}


class FieldSpec(BaseModel):
    """One field of a record layout."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    description: str = ""
    position: int = Field(gt=0)  # 1-based token ordinal (csv) or character offset (fixed)
    size: int = Field(gt=0)
    field_type: FieldType

    @field_validator("field_type", mode="before")
    @classmethod
    def _normalize_field_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return _FIELD_TYPE_ALIASES.get(value, value)
        return value

    @property
    def end(self) -> int:
        """Exclusive 1-based end of the fixed-width range."""
        return self.position + self.size


class Schema(BaseModel):
    """Complete layout of a data file plus its routing."""

    model_config = {"frozen": True}

    name: str
    version: int = 1
    file_type: FileType
    delimiter: Optional[str] = None
    destination: Destination
    storage_name: str = Field(min_length=1)
    fields: tuple[FieldSpec, ...] = Field(min_length=1)

    @field_validator("file_type", "destination", mode="before")
    @classmethod
    def _normalize_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return _FILE_TYPE_ALIASES.get(value, value)
        return value

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def sinks(self) -> tuple[SinkKind, ...]:
        """Sinks this schema routes to, queue first."""
        return sinks_for(self.destination)
