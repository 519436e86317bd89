"""Type aliases used across textrouter."""

from __future__ import annotations

from typing import Any

FieldValue = str | int | float | bool | None
Document = dict[str, Any]
