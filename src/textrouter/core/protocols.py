"""Protocol interfaces for the sinks records are delivered to.

The dispatch core only talks to these Protocols; concrete clients live in
``textrouter.sinks`` and are injected already constructed.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from textrouter.core.types import Document


# ---------------------------------------------------------------------------
# Queue sink
# ---------------------------------------------------------------------------

@runtime_checkable
class IQueueSink(Protocol):
    """Message queue accepting one serialized record per publish."""

    def publish(self, queue_name: str, payload: str) -> str: ...

    def close(self) -> None: ...


# ---------------------------------------------------------------------------
# Repository sink
# ---------------------------------------------------------------------------

@runtime_checkable
class IRepositorySink(Protocol):
    """Document store accepting one record document per insert."""

    def insert(self, collection_name: str, document: Document) -> str: ...

    def close(self) -> None: ...
