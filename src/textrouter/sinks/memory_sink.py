"""In-memory sinks for unit tests and dry runs."""

from __future__ import annotations

from typing import Any

from textrouter.core.exceptions import SinkError, SinkErrorKind
from textrouter.core.types import Document


class MemoryQueueSink:
    """List-per-queue IQueueSink; can be told to fail specific publishes."""

    def __init__(self) -> None:
        self.messages: dict[str, list[str]] = {}
        self.closed = False
        self._failures: dict[int, SinkError] = {}
        self._calls = 0

    def fail_on(self, call_number: int, kind: SinkErrorKind = SinkErrorKind.CONNECTION) -> None:
        """Make the n-th publish (1-based) raise a SinkError."""
        self._failures[call_number] = SinkError("queue", kind, f"injected failure on publish #{call_number}")

    def publish(self, queue_name: str, payload: str) -> str:
        self._calls += 1
        if self._calls in self._failures:
            raise self._failures[self._calls]
        queue = self.messages.setdefault(queue_name, [])
        queue.append(payload)
        return f"{queue_name}:{len(queue)}"

    def close(self) -> None:
        self.closed = True


class MemoryRepositorySink:
    """List-per-collection IRepositorySink; can be told to fail specific inserts."""

    def __init__(self) -> None:
        self.documents: dict[str, list[dict[str, Any]]] = {}
        self.closed = False
        self._failures: dict[int, SinkError] = {}
        self._calls = 0

    def fail_on(self, call_number: int, kind: SinkErrorKind = SinkErrorKind.REJECTION) -> None:
        """Make the n-th insert (1-based) raise a SinkError."""
        self._failures[call_number] = SinkError("repository", kind, f"injected failure on insert #{call_number}")

    def insert(self, collection_name: str, document: Document) -> str:
        self._calls += 1
        if self._calls in self._failures:
            raise self._failures[self._calls]
        collection = self.documents.setdefault(collection_name, [])
        collection.append(dict(document))
        return f"{collection_name}:{len(collection)}"

    def close(self) -> None:
        self.closed = True
