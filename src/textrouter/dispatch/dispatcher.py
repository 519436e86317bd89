"""Sink dispatcher: delivers a decoded record to the sinks its schema names."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from textrouter.core.config import DispatchConfig
from textrouter.core.exceptions import (
    InvalidFieldError,
    SinkError,
    SinkErrorKind,
    SinkUnavailableError,
)
from textrouter.core.protocols import IQueueSink, IRepositorySink
from textrouter.dispatch.serializer import to_document, to_message
from textrouter.models.record import Record
from textrouter.models.schema import Schema, SinkKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SinkOutcome:
    """Result of one delivery attempt; exactly one of ack/error is set."""

    sink: SinkKind
    ack: str | None = None
    error: SinkError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    line_number: int
    outcomes: tuple[SinkOutcome, ...]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def failures(self) -> list[SinkOutcome]:
        return [o for o in self.outcomes if not o.ok]


class SinkDispatcher:
    """Routes records to the queue and/or repository sink.

    Sinks are attempted independently, queue first. One failing never stops
    the other, and nothing is retried here: retry policy belongs to the sink
    clients.
    """

    def __init__(
        self,
        *,
        queue: IQueueSink | None = None,
        repository: IRepositorySink | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self._queue = queue
        self._repository = repository
        self._config = config or DispatchConfig()

    @property
    def config(self) -> DispatchConfig:
        return self._config

    def check(self, schema: Schema) -> None:
        """Fail fast when the schema routes to a sink we do not have.

        Also rejects a line number attribute that would overwrite a field.
        """
        available = {SinkKind.QUEUE: self._queue, SinkKind.REPOSITORY: self._repository}
        for sink in schema.sinks:
            if available[sink] is None:
                raise SinkUnavailableError(str(sink), str(schema.destination))
        attribute = self._config.line_number_attribute
        if attribute and attribute in schema.field_names:
            raise InvalidFieldError(
                f"collides with line_number_attribute {attribute!r}", field=attribute, source=schema.name,
            )

    def dispatch(self, record: Record, schema: Schema) -> DispatchResult:
        if not record.ok:
            raise ValueError(
                f"line {record.line_number} has failed fields {record.failed_fields}; not dispatchable"
            )
        outcomes = []
        for sink in schema.sinks:
            if sink is SinkKind.QUEUE:
                outcomes.append(self._attempt(sink, record, lambda: self._publish(record, schema)))
            else:
                outcomes.append(self._attempt(sink, record, lambda: self._insert(record, schema)))
        return DispatchResult(record.line_number, tuple(outcomes))

    def _publish(self, record: Record, schema: Schema) -> str:
        if self._queue is None:
            raise SinkUnavailableError(str(SinkKind.QUEUE), str(schema.destination))
        payload = to_message(
            record, schema, sink=str(SinkKind.QUEUE), line_attribute=self._config.line_number_attribute,
        )
        return self._queue.publish(schema.storage_name, payload)

    def _insert(self, record: Record, schema: Schema) -> str:
        if self._repository is None:
            raise SinkUnavailableError(str(SinkKind.REPOSITORY), str(schema.destination))
        document = to_document(
            record, schema, sink=str(SinkKind.REPOSITORY), line_attribute=self._config.line_number_attribute,
        )
        return self._repository.insert(schema.storage_name, document)

    def _attempt(self, sink: SinkKind, record: Record, call: Callable[[], str]) -> SinkOutcome:
        try:
            ack = call()
        except SinkError as exc:
            error = exc
        except SinkUnavailableError:
            raise
        except Exception as exc:
            # Sink clients outside this package may raise anything.
            error = SinkError(str(sink), SinkErrorKind.REJECTION, f"{type(exc).__name__}: {exc}")
        else:
            return SinkOutcome(sink, ack=ack)
        logger.warning(
            "delivery to %s failed for line %d: %s", sink, record.line_number, error,
            extra={"line_number": record.line_number, "sink": str(sink)},
        )
        return SinkOutcome(sink, error=error)
