"""Run coordinator: schema -> lines -> records -> sinks, with a run summary.

Reading and decoding may run ahead of dispatch on a reader thread, bounded
by ``DispatchConfig.prefetch``. Dispatch always happens on the calling
thread, one record at a time and in input order, so sink handles are never
shared between threads.
"""

from __future__ import annotations

import logging
import queue
import threading
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from textrouter.core.config import AppSettings
from textrouter.core.protocols import IQueueSink, IRepositorySink
from textrouter.dispatch.dispatcher import SinkDispatcher
from textrouter.ingest.decoder import decode
from textrouter.ingest.line_source import LineSource
from textrouter.models.record import Record
from textrouter.models.schema import Schema
from textrouter.models.summary import RunSummary
from textrouter.schema.loader import load
from textrouter.sinks import open_sinks

logger = logging.getLogger(__name__)

RecordListener = Callable[[Record], None]

_POLL_SECONDS = 0.1
_END = object()


@dataclass(frozen=True)
class _ReaderFailed:
    exc: BaseException


class RunCoordinator:
    """Drives one single-pass run over a data file."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        queue: IQueueSink | None = None,
        repository: IRepositorySink | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._dispatcher = SinkDispatcher(
            queue=queue, repository=repository, config=self._settings.dispatch,
        )

    def run(self, schema_path: str | Path, data_path: str | Path,
            on_record: RecordListener | None = None) -> RunSummary:
        """Load the schema, then process the data file against it."""
        schema = load(schema_path)
        self._dispatcher.check(schema)
        with LineSource(data_path, self._settings.encoding) as source:
            return self.process(schema, source, on_record=on_record)

    def process(self, schema: Schema, source: LineSource,
                on_record: RecordListener | None = None) -> RunSummary:
        """Decode and dispatch every line of an already opened source."""
        self._dispatcher.check(schema)
        summary = RunSummary(
            schema_name=schema.name,
            max_details=self._settings.dispatch.max_failure_details,
        )
        for sink in schema.sinks:
            summary.delivered[str(sink)] = 0
            summary.delivery_failures[str(sink)] = 0

        logger.info(
            "run started: %s -> %s %s", source.path, schema.destination, schema.storage_name,
            extra={"schema": schema.name},
        )
        with closing(self._records(source, schema)) as records:
            for record in records:
                self._handle(record, schema, summary, on_record)
        logger.info(
            "run finished: %d lines, %d decoded, %d decode failures, %d delivered, %d delivery failures",
            summary.lines_read, summary.decoded, summary.decode_failures,
            summary.total_delivered, summary.total_delivery_failures,
            extra={"schema": schema.name},
        )
        return summary

    def _handle(self, record: Record, schema: Schema, summary: RunSummary,
                on_record: RecordListener | None) -> None:
        summary.lines_read += 1
        if not record.ok:
            summary.record_decode_failure(record)
            logger.warning(
                "line %d not dispatched, failed fields: %s",
                record.line_number,
                ", ".join(f"{f.field} ({f.kind}: {f.detail})" for f in record.failures),
                extra={"line_number": record.line_number},
            )
            return

        summary.record_decoded()
        if on_record is not None:
            on_record(record)
        result = self._dispatcher.dispatch(record, schema)
        for outcome in result.outcomes:
            if outcome.ok:
                summary.record_delivery(str(outcome.sink))
            else:
                summary.record_delivery_failure(record.line_number, str(outcome.sink), outcome.error)

    def _records(self, source: LineSource, schema: Schema) -> Iterator[Record]:
        prefetch = self._settings.dispatch.prefetch
        if prefetch == 0:
            return (decode(line, schema) for line in source)
        return _prefetched(source, schema, prefetch)


def _prefetched(source: LineSource, schema: Schema, size: int) -> Iterator[Record]:
    """Decode on a reader thread into a bounded buffer, yielding in order."""
    buffer: queue.Queue = queue.Queue(maxsize=size)
    stop = threading.Event()

    def put(item: object) -> bool:
        while not stop.is_set():
            try:
                buffer.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def read() -> None:
        try:
            for line in source:
                if not put(decode(line, schema)):
                    return
        except Exception as exc:
            put(_ReaderFailed(exc))
            return
        put(_END)

    reader = threading.Thread(target=read, name="textrouter-reader", daemon=True)
    reader.start()
    try:
        while True:
            item = buffer.get()
            if item is _END:
                return
            if isinstance(item, _ReaderFailed):
                raise item.exc
            yield item
    finally:
        stop.set()
        reader.join()


def run(schema_path: str | Path, data_path: str | Path,
        settings: AppSettings | None = None,
        on_record: RecordListener | None = None) -> RunSummary:
    """Run a file end to end with sink clients built from settings.

    The schema is validated and the data file opened before any sink
    connection is made; sinks are released when the run ends, however it ends.
    """
    settings = settings or AppSettings()
    schema = load(schema_path)
    with LineSource(data_path, settings.encoding) as source, \
            open_sinks(settings, schema.destination) as sinks:
        coordinator = RunCoordinator(settings, queue=sinks.queue, repository=sinks.repository)
        return coordinator.process(schema, source, on_record=on_record)
