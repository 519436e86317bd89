"""Pluggable sink clients behind the IQueueSink/IRepositorySink Protocols."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from textrouter.core.config import AppSettings
from textrouter.core.protocols import IQueueSink, IRepositorySink
from textrouter.models.schema import Destination, SinkKind, sinks_for
from textrouter.sinks.dynamodb_sink import DynamoDBRepositorySink
from textrouter.sinks.memory_sink import MemoryQueueSink, MemoryRepositorySink
from textrouter.sinks.redis_sink import RedisQueueSink
from textrouter.sinks.sqs_sink import SQSQueueSink

logger = logging.getLogger(__name__)

__all__ = [
    "DynamoDBRepositorySink",
    "MemoryQueueSink",
    "MemoryRepositorySink",
    "RedisQueueSink",
    "SQSQueueSink",
    "SinkSet",
    "create_sinks",
    "open_sinks",
]


@dataclass
class SinkSet:
    """Sink handles for one run; either may be None when not routed to."""

    queue: IQueueSink | None = None
    repository: IRepositorySink | None = None

    def close(self) -> None:
        for name, sink in (("queue", self.queue), ("repository", self.repository)):
            if sink is None:
                continue
            try:
                sink.close()
            except Exception:
                logger.exception("closing %s sink failed", name)


def create_queue_sink(settings: AppSettings) -> IQueueSink:
    if settings.queue.backend == "redis":
        return RedisQueueSink(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            socket_timeout=settings.redis.socket_timeout,
        )
    return SQSQueueSink(
        region=settings.sqs.region,
        endpoint_url=settings.sqs.endpoint_url,
        declare_queues=settings.queue.declare_queues,
        connect_timeout=settings.sqs.connect_timeout,
        read_timeout=settings.sqs.read_timeout,
    )


def create_repository_sink(settings: AppSettings) -> IRepositorySink:
    return DynamoDBRepositorySink(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
        key_attribute=settings.dynamodb.key_attribute,
        connect_timeout=settings.dynamodb.connect_timeout,
        read_timeout=settings.dynamodb.read_timeout,
    )


def create_sinks(settings: AppSettings | None = None,
                 destination: Destination = Destination.BOTH) -> SinkSet:
    """Create the sink clients a destination routes to.

    Returns:
        SinkSet holding only the handles the destination needs.
    """
    if settings is None:
        settings = AppSettings()

    sinks = SinkSet()
    try:
        routed = sinks_for(Destination(destination))
        if SinkKind.QUEUE in routed:
            sinks.queue = create_queue_sink(settings)
        if SinkKind.REPOSITORY in routed:
            sinks.repository = create_repository_sink(settings)
    except Exception:
        sinks.close()
        raise
    return sinks


@contextmanager
def open_sinks(settings: AppSettings | None = None,
               destination: Destination = Destination.BOTH) -> Iterator[SinkSet]:
    """Scoped form of :func:`create_sinks`; handles are always closed on exit."""
    sinks = create_sinks(settings, destination)
    try:
        yield sinks
    finally:
        sinks.close()
