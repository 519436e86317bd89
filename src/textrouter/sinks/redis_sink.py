"""Redis list queue sink implementing IQueueSink."""

from __future__ import annotations

import redis

from textrouter.sinks.errors import from_redis

SINK = "queue"


class RedisQueueSink:
    """IQueueSink that appends each message to a Redis list named after the queue."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 socket_timeout: float | None = 5.0) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._client = redis.Redis(
            host=host, port=port, db=db, socket_timeout=socket_timeout, decode_responses=True,
        )

    def publish(self, queue_name: str, payload: str) -> str:
        try:
            length = self._client.rpush(queue_name, payload)
        except Exception as exc:
            raise from_redis(SINK, f"RPUSH to {queue_name!r}", exc) from exc
        # Ack is the message's position in the list at the time of the push.
        return f"{queue_name}:{length}"

    def close(self) -> None:
        self._client.close()
