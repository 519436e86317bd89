"""Translate client library exceptions into SinkError kinds."""

from __future__ import annotations

import redis
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from textrouter.core.exceptions import SinkError, SinkErrorKind


def from_boto(sink: str, action: str, exc: Exception) -> SinkError:
    if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)):
        kind = SinkErrorKind.TIMEOUT
    elif isinstance(exc, ClientError):
        kind = SinkErrorKind.REJECTION
        code = exc.response.get("Error", {}).get("Code", "")
        return SinkError(sink, kind, f"{action} rejected ({code}): {exc}")
    elif isinstance(exc, (BotoConnectionError, BotoCoreError)):
        kind = SinkErrorKind.CONNECTION
    else:
        kind = SinkErrorKind.REJECTION
    return SinkError(sink, kind, f"{action} failed: {exc}")


def from_redis(sink: str, action: str, exc: Exception) -> SinkError:
    if isinstance(exc, redis.TimeoutError):
        kind = SinkErrorKind.TIMEOUT
    elif isinstance(exc, redis.ConnectionError):
        kind = SinkErrorKind.CONNECTION
    else:
        kind = SinkErrorKind.REJECTION
    return SinkError(sink, kind, f"{action} failed: {exc}")
