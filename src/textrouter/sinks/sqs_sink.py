"""SQS queue sink implementing IQueueSink."""

from __future__ import annotations

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from textrouter.core.exceptions import SinkError, SinkErrorKind
from textrouter.sinks.errors import from_boto

SINK = "queue"


class SQSQueueSink:
    """Production IQueueSink backed by SQS; queues are addressed by name."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None,
                 declare_queues: bool = True, connect_timeout: int = 5,
                 read_timeout: int = 10) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        self._declare = declare_queues
        self._queue_urls: dict[str, str] = {}
        kwargs: dict = {
            "region_name": region,
            "config": Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("sqs", **kwargs)

    def _queue_url(self, queue_name: str) -> str:
        url = self._queue_urls.get(queue_name)
        if url is not None:
            return url
        try:
            url = self._client.get_queue_url(QueueName=queue_name)["QueueUrl"]
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            missing = "NonExistentQueue" in code or "QueueDoesNotExist" in code
            if not (self._declare and missing):
                raise from_boto(SINK, f"resolve queue {queue_name!r}", exc) from exc
            url = self._create(queue_name)
        except BotoCoreError as exc:
            raise from_boto(SINK, f"resolve queue {queue_name!r}", exc) from exc
        self._queue_urls[queue_name] = url
        return url

    def _create(self, queue_name: str) -> str:
        try:
            return self._client.create_queue(QueueName=queue_name)["QueueUrl"]
        except (BotoCoreError, ClientError) as exc:
            raise from_boto(SINK, f"declare queue {queue_name!r}", exc) from exc

    def publish(self, queue_name: str, payload: str) -> str:
        url = self._queue_url(queue_name)
        try:
            resp = self._client.send_message(QueueUrl=url, MessageBody=payload)
        except (BotoCoreError, ClientError) as exc:
            raise from_boto(SINK, f"publish to {queue_name!r}", exc) from exc
        message_id = resp.get("MessageId")
        if not message_id:
            raise SinkError(SINK, SinkErrorKind.REJECTION, f"publish to {queue_name!r} returned no MessageId")
        return message_id

    def close(self) -> None:
        self._client.close()
