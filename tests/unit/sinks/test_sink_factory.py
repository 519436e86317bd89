"""Tests for create_sinks / open_sinks."""

from __future__ import annotations

from unittest.mock import patch

import fakeredis
import pytest
from moto import mock_aws

from textrouter.core.config import AppSettings, QueueConfig
from textrouter.models.schema import Destination
from textrouter.sinks import (
    DynamoDBRepositorySink,
    RedisQueueSink,
    SinkSet,
    SQSQueueSink,
    create_sinks,
    open_sinks,
)


@pytest.fixture
def aws(aws_credentials):
    with mock_aws():
        yield


class TestCreateSinks:
    def test_queue_only(self, aws):
        sinks = create_sinks(AppSettings(), Destination.QUEUE)
        assert isinstance(sinks.queue, SQSQueueSink)
        assert sinks.repository is None

    def test_repository_only(self, aws):
        sinks = create_sinks(AppSettings(), "repository")
        assert sinks.queue is None
        assert isinstance(sinks.repository, DynamoDBRepositorySink)

    def test_both(self, aws):
        sinks = create_sinks(AppSettings(), Destination.BOTH)
        assert sinks.queue is not None and sinks.repository is not None

    def test_redis_backend(self):
        settings = AppSettings(queue=QueueConfig(backend="redis"))
        with patch("redis.Redis", return_value=fakeredis.FakeRedis(decode_responses=True)):
            sinks = create_sinks(settings, Destination.QUEUE)
        assert isinstance(sinks.queue, RedisQueueSink)

    def test_failure_closes_already_opened(self, aws):
        with patch(
            "textrouter.sinks.create_repository_sink", side_effect=RuntimeError("no ddb"),
        ), patch.object(SinkSet, "close") as close:
            with pytest.raises(RuntimeError):
                create_sinks(AppSettings(), Destination.BOTH)
        close.assert_called_once()


class TestOpenSinks:
    def test_closes_on_exit(self, aws):
        with patch.object(SinkSet, "close") as close:
            with open_sinks(AppSettings(), Destination.QUEUE) as sinks:
                assert sinks.queue is not None
            close.assert_called_once()

    def test_closes_on_error(self, aws):
        with patch.object(SinkSet, "close") as close:
            with pytest.raises(ValueError):
                with open_sinks(AppSettings(), Destination.QUEUE):
                    raise ValueError("boom")
            close.assert_called_once()


class TestSinkSetClose:
    def test_close_failure_does_not_stop_others(self):
        class Failing:
            def close(self):
                raise RuntimeError("stuck")

        class Tracking:
            closed = False

            def close(self):
                self.closed = True

        repository = Tracking()
        SinkSet(queue=Failing(), repository=repository).close()
        assert repository.closed
