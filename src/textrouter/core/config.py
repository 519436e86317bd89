"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(env_prefix=prefix, env_file=".env", extra="ignore")


class QueueConfig(BaseSettings):
    """Queue sink selection."""

    model_config = _env("TEXTROUTER_QUEUE_")

    backend: Literal["sqs", "redis"] = "sqs"
    declare_queues: bool = True  # create the queue on first publish if missing


class SQSConfig(BaseSettings):
    """SQS queue configuration."""

    model_config = _env("TEXTROUTER_SQS_")

    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    connect_timeout: int = 5
    read_timeout: int = 10


class RedisConfig(BaseSettings):
    """Redis list queue configuration."""

    model_config = _env("TEXTROUTER_REDIS_")

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    socket_timeout: float = 5.0


class DynamoDBConfig(BaseSettings):
    """DynamoDB repository configuration."""

    model_config = _env("TEXTROUTER_DYNAMO_")

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    key_attribute: str = "record_id"
    connect_timeout: int = 5
    read_timeout: int = 10


class DispatchConfig(BaseSettings):
    """Run pipeline tuning."""

    model_config = _env("TEXTROUTER_DISPATCH_")

    prefetch: int = Field(default=64, ge=0)  # 0 disables the reader thread
    max_failure_details: int = Field(default=1000, ge=0)
    line_number_attribute: str | None = None  # e.g. "_line" to tag payloads with their source line


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = _env("TEXTROUTER_")

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    encoding: str = "utf-8-sig"  # also reads plain UTF-8; drops a leading BOM

    queue: QueueConfig = Field(default_factory=QueueConfig)
    sqs: SQSConfig = Field(default_factory=SQSConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
