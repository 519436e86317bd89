"""DynamoDB repository sink implementing IRepositorySink."""

from __future__ import annotations

import uuid
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from textrouter.core.types import Document
from textrouter.sinks.errors import from_boto

SINK = "repository"


class DynamoDBRepositorySink:
    """Production IRepositorySink backed by DynamoDB.

    Each collection maps to the table ``<collection><table_suffix>``, whose
    partition key must be ``key_attribute``. Documents without that attribute
    get a generated UUID; other key values are stored in their string form.
    """

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None, key_attribute: str = "record_id",
                 connect_timeout: int = 5, read_timeout: int = 10) -> None:
        self._table_suffix = table_suffix
        self._region = region
        self._endpoint_url = endpoint_url
        self._key_attribute = key_attribute
        kwargs: dict = {
            "region_name": region,
            "config": Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._tables: dict[str, Any] = {}

    def _table(self, collection_name: str):
        table = self._tables.get(collection_name)
        if table is None:
            table = self._ddb.Table(f"{collection_name}{self._table_suffix}")
            self._tables[collection_name] = table
        return table

    def insert(self, collection_name: str, document: Document) -> str:
        item = dict(document)
        key = item.get(self._key_attribute)
        # The partition key is declared as a string attribute.
        key = uuid.uuid4().hex if key is None else str(key)
        item[self._key_attribute] = key
        try:
            self._table(collection_name).put_item(Item=item)
        except (BotoCoreError, ClientError) as exc:
            raise from_boto(SINK, f"put_item into {collection_name!r}", exc) from exc
        return key

    def close(self) -> None:
        self._ddb.meta.client.close()
