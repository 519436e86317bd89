"""Unit tests for DynamoDBRepositorySink using moto."""

from __future__ import annotations

from decimal import Decimal

import boto3
import pytest
from moto import mock_aws

from textrouter.core.exceptions import SinkError, SinkErrorKind
from textrouter.sinks.dynamodb_sink import DynamoDBRepositorySink

TABLE_SUFFIX = "-test"
REGION = "us-east-1"


def _create_table(client, name: str, pk: str = "record_id"):
    client.create_table(
        TableName=name,
        KeySchema=[{"AttributeName": pk, "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": pk, "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )


@pytest.fixture
def ddb(aws_credentials):
    with mock_aws():
        _create_table(boto3.client("dynamodb", region_name=REGION), f"accounts{TABLE_SUFFIX}")
        yield boto3.resource("dynamodb", region_name=REGION)


@pytest.fixture
def sink(ddb):
    return DynamoDBRepositorySink(table_suffix=TABLE_SUFFIX, region=REGION)


class TestInsert:
    def test_generates_key_and_stores_document(self, ddb, sink):
        key = sink.insert("accounts", {"id": 42, "name": "Ada", "balance": Decimal("1520.75")})

        item = ddb.Table(f"accounts{TABLE_SUFFIX}").get_item(Key={"record_id": key})["Item"]
        assert item["name"] == "Ada"
        assert item["balance"] == Decimal("1520.75")
        assert item["id"] == 42

    def test_keeps_supplied_key(self, ddb, sink):
        assert sink.insert("accounts", {"record_id": "r-1", "name": "Ada"}) == "r-1"

    def test_does_not_mutate_document(self, sink):
        document = {"name": "Ada"}
        sink.insert("accounts", document)
        assert document == {"name": "Ada"}

    def test_each_insert_gets_a_new_key(self, sink):
        assert sink.insert("accounts", {"n": 1}) != sink.insert("accounts", {"n": 1})

    def test_missing_table_is_rejected(self, sink):
        with pytest.raises(SinkError) as info:
            sink.insert("people", {"name": "Ada"})
        assert info.value.kind is SinkErrorKind.REJECTION
        assert info.value.sink == "repository"
        assert "ResourceNotFoundException" in info.value.message

    def test_float_values_are_refused(self, sink):
        with pytest.raises((SinkError, TypeError)):
            sink.insert("accounts", {"balance": 1.5})

    def test_non_string_key_field_is_stringified(self, ddb, sink):
        assert sink.insert("accounts", {"record_id": 42, "name": "Ada"}) == "42"
        item = ddb.Table(f"accounts{TABLE_SUFFIX}").get_item(Key={"record_id": "42"})["Item"]
        assert item["name"] == "Ada"

    def test_close(self, sink):
        sink.close()
