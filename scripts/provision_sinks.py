"""Create the SQS queues and DynamoDB tables that layout files route to.

Usage:
    python scripts/provision_sinks.py layouts/*.json --endpoint-url http://localhost:4566 --table-suffix=-dev
"""

from __future__ import annotations

import argparse
from typing import Any, Iterable

import boto3

from textrouter.models.schema import Schema, SinkKind
from textrouter.schema.loader import load


def create_tables(ddb: Any, schemas: Iterable[Schema], suffix: str = "",
                  key_attribute: str = "record_id") -> list[str]:
    """Create one table per repository-routed layout. Skips tables that already exist."""
    client = ddb.meta.client
    existing = set(client.list_tables().get("TableNames", []))
    created = []

    for schema in schemas:
        if SinkKind.REPOSITORY not in schema.sinks:
            continue
        table_name = f"{schema.storage_name}{suffix}"
        if table_name in existing:
            print(f"  Table {table_name} already exists, skipping")
            continue
        client.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": key_attribute, "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": key_attribute, "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        existing.add(table_name)
        created.append(table_name)
        print(f"  Created table {table_name}")
    return created


def create_queues(sqs: Any, schemas: Iterable[Schema]) -> list[str]:
    """Create one queue per queue-routed layout; create_queue is idempotent."""
    created = []
    for schema in schemas:
        if SinkKind.QUEUE not in schema.sinks or schema.storage_name in created:
            continue
        sqs.create_queue(QueueName=schema.storage_name)
        created.append(schema.storage_name)
        print(f"  Declared queue {schema.storage_name}")
    return created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Provision sink resources for textrouter layouts")
    parser.add_argument("layouts", nargs="+", help="JSON layout files")
    parser.add_argument("--endpoint-url", default=None, help="AWS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix; pass dashed values as --table-suffix=-dev")
    parser.add_argument("--key-attribute", default="record_id", help="Table partition key")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args(argv)

    schemas = [load(path) for path in args.layouts]

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    print("Creating tables...")
    create_tables(boto3.resource("dynamodb", **kwargs), schemas,
                  suffix=args.table_suffix, key_attribute=args.key_attribute)

    print("Declaring queues...")
    create_queues(boto3.client("sqs", **kwargs), schemas)

    print("Done!")


if __name__ == "__main__":
    main()
