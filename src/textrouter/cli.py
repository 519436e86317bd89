"""Command-line entry point.

Usage:
    textrouter layout.json data.txt [--print-records]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from textrouter.core.config import AppSettings
from textrouter.core.exceptions import FatalIOError, SchemaError, SinkUnavailableError
from textrouter.models.record import Record
from textrouter.runner.coordinator import run

logger = logging.getLogger("textrouter")

EXIT_OK = 0
EXIT_SCHEMA = 2
EXIT_IO = 3
EXIT_SINK = 4


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="textrouter",
        description="Decode a delimited or fixed-width file by schema and route its records",
    )
    parser.add_argument("schema", help="JSON layout file describing fields and destination")
    parser.add_argument("data", help="data file to ingest, one record per line")
    parser.add_argument(
        "--print-records", action="store_true",
        help="echo each decoded record as JSON to stdout before it is dispatched",
    )
    return parser.parse_args(argv)


def _echo(record: Record) -> None:
    print(json.dumps(record.as_dict(), ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = AppSettings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        summary = run(
            args.schema, args.data, settings=settings,
            on_record=_echo if args.print_records else None,
        )
    except SchemaError as exc:
        logger.error("schema rejected: %s", exc)
        return EXIT_SCHEMA
    except FatalIOError as exc:
        logger.error("input unreadable: %s", exc)
        return EXIT_IO
    except SinkUnavailableError as exc:
        logger.error("%s", exc)
        return EXIT_SINK

    print(summary.render())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
