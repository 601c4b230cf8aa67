"""Entry point for the slot agent."""

from __future__ import annotations

import argparse
import asyncio
import io
import logging
import sys
from datetime import date
from typing import List, Optional, Sequence, TextIO

import httpx
import structlog

from .checker import CheckResult, SlotChecker
from .config import DEFAULT_CATEGORY_KEYS, DEFAULT_CITIES, AppointmentCategory, Settings
from .date_window import DEFAULT_SEARCH_DAYS
from .graphql_client import GraphQLClient
from .report import write_report


def configure_logging(debug: bool = False, *, cache_loggers: bool = True) -> None:
    """Configure structlog + stdlib logging. Logs go to stderr; stdout is the report."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )


LOGGER = structlog.get_logger(__name__)


async def run(
    settings: Settings,
    *,
    cities: Sequence[str],
    categories: Sequence[AppointmentCategory],
    days: int,
    stream: TextIO,
    today: Optional[date] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CheckResult:
    """Collect open appointments and write the CSV report to ``stream``.

    Nothing is written unless collection finishes.
    """
    async with GraphQLClient(settings, transport=transport) as client:
        checker = SlotChecker(
            settings,
            client,
            cities=cities,
            categories=categories,
            days=days,
            today=today,
        )
        result = await checker.collect()

    buffer = io.StringIO()
    rows = write_report(result.records, buffer)
    stream.write(buffer.getvalue())
    stream.flush()

    LOGGER.info(
        "report.written",
        rows=rows,
        locations=result.locations_checked,
        queries=result.queries_sent,
        degraded=result.degraded_queries,
    )
    return result


def _comma_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid day count: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"day count must be at least 1, got {number}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="List open pharmacy vaccine and screening appointments as CSV."
    )
    parser.add_argument(
        "--cities",
        type=_comma_list,
        default=list(DEFAULT_CITIES),
        help="Comma separated cities to include in the search.",
    )
    parser.add_argument(
        "--days",
        type=_positive_int,
        default=DEFAULT_SEARCH_DAYS,
        help="Number of days ahead of today to search.",
    )
    parser.add_argument(
        "--types",
        type=_comma_list,
        default=list(DEFAULT_CATEGORY_KEYS),
        help="Comma separated appointment types (moderna, pfizer, screening).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every outbound query to stderr.",
    )
    return parser.parse_args(argv)


def cli(argv: Optional[Sequence[str]] = None) -> int:
    """Console script entrypoint."""
    args = parse_args(argv)

    try:
        settings = Settings()
    except Exception as exc:  # pragma: no cover - startup validation
        configure_logging()
        LOGGER.exception("settings.error", error=str(exc))
        return 2

    if args.debug and not settings.debug:
        settings = settings.model_copy(update={"debug": True})
    configure_logging(settings.debug)

    categories = settings.categories_for(args.types)

    try:
        asyncio.run(
            run(
                settings,
                cities=args.cities,
                categories=categories,
                days=args.days,
                stream=sys.stdout,
            )
        )
    except Exception as exc:  # noqa: BLE001 - top level
        LOGGER.exception("checker.failed", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
