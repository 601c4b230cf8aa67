"""Fan slot lookups out over every category, location and date window."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Collection, FrozenSet, Iterable, List, Optional, Sequence, TypeVar

import structlog

from .config import AppointmentCategory, Settings
from .date_window import DateWindow, compute_date_windows
from .graphql_client import GraphQLClient
from .locations import filter_locations
from .models import AppointmentRecord, Location
from .queries import (
    build_available_times_query,
    build_pharmacies_query,
    parse_available_times,
    parse_pharmacies,
)

LOGGER = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SlotTask:
    """One independent unit of work: a location's slots over one window."""

    category: AppointmentCategory
    location: Location
    window: DateWindow


@dataclass(frozen=True)
class CheckResult:
    """Everything collected during a run."""

    records: FrozenSet[AppointmentRecord]
    locations_checked: int
    queries_sent: int
    degraded_queries: int


class SlotChecker:
    """Collects open appointments for the configured cities and categories."""

    def __init__(
        self,
        settings: Settings,
        client: GraphQLClient,
        *,
        cities: Collection[str],
        categories: Sequence[AppointmentCategory],
        days: int,
        today: Optional[date] = None,
    ):
        self._settings = settings
        self._client = client
        self._cities = tuple(cities)
        self._categories = tuple(categories)
        self._windows = compute_date_windows(
            today, days=days, window_days=settings.window_days
        )
        self._semaphore = asyncio.Semaphore(settings.max_concurrency)
        self._degraded = 0
        self._sent = 0

    @property
    def windows(self) -> List[DateWindow]:
        return list(self._windows)

    async def collect(self) -> CheckResult:
        """Run every lookup and return the de-duplicated appointment records."""
        per_category = await _gather_all(
            self._available_locations(category) for category in self._categories
        )

        tasks = [
            SlotTask(category=category, location=location, window=window)
            for category, locations in zip(self._categories, per_category)
            for location in locations
            for window in self._windows
        ]
        LOGGER.info(
            "checker.fanout",
            categories=len(self._categories),
            windows=len(self._windows),
            tasks=len(tasks),
        )

        batches = await _gather_all(self._available_times(task) for task in tasks)
        records = frozenset(record for batch in batches for record in batch)

        if self._degraded:
            LOGGER.warning(
                "report.coverage_gap",
                degraded_queries=self._degraded,
                queries_sent=self._sent,
            )

        return CheckResult(
            records=records,
            locations_checked=sum(len(locations) for locations in per_category),
            queries_sent=self._sent,
            degraded_queries=self._degraded,
        )

    async def _available_locations(self, category: AppointmentCategory) -> List[Location]:
        request = build_pharmacies_query(self._settings, category)
        async with self._semaphore:
            self._sent += 1
            payload = await self._client.execute(request)

        result = parse_pharmacies(payload)
        if result.degraded:
            self._degraded += 1
        locations = filter_locations(result.locations, self._cities)
        LOGGER.info(
            "checker.locations",
            category=category.key,
            returned=len(result.locations),
            kept=len(locations),
        )
        return locations

    async def _available_times(self, task: SlotTask) -> List[AppointmentRecord]:
        request = build_available_times_query(task.location, task.window)
        async with self._semaphore:
            self._sent += 1
            payload = await self._client.execute(request)

        result = parse_available_times(payload)
        if result.degraded:
            self._degraded += 1
        return [
            AppointmentRecord(
                location=task.location,
                category_label=task.category.label,
                slot=slot,
                booking_url=self._settings.booking_url,
            )
            for slot in result.slots
        ]


async def _gather_all(coroutines: Iterable[Awaitable[T]]) -> List[T]:
    """Await everything concurrently; on the first failure cancel the rest."""
    tasks = [asyncio.ensure_future(coroutine) for coroutine in coroutines]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
