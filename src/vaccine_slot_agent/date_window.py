"""Utilities for splitting the search range into upstream-sized date windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

DEFAULT_SEARCH_DAYS = 60
DEFAULT_WINDOW_DAYS = 10


@dataclass(frozen=True)
class DateWindow:
    """A half-open span of calendar dates sent as one availability filter."""

    start: date
    end: date

    @property
    def span_days(self) -> int:
        return (self.end - self.start).days

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"

    def as_filter(self) -> dict[str, str]:
        """Render the window as the upstream ``AvailabilityFilter`` input."""
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


def compute_date_windows(
    today: date | None = None,
    *,
    days: int = DEFAULT_SEARCH_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[DateWindow]:
    """
    Partition ``[today, today + days]`` into consecutive windows.

    The upstream rejects broad date ranges, so each window spans at most
    ``window_days``. Each window ends where the next one starts and the last
    window may be narrower than the rest.
    """
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")
    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")

    today = today or date.today()
    final = today + timedelta(days=days)
    step = timedelta(days=window_days)

    windows: list[DateWindow] = []
    start = today
    while start < final:
        end = min(start + step, final)
        windows.append(DateWindow(start=start, end=end))
        start = end
    return windows
