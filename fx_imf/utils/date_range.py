"""Utility helpers for normalising query dates and windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Iterable, List


@dataclass(frozen=True)
class DateRange:
    """Container representing a closed date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("start date must not be after end date")

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def as_tuple(self) -> tuple[date, date]:
        """Return the range as a tuple of ``(start, end)``."""
        return (self.start, self.end)


def parse_date(value: str | date) -> date:
    """Parse a date string in ISO format to :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_query_date(value: str | date | datetime | None) -> date | None:
    """Truncate ``datetime`` inputs to their date; ``None`` passes through."""

    if value is None:
        return None
    return parse_date(value)


FREQUENCIES = ("daily", "weekly", "monthly", "yearly")


def select_snapshot_dates(dates: List[date], frequency: str) -> List[date]:
    """Keep the latest date of every ``frequency`` bucket, oldest bucket first."""

    if frequency == "daily":
        return sorted(dates)
    if frequency == "weekly":
        return _last_dates_by_key(
            dates,
            lambda value: (value.isocalendar().year, value.isocalendar().week),
        )
    if frequency == "monthly":
        return _last_dates_by_key(dates, lambda value: (value.year, value.month))
    if frequency == "yearly":
        return _last_dates_by_key(dates, lambda value: value.year)
    raise ValueError("frequency must be one of: daily, weekly, monthly, yearly")


def _last_dates_by_key(
    dates: Iterable[date],
    key_builder: Callable[[date], Any],
) -> List[date]:
    buckets: dict[Any, date] = {}
    for day in dates:
        key = key_builder(day)
        if key not in buckets or day > buckets[key]:
            buckets[key] = day
    return sorted(buckets.values())


__all__ = ["DateRange", "FREQUENCIES", "parse_date", "select_snapshot_dates", "to_query_date"]
