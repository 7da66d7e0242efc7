"""Parse the IMF "SDR exchange rates" tab-separated report into dated rates."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import IO, Callable, Iterable, Iterator

from fx_imf.ingestion.currency_names import CurrencyAliasTable
from fx_imf.ingestion.models import DatedRate, Direction, RateKind
from fx_imf.utils.imf import (
    CURRENCY_PER_SDR_MARKER,
    ENGLISH_MONTHS,
    HEADER_LABEL,
    NOMINAL_FRACTION_DIGITS,
    PIVOT_CURRENCY,
    SDR_PER_CURRENCY_MARKER,
)
from fx_imf.utils.logger import get_logger

LOGGER = get_logger(__name__)

_VALUE_PATTERN = re.compile(rf"^\d+(?:\.\d{{1,{NOMINAL_FRACTION_DIGITS}}})?$")
_HEADER_DATE_PATTERN = re.compile(r"^([A-Za-z]+)\s+(\d{1,2}),\s*(\d{4})$")


class FeedFormatError(ValueError):
    """Raised when the feed cannot be interpreted at all."""


def _parse_header_date(cell: str, line_no: int) -> date:
    """Read ``May 01, 2013``; month names are always English, whatever LC_TIME says."""

    match = _HEADER_DATE_PATTERN.match(cell)
    month = ENGLISH_MONTHS.get(match.group(1).casefold()) if match else None
    if match is None or month is None:
        raise FeedFormatError(f"Line {line_no}: unreadable header date {cell!r}")
    try:
        return date(int(match.group(3)), month, int(match.group(2)))
    except ValueError as exc:
        raise FeedFormatError(f"Line {line_no}: unreadable header date {cell!r}") from exc


@dataclass(slots=True)
class IMFParseResult:
    """Both directed collections built from one feed, newest rate first."""

    pivot_to_currency: dict[str, list[DatedRate]] = field(default_factory=dict)
    currency_to_pivot: dict[str, list[DatedRate]] = field(default_factory=dict)
    skipped_lines: int = 0
    skipped_values: int = 0

    def collection(self, direction: Direction) -> dict[str, list[DatedRate]]:
        if direction is Direction.PIVOT_TO_CURRENCY:
            return self.pivot_to_currency
        return self.currency_to_pivot

    @property
    def total(self) -> int:
        """Number of stored observations across both directions."""

        return sum(len(rates) for rates in self.pivot_to_currency.values()) + sum(
            len(rates) for rates in self.currency_to_pivot.values()
        )


class IMFTSVParser:
    """Convert the IMF SDR rate report into :class:`DatedRate` collections.

    The report carries two sections. ``SDRs per Currency unit`` quotes SDR per
    unit of currency; those values are inverted into ``SDR -> currency`` rates.
    ``Currency units per SDR`` quotes currency per SDR and is inverted into
    ``currency -> SDR`` rates. Each section repeats ``Currency<TAB><date>...``
    header lines that name the date of every value column below them.
    """

    def __init__(
        self,
        alias_table: CurrencyAliasTable | None = None,
        *,
        pivot: str = PIVOT_CURRENCY,
        today: Callable[[], date] = date.today,
        encoding: str = "utf-8",
    ) -> None:
        self.alias_table = alias_table or CurrencyAliasTable.from_locale()
        self.pivot = pivot
        self.today = today
        self.encoding = encoding

    def parse(self, stream: IO[str] | IO[bytes] | Iterable[str]) -> IMFParseResult:
        """Parse every line of ``stream``; bad lines and values are skipped."""

        today = self.today()
        result = IMFParseResult()
        direction: Direction | None = None
        timestamps: list[date | None] = []

        for line_no, line in enumerate(self._iter_lines(stream), start=1):
            if not line.strip():
                continue
            if line.startswith(SDR_PER_CURRENCY_MARKER):
                direction = Direction.PIVOT_TO_CURRENCY
                continue
            if line.startswith(CURRENCY_PER_SDR_MARKER):
                direction = Direction.CURRENCY_TO_PIVOT
                continue
            if line.startswith(HEADER_LABEL):
                timestamps = self._read_timestamps(line, line_no)
                continue
            if direction is None:
                LOGGER.debug("Ignoring line %s before any section marker: %r", line_no, line)
                result.skipped_lines += 1
                continue
            self._read_data_line(line, line_no, direction, timestamps, today, result)

        for collection in (result.pivot_to_currency, result.currency_to_pivot):
            for rates in collection.values():
                rates.sort(key=DatedRate.sort_key)
        return result

    def parse_text(self, text: str) -> IMFParseResult:
        return self.parse(text.splitlines())

    def parse_file(self, path: str | Path) -> IMFParseResult:
        feed_path = Path(path)
        if not feed_path.exists():
            raise FileNotFoundError(feed_path)
        with feed_path.open("r", encoding=self.encoding, newline="") as handle:
            return self.parse(handle)

    def _iter_lines(self, stream: Iterable[str] | Iterable[bytes]) -> Iterator[str]:
        for raw in stream:
            line = raw.decode(self.encoding) if isinstance(raw, (bytes, bytearray)) else raw
            yield line.rstrip("\r\n")

    @staticmethod
    def _read_timestamps(line: str, line_no: int) -> list[date | None]:
        # Currency<TAB>May 01, 2013<TAB>April 30, 2013 ...
        timestamps: list[date | None] = []
        for cell in line.split("\t")[1:]:
            cell = cell.strip()
            if not cell:
                timestamps.append(None)
                continue
            timestamps.append(_parse_header_date(cell, line_no))
        return timestamps

    def _read_data_line(
        self,
        line: str,
        line_no: int,
        direction: Direction,
        timestamps: list[date | None],
        today: date,
        result: IMFParseResult,
    ) -> None:
        parts = line.split("\t")
        currency = self.alias_table.resolve(parts[0])
        if currency is None:
            LOGGER.debug("Uninterpretable data from IMF feed (line %s): %r", line_no, parts[0])
            result.skipped_lines += 1
            return

        target = result.collection(direction)
        for index, raw_value in enumerate(parts[1:]):
            cell = raw_value.strip()
            if not cell:
                continue
            valid_on = timestamps[index] if index < len(timestamps) else None
            if valid_on is None:
                continue
            value = self._parse_value(cell)
            if value is None:
                LOGGER.debug(
                    "Skipping malformed value %r for %s on %s (line %s)",
                    cell,
                    currency,
                    valid_on,
                    line_no,
                )
                result.skipped_values += 1
                continue
            if valid_on > today:
                LOGGER.debug("Skipping future-dated %s value for %s", valid_on, currency)
                result.skipped_values += 1
                continue
            kind = RateKind.PROVISIONAL if valid_on == today else RateKind.HISTORICAL
            if direction is Direction.PIVOT_TO_CURRENCY:
                base, term = self.pivot, currency
            else:
                base, term = currency, self.pivot
            target.setdefault(currency, []).append(
                DatedRate(base=base, term=term, factor=1.0 / value, valid_on=valid_on, kind=kind)
            )

    @staticmethod
    def _parse_value(cell: str) -> float | None:
        if not _VALUE_PATTERN.match(cell):
            return None
        value = float(cell)
        if not math.isfinite(value) or value <= 0:
            return None
        factor = 1.0 / value
        if not math.isfinite(factor) or factor <= 0:
            return None
        return value


__all__ = ["FeedFormatError", "IMFParseResult", "IMFTSVParser"]
