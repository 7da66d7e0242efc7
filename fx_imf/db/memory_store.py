"""Atomically replaceable holder for the two directed rate collections."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from fx_imf.ingestion.models import DatedRate, Direction
from fx_imf.utils.logger import get_logger

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd

    from fx_imf.ingestion.imf_tsv import IMFParseResult

LOGGER = get_logger(__name__)

RateCollection = Mapping[str, tuple[DatedRate, ...]]


def _empty() -> RateCollection:
    return MappingProxyType({})


def _freeze(collection: Mapping[str, list[DatedRate]]) -> RateCollection:
    return MappingProxyType(
        {
            currency: tuple(sorted(rates, key=DatedRate.sort_key))
            for currency, rates in collection.items()
            if rates
        }
    )


@dataclass(frozen=True, slots=True)
class RateSnapshot:
    """Immutable view of both directed collections as published together."""

    pivot_to_currency: RateCollection = field(default_factory=_empty)
    currency_to_pivot: RateCollection = field(default_factory=_empty)
    version: int = 0
    loaded_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def from_parse_result(
        cls, result: "IMFParseResult", *, version: int = 0, loaded_at: datetime | None = None
    ) -> "RateSnapshot":
        return cls(
            pivot_to_currency=_freeze(result.pivot_to_currency),
            currency_to_pivot=_freeze(result.currency_to_pivot),
            version=version,
            loaded_at=loaded_at,
        )

    def collection(self, direction: Direction) -> RateCollection:
        if direction is Direction.PIVOT_TO_CURRENCY:
            return self.pivot_to_currency
        return self.currency_to_pivot

    def rates_for(self, currency: str, direction: Direction) -> tuple[DatedRate, ...] | None:
        return self.collection(direction).get(currency)

    def currencies(self) -> tuple[str, ...]:
        """Every currency with at least one rate in either direction."""

        return tuple(sorted(set(self.pivot_to_currency) | set(self.currency_to_pivot)))

    def latest_date(self) -> date | None:
        dates = [
            rates[0].valid_on
            for collection in (self.pivot_to_currency, self.currency_to_pivot)
            for rates in collection.values()
            if rates and rates[0].valid_on is not None
        ]
        return max(dates) if dates else None

    def is_empty(self) -> bool:
        return not self.pivot_to_currency and not self.currency_to_pivot

    def to_frame(self) -> "pd.DataFrame":
        """Flatten the snapshot into a long ``pandas.DataFrame``."""

        import pandas as pd

        columns = ["valid_on", "currency", "direction", "base", "term", "factor", "kind"]
        records = [
            {
                "valid_on": rate.valid_on,
                "currency": currency,
                "direction": direction.value,
                "base": rate.base,
                "term": rate.term,
                "factor": rate.factor,
                "kind": rate.kind.value,
            }
            for direction in Direction
            for currency, rates in sorted(self.collection(direction).items())
            for rate in rates
        ]
        frame = pd.DataFrame.from_records(records, columns=columns)
        if not frame.empty:
            frame["valid_on"] = pd.to_datetime(frame["valid_on"], errors="coerce")
        return frame


class RateStore:
    """Single owner of the current :class:`RateSnapshot`.

    Readers grab :attr:`snapshot` once and work on that object; a reload builds
    a new snapshot aside and swaps the reference, so a reader never sees old
    and new sequences mixed. The lock only serialises writers.
    """

    __slots__ = ("_snapshot", "_write_lock")

    def __init__(self, snapshot: RateSnapshot | None = None) -> None:
        self._snapshot = snapshot or RateSnapshot()
        self._write_lock = threading.Lock()

    @property
    def snapshot(self) -> RateSnapshot:
        return self._snapshot

    def publish(self, result: "IMFParseResult") -> RateSnapshot:
        """Replace both collections with the content of ``result``."""

        with self._write_lock:
            snapshot = RateSnapshot.from_parse_result(
                result,
                version=self._snapshot.version + 1,
                loaded_at=datetime.now(),
            )
            self._snapshot = snapshot
        for currency, rates in snapshot.pivot_to_currency.items():
            LOGGER.debug("%s -> %s: %s", rates[0].base, currency, rates)
        for currency, rates in snapshot.currency_to_pivot.items():
            LOGGER.debug("%s -> %s: %s", currency, rates[0].term, rates)
        return snapshot

    def clear(self) -> None:
        with self._write_lock:
            self._snapshot = RateSnapshot(version=self._snapshot.version + 1)


__all__ = ["RateCollection", "RateSnapshot", "RateStore"]
