"""Point-in-time rate selection and chaining through the SDR pivot."""

from __future__ import annotations

from datetime import date
from typing import Callable, Sequence

from fx_imf.db.memory_store import RateSnapshot, RateStore
from fx_imf.ingestion.models import ChainedRate, DatedRate, Direction, Rate
from fx_imf.utils.imf import PIVOT_CURRENCY


def nearest(rates: Sequence[DatedRate] | None, at: date) -> DatedRate | None:
    """Return the rate valid on ``at``, else the most recent one.

    ``rates`` must already be ordered newest first.
    """

    if not rates:
        return None
    for rate in rates:
        if rate.valid_on is not None and rate.valid_on == at:
            return rate
    return rates[0]


class RateResolver:
    """Answer ``base -> term`` queries against the store's current snapshot."""

    def __init__(
        self,
        store: RateStore,
        *,
        pivot: str = PIVOT_CURRENCY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.pivot = pivot
        self.today = today

    def lookup(self, base: str, term: str, at: date | None = None) -> Rate | None:
        snapshot = self.store.snapshot
        query_date = at if at is not None else self.today()

        if base == term:
            return DatedRate(base=base, term=term, factor=1.0, valid_on=query_date)
        if base == self.pivot:
            return self._nearest(snapshot, term, Direction.PIVOT_TO_CURRENCY, query_date)
        if term == self.pivot:
            return self._nearest(snapshot, base, Direction.CURRENCY_TO_PIVOT, query_date)

        first = self._nearest(snapshot, base, Direction.CURRENCY_TO_PIVOT, query_date)
        if first is None:
            return None
        second = self._nearest(snapshot, term, Direction.PIVOT_TO_CURRENCY, query_date)
        if second is None:
            return None
        return ChainedRate.compose(first, second)

    def is_available(self, base: str, term: str) -> bool:
        """Whether :meth:`lookup` can produce a rate for some date."""

        if base == term:
            return True
        snapshot = self.store.snapshot
        base_known = base == self.pivot or base in snapshot.currency_to_pivot
        term_known = term == self.pivot or term in snapshot.pivot_to_currency
        return base_known and term_known

    @staticmethod
    def _nearest(
        snapshot: RateSnapshot, currency: str, direction: Direction, at: date
    ) -> DatedRate | None:
        return nearest(snapshot.rates_for(currency, direction), at)


__all__ = ["RateResolver", "nearest"]
