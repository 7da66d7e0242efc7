"""Public interface for the fx_imf package."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import IO, Any, Callable, Dict, Iterable, List, Literal

from fx_imf.conversion.resolver import RateResolver
from fx_imf.db.memory_store import RateSnapshot, RateStore
from fx_imf.ingestion.currency_names import CurrencyAliasTable
from fx_imf.ingestion.imf_tsv import FeedFormatError, IMFParseResult, IMFTSVParser
from fx_imf.ingestion.models import ChainedRate, DatedRate, Direction, Rate, RateKind
from fx_imf.utils.date_range import DateRange, select_snapshot_dates, to_query_date
from fx_imf.utils.imf import IMF_CONTEXT, PIVOT_CURRENCY, PROVIDER_NAME, ProviderContext
from fx_imf.utils.logger import get_logger

LOGGER = get_logger(__name__)

__all__ = [
    "__version__",
    "ChainedRate",
    "CurrencyAliasTable",
    "DatedRate",
    "Direction",
    "FeedFormatError",
    "FxIMF",
    "IMFTSVParser",
    "RateKind",
    "RateResolver",
    "RateSnapshot",
    "RateStore",
]

try:
    __version__ = importlib_metadata.version("fx-imf")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"

FeedSource = IO[str] | IO[bytes] | Iterable[str]
QueryDate = date | datetime | str | None


class FxIMF:
    """Package facade that owns the IMF rate store and answers queries."""

    __slots__ = ("pivot", "today", "alias_table", "parser", "store", "resolver")

    context: ProviderContext = IMF_CONTEXT

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(
        self,
        feed: str | Path | FeedSource | None = None,
        *,
        pivot: str = PIVOT_CURRENCY,
        alias_table: CurrencyAliasTable | None = None,
        today: Callable[[], date] = date.today,
        encoding: str = "utf-8",
    ) -> None:
        """Wire parser, store and resolver together.

        ``feed`` is the initially cached data, if any: a path to a saved IMF
        report or an already open stream. Without it the store starts empty
        and every query returns ``None`` until :meth:`on_new_data` is called.
        """

        self.pivot = pivot
        self.today = today
        self.alias_table = alias_table or CurrencyAliasTable.from_locale()
        self.parser = IMFTSVParser(
            self.alias_table, pivot=pivot, today=today, encoding=encoding
        )
        self.store = RateStore()
        self.resolver = RateResolver(self.store, pivot=pivot, today=today)
        if isinstance(feed, (str, Path)):
            self.load(feed)
        elif feed is not None:
            self.on_new_data(feed)

    def on_new_data(self, stream: FeedSource) -> RateSnapshot:
        """Reload entry point for feed suppliers.

        Skipped lines never surface here. A structurally broken feed is logged
        and the previous rates stay in place; read errors on ``stream`` propagate.
        """

        try:
            result = self.parser.parse(stream)
        except FeedFormatError as exc:
            LOGGER.error("Error loading IMF feed, keeping previous rates: %s", exc)
            return self.store.snapshot
        return self._publish(result)

    def load(self, path: str | Path) -> RateSnapshot:
        """Read a saved IMF report from disk and publish it."""

        feed_path = Path(path)
        if not feed_path.exists():
            raise FileNotFoundError(feed_path)
        with feed_path.open("rb") as handle:
            return self.on_new_data(handle)

    def _publish(self, result: IMFParseResult) -> RateSnapshot:
        snapshot = self.store.publish(result)
        LOGGER.info(
            "Loaded IMF rates: %s currencies %s->currency, %s currency->%s, latest %s "
            "(skipped lines=%s, values=%s)",
            len(snapshot.pivot_to_currency),
            self.pivot,
            len(snapshot.currency_to_pivot),
            self.pivot,
            snapshot.latest_date(),
            result.skipped_lines,
            result.skipped_values,
        )
        return snapshot

    def get_rate(self, base_currency: str, term_currency: str, as_of: QueryDate = None) -> Rate | None:
        """Return the rate converting one ``base_currency`` into ``term_currency``."""

        return self.resolver.lookup(
            base_currency.strip().upper(),
            term_currency.strip().upper(),
            to_query_date(as_of),
        )

    def convert(
        self,
        amount: Decimal | int | float | str,
        base_currency: str,
        term_currency: str,
        as_of: QueryDate = None,
    ) -> Decimal | None:
        """Convert ``amount`` of ``base_currency``; ``None`` when no rate exists."""

        rate = self.get_rate(base_currency, term_currency, as_of)
        if rate is None:
            return None
        return Decimal(str(amount)) * Decimal(repr(rate.factor))

    def is_available(self, base_currency: str, term_currency: str) -> bool:
        return self.resolver.is_available(
            base_currency.strip().upper(), term_currency.strip().upper()
        )

    def currencies(self) -> tuple[str, ...]:
        return self.store.snapshot.currencies()

    def rate(self, rate_date: QueryDate = None) -> Dict[str, Any] | None:
        """Return a SDR snapshot for ``rate_date`` or the latest published date."""

        snapshot = self.store.snapshot
        grouped = self._group_rates_by_date(snapshot.pivot_to_currency.values())
        if not grouped:
            return None
        target = to_query_date(rate_date) or max(grouped.keys())
        rates = grouped.get(target)
        if rates is None:
            return None
        return self._snapshot_payload(target, rates)

    def history(
        self,
        from_date: QueryDate,
        to_date: QueryDate,
        frequency: Literal["daily", "weekly", "monthly", "yearly"] = "daily",
        *,
        currency: str | None = None,
    ) -> List[Dict[str, Any]]:
        """Return SDR snapshots within ``from_date``/``to_date``.

        Weekly/monthly/yearly buckets keep the latest snapshot in each interval.
        """

        start = to_query_date(from_date)
        end = to_query_date(to_date)
        if start is None or end is None:
            raise ValueError("from_date and to_date are required")
        if start > end:
            raise ValueError("from_date must not be after to_date")
        window = DateRange(start=start, end=end)
        snapshot = self.store.snapshot
        collections = snapshot.pivot_to_currency
        if currency is not None:
            code = currency.strip().upper()
            collections = {code: collections[code]} if code in collections else {}
        grouped = {
            day: rates
            for day, rates in self._group_rates_by_date(collections.values()).items()
            if day in window
        }
        selected = select_snapshot_dates(list(grouped.keys()), frequency.lower())
        return [self._snapshot_payload(day, grouped[day]) for day in selected]

    def to_frame(self):
        """Return the current snapshot as a ``pandas.DataFrame``."""

        return self.store.snapshot.to_frame()

    @staticmethod
    def _group_rates_by_date(
        collections: Iterable[Iterable[DatedRate]],
    ) -> Dict[date, List[DatedRate]]:
        grouped: Dict[date, List[DatedRate]] = {}
        for rates in collections:
            for rate in rates:
                if rate.valid_on is not None:
                    grouped.setdefault(rate.valid_on, []).append(rate)
        return grouped

    def _snapshot_payload(self, rate_date: date, rates: List[DatedRate]) -> Dict[str, Any]:
        return {
            "rate_date": rate_date,
            "base_currency": self.pivot,
            "source": PROVIDER_NAME,
            "provisional": any(rate.kind is RateKind.PROVISIONAL for rate in rates),
            "rates": dict(sorted((rate.term, rate.factor) for rate in rates)),
        }

