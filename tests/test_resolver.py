from __future__ import annotations

from datetime import date

import pytest

from fx_imf.conversion.resolver import RateResolver, nearest
from fx_imf.db.memory_store import RateStore
from fx_imf.ingestion.imf_tsv import IMFParseResult, IMFTSVParser
from fx_imf.ingestion.models import ChainedRate, DatedRate, RateKind


@pytest.fixture()
def resolver(parser: IMFTSVParser, feed_text: str, feed_today: date) -> RateResolver:
    store = RateStore()
    store.publish(parser.parse_text(feed_text))
    return RateResolver(store, today=lambda: feed_today)


def _store_with(*rates: DatedRate) -> RateStore:
    result = IMFParseResult()
    for rate in rates:
        if rate.base == "SDR":
            result.pivot_to_currency.setdefault(rate.term, []).append(rate)
        else:
            result.currency_to_pivot.setdefault(rate.base, []).append(rate)
    store = RateStore()
    store.publish(result)
    return store


def test_pivot_base_uses_pivot_to_currency(resolver: RateResolver) -> None:
    rate = resolver.lookup("SDR", "EUR", date(2013, 1, 30))

    assert isinstance(rate, DatedRate)
    assert (rate.base, rate.term, rate.valid_on) == ("SDR", "EUR", date(2013, 1, 30))
    assert rate.factor == pytest.approx(1 / 0.878917)


def test_pivot_term_uses_currency_to_pivot(resolver: RateResolver) -> None:
    rate = resolver.lookup("USD", "SDR", date(2013, 1, 29))

    assert isinstance(rate, DatedRate)
    assert (rate.base, rate.term, rate.valid_on) == ("USD", "SDR", date(2013, 1, 29))
    assert rate.factor == pytest.approx(1 / 1.51515)


def test_cross_rate_is_chained_through_pivot(resolver: RateResolver) -> None:
    rate = resolver.lookup("EUR", "USD", date(2013, 1, 31))

    assert isinstance(rate, ChainedRate)
    assert rate.kind is RateKind.HISTORICAL
    first, second = rate.legs
    assert (first.base, first.term) == ("EUR", "SDR")
    assert (second.base, second.term) == ("SDR", "USD")
    assert rate.factor == pytest.approx((1 / 1.13752) * (1 / 0.65))
    assert rate.valid_on == date(2013, 1, 31)


def test_chained_factor_is_product_of_legs() -> None:
    store = _store_with(
        DatedRate(base="GBP", term="SDR", factor=2.0, valid_on=date(2013, 1, 25)),
        DatedRate(base="SDR", term="JPY", factor=0.5, valid_on=date(2013, 1, 25)),
    )
    resolver = RateResolver(store, today=lambda: date(2013, 1, 25))

    rate = resolver.lookup("GBP", "JPY")

    assert isinstance(rate, ChainedRate)
    assert rate.factor == pytest.approx(1.0)
    assert rate.kind is RateKind.HISTORICAL
    assert len(rate.legs) == 2


def test_missing_date_falls_back_to_most_recent() -> None:
    store = _store_with(DatedRate(base="SDR", term="EUR", factor=1.1, valid_on=date(2013, 1, 25)))
    resolver = RateResolver(store)

    rate = resolver.lookup("SDR", "EUR", date(2013, 2, 1))

    assert rate is not None
    assert rate.valid_on == date(2013, 1, 25)


def test_query_date_defaults_to_today(resolver: RateResolver) -> None:
    # today (2013-02-01) has no observation, so the newest record answers
    rate = resolver.lookup("SDR", "USD")

    assert rate is not None
    assert rate.valid_on == date(2013, 1, 31)


def test_empty_cell_falls_back_instead_of_failing(resolver: RateResolver) -> None:
    rate = resolver.lookup("SDR", "USD", date(2013, 1, 30))

    assert rate is not None
    assert rate.valid_on == date(2013, 1, 31)


@pytest.mark.parametrize(
    "base, term",
    [("SDR", "GBP"), ("GBP", "SDR"), ("GBP", "EUR"), ("EUR", "GBP")],
)
def test_unknown_currency_yields_none(resolver: RateResolver, base: str, term: str) -> None:
    assert resolver.lookup(base, term, date(2013, 1, 31)) is None
    assert resolver.is_available(base, term) is False


def test_same_currency_is_identity(resolver: RateResolver) -> None:
    rate = resolver.lookup("EUR", "EUR", date(2013, 1, 31))

    assert isinstance(rate, DatedRate)
    assert rate.factor == 1.0
    assert rate.valid_on == date(2013, 1, 31)
    assert resolver.is_available("XYZ", "XYZ")


def test_is_available_for_known_pairs(resolver: RateResolver) -> None:
    assert resolver.is_available("EUR", "USD")
    assert resolver.is_available("SDR", "EUR")
    assert resolver.is_available("USD", "SDR")


def test_reload_during_query_is_not_observed(
    resolver: RateResolver, parser: IMFTSVParser, monkeypatch
) -> None:
    replacement = parser.parse_text(
        "SDRs per Currency unit\nCurrency\tJanuary 31, 2013\nEuro\t0.5\nU.S. Dollar\t0.5\n"
        "Currency units per SDR\nCurrency\tJanuary 31, 2013\nEuro\t2.0\nU.S. Dollar\t2.0\n"
    )
    original = RateResolver._nearest
    calls: list[int] = []

    def reloading_nearest(snapshot, currency, direction, at):
        if not calls:
            resolver.store.publish(replacement)
        calls.append(snapshot.version)
        return original(snapshot, currency, direction, at)

    monkeypatch.setattr(RateResolver, "_nearest", staticmethod(reloading_nearest))

    rate = resolver.lookup("EUR", "USD", date(2013, 1, 31))

    assert calls == [1, 1]
    assert rate is not None
    assert rate.factor == pytest.approx((1 / 1.13752) * (1 / 0.65))
    assert resolver.store.snapshot.version == 2


def test_nearest_never_matches_undated_records_exactly() -> None:
    undated = DatedRate(base="SDR", term="EUR", factor=1.0, valid_on=None)
    dated = DatedRate(base="SDR", term="EUR", factor=2.0, valid_on=date(2013, 1, 1))

    assert nearest([dated, undated], date(2013, 1, 1)) is dated
    assert nearest([undated], date(2013, 1, 1)) is undated
    assert nearest(None, date(2013, 1, 1)) is None
    assert nearest((), date(2013, 1, 1)) is None
