from __future__ import annotations

from datetime import date

import pytest

from fx_imf.ingestion.imf_tsv import IMFTSVParser

FEED_TODAY = date(2013, 2, 1)

SAMPLE_FEED = "\n".join(
    [
        "SDRs per Currency unit (2)",
        "",
        "Currency\tJanuary 31, 2013\tJanuary 30, 2013\tJanuary 29, 2013",
        "Euro\t0.8791080000\t0.8789170000\t0.8742470000",
        "U.S. Dollar\t0.6500000000\t\t0.6600000000",
        "Atlantis Crown\t1.0000000000\t1.0000000000\t1.0000000000",
        "",
        "Currency units per SDR(3)",
        "",
        "Currency\tJanuary 31, 2013\tJanuary 30, 2013\tJanuary 29, 2013",
        "Euro\t1.137520\t1.137760\t1.143840",
        "U.S. Dollar\t1.538460\t1.540000\t1.515150",
        "",
    ]
)


@pytest.fixture()
def feed_text() -> str:
    return SAMPLE_FEED


@pytest.fixture()
def parser() -> IMFTSVParser:
    return IMFTSVParser(today=lambda: FEED_TODAY)


@pytest.fixture()
def feed_today() -> date:
    return FEED_TODAY
