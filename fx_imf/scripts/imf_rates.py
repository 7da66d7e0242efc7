"""Look up IMF SDR-based exchange rates from a saved IMF rate report."""

from __future__ import annotations

import argparse
from typing import Sequence

from fx_imf import FxIMF
from fx_imf.ingestion.models import ChainedRate
from fx_imf.utils.date_range import parse_date
from fx_imf.utils.logger import get_logger, set_verbose

LOGGER = get_logger(__name__)

__all__ = ["parse_args", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("base", help="Currency to convert from (ISO code or SDR)")
    parser.add_argument("term", help="Currency to convert to (ISO code or SDR)")
    parser.add_argument(
        "--feed",
        dest="feed_path",
        required=True,
        help="Path to the IMF 'SDR exchange rates' TSV report",
    )
    parser.add_argument(
        "--date",
        dest="as_of",
        help="Optional query date (YYYY-MM-DD); defaults to today",
    )
    parser.add_argument(
        "--amount",
        dest="amount",
        help="Optional amount of the base currency to convert",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log skipped feed lines and values",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_verbose()
    as_of = parse_date(args.as_of) if args.as_of else None
    fx = FxIMF(args.feed_path)
    rate = fx.get_rate(args.base, args.term, as_of)
    if rate is None:
        LOGGER.warning("No IMF rate available for %s -> %s", args.base, args.term)
        return 1
    print(f"1 {rate.base} = {rate.factor:.10f} {rate.term} ({rate.kind.value}, {rate.valid_on})")
    if isinstance(rate, ChainedRate):
        for leg in rate.legs:
            print(f"  via 1 {leg.base} = {leg.factor:.10f} {leg.term} ({leg.valid_on})")
    if args.amount is not None:
        converted = fx.convert(args.amount, args.base, args.term, as_of)
        print(f"{args.amount} {rate.base} = {converted} {rate.term}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
