"""Rate value objects produced by the IMF feed parser and resolver."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

from fx_imf.utils.imf import PROVIDER_NAME


class RateKind(str, Enum):
    """Whether a rate is a settled observation or a same-day one."""

    PROVISIONAL = "provisional"
    HISTORICAL = "historical"


class Direction(str, Enum):
    """Which side of a stored rate the pivot currency sits on."""

    CURRENCY_TO_PIVOT = "currency_to_pivot"
    PIVOT_TO_CURRENCY = "pivot_to_currency"


@dataclass(frozen=True, slots=True)
class DatedRate:
    """``1 base == factor term`` as observed on ``valid_on``."""

    base: str
    term: str
    factor: float
    valid_on: date | None
    kind: RateKind = RateKind.HISTORICAL
    provider: str = PROVIDER_NAME

    def __post_init__(self) -> None:
        if not math.isfinite(self.factor) or self.factor <= 0:
            raise ValueError(f"factor must be positive and finite, got {self.factor!r}")

    def sort_key(self) -> tuple[int, int]:
        """Descending-date key; undated records sort last."""

        if self.valid_on is None:
            return (1, 0)
        return (0, -self.valid_on.toordinal())


@dataclass(frozen=True, slots=True)
class ChainedRate:
    """Rate composed through the pivot: ``base -> pivot -> term``."""

    base: str
    term: str
    factor: float
    legs: tuple[DatedRate, DatedRate]
    kind: RateKind = RateKind.HISTORICAL
    provider: str = PROVIDER_NAME

    @classmethod
    def compose(cls, first: DatedRate, second: DatedRate) -> "ChainedRate":
        """Chain ``first`` (base -> pivot) with ``second`` (pivot -> term)."""

        if first.term != second.base:
            raise ValueError(
                f"Cannot chain {first.base}->{first.term} with {second.base}->{second.term}"
            )
        return cls(
            base=first.base,
            term=second.term,
            factor=first.factor * second.factor,
            legs=(first, second),
        )

    @property
    def valid_on(self) -> date | None:
        """Oldest leg date, i.e. the date the chained quote is good for at best."""

        dates = [leg.valid_on for leg in self.legs if leg.valid_on is not None]
        return min(dates) if dates else None


Rate = Union[DatedRate, ChainedRate]


__all__ = ["ChainedRate", "DatedRate", "Direction", "Rate", "RateKind"]
