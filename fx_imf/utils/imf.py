"""IMF-specific constants and provider metadata used across the package."""

from __future__ import annotations

from dataclasses import dataclass, field

PIVOT_CURRENCY = "SDR"

PROVIDER_NAME = "IMF"

# Values in this section are SDR per one currency unit.
SDR_PER_CURRENCY_MARKER = "SDRs per Currency unit"
# Values in this section are currency units per one SDR.
CURRENCY_PER_SDR_MARKER = "Currency units per SDR"
HEADER_LABEL = "Currency"

# Header dates read "January 31, 2013"; the feed always spells months in English.
ENGLISH_MONTHS: dict[str, int] = {
    name: number
    for number, name in enumerate(
        (
            "january",
            "february",
            "march",
            "april",
            "may",
            "june",
            "july",
            "august",
            "september",
            "october",
            "november",
            "december",
        ),
        start=1,
    )
}
NOMINAL_FRACTION_DIGITS = 10


@dataclass(frozen=True, slots=True)
class ProviderContext:
    """Static description of the rate provider."""

    name: str
    description: str
    rate_kinds: tuple[str, ...] = ("provisional", "historical")
    days: int = 1
    attributes: dict[str, str] = field(default_factory=dict)


IMF_CONTEXT = ProviderContext(
    name=PROVIDER_NAME,
    description="International Monetary Fund",
    attributes={"pivot": PIVOT_CURRENCY},
)


__all__ = [
    "CURRENCY_PER_SDR_MARKER",
    "ENGLISH_MONTHS",
    "HEADER_LABEL",
    "IMF_CONTEXT",
    "NOMINAL_FRACTION_DIGITS",
    "PIVOT_CURRENCY",
    "PROVIDER_NAME",
    "ProviderContext",
    "SDR_PER_CURRENCY_MARKER",
]
