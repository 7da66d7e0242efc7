"""Map the currency display names used by the IMF feed onto ISO codes."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from babel.numbers import get_currency_name, list_currencies

# Names the IMF feed spells differently from the CLDR English display names.
IMF_NAME_OVERRIDES: dict[str, str] = {
    "U.K. Pound Sterling": "GBP",
    "U.S. Dollar": "USD",
    "Bahrain Dinar": "BHD",
    "Botswana Pula": "BWP",
    "Czech Koruna": "CZK",
    "Icelandic Krona": "ISK",
    "Korean Won": "KRW",
    "Rial Omani": "OMR",
    "Nuevo Sol": "PEN",
    "Qatar Riyal": "QAR",
    "Saudi Arabian Riyal": "SAR",
    "Sri Lanka Rupee": "LKR",
    "Trinidad And Tobago Dollar": "TTD",
    "U.A.E. Dirham": "AED",
    "Peso Uruguayo": "UYU",
    "Bolivar Fuerte": "VEF",
}


class CurrencyAliasTable:
    """Immutable display-name to currency-code lookup.

    Exact names win; a case-insensitive match is tried next because newer IMF
    extracts lower-case the second word ("U.S. dollar").
    """

    __slots__ = ("_exact", "_folded")

    def __init__(self, names: Mapping[str, str]) -> None:
        exact = {name.strip(): code.upper() for name, code in names.items() if name.strip()}
        folded: dict[str, str] = {}
        for name, code in exact.items():
            folded.setdefault(name.casefold(), code)
        self._exact: Mapping[str, str] = MappingProxyType(exact)
        self._folded: Mapping[str, str] = MappingProxyType(folded)

    @classmethod
    def from_locale(
        cls,
        locale: str = "en",
        *,
        overrides: Mapping[str, str] | None = None,
        codes: Iterable[str] | None = None,
    ) -> "CurrencyAliasTable":
        """Build the table from CLDR display names plus the IMF overrides."""

        names: dict[str, str] = {}
        for code in sorted(codes if codes is not None else list_currencies()):
            display_name = get_currency_name(code, locale=locale)
            if display_name and display_name != code:
                names[display_name] = code
        names.update(IMF_NAME_OVERRIDES if overrides is None else overrides)
        return cls(names)

    def resolve(self, display_name: str) -> str | None:
        """Return the currency code for ``display_name`` or ``None`` when unknown."""

        name = display_name.strip()
        if not name:
            return None
        code = self._exact.get(name)
        if code is None:
            code = self._folded.get(name.casefold())
        return code

    def __contains__(self, display_name: object) -> bool:
        return isinstance(display_name, str) and self.resolve(display_name) is not None

    def __len__(self) -> int:
        return len(self._exact)


__all__ = ["CurrencyAliasTable", "IMF_NAME_OVERRIDES"]
