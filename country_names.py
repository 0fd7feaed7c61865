"""
Country name canonicalization.

Two alias authorities are kept apart:
- DISPLAY_ALIASES: abbreviations and shorthand typed into the picks sheet.
- MEDAL_SOURCE_ALIASES: terminology used by medal providers (Wikipedia, NOC codes).

They are chained (display first, then medal source), never merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


DISPLAY_ALIASES: Mapping[str, str] = MappingProxyType({
    "USA": "United States",
    "US": "United States",
    "U.S.": "United States",
    "U.S.A.": "United States",
    "Swiss": "Switzerland",
    "Switzerland": "Switzerland",
    "Czech": "Czech Republic",
    "Great Britain": "Great Britain",
    "UK": "Great Britain",
    "AIN": "Individual Neutral Athletes",
})

MEDAL_SOURCE_ALIASES: Mapping[str, str] = MappingProxyType({
    "People's Republic of China": "China",
    "Republic of Korea": "South Korea",
    "Korea": "South Korea",
    "Czechia": "Czech Republic",
    "United States of America": "United States",
    "The Netherlands": "Netherlands",
    "Individual Neutral Athletes (AIN)": "Individual Neutral Athletes",
    # NOC codes
    "GBR": "Great Britain",
    "CAN": "Canada",
    "GER": "Germany",
    "FRA": "France",
    "ITA": "Italy",
    "JPN": "Japan",
    "NED": "Netherlands",
    "SUI": "Switzerland",
    "AUT": "Austria",
    "NOR": "Norway",
    "SWE": "Sweden",
    "FIN": "Finland",
    "CHN": "China",
    "KOR": "South Korea",
    "CZE": "Czech Republic",
})

# ISO-3166 alpha-2 per canonical display name.
# 'Individual Neutral Athletes' intentionally has no flag.
COUNTRY_FLAG_CODES: Mapping[str, str] = MappingProxyType({
    "United States": "US",
    "Canada": "CA",
    "Great Britain": "GB",
    "Germany": "DE",
    "France": "FR",
    "Italy": "IT",
    "Japan": "JP",
    "Netherlands": "NL",
    "Switzerland": "CH",
    "Austria": "AT",
    "Belgium": "BE",
    "Norway": "NO",
    "Sweden": "SE",
    "Finland": "FI",
    "Poland": "PL",
    "Slovakia": "SK",
    "Slovenia": "SI",
    "Estonia": "EE",
    "Latvia": "LV",
    "Lithuania": "LT",
    "Ukraine": "UA",
    "China": "CN",
    "Spain": "ES",
    "Hungary": "HU",
    "Romania": "RO",
    "Australia": "AU",
    "New Zealand": "NZ",
    "Jamaica": "JM",
    "Argentina": "AR",
    "South Korea": "KR",
    "Czech Republic": "CZ",
})

_REGIONAL_INDICATOR_A = 0x1F1E6


class NameNormalizer:
    """Case-insensitive alias lookup; unknown names pass through trimmed."""

    def __init__(self, aliases: Mapping[str, str]):
        self.aliases: Mapping[str, str] = MappingProxyType(dict(aliases))
        index: dict[str, str] = {}
        for variant, canonical in self.aliases.items():
            key = str(variant).strip().lower()
            if key:
                # first configured spelling wins on case-insensitive collisions
                index.setdefault(key, canonical)
        self._index = index

    def normalize(self, name: object) -> str:
        raw = "" if name is None else str(name).strip()
        if not raw:
            return ""
        return self._index.get(raw.lower(), raw)

    def extended(self, extra: Mapping[str, str]) -> "NameNormalizer":
        """New normalizer with `extra` layered over the current aliases."""
        if not extra:
            return self
        overridden = {str(k).strip().lower() for k in extra}
        merged = dict(extra)
        for variant, canonical in self.aliases.items():
            if variant.strip().lower() not in overridden:
                merged[variant] = canonical
        return NameNormalizer(merged)

    def __len__(self) -> int:
        return len(self.aliases)

    def __repr__(self) -> str:
        return f"NameNormalizer({len(self.aliases)} aliases)"


def iso_to_flag_emoji(iso2: object) -> str:
    code = str(iso2 or "").strip().upper()
    if len(code) != 2 or not all("A" <= ch <= "Z" for ch in code):
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(ch) - ord("A")) for ch in code)


@dataclass(frozen=True)
class CountryResolver:
    """
    Bundles the three naming authorities used by the pipeline:
    display aliases, medal-source aliases and the flag-code table.
    """

    display: NameNormalizer = field(default_factory=lambda: NameNormalizer(DISPLAY_ALIASES))
    medal: NameNormalizer = field(default_factory=lambda: NameNormalizer(MEDAL_SOURCE_ALIASES))
    flag_codes: Mapping[str, str] = field(default_factory=lambda: COUNTRY_FLAG_CODES)

    def display_name(self, raw: object) -> str:
        return self.display.normalize(raw)

    def medal_key(self, raw: object) -> str:
        """Display pass, then medal-source pass."""
        return self.medal.normalize(self.display.normalize(raw))

    def flag(self, country: object) -> str:
        name = str(country or "").strip()
        if not name:
            return ""
        return iso_to_flag_emoji(self.flag_codes.get(name, ""))


def default_resolver(
    display_overrides: Optional[Mapping[str, str]] = None,
    medal_overrides: Optional[Mapping[str, str]] = None,
) -> CountryResolver:
    display = NameNormalizer(DISPLAY_ALIASES).extended(display_overrides or {})
    medal = NameNormalizer(MEDAL_SOURCE_ALIASES).extended(medal_overrides or {})
    return CountryResolver(display=display, medal=medal)
