"""
Parse one picks cell: "Name (Country, Country, ...)".

Single pass: first "(" and last ")". If there is no name before the "(" or no
")" after it, the whole cell is the participant and there are no picks.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Optional

from country_names import DISPLAY_ALIASES, NameNormalizer


_DEFAULT_DISPLAY = NameNormalizer(DISPLAY_ALIASES)


@dataclass(frozen=True)
class ParsedCell:
    participant: str
    countries: tuple[str, ...]
    raw: str


def _strip_diacritics(s: str) -> str:
    # NFKD splits accents; we drop combining marks
    return "".join(ch for ch in unicodedata.normalize("NFKD", s) if not unicodedata.combining(ch))


def locale_sort_key(name: str) -> tuple[str, str, str]:
    """
    Collation-style key: accents and case ignored first, then lowercase before
    uppercase, then code points so the order is total.
    """
    return (_strip_diacritics(name).casefold(), name.casefold(), name.swapcase())


def split_countries(inside: str, names: NameNormalizer) -> tuple[str, ...]:
    seen: set[str] = set()
    countries: list[str] = []
    for piece in inside.split(","):
        canon = names.normalize(piece)
        # "USA" and "US" land on the same canonical name; keep it once
        if not canon or canon in seen:
            continue
        seen.add(canon)
        countries.append(canon)
    return tuple(sorted(countries, key=locale_sort_key))


def parse_team_cell(text: object, names: Optional[NameNormalizer] = None) -> ParsedCell:
    s = "" if text is None else str(text).strip()
    open_at = s.find("(")
    close_at = s.rfind(")")

    if open_at > 0 and close_at > open_at:
        name = s[:open_at].strip()
        inside = s[open_at + 1:close_at]
        return ParsedCell(name, split_countries(inside, _DEFAULT_DISPLAY if names is None else names), s)

    return ParsedCell(s, (), s)
