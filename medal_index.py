"""
medal_index.py: country -> medal tally lookup

Sources:
- a "Medal Count" sheet inside the picks workbook
- a Wikipedia medal table page (parsed with BeautifulSoup)

Rows that do not resolve to a country are skipped. Numeric cells are lenient.
A missing source yields an empty index; lookups against it report "unknown".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional

from bs4 import BeautifulSoup

from country_names import CountryResolver
from sheet_rows import first_present, is_blank, safe_number

logger = logging.getLogger(__name__)

COUNTRY_FIELDS = ("Country", "country", "NOC")
GOLD_FIELDS = ("Gold Medals", "Gold")
SILVER_FIELDS = ("Silver Medals", "Silver")
BRONZE_FIELDS = ("Bronze Medals", "Bronze")
TOTAL_FIELDS = ("Total Medals", "Total")

STATUS_EXCEL = "Excel (Medal Count)"
STATUS_WIKIPEDIA = "Wikipedia medal table"
STATUS_MISSING_SHEET = "Missing Medal Count sheet"
STATUS_UNAVAILABLE = "Medals unavailable"
STATUS_ERROR = "Error"

UNKNOWN = "unknown"


@dataclass(frozen=True)
class MedalRecord:
    gold: int = 0
    silver: int = 0
    bronze: int = 0
    total: int = 0

    def as_dict(self) -> dict:
        return {"gold": self.gold, "silver": self.silver, "bronze": self.bronze, "total": self.total}


@dataclass(frozen=True)
class MedalLookup:
    """Result of joining one picked country against the index."""

    country: str
    record: Optional[MedalRecord] = None

    @property
    def known(self) -> bool:
        return self.record is not None

    def as_value(self):
        return self.record.as_dict() if self.record is not None else UNKNOWN


class MedalIndex(Mapping[str, MedalRecord]):
    """Immutable mapping keyed by medal-source canonical country name."""

    def __init__(
        self,
        records: Optional[Mapping[str, MedalRecord]] = None,
        resolver: Optional[CountryResolver] = None,
    ):
        self._records: dict[str, MedalRecord] = dict(records or {})
        self._folded: dict[str, MedalRecord] = {}
        for k, v in self._records.items():
            self._folded.setdefault(k.casefold(), v)
        self._resolver = resolver or CountryResolver()

    def __getitem__(self, key: str) -> MedalRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"MedalIndex({len(self._records)} countries)"

    def lookup(self, country: object) -> MedalLookup:
        key = self._resolver.medal_key(country)
        return MedalLookup(country=key, record=self._folded.get(key.casefold()) if key else None)


def _medal_count(value: object) -> int:
    n = safe_number(value)
    return max(0, int(n))


def medal_record_from_row(row: Mapping[str, object]) -> MedalRecord:
    gold = _medal_count(first_present(row, GOLD_FIELDS))
    silver = _medal_count(first_present(row, SILVER_FIELDS))
    bronze = _medal_count(first_present(row, BRONZE_FIELDS))
    total_raw = first_present(row, TOTAL_FIELDS)
    total = gold + silver + bronze if is_blank(total_raw) else _medal_count(total_raw)
    return MedalRecord(gold=gold, silver=silver, bronze=bronze, total=total)


def build_medal_index(
    rows: Optional[Iterable[Mapping[str, object]]],
    resolver: Optional[CountryResolver] = None,
) -> MedalIndex:
    resolver = resolver or CountryResolver()
    if rows is None:
        return MedalIndex(resolver=resolver)

    records: dict[str, MedalRecord] = {}
    seen: set[str] = set()
    skipped = 0
    for row in rows:
        raw_country = first_present(row, COUNTRY_FIELDS)
        country = resolver.medal_key(raw_country) if raw_country is not None else ""
        if not country:
            skipped += 1
            continue
        if country.casefold() in seen:
            logger.warning("Duplicate medal row for %s ignored", country)
            continue
        seen.add(country.casefold())
        records[country] = medal_record_from_row(row)

    if skipped:
        logger.info("Medal source: skipped %d rows without a country", skipped)
    return MedalIndex(records, resolver=resolver)


# ------------------------------------------------------------
# Wikipedia medal table
# ------------------------------------------------------------
_FOOTNOTE_RE = re.compile(r"\[[^\]]*\]")
_INT_RE = re.compile(r"^\d+$")


def clean_nation_text(text: str) -> str:
    t = (text or "").replace("\xa0", " ")
    t = _FOOTNOTE_RE.sub("", t)
    t = t.replace("*", "").replace("†", "").replace("‡", "")
    return re.sub(r"\s+", " ", t).strip()


def _is_medal_table(table) -> bool:
    labels = {th.get_text(" ", strip=True).lower() for th in table.find_all("th")}
    return {"gold", "silver", "bronze"} <= labels


def parse_wikipedia_medal_table(html: str) -> list[dict]:
    """
    Rows as {"Country", "Gold", "Silver", "Bronze", "Total"} dicts.

    Rank cells use rowspan on ties, so columns are not positional: the nation is
    the row header (or first non-numeric cell) and medals are the last four integers.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    table = next((t for t in soup.find_all("table", class_="wikitable") if _is_medal_table(t)), None)
    if table is None:
        return []

    out: list[dict] = []
    for tr in table.find_all("tr"):
        cells = tr.find_all(["td", "th"])
        if not tr.find("td"):
            continue
        texts = [c.get_text(" ", strip=True) for c in cells]
        numbers = [int(t) for t in texts if _INT_RE.match(t)]
        if len(numbers) < 4:
            continue

        row_header = tr.find("th", scope="row")
        if row_header is not None:
            nation = clean_nation_text(row_header.get_text(" ", strip=True))
        else:
            nation = next(
                (clean_nation_text(t) for t in texts if t and not _INT_RE.match(t)),
                "",
            )
        if not nation or nation.lower().startswith("total"):
            continue

        gold, silver, bronze, total = numbers[-4:]
        out.append({"Country": nation, "Gold": gold, "Silver": silver, "Bronze": bronze, "Total": total})

    return out


@dataclass(frozen=True)
class MedalSource:
    """Medal index for one cycle plus how it was obtained."""

    index: MedalIndex
    status: str
    updated_at: Optional[str] = None

    @classmethod
    def degraded(cls, status: str, resolver: Optional[CountryResolver] = None) -> "MedalSource":
        return cls(MedalIndex(resolver=resolver), status, None)
