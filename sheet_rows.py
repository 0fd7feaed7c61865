"""
Map loosely-typed spreadsheet records onto Entry objects.

Column names drift between sheet revisions, so each field is looked up through
an ordered list of accepted spellings (first present, non-empty value wins).
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, Union

from country_names import NameNormalizer
from team_cell import parse_team_cell

logger = logging.getLogger(__name__)

TEAM_FIELDS: tuple[str, ...] = ("Teams", "teams", "Team", "Participant")
POINTS_FIELDS: tuple[str, ...] = ("Points", "points", "POINTS", "Total Points", "Points ")

Number = Union[int, float]


@dataclass(frozen=True)
class Entry:
    participant: str
    countries: tuple[str, ...]
    raw_text: str
    points: Number = 0


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def first_present(record: Mapping[str, object], fields: Sequence[str]) -> Optional[object]:
    """Value under the first key in `fields` that holds something non-blank."""
    for key in fields:
        if key in record and not is_blank(record[key]):
            return record[key]
    return None


def safe_number(value: object) -> Number:
    """
    Lenient numeric coercion: numbers as-is, numeric strings after trimming,
    anything else (including NaN/inf and booleans) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        n = float(value)
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return 0
        try:
            n = float(text)
        except ValueError:
            return 0
    if not math.isfinite(n):
        return 0
    return int(n) if n.is_integer() else n


def normalize_row(record: Mapping[str, object], names: Optional[NameNormalizer] = None) -> Entry:
    cell = first_present(record, TEAM_FIELDS)
    points = safe_number(first_present(record, POINTS_FIELDS))

    parsed = parse_team_cell("" if cell is None else str(cell), names)
    return Entry(
        participant=parsed.participant,
        countries=parsed.countries,
        raw_text=parsed.raw,
        points=points,
    )


def normalize_rows(
    records: Iterable[Mapping[str, object]],
    names: Optional[NameNormalizer] = None,
) -> list[Entry]:
    """Normalize every record and drop the ones without a participant name."""
    entries: list[Entry] = []
    skipped = 0
    for record in records:
        entry = normalize_row(record, names)
        if not entry.participant:
            skipped += 1
            continue
        entries.append(entry)
    if skipped:
        logger.debug("Skipped %d rows with no participant", skipped)
    return entries
