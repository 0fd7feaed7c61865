"""
Rank entries and attach medal data to every picked country.

Ordering: points descending, stable (equal points keep sheet order).
The podium is a slice of the ranked rows, never a second sort.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from country_names import CountryResolver
from medal_index import MedalIndex, MedalLookup, MedalRecord
from sheet_rows import Entry

PODIUM_TIERS = ("gold", "silver", "bronze")


def podium_tier(rank: int) -> str:
    if 1 <= rank <= len(PODIUM_TIERS):
        return PODIUM_TIERS[rank - 1]
    return ""


@dataclass(frozen=True)
class Pick:
    country: str
    flag: str
    medals: MedalLookup

    def as_dict(self) -> dict:
        return {"country": self.country, "flag": self.flag, "medals": self.medals.as_value()}


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    entry: Entry
    picks: tuple[Pick, ...]

    @property
    def participant(self) -> str:
        return self.entry.participant

    @property
    def points(self):
        return self.entry.points

    @property
    def countries(self) -> tuple[str, ...]:
        return self.entry.countries

    @property
    def podium(self) -> str:
        return podium_tier(self.rank)

    @property
    def display_text(self) -> str:
        """Participant name, or the raw cell when no picks could be parsed."""
        return self.entry.participant if self.entry.countries else self.entry.raw_text

    def medal_totals(self) -> MedalRecord:
        """Sum over picks with a known medal record."""
        known = [p.medals.record for p in self.picks if p.medals.record is not None]
        return MedalRecord(
            gold=sum(r.gold for r in known),
            silver=sum(r.silver for r in known),
            bronze=sum(r.bronze for r in known),
            total=sum(r.total for r in known),
        )

    def as_dict(self) -> dict:
        return {
            "rank": self.rank,
            "podium": self.podium,
            "participant": self.participant,
            "display": self.display_text,
            "raw_text": self.entry.raw_text,
            "points": self.points,
            "countries": list(self.countries),
            "picks": [p.as_dict() for p in self.picks],
            "medal_totals": self.medal_totals().as_dict(),
            "unknown_medals": sum(1 for p in self.picks if not p.medals.known),
        }


@dataclass(frozen=True)
class Leaderboard:
    rows: tuple[LeaderboardRow, ...] = ()

    @property
    def podium(self) -> tuple[LeaderboardRow, ...]:
        return self.rows[:3]

    def __len__(self) -> int:
        return len(self.rows)

    def as_dict(self) -> dict:
        return {
            "rows": [r.as_dict() for r in self.rows],
            "podium": [r.as_dict() for r in self.podium],
        }


def rank_entries(entries: Iterable[Entry]) -> list[Entry]:
    # sorted() is stable, which is the tie-break policy
    return sorted(entries, key=lambda e: -e.points)


def build_leaderboard(
    entries: Iterable[Entry],
    medal_index: Optional[MedalIndex] = None,
    resolver: Optional[CountryResolver] = None,
) -> Leaderboard:
    resolver = resolver or CountryResolver()
    index = medal_index if medal_index is not None else MedalIndex(resolver=resolver)

    rows = []
    for rank, entry in enumerate(rank_entries(entries), start=1):
        picks = tuple(
            Pick(country=c, flag=resolver.flag(c), medals=index.lookup(c))
            for c in entry.countries
        )
        rows.append(LeaderboardRow(rank=rank, entry=entry, picks=picks))
    return Leaderboard(tuple(rows))
