"""
Runtime configuration for the tracker: defaults, CLI options and alias overrides.

Alias override CSV format: alias, canonical (blank rows ignored).
No guessing. A missing file means "defaults only".
"""

from __future__ import annotations

import argparse
import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from country_names import CountryResolver, default_resolver

DEFAULT_WORKBOOK = "OlympicTracker.xlsx"
DEFAULT_POINTS_SHEET = "Display Points"
DEFAULT_MEDAL_SHEET = "Medal Count"
DEFAULT_WIKIPEDIA_URL = "https://en.wikipedia.org/wiki/2026_Winter_Olympics_medal_table"
DEFAULT_REFRESH_SECONDS = 60
DEFAULT_TIMEOUT_SECONDS = 20

OUT = Path("out")
DEFAULT_OUT_JSON = OUT / "leaderboard.json"
DEFAULT_STATUS_JSON = OUT / "status.json"

MEDAL_SOURCES = ("excel", "wikipedia", "none")


def load_alias_csv(path: Optional[str | Path]) -> dict[str, str]:
    """
    Read-only alias overrides.
    Returns: dict[alias] -> canonical
    """
    aliases: dict[str, str] = {}
    if not path:
        return aliases
    p = Path(path)
    if not p.exists():
        return aliases

    with p.open("r", encoding="utf-8", newline="") as f:
        for row in csv.DictReader(f):
            alias = (row.get("alias") or "").strip()
            canonical = (row.get("canonical") or "").strip()
            if alias and canonical:
                aliases[alias] = canonical

    return aliases


@dataclass(frozen=True)
class TrackerConfig:
    workbook: str = DEFAULT_WORKBOOK
    points_sheet: str = DEFAULT_POINTS_SHEET
    medal_sheet: str = DEFAULT_MEDAL_SHEET
    medal_source: str = "excel"
    wikipedia_url: str = DEFAULT_WIKIPEDIA_URL
    out_json: Path = DEFAULT_OUT_JSON
    status_json: Path = DEFAULT_STATUS_JSON
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    display_aliases_csv: Optional[Path] = None
    medal_aliases_csv: Optional[Path] = None
    once: bool = False
    log_file: Optional[Path] = None
    verbose: bool = False

    def __post_init__(self):
        if self.medal_source not in MEDAL_SOURCES:
            raise ValueError(f"medal_source must be one of {MEDAL_SOURCES}, got {self.medal_source!r}")
        if self.refresh_seconds <= 0:
            raise ValueError(f"refresh_seconds must be positive, got {self.refresh_seconds}")

    def resolver(self) -> CountryResolver:
        return default_resolver(
            display_overrides=load_alias_csv(self.display_aliases_csv),
            medal_overrides=load_alias_csv(self.medal_aliases_csv),
        )


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Olympic picks leaderboard: rank entries and merge medal counts.")
    ap.add_argument("--workbook", default=DEFAULT_WORKBOOK,
                    help="Path or http(s) URL of the picks workbook (.xlsx)")
    ap.add_argument("--points-sheet", default=DEFAULT_POINTS_SHEET)
    ap.add_argument("--medal-sheet", default=DEFAULT_MEDAL_SHEET)
    ap.add_argument("--medal-source", choices=MEDAL_SOURCES, default="excel",
                    help="Where medal counts come from")
    ap.add_argument("--wikipedia-url", default=DEFAULT_WIKIPEDIA_URL)
    ap.add_argument("--out", dest="out_json", type=Path, default=DEFAULT_OUT_JSON)
    ap.add_argument("--status", dest="status_json", type=Path, default=DEFAULT_STATUS_JSON)
    ap.add_argument("--interval", dest="refresh_seconds", type=int, default=DEFAULT_REFRESH_SECONDS,
                    help="Seconds between refresh cycles")
    ap.add_argument("--timeout", dest="timeout_seconds", type=int, default=DEFAULT_TIMEOUT_SECONDS)
    ap.add_argument("--display-aliases", dest="display_aliases_csv", type=Path, default=None,
                    help="CSV (alias,canonical) layered over the built-in display aliases")
    ap.add_argument("--medal-aliases", dest="medal_aliases_csv", type=Path, default=None,
                    help="CSV (alias,canonical) layered over the built-in medal-source aliases")
    ap.add_argument("--once", action="store_true", help="Run a single refresh cycle and exit")
    ap.add_argument("--log-file", type=Path, default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def config_from_args(argv: Optional[Sequence[str]] = None) -> TrackerConfig:
    args = build_arg_parser().parse_args(argv)
    return TrackerConfig(**vars(args))
