#!/usr/bin/env python3
"""
master.py: Olympic picks workbook → ranked, medal-enriched leaderboard JSON

One refresh cycle:
- Fetch the picks workbook (local path or URL)
- Read the "Display Points" sheet (required) into Entries
- Build the medal index from the "Medal Count" sheet or a Wikipedia medal table
  (optional: a missing/failed source degrades to "unknown" medals)
- Rank, join medals, publish a complete snapshot atomically

A failed cycle never blanks the published leaderboard: the previous snapshot
stays in place and the error goes to the status file. Only the first load
publishes an error snapshot.

Output: out/leaderboard.json, out/status.json
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

import requests

from country_names import CountryResolver
from fetch import fetch_bytes, fetch_text, make_session
from leaderboard import Leaderboard, build_leaderboard
from medal_index import (
    STATUS_ERROR,
    STATUS_EXCEL,
    STATUS_MISSING_SHEET,
    STATUS_UNAVAILABLE,
    STATUS_WIKIPEDIA,
    MedalSource,
    build_medal_index,
    parse_wikipedia_medal_table,
)
from sheet_rows import normalize_rows
from tracker_common import TrackerError, fail, utc_now, write_json_atomic
from tracker_config import TrackerConfig, config_from_args
from workbook_source import open_workbook, optional_sheet_records, sheet_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    leaderboard: Leaderboard = field(default_factory=Leaderboard)
    medal_status: str = STATUS_UNAVAILABLE
    points_updated_at: Optional[str] = None
    medals_updated_at: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        out = self.leaderboard.as_dict()
        out.update({
            "medal_status": self.medal_status,
            "points_updated_at": self.points_updated_at,
            "medals_updated_at": self.medals_updated_at,
            "error": self.error,
        })
        return out


# ------------------------------------------------------------
# Medal source
# ------------------------------------------------------------
def load_medal_source(
    cfg: TrackerConfig,
    xls,
    resolver: CountryResolver,
    session: Optional[requests.Session] = None,
    text_fetcher: Callable[..., str] = fetch_text,
) -> MedalSource:
    if cfg.medal_source == "excel":
        try:
            rows = optional_sheet_records(xls, cfg.medal_sheet)
        except TrackerError as e:
            logger.warning("Medal sheet unreadable: %s", e)
            return MedalSource.degraded(STATUS_UNAVAILABLE, resolver)
        if rows is None:
            logger.warning('Sheet "%s" not found; medals shown as unknown', cfg.medal_sheet)
            return MedalSource.degraded(STATUS_MISSING_SHEET, resolver)
        return MedalSource(build_medal_index(rows, resolver), STATUS_EXCEL, utc_now())

    if cfg.medal_source == "wikipedia":
        try:
            html = text_fetcher(cfg.wikipedia_url, session=session, timeout=cfg.timeout_seconds)
        except TrackerError as e:
            logger.warning("Medal table unavailable: %s", e)
            return MedalSource.degraded(STATUS_UNAVAILABLE, resolver)
        rows = parse_wikipedia_medal_table(html)
        if not rows:
            logger.warning("No medal table found at %s", cfg.wikipedia_url)
            return MedalSource.degraded(STATUS_UNAVAILABLE, resolver)
        return MedalSource(build_medal_index(rows, resolver), STATUS_WIKIPEDIA, utc_now())

    return MedalSource.degraded(STATUS_UNAVAILABLE, resolver)


# ------------------------------------------------------------
# Cycle
# ------------------------------------------------------------
def run_cycle(
    cfg: TrackerConfig,
    session: Optional[requests.Session] = None,
    byte_fetcher: Callable[..., bytes] = fetch_bytes,
    text_fetcher: Callable[..., str] = fetch_text,
    resolver: Optional[CountryResolver] = None,
) -> Snapshot:
    """Always returns a snapshot; fatal problems come back as an error snapshot."""
    resolver = resolver or cfg.resolver()
    try:
        data = byte_fetcher(cfg.workbook, session=session, timeout=cfg.timeout_seconds)
        xls = open_workbook(data)
        records = sheet_records(xls, cfg.points_sheet)
        points_updated_at = utc_now()
        entries = normalize_rows(records, resolver.display)
        medals = load_medal_source(cfg, xls, resolver, session=session, text_fetcher=text_fetcher)
    except TrackerError as e:
        logger.error("Refresh failed: %s", e)
        return Snapshot(medal_status=STATUS_ERROR, error=str(e))

    board = build_leaderboard(entries, medals.index, resolver)
    logger.info(
        "Ranked %d entries (%d medal countries, %s)",
        len(board), len(medals.index), medals.status,
    )
    return Snapshot(
        leaderboard=board,
        medal_status=medals.status,
        points_updated_at=points_updated_at,
        medals_updated_at=medals.updated_at,
    )


class Refresher:
    """Runs cycles and publishes them; keeps the last good snapshot on failure."""

    def __init__(self, cfg: TrackerConfig, session: Optional[requests.Session] = None, **cycle_kwargs):
        self.cfg = cfg
        self.session = session
        self.cycle_kwargs = cycle_kwargs
        self.current: Optional[Snapshot] = None

    def publish(self, snapshot: Snapshot) -> bool:
        """Returns True when the leaderboard file was replaced."""
        first_load = self.current is None
        replaced = snapshot.ok or first_load
        if replaced:
            write_json_atomic(self.cfg.out_json, snapshot.as_dict())
            self.current = snapshot
        else:
            logger.warning("Keeping previous leaderboard (%d rows)", len(self.current.leaderboard))

        write_json_atomic(self.cfg.status_json, {
            "checked_at": utc_now(),
            "medal_status": snapshot.medal_status,
            "error": snapshot.error,
            "points_updated_at": self.current.points_updated_at,
            "medals_updated_at": self.current.medals_updated_at,
        })
        return replaced

    def refresh(self) -> Snapshot:
        snapshot = run_cycle(self.cfg, session=self.session, **self.cycle_kwargs)
        self.publish(snapshot)
        return snapshot

    def run_forever(self, sleep: Callable[[float], None] = time.sleep) -> None:
        while True:
            try:
                self.refresh()
            except Exception:
                # publish failures (disk full, permissions) wait for the next interval
                logger.exception("Refresh cycle crashed; retrying in %ss", self.cfg.refresh_seconds)
            sleep(self.cfg.refresh_seconds)


# ------------------------------------------------------------
# Main
# ------------------------------------------------------------
def setup_logging(cfg: TrackerConfig) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if cfg.log_file:
        handlers.append(logging.FileHandler(cfg.log_file))
    logging.basicConfig(
        level=logging.DEBUG if cfg.verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(message)s",
        handlers=handlers,
    )


def print_podium(snapshot: Snapshot) -> None:
    if not snapshot.ok:
        print(f"⚠️ {snapshot.error}")
        return
    for row in snapshot.leaderboard.podium:
        picks = ", ".join(row.countries) or "No picks listed"
        print(f"#{row.rank} {row.participant}: {row.points} ({picks})")
    print(f"Medals: {snapshot.medal_status}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        cfg = config_from_args(argv)
    except ValueError as e:
        fail(str(e))
    setup_logging(cfg)

    refresher = Refresher(cfg, session=make_session())
    if cfg.once:
        snapshot = refresher.refresh()
        print_podium(snapshot)
        print("Wrote:", Path(cfg.out_json))
        return 0 if snapshot.ok else 1

    try:
        refresher.run_forever()
    except KeyboardInterrupt:
        logger.info("Stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
