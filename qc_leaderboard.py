#!/usr/bin/env python3
"""
Quick QC check for a published leaderboard snapshot.
Run AFTER: master.py

Does NOT modify data. Reports:
- rank/order problems (ERROR)
- picked countries with no medal record, most frequent first (WARN)
- picked countries with no flag code (INFO)
- entries whose picks could not be parsed (WARN)
"""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from tracker_common import fail, ok
from tracker_config import DEFAULT_OUT_JSON


@dataclass
class Issue:
    check_id: str
    severity: str   # "ERROR" | "WARN" | "INFO"
    message: str
    example_value: str = ""


def picks_frame(snapshot: dict) -> pd.DataFrame:
    """One row per (entry, picked country)."""
    records = []
    for row in snapshot.get("rows", []):
        for pick in row.get("picks", []):
            records.append({
                "rank": row.get("rank"),
                "participant": row.get("participant", ""),
                "country": pick.get("country", ""),
                "flag": pick.get("flag", ""),
                "unknown": pick.get("medals") == "unknown",
            })
    return pd.DataFrame(records, columns=["rank", "participant", "country", "flag", "unknown"])


def run_checks(snapshot: dict, top_n: int = 20) -> tuple[dict, list[Issue]]:
    issues: list[Issue] = []
    rows = snapshot.get("rows", [])

    ranks = [r.get("rank") for r in rows]
    if ranks != list(range(1, len(rows) + 1)):
        issues.append(Issue("LB_RANKS_NOT_CONTIGUOUS", "ERROR", "Ranks must run 1..n in row order.",
                            str(ranks[:10])))

    points = [r.get("points", 0) for r in rows]
    if any(a < b for a, b in zip(points, points[1:])):
        issues.append(Issue("LB_POINTS_NOT_DESCENDING", "ERROR", "Rows are not sorted by points descending."))

    podium = [r.get("participant") for r in snapshot.get("podium", [])]
    if podium != [r.get("participant") for r in rows[:3]]:
        issues.append(Issue("LB_PODIUM_MISMATCH", "ERROR", "Podium must be the first three ranked rows."))

    no_picks = [r.get("raw_text", "") for r in rows if not r.get("countries")]
    for raw in no_picks[:top_n]:
        issues.append(Issue("LB_NO_PICKS_PARSED", "WARN", "Entry has no parseable country list.", raw))

    pf = picks_frame(snapshot)
    if not pf.empty:
        unknown = pf.loc[pf["unknown"], "country"].value_counts().head(top_n)
        for country, cnt in unknown.items():
            issues.append(Issue("LB_MEDALS_UNKNOWN", "WARN",
                                "Picked country has no medal record (alias missing or source degraded).",
                                f"{country} (count={cnt})"))
        no_flag = pf.loc[pf["flag"].eq(""), "country"].drop_duplicates().head(top_n)
        for country in no_flag:
            issues.append(Issue("LB_NO_FLAG", "INFO", "Picked country has no flag code.", country))

    summary = {
        "rows": len(rows),
        "picks": int(len(pf)),
        "unknown_medal_picks": int(pf["unknown"].sum()) if not pf.empty else 0,
        "medal_status": snapshot.get("medal_status", ""),
        "errors": sum(1 for i in issues if i.severity == "ERROR"),
        "warnings": sum(1 for i in issues if i.severity == "WARN"),
    }
    return summary, issues


def main() -> None:
    ap = argparse.ArgumentParser(description="QC a published leaderboard snapshot.")
    ap.add_argument("--snapshot", type=Path, default=DEFAULT_OUT_JSON)
    ap.add_argument("--top", type=int, default=20)
    args = ap.parse_args()

    if not args.snapshot.exists():
        fail(f"Missing required file: {args.snapshot}")

    snapshot = json.loads(args.snapshot.read_text(encoding="utf-8"))
    summary, issues = run_checks(snapshot, top_n=args.top)

    for k, v in summary.items():
        print(f"{k}: {v}")
    for i in issues:
        print(f"[{i.severity}] {i.check_id}: {i.message} {i.example_value}".rstrip())

    if summary["errors"]:
        fail(f"LEADERBOARD QC FAIL: {summary['errors']} errors")
    ok("LEADERBOARD QC OK")


if __name__ == "__main__":
    main()
