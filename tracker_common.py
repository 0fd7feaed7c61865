from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path


class TrackerError(Exception):
    """Base class for failures that end a refresh cycle."""


class MissingSheetError(TrackerError):
    def __init__(self, sheet_name: str, available: list[str]):
        self.sheet_name = sheet_name
        self.available = list(available)
        super().__init__(
            f'Sheet "{sheet_name}" not found. Available: {", ".join(self.available)}'
        )


class SourceFetchError(TrackerError):
    """Raised when a workbook or medal page cannot be fetched or read."""


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def write_json_atomic(path: Path, payload: dict) -> Path:
    """
    Write JSON through a temp file + os.replace so readers never see a half-written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except OSError:
        if tmp.exists():
            tmp.unlink()
        raise
    return path


def fail(msg: str, code: int = 2) -> None:
    print(msg, file=sys.stderr)
    raise SystemExit(code)


def ok(msg: str = "OK") -> None:
    print(msg)
