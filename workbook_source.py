"""
Decode the picks workbook (xlsx bytes) into plain row dicts.

The points sheet is required; the medal sheet is optional.
Empty cells come back as "" (like a sheet_to_json defval), never NaN.
"""

from __future__ import annotations

import io
from typing import Optional

import pandas as pd

from tracker_common import MissingSheetError, SourceFetchError


def open_workbook(data: bytes) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(io.BytesIO(data), engine="openpyxl")
    except Exception as e:
        # openpyxl raises zipfile/KeyError/InvalidFileException depending on the damage
        raise SourceFetchError(f"Could not read workbook: {e}") from e


def sheet_names(xls: pd.ExcelFile) -> list[str]:
    return [str(n) for n in xls.sheet_names]


def _read_sheet(xls: pd.ExcelFile, sheet_name: str) -> list[dict]:
    try:
        df = pd.read_excel(xls, sheet_name=sheet_name, dtype=object)
    except (ValueError, KeyError, OSError) as e:
        raise SourceFetchError(f'Could not read sheet "{sheet_name}": {e}') from e
    df.columns = [str(c) for c in df.columns]
    df = df.dropna(how="all")
    df = df.astype(object).where(df.notna(), "")
    return df.to_dict(orient="records")


def sheet_records(xls: pd.ExcelFile, sheet_name: str) -> list[dict]:
    """Rows of a required sheet; MissingSheetError lists what the workbook does have."""
    available = sheet_names(xls)
    if sheet_name not in available:
        raise MissingSheetError(sheet_name, available)
    return _read_sheet(xls, sheet_name)


def optional_sheet_records(xls: pd.ExcelFile, sheet_name: str) -> Optional[list[dict]]:
    if sheet_name not in sheet_names(xls):
        return None
    return _read_sheet(xls, sheet_name)
