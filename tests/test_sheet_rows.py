from __future__ import annotations

import math
from decimal import Decimal

import pytest

from country_names import NameNormalizer
from sheet_rows import (
    POINTS_FIELDS,
    TEAM_FIELDS,
    Entry,
    first_present,
    normalize_row,
    normalize_rows,
    safe_number,
)


def test_field_synonyms_are_ordered_constants():
    assert TEAM_FIELDS == ("Teams", "teams", "Team", "Participant")
    assert POINTS_FIELDS == ("Points", "points", "POINTS", "Total Points", "Points ")


def test_first_present_skips_blank_values():
    record = {"Teams": "  ", "Team": "Alice (Norway)", "Participant": "Other"}
    assert first_present(record, TEAM_FIELDS) == "Alice (Norway)"
    assert first_present({}, TEAM_FIELDS) is None
    assert first_present({"Points": float("nan"), "points": 4}, POINTS_FIELDS) == 4


def test_key_matching_is_case_sensitive():
    assert first_present({"TEAMS": "Alice"}, TEAM_FIELDS) is None


@pytest.mark.parametrize("value,expected", [
    (10, 10),
    (12.5, 12.5),
    (15.0, 15),
    (" 7 ", 7),
    ("3.25", 3.25),
    ("1e2", 100),
    ("", 0),
    ("abc", 0),
    ("1_000", 0),
    # only decimal notation parses; hex strings count as non-numeric
    ("0x10", 0),
    (None, 0),
    (True, 0),
    (float("nan"), 0),
    (float("inf"), 0),
    ("-inf", 0),
    (Decimal("4"), 4),
    (-3, -3),
])
def test_safe_number(value, expected):
    result = safe_number(value)
    assert result == expected
    assert not (isinstance(result, float) and math.isnan(result))


def test_integral_values_come_back_as_int():
    assert isinstance(safe_number("15"), int)
    assert isinstance(safe_number(15.0), int)


def test_scenario_b_non_numeric_points():
    entry = normalize_row({"Teams": "Alice (Norway)", "Points": "abc"})
    assert entry.points == 0


def test_normalize_row_alternate_spellings():
    entry = normalize_row({"Participant": "Bob (USA)", "Points ": "15"})
    assert entry == Entry(participant="Bob", countries=("United States",), raw_text="Bob (USA)", points=15)


def test_normalize_row_points_priority():
    entry = normalize_row({"Teams": "Cy", "Total Points": 3, "points": 9})
    assert entry.points == 9


def test_normalize_row_missing_everything():
    entry = normalize_row({})
    assert entry.participant == ""
    assert entry.countries == ()
    assert entry.points == 0


def test_numeric_team_cell_is_stringified():
    assert normalize_row({"Teams": 42}).participant == "42"


def test_normalize_rows_drops_empty_participants():
    rows = [
        {"Teams": "Alice (Norway)", "Points": 3},
        {"Teams": "", "Points": 10},
        {"Teams": "   ", "Points": 10},
        {"Points": 1},
        {"Teams": "Solo Entry", "Points": ""},
    ]
    entries = normalize_rows(rows)
    assert [e.participant for e in entries] == ["Alice", "Solo Entry"]
    assert entries[1].points == 0


def test_normalize_rows_honours_empty_alias_table():
    entries = normalize_rows([{"Teams": "Bob (USA)", "Points": 15}], NameNormalizer({}))
    assert entries[0].countries == ("USA",)
