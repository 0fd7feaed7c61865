from __future__ import annotations

from country_names import CountryResolver, NameNormalizer
from medal_index import (
    STATUS_MISSING_SHEET,
    UNKNOWN,
    MedalIndex,
    MedalRecord,
    MedalSource,
    build_medal_index,
    clean_nation_text,
    medal_record_from_row,
    parse_wikipedia_medal_table,
)


def test_build_from_sheet_rows_with_header_variants():
    rows = [
        {"Country": "Norway", "Gold Medals": 12, "Silver Medals": 7, "Bronze Medals": 7, "Total Medals": 26},
        {"country": "USA", "Gold": "5", "Silver": "5", "Bronze": "4", "Total": "14"},
        {"NOC": "GBR", "Gold": 1, "Silver": 0, "Bronze": 0},
    ]
    index = build_medal_index(rows)
    assert index["Norway"] == MedalRecord(12, 7, 7, 26)
    assert index["United States"] == MedalRecord(5, 5, 4, 14)
    # total derived when the column is missing
    assert index["Great Britain"] == MedalRecord(1, 0, 0, 1)


def test_rows_without_country_are_skipped():
    rows = [
        {"Country": "", "Gold": 3},
        {"Gold": 1},
        {"Country": "Canada", "Gold": 2},
    ]
    index = build_medal_index(rows)
    assert list(index) == ["Canada"]


def test_lenient_numbers():
    record = medal_record_from_row({"Gold": "abc", "Silver": -2, "Bronze": 1.9, "Total": None})
    assert record == MedalRecord(gold=0, silver=0, bronze=1, total=1)


def test_first_duplicate_wins():
    rows = [
        {"Country": "USA", "Gold": 5},
        {"Country": "United States", "Gold": 9},
    ]
    index = build_medal_index(rows)
    assert index["United States"].gold == 5
    assert len(index) == 1


def test_absent_source_is_empty_and_never_throws():
    index = build_medal_index(None)
    assert len(index) == 0
    lookup = index.lookup("Norway")
    assert not lookup.known
    assert lookup.as_value() == UNKNOWN
    assert MedalIndex().lookup("").as_value() == UNKNOWN


def test_lookup_composes_both_alias_passes():
    index = build_medal_index([{"Country": "People's Republic of China", "Gold": 1, "Total": 1}])
    assert index.lookup("China").known
    assert index.lookup("china").record.gold == 1


def test_zero_record_is_distinct_from_unknown():
    index = build_medal_index([{"Country": "Latvia", "Gold": 0, "Silver": 0, "Bronze": 0, "Total": 0}])
    assert index.lookup("Latvia").as_value() == {"gold": 0, "silver": 0, "bronze": 0, "total": 0}
    assert index.lookup("Estonia").as_value() == UNKNOWN


def test_injected_resolver_is_used():
    resolver = CountryResolver(display=NameNormalizer({}), medal=NameNormalizer({"Holland": "Netherlands"}))
    index = build_medal_index([{"Country": "Holland", "Gold": 2}], resolver)
    assert "Netherlands" in index
    assert index.lookup("holland").record.gold == 2


def test_clean_nation_text():
    assert clean_nation_text("Italy*") == "Italy"
    assert clean_nation_text("United States[a]") == "United States"
    assert clean_nation_text("Great\xa0Britain ‡") == "Great Britain"


def test_parse_wikipedia_medal_table(medal_page):
    rows = parse_wikipedia_medal_table(medal_page)
    assert [r["Country"] for r in rows] == ["Norway", "Italy", "United States", "People's Republic of China"]
    assert rows[0] == {"Country": "Norway", "Gold": 12, "Silver": 7, "Bronze": 7, "Total": 26}
    # tied rank row has no rank cell
    assert rows[2]["Total"] == 14

    index = build_medal_index(rows)
    assert index.lookup("China").record == MedalRecord(1, 2, 0, 3)


def test_parse_wikipedia_without_table():
    assert parse_wikipedia_medal_table("<html><p>nothing here</p></html>") == []
    assert parse_wikipedia_medal_table("") == []


def test_degraded_source():
    source = MedalSource.degraded(STATUS_MISSING_SHEET)
    assert source.status == "Missing Medal Count sheet"
    assert len(source.index) == 0
    assert source.updated_at is None


def test_first_duplicate_wins_across_case():
    index = build_medal_index([
        {"Country": "Norway", "Gold": 12},
        {"Country": "NORWAY", "Gold": 1},
    ])
    assert len(index) == 1
    assert index.lookup("Norway").record.gold == 12
