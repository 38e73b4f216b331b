"""
Tests for gaa_etl.validators.structure.
"""
from __future__ import annotations

from datetime import date

from config.validation import ValidationConfig
from gaa_etl.models import STRUCTURE, MatchMetadata, RawTeamRow
from gaa_etl.validators.structure import validate_structure
from tests.builders import build_record, squad, team_rows

CONFIG = ValidationConfig()
TODAY = date(2025, 10, 1)


def messages(issues):
    return [issue.message for issue in issues]


def test_clean_sheet_has_no_structure_issues():
    """Test that the default sheet passes without errors or warnings."""
    result = validate_structure(build_record(), CONFIG, today=TODAY)

    assert result.errors == []
    assert result.warnings == []


# ---------- Metadata ----------


def test_missing_metadata_is_an_error():
    """Test that an unparseable sheet name rejects the sheet."""
    record = build_record()
    record.metadata = None

    result = validate_structure(record, CONFIG, today=TODAY)

    assert len(result.errors) == 1
    assert result.errors[0].code == STRUCTURE
    assert "NN. Competition vs Opponent DD.MM.YY" in result.errors[0].message


def test_non_positive_match_number_is_an_error():
    """Test that match number 0 is rejected."""
    record = build_record()
    record.metadata.match_number = 0

    result = validate_structure(record, CONFIG, today=TODAY)

    assert messages(result.errors) == ["Invalid match number 0"]


def test_high_match_number_is_a_warning():
    """Test that a match number above the configured maximum only warns."""
    record = build_record(match_number=101)

    result = validate_structure(record, CONFIG, today=TODAY)

    assert result.is_valid
    assert "Unusually high match number 101" in messages(result.warnings)


def test_empty_opposition_is_an_error():
    """Test that an empty opposition rejects the sheet."""
    record = build_record()
    record.metadata = MatchMetadata(9, "Championship", " ", date(2025, 9, 26))

    result = validate_structure(record, CONFIG, today=TODAY)

    assert "Opposition team name is empty" in messages(result.errors)


def test_unknown_competition_is_a_warning():
    """Test that an unknown competition warns and names the fallback type."""
    record = build_record(competition="Tournament")

    result = validate_structure(record, CONFIG, today=TODAY)

    assert result.is_valid
    assert "Unknown competition 'Tournament', will be stored as League" in messages(result.warnings)


def test_match_date_bounds():
    """Test that dates before 2020 or more than a year ahead are errors."""
    early = validate_structure(build_record(match_date=date(2019, 12, 31)), CONFIG, today=TODAY)
    late = validate_structure(build_record(match_date=date(2026, 10, 2)), CONFIG, today=TODAY)
    edge = validate_structure(build_record(match_date=date(2026, 10, 1)), CONFIG, today=TODAY)

    assert "Match date 2019-12-31 is before 2020-01-01" in messages(early.errors)
    assert "Match date 2026-10-02 is too far in the future" in messages(late.errors)
    assert edge.is_valid


# ---------- Field map ----------


def test_missing_field_map_is_an_error():
    """Test that a sheet without a header row is rejected."""
    record = build_record()
    record.field_map = {}

    result = validate_structure(record, CONFIG, today=TODAY)

    assert "Player statistics header row is missing or empty" in messages(result.errors)


def test_missing_critical_column_is_an_error():
    """Test that each missing identification column is reported by name."""
    record = build_record()
    del record.field_map["Min"]

    result = validate_structure(record, CONFIG, today=TODAY)

    assert messages(result.errors) == ["Required column 'Min' is missing"]
    assert result.errors[0].context["field"] == "Min"


def test_small_field_map():
    """Test that too few columns is an error and fewer than expected is a warning."""
    record = build_record()
    record.field_map = {"#": 1, "Player Name": 2, "Min": 3}

    result = validate_structure(record, CONFIG, today=TODAY)

    assert "Only 3 statistics columns found (minimum 10)" in messages(result.errors)
    assert "3 statistics columns found, expected at least 70" in messages(result.warnings)


def test_invalid_and_shared_column_indexes():
    """Test that non-positive indexes are errors and shared indexes are warnings."""
    record = build_record()
    record.field_map["TE"] = 0
    record.field_map["PSR"] = record.field_map["TP"]

    result = validate_structure(record, CONFIG, today=TODAY)

    assert "Column 'TE' has invalid index 0" in messages(result.errors)
    column = record.field_map["TP"]
    assert f"Column {column} is mapped to several fields: PSR, TP" in messages(result.warnings)


# ---------- Rows ----------


def test_player_row_counts():
    """Test that no players is an error and few or many players are warnings."""
    none = validate_structure(build_record(players=[]), CONFIG, today=TODAY)
    few = validate_structure(build_record(players=squad()[:5]), CONFIG, today=TODAY)
    many_players = squad() * 3
    many = validate_structure(build_record(players=many_players), CONFIG, today=TODAY)

    assert "No player rows found" in messages(none.errors)
    assert few.is_valid and "Only 5 player rows found" in messages(few.warnings)
    assert many.is_valid and "45 player rows found, more than expected" in messages(many.warnings)


def test_wrong_team_row_count_is_a_single_error():
    """Test that five team rows produce exactly one error and no per-row checks."""
    record = build_record(teams=team_rows()[:5])

    result = validate_structure(record, CONFIG, today=TODAY)

    assert messages(result.errors) == [
        "Expected 6 team statistics rows (3 periods x 2 teams), found 5"
    ]


def test_duplicate_and_unknown_team_rows():
    """Test that a repeated period and an unknown period are both reported."""
    rows = team_rows()
    rows[1] = RawTeamRow(side="home", period="1st", values=rows[1].values)
    rows[5] = RawTeamRow(side="away", period="ET", values=rows[5].values)

    result = validate_structure(build_record(teams=rows), CONFIG, today=TODAY)

    assert "Duplicate team statistics for home team in period 1st" in messages(result.errors)
    assert "Unknown period 'ET' (expected 1st, 2nd, Full)" in messages(result.errors)
