"""
Tests for gaa_etl.validators.identification.
"""
from __future__ import annotations

import pytest

from config.validation import ValidationConfig
from gaa_etl.models import IDENTIFICATION
from gaa_etl.validators.identification import validate_player_identity, validate_unique_identities
from tests.builders import build_record, player_row, squad

CONFIG = ValidationConfig()


def check(row):
    return validate_player_identity(build_record(players=[row]), row, CONFIG)


def messages(issues):
    return [issue.message for issue in issues]


def test_valid_identity():
    """Test that a normal row has no identification issues."""
    result = check(player_row())

    assert result.errors == []
    assert result.warnings == []


# ---------- Jersey ----------


@pytest.mark.parametrize(
    "jersey, message",
    [
        (None, "Jersey number is missing"),
        ("abc", "Jersey number 'abc' is not a number"),
        ("inf", "Jersey number 'inf' is not a number"),
        ("1e400", "Jersey number '1e400' is not a number"),
        ("nan", "Jersey number 'nan' is not a number"),
        (float("inf"), "Jersey number 'inf' is not a number"),
        (7.5, "Jersey number 7.5 is not a whole number"),
        (0, "Jersey number 0 must be positive"),
        (100, "Jersey number 100 exceeds maximum 99"),
    ],
)
def test_invalid_jersey_is_an_error(jersey, message):
    """Test that unusable jersey numbers are errors."""
    result = check(player_row(jersey=jersey))

    assert messages(result.errors) == [message]
    assert result.errors[0].code == IDENTIFICATION
    assert result.errors[0].context["field"] == "#"


def test_high_jersey_is_a_warning():
    """Test that a jersey above 40 but within 99 only warns."""
    result = check(player_row(jersey=45))

    assert result.is_valid
    assert messages(result.warnings) == ["Unusually high jersey number 45"]


def test_jersey_from_float_cell():
    """Test that a whole-number float read from Excel is accepted."""
    assert check(player_row(jersey=7.0)).is_valid


# ---------- Name ----------


@pytest.mark.parametrize(
    "name, message",
    [
        (None, "Player name is empty"),
        ("   ", "Player name is empty"),
        ("A", "Player name 'A' is too short"),
        ("A" + "b" * 100, "Player name exceeds 100 characters"),
    ],
)
def test_invalid_name_is_an_error(name, message):
    """Test that empty, too short and too long names are errors."""
    result = check(player_row(name=name))

    assert messages(result.errors) == [message]


@pytest.mark.parametrize(
    "name, fragment",
    [
        ("Sean Murphy3", "unusual characters"),
        ("Sean  Murphy", "double spaces"),
        (" Sean Murphy", "leading or trailing spaces"),
        ("SEAN MURPHY", "unusual capitalisation"),
        ("sean murphy", "unusual capitalisation"),
    ],
)
def test_odd_names_are_warnings(name, fragment):
    """Test that formatting oddities in names only warn."""
    result = check(player_row(name=name))

    assert result.is_valid
    assert any(fragment in message for message in messages(result.warnings))


def test_apostrophes_and_hyphens_are_normal():
    """Test that names like O'Kane and Mac-Ruairi raise nothing."""
    assert check(player_row(name="Niall O'Kane")).warnings == []
    assert check(player_row(name="Conor Mac-Ruairi")).warnings == []


# ---------- Minutes ----------


@pytest.mark.parametrize(
    "minutes, message",
    [
        (None, "Minutes played is missing"),
        ("sixty", "Minutes played 'sixty' is not a number"),
        (-5, "Minutes played cannot be negative (-5)"),
        (91, "Minutes played 91 exceeds maximum 90"),
    ],
)
def test_invalid_minutes_are_errors(minutes, message):
    """Test that missing, non-numeric, negative and excessive minutes are errors."""
    result = check(player_row(minutes=minutes))

    assert messages(result.errors) == [message]


def test_minutes_warnings():
    """Test that 0 minutes and extra time only warn."""
    unused = check(player_row(minutes=0))
    extra_time = check(player_row(minutes=80))

    assert unused.is_valid
    assert messages(unused.warnings) == ["Player recorded 0 minutes (unused substitute?)"]
    assert extra_time.is_valid
    assert messages(extra_time.warnings) == ["Minutes played 80 exceeds a normal match"]


def test_context_identifies_the_row():
    """Test that issues carry sheet, spreadsheet row, jersey and player name."""
    row = player_row(jersey=12, name="Mark Lynch", minutes=-1, row_number=15)

    issue = check(row).errors[0]

    assert issue.context["sheet"] == "09. Championship vs Slaughtmanus 26.09.25"
    assert issue.context["row"] == 15
    assert issue.context["jersey"] == 12
    assert issue.context["player"] == "Mark Lynch"


# ---------- Uniqueness ----------


def test_unique_identities_clean_squad():
    """Test that the default squad has no duplicates."""
    assert validate_unique_identities(build_record(), CONFIG).errors == []


def test_duplicate_jersey_is_one_error():
    """Test that two players sharing a jersey give one error listing both."""
    players = squad()
    players.append(player_row(jersey=7, name="Extra Player", row_number=19))

    result = validate_unique_identities(build_record(players=players), CONFIG)

    assert len(result.errors) == 1
    issue = result.errors[0]
    assert issue.code == IDENTIFICATION
    assert issue.context["jersey"] == 7
    assert issue.context["rows"] == [10, 19]
    assert "#7 Ryan Hegarty" in issue.message and "#7 Extra Player" in issue.message


def test_duplicate_name_is_case_insensitive():
    """Test that the same name in different case is a duplicate."""
    players = squad()
    players.append(player_row(jersey=30, name="SEAN MURPHY", row_number=19))

    result = validate_unique_identities(build_record(players=players), CONFIG)

    assert messages(result.errors) == ["Player 'Sean Murphy' appears more than once"]
    assert result.errors[0].context["rows"] == [5, 19]
