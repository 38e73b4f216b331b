"""
Tests for gaa_etl.resolver.ReferenceDataResolver.
"""
from __future__ import annotations

from datetime import date

import pytest

from gaa_etl.exceptions import ReferenceDataError
from gaa_etl.resolver import ReferenceDataResolver
from tests.fakes import InMemoryStore

TODAY = date(2025, 10, 1)


@pytest.fixture
def store():
    return InMemoryStore()


def resolve(store, action):
    with store.transaction() as repository:
        resolver = ReferenceDataResolver(repository, today=TODAY)
        return action(resolver), resolver


# ---------- Seasons, competitions, teams ----------


def test_season_created_once(store):
    """Test that a season is created on first use and found afterwards."""
    first, resolver = resolve(store, lambda r: r.resolve_season(2025))
    second, again = resolve(store, lambda r: r.resolve_season(2025))

    assert first == second
    assert store.count("seasons") == 1
    assert resolver.created["season"] == 1
    assert again.created["season"] == 0
    assert store.tables["seasons"][0]["name"] == "2025 Season"
    assert store.tables["seasons"][0]["is_current"] is True


def test_past_season_is_not_current(store):
    """Test that only the season of the current year is flagged current."""
    resolve(store, lambda r: r.resolve_season(2024))

    assert store.tables["seasons"][0]["is_current"] is False


def test_competition_is_keyed_by_season_and_name(store):
    """Test that the same competition name in two seasons gives two rows."""
    def action(resolver):
        season_2024 = resolver.resolve_season(2024)
        season_2025 = resolver.resolve_season(2025)
        return [
            resolver.resolve_competition(season_2024, "Championship", "Championship"),
            resolver.resolve_competition(season_2025, "Championship", "Championship"),
            resolver.resolve_competition(season_2025, "Championship", "Championship"),
        ]

    ids, resolver = resolve(store, action)

    assert ids[1] == ids[2] != ids[0]
    assert store.count("competitions") == 2
    assert resolver.created["competition"] == 2


def test_team_created_with_abbreviation(store):
    """Test that new teams get a three-letter abbreviation and the home flag."""
    def action(resolver):
        return resolver.resolve_team("Drum", is_home=True), resolver.resolve_team("Slaughtmanus")

    (home, away), _ = resolve(store, action)

    teams = {row["team_id"]: row for row in store.tables["teams"]}
    assert teams[home]["abbreviation"] == "DRU"
    assert teams[home]["is_drum"] is True
    assert teams[away]["abbreviation"] == "SLA"
    assert teams[away]["is_drum"] is False


def test_team_name_whitespace_is_normalized(store):
    """Test that extra whitespace does not create a second team."""
    def action(resolver):
        return resolver.resolve_team("Glen  Maghera"), resolver.resolve_team(" Glen Maghera ")

    (first, second), _ = resolve(store, action)

    assert first == second
    assert store.count("teams") == 1


# ---------- Positions ----------


def test_positions_resolve_from_seeded_codes(store):
    """Test that seeded position codes map to their ids."""
    ids, _ = resolve(store, lambda r: [r.resolve_position(c) for c in ("GK", "DEF", "MID", "FWD")])

    assert ids == [1, 2, 3, 4]


def test_unknown_position_raises(store):
    """Test that a position code that is not seeded raises ReferenceDataError."""
    with pytest.raises(ReferenceDataError) as exc_info:
        resolve(store, lambda r: r.resolve_position("WB"))

    assert "WB" in str(exc_info.value)


def test_missing_seed_data_raises():
    """Test that an unseeded positions table is reported, not silently filled."""
    store = InMemoryStore(positions=())

    with pytest.raises(ReferenceDataError):
        resolve(store, lambda r: r.resolve_position("GK"))


# ---------- Players ----------


def test_player_created_with_split_name(store):
    """Test that a new player is stored with first, last and full name."""
    player_id, resolver = resolve(store, lambda r: r.resolve_player("Oisin Mc Laughlin", 15, 4))

    row = store.tables["players"][0]
    assert row["player_id"] == player_id
    assert (row["first_name"], row["last_name"], row["full_name"]) == ("Oisin", "Mc Laughlin", "Oisin Mc Laughlin")
    assert resolver.created["player"] == 1


def test_existing_player_updated_in_place(store):
    """Test that a changed jersey or position updates the existing player."""
    first, _ = resolve(store, lambda r: r.resolve_player("Sean Murphy", 2, 3))
    second, resolver = resolve(store, lambda r: r.resolve_player("sean  murphy", 14, 4))

    assert first == second
    assert store.count("players") == 1
    row = store.tables["players"][0]
    assert (row["jersey_number"], row["position_id"]) == (14, 4)
    assert resolver.updated["player"] == 1
    assert resolver.created["player"] == 0


def test_unchanged_player_is_not_updated(store):
    """Test that a player with the same jersey and position is left alone."""
    resolve(store, lambda r: r.resolve_player("Sean Murphy", 2, 3))
    _, resolver = resolve(store, lambda r: r.resolve_player("Sean Murphy", 2, 3))

    assert resolver.updated["player"] == 0
