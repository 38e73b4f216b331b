"""
In-memory StatsRepository used by loader, resolver and orchestrator tests.

Tables are lists of dicts. Each transaction snapshots the tables and
restores them if the block raises, and the unique constraints of the
schema are enforced on insert.
"""
from __future__ import annotations

import copy
from collections import Counter
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional

from db.repository import PlayerRow
from gaa_etl.exceptions import DuplicateMatchError

TABLES = (
    "seasons",
    "competitions",
    "teams",
    "positions",
    "players",
    "matches",
    "match_team_statistics",
    "player_match_statistics",
)

SEEDED_POSITIONS = ("GK", "DEF", "MID", "FWD")


class UniqueViolation(Exception):
    pass


class InMemoryStore:
    """Transaction provider with snapshot rollback."""

    def __init__(self, positions=SEEDED_POSITIONS):
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self.ids: Counter = Counter()
        for code in positions:
            self._insert("positions", "position_id", {"code": code})
        self.commits = 0
        self.rollbacks = 0
        self.on_commit: Optional[Callable[[], None]] = None
        self._failures: Dict[str, List[Any]] = {}

    def fail_on(self, method: str, error: Exception, times: int = 1) -> None:
        """Make the next `times` calls to a repository method raise `error`."""
        self._failures[method] = [error, times]

    def count(self, table: str) -> int:
        return len(self.tables[table])

    def counts(self) -> Dict[str, int]:
        return {name: len(rows) for name, rows in self.tables.items()}

    def _insert(self, table: str, id_column: str, row: Dict[str, Any]) -> int:
        self.ids[table] += 1
        new_id = self.ids[table]
        self.tables[table].append(dict(row, **{id_column: new_id}))
        return new_id

    def _maybe_fail(self, method: str) -> None:
        failure = self._failures.get(method)
        if failure and failure[1] > 0:
            failure[1] -= 1
            raise failure[0]

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy((self.tables, self.ids))
        try:
            yield InMemoryRepository(self)
        except Exception:
            self.tables, self.ids = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1
        if self.on_commit is not None:
            self.on_commit()


class InMemoryRepository:
    """StatsRepository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.store.tables[table]

    def _find(self, table: str, id_column: str, **criteria) -> Optional[int]:
        for row in self._rows(table):
            if all(row.get(k) == v for k, v in criteria.items()):
                return row[id_column]
        return None

    def find_season(self, year):
        return self._find("seasons", "season_id", year=year)

    def insert_season(self, year, name, is_current):
        if self.find_season(year) is not None:
            raise UniqueViolation(f"seasons.year={year}")
        return self.store._insert("seasons", "season_id", {"year": year, "name": name, "is_current": is_current})

    def find_competition(self, season_id, name):
        return self._find("competitions", "competition_id", season_id=season_id, name=name)

    def insert_competition(self, season_id, name, competition_type):
        if self.find_competition(season_id, name) is not None:
            raise UniqueViolation(f"competitions({season_id}, {name})")
        return self.store._insert(
            "competitions",
            "competition_id",
            {"season_id": season_id, "name": name, "type": competition_type},
        )

    def find_team(self, name):
        return self._find("teams", "team_id", name=name)

    def insert_team(self, name, abbreviation, is_home):
        if self.find_team(name) is not None:
            raise UniqueViolation(f"teams.name={name}")
        return self.store._insert(
            "teams",
            "team_id",
            {"name": name, "abbreviation": abbreviation, "is_drum": is_home, "is_active": True},
        )

    def position_ids(self):
        return {row["code"]: row["position_id"] for row in self._rows("positions")}

    def find_player(self, full_name):
        for row in self._rows("players"):
            if row["full_name"].lower() == full_name.lower():
                return PlayerRow(row["player_id"], row["jersey_number"], row["position_id"])
        return None

    def insert_player(self, first_name, last_name, full_name, jersey_number, position_id):
        return self.store._insert(
            "players",
            "player_id",
            {
                "first_name": first_name,
                "last_name": last_name,
                "full_name": full_name,
                "jersey_number": jersey_number,
                "position_id": position_id,
                "is_active": True,
            },
        )

    def update_player(self, player_id, jersey_number, position_id):
        for row in self._rows("players"):
            if row["player_id"] == player_id:
                row["jersey_number"] = jersey_number
                row["position_id"] = position_id

    def match_exists(self, competition_id, match_number):
        return self._find("matches", "match_id", competition_id=competition_id, match_number=match_number) is not None

    def insert_match(self, row):
        self.store._maybe_fail("insert_match")
        if self.match_exists(row["competition_id"], row["match_number"]):
            raise DuplicateMatchError(str(row["competition_id"]), row["match_number"])
        return self.store._insert("matches", "match_id", row)

    def insert_team_statistics(self, row):
        self.store._maybe_fail("insert_team_statistics")
        key = (row["match_id"], row["team_id"], row["period"])
        for existing in self._rows("match_team_statistics"):
            if (existing["match_id"], existing["team_id"], existing["period"]) == key:
                raise UniqueViolation(f"match_team_statistics{key}")
        return self.store._insert("match_team_statistics", "match_team_stat_id", row)

    def insert_player_statistics(self, row):
        self.store._maybe_fail("insert_player_statistics")
        return self.store._insert("player_match_statistics", "player_match_stat_id", row)
