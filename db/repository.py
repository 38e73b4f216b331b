"""
Statistics Repository

Data access for the reference and fact tables of the statistics schema.
The loader talks to a StatsRepository; PostgresRepository implements it
over a psycopg2 cursor, and PostgresStore hands out one repository per
transaction.
"""

import logging
from collections import namedtuple
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Protocol

from psycopg2 import errors, sql

from db.connection import DatabaseConnection
from gaa_etl.exceptions import DuplicateMatchError

logger = logging.getLogger(__name__)

PlayerRow = namedtuple("PlayerRow", ["player_id", "jersey_number", "position_id"])


class StatsRepository(Protocol):
    """Operations the loader needs inside one unit transaction."""

    def find_season(self, year: int) -> Optional[int]: ...

    def insert_season(self, year: int, name: str, is_current: bool) -> int: ...

    def find_competition(self, season_id: int, name: str) -> Optional[int]: ...

    def insert_competition(self, season_id: int, name: str, competition_type: str) -> int: ...

    def find_team(self, name: str) -> Optional[int]: ...

    def insert_team(self, name: str, abbreviation: str, is_home: bool) -> int: ...

    def position_ids(self) -> Dict[str, int]: ...

    def find_player(self, full_name: str) -> Optional[PlayerRow]: ...

    def insert_player(
        self, first_name: str, last_name: str, full_name: str, jersey_number: int, position_id: int
    ) -> int: ...

    def update_player(self, player_id: int, jersey_number: int, position_id: int) -> None: ...

    def match_exists(self, competition_id: int, match_number: int) -> bool: ...

    def insert_match(self, row: Dict[str, Any]) -> int: ...

    def insert_team_statistics(self, row: Dict[str, Any]) -> int: ...

    def insert_player_statistics(self, row: Dict[str, Any]) -> int: ...


class PostgresRepository:
    """
    StatsRepository backed by a psycopg2 cursor.

    The cursor's transaction is owned by the caller; nothing here commits.
    """

    def __init__(self, cursor):
        """
        Args:
            cursor: psycopg2 cursor inside an open transaction
        """
        self.cursor = cursor

    def _scalar(self, query, params=()) -> Optional[Any]:
        self.cursor.execute(query, params)
        row = self.cursor.fetchone()
        return row[0] if row else None

    def _insert_returning(self, table: str, row: Dict[str, Any], id_column: str) -> int:
        columns = list(row.keys())
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING {id}").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
            id=sql.Identifier(id_column),
        )
        return self._scalar(query, tuple(row[c] for c in columns))

    # ---------- Reference data ----------

    def find_season(self, year: int) -> Optional[int]:
        return self._scalar("SELECT season_id FROM seasons WHERE year = %s", (year,))

    def insert_season(self, year: int, name: str, is_current: bool) -> int:
        return self._scalar(
            "INSERT INTO seasons (year, name, is_current) VALUES (%s, %s, %s) RETURNING season_id",
            (year, name, is_current),
        )

    def find_competition(self, season_id: int, name: str) -> Optional[int]:
        return self._scalar(
            "SELECT competition_id FROM competitions WHERE season_id = %s AND name = %s",
            (season_id, name),
        )

    def insert_competition(self, season_id: int, name: str, competition_type: str) -> int:
        return self._scalar(
            "INSERT INTO competitions (season_id, name, type) VALUES (%s, %s, %s) "
            "RETURNING competition_id",
            (season_id, name, competition_type),
        )

    def find_team(self, name: str) -> Optional[int]:
        return self._scalar("SELECT team_id FROM teams WHERE name = %s", (name,))

    def insert_team(self, name: str, abbreviation: str, is_home: bool) -> int:
        return self._scalar(
            "INSERT INTO teams (name, abbreviation, is_drum, is_active) VALUES (%s, %s, %s, TRUE) "
            "RETURNING team_id",
            (name, abbreviation, is_home),
        )

    def position_ids(self) -> Dict[str, int]:
        self.cursor.execute("SELECT code, position_id FROM positions")
        return {code: position_id for code, position_id in self.cursor.fetchall()}

    def find_player(self, full_name: str) -> Optional[PlayerRow]:
        self.cursor.execute(
            "SELECT player_id, jersey_number, position_id FROM players "
            "WHERE lower(full_name) = lower(%s) ORDER BY player_id LIMIT 1",
            (full_name,),
        )
        row = self.cursor.fetchone()
        return PlayerRow(*row) if row else None

    def insert_player(
        self, first_name: str, last_name: str, full_name: str, jersey_number: int, position_id: int
    ) -> int:
        return self._scalar(
            "INSERT INTO players (jersey_number, first_name, last_name, full_name, position_id, is_active) "
            "VALUES (%s, %s, %s, %s, %s, TRUE) RETURNING player_id",
            (jersey_number, first_name, last_name, full_name, position_id),
        )

    def update_player(self, player_id: int, jersey_number: int, position_id: int) -> None:
        self.cursor.execute(
            "UPDATE players SET jersey_number = %s, position_id = %s, updated_at = CURRENT_TIMESTAMP "
            "WHERE player_id = %s",
            (jersey_number, position_id, player_id),
        )

    # ---------- Facts ----------

    def match_exists(self, competition_id: int, match_number: int) -> bool:
        found = self._scalar(
            "SELECT 1 FROM matches WHERE competition_id = %s AND match_number = %s",
            (competition_id, match_number),
        )
        return found is not None

    def insert_match(self, row: Dict[str, Any]) -> int:
        """
        Insert a match row.

        Raises:
            DuplicateMatchError: If (competition_id, match_number) is already stored
        """
        try:
            return self._insert_returning("matches", row, "match_id")
        except errors.UniqueViolation as e:
            logger.warning(f"Unique violation inserting match: {e}")
            raise DuplicateMatchError(str(row.get("competition_id")), row.get("match_number")) from e

    def insert_team_statistics(self, row: Dict[str, Any]) -> int:
        return self._insert_returning("match_team_statistics", row, "match_team_stat_id")

    def insert_player_statistics(self, row: Dict[str, Any]) -> int:
        return self._insert_returning("player_match_statistics", row, "player_match_stat_id")


class PostgresStore:
    """
    Opens one transaction per match-unit.

    Example:
        store = PostgresStore()
        with store.transaction() as repository:
            season_id = repository.find_season(2025)
    """

    @contextmanager
    def transaction(self) -> Iterator[PostgresRepository]:
        """
        Yield a repository bound to a fresh transaction.

        Commits when the block exits normally and rolls back if it raises.
        """
        with DatabaseConnection.get_cursor() as cursor:
            yield PostgresRepository(cursor)
