"""
Reference Data Resolution

Finds or creates seasons, competitions, teams and players by natural
key. Lookups always come first; a row is inserted only when absent, and
within the same transaction as the match-unit that needs it.
"""

import logging
from collections import Counter
from datetime import date
from typing import Dict, Optional

from db.repository import StatsRepository
from gaa_etl.exceptions import ReferenceDataError
from gaa_etl.parsing import normalize_player_name, split_player_name

logger = logging.getLogger(__name__)


class ReferenceDataResolver:
    """
    Idempotent find-or-create for reference entities.

    Natural keys:
    - Season: year
    - Competition: (season, name)
    - Team: name
    - Position: code (seeded, never created)
    - Player: full name (jersey and position updated in place)
    """

    def __init__(self, repository: StatsRepository, today: Optional[date] = None):
        """
        Args:
            repository: Repository bound to the unit transaction
            today: Date used to flag the current season (defaults to today)
        """
        self.repository = repository
        self.today = today or date.today()
        self.created: Counter = Counter()
        self.updated: Counter = Counter()
        self._positions: Optional[Dict[str, int]] = None

    def resolve_season(self, year: int) -> int:
        """
        Return the season id for a year, creating the season if needed.

        Args:
            year: Season year

        Returns:
            season_id
        """
        season_id = self.repository.find_season(year)
        if season_id is not None:
            return season_id

        season_id = self.repository.insert_season(year, f"{year} Season", year == self.today.year)
        self.created["season"] += 1
        logger.info(f"Created season {year} (id={season_id})")
        return season_id

    def resolve_competition(self, season_id: int, name: str, competition_type: str) -> int:
        competition_id = self.repository.find_competition(season_id, name)
        if competition_id is not None:
            return competition_id

        competition_id = self.repository.insert_competition(season_id, name, competition_type)
        self.created["competition"] += 1
        logger.info(f"Created competition '{name}' for season {season_id} (id={competition_id})")
        return competition_id

    def resolve_team(self, name: str, is_home: bool = False) -> int:
        """
        Return the team id for a name, creating the team if needed.

        Args:
            name: Team name as it appears on the sheet
            is_home: True for the tracked club

        Returns:
            team_id
        """
        team_name = " ".join(name.split())
        team_id = self.repository.find_team(team_name)
        if team_id is not None:
            return team_id

        abbreviation = team_name.replace(" ", "")[:3].upper()
        team_id = self.repository.insert_team(team_name, abbreviation, is_home)
        self.created["team"] += 1
        logger.info(f"Created team '{team_name}' (id={team_id})")
        return team_id

    def resolve_position(self, code: str) -> int:
        """
        Return the seeded position id for a code.

        Raises:
            ReferenceDataError: If the code is not seeded
        """
        if self._positions is None:
            self._positions = self.repository.position_ids()

        position_id = self._positions.get(code)
        if position_id is None:
            raise ReferenceDataError(
                f"Position '{code}' is not seeded (known: {', '.join(sorted(self._positions)) or 'none'})"
            )
        return position_id

    def resolve_player(self, full_name: str, jersey_number: int, position_id: int) -> int:
        """
        Return the player id for a full name, creating or updating the player.

        An existing player whose jersey number or position has changed is
        updated in place rather than duplicated.

        Args:
            full_name: Player's full name
            jersey_number: Jersey worn in this match
            position_id: Resolved position

        Returns:
            player_id
        """
        name = normalize_player_name(full_name)
        existing = self.repository.find_player(name)
        if existing is not None:
            if existing.jersey_number != jersey_number or existing.position_id != position_id:
                self.repository.update_player(existing.player_id, jersey_number, position_id)
                self.updated["player"] += 1
                logger.debug(
                    f"Updated player '{name}': jersey {existing.jersey_number} -> {jersey_number}, "
                    f"position {existing.position_id} -> {position_id}"
                )
            return existing.player_id

        first_name, last_name = split_player_name(name)
        player_id = self.repository.insert_player(first_name, last_name, name, jersey_number, position_id)
        self.created["player"] += 1
        logger.debug(f"Created player '{name}' #{jersey_number} (id={player_id})")
        return player_id
