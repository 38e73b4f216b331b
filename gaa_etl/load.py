"""
Transactional Match Loading

Writes one match-unit (match row, six team-period rows, one row per
player) inside a single transaction. A unit either lands completely or
not at all; failures are returned as unit-level errors so the rest of
the batch can continue.
"""

import logging
from typing import Dict, Optional, Set

from gaa_etl.exceptions import DuplicateMatchError, UnitIntegrityError
from gaa_etl.fields import PERIODS, SIDES
from gaa_etl.models import (
    DUPLICATE_MATCH,
    LOAD_FAILED,
    LoadResult,
    MatchRecord,
    ValidationIssue,
)
from gaa_etl.resolver import ReferenceDataResolver

logger = logging.getLogger(__name__)

EXPECTED_TEAM_PERIODS = len(PERIODS) * len(SIDES)


class TransactionalLoader:
    """
    Loads match-units atomically.

    Per unit:
    1. Resolve season, competition, teams
    2. Reject a match that already exists
    3. Insert the match
    4. Insert the six team-period rows
    5. Resolve players and insert their statistics
    6. Commit (or roll back on any failure)
    """

    def __init__(self, store):
        """
        Initialize the loader.

        Args:
            store: Object whose transaction() context manager yields a StatsRepository
        """
        self.store = store

    def load_unit(self, match: MatchRecord) -> LoadResult:
        """
        Persist one match-unit.

        Args:
            match: Transformed match record

        Returns:
            LoadResult; on failure nothing from the unit is persisted
        """
        context = {"sheet": match.sheet_name, "match_number": match.match_number}
        logger.info(
            f"Loading match {match.match_number} vs {match.opposition} "
            f"({len(match.players)} players)"
        )

        try:
            with self.store.transaction() as repository:
                resolver = ReferenceDataResolver(repository)
                match_id, rows_created = self._write_unit(repository, resolver, match)
        except DuplicateMatchError as e:
            logger.warning(f"Skipped '{match.sheet_name}': {e}")
            return LoadResult(
                success=False,
                error=ValidationIssue(
                    DUPLICATE_MATCH,
                    f"Match {match.match_number} ({match.competition} {match.season_year}) already exists",
                    context,
                ),
            )
        except Exception as e:
            logger.error(f"Failed to load '{match.sheet_name}', unit rolled back: {e}", exc_info=True)
            return LoadResult(
                success=False,
                error=ValidationIssue(LOAD_FAILED, f"Load failed: {e}", dict(context, error_type=type(e).__name__)),
            )

        logger.info(f"Loaded match {match.match_number} (id={match_id}): {rows_created} rows")
        return LoadResult(
            success=True,
            rows_created=rows_created,
            match_id=match_id,
            references_created=dict(resolver.created),
        )

    def _write_unit(self, repository, resolver: ReferenceDataResolver, match: MatchRecord):
        season_id = resolver.resolve_season(match.season_year)
        competition_id = resolver.resolve_competition(season_id, match.competition, match.competition)
        team_ids = {
            "home": resolver.resolve_team(match.home_team, is_home=True),
            "away": resolver.resolve_team(match.opposition),
        }

        if repository.match_exists(competition_id, match.match_number):
            raise DuplicateMatchError(f"{match.competition} {match.season_year}", match.match_number)

        match_id = repository.insert_match(
            {
                "competition_id": competition_id,
                "match_number": match.match_number,
                "home_team_id": team_ids["home"],
                "away_team_id": team_ids["away"],
                "match_date": match.match_date,
                "venue": match.venue,
                "home_score_first_half": match.home_score_first_half,
                "home_score_second_half": match.home_score_second_half,
                "home_score_full_time": match.home_score_full_time,
                "away_score_first_half": match.away_score_first_half,
                "away_score_second_half": match.away_score_second_half,
                "away_score_full_time": match.away_score_full_time,
            }
        )

        period_rows = self._insert_team_periods(repository, match, match_id, team_ids)
        player_rows = self._insert_players(repository, resolver, match, match_id)
        return match_id, 1 + period_rows + player_rows

    def _insert_team_periods(self, repository, match: MatchRecord, match_id: int, team_ids: Dict[str, int]) -> int:
        if len(match.team_periods) != EXPECTED_TEAM_PERIODS:
            raise UnitIntegrityError(
                f"Expected {EXPECTED_TEAM_PERIODS} team statistics rows, found {len(match.team_periods)}"
            )

        seen: Set = set()
        for period in match.team_periods:
            key = (period.side, period.period)
            if key in seen or period.side not in team_ids:
                raise UnitIntegrityError(f"Unexpected team statistics row {key}")
            seen.add(key)

            row = {"match_id": match_id, "team_id": team_ids[period.side]}
            row.update(period.statistic_columns())
            repository.insert_team_statistics(row)

        return len(match.team_periods)

    def _insert_players(self, repository, resolver: ReferenceDataResolver, match: MatchRecord, match_id: int) -> int:
        loaded: Dict[int, str] = {}
        for player in match.players:
            position_id = resolver.resolve_position(player.position_code)
            player_id = resolver.resolve_player(player.player_name, player.jersey_number, position_id)
            previous: Optional[str] = loaded.get(player_id)
            if previous is not None:
                raise UnitIntegrityError(
                    f"Player '{player.player_name}' appears more than once (also as '{previous}')"
                )
            loaded[player_id] = player.player_name

            row = {"match_id": match_id, "player_id": player_id}
            row.update(player.statistic_columns())
            repository.insert_player_statistics(row)

        return len(match.players)
