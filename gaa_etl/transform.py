"""
Data Transformation

Converts a validated RawSheetRecord into a typed MatchRecord: cell
values are coerced to the column types, names and competitions are
normalized, and every player gets a position.
"""

import logging
from typing import Dict, Tuple

from gaa_etl.fields import (
    FIELDS_BY_NAME,
    JERSEY_HEADER,
    MINUTES_HEADER,
    NAME_HEADER,
    PERCENTAGE,
    TEAM_COUNT_FIELDS,
)
from gaa_etl.models import (
    MatchRecord,
    PlayerStatisticsRecord,
    RawPlayerRow,
    RawSheetRecord,
    RawTeamRow,
    TeamPeriodStatisticsRecord,
)
from gaa_etl.parsing import (
    count_value,
    normalize_competition,
    normalize_player_name,
    percentage_value,
    text_value,
)
from gaa_etl.validators.common import player_stats
from gaa_etl.validators.position import resolve_position

logger = logging.getLogger(__name__)

SCORE_COLUMNS = {
    ("home", "1st"): "home_score_first_half",
    ("home", "2nd"): "home_score_second_half",
    ("home", "Full"): "home_score_full_time",
    ("away", "1st"): "away_score_first_half",
    ("away", "2nd"): "away_score_second_half",
    ("away", "Full"): "away_score_full_time",
}


class MatchTransformer:
    """
    Transforms validated sheets into persistence records.

    Operations:
    - Competition normalization (unknown types become League)
    - Player name cleanup and position assignment
    - Count and percentage coercion
    - Period scores copied onto the match row
    """

    def __init__(self, home_team_name: str = "Drum"):
        """
        Initialize transformer.

        Args:
            home_team_name: Name of the tracked team whose sheets are loaded
        """
        self.home_team_name = home_team_name

    def transform(self, record: RawSheetRecord) -> MatchRecord:
        """
        Transform one validated sheet.

        Args:
            record: Sheet that passed validation

        Returns:
            MatchRecord ready for the loader

        Raises:
            ValueError: If the sheet has no match metadata
        """
        metadata = record.metadata
        if metadata is None:
            raise ValueError(f"Sheet '{record.sheet_name}' has no match metadata")

        competition, recognised = normalize_competition(metadata.competition)
        if not recognised:
            logger.warning(
                f"Unknown competition '{metadata.competition}' in '{record.sheet_name}', using {competition}"
            )

        team_periods = [self._team_period(row) for row in record.team_rows]
        scores: Dict[str, str] = {}
        for period in team_periods:
            column = SCORE_COLUMNS.get((period.side, period.period))
            if column:
                scores[column] = period.scoreline

        players = [self._player(row) for row in record.player_rows]

        match = MatchRecord(
            sheet_name=record.sheet_name,
            match_number=metadata.match_number,
            competition=competition,
            season_year=metadata.match_date.year,
            match_date=metadata.match_date,
            home_team=self.home_team_name,
            opposition=" ".join(metadata.opposition.split()),
            team_periods=team_periods,
            players=players,
            **scores,
        )
        logger.debug(
            f"Transformed '{record.sheet_name}': {len(team_periods)} team periods, {len(players)} players"
        )
        return match

    def _team_period(self, row: RawTeamRow) -> TeamPeriodStatisticsRecord:
        counts = {name: count_value(row.values.get(name)) for name in TEAM_COUNT_FIELDS}
        return TeamPeriodStatisticsRecord(
            side=row.side,
            period=row.period,
            scoreline=text_value(row.values.get("scoreline")),
            total_possession=percentage_value(row.values.get("total_possession")),
            **counts,
        )

    def _player(self, row: RawPlayerRow) -> PlayerStatisticsRecord:
        stats = player_stats(row)
        position, assigned = resolve_position(row, stats)
        jersey, name = _identity(row)

        values = {}
        for column, value in stats.items():
            field_def = FIELDS_BY_NAME.get(column)
            if field_def is None:
                continue
            if field_def.kind == PERCENTAGE and value is not None:
                value = round(value, 4)
            values[column] = value

        if not assigned:
            logger.debug(f"{name}: position {position} detected from statistics")

        return PlayerStatisticsRecord(
            jersey_number=jersey,
            player_name=name,
            position_code=position,
            minutes_played=count_value(row.get(MINUTES_HEADER)),
            **values,
        )


def _identity(row: RawPlayerRow) -> Tuple[int, str]:
    return count_value(row.get(JERSEY_HEADER)), normalize_player_name(row.get(NAME_HEADER))


def transform_sheet(record: RawSheetRecord, home_team_name: str = "Drum") -> MatchRecord:
    """
    Convenience function to transform a validated sheet.

    Args:
        record: Sheet that passed validation
        home_team_name: Name of the tracked team

    Returns:
        MatchRecord
    """
    return MatchTransformer(home_team_name).transform(record)
