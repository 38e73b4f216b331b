"""
ETL Data Models

Dataclasses passed between the reader, the validation pipeline, the
transformer, the loader and the orchestrator.
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import date
from typing import Any, Dict, List, Optional

# Issue codes
STRUCTURE = "STRUCTURE"
IDENTIFICATION = "IDENTIFICATION"
RANGE = "RANGE"
CONSISTENCY = "CONSISTENCY"
POSITION = "POSITION"
BUSINESS_RULE = "BUSINESS_RULE"
DUPLICATE_MATCH = "DUPLICATE_MATCH"
LOAD_FAILED = "LOAD_FAILED"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
READ_FAILED = "READ_FAILED"
NO_SHEETS = "NO_SHEETS"
CANCELLED = "CANCELLED"


# ---------- Raw input ----------


@dataclass
class MatchMetadata:
    """Match details parsed from the sheet name or its title cell."""

    match_number: int
    competition: str
    opposition: str
    match_date: date


@dataclass
class RawPlayerRow:
    """One player line from a player-stats sheet, values keyed by header."""

    row_number: int
    values: Dict[str, Any]
    position_code: Optional[str] = None

    def get(self, header: str, default: Any = None) -> Any:
        return self.values.get(header, default)


@dataclass
class RawTeamRow:
    """Statistics for one team in one period, read from a match sheet."""

    side: str
    period: str
    values: Dict[str, Any]


@dataclass
class RawSheetRecord:
    """Everything read for one match: metadata, field map, player and team rows."""

    sheet_name: str
    metadata: Optional[MatchMetadata]
    field_map: Dict[str, int] = field(default_factory=dict)
    player_rows: List[RawPlayerRow] = field(default_factory=list)
    team_rows: List[RawTeamRow] = field(default_factory=list)


# ---------- Validation ----------


@dataclass
class ValidationIssue:
    """An error or warning with enough context to find the offending cell."""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": dict(self.context)}

    def __str__(self) -> str:
        where = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"[{self.code}] {self.message}" + (f" ({where})" if where else "")


@dataclass
class ValidationResult:
    """Ordered errors and warnings produced by one or more validation layers."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, code: str, message: str, **context: Any) -> None:
        self.errors.append(ValidationIssue(code, message, context))

    def add_warning(self, code: str, message: str, **context: Any) -> None:
        self.warnings.append(ValidationIssue(code, message, context))

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Append another result's issues, keeping their order."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


# ---------- Persistence records ----------


@dataclass
class PlayerStatisticsRecord:
    """
    Typed statistics for one player in one match.

    Field names match the player_match_statistics columns; jersey_number,
    player_name and position_code feed reference resolution instead.
    """

    jersey_number: int
    player_name: str
    position_code: Optional[str] = None
    minutes_played: int = 0

    # Summary
    total_engagements: int = 0
    te_per_psr: Optional[float] = None
    scores: Optional[str] = None
    psr: int = 0
    psr_per_tp: Optional[float] = None

    # Possession play
    tp: int = 0
    tow: int = 0
    interceptions: int = 0
    tpl: int = 0
    kp: int = 0
    hp: int = 0
    ha: int = 0
    turnovers: int = 0
    ineffective: int = 0
    shot_short: int = 0
    shot_save: int = 0
    fouled: int = 0
    woodwork: int = 0

    # Kickouts
    ko_drum_kow: int = 0
    ko_drum_wc: int = 0
    ko_drum_bw: int = 0
    ko_drum_sw: int = 0
    ko_opp_kow: int = 0
    ko_opp_wc: int = 0
    ko_opp_bw: int = 0
    ko_opp_sw: int = 0

    # Attacking play
    ta: int = 0
    kr: int = 0
    kl: int = 0
    cr: int = 0
    cl: int = 0

    # Shots from play
    shots_play_total: int = 0
    shots_play_points: int = 0
    shots_play_2points: int = 0
    shots_play_goals: int = 0
    shots_play_wide: int = 0
    shots_play_short: int = 0
    shots_play_save: int = 0
    shots_play_woodwork: int = 0
    shots_play_blocked: int = 0
    shots_play_45: int = 0
    shots_play_percentage: Optional[float] = None

    # Frees
    frees_total: int = 0
    frees_points: int = 0
    frees_2points: int = 0
    frees_goals: int = 0
    frees_wide: int = 0
    frees_short: int = 0
    frees_save: int = 0
    frees_woodwork: int = 0
    frees_45: int = 0
    frees_qf: int = 0
    frees_percentage: Optional[float] = None

    # Total shots
    total_shots: int = 0
    total_shots_percentage: Optional[float] = None

    # Assists
    assists_total: int = 0
    assists_point: int = 0
    assists_goal: int = 0

    # Tackles
    tackles_total: int = 0
    tackles_contested: int = 0
    tackles_missed: int = 0
    tackles_percentage: Optional[float] = None

    # Frees conceded
    frees_conceded_total: int = 0
    frees_conceded_attack: int = 0
    frees_conceded_midfield: int = 0
    frees_conceded_defense: int = 0
    frees_conceded_penalty: int = 0

    # 50m frees
    frees_50m_total: int = 0
    frees_50m_delay: int = 0
    frees_50m_dissent: int = 0
    frees_50m_3v3: int = 0

    # Bookings
    yellow_cards: int = 0
    black_cards: int = 0
    red_cards: int = 0

    # Throw-ups
    throw_up_won: int = 0
    throw_up_lost: int = 0

    # Goalkeeping
    gk_total_kickouts: int = 0
    gk_kickout_retained: int = 0
    gk_kickout_lost: int = 0
    gk_kickout_percentage: Optional[float] = None
    gk_saves: int = 0

    def statistic_columns(self) -> Dict[str, Any]:
        """Return the player_match_statistics column values (no identity fields)."""
        identity = {"jersey_number", "player_name", "position_code"}
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in identity}


@dataclass
class TeamPeriodStatisticsRecord:
    """One row of match_team_statistics, before team ids are resolved."""

    side: str
    period: str
    scoreline: Optional[str] = None
    total_possession: Optional[float] = None
    score_source_kickout_long: int = 0
    score_source_kickout_short: int = 0
    score_source_opp_kickout_long: int = 0
    score_source_opp_kickout_short: int = 0
    score_source_turnover: int = 0
    score_source_possession_lost: int = 0
    score_source_shot_short: int = 0
    score_source_throw_up_in: int = 0
    shot_source_kickout_long: int = 0
    shot_source_kickout_short: int = 0
    shot_source_opp_kickout_long: int = 0
    shot_source_opp_kickout_short: int = 0
    shot_source_turnover: int = 0
    shot_source_possession_lost: int = 0
    shot_source_shot_short: int = 0
    shot_source_throw_up_in: int = 0

    def statistic_columns(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "side"}


@dataclass
class MatchRecord:
    """A fully typed match-unit ready for the loader."""

    sheet_name: str
    match_number: int
    competition: str
    season_year: int
    match_date: date
    home_team: str
    opposition: str
    venue: str = "Home"
    home_score_first_half: Optional[str] = None
    home_score_second_half: Optional[str] = None
    home_score_full_time: Optional[str] = None
    away_score_first_half: Optional[str] = None
    away_score_second_half: Optional[str] = None
    away_score_full_time: Optional[str] = None
    team_periods: List[TeamPeriodStatisticsRecord] = field(default_factory=list)
    players: List[PlayerStatisticsRecord] = field(default_factory=list)


# ---------- Results ----------


@dataclass
class LoadResult:
    """Outcome of loading one match-unit."""

    success: bool
    rows_created: int = 0
    match_id: Optional[int] = None
    references_created: Dict[str, int] = field(default_factory=dict)
    error: Optional[ValidationIssue] = None


@dataclass
class EtlResult:
    """Aggregated outcome of processing one workbook."""

    success: bool = False
    units_processed: int = 0
    rows_created: int = 0
    sheets_rejected: int = 0
    references_created: Dict[str, int] = field(default_factory=dict)
    warnings: List[ValidationIssue] = field(default_factory=list)
    errors: List[ValidationIssue] = field(default_factory=list)
    duration_ms: int = 0

    def add_error(self, code: str, message: str, **context: Any) -> None:
        self.errors.append(ValidationIssue(code, message, context))

    def add_warning(self, code: str, message: str, **context: Any) -> None:
        self.warnings.append(ValidationIssue(code, message, context))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["warnings"] = [w.to_dict() for w in self.warnings]
        data["errors"] = [e.to_dict() for e in self.errors]
        return data
