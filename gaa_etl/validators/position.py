"""
Position-Specific Validation

Heuristics on what a goalkeeper, defender, midfielder or forward
usually records. Every finding is a warning; unusual games happen.
"""

from typing import Any, Dict, Tuple

from config.validation import ValidationConfig
from gaa_etl.models import POSITION, RawPlayerRow, RawSheetRecord, ValidationResult
from gaa_etl.positions import (
    DEFENDER,
    FORWARD,
    GOALKEEPER,
    MIDFIELDER,
    POSITION_CODES,
    detect_position,
)
from gaa_etl.validators.common import player_context, player_stats


def resolve_position(row: RawPlayerRow, stats: Dict[str, Any]) -> Tuple[str, bool]:
    """
    Pick the position a row is validated against.

    Returns:
        Tuple of (position_code, assigned); assigned is False when the
        code was detected from statistics
    """
    code = (row.position_code or "").strip().upper()
    if code in POSITION_CODES:
        return code, True
    return detect_position(stats), False


def validate_player_position(
    record: RawSheetRecord,
    row: RawPlayerRow,
    config: ValidationConfig,
) -> ValidationResult:
    """
    Apply the heuristics for the player's position.

    Returns:
        ValidationResult with POSITION warnings
    """
    result = ValidationResult()
    stats = player_stats(row)

    if row.position_code and row.position_code.strip().upper() not in POSITION_CODES:
        result.add_warning(
            POSITION,
            f"Unknown position '{row.position_code}', position will be detected from statistics",
            **player_context(record, row, field="position"),
        )

    position, _ = resolve_position(row, stats)
    context = player_context(record, row, position=position)
    checks = {
        GOALKEEPER: _goalkeeper_findings,
        DEFENDER: _defender_findings,
        MIDFIELDER: _midfielder_findings,
        FORWARD: _forward_findings,
    }[position]

    for message in checks(stats):
        result.add_warning(POSITION, message, **context)

    return result


def _shots(stats) -> int:
    return stats["total_shots"]


def _scores(stats) -> int:
    return (
        stats["shots_play_points"] + stats["shots_play_2points"] + stats["shots_play_goals"]
        + stats["frees_points"] + stats["frees_2points"] + stats["frees_goals"]
    )


def _goalkeeper_findings(stats):
    minutes = stats["minutes_played"]
    if stats["gk_total_kickouts"] == 0:
        yield "Goalkeeper has no kickouts recorded"
    if _shots(stats) > 2:
        yield f"Goalkeeper has {_shots(stats)} shots (unusual)"
    goals = stats["shots_play_goals"] + stats["frees_goals"]
    if goals > 0:
        yield f"Goalkeeper scored {goals} goals (very unusual)"
    if stats["ta"] > 5:
        yield f"Goalkeeper has {stats['ta']} attacks (unusual)"
    if minutes > 30 and stats["tackles_total"] == 0:
        yield f"Goalkeeper played {minutes} minutes without a tackle"


def _defender_findings(stats):
    minutes = stats["minutes_played"]
    if stats["gk_total_kickouts"] > 0:
        yield f"Defender has {stats['gk_total_kickouts']} goalkeeper kickouts"
    if minutes > 30 and stats["tackles_total"] == 0:
        yield f"Defender played {minutes} minutes without a tackle"
    if _shots(stats) > 10:
        yield f"Defender has {_shots(stats)} shots (unusually attacking)"
    if minutes > 40 and stats["tackles_total"] < 2 and stats["interceptions"] < 2:
        yield f"Defender played {minutes} minutes with little defensive activity"


def _midfielder_findings(stats):
    minutes = stats["minutes_played"]
    if stats["gk_total_kickouts"] > 0:
        yield f"Midfielder has {stats['gk_total_kickouts']} goalkeeper kickouts"
    if minutes > 40 and stats["tp"] < 5:
        yield f"Midfielder played {minutes} minutes with only {stats['tp']} possessions"
    if minutes > 40 and stats["ko_drum_kow"] + stats["ko_opp_kow"] == 0:
        yield f"Midfielder played {minutes} minutes without winning a kickout"
    if minutes > 40 and stats["tackles_total"] == 0:
        yield f"Midfielder played {minutes} minutes without a tackle"


def _forward_findings(stats):
    minutes = stats["minutes_played"]
    if stats["gk_total_kickouts"] > 0:
        yield f"Forward has {stats['gk_total_kickouts']} goalkeeper kickouts"
    if minutes > 40 and _shots(stats) == 0:
        yield f"Forward played {minutes} minutes without a shot"
    if minutes > 40 and stats["ta"] < 3:
        yield f"Forward played {minutes} minutes with only {stats['ta']} attacks"
    if stats["tackles_total"] > 8:
        yield f"Forward has {stats['tackles_total']} tackles (unusually defensive)"
    if minutes > 50 and _scores(stats) + stats["assists_total"] == 0:
        yield f"Forward played {minutes} minutes without a score or assist"
