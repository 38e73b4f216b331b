"""
Business Rule Validation

Football-specific plausibility: bookings, activity against minutes,
possession retention, shooting, engagement rate and score notation for
each player, plus squad-level checks once per sheet. Only impossible
bookings are errors; everything else is a warning.
"""

from config.validation import ValidationConfig
from gaa_etl.models import BUSINESS_RULE, RawPlayerRow, RawSheetRecord, ValidationResult
from gaa_etl.parsing import SCORE_NOTATION_PATTERN
from gaa_etl.positions import GOALKEEPER
from gaa_etl.validators.common import describe, player_context, player_stats
from gaa_etl.validators.position import resolve_position

ACTIVITY_FIELDS = ("total_engagements", "tp", "psr", "total_shots", "tackles_total", "assists_total")


def validate_player_rules(
    record: RawSheetRecord,
    row: RawPlayerRow,
    config: ValidationConfig,
) -> ValidationResult:
    """
    Apply the per-player business rules.

    Returns:
        ValidationResult with BUSINESS_RULE issues
    """
    result = ValidationResult()
    stats = player_stats(row)
    context = player_context(record, row)
    minutes = stats["minutes_played"]

    # Bookings
    red, black, yellow = stats["red_cards"], stats["black_cards"], stats["yellow_cards"]
    if red > 1:
        result.add_error(
            BUSINESS_RULE,
            f"Player has {red} red cards (maximum 1 per match)",
            **dict(context, field="red_cards"),
        )
    if black > 1:
        result.add_error(
            BUSINESS_RULE,
            f"Player has {black} black cards (maximum 1 per match)",
            **dict(context, field="black_cards"),
        )
    if (red > 0 or black > 0) and minutes > 60:
        result.add_warning(
            BUSINESS_RULE,
            f"Player received a red or black card but played {minutes} minutes",
            **dict(context, field="minutes_played"),
        )
    if red + black + yellow > 2:
        result.add_warning(BUSINESS_RULE, f"Player has {red + black + yellow} cards in one match", **context)

    # Activity against minutes
    activity = sum(stats[name] for name in ACTIVITY_FIELDS)
    if minutes == 0 and activity > 0:
        result.add_warning(BUSINESS_RULE, "Player has statistics but 0 minutes played", **context)
    if minutes > 30 and stats["total_engagements"] == 0:
        result.add_warning(
            BUSINESS_RULE,
            f"Player played {minutes} minutes with no engagements",
            **dict(context, field="total_engagements"),
        )

    # Possession retention
    if stats["turnovers"] > 5 and stats["tow"] == 0:
        result.add_warning(
            BUSINESS_RULE,
            f"Player lost {stats['turnovers']} turnovers and won none",
            **dict(context, field="turnovers"),
        )
    if stats["tpl"] > 0 and stats["turnovers"] > stats["tpl"]:
        result.add_warning(
            BUSINESS_RULE,
            f"Turnovers ({stats['turnovers']}) exceed total possessions lost ({stats['tpl']})",
            **dict(context, field="turnovers"),
        )

    # Shooting
    shots = stats["total_shots"]
    successes = (
        stats["shots_play_points"] + stats["shots_play_2points"] + stats["shots_play_goals"]
        + stats["frees_points"] + stats["frees_2points"] + stats["frees_goals"]
    )
    if shots > 5:
        if successes == 0:
            result.add_warning(
                BUSINESS_RULE,
                f"Player took {shots} shots without scoring",
                **dict(context, field="total_shots"),
            )
        elif successes / shots < 0.1:
            result.add_warning(
                BUSINESS_RULE,
                f"Very low shooting accuracy ({successes / shots:.0%}) from {shots} shots",
                **dict(context, field="total_shots"),
            )
    pct = stats["total_shots_percentage"]
    if shots >= 5 and pct is not None and pct >= 1.0:
        result.add_warning(
            BUSINESS_RULE,
            f"Perfect shooting accuracy from {shots} shots, please verify",
            **dict(context, field="total_shots_percentage"),
        )

    # Engagement rate
    if minutes >= 20:
        rate = stats["total_engagements"] / minutes
        if rate > 2.0:
            result.add_warning(
                BUSINESS_RULE,
                f"Very high engagement rate ({rate:.1f} per minute)",
                **dict(context, field="total_engagements"),
            )
        elif rate < 0.2 and minutes > 40:
            result.add_warning(
                BUSINESS_RULE,
                f"Very low engagement rate ({rate:.1f} per minute)",
                **dict(context, field="total_engagements"),
            )

    # Score notation
    notation = stats["scores"]
    if notation and not SCORE_NOTATION_PATTERN.match(notation):
        result.add_warning(
            BUSINESS_RULE,
            f"Score notation '{notation}' is not in G-PP(Ff) format, e.g. '1-03' or '0-05(2f)'",
            **dict(context, field="scores"),
        )

    return result


def validate_team_rules(record: RawSheetRecord, config: ValidationConfig) -> ValidationResult:
    """
    Squad-level plausibility, evaluated once per sheet.

    Returns:
        ValidationResult with BUSINESS_RULE warnings
    """
    result = ValidationResult()
    sheet = record.sheet_name
    rows = record.player_rows
    stats_by_row = [(row, player_stats(row)) for row in rows]

    count = len(rows)
    if count < config.min_squad_size:
        result.add_warning(BUSINESS_RULE, f"Only {count} players recorded (expected at least {config.min_squad_size})", sheet=sheet)
    elif count > config.max_squad_size:
        result.add_warning(BUSINESS_RULE, f"{count} players recorded (more than {config.max_squad_size})", sheet=sheet)

    has_goalkeeper = any(
        stats["gk_total_kickouts"] > 0 or resolve_position(row, stats)[0] == GOALKEEPER
        for row, stats in stats_by_row
    )
    if not has_goalkeeper:
        result.add_warning(BUSINESS_RULE, "No goalkeeper detected (no kickouts recorded)", sheet=sheet)

    total_minutes = sum(stats["minutes_played"] for _, stats in stats_by_row)
    if total_minutes < config.min_total_minutes:
        result.add_warning(BUSINESS_RULE, f"Total player-minutes ({total_minutes}) is low", sheet=sheet)
    elif total_minutes > config.max_total_minutes:
        result.add_warning(BUSINESS_RULE, f"Total player-minutes ({total_minutes}) is high", sheet=sheet)

    regulars = [(row, stats) for row, stats in stats_by_row if stats["minutes_played"] > config.regular_player_minutes]
    if len(regulars) < config.min_regular_players:
        result.add_warning(
            BUSINESS_RULE,
            f"Only {len(regulars)} players with more than {config.regular_player_minutes} minutes",
            sheet=sheet,
        )

    inactive = [describe(row) for row, stats in regulars if stats["total_engagements"] == 0]
    if inactive:
        result.add_warning(
            BUSINESS_RULE,
            f"Players with more than {config.regular_player_minutes} minutes but 0 engagements: {', '.join(inactive)}",
            sheet=sheet,
        )

    return result
