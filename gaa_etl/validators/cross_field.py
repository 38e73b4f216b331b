"""
Cross-Field Consistency Validation

Reconciles totals with their breakdowns and stored percentages with the
counts they are derived from. Mismatches are warnings: the sheet is
still loaded, but the discrepancy is reported against the named field.
"""

from typing import Dict, Optional, Tuple

from config.validation import ValidationConfig
from gaa_etl.fields import PERIODS, SIDES
from gaa_etl.models import CONSISTENCY, RawPlayerRow, RawSheetRecord, ValidationResult
from gaa_etl.parsing import parse_score, percentage_value, text_value
from gaa_etl.validators.common import player_context, player_stats

# total column -> columns that must add up to it
TOTAL_BREAKDOWNS = [
    ("ko_drum_kow", ("ko_drum_wc", "ko_drum_bw", "ko_drum_sw")),
    ("ko_opp_kow", ("ko_opp_wc", "ko_opp_bw", "ko_opp_sw")),
    ("ta", ("kr", "kl", "cr", "cl")),
    (
        "shots_play_total",
        (
            "shots_play_points",
            "shots_play_2points",
            "shots_play_goals",
            "shots_play_wide",
            "shots_play_short",
            "shots_play_save",
            "shots_play_woodwork",
            "shots_play_blocked",
        ),
    ),
    (
        "frees_total",
        (
            "frees_points",
            "frees_2points",
            "frees_goals",
            "frees_wide",
            "frees_short",
            "frees_save",
            "frees_woodwork",
        ),
    ),
    ("total_shots", ("shots_play_total", "frees_total")),
    ("assists_total", ("assists_point", "assists_goal")),
    ("tackles_total", ("tackles_contested", "tackles_missed")),
    (
        "frees_conceded_total",
        (
            "frees_conceded_attack",
            "frees_conceded_midfield",
            "frees_conceded_defense",
            "frees_conceded_penalty",
        ),
    ),
    ("frees_50m_total", ("frees_50m_delay", "frees_50m_dissent", "frees_50m_3v3")),
    ("gk_total_kickouts", ("gk_kickout_retained", "gk_kickout_lost")),
]

PLAY_SCORES = ("shots_play_points", "shots_play_2points", "shots_play_goals")
FREE_SCORES = ("frees_points", "frees_2points", "frees_goals")

# percentage column -> (numerator columns, denominator column)
DERIVED_PERCENTAGES = [
    ("shots_play_percentage", PLAY_SCORES, "shots_play_total"),
    ("frees_percentage", FREE_SCORES, "frees_total"),
    ("total_shots_percentage", PLAY_SCORES + FREE_SCORES, "total_shots"),
    ("tackles_percentage", ("tackles_contested",), "tackles_total"),
    ("gk_kickout_percentage", ("gk_kickout_retained",), "gk_total_kickouts"),
]

THROW_UP_IMBALANCE = 10


def validate_player_consistency(
    record: RawSheetRecord,
    row: RawPlayerRow,
    config: ValidationConfig,
) -> ValidationResult:
    """
    Reconcile totals, percentages and related counts on one player row.

    Returns:
        ValidationResult with CONSISTENCY warnings
    """
    result = ValidationResult()
    stats = player_stats(row)

    for total_field, parts in TOTAL_BREAKDOWNS:
        total = stats[total_field]
        breakdown = sum(stats[p] for p in parts)
        if abs(total - breakdown) > config.count_tolerance:
            result.add_warning(
                CONSISTENCY,
                f"{total_field} is {total} but its breakdown ({' + '.join(parts)}) sums to {breakdown}",
                **player_context(record, row, field=total_field, expected=breakdown, actual=total),
            )

    for pct_field, numerators, denominator_field in DERIVED_PERCENTAGES:
        stored = stats[pct_field]
        denominator = stats[denominator_field]
        if stored is None or denominator <= 0:
            continue
        expected = sum(stats[n] for n in numerators) / denominator
        if abs(stored - expected) > config.percentage_tolerance:
            result.add_warning(
                CONSISTENCY,
                f"{pct_field} is {stored:.2f} but the counts give {expected:.2f}",
                **player_context(
                    record, row, field=pct_field, expected=round(expected, 4), actual=stored
                ),
            )

    if stats["hp"] > stats["ha"]:
        result.add_warning(
            CONSISTENCY,
            f"Hand passes ({stats['hp']}) exceed hand pass attempts ({stats['ha']})",
            **player_context(record, row, field="hp"),
        )

    won, lost = stats["throw_up_won"], stats["throw_up_lost"]
    if (won > 0 and lost > THROW_UP_IMBALANCE) or (lost > 0 and won > THROW_UP_IMBALANCE):
        result.add_warning(
            CONSISTENCY,
            f"Throw-ups won ({won}) and lost ({lost}) are heavily imbalanced",
            **player_context(record, row, field="throw_up_won"),
        )

    return result


def _period_values(record: RawSheetRecord) -> Dict[Tuple[str, str], Dict[str, object]]:
    return {(row.side, row.period): row.values for row in record.team_rows}


def validate_match_consistency(record: RawSheetRecord, config: ValidationConfig) -> ValidationResult:
    """
    Reconcile period scores with the full-time score, and both teams'
    possession with 100% for each period.
    """
    result = ValidationResult()
    periods = _period_values(record)

    for side in SIDES:
        scores = [
            parse_score(text_value(periods.get((side, period), {}).get("scoreline")))
            for period in PERIODS
        ]
        if any(score is None for score in scores):
            continue
        first, second, full = scores
        for index, unit in enumerate(("goals", "points")):
            tolerance = max(1, int(full[index] * 0.1))
            halves = first[index] + second[index]
            if abs(halves - full[index]) > tolerance:
                result.add_warning(
                    CONSISTENCY,
                    f"{side} {unit}: {first[index]} + {second[index]} does not match full time {full[index]}",
                    sheet=record.sheet_name,
                    team=side,
                    field="scoreline",
                )

    for period in PERIODS:
        home = _possession(periods.get(("home", period)))
        away = _possession(periods.get(("away", period)))
        if home is None or away is None:
            continue
        if abs(home + away - 1.0) > config.possession_tolerance:
            result.add_warning(
                CONSISTENCY,
                f"Possession in period {period} sums to {home + away:.2f}, expected 1.00",
                sheet=record.sheet_name,
                period=period,
                field="total_possession",
            )

    return result


def _possession(values: Optional[Dict[str, object]]) -> Optional[float]:
    if values is None:
        return None
    return percentage_value(values.get("total_possession"))
