"""
Data Type and Range Validation

Counts must be non-negative numbers, percentages fractions in [0, 1]
with a small rounding allowance, and team-row values must fit the
columns they are stored in.
"""

from config.validation import ValidationConfig
from gaa_etl.fields import COUNT_FIELDS, PERCENTAGE_FIELDS, TEAM_COUNT_FIELDS
from gaa_etl.models import RANGE, RawPlayerRow, RawSheetRecord, ValidationResult
from gaa_etl.parsing import parse_score, text_value, to_number, to_percentage
from gaa_etl.validators.common import player_context, team_context


def validate_player_types(
    record: RawSheetRecord,
    row: RawPlayerRow,
    config: ValidationConfig,
) -> ValidationResult:
    """
    Range-check every count and percentage on a player row.

    Returns:
        ValidationResult with RANGE issues
    """
    result = ValidationResult()

    for field_def in COUNT_FIELDS:
        if field_def.header not in row.values:
            continue
        context = player_context(record, row, field=field_def.name)
        raw = row.values[field_def.header]
        try:
            value = to_number(raw)
        except ValueError:
            result.add_error(RANGE, f"{field_def.label} value '{raw}' is not a number", **context)
            continue
        if value is None:
            continue

        limit = config.count_max(field_def.name)
        if value < 0:
            result.add_error(RANGE, f"{field_def.label} cannot be negative ({value:g})", **context)
        elif value > limit:
            result.add_warning(RANGE, f"{field_def.label} value {value:g} exceeds expected maximum {limit}", **context)

    for field_def in PERCENTAGE_FIELDS:
        if field_def.header not in row.values:
            continue
        context = player_context(record, row, field=field_def.name)
        raw = row.values[field_def.header]
        try:
            value = to_percentage(raw)
        except ValueError:
            result.add_error(RANGE, f"{field_def.label} value '{raw}' is not a number", **context)
            continue
        if value is None:
            continue

        if value < 0:
            result.add_error(RANGE, f"{field_def.label} cannot be negative ({value:.2f})", **context)
        elif value > config.percentage_ceiling:
            result.add_error(
                RANGE,
                f"{field_def.label} {value:.2f} exceeds {config.percentage_ceiling:.2f}",
                **context,
            )
        elif value > 1.0:
            result.add_warning(RANGE, f"{field_def.label} {value:.3f} slightly exceeds 1.0 (rounding?)", **context)

    return result


def validate_team_types(record: RawSheetRecord, config: ValidationConfig) -> ValidationResult:
    """
    Range-check the team-period rows of a match sheet.

    Possession is stored under a [0, 1] check constraint, so any value
    outside it is an error rather than a rounding warning.
    """
    result = ValidationResult()

    for team_row in record.team_rows:
        for name in TEAM_COUNT_FIELDS:
            raw = team_row.values.get(name)
            context = team_context(record, team_row, field=name)
            try:
                value = to_number(raw)
            except ValueError:
                result.add_error(RANGE, f"'{raw}' is not a number", **context)
                continue
            if value is not None and value < 0:
                result.add_error(RANGE, f"Team statistic cannot be negative ({value:g})", **context)

        raw_possession = team_row.values.get("total_possession")
        context = team_context(record, team_row, field="total_possession")
        try:
            possession = to_percentage(raw_possession)
        except ValueError:
            result.add_error(RANGE, f"Possession '{raw_possession}' is not a number", **context)
            possession = None
        if possession is not None and not 0 <= possession <= 1:
            result.add_error(RANGE, f"Possession {possession:.3f} must be between 0 and 1", **context)

        scoreline = text_value(team_row.values.get("scoreline"))
        if scoreline is not None and parse_score(scoreline) is None:
            result.add_error(
                RANGE,
                f"Score '{scoreline}' is not in G-P notation",
                **team_context(record, team_row, field="scoreline"),
            )

    return result
