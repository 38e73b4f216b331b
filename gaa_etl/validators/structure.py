"""
Sheet Structure Validation

Checks that a sheet has usable match metadata, a complete field map, a
plausible number of player rows and exactly six team-period rows. Errors
here reject the whole sheet and stop every later layer.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Optional

from config.validation import ValidationConfig
from gaa_etl.fields import CRITICAL_HEADERS, PERIODS, SIDES
from gaa_etl.models import STRUCTURE, RawSheetRecord, ValidationResult
from gaa_etl.parsing import normalize_competition

EXPECTED_TEAM_ROWS = len(PERIODS) * len(SIDES)


def validate_structure(
    record: RawSheetRecord,
    config: ValidationConfig,
    today: Optional[date] = None,
) -> ValidationResult:
    """
    Validate sheet metadata and shape.

    Args:
        record: Sheet to validate
        config: Validation thresholds
        today: Reference date for the future-date check (defaults to today)

    Returns:
        ValidationResult with STRUCTURE issues
    """
    result = ValidationResult()
    _check_sheet_name(record, config, result)
    _check_metadata(record, config, result, today or date.today())
    _check_field_map(record, config, result)
    _check_player_rows(record, config, result)
    _check_team_rows(record, result)
    return result


def _check_sheet_name(record: RawSheetRecord, config: ValidationConfig, result: ValidationResult) -> None:
    name = (record.sheet_name or "").strip()
    if not name:
        result.add_error(STRUCTURE, "Sheet name is empty", sheet=record.sheet_name)
    elif len(name) > config.max_sheet_name_length:
        result.add_warning(
            STRUCTURE,
            f"Sheet name is unusually long ({len(name)} characters)",
            sheet=record.sheet_name,
        )


def _check_metadata(
    record: RawSheetRecord,
    config: ValidationConfig,
    result: ValidationResult,
    today: date,
) -> None:
    sheet = record.sheet_name
    metadata = record.metadata
    if metadata is None:
        result.add_error(
            STRUCTURE,
            "Match details not recognised; expected 'NN. Competition vs Opponent DD.MM.YY'",
            sheet=sheet,
        )
        return

    if metadata.match_number <= 0:
        result.add_error(STRUCTURE, f"Invalid match number {metadata.match_number}", sheet=sheet)
    elif metadata.match_number > config.max_match_number:
        result.add_warning(STRUCTURE, f"Unusually high match number {metadata.match_number}", sheet=sheet)

    opposition = (metadata.opposition or "").strip()
    if not opposition:
        result.add_error(STRUCTURE, "Opposition team name is empty", sheet=sheet)
    elif len(opposition) < 2:
        result.add_warning(STRUCTURE, f"Opposition name '{opposition}' is very short", sheet=sheet)

    competition = (metadata.competition or "").strip()
    if not competition:
        result.add_error(STRUCTURE, "Competition is empty", sheet=sheet)
    else:
        competition_type, recognised = normalize_competition(competition)
        if not recognised:
            result.add_warning(
                STRUCTURE,
                f"Unknown competition '{competition}', will be stored as {competition_type}",
                sheet=sheet,
            )

    if metadata.match_date < config.earliest_match_date:
        result.add_error(
            STRUCTURE,
            f"Match date {metadata.match_date.isoformat()} is before {config.earliest_match_date.isoformat()}",
            sheet=sheet,
        )
    elif metadata.match_date > today + timedelta(days=config.max_days_in_future):
        result.add_error(
            STRUCTURE,
            f"Match date {metadata.match_date.isoformat()} is too far in the future",
            sheet=sheet,
        )


def _check_field_map(record: RawSheetRecord, config: ValidationConfig, result: ValidationResult) -> None:
    sheet = record.sheet_name
    field_map = record.field_map
    if not field_map:
        result.add_error(STRUCTURE, "Player statistics header row is missing or empty", sheet=sheet)
        return

    if len(field_map) < config.min_field_count:
        result.add_error(
            STRUCTURE,
            f"Only {len(field_map)} statistics columns found (minimum {config.min_field_count})",
            sheet=sheet,
        )

    for header in CRITICAL_HEADERS:
        if header not in field_map:
            result.add_error(STRUCTURE, f"Required column '{header}' is missing", sheet=sheet, field=header)

    if len(field_map) < config.expected_field_count:
        result.add_warning(
            STRUCTURE,
            f"{len(field_map)} statistics columns found, expected at least {config.expected_field_count}",
            sheet=sheet,
        )

    for header, column in field_map.items():
        if column <= 0:
            result.add_error(STRUCTURE, f"Column '{header}' has invalid index {column}", sheet=sheet, field=header)

    duplicated = [column for column, count in Counter(field_map.values()).items() if count > 1]
    for column in sorted(duplicated):
        headers = sorted(h for h, c in field_map.items() if c == column)
        result.add_warning(
            STRUCTURE,
            f"Column {column} is mapped to several fields: {', '.join(headers)}",
            sheet=sheet,
        )


def _check_player_rows(record: RawSheetRecord, config: ValidationConfig, result: ValidationResult) -> None:
    count = len(record.player_rows)
    if count == 0:
        result.add_error(STRUCTURE, "No player rows found", sheet=record.sheet_name)
    elif count < config.min_player_rows:
        result.add_warning(STRUCTURE, f"Only {count} player rows found", sheet=record.sheet_name)
    elif count > config.max_player_rows:
        result.add_warning(STRUCTURE, f"{count} player rows found, more than expected", sheet=record.sheet_name)


def _check_team_rows(record: RawSheetRecord, result: ValidationResult) -> None:
    sheet = record.sheet_name
    rows = record.team_rows
    if len(rows) != EXPECTED_TEAM_ROWS:
        result.add_error(
            STRUCTURE,
            f"Expected {EXPECTED_TEAM_ROWS} team statistics rows (3 periods x 2 teams), found {len(rows)}",
            sheet=sheet,
        )
        return

    seen = set()
    for row in rows:
        if row.side not in SIDES:
            result.add_error(STRUCTURE, f"Unknown team side '{row.side}'", sheet=sheet, team=row.side)
        if row.period not in PERIODS:
            result.add_error(
                STRUCTURE,
                f"Unknown period '{row.period}' (expected {', '.join(PERIODS)})",
                sheet=sheet,
                team=row.side,
                period=row.period,
            )
        key = (row.side, row.period)
        if key in seen:
            result.add_error(
                STRUCTURE,
                f"Duplicate team statistics for {row.side} team in period {row.period}",
                sheet=sheet,
                team=row.side,
                period=row.period,
            )
        seen.add(key)
