"""
Player Identification Validation

Jersey number, name and minutes must be usable before any statistic on
the row can be trusted. Uniqueness of jerseys and names is checked per
sheet.
"""

from collections import defaultdict
from typing import Dict, List

from config.validation import ValidationConfig
from gaa_etl.fields import JERSEY_HEADER, MINUTES_HEADER, NAME_HEADER
from gaa_etl.models import IDENTIFICATION, RawPlayerRow, RawSheetRecord, ValidationResult
from gaa_etl.parsing import is_blank, normalize_player_name, to_number
from gaa_etl.validators.common import describe, jersey_label, player_context

NAME_PUNCTUATION = set(" '-.")


def validate_player_identity(
    record: RawSheetRecord,
    row: RawPlayerRow,
    config: ValidationConfig,
) -> ValidationResult:
    """
    Validate jersey, name and minutes of one player row.

    Returns:
        ValidationResult with IDENTIFICATION issues
    """
    result = ValidationResult()
    _check_jersey(record, row, config, result)
    _check_name(record, row, config, result)
    _check_minutes(record, row, config, result)
    return result


def _check_jersey(record, row, config, result) -> None:
    context = player_context(record, row, field=JERSEY_HEADER)
    raw = row.get(JERSEY_HEADER)
    if is_blank(raw):
        result.add_error(IDENTIFICATION, "Jersey number is missing", **context)
        return
    try:
        number = to_number(raw)
    except ValueError:
        result.add_error(IDENTIFICATION, f"Jersey number '{raw}' is not a number", **context)
        return

    if not float(number).is_integer():
        result.add_error(IDENTIFICATION, f"Jersey number {number} is not a whole number", **context)
    elif number <= 0:
        result.add_error(IDENTIFICATION, f"Jersey number {int(number)} must be positive", **context)
    elif number > config.max_jersey_number:
        result.add_error(
            IDENTIFICATION,
            f"Jersey number {int(number)} exceeds maximum {config.max_jersey_number}",
            **context,
        )
    elif number > config.usual_max_jersey_number:
        result.add_warning(IDENTIFICATION, f"Unusually high jersey number {int(number)}", **context)


def _check_name(record, row, config, result) -> None:
    context = player_context(record, row, field=NAME_HEADER)
    raw = row.get(NAME_HEADER)
    if is_blank(raw):
        result.add_error(IDENTIFICATION, "Player name is empty", **context)
        return

    text = str(raw)
    name = text.strip()
    if len(name) < 2:
        result.add_error(IDENTIFICATION, f"Player name '{name}' is too short", **context)
        return
    if len(name) > config.max_name_length:
        result.add_error(
            IDENTIFICATION,
            f"Player name exceeds {config.max_name_length} characters",
            **context,
        )
        return

    if not all(ch.isalpha() or ch in NAME_PUNCTUATION for ch in name):
        result.add_warning(IDENTIFICATION, f"Player name '{name}' contains unusual characters", **context)
    if "  " in name:
        result.add_warning(IDENTIFICATION, f"Player name '{name}' contains double spaces", **context)
    if text != name:
        result.add_warning(IDENTIFICATION, f"Player name '{name}' has leading or trailing spaces", **context)
    if len(name) > 3 and (name.isupper() or name.islower()):
        result.add_warning(IDENTIFICATION, f"Player name '{name}' has unusual capitalisation", **context)


def _check_minutes(record, row, config, result) -> None:
    context = player_context(record, row, field=MINUTES_HEADER)
    raw = row.get(MINUTES_HEADER)
    if is_blank(raw):
        result.add_error(IDENTIFICATION, "Minutes played is missing", **context)
        return
    try:
        minutes = to_number(raw)
    except ValueError:
        result.add_error(IDENTIFICATION, f"Minutes played '{raw}' is not a number", **context)
        return

    if minutes < 0:
        result.add_error(IDENTIFICATION, f"Minutes played cannot be negative ({minutes:g})", **context)
    elif minutes > config.max_minutes:
        result.add_error(
            IDENTIFICATION,
            f"Minutes played {minutes:g} exceeds maximum {config.max_minutes}",
            **context,
        )
    elif minutes == 0:
        result.add_warning(IDENTIFICATION, "Player recorded 0 minutes (unused substitute?)", **context)
    elif minutes > config.usual_max_minutes:
        result.add_warning(IDENTIFICATION, f"Minutes played {minutes:g} exceeds a normal match", **context)


def validate_unique_identities(record: RawSheetRecord, config: ValidationConfig) -> ValidationResult:
    """
    Jersey numbers and player names must each appear once per sheet.

    Returns:
        ValidationResult with one IDENTIFICATION error per duplicated value
    """
    result = ValidationResult()
    by_jersey: Dict[object, List[RawPlayerRow]] = defaultdict(list)
    by_name: Dict[str, List[RawPlayerRow]] = defaultdict(list)

    for row in record.player_rows:
        jersey = jersey_label(row)
        if jersey is not None:
            by_jersey[jersey].append(row)
        name = normalize_player_name(row.get(NAME_HEADER)).lower()
        if name:
            by_name[name].append(row)

    for jersey, rows in by_jersey.items():
        if len(rows) > 1:
            players = ", ".join(describe(r) for r in rows)
            result.add_error(
                IDENTIFICATION,
                f"Jersey number {jersey} is used by more than one player: {players}",
                sheet=record.sheet_name,
                jersey=jersey,
                rows=[r.row_number for r in rows],
            )

    for rows in by_name.values():
        if len(rows) > 1:
            name = normalize_player_name(rows[0].get(NAME_HEADER))
            result.add_error(
                IDENTIFICATION,
                f"Player '{name}' appears more than once",
                sheet=record.sheet_name,
                player=name,
                rows=[r.row_number for r in rows],
            )

    return result
