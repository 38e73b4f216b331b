"""
Shared helpers for the validation layers.
"""

from typing import Any, Dict

from gaa_etl.fields import (
    COUNT,
    JERSEY_HEADER,
    MINUTES_HEADER,
    NAME_HEADER,
    PERCENTAGE,
    PLAYER_FIELDS,
)
from gaa_etl.models import RawPlayerRow, RawSheetRecord, RawTeamRow
from gaa_etl.parsing import count_value, normalize_player_name, percentage_value, text_value


def jersey_label(row: RawPlayerRow) -> Any:
    """The jersey as an int when it is numeric, otherwise the raw text."""
    raw = row.get(JERSEY_HEADER)
    text = text_value(raw)
    if text is None:
        return None
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return text


def player_context(record: RawSheetRecord, row: RawPlayerRow, **extra: Any) -> Dict[str, Any]:
    """Context locating a player row: sheet, spreadsheet row, jersey and name."""
    context: Dict[str, Any] = {"sheet": record.sheet_name, "row": row.row_number}
    jersey = jersey_label(row)
    if jersey is not None:
        context["jersey"] = jersey
    name = normalize_player_name(row.get(NAME_HEADER))
    if name:
        context["player"] = name
    context.update(extra)
    return context


def team_context(record: RawSheetRecord, team_row: RawTeamRow, **extra: Any) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "sheet": record.sheet_name,
        "team": team_row.side,
        "period": team_row.period,
    }
    context.update(extra)
    return context


def player_stats(row: RawPlayerRow) -> Dict[str, Any]:
    """
    Leniently converted statistics for one player row, keyed by column name.

    Non-numeric counts read as 0 and unreadable percentages as None; the
    data-type layer is responsible for reporting them.
    """
    stats: Dict[str, Any] = {"minutes_played": count_value(row.get(MINUTES_HEADER))}
    for field_def in PLAYER_FIELDS:
        raw = row.get(field_def.header)
        if field_def.kind == COUNT:
            stats[field_def.name] = count_value(raw)
        elif field_def.kind == PERCENTAGE:
            stats[field_def.name] = percentage_value(raw)
        else:
            stats[field_def.name] = text_value(raw)
    return stats


def describe(row: RawPlayerRow) -> str:
    """Short "#7 Sean Murphy" label used in messages."""
    jersey = jersey_label(row)
    name = normalize_player_name(row.get(NAME_HEADER)) or "unnamed player"
    return f"#{jersey} {name}" if jersey is not None else name
