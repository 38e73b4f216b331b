"""
Sheet Grammar and Value Coercion

Parses match metadata out of sheet names and title cells, and converts
spreadsheet cell values into the types stored in the database.
"""

import logging
import math
import re
from datetime import date
from typing import Any, Optional, Tuple

import pandas as pd

from gaa_etl.models import MatchMetadata

logger = logging.getLogger(__name__)

COMPETITION_TYPES = ("Championship", "League", "Cup", "Friendly")
DEFAULT_COMPETITION_TYPE = "League"

# "09. Championship vs Slaughtmanus 26.09.25"
MATCH_SHEET_PATTERN = re.compile(
    r"^(\d+)\.\s+(.+?)\s+vs\s+(.+?)\s+(\d{2})\.(\d{2})\.(\d{2})$"
)
# "09. Player stats vs Slaughtmanus 26.09.25"
PLAYER_SHEET_PATTERN = re.compile(r"^(\d+)\.\s+Player\s+stats\s+vs\s+", re.IGNORECASE)
MATCH_NUMBER_PREFIX = re.compile(r"^(\d+)\.\s+")

SCORE_PATTERN = re.compile(r"^(\d+)-(\d+)$")
SCORE_NOTATION_PATTERN = re.compile(r"^\d+-\d+(\(\d+f\))?$")


def _metadata_from_match(match: "re.Match", competition_group: int = 2) -> Optional[MatchMetadata]:
    day, month, year = (int(match.group(i)) for i in (4, 5, 6))
    try:
        match_date = date(2000 + year, month, day)
    except ValueError:
        logger.debug(f"Invalid calendar date {day:02d}.{month:02d}.{year:02d}")
        return None

    return MatchMetadata(
        match_number=int(match.group(1)),
        competition=match.group(competition_group).strip(),
        opposition=match.group(3).strip(),
        match_date=match_date,
    )


def parse_match_sheet_name(sheet_name: str) -> Optional[MatchMetadata]:
    """
    Parse "NN. Competition vs Opponent DD.MM.YY".

    Args:
        sheet_name: Worksheet name

    Returns:
        MatchMetadata, or None if the name does not follow the grammar
    """
    if not sheet_name:
        return None
    match = MATCH_SHEET_PATTERN.match(sheet_name.strip())
    if not match:
        return None
    return _metadata_from_match(match)


def parse_title_cell(text: Any, home_team: str) -> Optional[MatchMetadata]:
    """
    Parse the match title in cell B1: "NN. Competition <Home> vs Opponent DD.MM.YY".

    Sheet names are capped at 31 characters by Excel, so the title cell is
    the more reliable source when present.
    """
    if is_blank(text):
        return None
    pattern = re.compile(
        rf"^(\d+)\.\s+(.+?)\s+{re.escape(home_team)}\s+vs\s+(.+?)\s+(\d{{2}})\.(\d{{2}})\.(\d{{2}})$",
        re.IGNORECASE,
    )
    match = pattern.match(str(text).strip())
    if not match:
        return None
    return _metadata_from_match(match)


def is_player_sheet(sheet_name: str) -> bool:
    return bool(PLAYER_SHEET_PATTERN.match(sheet_name.strip()))


def sheet_match_number(sheet_name: str) -> Optional[int]:
    """Return the leading "NN." match number of a sheet name, if any."""
    match = MATCH_NUMBER_PREFIX.match(sheet_name.strip())
    return int(match.group(1)) if match else None


def normalize_competition(competition: str) -> Tuple[str, bool]:
    """
    Map a competition label onto one of the stored competition types.

    Returns:
        Tuple of (competition_type, recognised)
    """
    cleaned = (competition or "").strip()
    for known in COMPETITION_TYPES:
        if cleaned.lower() == known.lower():
            return known, True
    return DEFAULT_COMPETITION_TYPE, False


# ---------- Cell values ----------


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_number(value: Any) -> Optional[float]:
    """
    Convert a cell value to a float.

    Returns:
        The number, or None for a blank cell

    Raises:
        ValueError: If the value is present but not a finite number
    """
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got boolean {value!r}")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValueError(f"Expected a finite number, got {value!r}")
    else:
        text = str(value).strip().replace(",", "")
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"Expected a number, got {value!r}")

    # "inf", "1e400" and "nan" parse as floats but cannot be stored
    if not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return number


def to_percentage(value: Any) -> Optional[float]:
    """
    Convert a percentage cell to a fraction.

    "45%" becomes 0.45; numeric cells are taken as already-fractional.

    Raises:
        ValueError: If the value is present but not numeric
    """
    if isinstance(value, str) and value.strip().endswith("%"):
        number = to_number(value.strip()[:-1])
        return None if number is None else number / 100.0
    return to_number(value)


def count_value(value: Any) -> int:
    """Lenient count conversion: blank or non-numeric cells become 0."""
    try:
        number = to_number(value)
    except ValueError:
        return 0
    return 0 if number is None else int(round(number))


def percentage_value(value: Any) -> Optional[float]:
    """Lenient percentage conversion: non-numeric cells become None."""
    try:
        return to_percentage(value)
    except ValueError:
        return None


def text_value(value: Any) -> Optional[str]:
    """Convert a cell to stripped text; whole floats lose their ".0"."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_score(scoreline: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse "G-P" into (goals, points); None when the notation is not recognised."""
    if not scoreline:
        return None
    match = SCORE_PATTERN.match(scoreline.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def normalize_player_name(name: Any) -> str:
    """Strip and collapse internal whitespace."""
    if is_blank(name):
        return ""
    return " ".join(str(name).split())


def split_player_name(full_name: str) -> Tuple[str, str]:
    """Split "First Rest Of Name" into first and last name."""
    parts = normalize_player_name(full_name).split(" ", 1)
    first_name = parts[0]
    last_name = parts[1] if len(parts) > 1 else ""
    return first_name, last_name
