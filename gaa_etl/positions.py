"""
Player Positions

Seeded position codes, the sheets that assign them explicitly, and the
statistical fallback used when a player is not on any position sheet.
"""

from typing import Any, Mapping

GOALKEEPER = "GK"
DEFENDER = "DEF"
MIDFIELDER = "MID"
FORWARD = "FWD"

POSITION_CODES = (GOALKEEPER, DEFENDER, MIDFIELDER, FORWARD)

POSITION_SHEETS = {
    "Goalkeepers": GOALKEEPER,
    "Defenders": DEFENDER,
    "Midfielders": MIDFIELDER,
    "Forwards": FORWARD,
}


def detect_position(stats: Mapping[str, Any]) -> str:
    """
    Infer a position from a player's statistics.

    Kickouts taken mark a goalkeeper; high shot or attack volume marks a
    forward; tackling without shooting marks a defender; everyone else is
    treated as a midfielder.

    Args:
        stats: Numeric statistics keyed by column name

    Returns:
        Position code
    """
    if stats.get("gk_total_kickouts", 0) > 0:
        return GOALKEEPER
    if stats.get("total_shots", 0) > 5 or stats.get("ta", 0) > 10:
        return FORWARD
    if stats.get("tackles_total", 0) > 3 and stats.get("total_shots", 0) <= 2:
        return DEFENDER
    return MIDFIELDER
