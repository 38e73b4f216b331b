"""
Validation Thresholds

Tunable limits used by the validation pipeline. The defaults reflect the
values the statistics team has worked with for the 2025 season; each one
is a reviewable business constant rather than a derived quantity.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict


def _default_count_maxima() -> Dict[str, int]:
    return {
        "yellow_cards": 5,
        "black_cards": 5,
        "red_cards": 2,
    }


@dataclass(frozen=True)
class ValidationConfig:
    """
    Thresholds injected into every validation layer.

    Attributes:
        count_tolerance: Allowed difference between a total and the sum of its parts
        percentage_tolerance: Allowed difference between a stored and recomputed percentage
        percentage_ceiling: Percentages above this are errors; (1.0, ceiling] is a warning
        default_count_max: Count fields above this value raise a warning
        count_maxima: Per-field overrides of default_count_max
        possession_tolerance: Allowed deviation of both teams' possession from 1.0
    """

    count_tolerance: int = 2
    percentage_tolerance: float = 0.05
    percentage_ceiling: float = 1.05
    default_count_max: int = 100
    count_maxima: Dict[str, int] = field(default_factory=_default_count_maxima)
    possession_tolerance: float = 0.05

    # Sheet structure
    max_sheet_name_length: int = 50
    max_match_number: int = 100
    min_field_count: int = 10
    expected_field_count: int = 70
    min_player_rows: int = 10
    max_player_rows: int = 40
    earliest_match_date: date = date(2020, 1, 1)
    max_days_in_future: int = 365

    # Player identification
    max_jersey_number: int = 99
    usual_max_jersey_number: int = 40
    max_name_length: int = 100
    max_minutes: int = 90
    usual_max_minutes: int = 70

    # Team-level plausibility
    min_squad_size: int = 15
    max_squad_size: int = 35
    min_total_minutes: int = 700
    max_total_minutes: int = 1400
    min_regular_players: int = 10
    regular_player_minutes: int = 40

    def count_max(self, field_name: str) -> int:
        """Return the warning threshold for a count field."""
        return self.count_maxima.get(field_name, self.default_count_max)
