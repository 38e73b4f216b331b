"""
ETL Exceptions

Raised inside a match-unit transaction and converted into unit-level
errors at the loader boundary.
"""


class EtlError(Exception):
    """Base class for statistics ETL failures."""


class DuplicateMatchError(EtlError):
    """A match with the same competition and match number is already stored."""

    def __init__(self, competition: str, match_number: int):
        self.competition = competition
        self.match_number = match_number
        super().__init__(
            f"Match {match_number} in competition '{competition}' already exists"
        )


class ReferenceDataError(EtlError):
    """A reference entity that must already exist (e.g. a seeded position) is missing."""


class UnitIntegrityError(EtlError):
    """A match-unit does not have the shape required for persistence."""
