"""
Validation Pipeline

Runs the six validation layers over a sheet in order:

1. Sheet structure
2. Player identification
3. Data types and ranges
4. Cross-field consistency
5. Position heuristics
6. Business rules

Structure errors stop the pipeline for the sheet. An identification
error on a player row skips the later layers for that row only. The
remaining layers do not depend on each other.
"""

import logging
from typing import List, Optional, Tuple

from config.validation import ValidationConfig
from gaa_etl.models import RawSheetRecord, ValidationResult
from gaa_etl.validators.business_rules import validate_player_rules, validate_team_rules
from gaa_etl.validators.cross_field import validate_match_consistency, validate_player_consistency
from gaa_etl.validators.data_type import validate_player_types, validate_team_types
from gaa_etl.validators.identification import validate_player_identity, validate_unique_identities
from gaa_etl.validators.position import validate_player_position
from gaa_etl.validators.structure import validate_structure

logger = logging.getLogger(__name__)

PLAYER_LAYERS = (
    validate_player_types,
    validate_player_consistency,
    validate_player_position,
    validate_player_rules,
)

SHEET_LAYERS = (
    validate_team_types,
    validate_match_consistency,
    validate_team_rules,
)


class ValidationPipeline:
    """
    Composes the validation layers over a RawSheetRecord.

    Validation never raises; every problem is reported in the returned
    ValidationResult.
    """

    def __init__(self, config: Optional[ValidationConfig] = None):
        """
        Initialize the pipeline.

        Args:
            config: Validation thresholds (defaults if omitted)
        """
        self.config = config or ValidationConfig()

    def validate(self, record: RawSheetRecord) -> ValidationResult:
        """
        Validate one sheet.

        Args:
            record: Raw sheet as produced by the workbook reader

        Returns:
            ValidationResult with errors and warnings in layer order
        """
        result = ValidationResult()

        structure = validate_structure(record, self.config)
        result.merge(structure)
        if not structure.is_valid:
            logger.debug(f"{record.sheet_name}: structure errors, skipping remaining layers")
            return result

        result.merge(validate_unique_identities(record, self.config))

        for row in record.player_rows:
            identity = validate_player_identity(record, row, self.config)
            result.merge(identity)
            if not identity.is_valid:
                continue
            for layer in PLAYER_LAYERS:
                result.merge(layer(record, row, self.config))

        for layer in SHEET_LAYERS:
            result.merge(layer(record, self.config))

        logger.debug(
            f"{record.sheet_name}: {len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    def validate_batch(
        self, records: List[RawSheetRecord]
    ) -> List[Tuple[RawSheetRecord, ValidationResult]]:
        """
        Validate several sheets independently.

        Returns:
            List of (record, result) pairs in input order
        """
        return [(record, self.validate(record)) for record in records]
