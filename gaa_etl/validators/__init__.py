"""
Validation layers for match statistics sheets.

Each layer is a pure function returning a ValidationResult; the
ValidationPipeline composes them.
"""

from gaa_etl.validators.pipeline import ValidationPipeline

__all__ = ["ValidationPipeline"]
