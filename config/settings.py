"""
Configuration Management

Settings for the statistics ETL: database access, the tracked team and the
validation tolerances. Values come from the environment; a .env file in the
working directory is read first for local runs.
"""

import os
from dotenv import load_dotenv

from config.validation import ValidationConfig

# Local .env overrides nothing already set in the environment
load_dotenv()


class Settings:
    """
    Environment-backed settings for one ETL run.

    Credentials have no defaults; everything else falls back to the values
    used for the Drum 2025 workbooks.
    """

    # Database Configuration
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "gaastat")
    DB_USER: str = os.getenv("DB_USER")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD")
    DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "30000"))

    # Tracked team (stored with is_drum = true)
    HOME_TEAM_NAME: str = os.getenv("HOME_TEAM_NAME", "Drum")

    # Validation thresholds
    VALIDATION_COUNT_TOLERANCE: int = int(os.getenv("VALIDATION_COUNT_TOLERANCE", "2"))
    VALIDATION_DEFAULT_COUNT_MAX: int = int(os.getenv("VALIDATION_DEFAULT_COUNT_MAX", "100"))
    VALIDATION_PERCENTAGE_CEILING: float = float(os.getenv("VALIDATION_PERCENTAGE_CEILING", "1.05"))
    VALIDATION_PERCENTAGE_TOLERANCE: float = float(os.getenv("VALIDATION_PERCENTAGE_TOLERANCE", "0.05"))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "logs/etl.log")

    def __init__(self):
        """Fail fast on missing credentials or unusable thresholds."""
        self._validate_settings()

    def _validate_settings(self) -> None:
        """
        Check credentials, the tracked team name and the validation thresholds.

        Raises:
            ValueError: If required settings are missing or out of range
        """
        required_fields = ["DB_USER", "DB_PASSWORD"]

        missing_fields = [
            field for field in required_fields
            if not getattr(self, field, None)
        ]

        if missing_fields:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_fields)}. "
                f"Set them in the environment or in .env before running the statistics ETL."
            )

        if not self.HOME_TEAM_NAME or not self.HOME_TEAM_NAME.strip():
            raise ValueError("HOME_TEAM_NAME must not be empty")

        if self.VALIDATION_COUNT_TOLERANCE < 0:
            raise ValueError("VALIDATION_COUNT_TOLERANCE must be zero or positive")

        if self.VALIDATION_PERCENTAGE_CEILING < 1.0:
            raise ValueError("VALIDATION_PERCENTAGE_CEILING must be at least 1.0")

    def validation_config(self) -> ValidationConfig:
        """
        Build the validation thresholds from environment overrides.

        Returns:
            ValidationConfig with the configured tolerances
        """
        return ValidationConfig(
            count_tolerance=self.VALIDATION_COUNT_TOLERANCE,
            percentage_tolerance=self.VALIDATION_PERCENTAGE_TOLERANCE,
            percentage_ceiling=self.VALIDATION_PERCENTAGE_CEILING,
            default_count_max=self.VALIDATION_DEFAULT_COUNT_MAX,
        )

    def __repr__(self) -> str:
        """Summary for logs; the password is never included."""
        return (
            f"Settings("
            f"DB_HOST={self.DB_HOST}, "
            f"DB_NAME={self.DB_NAME}, "
            f"HOME_TEAM_NAME={self.HOME_TEAM_NAME}, "
            f"DB_STATEMENT_TIMEOUT_MS={self.DB_STATEMENT_TIMEOUT_MS}"
            f")"
        )
