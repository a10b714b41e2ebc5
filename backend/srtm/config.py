"""
SRTM Toolkit Configuration

Settings for the STIG recommendation engine, catalog maintenance and the
local STIG library. Every setting can be overridden via environment
variables with the SRTM_ prefix (e.g. SRTM_SCORING_PROFILE=legacy,
SRTM_STIG_LIBRARY_DIR=/data/stigs).
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_SCORING_PROFILES = ("validated", "legacy")
VALID_CHECK_FREQUENCIES = ("daily", "weekly", "monthly")


class Settings(BaseSettings):
    """Toolkit settings"""

    # Application
    app_name: str = "SRTM STIG Toolkit"
    debug: bool = False

    # ==========================================================================
    # Recommendation Engine
    # ==========================================================================

    scoring_profile: str = Field(
        default="validated",
        description="Scoring weights profile used by the recommendation engine",
    )

    # ==========================================================================
    # STIG Library and Import
    # ==========================================================================

    stig_library_dir: str = Field(
        default="public/stigs",
        description="Directory holding one sub-directory per locally stored STIG",
    )

    max_stig_file_size: int = Field(
        default=50 * 1024 * 1024,  # 50 MB, DISA benchmark bundles are large
        description="Maximum size in bytes of an imported STIG document",
        ge=1024,
    )

    # ==========================================================================
    # Catalog Maintenance
    # ==========================================================================

    stig_max_age_days: int = Field(
        default=730,
        description="Release age after which a catalog entry counts as outdated",
        ge=1,
    )

    auto_update_enabled: bool = Field(
        default=False,
        description="Apply pending catalog updates automatically after a check",
    )

    auto_update_frequency: str = Field(
        default="weekly",
        description="Catalog update check frequency (daily, weekly, monthly)",
    )

    # Logging
    log_level: str = "INFO"

    @field_validator("scoring_profile")
    @classmethod
    def scoring_profile_must_be_known(cls, v):
        if v not in VALID_SCORING_PROFILES:
            raise ValueError(f"Scoring profile must be one of {', '.join(VALID_SCORING_PROFILES)}")
        return v

    @field_validator("auto_update_frequency")
    @classmethod
    def frequency_must_be_known(cls, v):
        if v not in VALID_CHECK_FREQUENCIES:
            raise ValueError(f"Update frequency must be one of {', '.join(VALID_CHECK_FREQUENCIES)}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_valid(cls, v):
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    class Config:
        """Pydantic settings configuration."""

        env_file = ".env"
        env_prefix = "SRTM_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached toolkit settings"""
    return Settings()
