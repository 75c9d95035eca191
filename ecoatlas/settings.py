"""ecoatlas configuration settings using Pydantic.

Values come from ``ECOATLAS_*`` environment variables or a ``.env`` file.
"""

from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EcoAtlasSettings(BaseSettings):
    """Central configuration for the ecoatlas data layer."""

    model_config = SettingsConfigDict(
        env_prefix="ECOATLAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # --- Project Paths ---
    @computed_field
    @property
    def package_root(self) -> Path:
        """Directory of the installed ``ecoatlas`` package."""
        return Path(__file__).parent

    # --- Remote Sources ---
    sparql_endpoint: str = Field(default="https://qlever.dev/api/wikidata")
    topology_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/world-atlas@2/countries-110m.json"
    )

    # --- Fetch Behaviour ---
    max_retries: int = Field(default=3, ge=0)
    base_delay_ms: float = Field(default=400.0, gt=0)
    max_delay_ms: float = Field(default=800.0, gt=0)
    jitter_ms: float = Field(default=400.0, ge=0)
    # 0 disables the per-request timeout
    timeout_ms: float = Field(default=15000.0, ge=0)

    # --- Correlation Page ---
    min_endemic: int = Field(default=50, ge=0)

    # --- Logging ---
    log_level: str = "INFO"
    log_file: str | None = None

    # --- Path Helpers ---
    @property
    def data_dir(self) -> Path:
        return self.package_root / "data"

    @property
    def geography_rules_path(self) -> Path:
        return self.data_dir / "geography.yaml"


# Singleton instance
settings = EcoAtlasSettings()


def get_settings() -> EcoAtlasSettings:
    """Return the process-wide settings instance."""
    return settings


def reload_settings() -> EcoAtlasSettings:
    """Re-read settings from the environment."""
    global settings
    settings = EcoAtlasSettings()
    return settings
