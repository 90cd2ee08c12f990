"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration of keyed collections. Environment settings supply the defaults
(unbounded size, five minute sliding age, refresh on read, stale reads
allowed); a JSON file may override them per named collection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CollectionSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    max_size: Optional[int]
        Maximum number of entries per collection. ``None`` means unbounded.
    max_age_seconds: float
        Default time-to-live of an entry, measured from its last access.
    update_age_on_get: bool
        Whether a read resets the entry's age (sliding expiration).
    stale: bool
        Whether an expired entry that has not been purged yet may still be
        returned once.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LRU_COLLECTION_")

    log_level: str = Field("INFO")
    max_size: Optional[int] = Field(
        None, ge=0, description="Maximum entries; unset or 0 means unbounded"
    )
    max_age_seconds: float = Field(
        300.0, gt=0, description="Default sliding time-to-live in seconds"
    )
    update_age_on_get: bool = Field(True, description="Refresh entry age on read")
    stale: bool = Field(True, description="Allow one read of an expired entry")


class CollectionOptions(BaseModel):
    """Per-collection overrides; unset fields fall back to the settings."""

    max_size: Optional[int] = Field(None, ge=0)
    max_age_seconds: Optional[float] = Field(None, gt=0)
    update_age_on_get: Optional[bool] = None
    stale: Optional[bool] = None

    def resolve(self, settings: CollectionSettings) -> CollectionSettings:
        """Return `settings` with the explicitly set overrides applied."""
        overrides = self.model_dump(exclude_none=True)
        return settings.model_copy(update=overrides)


class CollectionConfig(BaseModel):
    """Top-level file configuration.

    Attributes
    ----------
    collections: Dict[str, CollectionOptions]
        Mapping from a logical collection name to its overrides.
    """

    collections: Dict[str, CollectionOptions] = Field(default_factory=dict)

    @staticmethod
    def load(path: Path) -> "CollectionConfig":
        """Load collection config from a JSON file."""
        return CollectionConfig.model_validate_json(path.read_bytes())

    def options_for(self, name: str) -> CollectionOptions:
        """Return overrides for collection `name` (empty when unknown)."""
        return self.collections.get(name, CollectionOptions())
