"""Mini README: Centralised configuration for the billing assistant.

Structure:
    * BillingSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Values are read from ``SMARTBILLING_*`` environment variables or a local
    ``.env`` file. The ledger store uses ``data_directory`` and
    ``storage_key`` to locate its JSON slot; the USSD simulator reads
    ``ussd_return_delay_seconds`` for its auto-return timer.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingSettings(BaseSettings):
    """Runtime configuration for the billing assistant."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field("INFO", description="Root logging level name.")
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted ledger document.",
    )
    storage_key: str = Field(
        "smartBillingData",
        description="Name of the slot the ledger document is stored under.",
        min_length=1,
    )
    currency: str = Field("KES", description="Currency label shown next to amounts.")
    ussd_return_delay_seconds: float = Field(
        2.0,
        description="Delay before a simulated USSD feature returns to the main menu.",
        gt=0,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the API service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the API service exposes.",
        ge=1,
        le=65535,
    )

    model_config = SettingsConfigDict(
        env_prefix="SMARTBILLING_",
        env_file=".env",
        case_sensitive=False,
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache()
def get_settings() -> BillingSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BillingSettings()
