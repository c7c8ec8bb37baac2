"""Mini README: Centralised configuration for the finance tracker.

Structure:
    * FinanceSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``FINTRACK_*`` environment variables (or a
    local ``.env`` file), choose the storage backend, the display currency and
    the ports the HTTP service binds to. Settings are validated once per
    process and cached.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class FinanceSettings(BaseSettings):
    """Runtime configuration for the CLI menu and the HTTP service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_file: Path = Field(
        Path("data") / "transactions.json",
        description="JSON file holding the ledger when the json backend is selected.",
    )
    storage_backend: Literal["json", "memory"] = Field(
        "json",
        description="Where the ledger lives: a JSON file snapshot or process memory.",
    )
    currency: str = Field(
        "USD",
        description="Currency code used when formatting amounts (USD, EUR or INR).",
    )
    recent_limit: int = Field(
        10,
        description="Default number of entries returned by recent-transaction views.",
        ge=1,
    )
    export_directory: Path = Field(
        Path("."),
        description="Directory receiving CSV exports from the interactive menu.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the HTTP API from a browser.",
    )
    degrade_on_storage_error: bool = Field(
        True,
        description=(
            "When the ledger cannot be loaded, let the interactive menu carry on"
            " with an empty ledger instead of aborting."
        ),
    )
    log_level: str = Field("INFO", description="Root logging level.")

    class Config:
        env_prefix = "FINTRACK_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_file", pre=True)
    def _prepare_data_file(cls, value: Optional[str | Path]) -> Path:
        """Expand user directories and make sure the parent folder exists."""

        path = Path(value).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @validator("export_directory", pre=True)
    def _expand_export_directory(cls, value: Optional[str | Path]) -> Path:
        return Path(value).expanduser()

    @validator("currency")
    def _normalise_currency(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> FinanceSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FinanceSettings()
