"""Configuration models and YAML loader for the job hunt simulation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class SimulationConfig(BaseModel):
    """Day-loop rates and run limits."""

    daily_stress_drift: float = Field(default=0.5, ge=0.0)
    application_chance: float = Field(default=0.6, ge=0.0, le=1.0)
    transition_chance: float = Field(default=0.1, ge=0.0, le=1.0)
    max_days: int = Field(default=365, ge=1)
    # Whether referral_fast_track ends the run or is only surfaced as an event.
    referral_ends_run: bool = False


class SelectorConfig(BaseModel):
    """Scenario selection history and repeat-penalty settings."""

    history_cap: int = Field(default=100, ge=1)
    recent_window_days: float = Field(default=30.0, ge=0.0)
    cooldown_period: int = Field(default=50, ge=0)


class CatalogConfig(BaseModel):
    """Scenario catalog location. None means the packaged catalog."""

    path: str | None = None


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/sessions.db"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    selector: SelectorConfig = Field(default_factory=SelectorConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
