"""PlayerProfile model for config/profile.yaml."""

from pathlib import Path
from typing import Any, Literal, get_args

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

ProfessionalTrack = Literal["analyst", "engineer", "ai_engineer"]
BackgroundType = Literal["fresh_grad", "career_switcher", "bootcamp", "experienced"]
FinancialSituation = Literal["comfortable", "moderate", "high_pressure"]

TRACKS: tuple[str, ...] = get_args(ProfessionalTrack)
BACKGROUNDS: tuple[str, ...] = get_args(BackgroundType)
FINANCIAL_SITUATIONS: tuple[str, ...] = get_args(FinancialSituation)


class SelfRatings(BaseModel):
    """Player self-assessment, each on a 1-5 scale."""

    model_config = ConfigDict(frozen=True)

    python: int = Field(default=3, ge=1, le=5)
    sql: int = Field(default=3, ge=1, le=5)
    communication: int = Field(default=3, ge=1, le=5)
    confidence: int = Field(default=3, ge=1, le=5)


class PlayerProfile(BaseModel):
    """Profile chosen once at game start.

    Frozen. The seeder derives a mutable SeedStats from it.
    """

    model_config = ConfigDict(frozen=True)

    track: ProfessionalTrack
    background: BackgroundType
    financial_situation: FinancialSituation
    self_ratings: SelfRatings = Field(default_factory=SelfRatings)

    @field_validator("track", "background", "financial_situation", mode="before")
    @classmethod
    def normalize_choice(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower().strip().replace("-", "_")
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PlayerProfile":
        """Load profile from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def to_yaml(self, path: str | Path) -> None:
        """Write profile to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump()
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
