"""Core data models for the job hunt simulation."""

import uuid
from datetime import datetime
from typing import Annotated, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from careersim.profile.schema import PlayerProfile, ProfessionalTrack

JobHuntState = Literal[
    "searching",
    "screening",
    "technical_round",
    "hr_round",
    "offer_stage",
    "accepted",
]
EndingType = Literal[
    "burnout_collapse",
    "financial_breakdown",
    "offer_accepted",
    "referral_fast_track",
]
TransitionOutcome = Literal["success", "rejection", "stall"]

JOB_HUNT_STATES: tuple[str, ...] = get_args(JobHuntState)

# Wildcards for catalog entries that apply to every track / every phase.
AllTracks = Literal["all"]
AnyPhase = Literal["any"]

PERCENT_FIELDS = (
    "confidence",
    "stress",
    "energy",
    "reputation",
    "network",
    "linkedin_presence",
    "resume_strength",
    "portfolio_strength",
    "interview_skill",
    "technical_depth",
    "python_skill",
    "sql_skill",
    "communication",
    "scam_awareness",
)

Percent = Annotated[float, Field(ge=0.0, le=100.0)]


def clamp_percent(value: float) -> float:
    """Clamp a percentage stat to 0-100."""
    return max(0.0, min(100.0, value))


class SeedStats(BaseModel):
    """Mutable trait vector, one per player session.

    Percentage fields are clamped by whoever writes them (see ``adjust``);
    savings may go negative, which is a loss condition rather than an error.
    """

    # Mental & emotional
    confidence: Percent = 0.0
    stress: Percent = 0.0
    energy: Percent = 0.0

    # Financial
    savings: float = 0.0
    spending_monthly: float = 0.0

    # Opportunity access
    reputation: Percent = 0.0
    network: Percent = 0.0
    linkedin_presence: Percent = 0.0

    # Job-relevant skills
    resume_strength: Percent = 0.0
    portfolio_strength: Percent = 0.0
    interview_skill: Percent = 0.0

    # Technical skills
    technical_depth: Percent = 0.0
    python_skill: Percent = 0.0
    sql_skill: Percent = 0.0
    communication: Percent = 0.0

    # Judgment & risk
    scam_awareness: Percent = 0.0

    # Meta
    months_unemployed: int = Field(default=0, ge=0)
    applications_sent: int = Field(default=0, ge=0)

    def adjust(self, name: str, delta: float) -> float:
        """Add delta to a stat in place, re-clamping percentage fields.

        Counters round to the nearest whole number and stay non-negative.

        Returns the new value.
        """
        if name not in type(self).model_fields:
            msg = f"Unknown stat '{name}'"
            raise ValueError(msg)
        value = getattr(self, name) + delta
        if name in PERCENT_FIELDS:
            value = clamp_percent(value)
        elif name in ("months_unemployed", "applications_sent"):
            value = max(0, round(value))
        setattr(self, name, value)
        return value


class JobHuntPhase(BaseModel):
    """The funnel stage a player is in, plus per-stage counters."""

    state: JobHuntState = "searching"
    entered_at: float = 0.0  # in-game day
    attempt_count: int = Field(default=0, ge=0)
    rejections: int = Field(default=0, ge=0)
    current_company: str | None = None
    current_role: str | None = None


class Offer(BaseModel):
    salary: float = Field(ge=0.0)
    role: str
    company: str
    received_at: float


class Ending(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: EndingType
    triggered_at: float
    summary: str


class JobHuntProgress(BaseModel):
    """Funnel state for one session. ``ending`` is written at most once."""

    phase: JobHuntPhase = Field(default_factory=JobHuntPhase)
    history: list[JobHuntPhase] = Field(default_factory=list)
    days_in_search: int = Field(default=0, ge=0)
    total_applications: int = Field(default=0, ge=0)
    total_interviews: int = Field(default=0, ge=0)
    total_rejections: int = Field(default=0, ge=0)
    offers: list[Offer] = Field(default_factory=list)
    referral_surfaced: bool = False
    ending: Ending | None = None


class TransitionProbability(BaseModel):
    """Outcome distribution of a single transition attempt."""

    model_config = ConfigDict(frozen=True)

    success: float = Field(ge=0.0, le=1.0)
    rejection: float = Field(ge=0.0, le=1.0)
    stall: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def sums_to_one(self) -> "TransitionProbability":
        total = self.success + self.rejection + self.stall
        if abs(total - 1.0) > 1e-9:
            msg = f"transition probabilities must sum to 1, got {total}"
            raise ValueError(msg)
        return self


class TransitionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: TransitionOutcome
    next_state: JobHuntState
    reject_reason: str | None = None


class DayReport(BaseModel):
    """Result of simulating one in-game day."""

    progress: JobHuntProgress
    events: list[str] = Field(default_factory=list)


class ScenarioChoice(BaseModel):
    """One selectable option of a scenario and its stat effects."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    effect: dict[str, float] = Field(default_factory=dict)

    @field_validator("effect")
    @classmethod
    def effect_names_known(cls, v: dict[str, float]) -> dict[str, float]:
        unknown = sorted(set(v) - set(SeedStats.model_fields))
        if unknown:
            msg = f"effect references unknown stats: {unknown}"
            raise ValueError(msg)
        return v


class GameScenario(BaseModel):
    """Static catalog entry, shared read-only by all sessions."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    text: str
    phase: JobHuntState | AnyPhase
    tracks: tuple[ProfessionalTrack, ...] | AllTracks
    difficulty: int = Field(ge=1, le=3)
    tags: frozenset[str] = frozenset()
    weight: float = Field(default=1.0, gt=0.0)
    choices: tuple[ScenarioChoice, ...] = Field(min_length=1)

    @field_validator("id")
    @classmethod
    def id_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "scenario id must not be empty"
            raise ValueError(msg)
        return v.strip()

    def applies_to_track(self, track: str) -> bool:
        return self.tracks == "all" or track in self.tracks

    def applies_to_phase(self, state: str) -> bool:
        return self.phase == "any" or self.phase == state

    def get_choice(self, choice_id: str) -> ScenarioChoice | None:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None


class SelectorState(BaseModel):
    """Rolling selection history for one session.

    Frozen: ``record_scenario_shown`` returns a new snapshot instead of
    mutating this one.
    """

    model_config = ConfigDict(frozen=True)

    scenario_history: tuple[str, ...] = ()
    last_scenario_at: float = 0.0  # in-game day
    cooldown_period: int = Field(default=50, ge=0)


class DecisionRecord(BaseModel):
    scenario_id: str
    choice_id: str
    day: int = 0


class GameSession(BaseModel):
    """Everything a hosting server must persist for one player."""

    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    profile: PlayerProfile
    stats: SeedStats
    progress: JobHuntProgress = Field(default_factory=JobHuntProgress)
    selector: SelectorState = Field(default_factory=SelectorState)
    decisions: list[DecisionRecord] = Field(default_factory=list)


class WeightedScenario(BaseModel):
    """Pairs a frozen catalog scenario with its per-session selection weight."""

    model_config = ConfigDict(frozen=True)

    scenario: GameScenario
    weight: float = Field(gt=0.0)
