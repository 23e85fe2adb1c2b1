"""Job hunt state machine: funnel transitions, day loop, and endings.

Funnel:
  searching → screening → technical_round → hr_round → offer_stage → accepted

offer_stage holds (success maps back to itself until an offer is accepted)
and accepted is terminal. Any rejection drops the funnel back to searching.

Every random draw is a single float in [0, 1). Callers may inject it
(``roll``) or a seeded ``random.Random`` (``rng``) for replayable runs.
"""

import logging
import math
import random
from collections.abc import Callable

from careersim.core.config import SimulationConfig
from careersim.core.schemas import (
    DayReport,
    Ending,
    EndingType,
    JobHuntPhase,
    JobHuntProgress,
    JobHuntState,
    Offer,
    SeedStats,
    TransitionProbability,
    TransitionResult,
)

logger = logging.getLogger(__name__)

_DEFAULT_RNG = random.Random()

_NEXT_STATE: dict[str, JobHuntState] = {
    "searching": "screening",
    "screening": "technical_round",
    "technical_round": "hr_round",
    "hr_round": "offer_stage",
    "offer_stage": "offer_stage",
    "accepted": "accepted",
}

_REJECTION_REASONS: dict[str, tuple[str, ...]] = {
    "searching": (
        "Your resume didn't pass the initial screen",
        "They're looking for more experienced candidates",
        "The role was filled internally",
    ),
    "screening": (
        "The recruiter didn't think it was a good fit",
        "They're pushing for more senior candidates",
        "Your communication threw them off",
    ),
    "technical_round": (
        "You struggled with the technical questions",
        "Your approach wasn't what they were looking for",
        "You couldn't explain your thought process clearly",
    ),
    "hr_round": (
        "There were some concerns about team fit",
        "Another candidate was more aligned with culture",
        "They decided to keep looking",
    ),
    "offer_stage": ("They retracted the offer",),
    "accepted": (),
}

BURNOUT_STRESS = 90.0
BURNOUT_WINDOW_DAYS = 3.0
BURNOUT_MIN_PHASES = 3
REFERRAL_NETWORK = 80.0
REFERRAL_REPUTATION = 60.0

ENDING_SUMMARIES: dict[str, str] = {
    "burnout_collapse": "Weeks of pressure caught up with you. You had to step away from the search.",
    "financial_breakdown": "Your savings ran out before an offer came through.",
    "offer_accepted": "You signed an offer. The search is over.",
    "referral_fast_track": "Your network vouched for you and skipped the line.",
}


def initialize_job_hunt(now: float = 0.0) -> JobHuntProgress:
    """Return a fresh progress record in the searching state."""
    return JobHuntProgress(phase=JobHuntPhase(state="searching", entered_at=now))


def next_state(state: JobHuntState) -> JobHuntState:
    """Successor of a state in the linear funnel."""
    return _NEXT_STATE[state]


def transition_probability(state: JobHuntState, stats: SeedStats) -> TransitionProbability:
    """Per-state success/rejection/stall distribution from the trait vector.

    Stats are normalized to 0-1. Stress scales success down in every
    interview stage except hr_round. offer_stage and accepted ignore stats.
    """
    conf = stats.confidence / 100
    tech = stats.technical_depth / 100
    rep = stats.reputation / 100
    interview = stats.interview_skill / 100
    resume = stats.resume_strength / 100
    stress_factor = 1 - stats.stress / 100

    if state == "searching":
        success = min(0.8, 0.4 + resume * 0.5)
        return _distribution(success * stress_factor, rejection=0.15)
    if state == "screening":
        success = min(0.85, 0.5 + interview * 0.4 + conf * 0.3 + rep * 0.3)
        return _distribution(success * stress_factor, rejection=0.25)
    if state == "technical_round":
        success = min(0.80, 0.3 + tech * 0.7 + interview * 0.3)
        return _distribution(success * stress_factor, rejection=0.35)
    if state == "hr_round":
        success = min(0.9, 0.6 + rep * 0.5 + conf * 0.3 + interview * 0.2)
        return _distribution(success, rejection=0.2)
    if state == "offer_stage":
        return TransitionProbability(success=0.95, rejection=0.05, stall=0.0)
    return TransitionProbability(success=0.0, rejection=0.0, stall=1.0)


def _distribution(success: float, rejection: float) -> TransitionProbability:
    """Build a valid distribution; success is capped at 1 - rejection."""
    success = max(0.0, min(success, 1.0 - rejection))
    stall = max(0.0, 1.0 - success - rejection)
    return TransitionProbability(success=success, rejection=rejection, stall=stall)


def attempt_transition(
    state: JobHuntState,
    stats: SeedStats,
    roll: float | None = None,
    rng: random.Random | None = None,
) -> TransitionResult:
    """Resolve one transition attempt against a uniform draw.

    Args:
        state: Current funnel state.
        stats: Trait vector (read only).
        roll: Optional injected draw in [0, 1).
        rng: Random source for the draw and the rejection reason.

    Returns:
        TransitionResult with the outcome and the state to move to.

    Raises:
        ValueError: If an injected roll is outside [0, 1).
    """
    rng = rng or _DEFAULT_RNG
    if roll is None:
        roll = rng.random()
    elif not 0.0 <= roll < 1.0:
        msg = f"roll must be in [0, 1), got {roll}"
        raise ValueError(msg)

    prob = transition_probability(state, stats)

    if roll < prob.success:
        result = TransitionResult(outcome="success", next_state=next_state(state))
    elif roll < prob.success + prob.rejection:
        result = TransitionResult(
            outcome="rejection",
            next_state="searching",
            reject_reason=_rejection_reason(state, rng),
        )
    else:
        result = TransitionResult(outcome="stall", next_state=state)

    logger.debug(
        "Transition from %s: roll=%.3f p=(%.3f, %.3f, %.3f) -> %s",
        state, roll, prob.success, prob.rejection, prob.stall, result.outcome,
    )
    return result


def _rejection_reason(state: JobHuntState, rng: random.Random) -> str | None:
    reasons = _REJECTION_REASONS[state]
    if not reasons:
        return None
    return rng.choice(reasons)


def apply_transition(progress: JobHuntProgress, result: TransitionResult, day: float) -> str | None:
    """Apply a transition result to the live phase.

    A success into a new state creates a fresh phase and appends a copy of
    it to history. A rejection resets the phase to searching. Returns an
    event string, or None when nothing visible happened.
    """
    phase = progress.phase
    phase.attempt_count += 1

    if result.outcome == "success":
        if result.next_state == phase.state:
            return None
        progress.phase = JobHuntPhase(
            state=result.next_state,
            entered_at=day,
            rejections=phase.rejections,
            current_company=phase.current_company,
            current_role=phase.current_role,
        )
        progress.history.append(progress.phase.model_copy())
        progress.total_interviews += 1
        logger.info("Advanced from %s to %s on day %s", phase.state, result.next_state, day)
        return f"Advanced to: {result.next_state}"

    if result.outcome == "rejection":
        progress.total_rejections += 1
        if phase.state == "searching":
            phase.rejections += 1
        else:
            progress.phase = JobHuntPhase(
                state="searching",
                entered_at=day,
                rejections=phase.rejections + 1,
            )
        logger.info("Rejected at %s on day %s", phase.state, day)
        return f"Rejection: {result.reject_reason}"

    return None


def days_until_breakdown(stats: SeedStats) -> int | None:
    """Days of savings left at the current spend. None means no spending."""
    if stats.spending_monthly <= 0:
        return None
    if stats.savings <= 0:
        return 0
    return math.floor(stats.savings / (stats.spending_monthly / 30))


# ---------------------------------------------------------------------------
# Endings
# ---------------------------------------------------------------------------


def _burnout(stats: SeedStats, progress: JobHuntProgress, current_day: float) -> bool:
    if stats.stress <= BURNOUT_STRESS:
        return False
    cutoff = current_day - BURNOUT_WINDOW_DAYS
    recent = sum(1 for p in progress.history if p.entered_at > cutoff)
    return recent >= BURNOUT_MIN_PHASES


def _broke(stats: SeedStats, progress: JobHuntProgress, current_day: float) -> bool:
    return stats.savings < 0


def _accepted(stats: SeedStats, progress: JobHuntProgress, current_day: float) -> bool:
    return progress.phase.state == "accepted"


def _referral(stats: SeedStats, progress: JobHuntProgress, current_day: float) -> bool:
    return stats.network > REFERRAL_NETWORK and stats.reputation > REFERRAL_REPUTATION


EndingCheck = Callable[[SeedStats, JobHuntProgress, float], bool]

# Evaluation order is the contract: the first ending that holds is reported.
ENDING_PRIORITY: tuple[tuple[EndingType, EndingCheck], ...] = (
    ("burnout_collapse", _burnout),
    ("financial_breakdown", _broke),
    ("offer_accepted", _accepted),
    ("referral_fast_track", _referral),
)


def check_end_conditions(
    stats: SeedStats,
    progress: JobHuntProgress,
    current_day: float,
) -> EndingType | None:
    """Return the highest-priority ending that currently holds, or None.

    Priority: burnout_collapse > financial_breakdown > offer_accepted >
    referral_fast_track. referral_fast_track signals eligibility; whether it
    ends the run is the caller's policy.
    """
    for ending, check in ENDING_PRIORITY:
        if check(stats, progress, current_day):
            return ending
    return None


def finalize_ending(progress: JobHuntProgress, ending: EndingType, day: float) -> Ending:
    """Write the ending once. A second call returns the existing ending."""
    if progress.ending is not None:
        logger.debug("Ending already set to %s, ignoring %s", progress.ending.type, ending)
        return progress.ending
    progress.ending = Ending(type=ending, triggered_at=day, summary=ENDING_SUMMARIES[ending])
    logger.info("Run ended on day %s: %s", day, ending)
    return progress.ending


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------


def record_offer(
    progress: JobHuntProgress,
    salary: float,
    role: str,
    company: str,
    day: float,
) -> Offer:
    """Attach an offer to the run and to the live phase."""
    offer = Offer(salary=salary, role=role, company=company, received_at=day)
    progress.offers.append(offer)
    progress.phase.current_company = company
    progress.phase.current_role = role
    return offer


def accept_offer(progress: JobHuntProgress, day: float) -> JobHuntPhase:
    """Move from offer_stage to the terminal accepted state."""
    phase = progress.phase
    if phase.state != "offer_stage":
        msg = f"can only accept an offer from offer_stage, not {phase.state}"
        raise ValueError(msg)
    progress.phase = JobHuntPhase(
        state="accepted",
        entered_at=day,
        attempt_count=0,
        rejections=phase.rejections,
        current_company=phase.current_company,
        current_role=phase.current_role,
    )
    progress.history.append(progress.phase.model_copy())
    logger.info("Offer accepted on day %s", day)
    return progress.phase


# ---------------------------------------------------------------------------
# Day loop
# ---------------------------------------------------------------------------


def simulate_day(
    progress: JobHuntProgress,
    stats: SeedStats,
    rng: random.Random | None = None,
    config: SimulationConfig | None = None,
) -> DayReport:
    """Advance the search by one in-game day.

    Mutates ``progress`` and ``stats`` in place: stress drifts up, a day of
    spending leaves savings, an application may go out while searching, and
    a transition is attempted with ``config.transition_chance``. A run that
    already has an ending is left untouched.
    """
    if progress.ending is not None:
        return DayReport(progress=progress, events=[f"Run already ended: {progress.ending.type}"])

    rng = rng or _DEFAULT_RNG
    config = config or SimulationConfig()
    events: list[str] = []

    progress.days_in_search += 1
    day = progress.days_in_search

    stats.adjust("stress", config.daily_stress_drift)

    daily_spend = stats.spending_monthly / 30
    stats.savings -= daily_spend
    events.append(f"Spent ${daily_spend:,.0f} today")

    stats.months_unemployed = day // 30

    if progress.phase.state == "searching" and rng.random() < config.application_chance:
        progress.total_applications += 1
        stats.applications_sent += 1
        events.append("Sent job application")

    if rng.random() < config.transition_chance:
        result = attempt_transition(progress.phase.state, stats, rng=rng)
        event = apply_transition(progress, result, day)
        if event:
            events.append(event)

    logger.debug("Day %d: %s", day, "; ".join(events))
    return DayReport(progress=progress, events=events)
