"""Game session glue: sequences seeder, selector, applicator and day loop.

Data flow per turn:
  1. next_scenario: select a scenario for the current track and phase
  2. submit_action: apply the chosen option, log the decision, check endings
  3. advance_day: simulate one day, then evaluate endings
  4. get_mirror: reflection once the run is over (or at any time)
"""

import logging
import random

from pydantic import BaseModel, Field

from careersim.core.config import Settings
from careersim.core.schemas import DayReport, DecisionRecord, GameScenario, GameSession
from careersim.pipeline.effects import apply_choice
from careersim.pipeline.job_hunt import (
    accept_offer,
    check_end_conditions,
    finalize_ending,
    initialize_job_hunt,
    record_offer,
    simulate_day,
)
from careersim.pipeline.mirror import MirrorResult, generate_mirror
from careersim.pipeline.selector import initialize_selector_state, select_next_scenario
from careersim.profile.schema import PlayerProfile
from careersim.profile.seeder import seed_stats
from careersim.scenarios.catalog import (
    ScenarioCatalog,
    default_catalog,
    load_catalog,
    validate_catalog,
)

logger = logging.getLogger(__name__)


class ActionResult(BaseModel):
    """Session after a submitted choice, plus user-facing notifications."""

    session: GameSession
    notifications: list[str] = Field(default_factory=list)


def create_session(
    profile: PlayerProfile,
    settings: Settings | None = None,
    now: float = 0.0,
) -> GameSession:
    """Seed a new session from an onboarding profile."""
    settings = settings or Settings()
    session = GameSession(
        profile=profile,
        stats=seed_stats(profile),
        progress=initialize_job_hunt(now),
        selector=initialize_selector_state(now, settings.selector.cooldown_period),
    )
    logger.info(
        "Created session %s (%s, %s, %s)",
        session.session_id, profile.track, profile.background, profile.financial_situation,
    )
    return session


def resolve_catalog(settings: Settings | None = None) -> ScenarioCatalog:
    """Validated catalog from settings, or the packaged one."""
    if settings is None or settings.catalog.path is None:
        return default_catalog()
    catalog = load_catalog(settings.catalog.path)
    validate_catalog(catalog)
    return catalog


def next_scenario(
    session: GameSession,
    catalog: ScenarioCatalog | None = None,
    roll: float | None = None,
    rng: random.Random | None = None,
    settings: Settings | None = None,
) -> GameScenario:
    """Pick the next scenario for the session's current phase.

    The session is not modified; the scenario is recorded when a choice
    for it is submitted.
    """
    settings = settings or Settings()
    return select_next_scenario(
        session.profile.track,
        session.progress.phase.state,
        session.stats,
        session.selector,
        roll,
        catalog=catalog,
        current_day=session.progress.days_in_search,
        rng=rng,
        recent_window_days=settings.selector.recent_window_days,
    )


def submit_action(
    session: GameSession,
    catalog: ScenarioCatalog | None,
    scenario_id: str,
    choice_id: str,
    settings: Settings | None = None,
) -> ActionResult:
    """Apply a player's choice to the session.

    Raises:
        LookupError: If the scenario or the choice is unknown.
        ValueError: If the run has already ended.
    """
    settings = settings or Settings()
    _require_open(session)
    catalog = catalog if catalog is not None else default_catalog()
    scenario = catalog.get(scenario_id)
    if scenario is None:
        msg = f"Unknown scenario '{scenario_id}'"
        raise LookupError(msg)

    day = session.progress.days_in_search
    try:
        outcome = apply_choice(
            session.stats,
            session.selector,
            scenario,
            choice_id,
            now=day,
            history_cap=settings.selector.history_cap,
        )
    except ValueError as e:
        raise LookupError(str(e)) from e

    session.stats = outcome.stats
    session.selector = outcome.selector_state
    session.decisions.append(DecisionRecord(scenario_id=scenario_id, choice_id=choice_id, day=day))

    notifications = list(outcome.notifications)
    event = _evaluate_ending(session, settings)
    if event:
        notifications.append(event)
    return ActionResult(session=session, notifications=notifications)


def advance_day(
    session: GameSession,
    rng: random.Random | None = None,
    settings: Settings | None = None,
) -> DayReport:
    """Simulate one in-game day, then evaluate endings."""
    settings = settings or Settings()
    report = simulate_day(session.progress, session.stats, rng, settings.simulation)
    event = _evaluate_ending(session, settings)
    if event:
        report.events.append(event)
    return report


def run_simulation(
    session: GameSession,
    days: int,
    rng: random.Random | None = None,
    settings: Settings | None = None,
    catalog: ScenarioCatalog | None = None,
    scenario_every: int = 0,
) -> list[DayReport]:
    """Advance up to ``days`` days, stopping early once the run ends.

    With ``scenario_every`` > 0, every that many days a scenario is drawn
    and one of its choices is picked at random, as an unattended player.
    """
    rng = rng or random.Random()
    reports: list[DayReport] = []
    for _ in range(days):
        report = advance_day(session, rng, settings)
        reports.append(report)
        if session.progress.ending is not None:
            break
        if scenario_every > 0 and session.progress.days_in_search % scenario_every == 0:
            scenario = next_scenario(session, catalog, rng=rng, settings=settings)
            choice = rng.choice(scenario.choices)
            result = submit_action(session, catalog, scenario.id, choice.id, settings)
            report.events.append(f"{scenario.title}: {choice.text}")
            report.events.extend(result.notifications)
            if session.progress.ending is not None:
                break
    return reports


def take_offer(
    session: GameSession,
    salary: float,
    role: str,
    company: str,
    settings: Settings | None = None,
) -> list[str]:
    """Record an offer at offer_stage and accept it, ending the run.

    Raises:
        ValueError: If the run has ended or the session is not at offer_stage.
    """
    settings = settings or Settings()
    _require_open(session)
    progress = session.progress
    if progress.phase.state != "offer_stage":
        msg = f"no offer to take in phase {progress.phase.state}"
        raise ValueError(msg)
    day = progress.days_in_search
    record_offer(progress, salary, role, company, day)
    accept_offer(progress, day)
    events = [f"Accepted {role} at {company} for ${salary:,.0f}"]
    event = _evaluate_ending(session, settings)
    if event:
        events.append(event)
    return events


def get_mirror(session: GameSession) -> MirrorResult:
    return generate_mirror(session)


def _require_open(session: GameSession) -> None:
    ending = session.progress.ending
    if ending is not None:
        msg = f"session {session.session_id} already ended: {ending.type}"
        raise ValueError(msg)


def _evaluate_ending(session: GameSession, settings: Settings) -> str | None:
    """Finalize the ending that holds, honoring the referral policy.

    A referral that does not end the run is announced once per stretch of
    eligibility.
    """
    if session.progress.ending is not None:
        return None
    day = session.progress.days_in_search
    ending = check_end_conditions(session.stats, session.progress, day)
    if ending != "referral_fast_track":
        session.progress.referral_surfaced = False
    if ending is None:
        return None
    if ending == "referral_fast_track" and not settings.simulation.referral_ends_run:
        if session.progress.referral_surfaced:
            return None
        session.progress.referral_surfaced = True
        return "Referral fast track available"
    finalize_ending(session.progress, ending, day)
    return f"Ending: {ending}"
