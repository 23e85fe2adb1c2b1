"""Adaptive scenario selector.

Pipeline:
  1. Eligibility filters (track, phase, difficulty) from ``matcher``
  2. Adaptive reweighting from ``scorer``
  3. Cooldown: drop ids already in the session history, unless that
     empties the pool, in which case the reweighted list is used as is
  4. Weighted draw over a single uniform roll in [0, 1)
"""

import logging
import random

from careersim.core.schemas import (
    GameScenario,
    JobHuntState,
    SeedStats,
    SelectorState,
    WeightedScenario,
)
from careersim.pipeline.matcher import build_filters, run_filter_chain
from careersim.pipeline.scorer import DEFAULT_RECENT_WINDOW_DAYS, weigh_scenarios
from careersim.profile.schema import ProfessionalTrack
from careersim.scenarios.catalog import CatalogError, ScenarioCatalog, default_catalog

logger = logging.getLogger(__name__)

_DEFAULT_RNG = random.Random()

HISTORY_CAP = 100
DEFAULT_COOLDOWN_PERIOD = 50


def initialize_selector_state(
    now: float = 0.0,
    cooldown_period: int = DEFAULT_COOLDOWN_PERIOD,
) -> SelectorState:
    """Empty selection history for a new session."""
    return SelectorState(last_scenario_at=now, cooldown_period=cooldown_period)


def record_scenario_shown(
    state: SelectorState,
    scenario_id: str,
    now: float,
    history_cap: int = HISTORY_CAP,
) -> SelectorState:
    """Return a new state with ``scenario_id`` appended, shown at in-game day ``now``.

    History keeps the most recent ``history_cap`` ids, oldest evicted first.
    """
    history = (*state.scenario_history, scenario_id)[-history_cap:]
    return state.model_copy(
        update={
            "scenario_history": history,
            "last_scenario_at": now,
        }
    )


def apply_cooldown(
    weighted: list[WeightedScenario],
    selector_state: SelectorState,
) -> list[WeightedScenario]:
    """Drop scenarios already in the history; advisory, never empties the pool."""
    seen = set(selector_state.scenario_history)
    fresh = [w for w in weighted if w.scenario.id not in seen]
    if not fresh:
        if weighted:
            logger.debug("Cooldown: all %d candidates seen, allowing repeats", len(weighted))
        return weighted
    removed = len(weighted) - len(fresh)
    if removed:
        logger.debug("Cooldown: removed %d recently shown scenarios", removed)
    return fresh


def weighted_draw(pool: list[WeightedScenario], roll: float) -> GameScenario:
    """Walk the pool subtracting weights until the remainder reaches zero.

    Raises:
        CatalogError: If the pool is empty.
    """
    if not pool:
        msg = "no eligible scenarios to draw from"
        raise CatalogError(msg)

    remaining = roll * sum(w.weight for w in pool)
    for w in pool:
        remaining -= w.weight
        if remaining <= 0:
            return w.scenario
    # Float residue when roll is close to 1.
    return pool[-1].scenario


def eligible_candidates(
    track: ProfessionalTrack,
    state: JobHuntState,
    stats: SeedStats,
    selector_state: SelectorState,
    *,
    catalog: ScenarioCatalog | None = None,
    current_day: float | None = None,
    recent_window_days: float = DEFAULT_RECENT_WINDOW_DAYS,
) -> list[WeightedScenario]:
    """Filtered and reweighted candidates, before cooldown."""
    catalog = catalog if catalog is not None else default_catalog()
    candidates = run_filter_chain(list(catalog), build_filters(track, state, stats))
    return weigh_scenarios(candidates, stats, selector_state, current_day, recent_window_days)


def select_next_scenario(
    track: ProfessionalTrack,
    state: JobHuntState,
    stats: SeedStats,
    selector_state: SelectorState,
    roll: float | None = None,
    *,
    catalog: ScenarioCatalog | None = None,
    current_day: float | None = None,
    rng: random.Random | None = None,
    recent_window_days: float = DEFAULT_RECENT_WINDOW_DAYS,
) -> GameScenario:
    """Pick the next scenario for a player.

    Args:
        track: Player's professional track.
        state: Current funnel state.
        stats: Player trait vector (read only).
        selector_state: Session selection history (read only).
        roll: Optional injected draw in [0, 1).
        catalog: Scenario pool; the packaged catalog by default.
        current_day: In-game day of the draw, for the repeat penalty.
        rng: Random source used when no roll is given.
        recent_window_days: Window in which a repeat is damped.

    Returns:
        The selected scenario. Recording it is the caller's job.

    Raises:
        ValueError: If an injected roll is outside [0, 1).
        CatalogError: If no scenario is eligible (a catalog coverage gap).
    """
    if roll is None:
        roll = (rng or _DEFAULT_RNG).random()
    elif not 0.0 <= roll < 1.0:
        msg = f"roll must be in [0, 1), got {roll}"
        raise ValueError(msg)

    weighted = eligible_candidates(
        track,
        state,
        stats,
        selector_state,
        catalog=catalog,
        current_day=current_day,
        recent_window_days=recent_window_days,
    )
    if not weighted:
        msg = f"no scenario for track '{track}' in phase '{state}'"
        raise CatalogError(msg)

    pool = apply_cooldown(weighted, selector_state)
    scenario = weighted_draw(pool, roll)
    logger.debug(
        "Selected %s for %s/%s (roll=%.3f, pool=%d)",
        scenario.id, track, state, roll, len(pool),
    )
    return scenario


def describe_candidates(
    track: ProfessionalTrack,
    state: JobHuntState,
    stats: SeedStats,
    selector_state: SelectorState,
    catalog: ScenarioCatalog | None = None,
) -> str:
    """One line per eligible scenario with its current weight."""
    weighted = eligible_candidates(track, state, stats, selector_state, catalog=catalog)
    return "\n".join(f"{w.scenario.title} (weight: {w.weight:.2f})" for w in weighted)
