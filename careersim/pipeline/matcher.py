"""Filter chain for scenario selection.

Filter order:
  1. TrackFilter     : scenario tracks include the player's track (or "all")
  2. PhaseFilter     : scenario phase equals the funnel state (or "any")
  3. DifficultyFilter: difficulty at or below the phase's ceiling

Cooldown runs after reweighting, in ``selector``.
"""

import logging
from collections.abc import Callable

from careersim.core.schemas import GameScenario, JobHuntState, SeedStats

logger = logging.getLogger(__name__)

# A filter is a callable that takes scenarios and returns a subset.
Filter = Callable[[list[GameScenario]], list[GameScenario]]

# Easier content early in the funnel, harder later.
DIFFICULTY_CEILING: dict[str, int] = {
    "searching": 1,
    "screening": 1,
    "technical_round": 2,
    "hr_round": 2,
    "offer_stage": 2,
    "accepted": 1,
}


def difficulty_ceiling(state: JobHuntState, stats: SeedStats | None = None) -> int:
    """Highest scenario difficulty allowed in a state.

    Fixed per state; ``stats`` is currently unused.
    """
    return DIFFICULTY_CEILING.get(state, 1)


class TrackFilter:
    """Keep scenarios visible to the player's track."""

    def __init__(self, track: str) -> None:
        self._track = track

    def __call__(self, scenarios: list[GameScenario]) -> list[GameScenario]:
        result = [s for s in scenarios if s.applies_to_track(self._track)]
        removed = len(scenarios) - len(result)
        if removed:
            logger.debug("TrackFilter(%s): removed %d scenarios", self._track, removed)
        return result


class PhaseFilter:
    """Keep scenarios written for the current funnel state."""

    def __init__(self, state: JobHuntState) -> None:
        self._state = state

    def __call__(self, scenarios: list[GameScenario]) -> list[GameScenario]:
        result = [s for s in scenarios if s.applies_to_phase(self._state)]
        removed = len(scenarios) - len(result)
        if removed:
            logger.debug("PhaseFilter(%s): removed %d scenarios", self._state, removed)
        return result


class DifficultyFilter:
    """Keep scenarios at or below a difficulty ceiling."""

    def __init__(self, ceiling: int) -> None:
        self._ceiling = ceiling

    def __call__(self, scenarios: list[GameScenario]) -> list[GameScenario]:
        result = [s for s in scenarios if s.difficulty <= self._ceiling]
        removed = len(scenarios) - len(result)
        if removed:
            logger.debug("DifficultyFilter(<=%d): removed %d scenarios", self._ceiling, removed)
        return result


def build_filters(track: str, state: JobHuntState, stats: SeedStats | None = None) -> list[Filter]:
    """The standard eligibility chain for a (track, state) pair."""
    return [
        TrackFilter(track),
        PhaseFilter(state),
        DifficultyFilter(difficulty_ceiling(state, stats)),
    ]


def run_filter_chain(
    scenarios: list[GameScenario],
    filters: list[Filter],
) -> list[GameScenario]:
    """Apply filters in order, returning the surviving scenarios."""
    result = scenarios
    for f in filters:
        result = f(result)
    return result
