"""Adaptive weighting for eligible scenarios.

Each scenario starts at its catalog weight. Tag-based modifiers push content
toward what the player's current condition calls for, recently shown
scenarios are damped, and the result is floored at WEIGHT_FLOOR so no
candidate ever carries a zero or negative weight into the draw.
"""

import logging
from collections.abc import Callable

from careersim.core.schemas import GameScenario, SeedStats, SelectorState, WeightedScenario

logger = logging.getLogger(__name__)

RECENT_PENALTY = 0.3
WEIGHT_FLOOR = 0.1
DEFAULT_RECENT_WINDOW_DAYS = 30.0

# (condition on stats, tag, multiplier)
_STAT_MODIFIERS: list[tuple[Callable[[SeedStats], bool], str, float]] = [
    # Low confidence: ease off hard technical content.
    (lambda s: s.confidence < 30, "technical", 0.5),
    # Low savings: surface financial pressure.
    (lambda s: s.savings < 20_000, "financial_pressure", 2.0),
    # Low scam awareness: more scam exposure.
    (lambda s: s.scam_awareness < 50, "scam", 1.5),
    # Strong network: referrals come up more often.
    (lambda s: s.network > 70, "referral", 1.8),
]


def stat_weight(scenario: GameScenario, stats: SeedStats) -> float:
    """Base weight with stat/tag modifiers applied (no history penalty, no floor)."""
    weight = scenario.weight
    for condition, tag, factor in _STAT_MODIFIERS:
        if tag in scenario.tags and condition(stats):
            weight *= factor
    return weight


def adjusted_weight(
    scenario: GameScenario,
    stats: SeedStats,
    selector_state: SelectorState,
    current_day: float | None = None,
    recent_window_days: float = DEFAULT_RECENT_WINDOW_DAYS,
) -> float:
    """Final selection weight for one scenario.

    Args:
        scenario: Candidate scenario.
        stats: Player trait vector.
        selector_state: Session selection history.
        current_day: In-game day of the draw; defaults to the last draw's day.
        recent_window_days: Window in which a repeat is damped.

    Returns:
        Weight >= WEIGHT_FLOOR.
    """
    weight = stat_weight(scenario, stats)

    if current_day is None:
        current_day = selector_state.last_scenario_at
    days_since_last = current_day - selector_state.last_scenario_at
    if scenario.id in selector_state.scenario_history and days_since_last < recent_window_days:
        weight *= RECENT_PENALTY

    return max(WEIGHT_FLOOR, weight)


def weigh_scenarios(
    scenarios: list[GameScenario],
    stats: SeedStats,
    selector_state: SelectorState,
    current_day: float | None = None,
    recent_window_days: float = DEFAULT_RECENT_WINDOW_DAYS,
) -> list[WeightedScenario]:
    """Weigh a batch of scenarios, preserving catalog order."""
    weighted = [
        WeightedScenario(
            scenario=s,
            weight=adjusted_weight(s, stats, selector_state, current_day, recent_window_days),
        )
        for s in scenarios
    ]
    for w in weighted:
        logger.debug("Weight %s: %.3f", w.scenario.id, w.weight)
    return weighted
