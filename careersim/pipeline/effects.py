"""Choice effect applicator: feed a scenario choice back into the trait vector."""

import logging

from pydantic import BaseModel, Field

from careersim.core.schemas import GameScenario, SeedStats, SelectorState
from careersim.pipeline.selector import HISTORY_CAP, record_scenario_shown

logger = logging.getLogger(__name__)

_CURRENCY_FIELDS = ("savings", "spending_monthly")


class ChoiceOutcome(BaseModel):
    """Updated session values after a choice, plus user-facing notifications."""

    stats: SeedStats
    selector_state: SelectorState
    notifications: list[str] = Field(default_factory=list)


def _label(name: str) -> str:
    return name.replace("_", " ").capitalize().replace("Linkedin", "LinkedIn")


def format_change(name: str, change: float) -> str:
    """Render a stat change as a notification, e.g. 'Confidence +5'."""
    if name in _CURRENCY_FIELDS:
        sign = "-" if change < 0 else "+"
        return f"{_label(name)} {sign}${abs(change):,.0f}"
    return f"{_label(name)} {change:+.0f}"


def apply_choice(
    stats: SeedStats,
    selector_state: SelectorState,
    scenario: GameScenario,
    choice_id: str,
    *,
    now: float,
    history_cap: int = HISTORY_CAP,
) -> ChoiceOutcome:
    """Apply a choice's effect map and record the scenario as shown.

    Deltas are additive; percentage stats are re-clamped to 0-100. The input
    stats and selector state are left untouched; updated copies are returned.

    Raises:
        ValueError: If the scenario has no choice with ``choice_id``.
    """
    choice = scenario.get_choice(choice_id)
    if choice is None:
        msg = f"Scenario '{scenario.id}' has no choice '{choice_id}'"
        raise ValueError(msg)

    updated = stats.model_copy(deep=True)
    notifications: list[str] = []
    for name, delta in choice.effect.items():
        before = getattr(updated, name)
        change = updated.adjust(name, delta) - before
        if change:
            notifications.append(format_change(name, change))

    selector = record_scenario_shown(selector_state, scenario.id, now=now, history_cap=history_cap)
    logger.debug("Applied %s/%s: %s", scenario.id, choice_id, notifications or "no change")
    return ChoiceOutcome(stats=updated, selector_state=selector, notifications=notifications)
