"""Tests for the choice effect applicator."""

import pytest

from careersim.core.schemas import GameScenario, SeedStats, SelectorState
from careersim.pipeline.effects import apply_choice, format_change


def _scenario() -> GameScenario:
    return GameScenario.model_validate({
        "id": "suspicious_job_posting",
        "title": "Too Good to Be True?",
        "text": "",
        "phase": "searching",
        "tracks": "all",
        "difficulty": 1,
        "choices": [
            {"id": "scam_aware", "text": "Skip it", "effect": {"scam_awareness": 20}},
            {
                "id": "scam_fall",
                "text": "Pay the fee",
                "effect": {"scam_awareness": -30, "stress": 30, "savings": -5000},
            },
            {"id": "shrug", "text": "Shrug", "effect": {}},
        ],
    })


def _stats(**overrides: float) -> SeedStats:
    defaults: dict[str, float] = {"scam_awareness": 60, "stress": 50, "savings": 20_000}
    defaults.update(overrides)
    return SeedStats(**defaults)


class TestFormatChange:
    @pytest.mark.parametrize(
        ("name", "change", "expected"),
        [
            ("confidence", 5, "Confidence +5"),
            ("stress", -10, "Stress -10"),
            ("scam_awareness", 20, "Scam awareness +20"),
            ("linkedin_presence", 3, "LinkedIn presence +3"),
            ("savings", -5000, "Savings -$5,000"),
            ("spending_monthly", 250, "Spending monthly +$250"),
        ],
    )
    def test_format(self, name: str, change: float, expected: str) -> None:
        assert format_change(name, change) == expected


class TestApplyChoice:
    def test_applies_deltas(self) -> None:
        outcome = apply_choice(_stats(), SelectorState(), _scenario(), "scam_fall", now=1)
        assert outcome.stats.scam_awareness == 30
        assert outcome.stats.stress == 80
        assert outcome.stats.savings == 15_000
        assert outcome.notifications == [
            "Scam awareness -30",
            "Stress +30",
            "Savings -$5,000",
        ]

    def test_clamps_and_reports_actual_change(self) -> None:
        outcome = apply_choice(
            _stats(scam_awareness=90), SelectorState(), _scenario(), "scam_aware", now=1
        )
        assert outcome.stats.scam_awareness == 100
        assert outcome.notifications == ["Scam awareness +10"]

    def test_no_change_no_notification(self) -> None:
        outcome = apply_choice(
            _stats(scam_awareness=100), SelectorState(), _scenario(), "scam_aware", now=1
        )
        assert outcome.notifications == []

    def test_savings_can_go_negative(self) -> None:
        outcome = apply_choice(_stats(savings=1000), SelectorState(), _scenario(), "scam_fall", now=1)
        assert outcome.stats.savings == -4000

    def test_inputs_untouched(self) -> None:
        stats = _stats()
        state = SelectorState()
        apply_choice(stats, state, _scenario(), "scam_fall", now=1)
        assert stats == _stats()
        assert state.scenario_history == ()

    def test_records_scenario(self) -> None:
        outcome = apply_choice(_stats(), SelectorState(), _scenario(), "shrug", now=12)
        assert outcome.selector_state.scenario_history == ("suspicious_job_posting",)
        assert outcome.selector_state.last_scenario_at == 12
        assert outcome.notifications == []

    def test_unknown_choice(self) -> None:
        with pytest.raises(ValueError, match="has no choice 'nope'"):
            apply_choice(_stats(), SelectorState(), _scenario(), "nope", now=1)
