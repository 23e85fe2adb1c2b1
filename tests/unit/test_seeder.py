"""Tests for the stat seeder: worked example, bounds, determinism."""

import itertools

import pytest

from careersim.core.schemas import PERCENT_FIELDS
from careersim.profile.schema import (
    BACKGROUNDS,
    FINANCIAL_SITUATIONS,
    TRACKS,
    PlayerProfile,
    SelfRatings,
)
from careersim.profile.seeder import describe_stats, runway_months, seed_stats


def _profile(
    track: str = "analyst",
    background: str = "fresh_grad",
    financial_situation: str = "high_pressure",
    **ratings: int,
) -> PlayerProfile:
    defaults = {"python": 3, "sql": 4, "communication": 3, "confidence": 2}
    defaults.update(ratings)
    return PlayerProfile(
        track=track,
        background=background,
        financial_situation=financial_situation,
        self_ratings=SelfRatings(**defaults),
    )


class TestWorkedExample:
    def test_analyst_fresh_grad_high_pressure(self) -> None:
        s = seed_stats(_profile())
        assert s.confidence == pytest.approx(45.0)
        assert s.stress == pytest.approx(98.571, abs=1e-3)
        assert s.resume_strength == pytest.approx(27.0)
        assert s.portfolio_strength == pytest.approx(15.0)
        assert s.python_skill == pytest.approx(66.0)
        assert s.sql_skill == pytest.approx(88.0)
        assert s.communication == pytest.approx(70.0)
        assert s.savings == 20_000
        assert s.spending_monthly == 2_500

    def test_constant_starts(self) -> None:
        s = seed_stats(_profile())
        assert s.energy == 80
        assert s.scam_awareness == 60
        assert s.months_unemployed == 0
        assert s.applications_sent == 0


class TestBounds:
    @pytest.mark.parametrize(
        ("track", "background", "financial", "rating"),
        list(itertools.product(TRACKS, BACKGROUNDS, FINANCIAL_SITUATIONS, [1, 5])),
    )
    def test_percentages_in_range(
        self, track: str, background: str, financial: str, rating: int
    ) -> None:
        profile = _profile(
            track, background, financial,
            python=rating, sql=rating, communication=rating, confidence=rating,
        )
        s = seed_stats(profile)
        for name in PERCENT_FIELDS:
            value = getattr(s, name)
            assert 0 <= value <= 100, f"{name}={value}"

    def test_experienced_confidence_clamped(self) -> None:
        # 60 * 1.1 + 25 = 91, under the cap; stress 45 / 1.1 - 15 stays positive.
        s = seed_stats(_profile("ai_engineer", "experienced", "comfortable", confidence=5))
        assert s.confidence == pytest.approx(91.0)
        assert s.stress == pytest.approx(45 / 1.1 - 15)

    def test_high_pressure_stress_capped(self) -> None:
        s = seed_stats(_profile("analyst", "career_switcher", "high_pressure"))
        assert s.stress == 100.0


class TestDeterminism:
    def test_same_profile_same_stats(self) -> None:
        assert seed_stats(_profile()) == seed_stats(_profile())

    def test_returns_fresh_instance(self) -> None:
        profile = _profile()
        a = seed_stats(profile)
        a.adjust("confidence", 10)
        assert seed_stats(profile).confidence == pytest.approx(45.0)


class TestTrackBonus:
    def test_engineer_python_bonus(self) -> None:
        s = seed_stats(_profile("engineer", python=3))
        assert s.python_skill == pytest.approx(76.0)

    def test_ai_engineer_bonuses(self) -> None:
        s = seed_stats(_profile("ai_engineer", python=5))
        assert s.python_skill == 100.0  # 90 + 15, clamped
        assert s.technical_depth == pytest.approx(80.0)


class TestRunway:
    def test_months(self) -> None:
        s = seed_stats(_profile(financial_situation="high_pressure"))
        assert runway_months(s) == pytest.approx(8.0)

    def test_zero_spending_is_unlimited(self) -> None:
        s = seed_stats(_profile())
        s.spending_monthly = 0
        assert runway_months(s) is None

    def test_negative_savings_is_zero(self) -> None:
        s = seed_stats(_profile())
        s.savings = -100
        assert runway_months(s) == 0.0


class TestDescribeStats:
    def test_contains_profile_and_stats(self) -> None:
        profile = _profile()
        text = describe_stats(seed_stats(profile), profile)
        assert "Track: analyst" in text
        assert "Confidence: 45/100" in text
        assert "Savings: $20,000" in text
        assert "Runway: 8.0 months" in text
