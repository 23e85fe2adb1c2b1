"""Seed the initial SeedStats from a PlayerProfile.

Pure and deterministic: track defaults, background multipliers and the
financial lookup are fixed tables; self-ratings and track bonuses are
applied on top, and every percentage write is clamped to 0-100.
"""

from careersim.core.schemas import SeedStats, clamp_percent
from careersim.profile.schema import PlayerProfile

# Track → starting values before background and self-ratings.
_TRACK_DEFAULTS: dict[str, dict[str, float]] = {
    "analyst": {
        "confidence": 50,
        "stress": 55,
        "reputation": 30,
        "network": 20,
        "linkedin_presence": 40,
        "resume_strength": 45,
        "portfolio_strength": 30,
        "interview_skill": 40,
        "technical_depth": 55,
    },
    "engineer": {
        "confidence": 55,
        "stress": 50,
        "reputation": 35,
        "network": 25,
        "linkedin_presence": 45,
        "resume_strength": 40,
        "portfolio_strength": 50,
        "interview_skill": 35,
        "technical_depth": 60,
    },
    "ai_engineer": {
        "confidence": 60,
        "stress": 45,
        "reputation": 40,
        "network": 30,
        "linkedin_presence": 50,
        "resume_strength": 50,
        "portfolio_strength": 60,
        "interview_skill": 40,
        "technical_depth": 70,
    },
}

# Background → (confidence, resume, portfolio) multipliers.
_BACKGROUND_MULTIPLIERS: dict[str, tuple[float, float, float]] = {
    "fresh_grad": (0.7, 0.6, 0.5),
    "career_switcher": (0.65, 0.85, 0.4),
    "bootcamp": (0.8, 0.4, 0.8),
    "experienced": (1.1, 1.2, 1.0),
}

# Financial situation → (savings, monthly spending).
_FINANCES: dict[str, tuple[float, float]] = {
    "comfortable": (150_000, 3_000),
    "moderate": (60_000, 3_500),
    "high_pressure": (20_000, 2_500),
}

# Applied last, after self-ratings.
_FINANCIAL_STRESS: dict[str, float] = {
    "comfortable": -15,
    "moderate": 0,
    "high_pressure": 20,
}

# Track → {stat: bonus} applied after self-ratings.
_TRACK_BONUS: dict[str, dict[str, float]] = {
    "analyst": {"sql_skill": 10},
    "engineer": {"python_skill": 10},
    "ai_engineer": {"python_skill": 15, "technical_depth": 10},
}

ENERGY_START = 80.0
SCAM_AWARENESS_START = 60.0


def seed_stats(profile: PlayerProfile) -> SeedStats:
    """Derive the starting trait vector for a profile.

    Args:
        profile: The player's validated profile.

    Returns:
        A fresh SeedStats owned by the caller.
    """
    defaults = _TRACK_DEFAULTS[profile.track]
    conf_mult, resume_mult, portfolio_mult = _BACKGROUND_MULTIPLIERS[profile.background]
    savings, spending = _FINANCES[profile.financial_situation]
    ratings = profile.self_ratings

    stats = SeedStats(
        confidence=clamp_percent(defaults["confidence"] * conf_mult),
        # Inverse: weaker backgrounds start more stressed.
        stress=clamp_percent(defaults["stress"] / conf_mult),
        energy=ENERGY_START,
        savings=savings,
        spending_monthly=spending,
        reputation=defaults["reputation"],
        network=defaults["network"],
        linkedin_presence=defaults["linkedin_presence"],
        resume_strength=clamp_percent(defaults["resume_strength"] * resume_mult),
        portfolio_strength=clamp_percent(defaults["portfolio_strength"] * portfolio_mult),
        interview_skill=defaults["interview_skill"],
        technical_depth=defaults["technical_depth"],
        python_skill=clamp_percent(30 + ratings.python * 12),
        sql_skill=clamp_percent(30 + ratings.sql * 12),
        communication=clamp_percent(40 + ratings.communication * 10),
        scam_awareness=SCAM_AWARENESS_START,
    )

    # Compounds on the track/background confidence.
    stats.adjust("confidence", ratings.confidence * 5)

    for name, bonus in _TRACK_BONUS[profile.track].items():
        stats.adjust(name, bonus)

    stats.adjust("stress", _FINANCIAL_STRESS[profile.financial_situation])
    return stats


def runway_months(stats: SeedStats) -> float | None:
    """Months of savings left at the current spend. None means no spending."""
    if stats.spending_monthly <= 0:
        return None
    return max(0.0, stats.savings) / stats.spending_monthly


def describe_stats(stats: SeedStats, profile: PlayerProfile) -> str:
    """Human-readable summary of a profile and its seeded stats."""
    runway = runway_months(stats)
    runway_text = "unlimited" if runway is None else f"{runway:.1f} months"
    r = profile.self_ratings
    lines = [
        "PLAYER PROFILE",
        f"  Track: {profile.track}",
        f"  Background: {profile.background}",
        f"  Financial: {profile.financial_situation}",
        f"  Self-Ratings: Python {r.python}/5, SQL {r.sql}/5, "
        f"Communication {r.communication}/5, Confidence {r.confidence}/5",
        "",
        "SEEDED STATS",
        f"  Confidence: {stats.confidence:.0f}/100",
        f"  Stress: {stats.stress:.0f}/100",
        f"  Energy: {stats.energy:.0f}/100",
        f"  Resume Strength: {stats.resume_strength:.0f}/100",
        f"  Portfolio Strength: {stats.portfolio_strength:.0f}/100",
        f"  Interview Skill: {stats.interview_skill:.0f}/100",
        f"  Technical Depth: {stats.technical_depth:.0f}/100",
        f"  Python: {stats.python_skill:.0f}/100  SQL: {stats.sql_skill:.0f}/100",
        f"  Communication: {stats.communication:.0f}/100",
        f"  Reputation: {stats.reputation:.0f}/100",
        f"  Network: {stats.network:.0f}/100",
        f"  LinkedIn Presence: {stats.linkedin_presence:.0f}/100",
        f"  Savings: ${stats.savings:,.0f}",
        f"  Monthly Spending: ${stats.spending_monthly:,.0f}",
        f"  Runway: {runway_text}",
        f"  Scam Awareness: {stats.scam_awareness:.0f}/100",
    ]
    return "\n".join(lines)
