"""Career mirror: end-of-run reflection over a session's stats and decisions."""

from collections.abc import Callable

from pydantic import BaseModel, Field

from careersim.core.schemas import DecisionRecord, GameSession, SeedStats

KEY_MOMENT_LIMIT = 6


class MirrorResult(BaseModel):
    total_decisions: int
    days_in_search: int
    final_state: str
    ending: str | None = None
    dominant_trait: str
    trait_scores: dict[str, int]
    archetype: str
    archetype_description: str
    key_moments: list[str] = Field(default_factory=list)
    funnel_path: list[str] = Field(default_factory=list)


# First match wins.
_ARCHETYPES: list[tuple[str, str, Callable[[SeedStats], bool]]] = [
    (
        "The Trailblazer",
        "High confidence and real technical depth. You walked into every round expecting to win it.",
        lambda s: s.confidence >= 70 and s.technical_depth >= 60,
    ),
    (
        "The Diplomat",
        "Strong communication and a wide network. Doors opened because people wanted to work with you.",
        lambda s: s.communication >= 70 and s.network >= 60,
    ),
    (
        "The Strategist",
        "Solid reputation and sharp interviewing. You treated the search as a campaign, not a lottery.",
        lambda s: s.reputation >= 70 and s.interview_skill >= 60,
    ),
    (
        "The Survivor",
        "Stress ran high the whole way, but you kept enough in the tank to keep going.",
        lambda s: s.stress >= 70 and s.energy >= 40,
    ),
    (
        "The Architect",
        "Deep SQL and Python skills. You don't just use the tools, you build the systems.",
        lambda s: s.sql_skill >= 70 and s.python_skill >= 70,
    ),
    (
        "The Climber",
        "Visibility above all. Whether that's ambition or politics depends on who's watching.",
        lambda s: s.reputation >= 80 and s.linkedin_presence >= 60,
    ),
    (
        "The Specialist",
        "Hyper-focused technical depth. You solve the problems nobody else on the team can touch.",
        lambda s: s.technical_depth >= 80 and s.python_skill >= 80,
    ),
    (
        "The Burnout",
        "Stress and exhaustion reached critical levels. This pace isn't sustainable, and you know it.",
        lambda s: s.stress >= 90 or s.energy <= 20,
    ),
]

_DEFAULT_ARCHETYPE = (
    "The Journeyer",
    "No single trait dominates. A little of everything, master of the middle ground. "
    "That's not indecision, that's adaptability.",
)

_KEY_MOMENTS: dict[str, str] = {
    "salary_negotiate": "Negotiated your offer with market data",
    "salary_accept_desperate": "Accepted a lowball offer",
    "exploding_extend": "Pushed back on an exploding offer",
    "equity_questions": "Asked the hard questions about equity",
    "offer_leverage": "Played two offers against each other",
    "scam_aware": "Spotted a job scam",
    "scam_fall": "Paid a fake training fee",
    "recruiter_verify": "Reported a fake recruiter",
    "recruiter_comply": "Handed your details to a fake recruiter",
    "referral_apply": "Leveraged your network for a referral",
    "coffee_prepared": "Turned a coffee chat into a connection",
    "rejection_resilient": "Bounced back from a string of rejections",
    "rejection_spiral": "Let rejection get the better of you",
    "financial_pragmatic": "Chose stability over the dream job",
    "financial_risk": "Held out for the dream job",
    "bias_aware": "Called out dataset bias",
    "bias_dismiss": "Dismissed a fairness problem",
    "project_build": "Built something on the side",
    "profile_rewrite": "Rewrote your resume around results",
}


def trait_scores(stats: SeedStats) -> dict[str, int]:
    """Aggregate the trait vector into six 0-100 reflection scores."""
    return {
        "Confidence": round(stats.confidence),
        "Reputation": round(stats.reputation),
        "Technical": round((stats.technical_depth + stats.python_skill + stats.sql_skill) / 3),
        "Soft Skills": round((stats.communication + stats.interview_skill + stats.network) / 3),
        "Wellbeing": round(((100 - stats.stress) + stats.energy) / 2),
        "Financials": 100 if stats.savings > 0 else 0,
    }


def key_moments(decisions: list[DecisionRecord]) -> list[str]:
    moments = [_KEY_MOMENTS[d.choice_id] for d in decisions if d.choice_id in _KEY_MOMENTS]
    return moments[-KEY_MOMENT_LIMIT:]


def generate_mirror(session: GameSession) -> MirrorResult:
    """Build the end-of-run reflection for a session."""
    stats = session.stats
    scores = trait_scores(stats)
    # Ties resolve to the earlier trait in insertion order.
    dominant = max(scores, key=lambda k: scores[k])

    name, description = _DEFAULT_ARCHETYPE
    for archetype, text, check in _ARCHETYPES:
        if check(stats):
            name, description = archetype, text
            break

    progress = session.progress
    return MirrorResult(
        total_decisions=len(session.decisions),
        days_in_search=progress.days_in_search,
        final_state=progress.phase.state,
        ending=progress.ending.type if progress.ending else None,
        dominant_trait=dominant,
        trait_scores=scores,
        archetype=name,
        archetype_description=description,
        key_moments=key_moments(session.decisions),
        funnel_path=[p.state for p in progress.history],
    )
