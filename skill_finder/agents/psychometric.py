"""Psychometric Scorer (stage 3).

Scores each feasible candidate on four personality/interest factors, folds in
the stage-2 delta and explains the result in plain sentences.

Score formula
-------------
    base  = 0.3 * personality + 0.3 * mental_model + 0.2 * interest + 0.2 * patience
    score = clamp(round(clamp(base, 0, 1) * 100) + stage2_delta, 0, 100)
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from skill_finder.agents.feasibility import FeasibilityResult
from skill_finder.models.profile import UserProfile, UtilityReliability
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    INTEREST_MATCH,
    MATCH_FLOOR,
    MENTAL_MODEL_MATCH,
    PATIENCE_MATCH,
    PERSONALITY_MATCH,
    PSYCHOMETRIC_WEIGHTS,
    STRONG_MATCH_THRESHOLD,
)

_STRONG_MATCH_REASONS: dict[str, str] = {
    "personality": "Matches your social work style (introvert/extrovert mix).",
    "mental_model": "Matches how you naturally solve problems.",
    "interest": "Matches what you find most interesting.",
    "patience": "Matches your patience level for learning.",
}

ENVIRONMENT_REASON = "Your utility reliability was considered in this recommendation."


@dataclass(frozen=True)
class PsychometricBreakdown:
    """Factor scores, each within [MATCH_FLOOR, 1]."""

    personality: float
    mental_model: float
    interest: float
    patience: float

    def factors(self) -> dict[str, float]:
        return {
            "personality": self.personality,
            "mental_model": self.mental_model,
            "interest": self.interest,
            "patience": self.patience,
        }

    @property
    def base(self) -> float:
        """Weighted sum, 0-1."""
        factors = self.factors()
        return sum(PSYCHOMETRIC_WEIGHTS[name] * value for name, value in factors.items())


@dataclass
class ScoredCandidate:
    """Stage 3 output for one skill."""

    skill: SkillRecord
    score: int
    delta: int
    breakdown: PsychometricBreakdown
    reasons: list[str] = field(default_factory=list)


def compute_breakdown(profile: UserProfile, skill: SkillRecord) -> PsychometricBreakdown:
    return PsychometricBreakdown(
        personality=PERSONALITY_MATCH.get(
            (profile.social_battery, skill.personality), MATCH_FLOOR
        ),
        mental_model=MENTAL_MODEL_MATCH.get(
            (profile.problem_instinct, skill.mental_model), MATCH_FLOOR
        ),
        interest=INTEREST_MATCH.get(
            (profile.primary_interest, skill.primary_goal), MATCH_FLOOR
        ),
        patience=PATIENCE_MATCH.get(
            (profile.patience_level, skill.patience_level), MATCH_FLOOR
        ),
    )


def combine_score(breakdown: PsychometricBreakdown, delta: int) -> int:
    """Map the weighted base to 0-100, add the stage-2 delta, clamp to 0-100."""
    base = _clamp(breakdown.base, 0.0, 1.0)
    score = int(round(base * 100)) + delta
    return int(_clamp(score, 0, 100))


def build_reasons(
    profile: UserProfile, skill: SkillRecord, breakdown: PsychometricBreakdown
) -> list[str]:
    """Explain a score: strong factor matches, budget fit, environment note."""
    reasons = [
        _STRONG_MATCH_REASONS[name]
        for name, value in breakdown.factors().items()
        if value >= STRONG_MATCH_THRESHOLD
    ]
    reasons.append(
        f"Fits within your seed capital (min ₦{skill.min_budget_naira:,})."
    )
    if profile.utility_reliability != UtilityReliability.STABLE:
        reasons.append(ENVIRONMENT_REASON)
    return reasons


def score_candidates(
    profile: UserProfile,
    feasible: Iterable[FeasibilityResult],
    correlation_id: Optional[str] = None,
) -> list[ScoredCandidate]:
    """Score and rank candidates, best first.

    Sorting is stable, so equal scores keep catalog order.

    Args:
        profile: Validated user profile
        feasible: Stage 2 output
        correlation_id: Optional correlation ID for logging

    Returns:
        ScoredCandidate list in descending score order
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="psychometric_scorer",
    )

    scored: list[ScoredCandidate] = []
    for item in feasible:
        breakdown = compute_breakdown(profile, item.skill)
        scored.append(
            ScoredCandidate(
                skill=item.skill,
                score=combine_score(breakdown, item.delta),
                delta=item.delta,
                breakdown=breakdown,
                reasons=build_reasons(profile, item.skill, breakdown),
            )
        )

    scored.sort(key=lambda c: c.score, reverse=True)

    logger.info(
        "Stage 3 complete",
        scored=len(scored),
        top=[(c.skill.skill_code, c.score) for c in scored[:5]],
    )
    return scored


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
