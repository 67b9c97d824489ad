"""Recommendation Pipeline.

Deterministic orchestration of stages 1-4. A pure function of the profile and
the catalog: no I/O, no shared state.

Usage flow
----------
1. compute_recommendations(profile, catalog)
   -> list[Recommendation]  (1-5 items; 3 fallback items when stage 1 is empty)

2. select_result_mode(unlocked, requested_mode)
   -> "preview" | "full"

3. build_preview(recommendations)
   -> list[RecommendationPreview]  (teaser for locked sessions)
"""

from typing import Optional, Sequence

from skill_finder.agents.advisory import annotate
from skill_finder.agents.candidate_filter import select_candidates
from skill_finder.agents.feasibility import score_feasibility
from skill_finder.agents.psychometric import score_candidates
from skill_finder.models.profile import UserProfile
from skill_finder.models.recommendation import (
    Recommendation,
    RecommendationPreview,
    ResultMode,
)
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    DETERMINISTIC_FALLBACK_SIZE,
    MAX_RECOMMENDATIONS,
)

FALLBACK_SCORE = 1
FALLBACK_REASONS = (
    "Your constraints remove most options right now.",
    "This is one of the lowest-cost options in the dataset. "
    "Consider increasing budget or improving tools access.",
)
FALLBACK_WARNING = "Most skills were filtered out based on tools/budget."


def budget_fallback_recommendations(skills: Sequence[SkillRecord]) -> list[Recommendation]:
    """Fixed-score recommendations for the cheapest skills (stage 1 found nothing)."""
    return [
        Recommendation(
            skill_code=skill.skill_code,
            skill_name=skill.name,
            score=FALLBACK_SCORE,
            reasons=list(FALLBACK_REASONS),
            badges=[],
            warnings=[FALLBACK_WARNING],
        )
        for skill in skills
    ]


def compute_recommendations(
    profile: UserProfile,
    catalog: Sequence[SkillRecord],
    correlation_id: Optional[str] = None,
) -> list[Recommendation]:
    """Run the deterministic filter -> score -> annotate pipeline.

    Args:
        profile: Validated user profile
        catalog: Full skill catalog (may be empty)
        correlation_id: Optional correlation ID for logging

    Returns:
        Up to 5 recommendations, best first. When no skill passes the tool and
        budget checks, the 3 cheapest skills are returned with a fixed score;
        that path skips feasibility elimination.
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="recommendation_pipeline",
    )
    logger.info("Recommendation pipeline started", catalog_size=len(catalog))

    selection = select_candidates(
        profile, catalog, DETERMINISTIC_FALLBACK_SIZE, correlation_id=correlation_id
    )
    if selection.used_fallback:
        return budget_fallback_recommendations(selection.candidates)

    feasible = score_feasibility(profile, selection.candidates, correlation_id=correlation_id)
    scored = score_candidates(profile, feasible, correlation_id=correlation_id)
    recommendations = annotate(
        profile, scored, limit=MAX_RECOMMENDATIONS, correlation_id=correlation_id
    )

    logger.info(
        "Recommendation pipeline complete",
        returned=[r.skill_code for r in recommendations],
    )
    return recommendations


def select_result_mode(unlocked: bool, requested_mode: ResultMode = "preview") -> ResultMode:
    """Full results only for unlocked sessions that asked for them."""
    return "full" if unlocked and requested_mode == "full" else "preview"


def build_preview(
    recommendations: Sequence[Recommendation],
    size: int = 3,
    teaser_reasons: int = 2,
) -> list[RecommendationPreview]:
    """Teaser for locked sessions: top `size` picks, first `teaser_reasons` reasons."""
    return [
        RecommendationPreview(
            skill_code=r.skill_code,
            skill_name=r.skill_name,
            score=r.score,
            teaser=r.reasons[:teaser_reasons],
        )
        for r in recommendations[:size]
    ]
