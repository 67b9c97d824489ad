"""Advisory Annotator (stage 4).

Turns the top scored candidates into Recommendations and attaches advice:

    - badge   : laptop owner with proficiency <= 2 looking at a digital skill
    - warning : quick income wanted but the skill takes > 3 months to earn
    - backup  : same urgency mismatch on the #1 pick suggests #2 as a
                faster-earning backup (runs after the per-skill rules)
"""

from typing import Optional, Sequence

from skill_finder.agents.psychometric import ScoredCandidate
from skill_finder.models.profile import EquipmentAccess, IncomeUrgency, UserProfile
from skill_finder.models.recommendation import Recommendation
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    FUNDAMENTALS_PROFICIENCY_CEILING,
    MAX_RECOMMENDATIONS,
    URGENCY_EARN_THRESHOLD_MONTHS,
    is_digital,
)

FUNDAMENTALS_BADGE = "Start with Computer Fundamentals first"
URGENCY_WARNING = (
    "This is a strong long-term match, but it may take longer than "
    f"{URGENCY_EARN_THRESHOLD_MONTHS} months to start earning."
)


def _earns_slowly(skill: SkillRecord) -> bool:
    months = skill.time_to_earn_months
    return months is not None and months > URGENCY_EARN_THRESHOLD_MONTHS


def badges_for(profile: UserProfile, skill: SkillRecord) -> list[str]:
    badges: list[str] = []
    if (
        profile.equipment_access == EquipmentAccess.LAPTOP_PC
        and profile.computer_proficiency is not None
        and profile.computer_proficiency <= FUNDAMENTALS_PROFICIENCY_CEILING
        and is_digital(skill)
    ):
        badges.append(FUNDAMENTALS_BADGE)
    return badges


def warnings_for(profile: UserProfile, skill: SkillRecord) -> list[str]:
    warnings: list[str] = []
    if profile.income_urgency == IncomeUrgency.QUICK and _earns_slowly(skill):
        warnings.append(URGENCY_WARNING)
    return warnings


def backup_suggestion(backup_name: str) -> str:
    return (
        f"Consider also: {backup_name} as a faster-earning backup "
        "while you build your top skill."
    )


def apply_backup_suggestion(
    profile: UserProfile,
    recommendations: list[Recommendation],
    top_skill: Optional[SkillRecord],
) -> None:
    """Suggest the #2 pick as a backup when the #1 pick earns too slowly.

    Mutates recommendations[0].warnings in place.
    """
    if profile.income_urgency != IncomeUrgency.QUICK or len(recommendations) < 2:
        return
    if top_skill is None or not _earns_slowly(top_skill):
        return
    recommendations[0].warnings.append(backup_suggestion(recommendations[1].skill_name))


def annotate(
    profile: UserProfile,
    scored: Sequence[ScoredCandidate],
    limit: int = MAX_RECOMMENDATIONS,
    correlation_id: Optional[str] = None,
) -> list[Recommendation]:
    """Build annotated Recommendations for the top `limit` candidates.

    Args:
        profile: Validated user profile
        scored: Stage 3 output, best first
        limit: How many recommendations to keep
        correlation_id: Optional correlation ID for logging

    Returns:
        Recommendation list, best first
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="advisory_annotator",
    )

    top = list(scored[:limit])
    recommendations = [
        Recommendation(
            skill_code=c.skill.skill_code,
            skill_name=c.skill.name,
            score=c.score,
            reasons=list(c.reasons),
            badges=badges_for(profile, c.skill),
            warnings=warnings_for(profile, c.skill),
        )
        for c in top
    ]

    apply_backup_suggestion(profile, recommendations, top[0].skill if top else None)

    logger.info(
        "Stage 4 complete",
        recommendations=len(recommendations),
        badges=sum(len(r.badges) for r in recommendations),
        warnings=sum(len(r.warnings) for r in recommendations),
    )
    return recommendations
