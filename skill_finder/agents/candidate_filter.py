"""Candidate Filter (stage 1).

Hard elimination of skills the user cannot start: the tool check rejects
computer-dependent skills for users without a laptop, the budget check rejects
skills whose minimum budget exceeds the seed-capital ceiling.

When nothing survives, the cheapest skills are used instead so the user is
never shown an empty result. The fallback size depends on the caller: 3 for
the deterministic pipeline, 25 for the AI shortlist.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from skill_finder.models.profile import EquipmentAccess, UserProfile
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    COMPUTER_PREREQUISITE_RANK,
    budget_ceiling,
    prerequisite_rank,
)

_NO_COMPUTER = {EquipmentAccess.NONE, EquipmentAccess.SMARTPHONE_ONLY}


@dataclass(frozen=True)
class CandidateSelection:
    """Stage 1 output.

    Attributes:
        candidates: Skills that passed the filter, or the cheapest skills
        used_fallback: True when the filter removed everything
    """

    candidates: list[SkillRecord]
    used_fallback: bool


def passes_tool_check(profile: UserProfile, skill: SkillRecord) -> bool:
    if profile.equipment_access in _NO_COMPUTER:
        return prerequisite_rank(skill.prerequisite_proficiency) < COMPUTER_PREREQUISITE_RANK
    return True


def passes_budget_check(profile: UserProfile, skill: SkillRecord) -> bool:
    return skill.min_budget_naira <= budget_ceiling(profile.seed_capital)


def cheapest_skills(skills: Sequence[SkillRecord], count: int) -> list[SkillRecord]:
    """Return the `count` lowest-budget skills, ascending; ties keep catalog order."""
    return sorted(skills, key=lambda s: s.min_budget_naira)[:count]


def filter_candidates(
    profile: UserProfile,
    skills: Sequence[SkillRecord],
    correlation_id: Optional[str] = None,
) -> list[SkillRecord]:
    """Apply the tool and budget checks, preserving catalog order.

    Args:
        profile: Validated user profile
        skills: Full skill catalog
        correlation_id: Optional correlation ID for logging

    Returns:
        Skills passing both checks (possibly empty)
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="candidate_filter",
    )

    passed: list[SkillRecord] = []
    for skill in skills:
        if not passes_tool_check(profile, skill):
            logger.debug(
                "Skill filtered: tools",
                skill_code=skill.skill_code,
                prerequisite=skill.prerequisite_proficiency,
            )
            continue
        if not passes_budget_check(profile, skill):
            logger.debug(
                "Skill filtered: budget",
                skill_code=skill.skill_code,
                min_budget=skill.min_budget_naira,
            )
            continue
        passed.append(skill)

    logger.info("Stage 1 complete", catalog_size=len(skills), passed=len(passed))
    return passed


def select_candidates(
    profile: UserProfile,
    skills: Sequence[SkillRecord],
    fallback_size: int,
    correlation_id: Optional[str] = None,
) -> CandidateSelection:
    """Run stage 1 with the "never show nothing" fallback.

    Args:
        profile: Validated user profile
        skills: Full skill catalog
        fallback_size: How many cheapest skills to use when nothing passes
        correlation_id: Optional correlation ID for logging

    Returns:
        CandidateSelection
    """
    passed = filter_candidates(profile, skills, correlation_id=correlation_id)
    if passed:
        return CandidateSelection(candidates=passed, used_fallback=False)

    fallback = cheapest_skills(skills, fallback_size)
    get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="candidate_filter",
    ).warning(
        "No skill passed stage 1, using cheapest skills",
        fallback_size=fallback_size,
        selected=[s.skill_code for s in fallback],
    )
    return CandidateSelection(candidates=fallback, used_fallback=True)
