"""Feasibility Scorer (stage 2).

Computes an additive integer delta per candidate from infrastructure
reliability, mobility and workspace fit, then removes candidates that are
outright impossible: with no reliable utilities, a skill that needs the
maximum level of both power and internet is dropped rather than penalised.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from skill_finder.models.profile import UserProfile, UtilityReliability
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    INTERNET_NEED_RANKS,
    MAX_NEED_RANK,
    MOBILITY_DELTAS,
    POWER_NEED_RANKS,
    UTILITY_PENALTIES,
    WORKSPACE_DELTAS,
    is_digital,
)


@dataclass(frozen=True)
class FeasibilityResult:
    """A candidate skill with its stage-2 delta."""

    skill: SkillRecord
    delta: int


def utility_delta(profile: UserProfile, skill: SkillRecord) -> int:
    penalty_rule = UTILITY_PENALTIES.get(profile.utility_reliability)
    if penalty_rule is None:
        return 0

    min_rank, penalty = penalty_rule
    delta = 0
    if POWER_NEED_RANKS[skill.power_need] >= min_rank:
        delta += penalty
    if INTERNET_NEED_RANKS[skill.internet_need] >= min_rank:
        delta += penalty
    return delta


def mobility_delta(profile: UserProfile, skill: SkillRecord) -> int:
    return MOBILITY_DELTAS.get(profile.mobility, {}).get(skill.work_location, 0)


def workspace_delta(profile: UserProfile, skill: SkillRecord) -> int:
    return WORKSPACE_DELTAS.get((profile.workspace_preference, is_digital(skill)), 0)


def compute_feasibility_delta(profile: UserProfile, skill: SkillRecord) -> int:
    """Sum of utility, mobility and workspace adjustments (starts at 0)."""
    return (
        utility_delta(profile, skill)
        + mobility_delta(profile, skill)
        + workspace_delta(profile, skill)
    )


def is_infeasible(profile: UserProfile, skill: SkillRecord) -> bool:
    """True when utilities are absent and the skill maxes out power AND internet."""
    if profile.utility_reliability != UtilityReliability.NONE:
        return False
    return (
        POWER_NEED_RANKS[skill.power_need] == MAX_NEED_RANK
        and INTERNET_NEED_RANKS[skill.internet_need] == MAX_NEED_RANK
    )


def score_feasibility(
    profile: UserProfile,
    candidates: Iterable[SkillRecord],
    correlation_id: Optional[str] = None,
) -> list[FeasibilityResult]:
    """Attach stage-2 deltas and drop infeasible candidates, keeping order.

    Args:
        profile: Validated user profile
        candidates: Stage 1 output
        correlation_id: Optional correlation ID for logging

    Returns:
        FeasibilityResult per surviving candidate
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="recommendation",
        component="feasibility_scorer",
    )

    results: list[FeasibilityResult] = []
    eliminated = 0
    for skill in candidates:
        if is_infeasible(profile, skill):
            eliminated += 1
            logger.debug(
                "Skill eliminated: needs full power and internet",
                skill_code=skill.skill_code,
            )
            continue
        delta = compute_feasibility_delta(profile, skill)
        logger.debug("Stage 2 delta", skill_code=skill.skill_code, delta=delta)
        results.append(FeasibilityResult(skill=skill, delta=delta))

    logger.info("Stage 2 complete", kept=len(results), eliminated=eliminated)
    return results
