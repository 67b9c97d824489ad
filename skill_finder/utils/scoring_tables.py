"""
Scoring Tables

Every constant that shapes a recommendation or a provider ranking lives here,
keyed by enum variant, so the deterministic pipeline and the AI shortlist read
the same numbers.

Stage 2 (feasibility) deltas
----------------------------
    utility none     : -15 power need >= Medium, -15 internet need >= Medium
    utility outages  : -10 power need == High,   -10 internet need == High
    mobility Remote  : +8 Remote skill, +4 Hybrid skill, -10 otherwise
    mobility On-site : +6 On-site skill
    mobility Hybrid  : +6 Hybrid skill
    workspace desk   : +4 digital skill, -2 otherwise
    workspace hands  : +4 non-digital skill, -2 otherwise

Stage 3 (psychometric) weights
------------------------------
    base = 0.3 * personality + 0.3 * mental_model + 0.2 * interest + 0.2 * patience
    Each factor falls back to MATCH_FLOOR (0.2), never 0.
"""

from skill_finder.models.profile import (
    Level,
    Mobility,
    PrimaryInterest,
    ProblemInstinct,
    SeedCapitalBracket,
    SocialBattery,
    UtilityReliability,
    WorkspacePreference,
)
from skill_finder.models.skill import InternetNeed, MentalModel, PowerNeed, SkillRecord

# ── Stage 1: budget and tools ────────────────────────────────────────────────

BUDGET_CEILINGS: dict[SeedCapitalBracket, int] = {
    SeedCapitalBracket.BELOW_50:        49_999,
    SeedCapitalBracket.FROM_50_TO_100:  100_000,
    SeedCapitalBracket.FROM_100_TO_200: 200_000,
    SeedCapitalBracket.FROM_200_TO_400: 400_000,
    SeedCapitalBracket.ABOVE_400:       999_999_999,  # effectively unbounded
}

# Substring markers checked in order against the lower-cased prerequisite tag
PREREQUISITE_RANKS: tuple[tuple[str, int], ...] = (
    ("basic_smartphone", 0),
    ("basic_computer",   1),
    ("advanced_pc",      2),
)
UNKNOWN_PREREQUISITE_RANK = 1

# Equipment tiers below laptop_pc only qualify for rank-0 prerequisites
COMPUTER_PREREQUISITE_RANK = 1

# ── Stage 2: infrastructure and work style ───────────────────────────────────

POWER_NEED_RANKS: dict[PowerNeed, int] = {
    PowerNeed.LOW:    1,
    PowerNeed.MEDIUM: 2,
    PowerNeed.HIGH:   3,
}
INTERNET_NEED_RANKS: dict[InternetNeed, int] = {
    InternetNeed.ZERO:   0,
    InternetNeed.LOW:    1,
    InternetNeed.MEDIUM: 2,
    InternetNeed.HIGH:   3,
}
MAX_NEED_RANK = 3

# reliability -> (minimum need rank that triggers the penalty, penalty per need)
UTILITY_PENALTIES: dict[UtilityReliability, tuple[int, int]] = {
    UtilityReliability.NONE:    (2, -15),
    UtilityReliability.OUTAGES: (3, -10),
}

# user mobility -> skill work location -> delta (missing pairs score 0)
MOBILITY_DELTAS: dict[Mobility, dict[Mobility, int]] = {
    Mobility.REMOTE: {
        Mobility.REMOTE:  8,
        Mobility.HYBRID:  4,
        Mobility.ON_SITE: -10,
    },
    Mobility.ON_SITE: {Mobility.ON_SITE: 6},
    Mobility.HYBRID:  {Mobility.HYBRID: 6},
}

# (workspace preference, skill is digital) -> delta; "mix" never adjusts
WORKSPACE_DELTAS: dict[tuple[WorkspacePreference, bool], int] = {
    (WorkspacePreference.DESK,     True):  4,
    (WorkspacePreference.DESK,     False): -2,
    (WorkspacePreference.HANDS_ON, False): 4,
    (WorkspacePreference.HANDS_ON, True):  -2,
}

DIGITAL_PREREQUISITE_MARKERS: tuple[str, ...] = ("basic_computer", "advanced_pc")
DIGITAL_KEYWORDS: tuple[str, ...] = (
    "digital",
    "tech",
    "data",
    "software",
    "program",
    "design",
    "ui",
    "ux",
    "analytics",
    "cyber",
    "network",
)

# ── Stage 3: psychometric match tables ───────────────────────────────────────

MATCH_FLOOR = 0.2
STRONG_MATCH_THRESHOLD = 0.9

PERSONALITY_MATCH: dict[tuple[SocialBattery, SocialBattery], float] = {
    (SocialBattery.INTROVERT, SocialBattery.INTROVERT): 1.0,
    (SocialBattery.EXTROVERT, SocialBattery.EXTROVERT): 1.0,
    (SocialBattery.MIX,       SocialBattery.MIX):       1.0,
    (SocialBattery.MIX,       SocialBattery.INTROVERT): 0.7,
    (SocialBattery.MIX,       SocialBattery.EXTROVERT): 0.7,
    (SocialBattery.INTROVERT, SocialBattery.MIX):       0.7,
    (SocialBattery.EXTROVERT, SocialBattery.MIX):       0.7,
}

MENTAL_MODEL_MATCH: dict[tuple[ProblemInstinct, MentalModel], float] = {
    (ProblemInstinct.CREATIVE,    MentalModel.CREATIVE):   1.0,
    (ProblemInstinct.ANALYTICAL,  MentalModel.ANALYTICAL): 1.0,
    (ProblemInstinct.ANALYTICAL,  MentalModel.STRUCTURAL): 0.7,
    (ProblemInstinct.ADVERSARIAL, MentalModel.STRUCTURAL): 0.7,
    (ProblemInstinct.ADVERSARIAL, MentalModel.ANALYTICAL): 0.4,
    (ProblemInstinct.CREATIVE,    MentalModel.ANALYTICAL): 0.3,
    (ProblemInstinct.CREATIVE,    MentalModel.STRUCTURAL): 0.3,
}

INTEREST_MATCH: dict[tuple[PrimaryInterest, PrimaryInterest], float] = {
    **{(goal, goal): 1.0 for goal in PrimaryInterest},
    (PrimaryInterest.BUILD,   PrimaryInterest.SOLVE):   0.6,
    (PrimaryInterest.SOLVE,   PrimaryInterest.BUILD):   0.6,
    (PrimaryInterest.PROTECT, PrimaryInterest.SOLVE):   0.5,
    (PrimaryInterest.CREATE,  PrimaryInterest.CONNECT): 0.5,
    (PrimaryInterest.CONNECT, PrimaryInterest.CREATE):  0.5,
}

PATIENCE_MATCH: dict[tuple[Level, Level], float] = {
    **{(level, level): 1.0 for level in Level},
    (Level.LOW,      Level.MODERATE): 0.6,
    (Level.MODERATE, Level.LOW):      0.6,
    (Level.MODERATE, Level.HIGH):     0.6,
    (Level.HIGH,     Level.MODERATE): 0.6,
}

PSYCHOMETRIC_WEIGHTS: dict[str, float] = {
    "personality":  0.3,
    "mental_model": 0.3,
    "interest":     0.2,
    "patience":     0.2,
}

# ── Stage 4 and output caps ──────────────────────────────────────────────────

MAX_RECOMMENDATIONS = 5
DETERMINISTIC_FALLBACK_SIZE = 3
AI_SHORTLIST_FALLBACK_SIZE = 25
AI_SHORTLIST_SIZE = 35

FUNDAMENTALS_PROFICIENCY_CEILING = 2
URGENCY_EARN_THRESHOLD_MONTHS = 3

# ── Provider matching ────────────────────────────────────────────────────────

RANK_SAME_AREA = 1
RANK_SAME_CITY = 2
RANK_SAME_STATE = 3
RANK_ELSEWHERE = 99

MIN_PHYSICAL_DELIVERY_PERCENT = 10
MAX_PROVIDERS = 10


def budget_ceiling(bracket: SeedCapitalBracket) -> int:
    return BUDGET_CEILINGS[bracket]


def prerequisite_rank(tag: str | None) -> int:
    """Rank a free-text prerequisite tag; unrecognised tags rank as basic computer."""
    value = (tag or "").lower()
    for marker, rank in PREREQUISITE_RANKS:
        if marker in value:
            return rank
    return UNKNOWN_PREREQUISITE_RANK


def is_digital(skill: SkillRecord) -> bool:
    """Heuristic: does this skill mostly happen at a desk on a computer?

    True when the prerequisite tag asks for computer use, or the category or
    industry text contains one of DIGITAL_KEYWORDS. Plain substring matching,
    so "ui" also hits words like "building".
    """
    prereq = (skill.prerequisite_proficiency or "").lower()
    if any(marker in prereq for marker in DIGITAL_PREREQUISITE_MARKERS):
        return True

    category = (skill.category or "").lower()
    industry = (skill.industry or "").lower()
    return any(k in category or k in industry for k in DIGITAL_KEYWORDS)
