"""
User Assessment Profile Models

Immutable description of a person's situation as reported in the assessment:
location, tools, budget, infrastructure, personality and goals.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)


class EquipmentAccess(str, Enum):
    """Best device the user can work on."""

    NONE = "none"
    SMARTPHONE_ONLY = "smartphone_only"
    LAPTOP_PC = "laptop_pc"


class SeedCapitalBracket(str, Enum):
    """Starting budget bracket, in thousands of naira."""

    BELOW_50 = "below_50"
    FROM_50_TO_100 = "50_100"
    FROM_100_TO_200 = "100_200"
    FROM_200_TO_400 = "200_400"
    ABOVE_400 = "above_400"


class UtilityReliability(str, Enum):
    NONE = "none"
    OUTAGES = "outages"
    STABLE = "stable"


class WorkspacePreference(str, Enum):
    HANDS_ON = "hands_on"
    DESK = "desk"
    MIX = "mix"


class SocialBattery(str, Enum):
    """Social energy; also used as a skill's personality affinity."""

    INTROVERT = "Introvert"
    EXTROVERT = "Extrovert"
    MIX = "Mix"


class Mobility(str, Enum):
    """Preferred work mode; also used as a skill's work location."""

    REMOTE = "Remote"
    ON_SITE = "On-site"
    HYBRID = "Hybrid"


class ProblemInstinct(str, Enum):
    CREATIVE = "Creative"
    ANALYTICAL = "Analytical"
    ADVERSARIAL = "Adversarial"


class Level(str, Enum):
    """Three-step ordinal used for math comfort and patience."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class LearningStyle(str, Enum):
    SET_AND_FORGET = "set_and_forget"
    CONTINUOUS = "continuous"


class IncomeUrgency(str, Enum):
    QUICK = "quick"
    LONG = "long"


class PrimaryInterest(str, Enum):
    """What the user finds most interesting; also a skill's primary goal."""

    BUILD = "Build"
    SOLVE = "Solve"
    PROTECT = "Protect"
    CREATE = "Create"
    CONNECT = "Connect"


class Locality(BaseModel):
    """State / city / optional area triple used for provider proximity."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    area: Optional[str] = None

    @field_validator("area")
    @classmethod
    def blank_area_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class UserProfile(BaseModel):
    """Validated assessment answers.

    Attributes:
        session_id: Caller-supplied session identifier (optional)
        state, city, area: Where the user lives
        equipment_access: Best available device
        computer_proficiency: Self-rated 1-5, required when equipment_access is laptop_pc
        seed_capital: Starting budget bracket
        utility_reliability: Power/internet reliability at home
        workspace_preference: Desk, hands-on or a mix
        social_battery: Introvert / Extrovert / Mix
        mobility: Remote / On-site / Hybrid
        problem_instinct: Creative / Analytical / Adversarial
        math_logic_comfort: Low / Moderate / High
        patience_level: Low / Moderate / High
        learning_style: set_and_forget / continuous
        income_urgency: quick / long
        primary_interest: Build / Solve / Protect / Create / Connect
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    session_id: Optional[str] = None

    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    area: Optional[str] = None

    equipment_access: EquipmentAccess
    computer_proficiency: Optional[int] = Field(
        default=None, ge=1, le=5, validate_default=True
    )
    seed_capital: SeedCapitalBracket
    utility_reliability: UtilityReliability

    workspace_preference: WorkspacePreference
    social_battery: SocialBattery
    mobility: Mobility

    problem_instinct: ProblemInstinct
    math_logic_comfort: Level
    patience_level: Level
    learning_style: LearningStyle

    income_urgency: IncomeUrgency
    primary_interest: PrimaryInterest

    @field_validator("computer_proficiency")
    @classmethod
    def require_proficiency_for_laptop(
        cls, v: Optional[int], info: ValidationInfo
    ) -> Optional[int]:
        """Laptop owners must rate their computer proficiency."""
        if v is None and info.data.get("equipment_access") == EquipmentAccess.LAPTOP_PC:
            raise ValueError(
                "computer_proficiency is required when equipment_access is laptop_pc"
            )
        return v

    @field_validator("area")
    @classmethod
    def blank_area_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def locality(self) -> Locality:
        return Locality(state=self.state, city=self.city, area=self.area)


class ProfileValidationError(ValueError):
    """Raised when assessment input is malformed, before any scoring runs.

    Attributes:
        field: Dotted path of the offending field (e.g. "computer_proficiency")
        message: Human-readable description of the problem
        errors: All validation errors reported for the payload
    """

    def __init__(
        self, field: str, message: str, errors: Optional[list[dict[str, Any]]] = None
    ):
        self.field = field
        self.message = message
        self.errors = errors or []
        super().__init__(f"{field}: {message}")


def parse_profile(data: dict[str, Any]) -> UserProfile:
    """Validate raw assessment answers into a UserProfile.

    Args:
        data: Raw assessment payload (e.g. decoded request JSON)

    Returns:
        Validated, immutable UserProfile

    Raises:
        ProfileValidationError: Naming the first offending field
    """
    try:
        return UserProfile.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"]) or "(root)"
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in errors
        ]
        raise ProfileValidationError(field, first["msg"], details) from e
