"""Skill catalog record model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from skill_finder.models.profile import Level, Mobility, PrimaryInterest, SocialBattery


class PowerNeed(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InternetNeed(str, Enum):
    ZERO = "Zero"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class MentalModel(str, Enum):
    CREATIVE = "Creative"
    ANALYTICAL = "Analytical"
    STRUCTURAL = "Structural"


class SkillRecord(BaseModel):
    """A learnable, income-generating skill from the catalog.

    Attributes:
        skill_code: Unique catalog key (e.g. "GD01")
        name: Display name
        category: Category tag (e.g. "Digital_Creative")
        industry: Industry tag
        min_budget_naira: Minimum startup budget, >= 0
        max_budget_naira: Maximum startup budget (optional), >= min_budget_naira
        power_need: Low / Medium / High
        internet_need: Zero / Low / Medium / High
        personality: Introvert / Extrovert / Mix affinity
        prerequisite_proficiency: Free-text device literacy tag
            (Basic_Smartphone, Basic_Computer, Advanced_PC, ...)
        primary_goal: Build / Create / Protect / Solve / Connect
        mental_model: Creative / Analytical / Structural
        math_logic_intensity: Low / Moderate / High
        patience_level: Low / Moderate / High
        time_to_learn_months: Months to become employable (optional)
        time_to_earn_months: Months until first income (optional)
        work_location: Remote / On-site / Hybrid
    """

    model_config = ConfigDict(frozen=True)

    skill_code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: str = ""
    industry: str = ""

    min_budget_naira: int = Field(ge=0)
    max_budget_naira: Optional[int] = Field(default=None, ge=0)

    power_need: PowerNeed
    internet_need: InternetNeed

    personality: SocialBattery
    prerequisite_proficiency: str = ""

    primary_goal: PrimaryInterest
    mental_model: MentalModel

    math_logic_intensity: Level
    patience_level: Level

    daily_activities: Optional[str] = None
    time_to_learn_months: Optional[float] = Field(default=None, ge=0)
    time_to_earn_months: Optional[float] = Field(default=None, ge=0)

    work_location: Mobility
    portability: str = ""
    learning_curve: str = ""
    important_constraints: Optional[str] = None

    @model_validator(mode="after")
    def check_budget_range(self) -> "SkillRecord":
        if self.max_budget_naira is not None and self.min_budget_naira > self.max_budget_naira:
            raise ValueError(
                f"min_budget_naira ({self.min_budget_naira}) must not exceed "
                f"max_budget_naira ({self.max_budget_naira})"
            )
        return self
