"""Recommendation output models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

ResultMode = Literal["preview", "full"]


class Recommendation(BaseModel):
    """A ranked skill suggestion with its explanation.

    Attributes:
        skill_code: Catalog key of the recommended skill
        skill_name: Display name taken from the catalog
        score: Match score, always within 0-100
        reasons: Ordered explanation sentences
        badges: Advisory badges (e.g. "Start with Computer Fundamentals first")
        warnings: Advisory warnings (urgency mismatch, backup suggestion)
    """

    skill_code: str
    skill_name: str
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    badges: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RecommendationPreview(BaseModel):
    """Teaser shown before results are unlocked."""

    skill_code: str
    skill_name: str
    score: int = Field(ge=0, le=100)
    teaser: list[str] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    """Response envelope for one assessment submission.

    Exactly one of `recommendations` (full mode) or `preview` (preview mode)
    is populated.
    """

    session_id: str
    unlocked: bool
    mode: ResultMode
    ai_sourced: bool = False
    recommendations: Optional[list[Recommendation]] = None
    preview: Optional[list[RecommendationPreview]] = None
