"""
Shared test fixtures.

Factories build valid profiles, skills and provider offerings from a neutral
baseline; tests override only the fields they care about.
"""

import asyncio
from typing import Any, Callable, Optional

import pytest

from skill_finder.models.profile import UserProfile
from skill_finder.models.provider import Provider, ProviderOffering
from skill_finder.models.skill import SkillRecord

BASE_PROFILE: dict[str, Any] = {
    "state": "Lagos",
    "city": "Ikeja",
    "area": "Allen",
    "equipment_access": "laptop_pc",
    "computer_proficiency": 4,
    "seed_capital": "above_400",
    "utility_reliability": "stable",
    "workspace_preference": "mix",
    "social_battery": "Mix",
    "mobility": "Hybrid",
    "problem_instinct": "Analytical",
    "math_logic_comfort": "Moderate",
    "patience_level": "Moderate",
    "learning_style": "continuous",
    "income_urgency": "long",
    "primary_interest": "Solve",
}

BASE_SKILL: dict[str, Any] = {
    "skill_code": "SK01",
    "name": "Skill One",
    "category": "Vocational",
    "industry": "Trades",
    "min_budget_naira": 10_000,
    "max_budget_naira": 50_000,
    "power_need": "Low",
    "internet_need": "Low",
    "personality": "Mix",
    "prerequisite_proficiency": "basic_smartphone",
    "primary_goal": "Solve",
    "mental_model": "Analytical",
    "math_logic_intensity": "Moderate",
    "patience_level": "Moderate",
    "time_to_learn_months": 2,
    "time_to_earn_months": 2,
    "work_location": "Hybrid",
}

BASE_PROVIDER: dict[str, Any] = {
    "id": "prov-1",
    "name": "Provider One",
    "provider_type": "training_center",
    "phone": "+2348000000001",
    "whatsapp": "+2348000000001",
    "state": "Lagos",
    "city": "Ikeja",
    "area": "Allen",
    "address": "1 Allen Avenue",
    "physical_delivery_percent": 50,
    "mode_supported": "Physical",
    "has_power_backup": True,
    "has_training_laptops": True,
    "has_internet": False,
    "is_active": True,
    "verification_status": "standard",
}


@pytest.fixture
def profile_data() -> dict[str, Any]:
    """Raw assessment answers that validate cleanly."""
    return dict(BASE_PROFILE)


@pytest.fixture
def make_profile() -> Callable[..., UserProfile]:
    """Factory: make_profile(utility_reliability="none", ...)."""

    def _make(**overrides: Any) -> UserProfile:
        return UserProfile.model_validate({**BASE_PROFILE, **overrides})

    return _make


@pytest.fixture
def make_skill() -> Callable[..., SkillRecord]:
    """Factory: make_skill("GD01", min_budget_naira=60_000, ...)."""

    def _make(skill_code: str = "SK01", **overrides: Any) -> SkillRecord:
        data = {**BASE_SKILL, "skill_code": skill_code, "name": f"Skill {skill_code}"}
        return SkillRecord.model_validate({**data, **overrides})

    return _make


@pytest.fixture
def make_offering() -> Callable[..., ProviderOffering]:
    """Factory: make_offering("GD01", provider={"id": "p2", "area": "Opebi"}, ...).

    `provider` holds overrides for the nested provider; pass provider=None
    to build an offering without a provider record.
    """
    _missing = object()

    def _make(
        skill_code: str = "SK01",
        provider: Optional[dict[str, Any]] | object = _missing,
        **overrides: Any,
    ) -> ProviderOffering:
        if provider is None:
            nested = None
        else:
            extra = {} if provider is _missing else provider
            nested = Provider.model_validate({**BASE_PROVIDER, **extra})
        return ProviderOffering(skill_code=skill_code, provider=nested, **overrides)

    return _make


class FakeLLMClient:
    """LLMClient stand-in: records calls, then answers, raises or stalls."""

    def __init__(
        self,
        response: str = "",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        model: str = "fake-model",
    ):
        self.model = model
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        correlation_id: Optional[str] = None,
    ) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_llm_client() -> Callable[..., FakeLLMClient]:
    """Factory: make_llm_client(response='{...}') or make_llm_client(error=TimeoutError())."""
    return FakeLLMClient
