"""
Unit tests for the AI re-ranking layer and its deterministic fallback.

The LLM is replaced by the make_llm_client fake; no network calls are made.
"""

import json

import pytest

from skill_finder.agents.advisory import FUNDAMENTALS_BADGE
from skill_finder.agents.ai_reranker import (
    AIReranker,
    AISourcedOutcome,
    DeterministicOutcome,
    build_request_payload,
    build_shortlist,
    compute_recommendations_with_ai,
    render_system_prompt,
)
from skill_finder.agents.recommendation_pipeline import compute_recommendations
from skill_finder.utils.prompt_loader import PromptLoader


def _item(code, score=80, reasons=None, **extra):
    item = {
        "skill_code": code,
        "score": score,
        "reasons": reasons or ["Fits your budget.", "Matches your style.", "Low power need."],
        "badges": [],
        "warnings": [],
    }
    item.update(extra)
    return item


def _reply(*items, model="fake-model"):
    return json.dumps({"recommendations": list(items), "meta": {"model": model, "version": "1"}})


@pytest.fixture
def catalog(make_skill):
    return [
        make_skill("GD01", name="Graphic Design"),
        make_skill("DA02", name="Data Analysis", personality="Introvert"),
        make_skill("PH04", name="Phone Repair", work_location="On-site"),
    ]


class TestFallback:
    """Every failure yields the deterministic result for the full catalog."""

    @pytest.mark.asyncio
    async def test_client_error_matches_deterministic_output(self, make_llm_client, make_profile, catalog):
        # Arrange
        profile = make_profile()
        client = make_llm_client(error=RuntimeError("connection reset"))

        # Act
        outcome = await AIReranker(client).rerank(profile, catalog)

        # Assert
        assert isinstance(outcome, DeterministicOutcome)
        assert outcome.fallback_reason == "RuntimeError"
        assert outcome.recommendations == compute_recommendations(profile, catalog)

    @pytest.mark.asyncio
    async def test_non_json_reply(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response="Here are my picks: Graphic Design!")

        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        assert isinstance(outcome, DeterministicOutcome)
        assert outcome.fallback_reason == "LLMResponseError"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [
            _reply(_item("GD01", score=150)),
            _reply(_item("GD01", reasons=["only", "two"])),
            _reply(),
            json.dumps({"recommendations": [_item("GD01")]}),
            _reply(*[_item("GD01") for _ in range(6)]),
            json.dumps({"recommendations": [{"skill_code": "GD01", "score": 90}], "meta": {"model": "m", "version": "1"}}),
        ],
        ids=["score-out-of-range", "too-few-reasons", "no-items", "missing-meta", "too-many-items", "missing-fields"],
    )
    async def test_schema_invalid_reply(self, make_llm_client, make_profile, catalog, reply):
        client = make_llm_client(response=reply)

        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        assert isinstance(outcome, DeterministicOutcome)
        assert outcome.fallback_reason == "SchemaValidationError"

    @pytest.mark.asyncio
    async def test_only_foreign_codes(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response=_reply(_item("ZZ99"), _item("XX01")))

        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        assert isinstance(outcome, DeterministicOutcome)
        assert outcome.fallback_reason == "no_allowed_codes"

    @pytest.mark.asyncio
    async def test_timeout(self, make_llm_client, make_profile, catalog):
        # Arrange
        client = make_llm_client(response=_reply(_item("GD01")), delay=1.0)

        # Act
        outcome = await AIReranker(client, timeout_seconds=0.01).rerank(make_profile(), catalog)

        # Assert
        assert isinstance(outcome, DeterministicOutcome)
        assert outcome.fallback_reason == "timeout"

    @pytest.mark.asyncio
    async def test_empty_catalog_skips_client(self, make_llm_client, make_profile):
        client = make_llm_client(response=_reply(_item("GD01")))

        outcome = await AIReranker(client).rerank(make_profile(), [])

        assert outcome.fallback_reason == "empty_shortlist"
        assert outcome.recommendations == []
        assert client.calls == []


class TestAISourced:
    @pytest.mark.asyncio
    async def test_valid_reply(self, make_llm_client, make_profile, catalog):
        # Arrange
        client = make_llm_client(
            response=_reply(_item("DA02", score=92), _item("GD01", score=75), model="claude-x")
        )

        # Act
        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        # Assert
        assert isinstance(outcome, AISourcedOutcome)
        assert outcome.model == "claude-x"
        assert [r.skill_code for r in outcome.recommendations] == ["DA02", "GD01"]
        assert [r.score for r in outcome.recommendations] == [92, 75]
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_mixed_codes_keep_only_shortlist(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response=_reply(_item("ZZ99"), _item("PH04"), _item("GD01")))

        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        assert isinstance(outcome, AISourcedOutcome)
        assert [r.skill_code for r in outcome.recommendations] == ["PH04", "GD01"]

    @pytest.mark.asyncio
    async def test_duplicates_dropped_and_names_from_catalog(self, make_llm_client, make_profile, catalog):
        # Arrange
        client = make_llm_client(
            response=_reply(
                _item("GD01", score=90, skill_name="Something Else"),
                _item("GD01", score=40),
            )
        )

        # Act
        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        # Assert
        assert len(outcome.recommendations) == 1
        rec = outcome.recommendations[0]
        assert rec.skill_name == "Graphic Design"
        assert rec.score == 90

    @pytest.mark.asyncio
    async def test_fenced_json_accepted(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response="```json\n" + _reply(_item("GD01")) + "\n```")

        outcome = await AIReranker(client).rerank(make_profile(), catalog)

        assert isinstance(outcome, AISourcedOutcome)

    @pytest.mark.asyncio
    async def test_user_prompt_is_request_payload(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response=_reply(_item("GD01")))

        await AIReranker(client).rerank(make_profile(), catalog)

        payload = json.loads(client.calls[0][1])
        assert {s["skill_code"] for s in payload["shortlistSkills"]} == {"GD01", "DA02", "PH04"}

    @pytest.mark.asyncio
    async def test_compute_recommendations_with_ai(self, make_llm_client, make_profile, catalog):
        client = make_llm_client(response=_reply(_item("PH04")))

        recs = await compute_recommendations_with_ai(make_profile(), catalog, client)

        assert [r.skill_code for r in recs] == ["PH04"]

    @pytest.mark.asyncio
    async def test_compute_recommendations_with_ai_never_raises(self, make_llm_client, make_profile, catalog):
        profile = make_profile()
        client = make_llm_client(error=ValueError("bad"))

        recs = await compute_recommendations_with_ai(profile, catalog, client)

        assert recs == compute_recommendations(profile, catalog)


class TestShortlist:
    def test_sorted_by_delta_with_stable_ties(self, make_profile, make_skill):
        # Arrange: Hybrid user gains +6 on Hybrid skills, 0 on On-site
        profile = make_profile()
        skills = [
            make_skill("ONSITE", work_location="On-site"),
            make_skill("H1"),
            make_skill("H2"),
        ]

        # Act
        shortlist = build_shortlist(profile, skills)

        # Assert
        assert [s.skill_code for s in shortlist.skills] == ["H1", "H2", "ONSITE"]
        assert shortlist.deltas == {"H1": 6, "H2": 6, "ONSITE": 0}

    def test_capped_at_35(self, make_profile, make_skill):
        skills = [make_skill(f"S{i:02d}") for i in range(40)]

        shortlist = build_shortlist(make_profile(), skills)

        assert len(shortlist.skills) == 35
        assert set(shortlist.deltas) == shortlist.codes

    def test_budget_fallback_offers_25_cheapest(self, make_profile, make_skill):
        skills = [
            make_skill(f"X{i:02d}", min_budget_naira=100_000 + i * 1_000, max_budget_naira=None)
            for i in range(30)
        ]

        shortlist = build_shortlist(make_profile(seed_capital="below_50"), skills)

        assert len(shortlist.skills) == 25
        assert "X29" not in shortlist.codes

    def test_infeasible_skills_removed(self, make_profile, make_skill):
        skills = [make_skill("OK"), make_skill("MAX", power_need="High", internet_need="High")]

        shortlist = build_shortlist(make_profile(utility_reliability="none"), skills)

        assert shortlist.codes == {"OK"}


class TestRequestAndPrompt:
    def test_payload_constraints(self, make_profile, catalog):
        profile = make_profile()
        shortlist = build_shortlist(profile, catalog)

        payload = build_request_payload(profile, shortlist)

        assert payload["constraints"] == {"maxRecommendations": 5, "mustUseSkillCodesProvided": True}
        assert payload["userAssessment"]["seed_capital"] == "above_400"
        assert payload["stage2Deltas"] == shortlist.deltas
        json.dumps(payload)

    def test_system_prompt_mentions_rules(self):
        prompt = render_system_prompt(PromptLoader(strict_undefined=True))

        assert FUNDAMENTALS_BADGE in prompt
        assert "JSON" in prompt
