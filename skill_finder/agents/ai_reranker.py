"""AI Reranker.

Optional layer on top of the deterministic pipeline. A shortlist of up to 35
feasible skills is sent to a language model, which picks and justifies up to
5 of them. The reply is schema-validated and filtered to shortlist codes.

Any failure (client error, timeout, non-JSON reply, schema mismatch, no
usable codes) produces the deterministic result computed on the full catalog.
Callers never see an error from this layer and never get a mix of AI and
deterministic items.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

from skill_finder.agents.advisory import FUNDAMENTALS_BADGE
from skill_finder.agents.candidate_filter import select_candidates
from skill_finder.agents.feasibility import score_feasibility
from skill_finder.agents.recommendation_pipeline import compute_recommendations
from skill_finder.models.profile import UserProfile
from skill_finder.models.recommendation import Recommendation
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.llm_helpers import LLMClient, parse_llm_json
from skill_finder.utils.logger import get_logger
from skill_finder.utils.prompt_loader import PromptLoader
from skill_finder.utils.scoring_tables import (
    AI_SHORTLIST_FALLBACK_SIZE,
    AI_SHORTLIST_SIZE,
    DIGITAL_KEYWORDS,
    FUNDAMENTALS_PROFICIENCY_CEILING,
    MAX_RECOMMENDATIONS,
    URGENCY_EARN_THRESHOLD_MONTHS,
)
from skill_finder.utils.validator import LLM_RECOMMENDATION_SCHEMA, SchemaValidator

DEFAULT_TIMEOUT_SECONDS = 20.0
RERANK_TEMPLATE = "recommendation/rerank_system.j2"

MIN_AI_REASONS = 3
MAX_AI_REASONS = 6
MAX_AI_LIST_ITEMS = 5


@dataclass(frozen=True)
class Shortlist:
    """Skills offered to the model, best feasibility first, with their deltas."""

    skills: list[SkillRecord]
    deltas: dict[str, int] = field(default_factory=dict)

    @property
    def codes(self) -> set[str]:
        return {s.skill_code for s in self.skills}

    def by_code(self) -> dict[str, SkillRecord]:
        return {s.skill_code: s for s in self.skills}


@dataclass(frozen=True)
class DeterministicOutcome:
    """Result of the deterministic pipeline, used when the AI path fails."""

    recommendations: list[Recommendation]
    fallback_reason: str


@dataclass(frozen=True)
class AISourcedOutcome:
    """Fully validated AI result, restricted to shortlist codes."""

    recommendations: list[Recommendation]
    model: str


RerankOutcome = Union[DeterministicOutcome, AISourcedOutcome]


def build_shortlist(
    profile: UserProfile,
    catalog: Sequence[SkillRecord],
    correlation_id: Optional[str] = None,
) -> Shortlist:
    """Run stages 1-2 and keep the 35 most feasible candidates.

    Stage 1 falls back to the 25 cheapest skills when it removes everything.
    Sorting by delta is stable, so equal deltas keep catalog order.
    """
    selection = select_candidates(
        profile, catalog, AI_SHORTLIST_FALLBACK_SIZE, correlation_id=correlation_id
    )
    feasible = score_feasibility(profile, selection.candidates, correlation_id=correlation_id)
    ranked = sorted(feasible, key=lambda r: r.delta, reverse=True)[:AI_SHORTLIST_SIZE]
    return Shortlist(
        skills=[r.skill for r in ranked],
        deltas={r.skill.skill_code: r.delta for r in ranked},
    )


def build_request_payload(profile: UserProfile, shortlist: Shortlist) -> dict[str, Any]:
    """JSON-ready request body handed to the model as the user prompt."""
    return {
        "userAssessment": profile.model_dump(mode="json"),
        "shortlistSkills": [s.model_dump(mode="json") for s in shortlist.skills],
        "stage2Deltas": shortlist.deltas,
        "constraints": {
            "maxRecommendations": MAX_RECOMMENDATIONS,
            "mustUseSkillCodesProvided": True,
        },
    }


def render_system_prompt(prompt_loader: PromptLoader, correlation_id: Optional[str] = None) -> str:
    return prompt_loader.render(
        RERANK_TEMPLATE,
        correlation_id=correlation_id,
        max_recommendations=MAX_RECOMMENDATIONS,
        min_reasons=MIN_AI_REASONS,
        max_reasons=MAX_AI_REASONS,
        max_list_items=MAX_AI_LIST_ITEMS,
        urgency_months=URGENCY_EARN_THRESHOLD_MONTHS,
        fundamentals_ceiling=FUNDAMENTALS_PROFICIENCY_CEILING,
        fundamentals_badge=FUNDAMENTALS_BADGE,
        digital_keywords=DIGITAL_KEYWORDS,
    )


def select_allowed(payload: dict[str, Any], shortlist: Shortlist) -> list[Recommendation]:
    """Map a schema-valid reply onto Recommendations.

    Codes outside the shortlist and repeated codes are dropped; display names
    always come from the shortlist record. At most 5 items are kept.
    """
    by_code = shortlist.by_code()
    seen: set[str] = set()
    out: list[Recommendation] = []
    for item in payload["recommendations"]:
        code = item["skill_code"]
        if code not in by_code or code in seen:
            continue
        seen.add(code)
        out.append(
            Recommendation(
                skill_code=code,
                skill_name=by_code[code].name,
                score=item["score"],
                reasons=list(item["reasons"]),
                badges=list(item["badges"]),
                warnings=list(item["warnings"]),
            )
        )
    return out[:MAX_RECOMMENDATIONS]


class AIReranker:
    """Asks an injected LLM client to re-rank the feasibility shortlist.

    Args:
        llm_client: Object implementing the LLMClient protocol
        validator: SchemaValidator used for the reply (default: package schemas)
        timeout_seconds: Upper bound for the single LLM call
        prompt_loader: PromptLoader for the system prompt (default: package prompts)
    """

    def __init__(
        self,
        llm_client: LLMClient,
        validator: Optional[SchemaValidator] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        prompt_loader: Optional[PromptLoader] = None,
    ):
        self.llm_client = llm_client
        self.validator = validator or SchemaValidator()
        self.timeout_seconds = timeout_seconds
        self.prompt_loader = prompt_loader or PromptLoader(strict_undefined=True)

    async def rerank(
        self,
        profile: UserProfile,
        catalog: Sequence[SkillRecord],
        correlation_id: Optional[str] = None,
    ) -> RerankOutcome:
        """Return either a fully validated AI outcome or the deterministic one."""
        logger = get_logger(
            correlation_id=correlation_id,
            phase="ai_rerank",
            component="ai_reranker",
        )

        shortlist = build_shortlist(profile, catalog, correlation_id=correlation_id)
        if not shortlist.skills:
            logger.warning("Empty shortlist, using deterministic pipeline")
            return self._fallback(profile, catalog, "empty_shortlist", correlation_id)

        try:
            system_prompt = render_system_prompt(self.prompt_loader, correlation_id)
            user_prompt = json.dumps(build_request_payload(profile, shortlist))

            logger.info(
                "Requesting AI re-ranking",
                shortlist_size=len(shortlist.skills),
                model=getattr(self.llm_client, "model", None),
                timeout_seconds=self.timeout_seconds,
            )
            response_text = await asyncio.wait_for(
                self.llm_client.complete(
                    system_prompt, user_prompt, correlation_id=correlation_id
                ),
                timeout=self.timeout_seconds,
            )

            payload = parse_llm_json(response_text)
            self.validator.validate(payload, LLM_RECOMMENDATION_SCHEMA)
            recommendations = select_allowed(payload, shortlist)
        except asyncio.TimeoutError:
            logger.error("AI re-ranking timed out", timeout_seconds=self.timeout_seconds)
            return self._fallback(profile, catalog, "timeout", correlation_id)
        except Exception as e:
            logger.error(
                "AI re-ranking failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._fallback(profile, catalog, type(e).__name__, correlation_id)

        if not recommendations:
            logger.warning(
                "AI returned no shortlist codes",
                returned=[r.get("skill_code") for r in payload["recommendations"]],
            )
            return self._fallback(profile, catalog, "no_allowed_codes", correlation_id)

        logger.info(
            "AI re-ranking complete",
            returned=[r.skill_code for r in recommendations],
            response_model=payload["meta"]["model"],
            response_version=payload["meta"]["version"],
        )
        return AISourcedOutcome(
            recommendations=recommendations,
            model=payload["meta"]["model"],
        )

    def _fallback(
        self,
        profile: UserProfile,
        catalog: Sequence[SkillRecord],
        reason: str,
        correlation_id: Optional[str],
    ) -> DeterministicOutcome:
        return DeterministicOutcome(
            recommendations=compute_recommendations(
                profile, catalog, correlation_id=correlation_id
            ),
            fallback_reason=reason,
        )


async def compute_recommendations_with_ai(
    profile: UserProfile,
    catalog: Sequence[SkillRecord],
    llm_client: LLMClient,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    validator: Optional[SchemaValidator] = None,
    correlation_id: Optional[str] = None,
) -> list[Recommendation]:
    """AI re-ranking with total deterministic fallback.

    Same output shape as compute_recommendations(); never raises for a valid
    profile, whatever the LLM client does.
    """
    reranker = AIReranker(llm_client, validator=validator, timeout_seconds=timeout_seconds)
    outcome = await reranker.rerank(profile, catalog, correlation_id=correlation_id)
    return outcome.recommendations
