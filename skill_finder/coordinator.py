"""
Recommendation Coordinator Module

Wires configuration, logging, the LLM client and the pipelines together for
the CLI (or any other caller that holds the catalogs and the unlock state).
Persistence, payments and messaging are left to the caller.
"""

import time
import uuid
from pathlib import Path
from typing import Any, Optional, Sequence

from skill_finder.agents.ai_reranker import AIReranker, AISourcedOutcome
from skill_finder.agents.provider_matcher import search_providers, supply_exists
from skill_finder.agents.recommendation_pipeline import (
    build_preview,
    compute_recommendations,
    select_result_mode,
)
from skill_finder.models.config import SystemParams
from skill_finder.models.profile import Locality, parse_profile
from skill_finder.models.provider import ProviderOffering, ProviderSearchResult
from skill_finder.models.recommendation import RecommendationResult, ResultMode
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.llm_helpers import ClaudeLLMClient, LLMClient
from skill_finder.utils.logger import configure_logging, get_logger
from skill_finder.utils.validator import SYSTEM_PARAMS_SCHEMA, SchemaValidator


def new_session_id() -> str:
    """Session identifier in the form s2e_<32 hex chars>_<epoch millis>."""
    return f"s2e_{uuid.uuid4().hex}_{int(time.time() * 1000)}"


class RecommendationCoordinator:
    """
    Entry point for recommendation and provider requests.

    Loads and validates configuration once, configures logging, and builds
    the LLM client on first use when AI re-ranking is requested.
    """

    def __init__(
        self,
        config_path: Optional[str | Path] = None,
        correlation_id: Optional[str] = None,
        llm_client: Optional[LLMClient] = None,
        validator: Optional[SchemaValidator] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            config_path: Path to system parameters JSON file (defaults built in if None)
            correlation_id: Correlation ID for logging (auto-generated if None)
            llm_client: LLM client override (default: ClaudeLLMClient from config)
            validator: SchemaValidator for config and LLM responses
        """
        self.validator = validator or SchemaValidator()
        self.config_path = Path(config_path) if config_path is not None else None
        self.system_params = self._load_config()

        configure_logging(
            log_file=self.system_params.log_file,
            log_level=self.system_params.log_level,
        )

        if correlation_id is None:
            correlation_id = str(uuid.uuid4())
        self.correlation_id = correlation_id

        self._llm_client = llm_client
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="coordinator",
            component="recommendation_coordinator",
        )
        self.logger.info(
            "Coordinator initialized",
            config_path=str(self.config_path) if self.config_path else None,
            ai_reranking_enabled=self.system_params.recommendation.ai_reranking_enabled,
            llm_model=self.system_params.llm.model,
        )

    def _load_config(self) -> SystemParams:
        """
        Load and validate system parameters.

        Returns:
            SystemParams: Validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            SchemaValidationError: If config fails the JSON schema
            ValueError: If config fails model validation
        """
        if self.config_path is None:
            return SystemParams.from_dict({})

        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {self.config_path}. "
                f"Copy {self.config_path.stem}.example.json to {self.config_path.name}"
            )

        config_data = self.validator.validate_file(self.config_path, SYSTEM_PARAMS_SCHEMA)
        return SystemParams.from_dict(config_data)

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = ClaudeLLMClient(
                model=self.system_params.llm.model,
                max_turns=self.system_params.llm.max_turns,
            )
        return self._llm_client

    async def recommend(
        self,
        profile_data: dict[str, Any],
        catalog: Sequence[SkillRecord],
        unlocked: bool = False,
        requested_mode: ResultMode = "preview",
        use_ai: Optional[bool] = None,
    ) -> RecommendationResult:
        """
        Validate answers, compute recommendations and shape the response.

        Args:
            profile_data: Raw assessment answers
            catalog: Skill catalog
            unlocked: Whether the session has paid access
            requested_mode: "preview" or "full"
            use_ai: Force AI re-ranking on/off (default: from config)

        Returns:
            RecommendationResult with either full recommendations or a preview

        Raises:
            ProfileValidationError: If the answers are malformed
        """
        profile = parse_profile(profile_data)
        session_id = profile.session_id or new_session_id()

        if use_ai is None:
            use_ai = self.system_params.recommendation.ai_reranking_enabled

        ai_sourced = False
        if use_ai:
            reranker = AIReranker(
                self.llm_client,
                validator=self.validator,
                timeout_seconds=self.system_params.llm.timeout_seconds,
            )
            outcome = await reranker.rerank(profile, catalog, correlation_id=session_id)
            recommendations = outcome.recommendations
            ai_sourced = isinstance(outcome, AISourcedOutcome)
        else:
            recommendations = compute_recommendations(
                profile, catalog, correlation_id=session_id
            )

        mode = select_result_mode(unlocked, requested_mode)
        self.logger.info(
            "Recommendations ready",
            session_id=session_id,
            mode=mode,
            ai_sourced=ai_sourced,
            count=len(recommendations),
        )

        if mode == "full":
            return RecommendationResult(
                session_id=session_id,
                unlocked=unlocked,
                mode=mode,
                ai_sourced=ai_sourced,
                recommendations=recommendations,
            )

        settings = self.system_params.recommendation
        return RecommendationResult(
            session_id=session_id,
            unlocked=unlocked,
            mode=mode,
            ai_sourced=ai_sourced,
            preview=build_preview(
                recommendations,
                size=settings.preview_size,
                teaser_reasons=settings.preview_teaser_reasons,
            ),
        )

    def find_providers(
        self,
        skill_code: str,
        locality: Locality,
        catalog: Sequence[ProviderOffering],
        unlocked: bool = False,
    ) -> ProviderSearchResult:
        """Ranked providers for a skill in the locked or unlocked envelope."""
        return search_providers(
            skill_code, locality, catalog, unlocked, correlation_id=self.correlation_id
        )

    def check_supply(
        self,
        skill_code: str,
        city: str,
        area: str,
        catalog: Sequence[ProviderOffering],
    ) -> bool:
        return supply_exists(
            skill_code, city, area, catalog, correlation_id=self.correlation_id
        )
