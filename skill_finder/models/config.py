"""
Configuration Models

Pydantic models for system configuration validation.

Scoring constants (budget ceilings, penalties, weights, caps) are part of the
recommendation contract and are deliberately not configurable here; see
skill_finder.utils.scoring_tables.
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path("config/system_params.json")
DEFAULT_ENV_FILE = Path(".env")


class LLMConfig(BaseModel):
    """Language model used for optional AI re-ranking."""

    model: str = Field(default="claude-sonnet-4-5", min_length=1)
    timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=120,
        description="Budget for the single re-ranking call; no retries are made",
    )
    max_turns: int = Field(default=1, ge=1, le=3)


class RecommendationConfig(BaseModel):
    """Recommendation delivery settings."""

    ai_reranking_enabled: bool = Field(default=False)
    preview_size: int = Field(default=3, gt=0, le=5)
    preview_teaser_reasons: int = Field(default=2, gt=0, le=6)


class SystemParams(BaseModel):
    """System parameters configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "SystemParams":
        """Load system parameters from config file.

        SKILL_FINDER_LLM_MODEL and SKILL_FINDER_LOG_LEVEL, from the environment
        or from .env in the working directory, override file values.

        Args:
            config_path: Path to system_params.json (defaults to config/system_params.json)

        Returns:
            SystemParams: Validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config validation fails
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                f"Copy {config_path.stem}.example.json to {config_path.name}"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: dict, env_file: Path = DEFAULT_ENV_FILE) -> "SystemParams":
        """Build parameters from a decoded JSON document plus env overrides.

        Variables already set in the process environment win over .env.
        """
        if env_file.exists():
            load_dotenv(env_file)

        config_data = dict(config_data)

        model_override = os.getenv("SKILL_FINDER_LLM_MODEL")
        if model_override:
            config_data["llm"] = {**config_data.get("llm", {}), "model": model_override}

        level_override = os.getenv("SKILL_FINDER_LOG_LEVEL")
        if level_override:
            config_data["log_level"] = level_override

        return cls(**config_data)
