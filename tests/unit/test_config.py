"""
Unit tests for system configuration models.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from skill_finder.models.config import SystemParams

EXAMPLE_CONFIG = Path(__file__).parents[2] / "config" / "system_params.example.json"


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    monkeypatch.delenv("SKILL_FINDER_LLM_MODEL", raising=False)
    monkeypatch.delenv("SKILL_FINDER_LOG_LEVEL", raising=False)


class TestDefaults:
    def test_empty_document_uses_defaults(self):
        params = SystemParams.from_dict({})

        assert params.llm.timeout_seconds == 20.0
        assert params.llm.max_turns == 1
        assert params.recommendation.ai_reranking_enabled is False
        assert params.recommendation.preview_size == 3
        assert params.recommendation.preview_teaser_reasons == 2
        assert params.log_level == "INFO"
        assert params.log_file is None


class TestLoad:
    def test_load_example_file(self, mocker):
        mocker.patch("skill_finder.models.config.load_dotenv")

        params = SystemParams.load(EXAMPLE_CONFIG)

        assert params.llm.model == "claude-sonnet-4-5"

    def test_missing_file(self, tmp_path, mocker):
        mocker.patch("skill_finder.models.config.load_dotenv")

        with pytest.raises(FileNotFoundError, match="Copy system_params.example.json"):
            SystemParams.load(tmp_path / "system_params.json")

    def test_env_overrides(self, tmp_path, monkeypatch, mocker):
        # Arrange
        mocker.patch("skill_finder.models.config.load_dotenv")
        path = tmp_path / "system_params.json"
        path.write_text(json.dumps({"llm": {"model": "from-file", "max_turns": 2}}))
        monkeypatch.setenv("SKILL_FINDER_LLM_MODEL", "from-env")
        monkeypatch.setenv("SKILL_FINDER_LOG_LEVEL", "debug")

        # Act
        params = SystemParams.load(path)

        # Assert
        assert params.llm.model == "from-env"
        assert params.llm.max_turns == 2
        assert params.log_level == "DEBUG"

    def test_dotenv_file_overrides(self, tmp_path, mocker):
        # Arrange
        mocker.patch.dict("os.environ")
        env_file = tmp_path / ".env"
        env_file.write_text("SKILL_FINDER_LLM_MODEL=dotenv-model\nSKILL_FINDER_LOG_LEVEL=warning\n")

        # Act
        params = SystemParams.from_dict({"llm": {"model": "from-file"}}, env_file=env_file)

        # Assert
        assert params.llm.model == "dotenv-model"
        assert params.log_level == "WARNING"

    def test_process_environment_wins_over_dotenv(self, tmp_path, mocker, monkeypatch):
        mocker.patch.dict("os.environ")
        monkeypatch.setenv("SKILL_FINDER_LLM_MODEL", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("SKILL_FINDER_LLM_MODEL=dotenv-model\n")

        params = SystemParams.from_dict({}, env_file=env_file)

        assert params.llm.model == "from-env"

    def test_missing_dotenv_file_ignored(self, tmp_path):
        params = SystemParams.from_dict({}, env_file=tmp_path / ".env")

        assert params.llm.model == "claude-sonnet-4-5"


class TestValidation:
    @pytest.mark.parametrize(
        "document",
        [
            {"log_level": "VERBOSE"},
            {"llm": {"timeout_seconds": 0}},
            {"llm": {"max_turns": 4}},
            {"recommendation": {"preview_size": 6}},
        ],
    )
    def test_invalid_values_rejected(self, document):
        with pytest.raises(ValidationError):
            SystemParams.from_dict(document)
