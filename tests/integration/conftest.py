"""
Integration Test Configuration

Fixtures backed by the sample catalogs in data/. When running in CI
(CI=true), slow tests are automatically skipped.
"""

import json
import os
from pathlib import Path

import pytest

from skill_finder.utils.catalog_loader import load_provider_catalog, load_skill_catalog

DATA_DIR = Path(__file__).parents[2] / "data"


@pytest.fixture
def is_ci_environment() -> bool:
    """True if the CI environment variable is set to 'true'."""
    return os.getenv("CI", "").lower() == "true"


@pytest.fixture(autouse=True)
def skip_slow_tests_in_ci(request, is_ci_environment):
    """Skip tests marked @pytest.mark.slow when running in CI."""
    if is_ci_environment and request.node.get_closest_marker("slow"):
        pytest.skip("Skipping slow test in CI environment")


@pytest.fixture
def sample_profile_data() -> dict:
    with open(DATA_DIR / "profile.sample.json", "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def sample_skills():
    return load_skill_catalog(DATA_DIR / "skills.sample.json")


@pytest.fixture
def sample_offerings():
    return load_provider_catalog(DATA_DIR / "providers.sample.json")
