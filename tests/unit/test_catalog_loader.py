"""
Unit tests for catalog_loader module.
"""

import json
from pathlib import Path

from skill_finder.utils.catalog_loader import (
    load_provider_catalog,
    load_skill_catalog,
    parse_offering_rows,
    parse_skill_rows,
)

DATA_DIR = Path(__file__).parents[2] / "data"


def _skill_row(code, **overrides):
    row = {
        "skill_code": code,
        "name": f"Skill {code}",
        "min_budget_naira": 10_000,
        "power_need": "Low",
        "internet_need": "Low",
        "personality": "Mix",
        "primary_goal": "Solve",
        "mental_model": "Analytical",
        "math_logic_intensity": "Low",
        "patience_level": "Low",
        "work_location": "Remote",
    }
    row.update(overrides)
    return row


class TestParseSkillRows:
    def test_skips_malformed_rows(self):
        # Arrange
        rows = [
            _skill_row("A"),
            _skill_row("B", power_need="Extreme"),
            _skill_row("C", min_budget_naira=90_000, max_budget_naira=10_000),
            "not a row",
            _skill_row("D"),
        ]

        # Act
        skills = parse_skill_rows(rows)

        # Assert
        assert [s.skill_code for s in skills] == ["A", "D"]

    def test_skips_duplicate_codes(self):
        rows = [_skill_row("A", name="First"), _skill_row("A", name="Second")]

        skills = parse_skill_rows(rows)

        assert len(skills) == 1
        assert skills[0].name == "First"


class TestParseOfferingRows:
    def test_providers_key_alias(self):
        rows = [
            {
                "skill_code": "GD01",
                "providers": {
                    "id": "p1",
                    "name": "Hub",
                    "provider_type": "TrainingCenter",
                    "state": "Lagos",
                    "city": "Ikeja",
                },
            }
        ]

        offerings = parse_offering_rows(rows)

        assert offerings[0].provider.id == "p1"
        assert offerings[0].provider.provider_type.value == "training_center"

    def test_skips_malformed_rows(self):
        rows = [{"skill_code": ""}, {"skill_code": "GD01", "physical_delivery_percent": 140}, {"skill_code": "GD01"}]

        offerings = parse_offering_rows(rows)

        assert len(offerings) == 1
        assert offerings[0].provider is None


class TestLoadSkillCatalog:
    def test_list_layout(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text(json.dumps([_skill_row("A"), _skill_row("B")]))

        assert [s.skill_code for s in load_skill_catalog(path)] == ["A", "B"]

    def test_wrapped_layout(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text(json.dumps({"skills": [_skill_row("A")]}))

        assert len(load_skill_catalog(path)) == 1

    def test_jsonl(self, tmp_path):
        # Arrange
        path = tmp_path / "skills.jsonl"
        lines = [json.dumps(_skill_row("A")), "", "{broken", json.dumps(_skill_row("B"))]
        path.write_text("\n".join(lines) + "\n")

        # Act
        skills = load_skill_catalog(path)

        # Assert
        assert [s.skill_code for s in skills] == ["A", "B"]

    def test_jsonl_malformed_lines_logged(self, tmp_path, mocker):
        # Arrange
        mock_logger = mocker.patch("skill_finder.utils.catalog_loader.get_logger")
        path = tmp_path / "skills.jsonl"
        path.write_bytes(b'{broken\n["not", "an", "object"]\n')

        # Act
        skills = load_skill_catalog(path)

        # Assert
        assert skills == []
        warnings = [
            c for c in mock_logger.return_value.warning.call_args_list
            if c.args[0] == "Skipping malformed catalog line"
        ]
        assert [c.kwargs["line_number"] for c in warnings] == [1, 2]

    def test_jsonl_invalid_utf8_line_skipped(self, tmp_path):
        path = tmp_path / "skills.jsonl"
        good = json.dumps(_skill_row("A")).encode("utf-8")
        path.write_bytes(b'{"skill_code": "\xff\xfe"}\n' + good + b"\n")

        assert [s.skill_code for s in load_skill_catalog(path)] == ["A"]

    def test_invalid_utf8(self, tmp_path, mocker):
        # Arrange
        mock_logger = mocker.patch("skill_finder.utils.catalog_loader.get_logger")
        path = tmp_path / "skills.json"
        path.write_bytes(b'[{"skill_code": "\xff\xfe"}]')

        # Act
        skills = load_skill_catalog(path)

        # Assert
        assert skills == []
        mock_logger.return_value.error.assert_called_once()

    def test_missing_file(self, tmp_path):
        assert load_skill_catalog(tmp_path / "missing.json") == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text("[{")

        assert load_skill_catalog(path) == []

    def test_unexpected_layout(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text(json.dumps({"skills": "GD01"}))

        assert load_skill_catalog(path) == []


class TestLoadProviderCatalog:
    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "providers.json"
        path.write_bytes(b"\xff[]")

        assert load_provider_catalog(path) == []

    def test_jsonl_invalid_utf8(self, tmp_path):
        path = tmp_path / "providers.jsonl"
        path.write_bytes(b'\xff{"skill_code": "GD01"}\n{"skill_code": "PH04"}\n')

        offerings = load_provider_catalog(path)

        assert [o.skill_code for o in offerings] == ["PH04"]

    def test_missing_file(self, tmp_path):
        assert load_provider_catalog(tmp_path / "missing.json") == []


class TestSampleData:
    def test_sample_skills(self):
        skills = load_skill_catalog(DATA_DIR / "skills.sample.json")

        assert len(skills) == 8
        assert skills[0].skill_code == "GD01"

    def test_sample_providers(self):
        offerings = load_provider_catalog(DATA_DIR / "providers.sample.json")

        assert len(offerings) == 7
        assert all(o.provider is not None for o in offerings)
