"""
Catalog Loader Module

Reads the skill catalog and the provider offering catalog from JSON or JSONL
exports. Malformed rows are skipped with a warning; a missing or unreadable
file yields an empty catalog so the pipelines can still answer (budget
fallback for skills, empty result for providers).

Accepted layouts:
    skills.json     -> [ {...}, ... ]  or  {"skills": [ {...}, ... ]}
    providers.json  -> [ {...}, ... ]  or  {"offerings": [ {...}, ... ]}
    *.jsonl         -> one row object per line

Example Usage:
    from skill_finder.utils.catalog_loader import load_skill_catalog

    skills = load_skill_catalog(Path("data/skills.sample.json"))
"""

import json
from pathlib import Path
from typing import Any, Iterable, Optional

import jsonlines
from pydantic import ValidationError

from skill_finder.models.provider import ProviderOffering
from skill_finder.models.skill import SkillRecord
from skill_finder.utils.logger import get_logger

SKILLS_KEY = "skills"
OFFERINGS_KEY = "offerings"


def _read_jsonl_rows(path: Path, logger: Any) -> list[Any]:
    """One row object per line; blank lines are ignored, bad lines skipped."""
    rows: list[Any] = []
    # Binary mode: jsonlines decodes each line and reports bad UTF-8 as InvalidLineError
    with open(path, "rb") as fp, jsonlines.Reader(fp) as reader:
        while True:
            try:
                rows.append(reader.read(type=dict, skip_empty=True))
            except EOFError:
                break
            except jsonlines.InvalidLineError as e:
                logger.warning(
                    "Skipping malformed catalog line",
                    path=str(path),
                    line_number=e.lineno,
                    error=str(e),
                )
    return rows


def _read_rows(path: Path, key: str, correlation_id: Optional[str] = None) -> list[Any]:
    """Load raw rows from a JSON or JSONL file, or [] if unreadable."""
    logger = get_logger(
        correlation_id=correlation_id, phase="catalog", component="catalog_loader"
    )

    if not path.exists():
        logger.warning("Catalog file not found", path=str(path))
        return []

    if path.suffix == ".jsonl":
        return _read_jsonl_rows(path, logger)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("Catalog file is not valid UTF-8 JSON", path=str(path), error=str(e))
        return []

    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        logger.error(
            "Unexpected catalog layout", path=str(path), found=type(data).__name__
        )
        return []
    return data


def parse_skill_rows(
    rows: Iterable[Any], correlation_id: Optional[str] = None
) -> list[SkillRecord]:
    """Validate raw skill rows, skipping (and logging) the malformed ones.

    Rows repeating an already-seen skill_code are skipped as well.
    """
    logger = get_logger(
        correlation_id=correlation_id, phase="catalog", component="catalog_loader"
    )

    skills: list[SkillRecord] = []
    seen: set[str] = set()
    skipped = 0
    for index, row in enumerate(rows):
        try:
            skill = SkillRecord.model_validate(row)
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "Skipping malformed skill row",
                row_index=index,
                skill_code=row.get("skill_code") if isinstance(row, dict) else None,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            )
            continue
        if skill.skill_code in seen:
            skipped += 1
            logger.warning("Skipping duplicate skill_code", skill_code=skill.skill_code)
            continue
        seen.add(skill.skill_code)
        skills.append(skill)

    logger.info("Skill catalog parsed", loaded=len(skills), skipped=skipped)
    return skills


def parse_offering_rows(
    rows: Iterable[Any], correlation_id: Optional[str] = None
) -> list[ProviderOffering]:
    """Validate raw provider offering rows, skipping the malformed ones.

    The nested provider may be given as "provider" or "providers" (the name
    used by relational exports of the join).
    """
    logger = get_logger(
        correlation_id=correlation_id, phase="catalog", component="catalog_loader"
    )

    offerings: list[ProviderOffering] = []
    skipped = 0
    for index, row in enumerate(rows):
        if isinstance(row, dict) and "provider" not in row and "providers" in row:
            row = {**row, "provider": row["providers"]}
            del row["providers"]
        try:
            offerings.append(ProviderOffering.model_validate(row))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "Skipping malformed provider offering row",
                row_index=index,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            )

    logger.info("Provider catalog parsed", loaded=len(offerings), skipped=skipped)
    return offerings


def load_skill_catalog(
    path: Path, correlation_id: Optional[str] = None
) -> list[SkillRecord]:
    """Read and validate a skill catalog file."""
    return parse_skill_rows(
        _read_rows(path, SKILLS_KEY, correlation_id), correlation_id=correlation_id
    )


def load_provider_catalog(
    path: Path, correlation_id: Optional[str] = None
) -> list[ProviderOffering]:
    """Read and validate a provider offering catalog file."""
    return parse_offering_rows(
        _read_rows(path, OFFERINGS_KEY, correlation_id), correlation_id=correlation_id
    )
