"""
Skill Finder CLI

Usage:
    skill-finder recommend --profile answers.json --skills data/skills.sample.json [--ai] [--full --unlocked]
    skill-finder providers --skill GD01 --state Lagos --city Ikeja [--area Allen] \
        --providers data/providers.sample.json [--unlocked]
    skill-finder supply --skill GD01 --city Ikeja --area Allen --providers data/providers.sample.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from skill_finder.coordinator import RecommendationCoordinator
from skill_finder.models.profile import Locality, ProfileValidationError
from skill_finder.models.provider import ProviderSearchResult, UnlockedProvider
from skill_finder.models.recommendation import RecommendationResult
from skill_finder.utils.catalog_loader import load_provider_catalog, load_skill_catalog

console = Console()


def _naira(amount: Optional[int]) -> str:
    return "-" if amount is None else f"₦{amount:,}"


def render_recommendations(result: RecommendationResult) -> None:
    source = "AI re-ranked" if result.ai_sourced else "rules engine"
    table = Table(title=f"Recommendations ({result.mode}, {source})")
    table.add_column("#", justify="right")
    table.add_column("Skill")
    table.add_column("Score", justify="right")

    if result.mode == "full":
        table.add_column("Reasons")
        table.add_column("Badges / warnings")
        for i, rec in enumerate(result.recommendations or [], start=1):
            table.add_row(
                str(i),
                f"{rec.skill_name} ({rec.skill_code})",
                str(rec.score),
                "\n".join(rec.reasons),
                "\n".join(rec.badges + rec.warnings),
            )
    else:
        table.add_column("Teaser")
        for i, item in enumerate(result.preview or [], start=1):
            table.add_row(
                str(i),
                f"{item.skill_name} ({item.skill_code})",
                str(item.score),
                "\n".join(item.teaser),
            )

    console.print(table)
    console.print(f"Session: [bold]{result.session_id}[/bold]")
    if result.mode == "preview":
        console.print("[yellow]Unlock to see every recommendation in full.[/yellow]")


def render_providers(result: ProviderSearchResult) -> None:
    table = Table(title="Training providers")
    table.add_column("Rank", justify="right")
    table.add_column("Provider")
    table.add_column("Location")
    table.add_column("Mode")
    table.add_column("Physical %", justify="right")
    table.add_column("Fees")
    table.add_column("Weeks", justify="right")
    if result.unlocked:
        table.add_column("Contact")

    for p in result.providers:
        location = ", ".join(part for part in (p.area, p.city, p.state) if part)
        row = [
            str(p.rank),
            f"{p.name} ({p.provider_type.value})",
            location,
            p.mode_supported.value if p.mode_supported else "-",
            str(p.physical_delivery_percent),
            f"{_naira(p.course_fee_min_naira)} - {_naira(p.course_fee_max_naira)}",
            "-" if p.duration_weeks is None else str(p.duration_weeks),
        ]
        if isinstance(p, UnlockedProvider):
            row.append("\n".join(x for x in (p.phone, p.whatsapp, p.address) if x))
        table.add_row(*row)

    console.print(table)
    if result.message:
        console.print(f"[yellow]{result.message}[/yellow]")


def cmd_recommend(args: argparse.Namespace) -> int:
    coordinator = RecommendationCoordinator(config_path=args.config)
    with open(args.profile, "r", encoding="utf-8") as f:
        profile_data = json.load(f)
    catalog = load_skill_catalog(Path(args.skills))

    try:
        result = asyncio.run(
            coordinator.recommend(
                profile_data,
                catalog,
                unlocked=args.unlocked,
                requested_mode="full" if args.full else "preview",
                use_ai=True if args.ai else None,
            )
        )
    except ProfileValidationError as e:
        console.print(f"[red]Invalid answer for '{e.field}':[/red] {e.message}")
        return 2

    if args.json:
        console.print_json(result.model_dump_json())
    else:
        render_recommendations(result)
    return 0


def cmd_providers(args: argparse.Namespace) -> int:
    coordinator = RecommendationCoordinator(config_path=args.config)
    catalog = load_provider_catalog(Path(args.providers))
    try:
        locality = Locality(state=args.state, city=args.city, area=args.area)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            console.print(f"[red]Invalid value for '--{field}':[/red] {err['msg']}")
        return 2

    result = coordinator.find_providers(args.skill, locality, catalog, unlocked=args.unlocked)
    if args.json:
        console.print_json(result.model_dump_json())
    else:
        render_providers(result)
    return 0


def cmd_supply(args: argparse.Namespace) -> int:
    coordinator = RecommendationCoordinator(config_path=args.config)
    catalog = load_provider_catalog(Path(args.providers))

    exists = coordinator.check_supply(args.skill, args.city, args.area, catalog)
    if exists:
        console.print(f"[green]SUPPLY_EXISTS[/green] {args.skill} in {args.area}, {args.city}")
    else:
        console.print(f"[yellow]NO_SUPPLY[/yellow] {args.skill} in {args.area}, {args.city}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skill-finder", description="Skill recommendations and provider matching"
    )
    parser.add_argument(
        "--config", default=None, help="Path to system_params.json (defaults built in)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rec_cmd = subparsers.add_parser("recommend", help="Recommend skills for a profile")
    rec_cmd.add_argument("--profile", required=True, help="Path to assessment answers JSON")
    rec_cmd.add_argument("--skills", required=True, help="Path to skill catalog (JSON/JSONL)")
    rec_cmd.add_argument("--ai", action="store_true", help="Use AI re-ranking")
    rec_cmd.add_argument("--full", action="store_true", help="Request full results")
    rec_cmd.add_argument("--unlocked", action="store_true", help="Session has paid access")
    rec_cmd.add_argument("--json", action="store_true", help="Print raw JSON")
    rec_cmd.set_defaults(func=cmd_recommend)

    prov_cmd = subparsers.add_parser("providers", help="Find training providers for a skill")
    prov_cmd.add_argument("--skill", required=True, help="Skill code")
    prov_cmd.add_argument("--state", required=True)
    prov_cmd.add_argument("--city", required=True)
    prov_cmd.add_argument("--area", default=None)
    prov_cmd.add_argument("--providers", required=True, help="Path to provider catalog")
    prov_cmd.add_argument("--unlocked", action="store_true", help="Show contact details")
    prov_cmd.add_argument("--json", action="store_true", help="Print raw JSON")
    prov_cmd.set_defaults(func=cmd_providers)

    supply_cmd = subparsers.add_parser("supply", help="Check local provider supply")
    supply_cmd.add_argument("--skill", required=True, help="Skill code")
    supply_cmd.add_argument("--city", required=True)
    supply_cmd.add_argument("--area", required=True)
    supply_cmd.add_argument("--providers", required=True, help="Path to provider catalog")
    supply_cmd.set_defaults(func=cmd_supply)

    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
