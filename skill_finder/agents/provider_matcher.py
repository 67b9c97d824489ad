"""Provider Matcher.

Ranks the providers offering a chosen skill by how close they are to the
user, then projects each into the locked or unlocked view.

Pipeline
--------
1. Active offerings for the skill that carry a provider record
2. Locality rank: 1 same area, 2 same city, 3 same state, 99 elsewhere
3. Drop offerings whose physical-delivery share is below 10%
4. Deduplicate by provider id, keeping the best rank
5. Sort by rank (stable) and keep the top 10
6. Project: locked views carry no contact, address or capability fields
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from skill_finder.models.profile import Locality
from skill_finder.models.provider import (
    LOCKED_MESSAGE,
    VERIFIED_STATUSES,
    LockedProvider,
    Provider,
    ProviderCapabilities,
    ProviderOffering,
    ProviderSearchResult,
    RankedProvider,
    UnlockedProvider,
)
from skill_finder.utils.deduplication import keep_best_ranked
from skill_finder.utils.logger import get_logger
from skill_finder.utils.scoring_tables import (
    MAX_PROVIDERS,
    MIN_PHYSICAL_DELIVERY_PERCENT,
    RANK_ELSEWHERE,
    RANK_SAME_AREA,
    RANK_SAME_CITY,
    RANK_SAME_STATE,
)


@dataclass(frozen=True)
class _Match:
    offering: ProviderOffering
    provider: Provider
    physical_percent: int
    rank: int


def _same_place(a: Optional[str], b: Optional[str]) -> bool:
    """Case- and whitespace-insensitive place-name equality; blanks never match."""
    if not a or not b:
        return False
    return a.strip().casefold() == b.strip().casefold()


def locality_rank(provider: Provider, locality: Locality) -> int:
    """Proximity tier of a provider relative to the user (lower is closer).

    Rank 1 needs the user to have given an area.
    """
    same_state = _same_place(provider.state, locality.state)
    same_city = same_state and _same_place(provider.city, locality.city)

    if same_city and _same_place(provider.area, locality.area):
        return RANK_SAME_AREA
    if same_city:
        return RANK_SAME_CITY
    if same_state:
        return RANK_SAME_STATE
    return RANK_ELSEWHERE


def effective_physical_percent(offering: ProviderOffering, provider: Provider) -> int:
    """Skill-specific share if set, else the provider default, else 0."""
    if offering.physical_delivery_percent is not None:
        return offering.physical_delivery_percent
    if provider.physical_delivery_percent is not None:
        return provider.physical_delivery_percent
    return 0


def project_provider(match: _Match, unlocked: bool) -> RankedProvider:
    """Build the locked or unlocked view of a ranked offering."""
    offering, provider = match.offering, match.provider
    summary = dict(
        provider_id=provider.id,
        name=provider.name,
        provider_type=provider.provider_type,
        state=provider.state,
        city=provider.city,
        area=provider.area,
        mode_supported=offering.mode_supported or provider.mode_supported,
        physical_delivery_percent=match.physical_percent,
        course_fee_min_naira=offering.course_fee_min_naira,
        course_fee_max_naira=offering.course_fee_max_naira,
        duration_weeks=offering.duration_weeks,
        rank=match.rank,
    )
    if not unlocked:
        return LockedProvider(**summary)

    return UnlockedProvider(
        **summary,
        phone=provider.phone,
        whatsapp=provider.whatsapp,
        address=provider.address,
        capabilities=ProviderCapabilities(
            has_power_backup=provider.has_power_backup,
            has_training_laptops=provider.has_training_laptops,
            has_internet=provider.has_internet,
        ),
    )


def match_providers(
    skill_code: str,
    locality: Locality,
    catalog: Sequence[ProviderOffering],
    unlocked: bool,
    correlation_id: Optional[str] = None,
) -> list[RankedProvider]:
    """Rank, filter, deduplicate and project providers for one skill.

    Args:
        skill_code: Skill the user chose
        locality: User's state/city/area
        catalog: Provider offering rows (any skill)
        unlocked: Whether contact details may be shown
        correlation_id: Optional correlation ID for logging

    Returns:
        At most 10 providers sorted by rank; empty when nothing qualifies
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="provider_match",
        component="provider_matcher",
    )
    logger.info(
        "Matching providers",
        skill_code=skill_code,
        catalog_size=len(catalog),
        unlocked=unlocked,
    )

    matches: list[_Match] = []
    for offering in catalog:
        if offering.skill_code != skill_code or not offering.is_active:
            continue
        provider = offering.provider
        if provider is None:
            logger.debug("Offering without provider skipped", skill_code=skill_code)
            continue

        physical_percent = effective_physical_percent(offering, provider)
        if physical_percent < MIN_PHYSICAL_DELIVERY_PERCENT:
            logger.debug(
                "Provider below physical-delivery threshold",
                provider_id=provider.id,
                physical_percent=physical_percent,
            )
            continue

        matches.append(
            _Match(
                offering=offering,
                provider=provider,
                physical_percent=physical_percent,
                rank=locality_rank(provider, locality),
            )
        )

    unique = keep_best_ranked(
        matches,
        identity=lambda m: m.provider.id,
        rank=lambda m: m.rank,
        correlation_id=correlation_id,
    )
    unique.sort(key=lambda m: m.rank)
    top = unique[:MAX_PROVIDERS]

    logger.info(
        "Providers ranked",
        skill_code=skill_code,
        qualified=len(matches),
        returned=len(top),
        ranks=[m.rank for m in top],
    )
    return [project_provider(m, unlocked) for m in top]


def search_providers(
    skill_code: str,
    locality: Locality,
    catalog: Sequence[ProviderOffering],
    unlocked: bool,
    correlation_id: Optional[str] = None,
) -> ProviderSearchResult:
    """match_providers() wrapped in the locked/unlocked response envelope."""
    providers = match_providers(
        skill_code, locality, catalog, unlocked, correlation_id=correlation_id
    )
    return ProviderSearchResult(
        unlocked=unlocked,
        locked=not unlocked,
        message=None if unlocked else LOCKED_MESSAGE,
        providers=providers,
    )


def supply_exists(
    skill_code: str,
    city: str,
    area: str,
    catalog: Sequence[ProviderOffering],
    correlation_id: Optional[str] = None,
) -> bool:
    """True if an active, verified provider offers the skill in this exact city and area."""
    logger = get_logger(
        correlation_id=correlation_id,
        phase="provider_match",
        component="supply_check",
    )

    for offering in catalog:
        provider = offering.provider
        if (
            provider is not None
            and offering.skill_code == skill_code
            and offering.is_active
            and provider.is_active
            and (provider.verification_status or "").lower() in VERIFIED_STATUSES
            and _same_place(provider.city, city)
            and _same_place(provider.area, area)
        ):
            logger.info(
                "Supply found",
                skill_code=skill_code,
                city=city,
                area=area,
                provider_id=provider.id,
            )
            return True

    logger.info("No supply", skill_code=skill_code, city=city, area=area)
    return False
