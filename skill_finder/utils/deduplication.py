"""Identity-based deduplication keeping the best-ranked entry.

Used by provider matching: a provider that offers the same skill through
several offering rows must appear once, at its best locality rank.
"""

from typing import Callable, Hashable, Iterable, Optional, TypeVar

from skill_finder.utils.logger import get_logger

T = TypeVar("T")


def keep_best_ranked(
    items: Iterable[T],
    identity: Callable[[T], Hashable],
    rank: Callable[[T], int],
    correlation_id: Optional[str] = None,
) -> list[T]:
    """Collapse items sharing an identity, keeping the lowest rank.

    The first occurrence wins a tie. Output order is the order in which each
    identity was first seen.

    Args:
        items: Items to deduplicate
        identity: Returns the key two duplicates share
        rank: Returns the item's rank (lower is better)
        correlation_id: Optional correlation ID for logging

    Returns:
        One item per identity
    """
    logger = get_logger(
        correlation_id=correlation_id,
        phase="provider_match",
        component="deduplication",
    )

    best: dict[Hashable, T] = {}
    original_count = 0
    for item in items:
        original_count += 1
        key = identity(item)
        existing = best.get(key)
        if existing is None:
            best[key] = item
        elif rank(item) < rank(existing):
            logger.debug(
                "Duplicate replaced by better rank",
                identity=key,
                old_rank=rank(existing),
                new_rank=rank(item),
            )
            best[key] = item

    logger.info(
        "Deduplication complete",
        original_count=original_count,
        unique_count=len(best),
        duplicates_removed=original_count - len(best),
    )
    return list(best.values())
