"""
Duplicate tab detection built on the clustering engine.

Finds groups of near-identical tabs, plans which tab of each group to keep,
and summarises how many tabs could be closed. Nothing here closes tabs; the
plans are for the caller to act on.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from tabdedup.cluster import cluster_duplicates
from tabdedup.config import get_config
from tabdedup.constants import DEFAULT_TOP_GROUPS
from tabdedup.models import ClosurePlan, InputItem, SimilarityGroup
from tabdedup.tabs import items_from_records

logger = logging.getLogger(__name__)

KEEP_STRATEGIES = ('first', 'last')


def find_duplicate_tabs(records: Sequence[Any],
                        threshold: Optional[float] = None,
                        skip_internal: Optional[bool] = None) -> List[SimilarityGroup]:
    """
    Find groups of duplicate tabs.

    Args:
        records: Tab records in item or snapshot shape, or InputItems
        threshold: Similarity cutoff (default: configured duplicate_threshold)
        skip_internal: Drop internal browser pages (default: configured)

    Returns:
        Duplicate groups, most similar first
    """
    config = get_config()
    if threshold is None:
        threshold = config.duplicate_threshold
    if skip_internal is None:
        skip_internal = config.skip_internal_pages

    items = items_from_records(records, skip_internal=skip_internal)

    groups = cluster_duplicates(items, threshold)
    logger.info(f"Found {len(groups)} duplicate groups among {len(items)} tabs")
    return groups


def plan_closure(group: SimilarityGroup,
                 keep: Optional[str] = None,
                 strategy: str = 'first') -> ClosurePlan:
    """
    Decide which tab of a group to keep.

    Args:
        group: Duplicate group
        keep: Explicit id to keep; overrides strategy
        strategy: 'first' or 'last' tab in discovery order

    Returns:
        Plan keeping one tab and closing the others

    Raises:
        ValueError: keep is not in the group, or unknown strategy
    """
    if keep is not None:
        keep = str(keep)
        if keep not in group.ids:
            raise ValueError(f"Tab {keep} is not in group {group.ids}")
    elif strategy == 'first':
        keep = group.ids[0]
    elif strategy == 'last':
        keep = group.ids[-1]
    else:
        raise ValueError(f"Unknown keep strategy: {strategy}")

    close = [tab_id for tab_id in group.ids if tab_id != keep]
    return ClosurePlan(keep=keep, close=close, avg_score=group.avg_score)


def plan_closures(groups: Iterable[SimilarityGroup],
                  keep_ids: Optional[Iterable[str]] = None,
                  strategy: str = 'first') -> List[ClosurePlan]:
    """
    Plan every group at once.

    Args:
        groups: Duplicate groups
        keep_ids: Ids the user chose to keep; a group containing one of them
            keeps it, other groups fall back to the strategy
        strategy: 'first' or 'last'
    """
    wanted = {str(k) for k in keep_ids or ()}
    plans = []
    for group in groups:
        chosen = next((tab_id for tab_id in group.ids if tab_id in wanted), None)
        plans.append(plan_closure(group, keep=chosen, strategy=strategy))
    return plans


def get_duplicate_stats(items: Sequence[Any], groups: Sequence[SimilarityGroup]) -> Dict:
    """
    Get statistics about duplicates among tabs.

    Args:
        items: The tabs that were compared
        groups: Groups returned by cluster_duplicates for those tabs

    Returns:
        Dictionary with duplicate statistics
    """
    total_duplicates = sum(len(g) for g in groups)
    tightest = [(list(g.ids), g.avg_score) for g in groups[:DEFAULT_TOP_GROUPS]]

    return {
        'total_tabs': len(items),
        'duplicate_groups': len(groups),
        'total_duplicates': total_duplicates,
        'tabs_to_close': total_duplicates - len(groups),
        'largest_group': max((len(g) for g in groups), default=0),
        'tightest_groups': tightest,
        'duplicate_percentage': (total_duplicates / len(items) * 100) if items else 0,
    }


def groups_as_dicts(groups: Iterable[SimilarityGroup]) -> List[Dict]:
    return [g.to_dict() for g in groups]


def items_by_id(items: Iterable[InputItem]) -> Mapping[str, InputItem]:
    """Index items by id for display."""
    return {item.id: item for item in items}
