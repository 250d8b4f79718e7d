"""
Duplicate clustering.

Items are fingerprinted as term vectors, every pair is scored with cosine
similarity, and pairs at or above the threshold are merged with a
disjoint-set. Membership is transitive: A~B and B~C puts A, B and C in one
group even when A and C are not similar themselves.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from tabdedup.constants import DEFAULT_THRESHOLD, SCORE_DIGITS
from tabdedup.models import InputItem, SimilarityGroup
from tabdedup.normalize import tokenize
from tabdedup.vectorize import TermVector, cosine_similarity, vectorize

logger = logging.getLogger(__name__)

ItemLike = Union[InputItem, Mapping]


class DisjointSet:
    """Union-find over the indices 0..n-1 with path compression."""

    def __init__(self, n: int):
        self.parent = list(range(n))

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Compress the path
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of a and b. The root of a stays root."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        self.parent[root_b] = root_a
        return True

    def groups(self) -> List[List[int]]:
        """Partition indices by root, in the order roots are first seen."""
        by_root: Dict[int, List[int]] = {}
        for i in range(len(self.parent)):
            by_root.setdefault(self.find(i), []).append(i)
        return list(by_root.values())


def as_item(item: ItemLike) -> InputItem:
    """Accept either an InputItem or an ``{id, text, ...}`` mapping."""
    if isinstance(item, InputItem):
        return item
    return InputItem.from_item(item)


def build_vectors(items: Iterable[InputItem]) -> List[TermVector]:
    """Fingerprint every item's effective text."""
    return [vectorize(tokenize(item.effective_text)) for item in items]


def pairwise_similarities(items: Sequence[ItemLike]) -> Dict[Tuple[int, int], float]:
    """
    Score every unordered pair of items.

    Returns:
        Mapping of (i, j) with i < j to cosine similarity
    """
    vectors = build_vectors([as_item(it) for it in items])
    n = len(vectors)
    return {
        (i, j): cosine_similarity(vectors[i], vectors[j])
        for i in range(n)
        for j in range(i + 1, n)
    }


def average_similarity(indices: Sequence[int], vectors: Sequence[TermVector]) -> float:
    """Mean similarity over all pairs in a group, not only the merging edges."""
    total = 0.0
    count = 0
    for a in range(len(indices)):
        for b in range(a + 1, len(indices)):
            total += cosine_similarity(vectors[indices[a]], vectors[indices[b]])
            count += 1
    return total / count if count else 0.0


def cluster_duplicates(items: Sequence[ItemLike],
                       threshold: float = DEFAULT_THRESHOLD) -> List[SimilarityGroup]:
    """
    Group near-identical items.

    Args:
        items: InputItems or ``{id, text, title?, url?}`` mappings. Ids are
            assumed unique within the batch; duplicates are not checked.
        threshold: Inclusive similarity cutoff, normally in [0, 1]. Values
            outside that range are accepted: anything above 1 (or NaN)
            merges nothing, anything at or below 0 merges every pair that
            shares a token.

    Returns:
        Groups of two or more ids, highest average similarity first. Items
        whose text has no tokens never end up in a group.

    Example:
        >>> cluster_duplicates([{'id': 1, 'text': 'hello world'},
        ...                     {'id': 2, 'text': 'hello world'}], 0.99)
        [SimilarityGroup(ids=['1', '2'], avg_score=1.0)]
    """
    if not items or len(items) < 2:
        return []

    batch = [as_item(it) for it in items]
    vectors = build_vectors(batch)
    n = len(vectors)
    dsu = DisjointSet(n)

    merges = 0
    for i in range(n):
        for j in range(i + 1, n):
            score = cosine_similarity(vectors[i], vectors[j])
            # score > 0 keeps token-less items out even at threshold <= 0
            if score > 0 and score >= threshold and dsu.union(i, j):
                merges += 1

    groups = []
    for indices in dsu.groups():
        if len(indices) < 2:
            continue
        groups.append(SimilarityGroup(
            ids=[batch[i].id for i in indices],
            avg_score=round(average_similarity(indices, vectors), SCORE_DIGITS),
        ))

    # sorted() is stable, so ties keep discovery order
    groups = sorted(groups, key=lambda g: g.avg_score, reverse=True)

    logger.debug(f"Clustered {n} items at threshold {threshold}: "
                 f"{merges} merges, {len(groups)} duplicate groups")
    return groups
