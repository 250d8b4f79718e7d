"""
Term-frequency vectors and cosine similarity.

A term vector is a plain dict mapping token -> weight, scaled so the sum of
squared weights is 1.0. Text with no tokens gives an empty dict.
"""
import math
from collections import Counter
from typing import Dict, Iterable

TermVector = Dict[str, float]


def term_frequencies(tokens: Iterable[str]) -> Counter:
    """Count occurrences of each distinct token."""
    return Counter(tokens)


def vectorize(tokens: Iterable[str]) -> TermVector:
    """
    Convert a token sequence into an L2-normalized term-frequency vector.

    Args:
        tokens: Tokens produced by ``tokenize``

    Returns:
        Mapping of token to normalized weight; empty for empty input
    """
    freq = term_frequencies(tokens)
    norm = math.sqrt(sum(count * count for count in freq.values())) or 1.0
    return {token: count / norm for token, count in freq.items()}


def vector_norm(vector: TermVector) -> float:
    """L2 norm of a term vector (1.0 for any non-empty vectorized text)."""
    return math.sqrt(sum(weight * weight for weight in vector.values()))


def cosine_similarity(a: TermVector, b: TermVector) -> float:
    """
    Cosine similarity of two unit term vectors.

    Both vectors are already normalized, so this is just the dot product.
    Only the smaller mapping is walked. Empty vectors are similar to nothing.

    Returns:
        Similarity in [0, 1]
    """
    if not a or not b:
        return 0.0

    small, large = (a, b) if len(a) < len(b) else (b, a)
    # fsum is exactly rounded, so the result does not depend on walk order
    dot = math.fsum(weight * large[token] for token, weight in small.items() if token in large)

    return min(dot, 1.0)
