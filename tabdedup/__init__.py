"""
tabdedup - near-duplicate browser tab detection

Fingerprints each tab's text as a term-frequency vector, scores every pair
with cosine similarity and merges pairs above a threshold with union-find.
Each call is a pure batch computation; nothing is kept between calls.

Example Usage:
    >>> from tabdedup import cluster_duplicates
    >>> cluster_duplicates([
    ...     {"id": "1", "text": "The quick brown fox"},
    ...     {"id": "2", "text": "The quick brown fox jumps"},
    ... ], threshold=0.7)
    [SimilarityGroup(ids=['1', '2'], avg_score=0.894)]
"""

__version__ = "0.3.0"

# Clustering engine
from tabdedup.cluster import cluster_duplicates, pairwise_similarities, DisjointSet
from tabdedup.normalize import clean_text, tokenize
from tabdedup.vectorize import vectorize, cosine_similarity

# Models
from tabdedup.models import InputItem, SimilarityGroup, ClosurePlan

# Configuration
from tabdedup.config import TabDedupConfig, get_config, init_config

# Tabs and planning
from tabdedup.tabs import load_tabs, load_html_pages, TabRecordError
from tabdedup.dedup import find_duplicate_tabs, plan_closure, plan_closures, get_duplicate_stats

__all__ = [
    # Engine
    "cluster_duplicates",
    "pairwise_similarities",
    "DisjointSet",
    "clean_text",
    "tokenize",
    "vectorize",
    "cosine_similarity",
    # Models
    "InputItem",
    "SimilarityGroup",
    "ClosurePlan",
    # Config
    "TabDedupConfig",
    "get_config",
    "init_config",
    # Tabs
    "load_tabs",
    "load_html_pages",
    "TabRecordError",
    "find_duplicate_tabs",
    "plan_closure",
    "plan_closures",
    "get_duplicate_stats",
]
