"""
Tests for tabdedup/dedup.py duplicate tab detection and closure planning.
"""
import pytest

from tabdedup.config import get_config
from tabdedup.dedup import (
    find_duplicate_tabs,
    get_duplicate_stats,
    groups_as_dicts,
    items_by_id,
    plan_closure,
    plan_closures,
)
from tabdedup.models import InputItem, SimilarityGroup


class TestFindDuplicateTabs:
    """Test finding duplicate tabs from records."""

    def test_snapshots(self, sample_snapshots):
        groups = find_duplicate_tabs(sample_snapshots, threshold=0.9)

        assert len(groups) == 1
        assert groups[0].ids == ["101", "102"]
        assert groups[0].avg_score == 1.0

    def test_uses_configured_threshold(self, sample_items):
        get_config().duplicate_threshold = 0.95
        assert find_duplicate_tabs(sample_items) == []

        get_config().duplicate_threshold = 0.7
        assert [g.ids for g in find_duplicate_tabs(sample_items)] == [["1", "2"]]

    def test_accepts_input_items(self):
        items = [InputItem(id="x", text="same words"), InputItem(id="y", text="same words")]
        assert find_duplicate_tabs(items, threshold=0.9)[0].ids == ["x", "y"]

    def test_mixed_items_and_records(self):
        records = [
            InputItem(id="x", text="same words"),
            {"id": "y", "text": "same words"},
            {"tabId": 5, "pageData": {"content": {"text": "same words"}}},
        ]
        assert find_duplicate_tabs(records, threshold=0.9)[0].ids == ["x", "y", "5"]

    def test_internal_input_items_are_skipped(self):
        items = [
            InputItem(id="1", url="chrome://newtab"),
            InputItem(id="2", url="chrome://newtab"),
        ]
        assert find_duplicate_tabs(items, threshold=0.9) == []
        assert find_duplicate_tabs(items, threshold=0.9, skip_internal=False)[0].ids == ["1", "2"]

    def test_internal_pages_can_be_kept(self):
        records = [
            {"id": "1", "url": "chrome://newtab"},
            {"id": "2", "url": "chrome://newtab"},
        ]
        assert find_duplicate_tabs(records, threshold=0.9) == []
        assert len(find_duplicate_tabs(records, threshold=0.9, skip_internal=False)) == 1

    def test_no_tabs(self):
        assert find_duplicate_tabs([], threshold=0.5) == []


class TestPlanClosure:
    """Test keep/close planning."""

    GROUP = SimilarityGroup(ids=["1", "2", "3"], avg_score=0.91)

    def test_keep_first_by_default(self):
        plan = plan_closure(self.GROUP)
        assert plan.keep == "1"
        assert plan.close == ["2", "3"]
        assert plan.avg_score == 0.91

    def test_keep_last(self):
        plan = plan_closure(self.GROUP, strategy="last")
        assert plan.keep == "3"
        assert plan.close == ["1", "2"]

    def test_explicit_keep(self):
        plan = plan_closure(self.GROUP, keep=2)
        assert plan.keep == "2"
        assert plan.close == ["1", "3"]

    def test_keep_not_in_group(self):
        with pytest.raises(ValueError, match="not in group"):
            plan_closure(self.GROUP, keep="9")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown keep strategy"):
            plan_closure(self.GROUP, strategy="most_visited")

    def test_plan_closures_uses_chosen_ids(self):
        groups = [
            SimilarityGroup(ids=["a", "b"], avg_score=1.0),
            SimilarityGroup(ids=["c", "d", "e"], avg_score=0.9),
        ]
        plans = plan_closures(groups, keep_ids=["e"])

        assert [(p.keep, p.close) for p in plans] == [("a", ["b"]), ("e", ["c", "d"])]

    def test_plan_closures_without_choices(self):
        groups = [SimilarityGroup(ids=["a", "b"], avg_score=1.0)]
        assert plan_closures(groups, strategy="last")[0].keep == "b"


class TestDuplicateStats:
    """Test duplicate statistics."""

    def test_get_duplicate_stats(self):
        items = [InputItem(id=str(i)) for i in range(10)]
        groups = [
            SimilarityGroup(ids=["0", "1", "2"], avg_score=0.95),
            SimilarityGroup(ids=["5", "6"], avg_score=0.88),
        ]
        stats = get_duplicate_stats(items, groups)

        assert stats["total_tabs"] == 10
        assert stats["duplicate_groups"] == 2
        assert stats["total_duplicates"] == 5
        assert stats["tabs_to_close"] == 3
        assert stats["largest_group"] == 3
        assert stats["duplicate_percentage"] == 50.0
        assert stats["tightest_groups"][0] == (["0", "1", "2"], 0.95)

    def test_stats_empty(self):
        stats = get_duplicate_stats([], [])
        assert stats["duplicate_percentage"] == 0
        assert stats["largest_group"] == 0


class TestHelpers:

    def test_groups_as_dicts(self):
        groups = [SimilarityGroup(ids=["a", "b"], avg_score=0.9)]
        assert groups_as_dicts(groups) == [{"ids": ["a", "b"], "avgScore": 0.9}]

    def test_items_by_id(self):
        items = [InputItem(id="a"), InputItem(id="b")]
        assert items_by_id(items)["b"] is items[1]
