"""Tests for the lane packer."""

import random

import pytest

from timeline_layout.models import Attachment
from timeline_layout.services.lane_packer import PackResult, pack_attachments


def att(id: str, start: int, end: int) -> Attachment:
    """Build an attachment on a shared test timeline."""
    return Attachment(id=id, timeline_id="t", project_id="p", start=start, end=end)


def max_overlap(items: list[Attachment]) -> int:
    """Largest number of attachments covering a single instant."""
    best = 0
    for probe in items:
        covering = sum(1 for a in items if a.start <= probe.start < a.end)
        best = max(best, covering)
    return best


class TestPackAttachments:
    """Tests for pack_attachments()."""

    def test_empty_input(self):
        """No attachments means no lanes."""
        result = pack_attachments([])
        assert isinstance(result, PackResult)
        assert result.lane_count == 0
        assert result.lane_of == {}

    def test_non_overlapping_share_single_lane(self):
        """Back-to-back attachments all fit in lane 0."""
        result = pack_attachments([att("a", 0, 10), att("b", 10, 20), att("c", 20, 30)])
        assert result.lane_count == 1
        assert set(result.lane_of.values()) == {0}

    def test_touching_is_not_overlapping(self):
        """[0,10) and [10,20) share lane 0."""
        result = pack_attachments([att("a", 0, 10), att("b", 10, 20)])
        assert result.lane_of == {"a": 0, "b": 0}

    def test_nested_chain_needs_one_lane_each(self):
        """Fully nested attachments each get their own lane."""
        result = pack_attachments([att("a", 0, 30), att("b", 5, 25), att("c", 10, 20)])
        assert result.lane_count == 3
        assert result.lane_of == {"a": 0, "b": 1, "c": 2}

    def test_reuses_lanes_greedily(self):
        """A lane is reused as soon as its last attachment has ended."""
        result = pack_attachments([
            att("a", 0, 10),
            att("b", 0, 5),
            att("c", 5, 10),
            att("d", 10, 15),
        ])
        assert result.lane_count == 2
        assert result.lane_of == {"a": 0, "b": 1, "c": 1, "d": 0}

    def test_equal_starts_keep_input_order(self):
        """Ties on start are broken by input position."""
        result = pack_attachments([att("a", 0, 5), att("b", 0, 5), att("c", 0, 5)])
        assert result.lane_of == {"a": 0, "b": 1, "c": 2}

        reordered = pack_attachments([att("c", 0, 5), att("a", 0, 5), att("b", 0, 5)])
        assert reordered.lane_of == {"c": 0, "a": 1, "b": 2}

    def test_unsorted_input(self):
        """Input order does not matter for distinct starts."""
        result = pack_attachments([att("late", 20, 30), att("early", 0, 25)])
        assert result.lane_of == {"early": 0, "late": 1}

    def test_repeated_calls_are_identical(self):
        """Packing the same list twice gives the same assignment."""
        items = [att(f"x{i}", (i * 7) % 5, (i * 7) % 5 + 3) for i in range(12)]
        assert pack_attachments(items) == pack_attachments(items)

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_lane_count_equals_max_overlap(self, seed):
        """The greedy sweep uses exactly as many lanes as the deepest overlap."""
        rng = random.Random(seed)
        items = []
        for i in range(40):
            start = rng.randint(0, 100)
            items.append(att(f"a{i}", start, start + rng.randint(1, 30)))

        result = pack_attachments(items)
        assert result.lane_count == max_overlap(items)

        # No two attachments in the same lane overlap
        by_lane: dict[int, list[Attachment]] = {}
        for item in items:
            by_lane.setdefault(result.lane_of[item.id], []).append(item)
        for lane_items in by_lane.values():
            for i, first in enumerate(lane_items):
                for second in lane_items[i + 1:]:
                    assert not first.overlaps(second)
