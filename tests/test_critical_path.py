"""Tests for the critical path engine."""

import pytest

from timeline_layout.models import Attachment, Dependency
from timeline_layout.services.critical_path import (
    CriticalPathError,
    CriticalPathResult,
    CycleError,
    critical_path,
    topological_order,
)


def att(id: str, start: int, end: int) -> Attachment:
    return Attachment(id=id, timeline_id="t", project_id="p", start=start, end=end)


def dep(source: str, target: str, type: str = "fs") -> Dependency:
    return Dependency(
        id=f"{source}{target}",
        from_attachment_id=source,
        to_attachment_id=target,
        type=type,
    )


@pytest.fixture
def sample_graph():
    """a(0-5) -> {b(5-9), c(2-8)}, c -> d(8-14), b -> d, d -> e(14-20)."""
    attachments = [
        att("a", 0, 5),
        att("b", 5, 9),
        att("c", 2, 8),
        att("d", 8, 14),
        att("e", 14, 20),
    ]
    deps = [dep("a", "b"), dep("a", "c"), dep("c", "d"), dep("b", "d"), dep("d", "e")]
    return attachments, deps


class TestCriticalPath:
    """Tests for critical_path()."""

    def test_finds_longest_chain_by_duration(self, sample_graph):
        """a,c,d,e (5+6+6+6=23) beats a,b,d,e (21)."""
        attachments, deps = sample_graph
        result = critical_path(attachments, deps)
        assert result.ids == ["a", "c", "d", "e"]
        assert result.total_duration == 23

    def test_empty_input(self):
        """No attachments gives an empty path."""
        result = critical_path([], [])
        assert result == CriticalPathResult(ids=[], total_duration=0)

    def test_disconnected_node_is_own_path(self):
        """Without edges the longest single attachment wins."""
        result = critical_path([att("short", 0, 3), att("long", 0, 10)], [])
        assert result.ids == ["long"]
        assert result.total_duration == 10

    def test_isolated_node_can_beat_a_chain(self):
        """A long unconnected attachment outranks a short chain."""
        attachments = [att("a", 0, 2), att("b", 2, 4), att("solo", 0, 50)]
        result = critical_path(attachments, [dep("a", "b")])
        assert result.ids == ["solo"]
        assert result.total_duration == 50

    def test_ties_go_to_first_in_topological_order(self):
        """Equal totals resolve to the node seen first."""
        result = critical_path([att("a", 0, 5), att("b", 0, 5)], [])
        assert result.ids == ["a"]

    def test_equal_predecessors_keep_first_relaxation(self):
        """Only a strictly better predecessor replaces the recorded one."""
        attachments = [att("a", 0, 1), att("b", 1, 3), att("c", 1, 3), att("d", 3, 4)]
        deps = [dep("a", "b"), dep("a", "c"), dep("b", "d"), dep("c", "d")]
        result = critical_path(attachments, deps)
        assert result.ids == ["a", "b", "d"]
        assert result.total_duration == 4

    def test_unknown_endpoints_are_ignored(self):
        """Edges to attachments outside the set do not count."""
        attachments = [att("a", 0, 5), att("b", 5, 10)]
        deps = [dep("a", "b"), dep("b", "ghost"), dep("ghost", "a")]
        result = critical_path(attachments, deps)
        assert result.ids == ["a", "b"]
        assert result.total_duration == 10

    def test_raises_on_two_node_cycle(self):
        """a -> b -> a is rejected rather than partially solved."""
        attachments = [att("a", 0, 5), att("b", 5, 10)]
        with pytest.raises(CycleError, match="cycle") as exc_info:
            critical_path(attachments, [dep("a", "b"), dep("b", "a")])
        assert sorted(exc_info.value.remaining) == ["a", "b"]

    def test_self_loop_is_a_cycle(self):
        """An attachment depending on itself is a cycle."""
        with pytest.raises(CycleError):
            critical_path([att("a", 0, 5)], [dep("a", "a")])

    def test_cycle_error_is_catchable_as_value_error(self):
        """Generic handlers still see the cycle."""
        attachments = [att("a", 0, 5), att("b", 5, 10), att("c", 10, 15)]
        deps = [dep("a", "b"), dep("b", "c"), dep("c", "b")]
        with pytest.raises(ValueError):
            critical_path(attachments, deps)
        assert issubclass(CycleError, CriticalPathError)


class TestTopologicalOrder:
    """Tests for topological_order()."""

    def test_roots_seeded_in_input_order(self):
        """Independent attachments keep their input order."""
        order, _ = topological_order([att("x", 0, 1), att("y", 0, 1), att("z", 0, 1)], [])
        assert order == ["x", "y", "z"]

    def test_edges_point_forward(self, sample_graph):
        """Every dependency source comes before its target."""
        attachments, deps = sample_graph
        order, adjacency = topological_order(attachments, deps)
        position = {node: i for i, node in enumerate(order)}
        for d in deps:
            assert position[d.from_attachment_id] < position[d.to_attachment_id]
        assert adjacency["a"] == ["b", "c"]
