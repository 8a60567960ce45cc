"""Tests for the dependency validator."""

import pytest

from timeline_layout.models import Attachment, Dependency
from timeline_layout.services.dependency_validator import (
    RejectReason,
    ValidationResult,
    validate_dependency,
)


@pytest.fixture
def attachments_by_id():
    """Three attachments on timeline t1 and one on t2."""
    items = [
        Attachment(id="a", timeline_id="t1", project_id="p1", start=0, end=10),
        Attachment(id="b", timeline_id="t1", project_id="p2", start=10, end=20),
        Attachment(id="c", timeline_id="t1", project_id="p3", start=5, end=30),
        Attachment(id="other", timeline_id="t2", project_id="p4", start=40, end=50),
    ]
    return {a.id: a for a in items}


def dep(source: str, target: str, type=None) -> Dependency:
    return Dependency(from_attachment_id=source, to_attachment_id=target, type=type)


class TestValidateDependency:
    """Tests for validate_dependency()."""

    def test_accepts_valid_forward_dependency(self, attachments_by_id):
        """A same-timeline edge in time order is accepted."""
        result = validate_dependency(dep("a", "b"), attachments_by_id)
        assert result.ok
        assert result.reason is None
        assert result
        assert result.message == ""

    @pytest.mark.parametrize("source,target", [("", "b"), ("a", ""), ("", "")])
    def test_missing_endpoints(self, attachments_by_id, source, target):
        """Both ids must be filled in."""
        result = validate_dependency(dep(source, target), attachments_by_id)
        assert result == ValidationResult(ok=False, reason=RejectReason.MISSING_ENDPOINTS)

    @pytest.mark.parametrize("node", ["a", "b", "other", "not-on-any-timeline"])
    def test_self_reference_always_rejected(self, attachments_by_id, node):
        """from == to is rejected as 'self' for every id."""
        result = validate_dependency(dep(node, node), attachments_by_id)
        assert not result.ok
        assert result.reason == RejectReason.SELF
        assert result.reason.value == "self"

    def test_missing_attachment(self, attachments_by_id):
        """Unknown ids are rejected."""
        result = validate_dependency(dep("a", "ghost"), attachments_by_id)
        assert result.reason == RejectReason.MISSING_ATTACHMENT

    def test_different_timeline(self, attachments_by_id):
        """Endpoints must share a timeline."""
        result = validate_dependency(dep("a", "other"), attachments_by_id)
        assert result.reason == RejectReason.DIFFERENT_TIMELINE

    def test_finish_to_start_needs_target_after_source_start(self, attachments_by_id):
        """An fs target may not start before its source."""
        result = validate_dependency(dep("b", "a"), attachments_by_id)
        assert result.reason == RejectReason.TEMPORAL_ORDER
        assert "starts before" in result.message

    def test_explicit_fs_type_is_checked(self, attachments_by_id):
        """An explicit 'fs' behaves like the default."""
        result = validate_dependency(dep("b", "a", type="fs"), attachments_by_id)
        assert result.reason == RejectReason.TEMPORAL_ORDER

    @pytest.mark.parametrize("type", ["ss", "ff", "sf"])
    def test_other_types_skip_temporal_check(self, attachments_by_id, type):
        """Only finish-to-start constrains the start order."""
        result = validate_dependency(dep("b", "a", type=type), attachments_by_id)
        assert result.ok

    def test_overlapping_target_is_allowed(self, attachments_by_id):
        """The check compares starts only."""
        result = validate_dependency(dep("a", "c"), attachments_by_id)
        assert result.ok

    def test_without_existing_edges_no_cycle_is_seen(self, attachments_by_id):
        """The candidate alone can never close a cycle."""
        result = validate_dependency(dep("a", "c", type="ss"), attachments_by_id)
        assert result.ok

    def test_cycle_through_existing_edges(self, attachments_by_id):
        """Existing c -> a plus candidate a -> c is a cycle."""
        existing = [dep("c", "b", type="ss"), dep("b", "a", type="ss")]
        result = validate_dependency(dep("a", "c"), attachments_by_id, existing)
        assert result.reason == RejectReason.CYCLE
        assert "cycle" in result.message

    def test_unrelated_existing_edges(self, attachments_by_id):
        """Existing edges that do not lead back are fine."""
        existing = [dep("a", "b"), dep("c", "b")]
        result = validate_dependency(dep("a", "c"), attachments_by_id, existing)
        assert result.ok

    def test_checks_run_in_order(self, attachments_by_id):
        """A self edge on an unknown id reports 'self', not 'missing-attachment'."""
        result = validate_dependency(dep("ghost", "ghost"), attachments_by_id)
        assert result.reason == RejectReason.SELF
