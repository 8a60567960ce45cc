"""Dependency Validator - fast structural checks for a proposed dependency.

The validator is meant for immediate UI feedback. Unless the caller passes
the timeline's existing dependencies it can only see the candidate edge, so
it cannot rule out cycles through the rest of the graph. The critical path
engine remains the authoritative cycle guard before a dependency is stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional

from timeline_layout.models import Attachment, Dependency, DependencyType


class RejectReason(str, Enum):
    """Why a dependency was rejected."""
    MISSING_ENDPOINTS = "missing-endpoints"
    SELF = "self"
    MISSING_ATTACHMENT = "missing-attachment"
    DIFFERENT_TIMELINE = "different-timeline"
    TEMPORAL_ORDER = "temporal-order"
    CYCLE = "cycle"


REASON_MESSAGES = {
    RejectReason.MISSING_ENDPOINTS: "Both a source and a target must be chosen",
    RejectReason.SELF: "A project cannot depend on itself",
    RejectReason.MISSING_ATTACHMENT: "One of the projects is not on this timeline",
    RejectReason.DIFFERENT_TIMELINE: "Both projects must be on the same timeline",
    RejectReason.TEMPORAL_ORDER: "The dependent project starts before its predecessor",
    RejectReason.CYCLE: "This dependency would create a cycle",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a dependency."""

    ok: bool
    reason: Optional[RejectReason] = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        """User-facing explanation of a rejection (empty when ok)."""
        if self.reason is None:
            return ""
        return REASON_MESSAGES[self.reason]

    @classmethod
    def accept(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: RejectReason) -> "ValidationResult":
        return cls(ok=False, reason=reason)


def validate_dependency(
    dep: Dependency,
    attachments_by_id: Mapping[str, Attachment],
    existing: Optional[Iterable[Dependency]] = None,
) -> ValidationResult:
    """Check a proposed dependency for structural and temporal validity.

    Checks run in order and the first failure is reported:
    missing endpoints, self reference, unknown attachment, different
    timelines, finish-to-start ordering, and finally a cycle search from the
    target back to the source.

    Args:
        dep: The candidate dependency (its id is not used)
        attachments_by_id: Attachments on the timeline, keyed by id
        existing: Dependencies already accepted; when omitted the cycle
            search only sees the candidate edge

    Returns:
        ValidationResult; never raises for bad input
    """
    source_id = dep.from_attachment_id
    target_id = dep.to_attachment_id
    if not source_id or not target_id:
        return ValidationResult.reject(RejectReason.MISSING_ENDPOINTS)
    if source_id == target_id:
        return ValidationResult.reject(RejectReason.SELF)

    source = attachments_by_id.get(source_id)
    target = attachments_by_id.get(target_id)
    if source is None or target is None:
        return ValidationResult.reject(RejectReason.MISSING_ATTACHMENT)
    if source.timeline_id != target.timeline_id:
        return ValidationResult.reject(RejectReason.DIFFERENT_TIMELINE)

    if dep.effective_type == DependencyType.FINISH_TO_START and target.start < source.start:
        return ValidationResult.reject(RejectReason.TEMPORAL_ORDER)

    if _reaches(target_id, source_id, dep, existing or ()):
        return ValidationResult.reject(RejectReason.CYCLE)

    return ValidationResult.accept()


def _reaches(
    start_id: str,
    goal_id: str,
    candidate: Dependency,
    existing: Iterable[Dependency],
) -> bool:
    """Depth-first search for a path start -> goal over candidate + existing edges."""
    adjacency: dict[str, list[str]] = {}
    for edge in [*existing, candidate]:
        adjacency.setdefault(edge.from_attachment_id, []).append(edge.to_attachment_id)

    stack = [start_id]
    visited: set[str] = set()
    while stack:
        node = stack.pop()
        if node == goal_id:
            return True
        if node in visited:
            continue
        visited.add(node)
        stack.extend(adjacency.get(node, ()))
    return False
