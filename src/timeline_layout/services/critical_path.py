"""Critical Path Engine - longest-duration chain through the dependency DAG.

Responsible for:
- Topologically ordering attachments (Kahn's algorithm)
- Refusing to compute anything when the dependency graph has a cycle
- Finding the chain with the largest summed duration
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional, Sequence

from timeline_layout.models import Attachment, Dependency

logger = logging.getLogger(__name__)


class CriticalPathError(ValueError):
    """Base error for critical path computation."""
    pass


class CycleError(CriticalPathError):
    """The dependency graph contains a cycle."""

    def __init__(self, remaining: Sequence[str]):
        self.remaining = list(remaining)
        super().__init__(f"cycle: {len(self.remaining)} attachment(s) could not be ordered")


@dataclass
class CriticalPathResult:
    """The critical path and its total duration in ms."""

    ids: list[str] = field(default_factory=list)
    total_duration: int = 0


def topological_order(
    attachments: Sequence[Attachment],
    deps: Sequence[Dependency],
) -> tuple[list[str], dict[str, list[str]]]:
    """Order attachment ids so every dependency points forward.

    Dependencies whose endpoints are not among ``attachments`` are ignored.
    Nodes with no incoming edges are seeded in input order, so the order is
    stable for a given input.

    Returns:
        (ordered ids, forward adjacency)

    Raises:
        CycleError: If some attachments cannot be ordered
    """
    known = {a.id for a in attachments}
    adjacency: dict[str, list[str]] = {a.id: [] for a in attachments}
    in_degree: dict[str, int] = {a.id: 0 for a in attachments}

    for dep in deps:
        if dep.from_attachment_id not in known or dep.to_attachment_id not in known:
            continue
        adjacency[dep.from_attachment_id].append(dep.to_attachment_id)
        in_degree[dep.to_attachment_id] += 1

    queue = deque(node for node, degree in in_degree.items() if degree == 0)
    order: list[str] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for nxt in adjacency[node]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    if len(order) != len(in_degree):
        remaining = [node for node, degree in in_degree.items() if degree > 0]
        logger.debug("Cycle detected among %s", remaining)
        raise CycleError(remaining)

    return order, adjacency


def critical_path(
    attachments: Sequence[Attachment],
    deps: Sequence[Dependency],
) -> CriticalPathResult:
    """Compute the longest path (by summed duration) through the DAG.

    Every attachment is a valid single-node path of its own duration, so
    disconnected attachments take part too. When several chains share the
    maximum, the one ending at the node that comes first in topological
    order wins.

    Args:
        attachments: Attachments forming the nodes
        deps: Dependencies forming the edges

    Returns:
        CriticalPathResult with ordered ids and total duration

    Raises:
        CycleError: If the dependencies contain a cycle
    """
    order, adjacency = topological_order(attachments, deps)
    if not order:
        return CriticalPathResult()

    by_id = {a.id: a for a in attachments}
    best: dict[str, int] = {node: by_id[node].duration for node in order}
    prev: dict[str, Optional[str]] = {node: None for node in order}

    for node in order:
        for nxt in adjacency[node]:
            candidate = best[node] + by_id[nxt].duration
            if candidate > best[nxt]:
                best[nxt] = candidate
                prev[nxt] = node

    end_id = order[0]
    for node in order:
        if best[node] > best[end_id]:
            end_id = node

    ids: list[str] = []
    current: Optional[str] = end_id
    while current is not None:
        ids.append(current)
        current = prev[current]
    ids.reverse()

    return CriticalPathResult(ids=ids, total_duration=best[end_id])
