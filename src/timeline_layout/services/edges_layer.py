"""Edges Layer - routes every visible dependency for one render pass.

Responsible for:
- Filtering dependencies by a highlight mode
- Sharing one shelf allocator across the edges of a pass
- Reusing the previous pass while the edge geometry is unchanged
- Flagging edges incident to the highlighted attachment and back-edges
"""

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from timeline_layout.models import Dependency, Rect
from timeline_layout.services.edge_lanes import EdgeLaneAllocator
from timeline_layout.services.edge_router import RouteOptions, route_edge

logger = logging.getLogger(__name__)

RectLookup = Callable[[str], Optional[Rect]]


class EdgeMode(str, Enum):
    """Which dependencies to draw relative to the highlighted attachment."""
    ALL = "all"
    SELECTED = "selected"
    INCOMING = "incoming"
    OUTGOING = "outgoing"
    CRITICAL = "critical"


@dataclass(frozen=True)
class EdgePath:
    """A routed dependency ready for drawing."""

    id: str
    d: str
    active: bool
    back: bool


def _edge_id(dep: Dependency) -> str:
    return dep.id or f"{dep.from_attachment_id}->{dep.to_attachment_id}"


def _is_visible(
    dep: Dependency,
    mode: EdgeMode,
    highlight_id: Optional[str],
    critical_ids: Optional[set[str]],
) -> bool:
    source, target = dep.from_attachment_id, dep.to_attachment_id
    if mode == EdgeMode.CRITICAL and critical_ids is not None:
        return source in critical_ids and target in critical_ids
    if highlight_id is None:
        return True
    if mode == EdgeMode.INCOMING:
        return target == highlight_id
    if mode == EdgeMode.OUTGOING:
        return source == highlight_id
    if mode in (EdgeMode.SELECTED, EdgeMode.CRITICAL):
        return highlight_id in (source, target)
    return True


class EdgesLayer:
    """Computes SVG paths for a timeline's dependencies."""

    def __init__(
        self,
        rect_of: RectLookup,
        allocator_step: float = 12,
        route_options: Optional[RouteOptions] = None,
    ):
        """Initialize the layer.

        Args:
            rect_of: Looks up the box of an attachment id
            allocator_step: Shelf spacing for the per-pass lane allocator
            route_options: Base routing options; boxes and allocator are
                filled in per pass
        """
        self.rect_of = rect_of
        self.allocator_step = allocator_step
        self.route_options = route_options or RouteOptions()
        # Geometry key of the last pass and the paths it produced
        self._cache_key: Optional[tuple] = None
        self._cached_paths: list[str] = []

    def invalidate(self) -> None:
        """Forget the cached pass."""
        self._cache_key = None
        self._cached_paths = []

    def compute_paths(
        self,
        dependencies: Iterable[Dependency],
        mode: EdgeMode = EdgeMode.ALL,
        highlight_id: Optional[str] = None,
        boxes: Optional[Sequence[Rect]] = None,
        critical_ids: Optional[Iterable[str]] = None,
    ) -> list[EdgePath]:
        """Route all visible dependencies.

        Routing is skipped when the visible edges, their endpoint boxes, the
        obstacles and the routing options are the same as in the previous
        pass; only the highlight flags are recomputed then.

        Args:
            dependencies: Dependencies to draw
            mode: Filter relative to ``highlight_id``
            highlight_id: The hovered or selected attachment, if any
            boxes: Obstacle boxes for shelf nudging
            critical_ids: Attachment ids on the critical path (for CRITICAL mode)

        Returns:
            One EdgePath per drawn dependency, in input order
        """
        mode = EdgeMode(mode)
        critical = set(critical_ids) if critical_ids is not None else None
        obstacles = tuple(boxes or ())

        visible: list[tuple[str, Dependency, Rect, Rect]] = []
        for dep in dependencies:
            a = self.rect_of(dep.from_attachment_id)
            b = self.rect_of(dep.to_attachment_id)
            if a is None or b is None:
                continue
            if _is_visible(dep, mode, highlight_id, critical):
                visible.append((_edge_id(dep), dep, a, b))

        # Boxes and allocator are filled in per pass, so only the tuning knobs count
        tuning = dataclasses.replace(self.route_options, boxes=(), allocator=None)
        key = (tuple((edge_id, a, b) for edge_id, _, a, b in visible), obstacles, tuning)
        if key != self._cache_key:
            allocator = EdgeLaneAllocator(self.allocator_step)
            options = dataclasses.replace(
                self.route_options, boxes=obstacles, allocator=allocator
            )
            self._cached_paths = [route_edge(a, b, options) for _, _, a, b in visible]
            self._cache_key = key
            logger.debug("Routed %d edges (mode=%s)", len(visible), mode.value)

        paths: list[EdgePath] = []
        for (edge_id, dep, a, b), d in zip(visible, self._cached_paths):
            active = highlight_id is not None and highlight_id in (
                dep.from_attachment_id,
                dep.to_attachment_id,
            )
            paths.append(
                EdgePath(id=edge_id, d=d, active=active, back=a.right > b.x)
            )
        return paths
