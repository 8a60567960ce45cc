"""Edge Router - SVG connector paths between laid-out attachment boxes.

Responsible for:
- Straight connectors between neighbours on the same row
- Short curves for edges spanning a small gap
- Single-shelf orthogonal routes with rounded corners for longer edges
- Routing back-edges above the boxes instead of below
- Nudging shelves off obstacle boxes
"""

import logging
import math
from dataclasses import dataclass, field
from functools import partial
from typing import Optional, Sequence, Union

from timeline_layout.models import Point, Rect
from timeline_layout.services.edge_lanes import ShelfAllocator

logger = logging.getLogger(__name__)

# Tolerance used when comparing pixel coordinates
EPSILON = 0.5


@dataclass
class RouteOptions:
    """Tuning knobs for ``route_edge``."""

    radius: float = 8
    shelf: Union[str, float] = "auto"
    padding: float = 8
    boxes: Sequence[Rect] = field(default_factory=tuple)
    allocator: Optional[ShelfAllocator] = None
    direct_factor: float = 3
    nudge_step: float = 8
    max_nudges: int = 50
    shelf_reach: float = 200


def _fmt(value: float) -> str:
    """Format a coordinate with at most two decimals."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def _pt(point: Point) -> str:
    return f"{_fmt(point.x)} {_fmt(point.y)}"


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _is_corner(prev: Point, corner: Point, nxt: Point) -> bool:
    """True if the polyline turns 90 degrees at ``corner``."""
    dx1, dy1 = corner.x - prev.x, corner.y - prev.y
    dx2, dy2 = nxt.x - corner.x, nxt.y - corner.y
    horizontal_then_vertical = abs(dy1) < 1e-3 and abs(dx2) < 1e-3 and dx1 != 0 and dy2 != 0
    vertical_then_horizontal = abs(dx1) < 1e-3 and abs(dy2) < 1e-3 and dy1 != 0 and dx2 != 0
    return horizontal_then_vertical or vertical_then_horizontal


def rounded_path(points: Sequence[Point], radius: float) -> str:
    """Build an orthogonal polyline with quadratic-blended corners.

    The radius is shrunk at each corner to half of the adjacent segment
    lengths so neighbouring blends never overlap.
    """
    if not points:
        return ""

    parts = [f"M {_pt(points[0])}"]
    current = points[0]
    for i in range(1, len(points) - 1):
        corner, nxt = points[i], points[i + 1]
        if radius <= 0 or not _is_corner(current, corner, nxt):
            parts.append(f"L {_pt(corner)}")
            current = corner
            continue

        d1x, d1y = corner.x - current.x, corner.y - current.y
        d2x, d2y = nxt.x - corner.x, nxt.y - corner.y
        r = min(radius, math.hypot(d1x, d1y) / 2, math.hypot(d2x, d2y) / 2)
        blend_start = Point(corner.x - _sign(d1x) * r, corner.y - _sign(d1y) * r)
        blend_end = Point(corner.x + _sign(d2x) * r, corner.y + _sign(d2y) * r)
        parts.append(f"L {_pt(blend_start)}")
        parts.append(f"Q {_pt(corner)} {_pt(blend_end)}")
        current = blend_end

    if len(points) > 1:
        parts.append(f"L {_pt(points[-1])}")
    return " ".join(parts)


def _cubic(start: Point, ctrl1: Point, ctrl2: Point, end: Point) -> str:
    return f"M {_pt(start)} C {_pt(ctrl1)} {_pt(ctrl2)} {_pt(end)}"


def _corridor_blocked(a: Rect, b: Rect, boxes: Sequence[Rect]) -> bool:
    """True if a box sits between a and b across their shared mid line."""
    y = a.mid_y
    for box in boxes:
        if box == a or box == b:
            continue
        spans_gap = box.x < b.x and box.right > a.right
        crosses_line = box.y - EPSILON <= y <= box.bottom + EPSILON
        if spans_gap and crosses_line:
            return True
    return False


def _shelf_hits_box(y: float, x1: float, x2: float, boxes: Sequence[Rect]) -> bool:
    """True if the horizontal run x1..x2 at height y passes through a box."""
    lo, hi = min(x1, x2), max(x1, x2)
    for box in boxes:
        if box.y - EPSILON < y < box.bottom + EPSILON and box.x < hi and lo < box.right:
            return True
    return False


def _choose_shelf(
    opts: RouteOptions,
    auto_y: float,
    search_min: float,
    search_max: float,
    x1: float,
    x2: float,
    downward: bool,
) -> float:
    """Pick the shelf coordinate, then push it off any obstacle boxes.

    An allocator is told which coordinates cross an obstacle so it never
    hands them out; nudging then only moves shelves it had no clear room for.
    """
    if not isinstance(opts.shelf, str):
        shelf_y = float(opts.shelf)
    elif opts.allocator is not None:
        blocked = None
        if opts.boxes:
            blocked = partial(_shelf_hits_box, x1=x1, x2=x2, boxes=opts.boxes)
        shelf_y = opts.allocator.reserve(
            search_min, search_max, x1, x2, descending=not downward, blocked=blocked
        )
    else:
        shelf_y = auto_y

    if opts.boxes:
        direction = 1 if downward else -1
        attempts = 0
        while attempts < opts.max_nudges and _shelf_hits_box(shelf_y, x1, x2, opts.boxes):
            shelf_y += direction * opts.nudge_step
            attempts += 1
        if attempts == opts.max_nudges and _shelf_hits_box(shelf_y, x1, x2, opts.boxes):
            logger.debug("Shelf nudging gave up after %d attempts at y=%s", attempts, shelf_y)

    return shelf_y


def route_edge(a: Rect, b: Rect, opts: Optional[RouteOptions] = None) -> str:
    """Compute an SVG path from box ``a`` to box ``b``.

    Forward edges (``a`` entirely left of ``b``) leave the right middle of
    ``a`` and enter the left middle of ``b``, travelling along a shelf below
    both boxes. Back-edges leave and enter on the left sides and travel
    along a shelf above both boxes. Every route has at most one descent and
    one ascent, so it never oscillates.

    Args:
        a: Source box
        b: Target box
        opts: Routing options; defaults are used when omitted

    Returns:
        SVG path data. Identical inputs always give identical output.
    """
    opts = opts or RouteOptions()
    radius = max(0.0, opts.radius)
    pad = opts.padding
    direct_threshold = opts.direct_factor * pad

    a_mid = a.mid_y
    b_mid = b.mid_y
    forward = a.right <= b.x

    if forward:
        same_row = abs(a_mid - b_mid) < EPSILON
        if same_row and not _corridor_blocked(a, b, opts.boxes):
            return f"M {_fmt(a.right)} {_fmt(a_mid)} L {_fmt(b.x)} {_fmt(b_mid)}"

        span = b.x - a.right
        if 0 < span < direct_threshold:
            mid_x = (a.right + b.x) / 2
            return _cubic(
                Point(a.right, a_mid),
                Point(mid_x, a_mid),
                Point(mid_x, b_mid),
                Point(b.x, b_mid),
            )

        base = max(a.bottom, b.bottom) + pad
        shelf_y = _choose_shelf(
            opts, base, base, base + opts.shelf_reach, a.right, b.x, downward=True
        )
        points = [
            Point(a.right, a_mid),
            Point(a.right + pad, a_mid),
            Point(a.right + pad, shelf_y),
            Point(b.x - pad, shelf_y),
            Point(b.x - pad, b_mid),
            Point(b.x, b_mid),
        ]
        return rounded_path(points, radius)

    back_span = a.right - b.x
    if 0 < back_span < direct_threshold:
        peak_y = min(a.y, b.y) - pad - 12
        return _cubic(
            Point(a.x, a_mid),
            Point(a.x - pad * 0.6, peak_y),
            Point(b.x + pad * 0.6, peak_y),
            Point(b.x, b_mid),
        )

    top = min(a.y, b.y) - pad
    shelf_y = _choose_shelf(
        opts, top, top - opts.shelf_reach, top, b.x, a.right, downward=False
    )
    points = [
        Point(a.x, a_mid),
        Point(a.x - pad, a_mid),
        Point(a.x - pad, shelf_y),
        Point(b.x - pad, shelf_y),
        Point(b.x - pad, b_mid),
        Point(b.x, b_mid),
    ]
    return rounded_path(points, radius)
