"""Services for the timeline layout engine.

Components:
- pack_attachments: Assign attachments to non-overlapping lanes
- validate_dependency: Fast checks for a proposed dependency
- critical_path: Longest-duration chain through the dependency DAG
- route_edge: SVG connector paths between boxes
- EdgeLaneAllocator: Shelf coordinates for edges sharing a corridor
- TimeZoom: Clamped pan/zoom time <-> pixel transform
- TimelineLayout: Lane and box geometry for a set of attachments
- EdgesLayer: Routed, filtered dependency paths for a render pass
"""

from timeline_layout.services.lane_packer import PackResult, pack_attachments
from timeline_layout.services.dependency_validator import (
    RejectReason,
    ValidationResult,
    validate_dependency,
)
from timeline_layout.services.critical_path import (
    CriticalPathError,
    CriticalPathResult,
    CycleError,
    critical_path,
    topological_order,
)
from timeline_layout.services.edge_lanes import EdgeLaneAllocator, ShelfAllocator
from timeline_layout.services.edge_router import RouteOptions, route_edge
from timeline_layout.services.time_zoom import (
    DeferredFrameScheduler,
    FrameScheduler,
    ImmediateFrameScheduler,
    PointerEvent,
    TimeWindow,
    TimeZoom,
    TouchEvent,
    TouchPoint,
    WheelEvent,
    ZoomOptions,
)
from timeline_layout.services.timeline_layout import TimelineLayout
from timeline_layout.services.edges_layer import EdgeMode, EdgePath, EdgesLayer

__all__ = [
    "PackResult",
    "pack_attachments",
    "RejectReason",
    "ValidationResult",
    "validate_dependency",
    "CriticalPathError",
    "CriticalPathResult",
    "CycleError",
    "critical_path",
    "topological_order",
    "EdgeLaneAllocator",
    "ShelfAllocator",
    "RouteOptions",
    "route_edge",
    "DeferredFrameScheduler",
    "FrameScheduler",
    "ImmediateFrameScheduler",
    "PointerEvent",
    "TimeWindow",
    "TimeZoom",
    "TouchEvent",
    "TouchPoint",
    "WheelEvent",
    "ZoomOptions",
    "TimelineLayout",
    "EdgeMode",
    "EdgePath",
    "EdgesLayer",
]
