"""Data models for the timeline layout engine.

Attachments, dependencies and plans use Pydantic for validation and
serialization. Pixel geometry uses plain frozen dataclasses.
"""

from timeline_layout.models.base import LayoutModel
from timeline_layout.models.attachment import (
    Attachment,
    Dependency,
    DependencyType,
    Timeline,
)
from timeline_layout.models.geometry import Point, Rect
from timeline_layout.models.plan import TimelinePlan

__all__ = [
    # Base
    "LayoutModel",
    # Timeline entities
    "Attachment",
    "Dependency",
    "DependencyType",
    "Timeline",
    # Geometry
    "Point",
    "Rect",
    # Plan
    "TimelinePlan",
]
