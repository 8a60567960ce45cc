"""Timeline entities - attachments, dependencies and the timelines that own them."""

from enum import Enum
from typing import Optional

from pydantic import Field

from timeline_layout.models.base import LayoutModel


class DependencyType(str, Enum):
    """How the endpoints of a dependency are linked."""
    FINISH_TO_START = "fs"
    START_TO_START = "ss"
    FINISH_TO_FINISH = "ff"
    START_TO_FINISH = "sf"


class Timeline(LayoutModel):
    """A named timeline with an optional visible window (ms)."""

    id: str
    name: str = ""
    start: Optional[int] = None
    end: Optional[int] = None


class Attachment(LayoutModel):
    """A project's scheduled placement on a timeline.

    The interval is half-open: ``[start, end)``. ``end > start`` is assumed
    by callers but not enforced here.
    """

    id: str
    timeline_id: str = Field(..., alias="timelineId")
    project_id: str = Field(..., alias="projectId")
    start: int = Field(..., description="Start time in ms")
    end: int = Field(..., description="End time in ms")

    @property
    def duration(self) -> int:
        """Span of the attachment in milliseconds."""
        return self.end - self.start

    def overlaps(self, other: "Attachment") -> bool:
        """True if the two half-open intervals share any instant."""
        return self.start < other.end and other.start < self.end


class Dependency(LayoutModel):
    """A directed edge between two attachments."""

    id: str = ""
    from_attachment_id: str = Field("", alias="fromAttachmentId")
    to_attachment_id: str = Field("", alias="toAttachmentId")
    type: Optional[DependencyType] = None

    @property
    def effective_type(self) -> DependencyType:
        """Dependency type with the finish-to-start default applied."""
        if self.type is None:
            return DependencyType.FINISH_TO_START
        return DependencyType(self.type)
