"""Timeline plan - a self-contained snapshot of one timeline's data."""

from pydantic import Field, model_validator

from timeline_layout.models.attachment import Attachment, Dependency, Timeline
from timeline_layout.models.base import LayoutModel


class TimelinePlan(LayoutModel):
    """A timeline together with its attachments and dependencies.

    This is the document the CLI reads; the engine itself only ever sees
    the attachment and dependency lists.
    """

    timeline: Timeline
    attachments: list[Attachment] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "TimelinePlan":
        """Ensure attachment ids are unique."""
        seen: set[str] = set()
        for attachment in self.attachments:
            if attachment.id in seen:
                raise ValueError(f"Duplicate attachment id: {attachment.id}")
            seen.add(attachment.id)
        return self

    def attachments_by_id(self) -> dict[str, Attachment]:
        """Index attachments by id."""
        return {a.id: a for a in self.attachments}

    def time_window(self) -> tuple[int, int]:
        """Visible window: the timeline's own, else the attachments' extent."""
        start = self.timeline.start
        end = self.timeline.end
        if start is None:
            start = min((a.start for a in self.attachments), default=0)
        if end is None:
            end = max((a.end for a in self.attachments), default=start)
        return start, end
