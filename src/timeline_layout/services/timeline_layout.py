"""Timeline Layout - turns packed lanes into pixel boxes."""

from typing import Callable, Optional, Sequence

from timeline_layout.models import Attachment, Rect
from timeline_layout.services.lane_packer import pack_attachments


class TimelineLayout:
    """Lane assignment and box geometry for one set of attachments.

    Lanes are packed once when the layout is built. Boxes are computed on
    demand through ``scale_x`` so the same layout follows pan and zoom.
    """

    def __init__(
        self,
        attachments: Sequence[Attachment],
        scale_x: Callable[[float], float],
        row_height: float = 44,
        row_gap: float = 8,
    ):
        """Initialize the layout.

        Args:
            attachments: Attachments to lay out
            scale_x: Maps a time in ms to a pixel x (e.g. ``TimeZoom.to_x``)
            row_height: Height of a lane in px
            row_gap: Vertical gap between lanes in px
        """
        self.attachments = list(attachments)
        self.scale_x = scale_x
        self.row_height = row_height
        self.row_gap = row_gap
        self._by_id = {a.id: a for a in self.attachments}
        self._packed = pack_attachments(self.attachments)

    @property
    def lane_count(self) -> int:
        return self._packed.lane_count

    def lane_of(self, attachment_id: str) -> int:
        """Lane of an attachment; 0 for unknown ids."""
        return self._packed.lane_of.get(attachment_id, 0)

    def rect_of(self, attachment_id: str) -> Optional[Rect]:
        """Pixel box of an attachment, or None if it is not in the layout."""
        attachment = self._by_id.get(attachment_id)
        if attachment is None:
            return None
        x1 = self.scale_x(attachment.start)
        x2 = self.scale_x(attachment.end)
        y = self.lane_of(attachment_id) * (self.row_height + self.row_gap)
        return Rect(x=x1, y=y, w=x2 - x1, h=self.row_height)

    def rects(self) -> list[Rect]:
        """Boxes of all attachments in input order."""
        return [self.rect_of(a.id) for a in self.attachments]

    @property
    def height(self) -> float:
        """Total height of all lanes in px."""
        if self.lane_count == 0:
            return 0
        return self.lane_count * self.row_height + (self.lane_count - 1) * self.row_gap
