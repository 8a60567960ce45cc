"""Lane Packer - assigns attachments to non-overlapping horizontal lanes."""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from timeline_layout.models import Attachment

logger = logging.getLogger(__name__)


@dataclass
class PackResult:
    """Lane assignment for a set of attachments."""

    lane_of: dict[str, int] = field(default_factory=dict)
    lane_count: int = 0


def pack_attachments(items: Sequence[Attachment]) -> PackResult:
    """Assign each attachment to the lowest-index lane where it fits.

    Attachments are half-open ``[start, end)`` intervals, so an attachment
    starting exactly where another ends can share its lane. Items are visited
    in ascending start order; equal starts keep their input order, which makes
    the assignment deterministic for a given input list. The greedy
    first-fit sweep uses the minimum possible number of lanes.

    Args:
        items: Attachments to pack

    Returns:
        PackResult with the lane of every attachment and the lane count
    """
    ordered = sorted(enumerate(items), key=lambda pair: (pair[1].start, pair[0]))

    # End time of the last attachment placed in each lane
    lane_ends: list[int] = []
    lane_of: dict[str, int] = {}

    for _, attachment in ordered:
        for lane, lane_end in enumerate(lane_ends):
            if lane_end <= attachment.start:
                lane_of[attachment.id] = lane
                lane_ends[lane] = attachment.end
                break
        else:
            lane_of[attachment.id] = len(lane_ends)
            lane_ends.append(attachment.end)

    logger.debug("Packed %d attachments into %d lanes", len(items), len(lane_ends))
    return PackResult(lane_of=lane_of, lane_count=len(lane_ends))
