"""Edge Lane Allocator - hands out shelf coordinates for routed edges.

Edges that share a corridor would draw on top of each other if they all used
the same shelf. The allocator keeps the horizontal spans already reserved on
each shelf coordinate and gives every new edge the first coordinate where its
span is free. The search is greedy: it is fast and simple, not a minimum
track packing.
"""

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ShelfAllocator(Protocol):
    """Anything that can reserve a shelf coordinate for an edge."""

    def reserve(
        self,
        y_min: float,
        y_max: float,
        x1: float,
        x2: float,
        *,
        descending: bool = False,
        blocked: Optional[Callable[[float], bool]] = None,
    ) -> float:
        ...

    def reset(self) -> None:
        ...


def _overlaps(x1: float, x2: float, span: tuple[float, float]) -> bool:
    """Half-open overlap between [x1, x2) and a reserved span."""
    return x1 < span[1] and span[0] < x2


class EdgeLaneAllocator:
    """Greedy first-fit shelf allocator with a fewest-conflicts fallback.

    One allocator belongs to one layout pass; call ``reset()`` or create a
    new instance before laying out again.
    """

    def __init__(self, step: float = 12):
        """Initialize the allocator.

        Args:
            step: Distance in px between candidate shelf coordinates
        """
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step
        self._lanes: dict[float, list[tuple[float, float]]] = {}

    @property
    def reservations(self) -> dict[float, list[tuple[float, float]]]:
        """Copy of the reserved spans, keyed by shelf coordinate."""
        return {y: list(spans) for y, spans in self._lanes.items()}

    def reset(self) -> None:
        """Clear all reservations."""
        self._lanes.clear()

    def _candidates(self, y_min: float, y_max: float, descending: bool) -> list[float]:
        count = int((y_max - y_min) // self.step) + 1
        if descending:
            return [y_max - i * self.step for i in range(count)]
        return [y_min + i * self.step for i in range(count)]

    def _conflicts(self, y: float, x1: float, x2: float) -> int:
        return sum(1 for span in self._lanes.get(y, ()) if _overlaps(x1, x2, span))

    def reserve(
        self,
        y_min: float,
        y_max: float,
        x1: float,
        x2: float,
        *,
        descending: bool = False,
        blocked: Optional[Callable[[float], bool]] = None,
    ) -> float:
        """Reserve a shelf coordinate in [y_min, y_max] for the span x1..x2.

        Candidates start at ``y_min`` and step towards ``y_max`` (or the other
        way round when ``descending``). Candidates for which ``blocked``
        returns True are passed over. The first remaining candidate whose
        existing spans do not overlap ``[x1, x2)`` wins. If every candidate
        is taken, the one with the fewest overlapping spans is used. A value
        is always returned and the span is always recorded.

        Args:
            y_min: Lower bound of the shelf coordinate
            y_max: Upper bound of the shelf coordinate
            x1: One end of the horizontal run
            x2: Other end of the horizontal run
            descending: Walk candidates from y_max down to y_min
            blocked: Marks coordinates that cannot be used, e.g. because the
                run would cross an obstacle there

        Returns:
            The chosen shelf coordinate
        """
        if x2 < x1:
            x1, x2 = x2, x1
        if y_max < y_min:
            y_min, y_max = y_max, y_min

        candidates = self._candidates(y_min, y_max, descending)
        if blocked is not None:
            # Only fall back to blocked coordinates when nothing else is left
            candidates = [y for y in candidates if not blocked(y)] or candidates

        chosen = None
        for y in candidates:
            if self._conflicts(y, x1, x2) == 0:
                chosen = y
                break

        if chosen is None:
            # min() keeps the first candidate on ties
            chosen = min(candidates, key=lambda y: self._conflicts(y, x1, x2))
            logger.debug(
                "All %d shelves between %s and %s are busy, reusing %s",
                len(candidates), y_min, y_max, chosen,
            )

        self._lanes.setdefault(chosen, []).append((x1, x2))
        return chosen
