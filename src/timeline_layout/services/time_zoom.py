"""Pan/Zoom Transform - the time <-> pixel mapping behind the timeline.

Responsible for:
- Mapping times to pixels (``to_x``) and back (``to_t``)
- Wheel zoom anchored at the cursor, wheel pan otherwise
- Drag panning coalesced onto frame boundaries
- Two-finger pinch zoom anchored at the touch midpoint
- Keeping scale and translate clamped so nothing outside the time window
  is ever shown

Input events are plain dataclasses so any UI layer can feed them in.
"""

import logging
import math
from dataclasses import dataclass, field
from itertools import count
from typing import Callable, Optional, Protocol, Union

from timeline_layout.utils.time_utils import MS_PER_DAY, MS_PER_HOUR, days_to_ms

logger = logging.getLogger(__name__)

# Distance in px within which the view counts as pinned to an edge
EDGE_TOLERANCE = 0.5

Listener = Callable[[float, float], None]


@dataclass(frozen=True)
class TimeWindow:
    """The time range the timeline may show, in ms."""

    start: float
    end: float

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2


@dataclass
class ZoomOptions:
    """Configuration for a ``TimeZoom``."""

    initial_scale: float = 1 / MS_PER_DAY
    min_scale: float = 1 / (30 * MS_PER_DAY)
    max_scale: float = 8 / MS_PER_HOUR
    wheel_zoom_no_ctrl: bool = False
    wheel_zoom_speed: float = 0.0015
    initial_span_days: Optional[float] = None
    initial_center_time: Optional[float] = None


@dataclass
class WheelEvent:
    """A wheel or trackpad scroll at viewport position ``x``."""

    x: float
    delta_y: float = 0.0
    delta_x: float = 0.0
    ctrl_key: bool = False
    cancelable: bool = True
    default_prevented: bool = False

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True


@dataclass
class PointerEvent:
    """A pointer press, move or release at viewport position ``x``."""

    x: float
    button: int = 0


@dataclass
class TouchPoint:
    """One finger on the screen."""

    identifier: int
    x: float
    y: float = 0.0


@dataclass
class TouchEvent:
    """All fingers currently on the screen."""

    touches: list[TouchPoint] = field(default_factory=list)


class FrameScheduler(Protocol):
    """Runs callbacks on the next frame boundary."""

    def request(self, callback: Callable[[], None]) -> Optional[int]:
        ...

    def cancel(self, handle: int) -> None:
        ...


class ImmediateFrameScheduler:
    """Runs every callback as soon as it is requested."""

    def request(self, callback: Callable[[], None]) -> Optional[int]:
        callback()
        return None

    def cancel(self, handle: int) -> None:
        pass


class DeferredFrameScheduler:
    """Holds callbacks until ``run_pending()`` is called.

    The host calls ``run_pending()`` once per frame. A cancelled callback is
    dropped and never runs.
    """

    def __init__(self):
        self._pending: dict[int, Callable[[], None]] = {}
        self._ids = count(1)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def request(self, callback: Callable[[], None]) -> Optional[int]:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_pending(self) -> int:
        """Run and clear all pending callbacks. Returns how many ran."""
        callbacks = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback()
        return len(callbacks)


@dataclass
class _DragState:
    x: float
    translate_start: float


@dataclass
class _PinchState:
    id1: int
    id2: int
    start_distance: float
    start_scale: float
    mid_x: float
    mid_t: float


def _distance(a: TouchPoint, b: TouchPoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class TimeZoom:
    """Affine time -> pixel transform with clamped pan and zoom.

    ``x = (t - window.start) * scale + translate``. After every change the
    scale stays within ``[max(min_scale, viewport_width / span), max_scale]``
    and translate keeps the window edges outside the viewport.
    """

    def __init__(
        self,
        viewport_width: float,
        time_window: Union[TimeWindow, tuple[float, float]],
        options: Optional[ZoomOptions] = None,
        scheduler: Optional[FrameScheduler] = None,
    ):
        """Initialize the transform.

        Args:
            viewport_width: Visible width in px; initialisation waits until
                this is positive (see ``resize``)
            time_window: Time range that may be shown, in ms
            options: Zoom configuration
            scheduler: Frame scheduler used to coalesce drag moves
                (default: run immediately)
        """
        if not isinstance(time_window, TimeWindow):
            time_window = TimeWindow(*time_window)
        self.viewport_width = float(viewport_width)
        self.window = time_window
        self.options = options or ZoomOptions()
        self.scheduler = scheduler or ImmediateFrameScheduler()

        self._scale = self.options.initial_scale
        self._translate = 0.0
        self._drag: Optional[_DragState] = None
        self._pinch: Optional[_PinchState] = None
        self._frame: Optional[int] = None
        self._listeners: list[Listener] = []
        self._initialized = False

        self._initialize()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def scale(self) -> float:
        """Pixels per millisecond."""
        return self._scale

    @property
    def translate(self) -> float:
        """Pixel offset of the window start."""
        return self._translate

    @property
    def initialized(self) -> bool:
        return self._initialized

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(scale, translate)`` after every change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._scale, self._translate)

    def _fit_min(self) -> float:
        """Scale at which the whole window exactly fills the viewport."""
        if self.window.span <= 0:
            return self.options.min_scale
        return self.viewport_width / self.window.span

    def clamp(self, scale: float, translate: float) -> tuple[float, float]:
        """Clamp a (scale, translate) pair into the valid range."""
        effective_min = max(self.options.min_scale, self._fit_min())
        new_scale = min(self.options.max_scale, max(effective_min, scale))
        total_px = self.window.span * new_scale
        min_translate = self.viewport_width - total_px
        new_translate = min(0.0, max(min_translate, translate))
        return new_scale, new_translate

    def enforce_invariants(self) -> bool:
        """Re-clamp the current state, updating it only if clamping changed it.

        Returns:
            True if the state changed
        """
        scale, translate = self.clamp(self._scale, self._translate)
        if scale == self._scale and translate == self._translate:
            return False
        self._scale, self._translate = scale, translate
        self._notify()
        return True

    def _apply(self, scale: float, translate: float) -> None:
        before = (self._scale, self._translate)
        self._scale, self._translate = self.clamp(scale, translate)
        if (self._scale, self._translate) != before:
            self._notify()
        self.enforce_invariants()

    def is_at_left_edge(self) -> bool:
        return abs(self._translate) < EDGE_TOLERANCE

    def is_at_right_edge(self) -> bool:
        min_translate = self.viewport_width - self.window.span * self._scale
        return abs(self._translate - min_translate) < EDGE_TOLERANCE

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def to_x(self, t: float) -> float:
        """Map a time in ms to a viewport pixel."""
        return (t - self.window.start) * self._scale + self._translate

    def to_t(self, x: float) -> float:
        """Map a viewport pixel to a time in ms."""
        return (x - self._translate) / self._scale + self.window.start

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _initialize(self) -> None:
        if self._initialized or self.viewport_width <= 0:
            return

        opts = self.options
        if opts.initial_span_days:
            desired = self.viewport_width / days_to_ms(opts.initial_span_days)
            desired = min(opts.max_scale, max(self._fit_min(), desired))
            center = opts.initial_center_time
            if center is None:
                center = self.window.midpoint
            translate = self.viewport_width / 2 - (center - self.window.start) * desired
            self._apply(desired, translate)
        else:
            self._apply(self._scale, self._translate)

        self._initialized = True
        logger.debug("Zoom initialised: scale=%s translate=%s", self._scale, self._translate)

    def resize(self, viewport_width: float) -> None:
        """Change the viewport width and re-clamp."""
        self.viewport_width = float(viewport_width)
        if not self._initialized:
            self._initialize()
        else:
            self.enforce_invariants()

    def dispose(self) -> None:
        """Drop any pending drag frame."""
        if self._frame is not None:
            self.scheduler.cancel(self._frame)
            self._frame = None

    # ------------------------------------------------------------------
    # Wheel
    # ------------------------------------------------------------------

    def on_wheel(self, event: WheelEvent) -> None:
        """Zoom at the cursor (ctrl or always-zoom mode), otherwise pan."""
        opts = self.options
        if opts.wheel_zoom_no_ctrl or event.ctrl_key:
            event.prevent_default()
            world_t = self.to_t(event.x)
            factor = math.exp(-event.delta_y * opts.wheel_zoom_speed)
            new_scale = min(opts.max_scale, max(opts.min_scale, self._scale * factor))
            # Keep world_t under the cursor: x = (t - start) * scale + translate
            new_translate = event.x - (world_t - self.window.start) * new_scale
            self._apply(new_scale, new_translate)
            return

        pan = event.delta_y if event.delta_y != 0 else event.delta_x
        if not pan:
            return
        event.prevent_default()
        if (pan < 0 and self.is_at_left_edge()) or (pan > 0 and self.is_at_right_edge()):
            return
        self._apply(self._scale, self._translate - pan)

    # ------------------------------------------------------------------
    # Pointer drag
    # ------------------------------------------------------------------

    def on_pointer_down(self, event: PointerEvent) -> None:
        if event.button != 0:
            return
        self._drag = _DragState(x=event.x, translate_start=self._translate)

    def on_pointer_move(self, event: PointerEvent) -> None:
        """Pan with the pointer; only the latest move per frame is applied."""
        if self._drag is None:
            return
        target = self._drag.translate_start + (event.x - self._drag.x)
        if self._frame is not None:
            self.scheduler.cancel(self._frame)
            self._frame = None
        self._frame = self.scheduler.request(lambda: self._drag_frame(target))

    def _drag_frame(self, target: float) -> None:
        self._frame = None
        if target > 0 and self.is_at_left_edge():
            return
        _, translate = self.clamp(self._scale, target)
        if self.is_at_right_edge() and translate < self._translate:
            return
        self._apply(self._scale, translate)

    def on_pointer_up(self, event: PointerEvent) -> None:
        self._drag = None

    # ------------------------------------------------------------------
    # Pinch
    # ------------------------------------------------------------------

    def on_touch_pinch_start(self, event: TouchEvent) -> None:
        if len(event.touches) != 2:
            self._pinch = None
            return
        t1, t2 = event.touches
        mid_x = (t1.x + t2.x) / 2
        self._pinch = _PinchState(
            id1=t1.identifier,
            id2=t2.identifier,
            start_distance=_distance(t1, t2),
            start_scale=self._scale,
            mid_x=mid_x,
            mid_t=self.to_t(mid_x),
        )

    def on_touch_pinch_move(self, event: TouchEvent) -> None:
        pinch = self._pinch
        if pinch is None or pinch.start_distance == 0:
            return
        touches = {t.identifier: t for t in event.touches}
        t1 = touches.get(pinch.id1)
        t2 = touches.get(pinch.id2)
        if t1 is None or t2 is None:
            return
        opts = self.options
        new_scale = pinch.start_scale * (_distance(t1, t2) / pinch.start_distance)
        new_scale = min(opts.max_scale, max(opts.min_scale, new_scale))
        new_translate = pinch.mid_x - (pinch.mid_t - self.window.start) * new_scale
        self._apply(new_scale, new_translate)

    def on_touch_pinch_end(self, event: TouchEvent) -> None:
        self._pinch = None
