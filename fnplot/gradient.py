"""An editor model for colour gradients: stops shown as arrows along a strip."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable

from .values import Color, Gradient

SQRT_3 = 1.732050808
ARROW_LENGTH = 8.0
ARROW_HALF_WIDTH = ARROW_LENGTH / SQRT_3
NEW_STOP_COLOR: Color = (255, 0, 0)

Stop = tuple[float, Color]


class Orientation(Enum):
    Horizontal = "horizontal"
    Vertical = "vertical"


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


class GradientEditor:
    """A gradient strip whose stops can be added, moved and removed with the mouse.

    Coordinates are widget pixels. The arrows marking the stops lie in the last
    ``ARROW_LENGTH`` pixels across the strip.
    """

    def __init__(self, width: int, height: int, orientation: Orientation = Orientation.Horizontal) -> None:
        self.width = width
        self.height = height
        self.orientation = orientation
        self._gradient = Gradient()
        self._current_stop: Stop | None = None
        self._click_offset = 0.0
        self._have_arrow = False
        self.color_listeners: list[Callable[[Color], None]] = []
        self.gradient_listeners: list[Callable[[Gradient], None]] = []
        self._find_gradient_stop()

    @property
    def gradient(self) -> Gradient:
        return self._gradient

    @property
    def current_stop(self) -> Stop | None:
        return self._current_stop

    @property
    def color(self) -> Color | None:
        """The colour of the selected stop."""
        return None if self._current_stop is None else self._current_stop[1]

    def _length(self) -> float:
        return float(self.width if self.orientation is Orientation.Horizontal else self.height)

    def _along(self, x: float, y: float) -> float:
        return x if self.orientation is Orientation.Horizontal else y

    def _set_stops(self, stops: list[Stop]) -> None:
        if tuple(stops) == self._gradient.stops:
            return
        self._gradient = Gradient(stops)
        for listener in list(self.gradient_listeners):
            listener(self._gradient)

    def _set_current_stop(self, stop: Stop) -> None:
        if self._current_stop == stop:
            return
        color_changed = self._current_stop is None or stop[1] != self._current_stop[1]
        self._current_stop = stop
        if color_changed:
            for listener in list(self.color_listeners):
                listener(stop[1])

    def _find_gradient_stop(self) -> None:
        stops = self._gradient.stops
        self._set_current_stop(stops[len(stops) // 2])

    def _current_index(self, stops: list[Stop]) -> int | None:
        try:
            return stops.index(self._current_stop)  # type: ignore[arg-type]
        except ValueError:
            return None

    def set_gradient(self, gradient: Gradient) -> None:
        """Edit ``gradient``, selecting a stop near its middle."""
        if self._gradient == gradient:
            return
        self._set_stops(list(gradient.stops))
        self._find_gradient_stop()

    def set_color(self, color: Color) -> None:
        """Change the colour of the selected stop."""
        stops = list(self._gradient.stops)
        index = self._current_index(stops)
        if index is not None:
            if stops[index][1] == tuple(color):
                return
            self._current_stop = (stops[index][0], tuple(color))  # type: ignore[assignment]
            stops[index] = self._current_stop  # type: ignore[assignment]
        self._set_stops(stops)

    def remove_stop(self) -> None:
        """Remove the selected stop and select another one."""
        stops = list(self._gradient.stops)
        index = self._current_index(stops)
        if index is not None:
            del stops[index]
        self._set_stops(stops)
        self._find_gradient_stop()

    def to_arrow_pos(self, stop: float) -> float:
        """The widget coordinate along the strip of a stop position in [0, 1]."""
        length = self._length() - 2 * ARROW_HALF_WIDTH
        return stop * length + ARROW_HALF_WIDTH

    def from_arrow_pos(self, pos: float) -> float:
        """The stop position, clamped to [0, 1], of a widget coordinate."""
        length = self._length() - 2 * ARROW_HALF_WIDTH
        stop = (pos - ARROW_HALF_WIDTH) / length
        return min(1.0, max(0.0, stop))

    def stop_at(self, x: float, y: float) -> Stop | None:
        """Select and return the stop whose arrow lies under (x, y), if any."""
        if self.orientation is Orientation.Horizontal:
            dl = y - (self.height - ARROW_LENGTH)
        else:
            dl = x - (self.width - ARROW_LENGTH)
        if dl < 0:
            return None

        along = self._along(x, y)
        spread = dl * (ARROW_HALF_WIDTH / ARROW_LENGTH)
        # Later stops are drawn on top, so they are hit first.
        for stop in reversed(self._gradient.stops):
            pos = self.to_arrow_pos(stop[0])
            if pos - spread <= along <= pos + spread:
                self._click_offset = along - pos
                self._set_current_stop(stop)
                return stop
        return None

    def press(self, x: float, y: float, right_button: bool = False) -> bool:
        """Handle a mouse press; the right button removes the stop under the mouse."""
        if self.stop_at(x, y) is None:
            return False
        if right_button:
            self.remove_stop()
        else:
            self._have_arrow = True
        return True

    def move(self, x: float, y: float) -> None:
        """Drag the stop grabbed by the last press."""
        if not self._have_arrow:
            return
        stops = list(self._gradient.stops)
        index = self._current_index(stops)
        if index is not None:
            position = self.from_arrow_pos(self._along(x, y) - self._click_offset)
            self._current_stop = (position, stops[index][1])
            stops[index] = self._current_stop
        self._set_stops(stops)

    def release(self) -> None:
        self._have_arrow = False

    def double_click(self, x: float, y: float) -> None:
        """Add a red stop at the clicked position unless an arrow was hit."""
        if self.stop_at(x, y) is not None:
            return
        stop: Stop = (self.from_arrow_pos(self._along(x, y)), NEW_STOP_COLOR)
        self._set_stops([*self._gradient.stops, stop])
        self._set_current_stop(stop)

    def minimum_size_hint(self) -> tuple[int, int]:
        """The smallest (width, height) that shows the strip and its arrows."""
        w = 3 * ARROW_HALF_WIDTH
        h = 12 + ARROW_LENGTH
        if self.orientation is Orientation.Vertical:
            w, h = h, w
        return _round(w), _round(h)