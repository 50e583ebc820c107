"""Data space <-> pixel space conversions for one frame.

All coordinates are local to the pane being drawn: x = 0 is the left edge of
the plot area (right of the price axis) and y = 0 is the top of the pane.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .viewport import ViewportState, VisibleRange

__all__ = ["CoordinateMapper", "volume_to_bar_height"]


def volume_to_bar_height(volume: float, max_volume: float, pane_height_px: float) -> float:
    if max_volume == 0:
        return 0.0
    return volume / max_volume * pane_height_px


@dataclass(frozen=True)
class CoordinateMapper:
    """Stateless transform built from the current viewport and visible range.

    A new mapper is created for every frame; nothing here is cached between
    gestures.
    """

    state: ViewportState
    visible_range: VisibleRange
    canvas_height_px: float

    @property
    def candle_width_px(self) -> float:
        return self.state.candle_width_px

    def price_to_y(self, price: float) -> float:
        span = self.visible_range.max_price - self.visible_range.min_price
        if span == 0:
            return self.canvas_height_px / 2
        return (self.visible_range.max_price - price) * (self.canvas_height_px / span)

    def index_to_x(self, index: int) -> float:
        """Left edge of the candle body at ``index``."""
        return (
            (index - self.visible_range.start_index) * self.state.stride_px
            + self.state.candle_spacing_px
        )

    def center_x(self, index: int) -> float:
        return self.index_to_x(index) + self.state.candle_width_px / 2

    def x_to_index(self, x_px: float) -> int:
        """Hit-test a horizontal position; the result may fall outside the series."""
        return self.visible_range.start_index + math.floor(
            (x_px - self.state.candle_spacing_px) / self.state.stride_px
        )

    def volume_to_bar_height(self, volume: float, max_volume: float) -> float:
        return volume_to_bar_height(volume, max_volume, self.canvas_height_px)
