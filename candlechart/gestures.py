"""Reducers turning zoom, tap and scroll events into new viewport values.

Each reducer is a pure function of the latest snapshot; the caller applies
them one event at a time, so the last write wins.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import MAX_CANDLE_WIDTH_PX, MIN_CANDLE_WIDTH_PX
from .mapper import CoordinateMapper
from .series import CandleSeries
from .viewport import ViewportState, compute_visible_range, max_scroll_offset

__all__ = ["Selection", "apply_zoom", "apply_tap", "apply_scroll", "clamp"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """Selected candle index and the tap position that selected it."""

    index: int
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"index": self.index, "x": self.x, "y": self.y}


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def apply_zoom(
    state: ViewportState,
    scale_factor: float,
    min_width_px: float = MIN_CANDLE_WIDTH_PX,
    max_width_px: float = MAX_CANDLE_WIDTH_PX,
) -> ViewportState:
    """Scale the candle width by one incremental pinch factor."""
    if not math.isfinite(scale_factor):
        logger.debug("Ignoring non-finite zoom factor %r", scale_factor)
        return state
    width = clamp(state.candle_width_px * scale_factor, min_width_px, max_width_px)
    if width != state.candle_width_px * scale_factor:
        logger.debug("Zoom clamped candle width to %.2fpx", width)
    return replace(state, candle_width_px=width)


def apply_tap(
    state: ViewportState,
    selection: Optional[Selection],
    series: CandleSeries,
    position: Tuple[float, float],
    viewport_width_px: float,
    price_axis_width_px: float,
) -> Tuple[ViewportState, Optional[Selection]]:
    """Select the candle under ``position`` (plot-area coordinates).

    A tap that misses every candle keeps the previous selection.
    """
    visible = compute_visible_range(series, state, viewport_width_px, price_axis_width_px)
    if visible is None:
        return state, selection

    x, y = position
    # The pane height does not matter for horizontal hit-testing.
    index = CoordinateMapper(state, visible, 0.0).x_to_index(x)
    if not 0 <= index < len(series):
        logger.debug("Tap at x=%.1f hit no candle (index %d)", x, index)
        return state, selection
    return state, Selection(index=index, x=x, y=y)


def apply_scroll(
    state: ViewportState,
    offset_px: float,
    series_len: int,
    viewport_width_px: float,
    price_axis_width_px: float,
) -> ViewportState:
    """Move the horizontal scroll position, kept within the scrollable content."""
    if not math.isfinite(offset_px):
        return state
    upper = max_scroll_offset(series_len, state, viewport_width_px, price_axis_width_px)
    return replace(state, scroll_offset_px=clamp(offset_px, 0.0, upper))
