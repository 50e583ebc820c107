"""Scroll/zoom state and the visible slice of the series it selects."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .config import ChartConfig
from .series import CandleSeries

__all__ = [
    "ViewportState",
    "VisibleRange",
    "compute_visible_range",
    "content_width_px",
    "max_scroll_offset",
]


@dataclass(frozen=True)
class ViewportState:
    scroll_offset_px: float = 0.0
    candle_width_px: float = 40.0
    candle_spacing_px: float = 4.0

    @property
    def stride_px(self) -> float:
        return self.candle_width_px + self.candle_spacing_px

    @classmethod
    def initial(cls, config: ChartConfig) -> "ViewportState":
        return cls(
            scroll_offset_px=0.0,
            candle_width_px=config.initial_candle_width_px,
            candle_spacing_px=config.candle_spacing_px,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ViewportState":
        return cls(
            scroll_offset_px=float(payload.get("scroll_offset_px", 0.0)),
            candle_width_px=float(payload.get("candle_width_px", 40.0)),
            candle_spacing_px=float(payload.get("candle_spacing_px", 4.0)),
        )


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive index slice on screen plus the extrema of that slice only."""

    start_index: int
    end_index: int
    max_price: float
    min_price: float
    max_volume: float

    @property
    def count(self) -> int:
        return self.end_index - self.start_index + 1

    def contains(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_visible_range(
    series: CandleSeries,
    state: ViewportState,
    viewport_width_px: float,
    price_axis_width_px: float,
) -> Optional[VisibleRange]:
    """Resolve which candles are on screen for one state snapshot.

    Returns ``None`` when nothing can be shown (empty series, or a viewport
    narrower than the price axis). The start index is capped at the last
    candle so an over-scrolled state never indexes past the series.
    """
    size = len(series)
    if size == 0 or state.stride_px <= 0:
        return None

    visible_count = math.floor((viewport_width_px - price_axis_width_px) / state.stride_px)
    start_index = max(0, math.floor(state.scroll_offset_px / state.stride_px))
    start_index = min(start_index, size - 1)
    end_index = min(size - 1, start_index + visible_count)
    if start_index > end_index:
        return None

    visible = series.window(start_index, end_index)
    return VisibleRange(
        start_index=start_index,
        end_index=end_index,
        max_price=max(candle.high for candle in visible),
        min_price=min(candle.low for candle in visible),
        max_volume=max(candle.volume for candle in visible),
    )


def content_width_px(
    series_len: int, state: ViewportState, price_axis_width_px: float
) -> float:
    """Full scrollable width: every candle slot plus the price axis gutter."""
    return state.stride_px * series_len + price_axis_width_px


def max_scroll_offset(
    series_len: int,
    state: ViewportState,
    viewport_width_px: float,
    price_axis_width_px: float,
) -> float:
    return max(
        0.0,
        content_width_px(series_len, state, price_axis_width_px) - viewport_width_px,
    )
