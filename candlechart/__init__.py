"""Viewport and coordinate engine for a scrollable, zoomable candlestick chart."""

from .config import ChartConfig
from .gestures import Selection, apply_scroll, apply_tap, apply_zoom
from .mapper import CoordinateMapper
from .planner import ChartLayout, render
from .primitives import DrawPrimitiveList, FillRect, Line, Text
from .series import Candle, CandleSeries
from .session import ChartSession
from .surface import RecordingSurface, Surface, replay
from .ticks import format_truncated, linear_ticks, price_ticks, time_ticks, volume_ticks
from .viewport import ViewportState, VisibleRange, compute_visible_range

__all__ = [
    "Candle",
    "CandleSeries",
    "ChartConfig",
    "ChartLayout",
    "ChartSession",
    "CoordinateMapper",
    "DrawPrimitiveList",
    "FillRect",
    "Line",
    "RecordingSurface",
    "Selection",
    "Surface",
    "Text",
    "ViewportState",
    "VisibleRange",
    "apply_scroll",
    "apply_tap",
    "apply_zoom",
    "compute_visible_range",
    "format_truncated",
    "linear_ticks",
    "price_ticks",
    "render",
    "replay",
    "time_ticks",
    "volume_ticks",
]
