"""Per-chart owner of the viewport state and selection."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Optional, Tuple

from .config import ChartConfig
from .gestures import Selection, apply_scroll, apply_tap, apply_zoom
from .primitives import DrawPrimitiveList
from .planner import render
from .series import Candle, CandleSeries
from .viewport import ViewportState, VisibleRange, compute_visible_range

__all__ = ["ChartSession"]

logger = logging.getLogger(__name__)


class ChartSession:
    """Single writer of ``ViewportState`` and ``Selection`` for one chart.

    Gesture handlers run synchronously and replace the state wholesale, so a
    frame rendered afterwards always sees one consistent snapshot. Handing
    the session a different series object resets both values.

    Candles are re-averaged when the series was not built with the
    configured ``ma_window``.

    Tap positions are plot-area coordinates (x = 0 at the right edge of the
    price axis).
    """

    def __init__(
        self,
        series: Optional[CandleSeries] = None,
        config: Optional[ChartConfig] = None,
        canvas_size: Optional[Tuple[float, float]] = None,
        density: float = 1.0,
    ) -> None:
        self.config = config or ChartConfig()
        self.density = density
        self.canvas_size = canvas_size or self.config.default_canvas_size(density)
        self._source = series if series is not None else CandleSeries()
        self.series = self._averaged(self._source)
        self.state = ViewportState.initial(self.config)
        self.selection: Optional[Selection] = None

    # ---- derived values ------------------------------------------------- #

    @property
    def viewport_width_px(self) -> float:
        return self.canvas_size[0]

    @property
    def price_axis_width_px(self) -> float:
        return self.config.price_axis_width_px(self.density)

    @property
    def selected_candle(self) -> Optional[Candle]:
        if self.selection is None:
            return None
        return self.series[self.selection.index]

    def visible_range(self) -> Optional[VisibleRange]:
        return compute_visible_range(
            self.series, self.state, self.viewport_width_px, self.price_axis_width_px
        )

    # ---- state transitions ---------------------------------------------- #

    def set_series(self, series: CandleSeries) -> None:
        if series is self._source:
            return
        logger.debug("Series replaced (%d candles); resetting viewport", len(series))
        self._source = series
        self.series = self._averaged(series)
        self.reset()

    def _averaged(self, series: CandleSeries) -> CandleSeries:
        if series.ma_window == self.config.ma_window:
            return series
        logger.debug("Applying %d-candle moving average", self.config.ma_window)
        return series.with_moving_average(self.config.ma_window)

    def reset(self) -> None:
        self.state = ViewportState.initial(self.config)
        self.selection = None

    def resize(self, canvas_size: Tuple[float, float]) -> None:
        self.canvas_size = canvas_size

    def handle_zoom(self, scale_factor: float) -> ViewportState:
        self.state = apply_zoom(
            self.state,
            scale_factor,
            self.config.min_candle_width_px,
            self.config.max_candle_width_px,
        )
        return self.state

    def handle_tap(self, x: float, y: float) -> Optional[Selection]:
        self.state, self.selection = apply_tap(
            self.state,
            self.selection,
            self.series,
            (x, y),
            self.viewport_width_px,
            self.price_axis_width_px,
        )
        return self.selection

    def handle_scroll(self, offset_px: float) -> ViewportState:
        self.state = apply_scroll(
            self.state,
            offset_px,
            len(self.series),
            self.viewport_width_px,
            self.price_axis_width_px,
        )
        return self.state

    # ---- output --------------------------------------------------------- #

    def render(self, tz: Optional[tzinfo] = None) -> DrawPrimitiveList:
        return render(
            self.series,
            self.state,
            self.selection,
            self.canvas_size,
            self.config,
            self.density,
            tz,
        )
