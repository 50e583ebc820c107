"""Frame planning: walk the visible candles once and emit draw primitives.

The order of the returned list is part of the contract because later
primitives paint over earlier ones:

1. price pane background
2. horizontal grid lines at the price ticks
3. moving-average polyline
4. per candle: body, upper wick, lower wick
5. volume pane background and bars
6. axis labels (price, volume, time)
7. selection marker
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Tuple

from .config import ChartConfig
from .gestures import Selection
from .mapper import CoordinateMapper
from .primitives import DrawPrimitiveList, FillRect, Line, Text
from .series import CandleSeries
from .ticks import format_truncated, price_ticks, time_ticks, volume_ticks
from .viewport import ViewportState, VisibleRange, compute_visible_range

__all__ = ["ChartLayout", "render"]

logger = logging.getLogger(__name__)

LABEL_PADDING_DP = 4.0


@dataclass(frozen=True)
class ChartLayout:
    """Pixel rectangles of the panes for one canvas size."""

    canvas_width: float
    canvas_height: float
    plot_x: float
    plot_width: float
    price_height: float
    volume_top: float
    volume_height: float
    time_axis_top: float
    time_axis_height: float
    padding: float

    @classmethod
    def from_canvas(
        cls, canvas_size: Tuple[float, float], config: ChartConfig, density: float = 1.0
    ) -> "ChartLayout":
        width, height = canvas_size
        axis_width = min(config.price_axis_width_px(density), width)
        time_axis_height = min(config.to_px(config.time_axis_height_dp, density), height)
        panes_height = max(0.0, height - time_axis_height)
        if config.show_volume:
            share = config.chart_height_dp / (config.chart_height_dp + config.volume_height_dp)
            price_height = panes_height * share
        else:
            price_height = panes_height
        return cls(
            canvas_width=width,
            canvas_height=height,
            plot_x=axis_width,
            plot_width=max(0.0, width - axis_width),
            price_height=price_height,
            volume_top=price_height,
            volume_height=panes_height - price_height,
            time_axis_top=panes_height,
            time_axis_height=time_axis_height,
            padding=config.to_px(LABEL_PADDING_DP, density),
        )


def render(
    series: CandleSeries,
    state: ViewportState,
    selection: Optional[Selection],
    canvas_size: Tuple[float, float],
    config: Optional[ChartConfig] = None,
    density: float = 1.0,
    tz: Optional[tzinfo] = None,
) -> DrawPrimitiveList:
    """Plan one frame from a single snapshot of series, state and canvas size."""
    config = config or ChartConfig()
    layout = ChartLayout.from_canvas(canvas_size, config, density)
    visible = compute_visible_range(
        series, state, layout.canvas_width, layout.plot_x
    )

    primitives: DrawPrimitiveList = [
        FillRect(
            layout.plot_x, 0.0, layout.plot_width, layout.price_height,
            config.background_color, role="background",
        )
    ]
    if visible is None:
        if config.show_volume:
            primitives.append(_volume_background(layout, config))
        logger.debug("Nothing visible for %r; background only", series)
        return primitives

    price = CoordinateMapper(state, visible, layout.price_height)
    _plan_grid(primitives, price, visible, layout, config)
    if config.show_moving_average:
        _plan_moving_average(primitives, series, price, visible, layout, config)
    _plan_candles(primitives, series, price, visible, layout, config)

    volume: Optional[CoordinateMapper] = None
    if config.show_volume:
        volume = CoordinateMapper(state, visible, layout.volume_height)
        primitives.append(_volume_background(layout, config))
        _plan_volume(primitives, series, volume, visible, layout, config)

    _plan_price_labels(primitives, price, visible, layout, config)
    if volume is not None:
        _plan_volume_labels(primitives, volume, visible, layout, config)
    _plan_time_labels(primitives, series, price, visible, layout, config, tz)

    if config.show_selection and selection is not None and visible.contains(selection.index):
        x = layout.plot_x + price.center_x(selection.index)
        primitives.append(
            Line(x, 0.0, x, layout.time_axis_top, config.selection_color, role="selection")
        )

    logger.debug(
        "Planned %d primitives for candles %d..%d",
        len(primitives), visible.start_index, visible.end_index,
    )
    return primitives


# ---- pane helpers ------------------------------------------------------- #


def _volume_background(layout: ChartLayout, config: ChartConfig) -> FillRect:
    return FillRect(
        layout.plot_x, layout.volume_top, layout.plot_width, layout.volume_height,
        config.background_color, role="volume_background",
    )


def _plan_grid(
    primitives: DrawPrimitiveList,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    for tick in price_ticks(visible, config.price_tick_count):
        y = mapper.price_to_y(tick)
        primitives.append(
            Line(
                layout.plot_x, y, layout.plot_x + layout.plot_width, y,
                config.grid_color, role="grid",
            )
        )


def _plan_moving_average(
    primitives: DrawPrimitiveList,
    series: CandleSeries,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    pending: Optional[Tuple[float, float]] = None
    for index in range(visible.start_index, visible.end_index + 1):
        average = series[index].moving_average
        if average is None:
            # A missing value ends the current run; nothing bridges the gap.
            pending = None
            continue
        point = (layout.plot_x + mapper.center_x(index), mapper.price_to_y(average))
        if pending is not None:
            primitives.append(
                Line(pending[0], pending[1], point[0], point[1], config.ma_color, role="ma")
            )
        pending = point


def _plan_candles(
    primitives: DrawPrimitiveList,
    series: CandleSeries,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    width = mapper.candle_width_px
    for index in range(visible.start_index, visible.end_index + 1):
        candle = series[index]
        color = config.bull_color if candle.is_bullish else config.bear_color
        x = layout.plot_x + mapper.index_to_x(index)
        center = x + width / 2
        top = mapper.price_to_y(candle.body_top)
        bottom = mapper.price_to_y(candle.body_bottom)
        primitives.append(
            FillRect(x, top, width, max(bottom - top, 1.0), color, role="body")
        )
        primitives.append(
            Line(center, mapper.price_to_y(candle.high), center, top, color, role="wick")
        )
        primitives.append(
            Line(center, bottom, center, mapper.price_to_y(candle.low), color, role="wick")
        )


def _plan_volume(
    primitives: DrawPrimitiveList,
    series: CandleSeries,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    width = mapper.candle_width_px
    pane_bottom = layout.volume_top + layout.volume_height
    for index in range(visible.start_index, visible.end_index + 1):
        candle = series[index]
        color = config.volume_up_color if candle.is_bullish else config.volume_down_color
        height = mapper.volume_to_bar_height(candle.volume, visible.max_volume)
        primitives.append(
            FillRect(
                layout.plot_x + mapper.index_to_x(index), pane_bottom - height,
                width, height, color, role="volume",
            )
        )


# ---- axis labels -------------------------------------------------------- #


def _plan_price_labels(
    primitives: DrawPrimitiveList,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    x = layout.plot_x - layout.padding
    for tick in price_ticks(visible, config.price_tick_count):
        primitives.append(
            Text(
                x, mapper.price_to_y(tick), format_truncated(tick, config.price_digits),
                config.axis_text_color, config.axis_font_size, align="end",
                role="price_label",
            )
        )


def _plan_volume_labels(
    primitives: DrawPrimitiveList,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
) -> None:
    x = layout.plot_x - layout.padding
    pane_bottom = layout.volume_top + layout.volume_height
    for tick in volume_ticks(visible, config.volume_tick_count):
        y = pane_bottom - mapper.volume_to_bar_height(tick, visible.max_volume)
        primitives.append(
            Text(
                x, y, format_truncated(tick, config.volume_digits),
                config.axis_text_color, config.axis_font_size, align="end",
                role="volume_label",
            )
        )


def _plan_time_labels(
    primitives: DrawPrimitiveList,
    series: CandleSeries,
    mapper: CoordinateMapper,
    visible: VisibleRange,
    layout: ChartLayout,
    config: ChartConfig,
    tz: Optional[tzinfo],
) -> None:
    y = layout.time_axis_top + layout.padding
    line_height = config.axis_font_size + layout.padding / 2
    for tick in time_ticks(series, visible, tz):
        x = layout.plot_x + mapper.center_x(tick.index)
        row = y
        if config.show_time_date:
            primitives.append(
                Text(
                    x, row, tick.date_label, config.axis_text_color,
                    config.axis_font_size, align="center", role="date_label",
                )
            )
            row += line_height
        primitives.append(
            Text(
                x, row, tick.time_label, config.axis_text_color,
                config.axis_font_size, align="center", role="time_label",
            )
        )
