"""Construction-time settings for the candlestick chart.

Sizes named ``*_dp`` are logical units and are converted with the screen
density; candle width and spacing are raw pixels because the zoom gesture
works on them directly.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from indicator.moving_average import MA_COLOR, MA_PERIOD

__all__ = [
    "BULL_COLOR",
    "BEAR_COLOR",
    "VOLUME_UP_COLOR",
    "VOLUME_DOWN_COLOR",
    "BACKGROUND_COLOR",
    "GRID_COLOR",
    "AXIS_TEXT_COLOR",
    "MIN_CANDLE_WIDTH_PX",
    "MAX_CANDLE_WIDTH_PX",
    "ChartConfig",
]


BULL_COLOR = "#4CAF50"
BEAR_COLOR = "#E53935"
VOLUME_UP_COLOR = "rgba(76, 175, 80, 0.5)"
VOLUME_DOWN_COLOR = "rgba(229, 57, 53, 0.5)"
BACKGROUND_COLOR = "#1E1E1E"
GRID_COLOR = "#2A2A2A"
AXIS_TEXT_COLOR = "#2D8CFF"
SELECTION_COLOR = "rgba(255, 255, 255, 0.4)"

MIN_CANDLE_WIDTH_PX = 10.0
MAX_CANDLE_WIDTH_PX = 100.0


@dataclass(frozen=True)
class ChartConfig:
    """Colours, layout constants and feature flags for one chart instance."""

    bull_color: str = BULL_COLOR
    bear_color: str = BEAR_COLOR
    ma_color: str = MA_COLOR
    volume_up_color: str = VOLUME_UP_COLOR
    volume_down_color: str = VOLUME_DOWN_COLOR
    background_color: str = BACKGROUND_COLOR
    grid_color: str = GRID_COLOR
    axis_text_color: str = AXIS_TEXT_COLOR
    selection_color: str = SELECTION_COLOR

    initial_candle_width_px: float = 40.0
    candle_spacing_px: float = 4.0
    min_candle_width_px: float = MIN_CANDLE_WIDTH_PX
    max_candle_width_px: float = MAX_CANDLE_WIDTH_PX

    price_axis_width_dp: float = 80.0
    time_axis_height_dp: float = 50.0
    chart_height_dp: float = 300.0
    volume_height_dp: float = 100.0
    viewport_width_dp: float = 360.0
    axis_font_size: float = 10.0

    price_tick_count: int = 9
    price_digits: int = 2
    volume_tick_count: int = 3
    volume_digits: int = 0

    ma_window: int = MA_PERIOD
    show_volume: bool = True
    show_moving_average: bool = True
    show_time_date: bool = True
    show_selection: bool = True

    def __post_init__(self) -> None:
        positive = {
            "initial_candle_width_px": self.initial_candle_width_px,
            "min_candle_width_px": self.min_candle_width_px,
            "price_axis_width_dp": self.price_axis_width_dp,
            "time_axis_height_dp": self.time_axis_height_dp,
            "chart_height_dp": self.chart_height_dp,
            "volume_height_dp": self.volume_height_dp,
            "viewport_width_dp": self.viewport_width_dp,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive (got {value}).")
        if self.candle_spacing_px < 0:
            raise ValueError("candle_spacing_px must not be negative.")
        if not (
            self.min_candle_width_px
            <= self.initial_candle_width_px
            <= self.max_candle_width_px
        ):
            raise ValueError(
                "initial_candle_width_px must lie within "
                f"[{self.min_candle_width_px}, {self.max_candle_width_px}]."
            )
        if self.price_tick_count < 2 or self.volume_tick_count < 2:
            raise ValueError("tick counts must be at least 2.")
        if self.price_digits < 0 or self.volume_digits < 0:
            raise ValueError("digit counts must not be negative.")
        if self.ma_window <= 0:
            raise ValueError("ma_window must be a positive integer.")

    @classmethod
    def plain(cls, **overrides) -> "ChartConfig":
        """Price-only chart: no volume pane, no moving average, hour labels only."""
        base = cls(
            price_axis_width_dp=60.0,
            time_axis_height_dp=30.0,
            price_tick_count=6,
            price_digits=1,
            show_volume=False,
            show_moving_average=False,
            show_time_date=False,
        )
        return replace(base, **overrides)

    @staticmethod
    def to_px(dp: float, density: float = 1.0) -> float:
        return dp * density

    def price_axis_width_px(self, density: float = 1.0) -> float:
        return self.to_px(self.price_axis_width_dp, density)

    def default_canvas_size(self, density: float = 1.0) -> tuple[float, float]:
        """Width of the phone-sized viewport and the stacked pane heights."""
        height = self.chart_height_dp + self.time_axis_height_dp
        if self.show_volume:
            height += self.volume_height_dp
        return (
            self.to_px(self.viewport_width_dp, density),
            self.to_px(height, density),
        )
