"""Axis tick values and label text derived from the visible range."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import ROUND_DOWN, Decimal
from typing import List, Optional

from .series import CandleSeries
from .viewport import VisibleRange

__all__ = [
    "TimeTick",
    "format_truncated",
    "linear_ticks",
    "price_ticks",
    "volume_ticks",
    "time_ticks",
]


def format_truncated(value: float, digits: int) -> str:
    """Render ``value`` with ``digits`` decimals, truncating toward zero.

    >>> format_truncated(2.449, 2)
    '2.44'
    >>> format_truncated(-2.449, 2)
    '-2.44'
    """
    if digits < 0:
        raise ValueError("digits must not be negative.")
    # Work on the shortest decimal form so 1.15 stays 1.15 rather than 1.149999...
    truncated = Decimal(repr(float(value))).quantize(
        Decimal(1).scaleb(-digits), rounding=ROUND_DOWN
    )
    if truncated.is_zero():
        truncated = abs(truncated)
    return f"{truncated:f}"


def linear_ticks(max_value: float, min_value: float, count: int) -> List[float]:
    """``count`` evenly spaced values from ``max_value`` down to ``min_value``."""
    if count < 2:
        raise ValueError("count must be at least 2.")
    step = (max_value - min_value) / (count - 1)
    return [max_value - k * step for k in range(count)]


def price_ticks(visible_range: VisibleRange, count: int = 9) -> List[float]:
    return linear_ticks(visible_range.max_price, visible_range.min_price, count)


def volume_ticks(visible_range: VisibleRange, count: int = 3) -> List[float]:
    # Volume bars grow from the pane bottom, so the axis always ends at zero.
    return linear_ticks(visible_range.max_volume, 0.0, count)


@dataclass(frozen=True)
class TimeTick:
    index: int
    day: int
    month: int
    hour: int
    minute: int

    @property
    def date_label(self) -> str:
        return f"{self.day}/{self.month}"

    @property
    def time_label(self) -> str:
        return f"{self.hour}:{self.minute:02d}"


def time_ticks(
    series: CandleSeries,
    visible_range: Optional[VisibleRange],
    tz: Optional[tzinfo] = None,
) -> List[TimeTick]:
    """One label per visible candle, in the local time zone unless ``tz`` is given."""
    if visible_range is None:
        return []
    ticks: List[TimeTick] = []
    for offset, candle in enumerate(
        series.window(visible_range.start_index, visible_range.end_index)
    ):
        moment = datetime.fromtimestamp(candle.timestamp / 1000, tz=tz)
        ticks.append(
            TimeTick(
                index=visible_range.start_index + offset,
                day=moment.day,
                month=moment.month,
                hour=moment.hour,
                minute=moment.minute,
            )
        )
    return ticks
