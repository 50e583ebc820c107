"""Immutable candle records and the ordered series that owns them."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, overload

import pandas as pd

from indicator.moving_average import MA_PERIOD, compute_moving_average

__all__ = ["Candle", "CandleSeries", "OHLCV_COLUMNS"]


OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class Candle:
    """One time bucket. ``timestamp`` is epoch milliseconds."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    moving_average: Optional[float] = None

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open

    @property
    def body_top(self) -> float:
        return max(self.open, self.close)

    @property
    def body_bottom(self) -> float:
        return min(self.open, self.close)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
            "moving_average": self.moving_average,
        }


class CandleSeries(Sequence[Candle]):
    """Chronologically ordered, read-only sequence of candles.

    A series is a value: loading new data produces a new ``CandleSeries``
    and the chart treats a different object as a different series. Callers
    must supply candles sorted by timestamp; the order is not validated.

    ``ma_window`` records the window the candles' ``moving_average`` values
    were computed with, or ``None`` when that is unknown.
    """

    __slots__ = ("_candles", "ma_window")

    def __init__(
        self, candles: Iterable[Candle] = (), ma_window: Optional[int] = None
    ) -> None:
        self._candles: Tuple[Candle, ...] = tuple(candles)
        self.ma_window = ma_window

    @overload
    def __getitem__(self, index: int) -> Candle: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Candle, ...]: ...

    def __getitem__(self, index):
        return self._candles[index]

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def __repr__(self) -> str:
        return f"CandleSeries(len={len(self._candles)})"

    # ---- slices --------------------------------------------------------- #

    def window(self, start: int, end: int) -> Tuple[Candle, ...]:
        """Candles in the inclusive index range ``[start, end]``."""
        return self._candles[start:end + 1]

    # ---- derived series ------------------------------------------------- #

    def with_moving_average(self, window: int = MA_PERIOD) -> "CandleSeries":
        """Return a new series whose candles carry the trailing close MA."""
        close = pd.Series([candle.close for candle in self._candles], dtype="float64")
        averages = compute_moving_average(close, window)
        return CandleSeries(
            (
                replace(candle, moving_average=_optional_float(value))
                for candle, value in zip(self._candles, averages.tolist())
            ),
            ma_window=window,
        )

    # ---- pandas interop ------------------------------------------------- #

    @classmethod
    def from_frame(
        cls, frame: pd.DataFrame, ma_window: Optional[int] = MA_PERIOD
    ) -> "CandleSeries":
        """Build a series from an OHLCV frame.

        The frame needs ``open/high/low/close`` columns, an optional
        ``volume`` column and either a ``timestamp`` column (epoch ms), a
        ``date`` column or a datetime index. Rows keep their frame order.

        With ``ma_window`` set the average is computed from the closes;
        with ``None`` an existing ``moving_average`` column is kept as is.
        """
        missing = [col for col in OHLCV_COLUMNS[:4] if col not in frame.columns]
        if missing:
            raise ValueError(f"OHLCV frame is missing columns: {', '.join(missing)}")

        timestamps = _frame_timestamps(frame)
        volume = (
            frame["volume"].astype("float64").fillna(0.0)
            if "volume" in frame.columns
            else pd.Series(0.0, index=frame.index)
        )
        averages = (
            frame["moving_average"].astype("float64")
            if "moving_average" in frame.columns
            else pd.Series(math.nan, index=frame.index)
        )
        candles: List[Candle] = []
        for ts, o, h, lo, c, v, ma in zip(
            timestamps,
            frame["open"].astype("float64"),
            frame["high"].astype("float64"),
            frame["low"].astype("float64"),
            frame["close"].astype("float64"),
            volume,
            averages,
        ):
            candles.append(
                Candle(
                    timestamp=int(ts),
                    open=float(o),
                    high=float(h),
                    low=float(lo),
                    close=float(c),
                    volume=float(v),
                    moving_average=_optional_float(ma),
                )
            )
        series = cls(candles)
        if ma_window:
            series = series.with_moving_average(ma_window)
        return series

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame(
            [candle.to_dict() for candle in self._candles],
            columns=["timestamp", *OHLCV_COLUMNS, "moving_average"],
        )
        frame["date"] = pd.to_datetime(frame["timestamp"], unit="ms")
        return frame


def _optional_float(value: float) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    return float(value)


def _frame_timestamps(frame: pd.DataFrame) -> List[int]:
    if "timestamp" in frame.columns:
        return [int(value) for value in frame["timestamp"]]
    if "date" in frame.columns:
        dates = pd.to_datetime(frame["date"])
    elif isinstance(frame.index, pd.DatetimeIndex):
        dates = frame.index.to_series()
    else:
        raise ValueError("OHLCV frame needs a 'timestamp' or 'date' column.")
    return [int(value.timestamp() * 1000) for value in dates]
