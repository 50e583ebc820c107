"""Generate a plausible random OHLCV series for demos.

The frame follows the usual ``date/open/high/low/close/volume`` schema and is
turned into a :class:`CandleSeries` with a trailing moving average.

Example:
    python -m candlechart.synthetic --count 100 --seed 7
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import numpy as np
import pandas as pd

from indicator.moving_average import MA_PERIOD, compute_moving_average

from .series import CandleSeries

__all__ = ["SyntheticConfig", "generate_frame", "generate_series"]

logger = logging.getLogger(__name__)

DEFAULT_STEP = timedelta(minutes=5)
BASE_PRICE = 100.0
TREND_PER_CANDLE = 2.0


@dataclass
class SyntheticConfig:
    count: int = 100
    step: timedelta = DEFAULT_STEP
    now: Optional[datetime] = None
    seed: Optional[int] = None
    ma_window: int = MA_PERIOD
    # High/low offsets are drawn independently of open/close, so a candle can
    # break low <= open, close <= high unless this is switched on.
    enforce_ohlc: bool = False

    def resolved_now(self) -> datetime:
        return self.now or datetime.now(timezone.utc)


def generate_frame(cfg: SyntheticConfig) -> pd.DataFrame:
    if cfg.count < 0:
        raise ValueError("count must not be negative.")
    rng = np.random.default_rng(cfg.seed)
    start = cfg.resolved_now() - cfg.step * cfg.count
    step_ms = int(cfg.step.total_seconds() * 1000)
    start_ms = int(start.timestamp() * 1000)

    index = np.arange(cfg.count)
    base = BASE_PRICE + TREND_PER_CANDLE * index
    frame = pd.DataFrame(
        {
            "timestamp": start_ms + index * step_ms,
            "open": base + rng.uniform(-5.0, 5.0, cfg.count),
            "high": base + rng.uniform(5.0, 15.0, cfg.count),
            "low": base + rng.uniform(-15.0, -5.0, cfg.count),
            "close": base + rng.uniform(-5.0, 5.0, cfg.count),
            "volume": rng.uniform(5000.0, 15000.0, cfg.count),
        }
    )
    if cfg.enforce_ohlc:
        frame["high"] = frame[["open", "high", "close"]].max(axis=1)
        frame["low"] = frame[["open", "low", "close"]].min(axis=1)
    frame["moving_average"] = compute_moving_average(frame["close"], cfg.ma_window)
    frame["date"] = pd.to_datetime(frame["timestamp"], unit="ms")
    return frame


def generate_series(
    count: int = 100,
    step: timedelta = DEFAULT_STEP,
    now: Optional[datetime] = None,
    seed: Optional[int] = None,
    ma_window: int = MA_PERIOD,
    enforce_ohlc: bool = False,
) -> CandleSeries:
    cfg = SyntheticConfig(
        count=count,
        step=step,
        now=now,
        seed=seed,
        ma_window=ma_window,
        enforce_ohlc=enforce_ohlc,
    )
    frame = generate_frame(cfg)
    logger.debug("Generated %d synthetic candles (seed=%s)", len(frame), cfg.seed)
    # The frame already carries the average column.
    series = CandleSeries.from_frame(frame, ma_window=None)
    return CandleSeries(series, ma_window=cfg.ma_window)


def parse_args() -> SyntheticConfig:
    parser = argparse.ArgumentParser(description="Print a synthetic OHLCV series.")
    parser.add_argument("--count", type=int, default=100, help="Number of candles (default: 100)")
    parser.add_argument("--step-minutes", type=int, default=5, help="Candle interval in minutes")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--ma-window", type=int, default=MA_PERIOD, help="Moving-average window")
    parser.add_argument(
        "--enforce-ohlc",
        action="store_true",
        help="Stretch high/low so every candle satisfies low <= open, close <= high",
    )
    args = parser.parse_args()
    return SyntheticConfig(
        count=args.count,
        step=timedelta(minutes=args.step_minutes),
        seed=args.seed,
        ma_window=args.ma_window,
        enforce_ohlc=args.enforce_ohlc,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    cfg = parse_args()
    frame = generate_frame(cfg)
    logger.info("Generated %d candles", len(frame))
    print(frame.tail(10).to_string(index=False))


if __name__ == "__main__":
    main()
