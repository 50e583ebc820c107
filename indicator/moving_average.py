from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

MA_PERIOD = 20
MA_COLOR = "#FFEB3B"

__all__ = ["compute_moving_average", "MA_PERIOD", "MA_COLOR"]


def compute_moving_average(close: pd.Series, window: int = MA_PERIOD) -> pd.Series:
    """
    Compute the trailing simple moving average of the provided closing prices.

    Every window is averaged on its own (no running sum carried between
    windows), so a constant input yields exactly that constant.

    Args:
        close: Series of closing prices in chronological order.
        window: Number of trailing samples per average (default: 20).

    Returns:
        Pandas Series aligned with ``close``; the first ``window - 1`` entries
        are NaN because the window is not yet full.
    """
    if window <= 0:
        raise ValueError("window must be a positive integer.")

    if close.empty:
        return pd.Series(dtype="float64")

    values = close.to_numpy(dtype="float64")
    result = np.full(len(values), np.nan)
    if len(values) >= window:
        result[window - 1:] = sliding_window_view(values, window).mean(axis=1)

    return pd.Series(result, index=close.index, dtype="float64")
