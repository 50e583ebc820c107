import math

import pandas as pd
import pytest

from indicator.moving_average import compute_moving_average


def test_constant_series_average_equals_the_constant():
    close = pd.Series([3.7] * 30)

    ma = compute_moving_average(close, 20)

    assert ma.iloc[:19].isna().all()
    for value in ma.iloc[19:]:
        assert value == pytest.approx(3.7)


def test_first_defined_average_is_at_window_minus_one():
    close = pd.Series([float(i) for i in range(25)])

    ma = compute_moving_average(close)

    assert math.isnan(ma.iloc[18])
    assert ma.iloc[19] == pytest.approx(sum(range(20)) / 20)
    assert ma.iloc[24] == pytest.approx(sum(range(5, 25)) / 20)


def test_series_shorter_than_window_has_no_average():
    ma = compute_moving_average(pd.Series([1.0, 2.0, 3.0]), 5)

    assert len(ma) == 3
    assert ma.isna().all()


def test_empty_series_and_invalid_window():
    assert compute_moving_average(pd.Series(dtype="float64")).empty
    with pytest.raises(ValueError):
        compute_moving_average(pd.Series([1.0]), 0)


def test_index_is_preserved():
    index = pd.date_range("2024-01-01", periods=4, freq="5min")
    ma = compute_moving_average(pd.Series([1.0, 2.0, 3.0, 4.0], index=index), 2)

    assert list(ma.index) == list(index)
    assert ma.iloc[1] == pytest.approx(1.5)
