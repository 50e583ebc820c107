from datetime import datetime, timezone

import pytest

from candlechart.series import Candle, CandleSeries
from candlechart.ticks import (
    format_truncated,
    linear_ticks,
    price_ticks,
    time_ticks,
    volume_ticks,
)
from candlechart.viewport import VisibleRange


def _visible(max_price=200.0, min_price=100.0, max_volume=15000.0, start=0, end=1):
    return VisibleRange(start, end, max_price, min_price, max_volume)


def test_truncation_does_not_round_up():
    assert format_truncated(2.449, 2) == "2.44"
    assert format_truncated(2.999, 1) == "2.9"


def test_truncation_keeps_decimal_values_that_floats_cannot_hold_exactly():
    assert format_truncated(1.15, 2) == "1.15"
    assert format_truncated(0.29, 2) == "0.29"
    assert format_truncated(-1.15, 2) == "-1.15"
    assert format_truncated(4.35, 1) == "4.3"


def test_truncation_goes_toward_zero_for_negatives():
    assert format_truncated(-2.449, 2) == "-2.44"
    assert format_truncated(-0.004, 2) == "0.00"


def test_truncation_keeps_fixed_decimals_and_integer_mode():
    assert format_truncated(100.0, 2) == "100.00"
    assert format_truncated(12345.9, 0) == "12345"
    assert format_truncated(-7.8, 0) == "-7"
    with pytest.raises(ValueError):
        format_truncated(1.0, -1)


def test_linear_ticks_are_descending_and_even():
    ticks = linear_ticks(200.0, 100.0, 9)

    assert ticks[0] == 200.0
    assert ticks[-1] == 100.0
    assert ticks == [200.0 - 12.5 * k for k in range(9)]


def test_linear_ticks_need_two_values():
    with pytest.raises(ValueError):
        linear_ticks(1.0, 0.0, 1)


def test_price_ticks_use_visible_extrema():
    ticks = price_ticks(_visible(), 9)

    assert len(ticks) == 9
    assert ticks[0] == 200.0 and ticks[-1] == 100.0


def test_flat_price_range_repeats_the_level():
    assert price_ticks(_visible(50.0, 50.0), 9) == [50.0] * 9


def test_volume_ticks_run_down_to_zero():
    assert volume_ticks(_visible(), 3) == [15000.0, 7500.0, 0.0]
    assert volume_ticks(_visible(), 6)[1] == pytest.approx(12000.0)


def test_time_ticks_cover_visible_candles_only():
    base = int(datetime(2024, 3, 5, 9, 7, tzinfo=timezone.utc).timestamp() * 1000)
    step = 5 * 60 * 1000
    series = CandleSeries(
        Candle(base + i * step, 1.0, 2.0, 0.5, 1.5) for i in range(10)
    )

    ticks = time_ticks(series, _visible(start=2, end=4), tz=timezone.utc)

    assert [tick.index for tick in ticks] == [2, 3, 4]
    first = ticks[0]
    assert (first.day, first.month, first.hour, first.minute) == (5, 3, 9, 17)
    assert first.date_label == "5/3"
    assert first.time_label == "9:17"
    assert ticks[-1].time_label == "9:27"


def test_minute_is_zero_padded():
    ts = int(datetime(2024, 12, 31, 23, 5, tzinfo=timezone.utc).timestamp() * 1000)
    series = CandleSeries([Candle(ts, 1.0, 2.0, 0.5, 1.5)])

    (tick,) = time_ticks(series, _visible(start=0, end=0), tz=timezone.utc)

    assert tick.time_label == "23:05"
    assert tick.date_label == "31/12"


def test_no_time_ticks_without_visible_range():
    assert time_ticks(CandleSeries(), None) == []
