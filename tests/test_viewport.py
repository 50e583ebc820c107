import random

from candlechart.series import Candle, CandleSeries
from candlechart.viewport import (
    ViewportState,
    compute_visible_range,
    content_width_px,
    max_scroll_offset,
)

VIEWPORT = 360.0
AXIS = 80.0


def _series(count, high=None):
    candles = []
    for i in range(count):
        h = high.get(i, 110.0 + i) if high else 110.0 + i
        candles.append(Candle(i * 1000, 100.0 + i, h, 90.0 + i, 101.0 + i, 1000.0 + i))
    return CandleSeries(candles)


def _state(scroll=0.0, width=20.0, spacing=4.0):
    return ViewportState(scroll_offset_px=scroll, candle_width_px=width, candle_spacing_px=spacing)


def test_visible_range_from_origin():
    visible = compute_visible_range(_series(50), _state(), VIEWPORT, AXIS)

    # (360 - 80) // 24 == 11 additional slots after the start candle
    assert visible.start_index == 0
    assert visible.end_index == 11
    assert visible.count == 12


def test_visible_range_follows_scroll():
    visible = compute_visible_range(_series(50), _state(scroll=250.0), VIEWPORT, AXIS)

    assert visible.start_index == 10
    assert visible.end_index == 21


def test_end_index_is_capped_at_last_candle():
    visible = compute_visible_range(_series(15), _state(scroll=240.0), VIEWPORT, AXIS)

    assert (visible.start_index, visible.end_index) == (10, 14)


def test_extrema_cover_only_visible_candles():
    series = _series(50, high={40: 1000.0})

    visible = compute_visible_range(series, _state(), VIEWPORT, AXIS)

    assert visible.max_price == 110.0 + 11
    assert visible.min_price == 90.0
    assert visible.max_volume == 1011.0

    scrolled = compute_visible_range(series, _state(scroll=24.0 * 35), VIEWPORT, AXIS)
    assert scrolled.max_price == 1000.0


def test_indices_stay_inside_series_for_any_state():
    rng = random.Random(3)
    for _ in range(300):
        count = rng.randint(1, 80)
        state = _state(
            scroll=rng.uniform(0.0, 5000.0),
            width=rng.uniform(10.0, 100.0),
            spacing=rng.choice([0.0, 4.0, 8.0]),
        )
        visible = compute_visible_range(_series(count), state, VIEWPORT, AXIS)
        assert visible is not None
        assert 0 <= visible.start_index <= visible.end_index <= count - 1
        assert visible.max_price >= visible.min_price


def test_single_candle_in_wide_viewport():
    series = CandleSeries([Candle(0, 10.0, 12.0, 9.0, 11.0, 500.0)])

    visible = compute_visible_range(series, _state(), VIEWPORT, AXIS)

    assert visible.start_index == visible.end_index == 0
    assert visible.max_price == 12.0
    assert visible.min_price == 9.0
    assert visible.max_volume == 500.0


def test_nothing_visible_for_empty_series_or_narrow_viewport():
    assert compute_visible_range(CandleSeries(), _state(), VIEWPORT, AXIS) is None
    assert compute_visible_range(_series(10), _state(), 50.0, AXIS) is None


def test_content_width_and_scroll_limit():
    state = _state()

    assert content_width_px(30, state, AXIS) == 24.0 * 30 + AXIS
    assert max_scroll_offset(30, state, VIEWPORT, AXIS) == 24.0 * 30 + AXIS - VIEWPORT
    assert max_scroll_offset(3, state, VIEWPORT, AXIS) == 0.0


def test_state_round_trips_through_dict():
    state = _state(scroll=12.5, width=33.0)

    assert ViewportState.from_dict(state.to_dict()) == state
    assert state.stride_px == 37.0
