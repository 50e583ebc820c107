import pytest

from candlechart.mapper import CoordinateMapper, volume_to_bar_height
from candlechart.viewport import ViewportState, VisibleRange


def _mapper(max_price=200.0, min_price=100.0, start=10, end=20, height=300.0):
    state = ViewportState(scroll_offset_px=240.0, candle_width_px=20.0, candle_spacing_px=4.0)
    visible = VisibleRange(
        start_index=start,
        end_index=end,
        max_price=max_price,
        min_price=min_price,
        max_volume=1000.0,
    )
    return CoordinateMapper(state, visible, height)


def test_price_to_y_maps_extrema_to_pane_edges():
    mapper = _mapper()

    assert mapper.price_to_y(200.0) == 0.0
    assert mapper.price_to_y(100.0) == 300.0
    assert mapper.price_to_y(150.0) == 150.0


def test_price_to_y_is_non_increasing_in_price():
    mapper = _mapper()
    prices = [90.0 + i * 2.5 for i in range(50)]

    ys = [mapper.price_to_y(p) for p in prices]

    assert all(a >= b for a, b in zip(ys, ys[1:]))


def test_flat_range_maps_every_price_to_vertical_center():
    mapper = _mapper(max_price=5.0, min_price=5.0)

    assert mapper.price_to_y(5.0) == 150.0
    assert mapper.price_to_y(-40.0) == 150.0
    assert mapper.price_to_y(1e9) == 150.0


def test_index_to_x_is_relative_to_visible_start():
    mapper = _mapper()

    assert mapper.index_to_x(10) == 4.0
    assert mapper.index_to_x(12) == 52.0
    assert mapper.center_x(12) == 62.0


def test_center_tap_resolves_to_same_candle():
    mapper = _mapper()

    for index in range(10, 21):
        assert mapper.x_to_index(mapper.center_x(index)) == index


def test_tap_left_of_first_slot_falls_before_start():
    mapper = _mapper(start=0, end=10)

    assert mapper.x_to_index(0.0) == -1
    assert mapper.x_to_index(-30.0) == -2
    assert mapper.x_to_index(4.0) == 0
    assert mapper.x_to_index(27.9) == 0
    assert mapper.x_to_index(28.0) == 1


def test_volume_bar_height_scales_and_guards_zero():
    mapper = _mapper(height=100.0)

    assert mapper.volume_to_bar_height(500.0, 1000.0) == pytest.approx(50.0)
    assert mapper.volume_to_bar_height(1000.0, 1000.0) == pytest.approx(100.0)
    assert mapper.volume_to_bar_height(0.0, 0.0) == 0.0
    assert volume_to_bar_height(10.0, 0.0, 100.0) == 0.0
