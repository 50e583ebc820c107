from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_frame_returns_primitives_for_default_view():
    response = client.get("/api/frame", params={"seed": 7, "count": 100})

    assert response.status_code == 200
    payload = response.json()
    assert payload["state"]["candle_width_px"] == 20.0
    assert payload["visible_range"]["start_index"] == 0
    assert payload["layout"]["plot_x"] == 80.0
    assert payload["primitives"][0]["kind"] == "rect"
    assert payload["primitives"][0]["role"] == "background"
    assert payload["selected_candle"] is None


def test_frame_clamps_scroll_and_reports_selection():
    response = client.get(
        "/api/frame",
        params={"count": 100, "scroll": 1e9, "selected": 99, "width": 20},
    )

    payload = response.json()
    assert payload["state"]["scroll_offset_px"] == 24.0 * 100 + 80.0 - 360.0
    assert payload["visible_range"]["end_index"] == 99
    assert payload["selected_index"] == 99
    assert payload["selected_candle"]["timestamp"] > 0
    assert payload["primitives"][-1]["role"] == "selection"


def test_invalid_parameters_are_rejected():
    assert client.get("/api/frame", params={"count": 0}).status_code == 400
    assert client.get("/api/frame", params={"density": 0}).status_code == 400
    assert client.get("/api/frame", params={"canvas_width": -1}).status_code == 400
    assert client.get("/api/series", params={"count": 100000}).status_code == 400


def test_zoom_route_clamps_width():
    assert client.get("/api/zoom", params={"width": 20, "scale": 100}).json()["candle_width_px"] == 100.0
    assert client.get("/api/zoom", params={"width": 20, "scale": 0.01}).json()["candle_width_px"] == 10.0
    assert client.get("/api/zoom", params={"width": 20, "scale": 1.5}).json()["candle_width_px"] == 30.0


def test_tap_route_selects_and_keeps_selection_on_miss():
    hit = client.get("/api/tap", params={"x": 14, "y": 40}).json()
    assert hit["selection"] == {"index": 0, "x": 14.0, "y": 40.0}
    assert hit["selected_candle"] is not None

    miss = client.get("/api/tap", params={"x": -50, "selected": 3}).json()
    assert miss["selection"]["index"] == 3


def test_scroll_route_clamps_offset():
    assert client.get("/api/scroll", params={"offset": -10}).json()["scroll_offset_px"] == 0.0
    assert client.get("/api/scroll", params={"offset": 48}).json()["scroll_offset_px"] == 48.0


def test_series_route_and_index_page():
    series = client.get("/api/series", params={"seed": 1, "count": 30}).json()
    assert series["count"] == 30
    assert series["candles"][19]["moving_average"] is not None
    assert series["candles"][18]["moving_average"] is None

    page = client.get("/")
    assert page.status_code == 200
    assert "<canvas" in page.text
