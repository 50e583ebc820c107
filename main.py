import logging
from dataclasses import replace
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
import uvicorn

from candlechart import ChartConfig, ChartSession, ChartLayout, Selection, ViewportState
from candlechart.config import BEAR_COLOR, BULL_COLOR
from candlechart.gestures import clamp
from candlechart.series import CandleSeries
from candlechart.synthetic import generate_series


DEFAULT_SEED = 7
DEFAULT_COUNT = 100
MAX_COUNT = 5000
DEMO_CANDLE_WIDTH = 20.0
MAX_CANVAS_SIDE = 8192.0

DEMO_CONFIG = ChartConfig(initial_candle_width_px=DEMO_CANDLE_WIDTH)


def normalize_count(count: Optional[int]) -> int:
    if count is None:
        return DEFAULT_COUNT
    if not 1 <= count <= MAX_COUNT:
        raise ValueError(f"캔들 개수는 1 ~ {MAX_COUNT} 사이여야 합니다.")
    return count


def normalize_canvas(
    canvas_width: Optional[float], canvas_height: Optional[float], density: float
) -> Tuple[float, float]:
    """Fill in the phone-sized default canvas and reject nonsense sizes."""
    if density <= 0:
        raise ValueError("density는 0보다 커야 합니다.")
    default_width, default_height = DEMO_CONFIG.default_canvas_size(density)
    width = default_width if canvas_width is None else canvas_width
    height = default_height if canvas_height is None else canvas_height
    if not (0 < width <= MAX_CANVAS_SIDE and 0 < height <= MAX_CANVAS_SIDE):
        raise ValueError("캔버스 크기가 올바르지 않습니다.")
    return width, height


@lru_cache(maxsize=32)
def get_demo_series(seed: int, count: int) -> CandleSeries:
    # Cached so the same (seed, count) keeps its series identity between requests.
    return generate_series(count=count, seed=seed, ma_window=DEMO_CONFIG.ma_window)


def build_session(
    seed: int,
    count: Optional[int],
    scroll: float,
    width: Optional[float],
    selected: Optional[int],
    canvas_width: Optional[float],
    canvas_height: Optional[float],
    density: float,
) -> ChartSession:
    """Rebuild the chart session from the state the client sends back."""
    series = get_demo_series(seed, normalize_count(count))
    canvas = normalize_canvas(canvas_width, canvas_height, density)
    session = ChartSession(series, DEMO_CONFIG, canvas, density)
    if width is not None:
        session.state = replace(
            session.state,
            candle_width_px=clamp(
                width, DEMO_CONFIG.min_candle_width_px, DEMO_CONFIG.max_candle_width_px
            ),
        )
    session.handle_scroll(scroll)
    if selected is not None and 0 <= selected < len(series):
        session.selection = Selection(index=selected, x=0.0, y=0.0)
    return session


def session_payload(session: ChartSession) -> Dict[str, Any]:
    visible = session.visible_range()
    candle = session.selected_candle
    layout = ChartLayout.from_canvas(session.canvas_size, session.config, session.density)
    return {
        "state": session.state.to_dict(),
        "visible_range": visible.to_dict() if visible else None,
        "selected_index": session.selection.index if session.selection else None,
        "selected_candle": candle.to_dict() if candle else None,
        "layout": {
            "width": layout.canvas_width,
            "height": layout.canvas_height,
            "plot_x": layout.plot_x,
            "price_height": layout.price_height,
        },
        "primitives": [primitive.to_dict() for primitive in session.render()],
    }


app = FastAPI(title="Candle Viewport Demo")


@app.get("/api/series")
def read_series(seed: int = DEFAULT_SEED, count: Optional[int] = None) -> Dict[str, Any]:
    try:
        series = get_demo_series(seed, normalize_count(count))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "seed": seed,
        "count": len(series),
        "candles": [candle.to_dict() for candle in series],
    }


@app.get("/api/frame")
def read_frame(
    seed: int = DEFAULT_SEED,
    count: Optional[int] = None,
    scroll: float = 0.0,
    width: Optional[float] = None,
    selected: Optional[int] = None,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None,
    density: float = 1.0,
) -> Dict[str, Any]:
    try:
        session = build_session(
            seed, count, scroll, width, selected, canvas_width, canvas_height, density
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session_payload(session)


@app.get("/api/zoom")
def read_zoom(width: float = DEMO_CANDLE_WIDTH, scale: float = 1.0) -> Dict[str, Any]:
    session = ChartSession(config=DEMO_CONFIG)
    session.state = ViewportState(
        candle_width_px=width, candle_spacing_px=DEMO_CONFIG.candle_spacing_px
    )
    return session.handle_zoom(scale).to_dict()


@app.get("/api/tap")
def read_tap(
    x: float,
    y: float = 0.0,
    seed: int = DEFAULT_SEED,
    count: Optional[int] = None,
    scroll: float = 0.0,
    width: Optional[float] = None,
    selected: Optional[int] = None,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None,
    density: float = 1.0,
) -> Dict[str, Any]:
    try:
        session = build_session(
            seed, count, scroll, width, selected, canvas_width, canvas_height, density
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    selection = session.handle_tap(x, y)
    candle = session.selected_candle
    return {
        "selection": selection.to_dict() if selection else None,
        "selected_candle": candle.to_dict() if candle else None,
    }


@app.get("/api/scroll")
def read_scroll(
    offset: float,
    seed: int = DEFAULT_SEED,
    count: Optional[int] = None,
    width: Optional[float] = None,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None,
    density: float = 1.0,
) -> Dict[str, Any]:
    try:
        session = build_session(
            seed, count, 0.0, width, None, canvas_width, canvas_height, density
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.handle_scroll(offset).to_dict()


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    """Serve a single canvas page that replays the planned primitives."""
    template = """
<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>캔들 차트 · 뷰포트 데모</title>
    <style>
        :root {
            color-scheme: dark;
        }
        body {
            margin: 0;
            font-family: "Pretendard", "Inter", system-ui, sans-serif;
            background-color: #000000;
            color: #c7cfde;
        }
        header {
            padding: 0.95rem 1.75rem;
            border-bottom: 1px solid #1c2032;
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 0.85rem;
        }
        header h1 {
            font-size: 1rem;
            font-weight: 500;
            margin: 0;
            color: #e3e9ff;
        }
        main {
            padding: 1rem 1.5rem;
        }
        canvas {
            display: block;
            border: 1px solid #161a28;
            border-radius: 10px;
            touch-action: none;
        }
        .detail {
            margin-top: 0.75rem;
            font-family: "JetBrains Mono", "Roboto Mono", monospace;
            font-size: 0.8rem;
        }
        .detail .up { color: %(up)s; }
        .detail .down { color: %(down)s; }
    </style>
</head>
<body>
    <header>
        <h1>캔들 차트 · 줌/스크롤/선택</h1>
        <span id="range-meta">불러오는 중...</span>
    </header>
    <main>
        <canvas id="chart"></canvas>
        <div class="detail" id="detail">캔들을 탭하면 상세 정보가 표시됩니다.</div>
    </main>
    <script>
        const canvas = document.getElementById("chart");
        const ctx = canvas.getContext("2d");
        const detail = document.getElementById("detail");
        const rangeMeta = document.getElementById("range-meta");
        const state = {
            scroll: 0,
            width: null,
            selected: null,
            layout: null,
        };
        let pending = null;

        const query = (extra = {}) => {
            const params = new URLSearchParams({
                scroll: state.scroll,
                canvas_width: canvas.width,
                canvas_height: canvas.height,
                ...extra,
            });
            if (state.width !== null) params.set("width", state.width);
            if (state.selected !== null) params.set("selected", state.selected);
            return params.toString();
        };

        const drawPrimitive = (p) => {
            if (p.kind === "rect") {
                ctx.fillStyle = p.color;
                ctx.fillRect(p.x, p.y, p.width, p.height);
            } else if (p.kind === "line") {
                ctx.strokeStyle = p.color;
                ctx.lineWidth = p.stroke_width;
                ctx.beginPath();
                ctx.moveTo(p.x1, p.y1);
                ctx.lineTo(p.x2, p.y2);
                ctx.stroke();
            } else if (p.kind === "text") {
                ctx.fillStyle = p.color;
                ctx.font = `${p.size}px sans-serif`;
                ctx.textAlign = p.align;
                ctx.textBaseline = "middle";
                ctx.fillText(p.text, p.x, p.y);
            }
        };

        const showDetail = (candle) => {
            if (!candle) return;
            const cls = candle.close >= candle.open ? "up" : "down";
            const when = new Date(candle.timestamp).toLocaleString();
            detail.innerHTML =
                `<span class="${cls}">${when}</span> · O ${candle.open.toFixed(2)} ` +
                `H ${candle.high.toFixed(2)} L ${candle.low.toFixed(2)} ` +
                `C ${candle.close.toFixed(2)} · V ${Math.trunc(candle.volume)}`;
        };

        const renderFrame = async () => {
            const response = await fetch(`/api/frame?${query()}`);
            if (!response.ok) {
                rangeMeta.textContent = "프레임을 불러오지 못했습니다.";
                return;
            }
            const frame = await response.json();
            state.scroll = frame.state.scroll_offset_px;
            state.width = frame.state.candle_width_px;
            state.layout = frame.layout;
            ctx.clearRect(0, 0, canvas.width, canvas.height);
            frame.primitives.forEach(drawPrimitive);
            const range = frame.visible_range;
            rangeMeta.textContent = range
                ? `#${range.start_index} ~ #${range.end_index}`
                : "표시할 캔들이 없습니다.";
            showDetail(frame.selected_candle);
        };

        const scheduleRender = () => {
            if (pending) return;
            pending = requestAnimationFrame(async () => {
                pending = null;
                await renderFrame();
            });
        };

        canvas.addEventListener("wheel", async (event) => {
            event.preventDefault();
            if (event.ctrlKey) {
                const scale = Math.exp(-event.deltaY / 200);
                const response = await fetch(
                    `/api/zoom?width=${state.width}&scale=${scale}`
                );
                const next = await response.json();
                state.width = next.candle_width_px;
            } else {
                const delta = event.deltaX || event.deltaY;
                const response = await fetch(
                    `/api/scroll?${query({ offset: state.scroll + delta })}`
                );
                const next = await response.json();
                state.scroll = next.scroll_offset_px;
            }
            scheduleRender();
        }, { passive: false });

        canvas.addEventListener("click", async (event) => {
            if (!state.layout) return;
            const x = event.offsetX - state.layout.plot_x;
            const response = await fetch(`/api/tap?${query({ x, y: event.offsetY })}`);
            const result = await response.json();
            if (result.selection) {
                state.selected = result.selection.index;
                scheduleRender();
            }
        });

        const resize = () => {
            canvas.width = Math.min(document.body.clientWidth - 48, 1400);
            canvas.height = 450;
            scheduleRender();
        };
        window.addEventListener("resize", resize);
        resize();
    </script>
</body>
</html>
        """
    return template.replace("%(up)s", BULL_COLOR).replace("%(down)s", BEAR_COLOR)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
