"""Boundary to the platform renderer: anything that can fill, stroke and print."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Protocol, Tuple

from .primitives import FillRect, Line, Primitive, Text

__all__ = ["Surface", "RecordingSurface", "replay"]


class Surface(Protocol):
    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None: ...

    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, color: str, stroke_width: float
    ) -> None: ...

    def draw_text(self, x: float, y: float, text: str, style: Dict[str, Any]) -> None: ...


class RecordingSurface:
    """Surface that keeps every call, e.g. for snapshots and tests."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, tuple]] = []

    def fill_rect(self, x, y, w, h, color) -> None:
        self.calls.append(("fill_rect", (x, y, w, h, color)))

    def draw_line(self, x1, y1, x2, y2, color, stroke_width) -> None:
        self.calls.append(("draw_line", (x1, y1, x2, y2, color, stroke_width)))

    def draw_text(self, x, y, text, style) -> None:
        self.calls.append(("draw_text", (x, y, text, style)))


def replay(primitives: Iterable[Primitive], surface: Surface) -> int:
    """Issue each primitive to ``surface`` in list order; returns the call count."""
    count = 0
    for primitive in primitives:
        if isinstance(primitive, FillRect):
            surface.fill_rect(
                primitive.x, primitive.y, primitive.width, primitive.height, primitive.color
            )
        elif isinstance(primitive, Line):
            surface.draw_line(
                primitive.x1, primitive.y1, primitive.x2, primitive.y2,
                primitive.color, primitive.stroke_width,
            )
        elif isinstance(primitive, Text):
            style = {"color": primitive.color, "size": primitive.size, "align": primitive.align}
            surface.draw_text(primitive.x, primitive.y, primitive.text, style)
        else:
            raise TypeError(f"Unsupported draw primitive: {primitive!r}")
        count += 1
    return count
