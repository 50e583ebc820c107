"""Draw commands handed to the external renderer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Union

__all__ = ["FillRect", "Line", "Text", "Primitive", "DrawPrimitiveList"]


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: str
    role: str = ""

    kind = "rect"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    stroke_width: float = 1.0
    role: str = ""

    kind = "line"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: str
    size: float = 10.0
    align: str = "start"
    role: str = ""

    kind = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


Primitive = Union[FillRect, Line, Text]
DrawPrimitiveList = List[Primitive]
