"""
Intermediate model

Shape descriptors, points and connector results used by the geometry engine,
and the id-indexed element table used to resolve connector bindings
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..config import MIN_SHAPE_EXTENT

RECTANGLE = "rectangle"
DIAMOND = "diamond"
ELLIPSE = "ellipse"

TOP = "top"
BOTTOM = "bottom"
LEFT = "left"
RIGHT = "right"
EDGE_NAMES = (TOP, BOTTOM, LEFT, RIGHT)


@dataclass(frozen=True)
class Point:
    """Point in diagram coordinates"""
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return ((other.x - self.x) ** 2 + (other.y - self.y) ** 2) ** 0.5


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    Bounding box and kind of a node

    width/height are read through ``w``/``h``, which never drop below
    MIN_SHAPE_EXTENT, so zero-area shapes stay usable.
    """
    kind: str
    x: float
    y: float
    width: float
    height: float

    @property
    def w(self) -> float:
        return max(float(self.width), MIN_SHAPE_EXTENT)

    @property
    def h(self) -> float:
        return max(float(self.height), MIN_SHAPE_EXTENT)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def center_y(self) -> float:
        return self.y + self.h / 2

    @property
    def half_w(self) -> float:
        return self.w / 2

    @property
    def half_h(self) -> float:
        return self.h / 2

    @classmethod
    def from_element(cls, element: Dict[str, Any], default_size: float = 100.0) -> "ShapeDescriptor":
        """
        Build a descriptor from an element object

        Missing or zero width/height fall back to default_size; unknown kinds
        are kept as-is and projected as rectangles.
        """
        kind = str(element.get("type") or RECTANGLE)
        return cls(
            kind=kind,
            x=_number(element.get("x"), 0.0),
            y=_number(element.get("y"), 0.0),
            width=_number(element.get("width"), 0.0) or default_size,
            height=_number(element.get("height"), 0.0) or default_size,
        )


@dataclass(frozen=True)
class ConnectorResult:
    """Start and end anchor of a connector"""
    start: Point
    end: Point


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    return default


class ElementIndex:
    """
    id -> element lookup table over a document's element list

    Bindings between elements are resolved through ids only, so cyclic,
    dangling and self references are all plain lookups.
    """

    def __init__(self, elements: Iterable[Dict[str, Any]]):
        self._elements: List[Dict[str, Any]] = [e for e in elements if isinstance(e, dict)]
        self._by_id: Dict[str, int] = {}
        for pos, element in enumerate(self._elements):
            element_id = element.get("id")
            # First occurrence wins for duplicated ids
            if isinstance(element_id, str) and element_id not in self._by_id:
                self._by_id[element_id] = pos

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._elements)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._by_id

    def get(self, element_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if element_id is None:
            return None
        pos = self._by_id.get(element_id)
        if pos is None:
            return None
        return self._elements[pos]
