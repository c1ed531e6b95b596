from .intermediate import (
    Point,
    ShapeDescriptor,
    ConnectorResult,
    ElementIndex,
    RECTANGLE,
    DIAMOND,
    ELLIPSE,
    TOP,
    BOTTOM,
    LEFT,
    RIGHT,
    EDGE_NAMES,
)

__all__ = [
    "Point",
    "ShapeDescriptor",
    "ConnectorResult",
    "ElementIndex",
    "RECTANGLE",
    "DIAMOND",
    "ELLIPSE",
    "TOP",
    "BOTTOM",
    "LEFT",
    "RIGHT",
    "EDGE_NAMES",
]
