"""
Shape boundary projection

Maps a point on a shape's bounding box onto the shape's actual outline while
keeping the coordinate that runs along the requested edge
"""
from ..config import MIN_SHAPE_EXTENT
from ..model.intermediate import (
    ShapeDescriptor, Point, DIAMOND, ELLIPSE, TOP, BOTTOM, LEFT, RIGHT
)


def _is_degenerate(shape: ShapeDescriptor) -> bool:
    return shape.width <= MIN_SHAPE_EXTENT or shape.height <= MIN_SHAPE_EXTENT


def _boundary_point_diamond(shape: ShapeDescriptor, box_point: Point, edge: str) -> Point:
    """Point on the rhombus |x-cx|/hw + |y-cy|/hh = 1 in the edge's hemisphere."""
    cx, cy = shape.center_x, shape.center_y
    hw, hh = shape.half_w, shape.half_h
    if edge in (TOP, BOTTOM):
        ratio = min(abs(box_point.x - cx) / hw, 1.0)
        dy = hh * (1.0 - ratio)
        return Point(box_point.x, cy - dy if edge == TOP else cy + dy)
    if edge in (LEFT, RIGHT):
        ratio = min(abs(box_point.y - cy) / hh, 1.0)
        dx = hw * (1.0 - ratio)
        return Point(cx - dx if edge == LEFT else cx + dx, box_point.y)
    return box_point


def _boundary_point_ellipse(shape: ShapeDescriptor, box_point: Point, edge: str) -> Point:
    """Point on the ellipse ((x-cx)/hw)^2 + ((y-cy)/hh)^2 = 1 in the edge's hemisphere."""
    cx, cy = shape.center_x, shape.center_y
    hw, hh = shape.half_w, shape.half_h
    if edge in (TOP, BOTTOM):
        norm_x = (box_point.x - cx) / hw
        # Clamp for floating point overshoot
        dy = hh * max(0.0, 1.0 - norm_x * norm_x) ** 0.5
        return Point(box_point.x, cy - dy if edge == TOP else cy + dy)
    if edge in (LEFT, RIGHT):
        norm_y = (box_point.y - cy) / hh
        dx = hw * max(0.0, 1.0 - norm_y * norm_y) ** 0.5
        return Point(cx - dx if edge == LEFT else cx + dx, box_point.y)
    return box_point


def project(shape: ShapeDescriptor, box_point: Point, edge: str) -> Point:
    """
    Project a bounding-box point onto the shape outline

    Args:
        shape: Shape descriptor
        box_point: Point on the bounding box
        edge: Bounding-box side the point lies on (top/bottom/left/right)

    Returns:
        Point on the shape boundary. Rectangles, unknown kinds and degenerate
        (zero-width or zero-height) shapes return box_point unchanged.
    """
    kind = (shape.kind or "").lower()
    if kind not in (DIAMOND, ELLIPSE) or _is_degenerate(shape):
        return box_point
    if kind == DIAMOND:
        return _boundary_point_diamond(shape, box_point, edge)
    return _boundary_point_ellipse(shape, box_point, edge)
