"""
Connector routing

Chooses the pair of boundary points used to anchor a straight connector
between two shapes
"""
from itertools import product
from typing import Optional

from ..config import RepairConfig, default_config
from ..model.intermediate import (
    ShapeDescriptor, Point, ConnectorResult, EDGE_NAMES, TOP, BOTTOM, LEFT, RIGHT
)
from .projection import project


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _overlap_center(min1: float, max1: float, min2: float, max2: float) -> Optional[float]:
    """Midpoint of the overlap of [min1, max1] and [min2, max2], or None."""
    start = max(min1, min2)
    end = min(max1, max2)
    return (start + end) / 2 if start < end else None


def edge_point(
    shape: ShapeDescriptor,
    edge: str,
    toward: ShapeDescriptor,
    fixed: Optional[float] = None,
    config: Optional[RepairConfig] = None,
) -> Point:
    """
    Anchor point on one edge of a shape, projected onto its outline

    Args:
        shape: Shape owning the edge
        edge: top/bottom/left/right
        toward: The other shape of the connector
        fixed: Coordinate along the edge to use as-is (shared x for top/bottom,
            shared y for left/right). When None, the other shape's center is
            clamped into the edge span shrunk by the padding margin.
        config: RepairConfig instance (uses default_config if None)

    Returns:
        Point on the shape boundary
    """
    config = config or default_config
    pad_x = shape.w * config.edge_padding_ratio
    pad_y = shape.h * config.edge_padding_ratio

    if edge in (TOP, BOTTOM):
        box_x = fixed if fixed is not None else _clamp(toward.center_x, shape.left + pad_x, shape.right - pad_x)
        box_y = shape.top if edge == TOP else shape.bottom
    elif edge in (LEFT, RIGHT):
        box_x = shape.left if edge == LEFT else shape.right
        box_y = fixed if fixed is not None else _clamp(toward.center_y, shape.top + pad_y, shape.bottom - pad_y)
    else:
        raise ValueError(f"Unknown edge: {edge}")

    return project(shape, Point(box_x, box_y), edge)


def route(
    source: ShapeDescriptor,
    target: ShapeDescriptor,
    config: Optional[RepairConfig] = None,
) -> ConnectorResult:
    """
    Compute connector endpoints between two shapes

    Shapes sharing a horizontal span are joined bottom-to-top at the middle of
    the shared span; shapes sharing a vertical span are joined side-to-side.
    Otherwise the closest of the 16 edge pairings is used.
    """
    overlap_x = _overlap_center(source.left, source.right, target.left, target.right)
    if overlap_x is not None:
        if source.center_y < target.center_y:
            return ConnectorResult(
                start=edge_point(source, BOTTOM, target, overlap_x, config),
                end=edge_point(target, TOP, source, overlap_x, config),
            )
        return ConnectorResult(
            start=edge_point(source, TOP, target, overlap_x, config),
            end=edge_point(target, BOTTOM, source, overlap_x, config),
        )

    overlap_y = _overlap_center(source.top, source.bottom, target.top, target.bottom)
    if overlap_y is not None:
        if source.center_x < target.center_x:
            return ConnectorResult(
                start=edge_point(source, RIGHT, target, overlap_y, config),
                end=edge_point(target, LEFT, source, overlap_y, config),
            )
        return ConnectorResult(
            start=edge_point(source, LEFT, target, overlap_y, config),
            end=edge_point(target, RIGHT, source, overlap_y, config),
        )

    best: Optional[ConnectorResult] = None
    best_distance = float("inf")
    for start_edge, end_edge in product(EDGE_NAMES, EDGE_NAMES):
        start = edge_point(source, start_edge, target, None, config)
        end = edge_point(target, end_edge, source, None, config)
        distance = start.distance_to(end)
        if distance < best_distance:
            best_distance = distance
            best = ConnectorResult(start=start, end=end)

    # NaN distances never compare lower; fall back to the first pairing
    if best is None:
        best = ConnectorResult(
            start=edge_point(source, TOP, target, None, config),
            end=edge_point(target, TOP, source, None, config),
        )
    return best
