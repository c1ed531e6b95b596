"""
Connector mapping

Re-anchors the arrows and lines of a committed element document on the
shapes they are bound to
"""
import json
from typing import Any, Dict, Optional

from ..config import RepairConfig, default_config
from ..geom.routing import route
from ..logger import RepairLogger, get_logger
from ..model.intermediate import ElementIndex, ShapeDescriptor

CONNECTOR_TYPES = ("arrow", "line")


def _binding_id(element: Dict[str, Any], end: str) -> Optional[str]:
    """
    Id of the element bound to one end of a connector

    Accepts both the skeleton form ``{"start": {"id": ...}}`` and the
    ``startBinding.elementId`` form.
    """
    ref = element.get(end)
    if isinstance(ref, dict) and isinstance(ref.get("id"), str):
        return ref["id"]
    binding = element.get(f"{end}Binding")
    if isinstance(binding, dict) and isinstance(binding.get("elementId"), str):
        return binding["elementId"]
    return None


def _is_shape(element: Optional[Dict[str, Any]]) -> bool:
    return element is not None and element.get("type") not in CONNECTOR_TYPES


def route_connector(
    connector: Dict[str, Any],
    index: ElementIndex,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> Dict[str, Any]:
    """
    Return a copy of the connector anchored on its bound shapes

    Connectors whose ends do not both resolve to shapes keep their geometry.
    Zero width/height is raised to 1 so renderers do not drop the element.
    """
    config = config or default_config
    updated = dict(connector)

    start_id = _binding_id(connector, "start")
    end_id = _binding_id(connector, "end")
    source = index.get(start_id)
    target = index.get(end_id)

    if _is_shape(source) and _is_shape(target):
        result = route(
            ShapeDescriptor.from_element(source, config.default_element_size),
            ShapeDescriptor.from_element(target, config.default_element_size),
            config,
        )
        dx = result.end.x - result.start.x
        dy = result.end.y - result.start.y
        updated["x"] = result.start.x
        updated["y"] = result.start.y
        updated["points"] = [[0, 0], [dx, dy]]
        updated["width"] = abs(dx)
        updated["height"] = abs(dy)
    elif start_id is not None or end_id is not None:
        (logger or get_logger()).warn_unresolved_binding(connector.get("id"), start_id, end_id)

    if updated.get("width") == 0:
        updated["width"] = 1
    if updated.get("height") == 0:
        updated["height"] = 1
    return updated


def route_connectors(
    text: str,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """
    Anchor every bound arrow/line of a JSON element array

    Args:
        text: JSON array of element objects
        config: RepairConfig instance (uses default_config if None)
        logger: RepairLogger instance (uses the default logger if None)

    Returns:
        The re-serialized array, or text unchanged when it is not a JSON array
    """
    if not text or not isinstance(text, str):
        return text
    config = config or default_config

    try:
        elements = json.loads(text)
    except ValueError:
        return text
    if not isinstance(elements, list):
        return text

    index = ElementIndex(elements)
    routed = [
        route_connector(element, index, config, logger)
        if isinstance(element, dict) and element.get("type") in CONNECTOR_TYPES
        else element
        for element in elements
    ]
    return json.dumps(routed, indent=config.json_indent, ensure_ascii=False)
