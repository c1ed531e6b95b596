"""
diagram_repair

Turns streamed, possibly truncated or malformed model output into well-formed
diagram documents, and computes connector anchors between diagram shapes
"""
from .config import RepairConfig, default_config
from .generation import generate_document, agenerate_document, repair_document
from .geom import project, route
from .io import StreamError, decode_stream, iter_cumulative_text
from .model import ShapeDescriptor, Point, ConnectorResult
from .repair import markup_pipeline, elements_pipeline

__all__ = [
    "RepairConfig",
    "default_config",
    "generate_document",
    "agenerate_document",
    "repair_document",
    "project",
    "route",
    "StreamError",
    "decode_stream",
    "iter_cumulative_text",
    "ShapeDescriptor",
    "Point",
    "ConnectorResult",
    "markup_pipeline",
    "elements_pipeline",
]
