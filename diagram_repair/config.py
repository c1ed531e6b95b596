"""
Configuration module

Holds framing, repair and geometry settings shared by every component
"""
from dataclasses import dataclass, field
from typing import Tuple

# Standard event delimiter and the single-newline mode some senders use instead
STANDARD_DELIMITER = "\n\n"
ALT_DELIMITER = "\n"

# Markup documents start at one of these tags
MARKUP_ROOT_TAGS: Tuple[str, ...] = ("mxfile", "mxGraphModel", "diagram")

# Shapes narrower than this are projected as plain rectangles
MIN_SHAPE_EXTENT = 1e-6


@dataclass
class RepairConfig:
    """Settings for stream decoding, document repair and connector routing"""
    # Stream framing
    event_delimiter: str = STANDARD_DELIMITER
    event_prefix: str = "data: "
    done_sentinel: str = "data: [DONE]"

    # Fenced block labels
    markup_fence_lang: str = "xml"
    json_fence_lang: str = "json"

    markup_root_tags: Tuple[str, ...] = field(default_factory=lambda: MARKUP_ROOT_TAGS)

    # Output formatting of element arrays
    json_indent: int = 2
    # Fixed pipelines re-run until the output stops changing, at most this many times
    settle_passes: int = 5

    # Geometry: inward padding of candidate edge points, as a ratio of the shape extent
    edge_padding_ratio: float = 0.1
    # Size assumed for elements that omit width/height
    default_element_size: float = 100.0


# Global default configuration instance
default_config = RepairConfig()
