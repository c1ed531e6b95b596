"""Shared fixtures: sample documents, event framing and a recording logger."""

import json
from typing import Callable, List

import pytest

from diagram_repair.logger import RepairLogger

SAMPLE_DRAWIO = (
    '<mxfile host="app.diagrams.net">'
    '<diagram id="d1" name="Page-1">'
    '<mxGraphModel dx="800" dy="600" grid="1">'
    '<root>'
    '<mxCell id="0"/>'
    '<mxCell id="1" parent="0"/>'
    '<mxCell id="start" value="Start &amp; init" style="ellipse;whiteSpace=wrap;" vertex="1" parent="1">'
    '<mxGeometry x="40" y="40" width="120" height="60" as="geometry"/>'
    '</mxCell>'
    '<mxCell id="check" value="OK?" style="rhombus;" vertex="1" parent="1">'
    '<mxGeometry x="40" y="160" width="120" height="80" as="geometry"/>'
    '</mxCell>'
    '<mxCell id="e1" style="edgeStyle=orthogonalEdgeStyle;" edge="1" parent="1" source="start" target="check">'
    '<mxGeometry relative="1" as="geometry"/>'
    '</mxCell>'
    '</root>'
    '</mxGraphModel>'
    '</diagram>'
    '</mxfile>'
)

SAMPLE_ELEMENTS = [
    {"id": "a", "type": "rectangle", "x": 0, "y": 0, "width": 100, "height": 50, "label": {"text": "Load"}},
    {"id": "b", "type": "diamond", "x": 20, "y": 80, "width": 100, "height": 50, "label": {"text": "Valid?"}},
    {"id": "c", "type": "arrow", "x": 0, "y": 0, "start": {"id": "a"}, "end": {"id": "b"}},
]


@pytest.fixture
def sample_drawio() -> str:
    """Complete draw.io document with two vertices and one edge."""
    return SAMPLE_DRAWIO


@pytest.fixture
def sample_elements_json() -> str:
    """Element array with two shapes and an arrow bound to both."""
    return json.dumps(SAMPLE_ELEMENTS, indent=2)


@pytest.fixture
def repair_logger() -> RepairLogger:
    """Logger keeping warning records."""
    return RepairLogger(record_warnings=True)


def sse_event(content: str, delimiter: str = "\n\n") -> str:
    """One 'data: {"content": ...}' unit."""
    return "data: " + json.dumps({"content": content}, ensure_ascii=False) + delimiter


def split_fragments(text: str, size: int) -> List[str]:
    return [text[i:i + size] for i in range(0, len(text), size)]


@pytest.fixture
def make_stream() -> Callable[..., List[str]]:
    """Build framed stream chunks from content fragments, terminated by the sentinel."""
    def _make(fragments: List[str], delimiter: str = "\n\n", done: bool = True) -> List[str]:
        chunks = [sse_event(f, delimiter) for f in fragments]
        if done:
            chunks.append("data: [DONE]" + delimiter)
        return chunks
    return _make
