"""
Unit tests for sse_decoder: cumulative progress, sentinel handling, error events, resource release.
"""
from __future__ import annotations

import asyncio
import json

import pytest

from diagram_repair.config import RepairConfig
from diagram_repair.io.sse_decoder import (
    StreamError,
    iter_cumulative_text,
    decode_stream,
    decode_stream_alt,
    adecode_stream,
)


class _Source:
    """Chunk source recording whether it was closed."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False

    def __iter__(self):
        return iter(self.chunks)

    def close(self):
        self.closed = True


# ---- cumulative progress ----
def test_callback_receives_cumulative_text(make_stream) -> None:
    seen = []
    result = decode_stream(make_stream(["Hel", "lo", " world"]), on_chunk=seen.append)
    assert seen == ["Hel", "Hello", "Hello world"]
    assert result == seen[-1]


def test_units_split_across_chunks_and_multibyte_characters(make_stream) -> None:
    fragments = ["<mxfile>", "流程", "图</mxfile>"]
    raw = "".join(make_stream(fragments)).encode("utf-8")
    # 3-byte pieces cut through both delimiters and UTF-8 sequences
    pieces = [raw[i:i + 3] for i in range(0, len(raw), 3)]
    seen = []
    result = decode_stream(pieces, on_chunk=seen.append)
    assert seen == ["<mxfile>", "<mxfile>流程", "<mxfile>流程图</mxfile>"]
    assert result == "<mxfile>流程图</mxfile>"


def test_empty_stream_returns_empty_text() -> None:
    seen = []
    assert decode_stream([], on_chunk=seen.append) == ""
    assert seen == []


def test_generator_yields_growing_snapshots(make_stream) -> None:
    snapshots = list(iter_cumulative_text(make_stream(["a", "b", "c"])))
    assert snapshots == ["a", "ab", "abc"]


# ---- sentinel and non-content units ----
def test_sentinel_adds_nothing_and_triggers_no_callback(make_stream) -> None:
    chunks = make_stream(["a"], done=False) + ["data: [DONE]\n\n"] + make_stream(["b"], done=False)
    seen = []
    assert decode_stream(chunks, on_chunk=seen.append) == "ab"
    assert seen == ["a", "ab"]


def test_garbled_units_are_skipped(make_stream, repair_logger) -> None:
    chunks = (
        make_stream(["a"], done=False)
        + ["data: {not json}\n\n", "event: ping\n\n", "data: [1, 2]\n\n"]
        + make_stream(["b"])
    )
    assert decode_stream(chunks, logger=repair_logger) == "ab"
    warnings = repair_logger.get_warnings()
    assert len(warnings) == 3
    assert all(w.warning_type == "skipped_event" for w in warnings)
    assert warnings[0].details["raw_event"] == "data: {not json}"


def test_non_string_content_is_ignored() -> None:
    chunks = ['data: {"content": null}\n\n', 'data: {"role": "assistant"}\n\n', 'data: {"content": "x"}\n\n']
    seen = []
    assert decode_stream(chunks, on_chunk=seen.append) == "x"
    assert seen == ["x"]


def test_prefix_without_space_is_accepted() -> None:
    assert decode_stream(['data:{"content": "x"}\n\n']) == "x"


def test_trailing_unit_without_delimiter_is_processed() -> None:
    chunks = ['data: {"content": "a"}\n\n', 'data: {"content": "b"}']
    assert decode_stream(chunks) == "ab"


# ---- delimiter modes ----
def test_alt_delimiter_mode(make_stream) -> None:
    seen = []
    result = decode_stream_alt(make_stream(["x", "y"], delimiter="\n"), on_chunk=seen.append)
    assert seen == ["x", "xy"]
    assert result == "xy"


def test_delimiter_from_config(make_stream) -> None:
    config = RepairConfig(event_delimiter="\n")
    assert decode_stream(make_stream(["x", "y"], delimiter="\n"), config=config) == "xy"


def test_custom_prefix_and_sentinel() -> None:
    config = RepairConfig(event_prefix="chunk: ", done_sentinel="chunk: END")
    chunks = ['chunk: {"content": "q"}\n\n', "chunk: END\n\n"]
    assert decode_stream(chunks, config=config) == "q"


# ---- upstream errors ----
def test_error_event_raises_with_raw_unit(make_stream) -> None:
    error_unit = "data: " + json.dumps({"error": "rate limited"})
    source = _Source(make_stream(["partial"], done=False) + [error_unit + "\n\n"] + make_stream(["never"]))
    seen = []
    with pytest.raises(StreamError) as exc_info:
        decode_stream(source, on_chunk=seen.append)
    assert exc_info.value.message == "rate limited"
    assert str(exc_info.value) == "rate limited"
    assert exc_info.value.raw_event == error_unit
    assert seen == ["partial"]
    assert source.closed


def test_empty_error_field_is_not_fatal() -> None:
    assert decode_stream(['data: {"error": "", "content": "ok"}\n\n']) == "ok"


# ---- resource release ----
def test_source_closed_after_completion(make_stream) -> None:
    source = _Source(make_stream(["a"]))
    decode_stream(source)
    assert source.closed


def test_source_closed_when_caller_stops_early(make_stream) -> None:
    source = _Source(make_stream(["a", "b", "c"]))
    snapshots = iter_cumulative_text(source)
    assert next(snapshots) == "a"
    snapshots.close()
    assert source.closed


def test_generator_source_is_closed(make_stream) -> None:
    state = {"closed": False}

    def chunks():
        try:
            yield from make_stream(["a", "b"])
        finally:
            state["closed"] = True

    snapshots = iter_cumulative_text(chunks())
    next(snapshots)
    snapshots.close()
    assert state["closed"]


def test_empty_delimiter_rejected() -> None:
    with pytest.raises(ValueError):
        decode_stream(["x"], delimiter="")


# ---- async ----
def test_async_decode_cumulative(make_stream) -> None:
    async def chunks():
        for chunk in make_stream(["a", "b", "c"]):
            await asyncio.sleep(0)
            yield chunk.encode("utf-8")

    seen = []
    result = asyncio.run(adecode_stream(chunks(), on_chunk=seen.append))
    assert seen == ["a", "ab", "abc"]
    assert result == "abc"


def test_async_error_closes_source(make_stream) -> None:
    state = {"closed": False}

    async def chunks():
        try:
            yield make_stream(["a"], done=False)[0]
            yield 'data: {"error": "boom"}\n\n'
            yield make_stream(["b"])[0]
        finally:
            state["closed"] = True

    with pytest.raises(StreamError):
        asyncio.run(adecode_stream(chunks()))
    assert state["closed"]
