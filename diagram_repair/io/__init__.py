"""
Stream decoding
"""
from .sse_decoder import (
    StreamError,
    iter_cumulative_text,
    decode_stream,
    decode_stream_alt,
    aiter_cumulative_text,
    adecode_stream,
)

__all__ = [
    "StreamError",
    "iter_cumulative_text",
    "decode_stream",
    "decode_stream_alt",
    "aiter_cumulative_text",
    "adecode_stream",
]
