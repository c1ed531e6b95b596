"""
Streamed response decoding

Turns a stream of event-framed chunks ("data: {json}" units separated by a
blank line, or by a single newline for non-conforming senders) into the
growing text the model has produced so far. Progress is always reported as the
full accumulated text, never as the latest fragment.
"""
import codecs
import json
from typing import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator, Optional, Union

from ..config import RepairConfig, default_config, ALT_DELIMITER
from ..logger import RepairLogger, get_logger

Chunk = Union[bytes, bytearray, str]
ProgressCallback = Callable[[str], None]


class StreamError(Exception):
    """Error reported by the upstream service inside the stream"""

    def __init__(self, message: str, raw_event: str):
        super().__init__(message)
        self.message = message
        self.raw_event = raw_event


class _FrameSplitter:
    """Incremental text decoder and delimiter splitter"""

    def __init__(self, delimiter: str):
        if not delimiter:
            raise ValueError("Event delimiter must not be empty")
        self.delimiter = delimiter
        self.buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: Chunk) -> list:
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        self.buffer += chunk
        units = self.buffer.split(self.delimiter)
        # Last piece may be an incomplete unit
        self.buffer = units.pop()
        return units

    def flush(self) -> list:
        rest = self.buffer + self._decoder.decode(b"", final=True)
        self.buffer = ""
        return [rest] if rest.strip() else []


def _decode_unit(unit: str, config: RepairConfig, logger: RepairLogger) -> Optional[str]:
    """
    Decode one framed unit

    Returns:
        The content fragment, or None for the sentinel and for skipped units

    Raises:
        StreamError: the unit carries an 'error' field
    """
    trimmed = unit.strip()
    if not trimmed or trimmed == config.done_sentinel:
        return None

    prefix = config.event_prefix
    marker = prefix.rstrip()
    data_lines = []
    for line in trimmed.splitlines():
        line = line.strip()
        if line.startswith(prefix):
            data_lines.append(line[len(prefix):])
        elif marker and line.startswith(marker):
            data_lines.append(line[len(marker):].lstrip())
    if not data_lines:
        logger.warn_skipped_event(trimmed, "no data prefix")
        return None

    payload = "\n".join(data_lines)
    try:
        data = json.loads(payload)
    except ValueError as e:
        logger.warn_skipped_event(trimmed, f"invalid JSON payload: {e}")
        return None
    if not isinstance(data, dict):
        logger.warn_skipped_event(trimmed, "payload is not an object")
        return None

    error = data.get("error")
    if error:
        raise StreamError(str(error), trimmed)

    content = data.get("content")
    if isinstance(content, str):
        return content
    logger.debug(f"Event without content: {trimmed[:80]}")
    return None


def iter_cumulative_text(
    chunks: Iterable[Chunk],
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> Iterator[str]:
    """
    Yield the accumulated text after every content-bearing event

    Args:
        chunks: Raw stream chunks (bytes are decoded as UTF-8)
        delimiter: Event delimiter (config.event_delimiter if None)
        config: RepairConfig instance (uses default_config if None)
        logger: RepairLogger instance (uses the default logger if None)

    The chunk source is closed when the generator finishes, raises, or is
    closed by the caller.

    Raises:
        StreamError: an event carried an 'error' field
    """
    config = config or default_config
    logger = logger or get_logger()
    splitter = _FrameSplitter(config.event_delimiter if delimiter is None else delimiter)
    accumulated = ""
    iterator = iter(chunks)
    try:
        for chunk in iterator:
            for unit in splitter.feed(chunk):
                content = _decode_unit(unit, config, logger)
                if content is not None:
                    accumulated += content
                    yield accumulated
        for unit in splitter.flush():
            content = _decode_unit(unit, config, logger)
            if content is not None:
                accumulated += content
                yield accumulated
    finally:
        for source in (iterator, chunks):
            close = getattr(source, "close", None)
            if callable(close):
                close()
                break


def decode_stream(
    chunks: Iterable[Chunk],
    on_chunk: Optional[ProgressCallback] = None,
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """
    Decode a whole stream, reporting progress through on_chunk

    on_chunk receives the full accumulated text after every content event.

    Returns:
        The final accumulated text
    """
    accumulated = ""
    for accumulated in iter_cumulative_text(chunks, delimiter, config, logger):
        if on_chunk:
            on_chunk(accumulated)
    return accumulated


def decode_stream_alt(
    chunks: Iterable[Chunk],
    on_chunk: Optional[ProgressCallback] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """decode_stream for senders separating events with a single newline"""
    return decode_stream(chunks, on_chunk, ALT_DELIMITER, config, logger)


async def aiter_cumulative_text(
    chunks: AsyncIterable[Chunk],
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> AsyncIterator[str]:
    """Async counterpart of iter_cumulative_text for async transports"""
    config = config or default_config
    logger = logger or get_logger()
    splitter = _FrameSplitter(config.event_delimiter if delimiter is None else delimiter)
    accumulated = ""
    iterator = chunks.__aiter__()
    try:
        async for chunk in iterator:
            for unit in splitter.feed(chunk):
                content = _decode_unit(unit, config, logger)
                if content is not None:
                    accumulated += content
                    yield accumulated
        for unit in splitter.flush():
            content = _decode_unit(unit, config, logger)
            if content is not None:
                accumulated += content
                yield accumulated
    finally:
        for source in (iterator, chunks):
            aclose = getattr(source, "aclose", None)
            if callable(aclose):
                await aclose()
                break


async def adecode_stream(
    chunks: AsyncIterable[Chunk],
    on_chunk: Optional[ProgressCallback] = None,
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """Async counterpart of decode_stream"""
    accumulated = ""
    async for accumulated in aiter_cumulative_text(chunks, delimiter, config, logger):
        if on_chunk:
            on_chunk(accumulated)
    return accumulated
