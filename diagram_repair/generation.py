"""
Document generation driver

Feeds the growing model output through the repair pipeline for live preview,
commits the final text, and anchors connectors of committed element documents
"""
from typing import AsyncIterable, Callable, Iterable, Optional

from .config import RepairConfig, default_config
from .io.sse_decoder import Chunk, iter_cumulative_text, aiter_cumulative_text
from .logger import RepairLogger, get_logger
from .mapping.connectors import route_connectors
from .repair.pipeline import ELEMENTS, RepairPipeline, get_pipeline

PreviewCallback = Callable[[str], None]


def commit_document(
    text: str,
    pipeline: RepairPipeline,
    mode: str,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """Final repair of a complete response; element documents get their connectors routed"""
    committed = pipeline(text)
    if mode == ELEMENTS:
        committed = route_connectors(committed, config, logger)
    return committed


def repair_document(
    text: str,
    mode: str,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """
    Repair a complete model response

    Args:
        text: Raw model output
        mode: 'markup' or 'elements'
        config: RepairConfig instance (uses default_config if None)
        logger: RepairLogger instance (uses the default logger if None)
    """
    config = config or default_config
    pipeline = get_pipeline(mode, config, logger)
    return commit_document(text, pipeline, mode, config, logger)


def generate_document(
    chunks: Iterable[Chunk],
    mode: str,
    on_preview: Optional[PreviewCallback] = None,
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """
    Decode a streamed response into a committed document

    on_preview receives the repaired document after every content event.

    Returns:
        The committed document

    Raises:
        StreamError: the stream reported an error
    """
    config = config or default_config
    logger = logger or get_logger()
    pipeline = get_pipeline(mode, config, logger)

    accumulated = ""
    for accumulated in iter_cumulative_text(chunks, delimiter, config, logger):
        if on_preview:
            on_preview(pipeline(accumulated))

    logger.debug(f"Stream finished: {len(accumulated)} characters")
    return commit_document(accumulated, pipeline, mode, config, logger)


async def agenerate_document(
    chunks: AsyncIterable[Chunk],
    mode: str,
    on_preview: Optional[PreviewCallback] = None,
    delimiter: Optional[str] = None,
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> str:
    """Async counterpart of generate_document"""
    config = config or default_config
    logger = logger or get_logger()
    pipeline = get_pipeline(mode, config, logger)

    accumulated = ""
    async for accumulated in aiter_cumulative_text(chunks, delimiter, config, logger):
        if on_preview:
            on_preview(pipeline(accumulated))

    logger.debug(f"Stream finished: {len(accumulated)} characters")
    return commit_document(accumulated, pipeline, mode, config, logger)
