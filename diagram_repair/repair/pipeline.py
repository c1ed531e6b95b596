"""
Repair pipelines

Composable post-processing of model output. A pipeline is an ordered list of
text -> text steps; each step runs through safe_step so a failing step leaves
the text as it was and the remaining steps still run. The fixed pipelines are
re-run until their output settles, so repairing a repaired document is a no-op.
"""
from functools import partial, wraps
from typing import Callable, Iterable, List, Optional

from ..config import RepairConfig, default_config
from ..logger import RepairLogger, get_logger
from .steps import clean_bom, extract_code_fence, unescape_html, extract_markup
from .markup import close_unclosed_tags
from .arrays import extract_json, extract_json_array_strict, repair_json, ensure_element_array

RepairStep = Callable[[str], str]

MARKUP = "markup"
ELEMENTS = "elements"


def _step_name(step: RepairStep) -> str:
    func = step.func if isinstance(step, partial) else step
    return getattr(func, "__name__", repr(func))


def safe_step(step: RepairStep, logger: Optional[RepairLogger] = None) -> RepairStep:
    """
    Wrap a step so that an exception or a non-string result turns it into a no-op

    Args:
        step: Step to wrap
        logger: RepairLogger receiving step failures (default logger if None)
    """
    name = _step_name(step)

    @wraps(step)
    def wrapper(text: str) -> str:
        try:
            result = step(text)
        except Exception as e:
            (logger or get_logger()).warn_step_failure(name, e)
            return text
        if not isinstance(result, str):
            return text
        return result

    return wrapper


class RepairPipeline:
    """Ordered composition of repair steps"""

    def __init__(
        self,
        steps: Optional[Iterable[RepairStep]] = None,
        logger: Optional[RepairLogger] = None,
        max_passes: int = 1,
    ):
        """
        Args:
            steps: Steps in application order
            logger: RepairLogger receiving step failures (default logger if None)
            max_passes: Upper bound on runs of the step list; runs stop early
                once a run leaves the text unchanged
        """
        self.logger = logger
        self.max_passes = max(1, max_passes)
        self.steps: List[RepairStep] = []
        for step in steps or []:
            self.add_step(step)

    def add_step(self, step: RepairStep) -> "RepairPipeline":
        """Append a step; returns the pipeline for chaining"""
        self.steps.append(safe_step(step, self.logger))
        return self

    def process(self, text: str) -> str:
        """Run every step in order, again while the text keeps changing. Always returns a string."""
        result = text if isinstance(text, str) else ("" if text is None else str(text))
        for _ in range(self.max_passes):
            previous = result
            for step in self.steps:
                result = step(result)
            if result == previous:
                break
        return result

    __call__ = process


def create_pipeline(*steps: RepairStep) -> RepairPipeline:
    """Create a pipeline from the given steps"""
    return RepairPipeline(steps)


def create_markup_pipeline(
    custom_steps: Iterable[RepairStep] = (),
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> RepairPipeline:
    """
    Pipeline producing a well-formed markup document

    Custom steps run after the document is sliced out and before unclosed tags
    are closed.
    """
    config = config or default_config
    return RepairPipeline([
        clean_bom,
        partial(extract_code_fence, lang=config.markup_fence_lang),
        unescape_html,
        partial(extract_markup, root_tags=config.markup_root_tags),
        *custom_steps,
        close_unclosed_tags,
    ], logger=logger, max_passes=config.settle_passes)


def create_json_pipeline(
    custom_steps: Iterable[RepairStep] = (),
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> RepairPipeline:
    """
    Generic JSON pipeline with loose extraction

    Custom steps run after extraction and before the JSON repair.
    """
    config = config or default_config
    return RepairPipeline([
        clean_bom,
        partial(extract_code_fence, lang=config.json_fence_lang),
        extract_json,
        *custom_steps,
        repair_json,
    ], logger=logger, max_passes=config.settle_passes)


def create_elements_pipeline(
    config: Optional[RepairConfig] = None,
    logger: Optional[RepairLogger] = None,
) -> RepairPipeline:
    """Pipeline producing a JSON array of element objects"""
    config = config or default_config
    return RepairPipeline([
        clean_bom,
        partial(extract_code_fence, lang=config.json_fence_lang),
        extract_json_array_strict,
        repair_json,
        partial(ensure_element_array, config=config),
    ], logger=logger, max_passes=config.settle_passes)


def get_pipeline(mode: str, config: Optional[RepairConfig] = None, logger: Optional[RepairLogger] = None) -> RepairPipeline:
    """Pipeline for a document mode ('markup' or 'elements')"""
    if mode == MARKUP:
        return create_markup_pipeline(config=config, logger=logger)
    if mode == ELEMENTS:
        return create_elements_pipeline(config=config, logger=logger)
    raise ValueError(f"Unknown document mode: {mode}")


markup_pipeline = create_markup_pipeline()
elements_pipeline = create_elements_pipeline()
