"""
Repair steps and pipelines for model-generated documents
"""
from .steps import clean_bom, extract_code_fence, unescape_html, extract_markup
from .markup import close_unclosed_tags, is_well_formed
from .arrays import extract_json, extract_json_array_strict, repair_json, ensure_element_array
from .pipeline import (
    RepairPipeline,
    safe_step,
    create_pipeline,
    create_markup_pipeline,
    create_json_pipeline,
    create_elements_pipeline,
    get_pipeline,
    markup_pipeline,
    elements_pipeline,
    MARKUP,
    ELEMENTS,
)

__all__ = [
    "clean_bom",
    "extract_code_fence",
    "unescape_html",
    "extract_markup",
    "close_unclosed_tags",
    "is_well_formed",
    "extract_json",
    "extract_json_array_strict",
    "repair_json",
    "ensure_element_array",
    "RepairPipeline",
    "safe_step",
    "create_pipeline",
    "create_markup_pipeline",
    "create_json_pipeline",
    "create_elements_pipeline",
    "get_pipeline",
    "markup_pipeline",
    "elements_pipeline",
    "MARKUP",
    "ELEMENTS",
]
