"""
Unit tests for shared repair steps: clean_bom, extract_code_fence, unescape_html, extract_markup.
"""
from __future__ import annotations

from diagram_repair.repair.steps import clean_bom, extract_code_fence, unescape_html, extract_markup


# ---- clean_bom ----
def test_clean_bom_strips_bom_and_zero_width() -> None:
    assert clean_bom("\ufeff  <mxfile/>\u200b \n") == "<mxfile/>"
    assert clean_bom("a\u200cb\u200dc\u2060d") == "abcd"


def test_clean_bom_empty_and_non_string() -> None:
    assert clean_bom("") == ""
    assert clean_bom(None) is None


# ---- extract_code_fence ----
def test_extract_code_fence_with_language() -> None:
    text = "Here you go:\n```xml\n<mxfile/>\n```\nEnjoy!"
    assert extract_code_fence(text, "xml") == "<mxfile/>"


def test_extract_code_fence_prefers_requested_language() -> None:
    text = "```\nnotes\n```\n\n```json\n[1, 2]\n```"
    assert extract_code_fence(text, "json") == "[1, 2]"


def test_extract_code_fence_language_case_insensitive() -> None:
    assert extract_code_fence("```JSON\n[]\n```", "json") == "[]"


def test_extract_code_fence_falls_back_to_any_block() -> None:
    text = "Result:\n```json\n[1]\n```"
    assert extract_code_fence(text, "xml") == "[1]"
    assert extract_code_fence("```\n<a/>\n```") == "<a/>"


def test_extract_code_fence_without_fence_returns_trimmed() -> None:
    assert extract_code_fence("  [1, 2]  ", "json") == "[1, 2]"


def test_extract_code_fence_unclosed_fence_passes_through() -> None:
    """A fence still streaming in has no closing marker yet."""
    text = "```json\n[{\"id\": \"a\""
    assert extract_code_fence(text, "json") == text


def test_extract_code_fence_ignores_backticks_inside_values() -> None:
    text = '[{"text": "use ```code``` here"}]'
    assert extract_code_fence(text, "json") == text


# ---- unescape_html ----
def test_unescape_html_decodes_escaped_document() -> None:
    text = "&lt;mxfile&gt;&lt;diagram name=&quot;P&quot;/&gt;&lt;/mxfile&gt;"
    assert unescape_html(text) == '<mxfile><diagram name="P"/></mxfile>'


def test_unescape_html_skips_raw_markup() -> None:
    """Entities inside raw markup are attribute content and must stay escaped."""
    text = '<mxCell value="&lt;b&gt;bold&lt;/b&gt;"/>'
    assert unescape_html(text) == text


def test_unescape_html_skips_text_without_escaped_tags() -> None:
    text = "a &amp; b"
    assert unescape_html(text) == text


def test_unescape_html_is_not_applied_twice() -> None:
    once = unescape_html("&lt;mxfile&gt;&amp;lt;&lt;/mxfile&gt;")
    assert once == "<mxfile>&lt;</mxfile>"
    assert unescape_html(once) == once


# ---- extract_markup ----
def test_extract_markup_drops_commentary() -> None:
    text = 'Sure! <mxfile host="x"><diagram/></mxfile> Hope this helps.'
    assert extract_markup(text) == '<mxfile host="x"><diagram/></mxfile>'


def test_extract_markup_starts_at_graph_model() -> None:
    text = "<?xml version=\"1.0\"?>\n<mxGraphModel><root/></mxGraphModel>"
    assert extract_markup(text) == "<mxGraphModel><root/></mxGraphModel>"


def test_extract_markup_cuts_partial_trailing_tag() -> None:
    text = '<mxfile><diagram name="P"><mxCell id="2" sty'
    assert extract_markup(text) == '<mxfile><diagram name="P">'


def test_extract_markup_without_root_is_unchanged() -> None:
    assert extract_markup("<svg></svg>") == "<svg></svg>"
    assert extract_markup("no markup") == "no markup"


def test_extract_markup_custom_root_tags() -> None:
    assert extract_markup("x <svg></svg> y", root_tags=("svg",)) == "<svg></svg>"


def test_extract_markup_incomplete_root_tag_kept_from_its_start() -> None:
    assert extract_markup('Sure!\n```xml\n<mxfile host="app') == '<mxfile host="app'
    assert extract_markup('A -> B\n<mxfile host="app') == '<mxfile host="app'
    assert extract_markup("Intro\n<mxfile") == "<mxfile"


def test_unescape_html_trims_decoded_whitespace() -> None:
    assert unescape_html("&lt;b&gt;x&lt;/b&gt;&#32;&#8203;") == "<b>x</b>"
