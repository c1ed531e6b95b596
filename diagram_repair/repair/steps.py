"""
Shared repair steps

Small text -> text transforms applied to model output before it is handed to a
renderer. Each step returns its input unchanged when it has nothing to do.
"""
import re
from typing import Optional, Sequence

from lxml import html as lxml_html

from ..config import MARKUP_ROOT_TAGS

# BOM and zero-width characters (ZWSP, ZWNJ, ZWJ, word joiner)
_INVISIBLE_RE = re.compile("[\ufeff\u200b-\u200d\u2060]")

# A fence opens at the start of a line; ``` inside JSON strings or markup
# attributes never does
_ANY_FENCE_RE = re.compile(r"^[ \t]*```[ \t]*[\w+-]*[ \t]*\n?(.*?)```", re.DOTALL | re.MULTILINE)

_RAW_TAG_RE = re.compile(r"<[a-z!?]", re.IGNORECASE)
_ESCAPED_TAG_RE = re.compile(r"&lt;\s*[a-z!?]", re.IGNORECASE)


def clean_bom(text: str) -> str:
    """Remove BOM/zero-width characters and surrounding whitespace."""
    if not text or not isinstance(text, str):
        return text
    return _INVISIBLE_RE.sub("", text).strip()


def extract_code_fence(text: str, lang: Optional[str] = None) -> str:
    """
    Extract the body of a markdown fenced block

    Args:
        text: Raw model output
        lang: Preferred fence label (e.g. 'xml', 'json'); None accepts any label

    Returns:
        Body of the block labelled lang, else of the first fenced block,
        else the trimmed text
    """
    if not text or not isinstance(text, str):
        return text

    if lang:
        pattern = re.compile(
            r"^[ \t]*```[ \t]*" + re.escape(lang) + r"[ \t]*\n?(.*?)```",
            re.DOTALL | re.MULTILINE | re.IGNORECASE,
        )
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()

    match = _ANY_FENCE_RE.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    return text.strip()


def unescape_html(text: str) -> str:
    """
    Decode HTML entities of a document that was sent entity-escaped

    Only applies when the text holds an escaped tag (``&lt;name``) and no raw
    tag, so already-decoded markup is never decoded twice.
    """
    if not text or not isinstance(text, str):
        return text
    if _RAW_TAG_RE.search(text) or not _ESCAPED_TAG_RE.search(text):
        return text
    wrapped = f"<div>{text}</div>"
    parsed = lxml_html.fromstring(wrapped)
    # Decoded entities may themselves be whitespace or zero-width characters
    return clean_bom(parsed.text_content())


def extract_markup(text: str, root_tags: Sequence[str] = MARKUP_ROOT_TAGS) -> str:
    """
    Slice the text to the span between the document root start tag and the
    last '>' character, dropping commentary around the document

    A root start tag still streaming in (no '>' after it) is kept from its '<'
    to the end so that commentary before it never reaches the preview.
    """
    if not text or not isinstance(text, str):
        return text

    names = "|".join(re.escape(tag) for tag in root_tags)
    match = re.search(rf"<({names})(?:[\s>/]|$)", text, re.IGNORECASE)
    if not match:
        return text
    end = text.rfind(">")
    if end > match.start():
        return text[match.start():end + 1]
    return text[match.start():]
