"""
Element array repair

Extraction of the outer JSON array from noisy model output, truncation repair,
and normalization of the result to a JSON array of element objects
"""
import json
import re
from typing import Any, Optional

from json_repair import repair_json as _repair_json

from ..config import RepairConfig, default_config


def extract_json(text: str) -> str:
    """
    Loose extraction: span from the earliest '[' or '{' to the latest ']' or '}'

    When no closer follows the opener (a document still streaming in), the
    text from the opener to the end is returned.
    """
    if not text or not isinstance(text, str):
        return text

    starts = [pos for pos in (text.find("["), text.find("{")) if pos != -1]
    if not starts:
        return text
    start = min(starts)
    end = max(text.rfind("]"), text.rfind("}"))
    if end < start:
        return text[start:]
    return text[start:end + 1]


def extract_json_array_strict(text: str) -> str:
    """
    Return the first complete top-level JSON array in the text

    Brackets inside double-quoted strings (backslash escapes honoured) do not
    count toward nesting depth, and a '[' inside an object is not top-level.
    Falls back to extract_json when there is no top-level array or it is not
    closed, so a wrapping object reaches ensure_element_array whole.
    """
    if not text or not isinstance(text, str):
        return text

    start = -1
    depth = 0
    braces = 0
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            escaped = False
        elif start == -1:
            if ch == "{":
                braces += 1
            elif ch == "}" and braces > 0:
                braces -= 1
            elif ch == "[" and braces == 0:
                start = i
                depth = 1
        elif ch == "[":
            depth += 1
        elif ch == "]" and depth > 0:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return extract_json(text)


def repair_json(text: str) -> str:
    """
    Repair truncated or malformed JSON

    Closes unterminated strings, balances brackets and drops dangling commas.
    Text that does not start like a JSON container is passed through.
    """
    if not text or not isinstance(text, str):
        return text
    stripped = text.strip()
    if not stripped or stripped[0] not in "[{":
        return text
    try:
        json.loads(stripped)
        return stripped
    except ValueError:
        pass
    repaired = _repair_json(stripped, ensure_ascii=False)
    if not isinstance(repaired, str) or not repaired.strip():
        return text
    return repaired


def _dump(value: Any, config: RepairConfig) -> str:
    return json.dumps(value, indent=config.json_indent, ensure_ascii=False)


def _as_element_list(data: Any) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("elements", "items"):
            if isinstance(data.get(key), list):
                return data[key]
    return [data]


def ensure_element_array(text: str, config: Optional[RepairConfig] = None) -> str:
    """
    Normalize a JSON document to a JSON array string

    - arrays are kept
    - objects carrying an 'elements' or 'items' array are replaced by it
    - any other value becomes a one-element array
    - a bare run of elements missing its outer brackets is wrapped

    Text that cannot be parsed is returned trimmed.
    """
    if not text or not isinstance(text, str):
        return text
    config = config or default_config

    trimmed = text.strip()
    if not trimmed:
        return trimmed

    try:
        return _dump(_as_element_list(json.loads(trimmed)), config)
    except ValueError:
        pass

    try:
        wrapped = json.loads(f"[{trimmed}]")
        return _dump(wrapped, config)
    except ValueError:
        pass

    inner = re.search(r"\[[\s\S]*\]", trimmed)
    if inner:
        try:
            data = json.loads(inner.group(0))
            if isinstance(data, list):
                return _dump(data, config)
        except ValueError:
            pass

    return trimmed
