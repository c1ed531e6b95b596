"""
Markup repair

Closes tags left open by a truncated or malformed XML document. Attribute
values may not contain '<', so a quote still open when a '<' (or the end of
the text) is reached is treated as unterminated and closed before the end of
its tag.
"""
import re
from typing import List, Optional, Tuple

from lxml import etree as ET

_NAME_RE = re.compile(r"[A-Za-z_:][\w.:-]*")


def is_well_formed(text: str) -> bool:
    """Whether text parses as a single XML document."""
    if not text or not isinstance(text, str):
        return False
    try:
        # lxml parsers must not be shared between threads
        parser = ET.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
        ET.fromstring(text.encode("utf-8"), parser=parser)
    except (ET.XMLSyntaxError, ValueError):
        return False
    return True


def _scan_start_tag(text: str, name_end: int) -> Tuple[int, Optional[Tuple[int, str]]]:
    """
    Find the '>' ending a start tag

    Returns:
        (end, fix): end is the index of the closing '>' or -1 if the tag runs
        to the end of the text; fix is (position, insert_text) when the tag
        needs a quote and/or '>' inserted to terminate it
    """
    n = len(text)
    quote = None
    quote_start = -1
    j = name_end
    while j < n:
        ch = text[j]
        if quote:
            if ch == quote:
                quote = None
            elif ch == "<":
                break
        elif ch in "\"'":
            quote = ch
            quote_start = j
        elif ch == ">":
            return j, None
        elif ch == "<":
            # New tag began before this one ended
            return j, (j, ">")
        j += 1

    if quote is None:
        return -1, None

    # Unterminated quote: close it before the nearest '>' after it
    gt = text.find(">", quote_start + 1, j)
    if gt != -1:
        insert_at = gt - 1 if text[gt - 1] == "/" and gt - 1 > quote_start else gt
        return gt, (insert_at, quote)
    if j < n:
        return j, (j, quote + ">")
    return -1, None


def close_unclosed_tags(text: str) -> str:
    """
    Close every tag still open at the end of the text

    Open tags are tracked on a stack and closed in reverse order of opening.
    A partial tag at the very end is dropped, closing tags matching nothing
    are dropped, and a closing tag for an outer element first closes the
    inner elements still open. Well-formed input is returned unchanged.
    """
    if not text or not isinstance(text, str):
        return text
    if is_well_formed(text):
        return text

    n = len(text)
    out: List[str] = []
    stack: List[str] = []
    dropped = False  # a partial or stray tag was removed
    pos = 0  # start of the text not yet copied to out
    i = 0

    while True:
        lt = text.find("<", i)
        if lt == -1:
            break

        if text.startswith("<!--", lt):
            end = text.find("-->", lt + 4)
            if end == -1:
                out.append(text[pos:])
                out.append("-->")
                pos = n
                break
            i = end + 3
            continue

        if text.startswith("<![CDATA[", lt):
            end = text.find("]]>", lt + 9)
            if end == -1:
                out.append(text[pos:])
                out.append("]]>")
                pos = n
                break
            i = end + 3
            continue

        if text.startswith("<?", lt) or text.startswith("<!", lt):
            closer = "?>" if text[lt + 1] == "?" else ">"
            end = text.find(closer, lt + 2)
            if end == -1:
                out.append(text[pos:lt])
                dropped = True
                pos = n
                break
            i = end + len(closer)
            continue

        if text.startswith("</", lt):
            end = text.find(">", lt + 2)
            if end == -1:
                out.append(text[pos:lt])
                dropped = True
                pos = n
                break
            match = _NAME_RE.match(text, lt + 2)
            name = match.group(0) if match else None
            out.append(text[pos:lt])
            if name is not None and name in stack:
                while stack[-1] != name:
                    out.append(f"</{stack.pop()}>")
                stack.pop()
                out.append(text[lt:end + 1])
            else:
                dropped = True
            pos = end + 1
            i = end + 1
            continue

        match = _NAME_RE.match(text, lt + 1)
        if not match:
            # Literal '<' in character data
            i = lt + 1
            continue

        end, fix = _scan_start_tag(text, match.end())
        if end == -1:
            # Truncated start tag
            out.append(text[pos:lt])
            dropped = True
            pos = n
            break

        self_closing = text[end - 1] == "/"
        if fix is not None:
            insert_at, insert_text = fix
            out.append(text[pos:insert_at])
            out.append(insert_text)
            pos = insert_at
            if insert_text.endswith(">"):
                self_closing = False
                end = insert_at - 1
        if not self_closing:
            stack.append(match.group(0))
        i = end + 1

    if pos < n:
        out.append(text[pos:])
    body = "".join(out)
    if dropped:
        # Whitespace around a removed tag must not end up at either end
        body = body.strip()
    return body + "".join(f"</{name}>" for name in reversed(stack))
