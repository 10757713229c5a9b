"""Utilities for robustly extracting JSON from LLM responses."""

from __future__ import annotations
import json
import re
from typing import Any, Iterator, Optional

PREVIEW_CHARS = 400

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_PAIRS = {"[": "]", "{": "}"}


def strip_code_fences(text: str) -> Optional[str]:
    """Interior of the first ```...``` block (tagged 'json' or not), else None."""
    m = _CODE_FENCE.search(text)
    if not m:
        return None
    return m.group(1).strip()


def make_preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def iter_balanced_spans(text: str, opener: str) -> Iterator[tuple[int, int]]:
    """
    Yield (start, end) of every top-level balanced span opened by `opener`.
    One pass: each closer pairs with the innermost open opener; an opener that
    never closes is skipped, so spans after it still count as top-level.
    Quotes only open a string literal inside an open bracket.
    """
    closer = _PAIRS[opener]
    stack: list[int] = []
    pairs: list[tuple[int, int]] = []
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
        if ch == '"' and stack:
            in_string = True
        elif ch == opener:
            stack.append(i)
        elif ch == closer and stack:
            pairs.append((stack.pop(), i + 1))

    pairs.sort()
    last_end = 0
    for start, end in pairs:
        if start >= last_end:
            yield start, end
            last_end = end


def find_balanced_span(text: str, opener: str) -> Optional[str]:
    """Longest top-level balanced span (earliest wins ties), or None."""
    best: Optional[tuple[int, int]] = None
    for start, end in iter_balanced_spans(text, opener):
        if best is None or end - start > best[1] - best[0]:
            best = (start, end)
    if best is None:
        return None
    return text[best[0] : best[1]]


def locate_json(text: str, openers: tuple[str, ...] = ("[", "{")) -> str:
    """
    Narrow raw LLM output down to the substring most likely to hold the payload.
    1) the interior of a code fence, when there is one;
    2) if that does not start like JSON, the first kind of balanced span
       (in `openers` order) found anywhere in the original text.
    Falls back to the (trimmed) text itself.
    """
    raw = (text or "").strip()
    candidate = raw
    fenced = strip_code_fences(raw)
    if fenced is not None:
        candidate = fenced
    if not candidate.startswith(openers):
        for opener in openers:
            span = find_balanced_span(raw, opener)
            if span is not None:
                return span
    return candidate


def _strip_comments(text: str) -> str:
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end < 0 else end + 2
        elif text.startswith("//", i):
            end = text.find("\n", i + 2)
            i = n if end < 0 else end
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "]}":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def repair_json(text: str) -> str:
    """
    Cheap syntactic fix-ups LLMs commonly need: drop /* block */ and
    // line comments, then commas right before a closing ] or }.
    String literals are left untouched.
    """
    return _strip_trailing_commas(_strip_comments(text))


def require_object(text: str, err: str = "Expected a JSON object.") -> dict:
    """Strict: locate one {...} object, repair it once, parse it, else raise."""
    candidate = repair_json(locate_json(text, openers=("{",)))
    try:
        data: Any = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        raise ValueError(f"{err} ({e})") from e
    if not isinstance(data, dict):
        raise ValueError(err)
    return data


def as_text(value: Any) -> str:
    """Render a loosely-typed JSON value as text; null becomes ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
