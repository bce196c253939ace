"""
Tolerant JSON extraction from model output.

Models asked for "JSON only" still sometimes wrap it in a markdown fence or
add a sentence before it. extract_json() tries, in order: the whole text,
the first fenced ```json block, the first balanced {...} object.
"""

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL | re.IGNORECASE)


def _first_object(text: str) -> str | None:
    """Return the first balanced {...} span, honouring string literals."""
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
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
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_json(text: str) -> Any | None:
    """Parse JSON out of text. Returns None when nothing parseable is found."""
    if not text or not text.strip():
        return None

    candidates = [text.strip()]
    fenced = _FENCE_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    obj = _first_object(text)
    if obj:
        candidates.append(obj)

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    logger.debug(f"[JSON] No parseable JSON in {len(text)} chars")
    return None
