# src/llm_stack/json_utils.py
"""
Salvaging JSON objects from model replies.

Small local models wrap their answer in prose or ``` fences, or keep
talking after the object closes. first_json_object() finds the first
balanced {...} span, ignoring braces inside string literals.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def first_json_object(raw: str) -> Optional[str]:
    """Text of the first balanced JSON object in `raw`, or None."""
    if not raw:
        return None

    start = raw.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(raw)):
            ch = raw[i]
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
                    return raw[start : i + 1]
        # unbalanced from here on; try the next opening brace
        start = raw.find("{", start + 1)
    return None


def parse_json_object(raw: str, *, context: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Parse the first JSON object found in `raw`.

    Returns (data, None) on success, (None, reason) otherwise.
    """
    candidate = first_json_object(raw)
    if candidate is None:
        return None, f"{context}: no JSON object in reply"
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.debug("%s: cannot decode %r", context, candidate)
        return None, f"{context}: {exc.msg} at pos {exc.pos}"
    return data, None
