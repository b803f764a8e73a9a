# -*- coding: utf-8 -*-
"""Heuristic repair of model completions into parseable JSON."""

import json
import logging
import re
from typing import Any

from medscribe.core.errors import MalformedOutputError

__all__ = ["strip_markdown_fences", "repair_json_text", "repair_and_parse"]

logger = logging.getLogger(__name__)

_CONCAT_OBJECTS_RX = re.compile(r"}\s*{")
_REPEATED_COMMAS_RX = re.compile(r",(?:\s*,)+")
_TRAILING_COMMA_RX = re.compile(r",\s*([}\]])")
_NEWLINES_RX = re.compile(r"[\r\n]+")
_SMART_QUOTES = {"“": '"', "”": '"', "‘": "'", "’": "'"}


def strip_markdown_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


def repair_json_text(raw_text: str) -> str:
    """
    Apply the string repairs, in order:

    1. trim, strip code fences, drop prose before the first ``{`` / after the last ``}``
    2. join concatenated objects (``}{`` -> ``,``); the decoder keeps the last
       duplicate key, so later objects win on collision
    3. collapse repeated commas, drop trailing commas
    4. replace embedded newlines with a space
    """
    text = strip_markdown_fences((raw_text or "").strip())
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start:end + 1]
    text = _CONCAT_OBJECTS_RX.sub(",", text)
    text = _REPEATED_COMMAS_RX.sub(",", text)
    text = _TRAILING_COMMA_RX.sub(r"\1", text)
    return _NEWLINES_RX.sub(" ", text)


def repair_and_parse(raw_text: str) -> Any:
    """
    Repair and decode a completion.

    Raises:
        MalformedOutputError: carrying the first 200 chars of ``raw_text``.
    """
    fixed = repair_json_text(raw_text)
    try:
        return json.loads(fixed)
    except ValueError:
        pass

    # Typographic quotes only get replaced as a last resort; inside valid
    # string values they are content.
    for bad, good in _SMART_QUOTES.items():
        fixed = fixed.replace(bad, good)
    try:
        return json.loads(fixed)
    except ValueError as e:
        logger.warning("Model returned invalid JSON (%s): %.200s", e, raw_text)
        raise MalformedOutputError(raw_text) from e
