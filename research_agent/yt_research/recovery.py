"""
Best-effort recovery of JSON emitted by the research model.

Gemini responses are declared as ``application/json`` but long reports get cut
off at the output token limit. Rather than throwing the whole report away, the
parser closes whatever the model left open and parses again. Repairs only ever
append characters, so the recovered document always starts with exactly what
the model produced.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List

from .errors import MalformedOutput

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


def count_string_delimiters(text: str) -> int:
    """
    Count the double quotes in ``text`` that open or close a string.

    A quote preceded by an unescaped backslash is string content, not a
    delimiter. A backslash consumed as an escape does not escape the next
    character, so ``\\\\"`` still ends the string.
    """
    count = 0
    escaped = False
    for char in text:
        if char == '"' and not escaped:
            count += 1
        escaped = char == "\\" and not escaped
    return count


def missing_closers(text: str) -> str:
    """
    Return the closing brackets needed to balance ``text``, innermost first.

    Brackets inside string literals are ignored. A closer that does not match
    the innermost open bracket is ignored rather than treated as corruption.
    """
    stack: List[str] = []
    in_string = False
    escaped = False

    for char in text:
        if char == '"' and not escaped:
            in_string = not in_string
        if in_string:
            escaped = char == "\\" and not escaped
            continue

        if char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if stack and stack[-1] == char:
                stack.pop()

    return "".join(reversed(stack))


def repair_truncated_json(text: str) -> str:
    """
    Close an unterminated string and any unclosed objects/arrays in ``text``.

    The odd-quote check assumes truncation happened inside a single string.
    If the quote count is odd for some other reason (e.g. output cut right
    after a backslash) the appended quote is spurious and the final parse
    fails; that is reported as malformed output, never silently fixed.

    Escaped quotes are left out of the odd-count check. Counting every raw
    quote would see ``"she said \\"hi`` as balanced and never close it.
    """
    fixed = text.strip()
    if count_string_delimiters(fixed) % 2 != 0:
        fixed += '"'
    return fixed + missing_closers(fixed)


def parse(text: str) -> Any:
    """
    Parse model output as JSON, recovering from truncation where possible.

    Args:
        text: Raw model response body

    Returns:
        The parsed value, with key and element order as in ``text``

    Raises:
        MalformedOutput: If the text is not valid JSON even after repair
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected model output as str, got {type(text).__name__}.")

    trimmed = text.strip()
    try:
        return json.loads(trimmed)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.warning(
            "Standard JSON parse failed (%s), attempting recovery | len=%d",
            exc, len(trimmed),
        )

    repaired = repair_truncated_json(trimmed)
    try:
        parsed = json.loads(repaired)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.error(
            "JSON recovery failed: %s | original_len=%d, repaired_len=%d",
            exc, len(trimmed), len(repaired),
        )
        raise MalformedOutput(cause=exc, raw_length=len(trimmed)) from exc

    logger.info(
        "Recovered truncated JSON | original_len=%d, appended=%r",
        len(trimmed), repaired[len(trimmed):],
    )
    return parsed


__all__ = [
    "parse",
    "repair_truncated_json",
    "count_string_delimiters",
    "missing_closers",
]
