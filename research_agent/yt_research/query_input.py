"""
Classification and validation of research queries.

A query is a topic, a single creator handle (``@name``) or a comma-separated
list of YouTube video URLs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

YT_URL_REGEX = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$")
YT_HANDLE_REGEX = re.compile(r"^@[\w.-]+$")


class InputType(str, Enum):
    NONE = "none"
    URL = "url"
    USERNAME = "username"
    TOPIC = "topic"


@dataclass(frozen=True)
class InputItem:
    text: str
    is_valid: bool


@dataclass(frozen=True)
class ValidatedInput:
    """Result of classifying a query."""
    type: InputType
    items: List[InputItem] = field(default_factory=list)
    all_valid: bool = True

    @property
    def invalid_items(self) -> List[InputItem]:
        return [item for item in self.items if not item.is_valid]


def _looks_like_url(part: str) -> bool:
    return bool(YT_URL_REGEX.match(part)) or "youtube.com" in part or "youtu.be" in part


def is_handle(query: str) -> bool:
    return query.strip().startswith("@")


def classify_query(query: str) -> ValidatedInput:
    """
    Work out what kind of query the user typed and whether it is usable.

    URL mode kicks in as soon as any part mentions YouTube; every part must
    then be a well-formed video URL. A lone ``@handle`` is a creator query.
    Anything else is a free-text topic.
    """
    if not query.strip():
        return ValidatedInput(type=InputType.NONE)

    parts = [part.strip() for part in query.split(",") if part.strip()]

    if any(_looks_like_url(part) for part in parts):
        items = [InputItem(text=part, is_valid=bool(YT_URL_REGEX.match(part))) for part in parts]
        return ValidatedInput(
            type=InputType.URL,
            items=items,
            all_valid=all(item.is_valid for item in items),
        )

    if len(parts) == 1 and YT_HANDLE_REGEX.match(parts[0]):
        return ValidatedInput(type=InputType.USERNAME, items=[InputItem(parts[0], True)])

    return ValidatedInput(type=InputType.TOPIC, items=[InputItem(query, True)])


__all__ = ["InputType", "InputItem", "ValidatedInput", "classify_query", "is_handle"]
