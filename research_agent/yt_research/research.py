"""
Cross-video transcript research powered by Gemini with Google Search grounding.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any, List, Optional

from google import genai
from google.genai import types

from . import recovery
from .config import get_gemini_config
from .errors import EmptyReportError, MalformedOutput
from .prompts.research import (
    DEFAULT_REPORT,
    RESEARCH_RESPONSE_SCHEMA,
    RESEARCH_SYSTEM_INSTRUCTION,
    build_user_prompt,
    deep_merge,
)
from .types import AnalysisResult, GroundingSource

if TYPE_CHECKING:
    from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TITLE = "Research Source"


@lru_cache(maxsize=1)
def _get_gemini_client() -> genai.Client:
    cfg = get_gemini_config()
    return genai.Client(api_key=cfg.api_key)


def _build_generation_config() -> types.GenerateContentConfig:
    cfg = get_gemini_config()
    tools = [types.Tool(google_search=types.GoogleSearch())] if cfg.enable_search else None
    return types.GenerateContentConfig(
        system_instruction=RESEARCH_SYSTEM_INSTRUCTION,
        tools=tools,
        response_mime_type="application/json",
        response_schema=RESEARCH_RESPONSE_SCHEMA,
    )


def extract_grounding_sources(response: Any) -> List[GroundingSource]:
    """Pull cited web sources out of the first candidate's grounding metadata."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: List[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None) or ""
        if not uri:
            continue
        title = getattr(web, "title", None) or DEFAULT_SOURCE_TITLE
        sources.append({"uri": uri, "title": title})
    return sources


def normalise_result(parsed: Any) -> AnalysisResult:
    """
    Fill report sections the model left out (e.g. cut off by truncation).

    Raises:
        MalformedOutput: If the parsed value is not a JSON object
    """
    if not isinstance(parsed, dict):
        logger.error(
            "Research output parsed to %s instead of an object", type(parsed).__name__
        )
        raise MalformedOutput()

    missing = [key for key in DEFAULT_REPORT if parsed.get(key) is None]
    if missing:
        logger.warning("Research report missing sections, using defaults: %s", missing)
    return deep_merge(DEFAULT_REPORT, parsed)


def analyse_topic(
    query: str,
    output_format: str = "detailed",
    *,
    client: Optional[genai.Client] = None,
    cancel_token: Optional["CancellationToken"] = None,
) -> AnalysisResult:
    """
    Run the research workflow for a topic, ``@handle`` or list of video URLs.

    Args:
        query: Raw query as typed by the user
        output_format: One of ``detailed``, ``bulleted``, ``summary``
        client: Optional Gemini client (defaults to one built from config)
        cancel_token: Checked once the model call returns; a cancelled token
            discards the response

    Raises:
        EmptyReportError: If the model returned no text
        MalformedOutput: If the text could not be recovered into a report
        AnalysisCancelled: If ``cancel_token`` was cancelled meanwhile
    """
    user_prompt = build_user_prompt(query, output_format)
    cfg = get_gemini_config()
    client = client or _get_gemini_client()

    logger.info(
        "Calling %s for research | format=%s, search=%s, query=%r",
        cfg.model_name, output_format, cfg.enable_search, query,
    )
    response = client.models.generate_content(
        model=cfg.model_name,
        contents=user_prompt,
        config=_build_generation_config(),
    )

    if cancel_token is not None:
        cancel_token.raise_if_cancelled()

    raw_text = getattr(response, "text", None)
    if not raw_text or not raw_text.strip():
        logger.warning("Research model returned an empty response for %r", query)
        raise EmptyReportError()

    result = normalise_result(recovery.parse(raw_text))
    result["sources"] = extract_grounding_sources(response)

    logger.info(
        "Research complete for %r: videos=%d, themes=%d, confusion=%d, "
        "disagreements=%d, questions=%d, sources=%d",
        query,
        len(result.get("processedVideos", [])),
        len(result.get("aggregatedThemes", [])),
        len(result.get("commonConfusionPoints", [])),
        len(result.get("disagreements", [])),
        len(result.get("impliedQuestions", [])),
        len(result["sources"]),
    )
    return result


__all__ = [
    "analyse_topic",
    "extract_grounding_sources",
    "normalise_result",
]
