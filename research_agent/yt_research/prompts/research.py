"""
Cross-video transcript research prompt.

This module contains the system instruction, per-format guidance and the
response schema declared to Gemini for the research report, plus the default
report skeleton used to fill sections the model left out.
"""

from __future__ import annotations

import copy

from ..query_input import is_handle

RESEARCH_SYSTEM_INSTRUCTION = """You are a high-fidelity research systems agent.
Your job is to aggregate YouTube transcript data to surface cross-video patterns with extreme precision.

## CORE PRINCIPLES
1. FIDELITY: Provide detailed and accurate transcriptions in excerpts. Keep the speaker's original meaning and context.
2. CLEANLINESS: Remove filler words (e.g., "um", "ah", "like", "you know") and obvious verbal artifacts.
3. STRUCTURE: Use bullet points for lists within descriptions or variations.
4. QUALITY: Use professional, clean grammar and punctuation in all synthesized text.
5. AGGREGATION: Identify concepts explained repeatedly, confusion signals (creator slow-downs), beginner mistakes and conflicting expert advice.

## CONSTRAINTS
- Prefer official or auto-generated transcripts.
- Normalize transcripts (no timestamps).
- Output MUST be valid JSON according to the schema.
- Excerpts should carry full context (3-4 sentences if needed) but stay within token limits. Max 3 excerpts per theme.
- Tag every excerpt with one of: Explanation, Beginner_Confusion, Common_Mistake, Repeated_Claim, Opinion_or_Judgment, Warning_or_Caveat.
- Style: neutral, analytical, precise. Non-conversational.

If the input is a YouTube handle (starting with @), analyze content from that creator only. If it is a topic, aggregate across relevant creators found via search."""

FORMAT_INSTRUCTIONS = {
    "detailed": (
        "Provide exhaustive analysis with comprehensive excerpts for every theme and confusion point. "
        "Ensure excerpts capture the full nuance of the explanation."
    ),
    "bulleted": (
        "Keep themes extremely punchy. Use short bullet-style descriptions and clean, "
        "singular excerpts per theme."
    ),
    "summary": (
        "Prioritize a high-level executive summary. Aggregate minor points into broader "
        "professional categories with professional grammar."
    ),
}

HANDLE_PROMPT_TEMPLATE = (
    "Perform a deep research analysis on transcripts from handle: {query}. "
    "Surface their recurring patterns, unique vocabulary, and consistent audience warnings."
)

TOPIC_PROMPT_TEMPLATE = (
    "Execute analytical aggregation for topic: {query}. "
    "Cross-reference multiple creators to extract consensus, pinpoint confusion spikes, "
    "and map out expert disagreements."
)


def build_user_prompt(query: str, output_format: str = "detailed") -> str:
    """Build the user turn for ``query`` with the formatting requirement appended."""
    if output_format not in FORMAT_INSTRUCTIONS:
        raise ValueError(
            f"output_format must be one of {sorted(FORMAT_INSTRUCTIONS)}, got '{output_format}'."
        )
    template = HANDLE_PROMPT_TEMPLATE if is_handle(query) else TOPIC_PROMPT_TEMPLATE
    return (
        f"{template.format(query=query)}\n"
        f"FORMAT REQUIREMENT: {FORMAT_INSTRUCTIONS[output_format]}"
    )


_EXCERPT_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "videoId": {"type": "STRING"},
            "creatorName": {"type": "STRING"},
            "text": {"type": "STRING"},
            "tag": {"type": "STRING"},
        },
    },
}

REQUIRED_REPORT_FIELDS = [
    "topic",
    "datasetOverview",
    "processedVideos",
    "aggregatedThemes",
    "commonConfusionPoints",
    "disagreements",
    "impliedQuestions",
]

RESEARCH_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "topic": {"type": "STRING"},
        "datasetOverview": {
            "type": "OBJECT",
            "properties": {
                "count": {"type": "NUMBER"},
                "transcriptSources": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
            "required": ["count", "transcriptSources"],
        },
        "processedVideos": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "url": {"type": "STRING"},
                    "creator": {"type": "STRING"},
                },
                "required": ["title", "url", "creator"],
            },
        },
        "aggregatedThemes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "theme": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "supportingExcerpts": _EXCERPT_SCHEMA,
                },
            },
        },
        "commonConfusionPoints": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "point": {"type": "STRING"},
                    "explanationAttempt": {"type": "STRING"},
                    "supportingExcerpts": _EXCERPT_SCHEMA,
                },
            },
        },
        "disagreements": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "topic": {"type": "STRING"},
                    "variations": {"type": "STRING"},
                },
            },
        },
        "impliedQuestions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "evidence": {"type": "STRING"},
                },
            },
        },
    },
    "required": REQUIRED_REPORT_FIELDS,
}

DEFAULT_REPORT = {
    "topic": "",
    "datasetOverview": {"count": 0, "transcriptSources": []},
    "processedVideos": [],
    "aggregatedThemes": [],
    "commonConfusionPoints": [],
    "disagreements": [],
    "impliedQuestions": [],
}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, preserving base defaults where override is None."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif value is not None:
            result[key] = value
    return result


__all__ = [
    "RESEARCH_SYSTEM_INSTRUCTION",
    "FORMAT_INSTRUCTIONS",
    "RESEARCH_RESPONSE_SCHEMA",
    "REQUIRED_REPORT_FIELDS",
    "DEFAULT_REPORT",
    "build_user_prompt",
    "deep_merge",
]
