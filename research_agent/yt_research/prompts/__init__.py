"""
Prompt templates for the YouTube research agent.
"""

from .research import (
    RESEARCH_SYSTEM_INSTRUCTION,
    RESEARCH_RESPONSE_SCHEMA,
    FORMAT_INSTRUCTIONS,
    build_user_prompt,
)

__all__ = [
    "RESEARCH_SYSTEM_INSTRUCTION",
    "RESEARCH_RESPONSE_SCHEMA",
    "FORMAT_INSTRUCTIONS",
    "build_user_prompt",
]
