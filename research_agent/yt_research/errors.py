"""
Research-specific exceptions.

Provides a clear hierarchy for the failures a research request can end in:
- ResearchError: Base exception, carries a message safe to show end users
- MalformedOutput: Model output could not be recovered into JSON
- EmptyReportError: Model returned no text at all
- InvalidQueryError: Query rejected before any model call
- AnalysisCancelled: Caller cancelled the request
"""

from __future__ import annotations

from typing import Optional

MALFORMED_OUTPUT_MESSAGE = (
    "AI response was malformed or truncated due to its length. "
    "Please try a more specific query or fewer URLs."
)
EMPTY_REPORT_MESSAGE = "The research agent returned an empty report."
GENERIC_FAILURE_MESSAGE = (
    "Failed to perform analysis. Ensure valid YouTube links, a valid handle "
    "(@username), or a specific enough topic query."
)


class ResearchError(Exception):
    """Base exception for all research errors."""

    def __init__(self, message: str):
        self.user_message = message
        super().__init__(message)


class MalformedOutput(ResearchError):
    """
    Model output was malformed or truncated beyond recovery.

    The message is fixed and user-facing; parser diagnostics stay on
    ``cause`` so they never leak into the UI.
    """

    def __init__(
        self,
        cause: Optional[Exception] = None,
        raw_length: Optional[int] = None,
    ):
        self.cause = cause
        self.raw_length = raw_length
        super().__init__(MALFORMED_OUTPUT_MESSAGE)


class EmptyReportError(ResearchError):
    """Model returned an empty response body."""

    def __init__(self):
        super().__init__(EMPTY_REPORT_MESSAGE)


class InvalidQueryError(ResearchError):
    """Query failed validation (blank, or contains invalid video URLs)."""

    def __init__(self, query: str, reason: str):
        self.query = query
        self.reason = reason
        super().__init__(reason)


class AnalysisCancelled(ResearchError):
    """Request was cancelled by the user; its result must be discarded."""

    def __init__(self, message: str = "Analysis cancelled by user."):
        super().__init__(message)


def user_message_for(exc: BaseException) -> str:
    """Return the message to surface to the user for ``exc``."""
    if isinstance(exc, ResearchError):
        return exc.user_message
    return GENERIC_FAILURE_MESSAGE


__all__ = [
    "ResearchError",
    "MalformedOutput",
    "EmptyReportError",
    "InvalidQueryError",
    "AnalysisCancelled",
    "MALFORMED_OUTPUT_MESSAGE",
    "EMPTY_REPORT_MESSAGE",
    "GENERIC_FAILURE_MESSAGE",
    "user_message_for",
]
