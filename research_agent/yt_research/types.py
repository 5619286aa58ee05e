"""
Type definitions for the research agent.

Provides TypedDict definitions for the research report returned by the model.
The recovery parser hands back plain dicts; these describe the shape callers
expect once the report has been normalised.
"""

from __future__ import annotations

from enum import Enum
from typing import List, TypedDict


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class AnalysisTag(str, Enum):
    """Classification attached to each transcript excerpt."""
    EXPLANATION = "Explanation"
    BEGINNER_CONFUSION = "Beginner_Confusion"
    COMMON_MISTAKE = "Common_Mistake"
    REPEATED_CLAIM = "Repeated_Claim"
    OPINION_JUDGMENT = "Opinion_or_Judgment"
    WARNING_CAVEAT = "Warning_or_Caveat"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


OUTPUT_FORMATS = ("detailed", "bulleted", "summary")


# ---------------------------------------------------------------------------
# Report sections
# ---------------------------------------------------------------------------

class TranscriptExcerpt(TypedDict, total=False):
    """Cleaned quote from a single video transcript."""
    videoId: str
    creatorName: str
    text: str
    tag: str


class Pattern(TypedDict, total=False):
    """Theme explained repeatedly across creators."""
    theme: str
    description: str
    supportingExcerpts: List[TranscriptExcerpt]


class ConfusionPoint(TypedDict, total=False):
    """Spot where creators slow down or re-explain."""
    point: str
    explanationAttempt: str
    supportingExcerpts: List[TranscriptExcerpt]


class DatasetOverview(TypedDict, total=False):
    count: int
    transcriptSources: List[str]


class ProcessedVideo(TypedDict, total=False):
    title: str
    url: str
    creator: str


class Disagreement(TypedDict, total=False):
    topic: str
    variations: str


class ImpliedQuestion(TypedDict, total=False):
    question: str
    evidence: str


class GroundingSource(TypedDict):
    """Web source cited by the search tool; merged in after parsing."""
    uri: str
    title: str


class AnalysisResult(TypedDict, total=False):
    """Full research report."""
    topic: str
    datasetOverview: DatasetOverview
    processedVideos: List[ProcessedVideo]
    aggregatedThemes: List[Pattern]
    commonConfusionPoints: List[ConfusionPoint]
    disagreements: List[Disagreement]
    impliedQuestions: List[ImpliedQuestion]
    sources: List[GroundingSource]


__all__ = [
    "AnalysisTag",
    "OUTPUT_FORMATS",
    "TranscriptExcerpt",
    "Pattern",
    "ConfusionPoint",
    "DatasetOverview",
    "ProcessedVideo",
    "Disagreement",
    "ImpliedQuestion",
    "GroundingSource",
    "AnalysisResult",
]
