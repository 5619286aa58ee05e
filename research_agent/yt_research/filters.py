"""
Keyword, tag and creator filtering over a research report.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .state import FilterState
from .types import AnalysisResult, ProcessedVideo


def matches_search(text: Any, term: str) -> bool:
    """Case-insensitive substring match; an empty term matches everything."""
    if not term:
        return True
    return term.lower() in str(text or "").lower()


def is_any_filter_active(filters: FilterState) -> bool:
    return bool(filters.search_term or filters.tags or filters.creators)


def _filter_sections(
    sections: Sequence[Dict[str, Any]],
    title_key: str,
    description_key: str,
    filters: FilterState,
) -> List[Dict[str, Any]]:
    term = filters.search_term
    tag_filter_active = bool(filters.tags)
    creator_filter_active = bool(filters.creators)
    kept = []

    for section in sections:
        metadata_match = matches_search(section.get(title_key), term) or matches_search(
            section.get(description_key), term
        )
        excerpts = []
        for excerpt in section.get("supportingExcerpts") or []:
            if tag_filter_active and excerpt.get("tag") not in filters.tags:
                continue
            if creator_filter_active and excerpt.get("creatorName") not in filters.creators:
                continue
            if metadata_match or matches_search(excerpt.get("text"), term) or matches_search(
                excerpt.get("creatorName"), term
            ):
                excerpts.append(excerpt)

        if excerpts or (metadata_match and not tag_filter_active and not creator_filter_active):
            kept.append({**section, "supportingExcerpts": excerpts})

    return kept


def filter_themes(result: AnalysisResult, filters: FilterState) -> List[Dict[str, Any]]:
    """Themes whose metadata or remaining excerpts survive ``filters``."""
    return _filter_sections(result.get("aggregatedThemes") or [], "theme", "description", filters)


def filter_confusion_points(result: AnalysisResult, filters: FilterState) -> List[Dict[str, Any]]:
    return _filter_sections(
        result.get("commonConfusionPoints") or [], "point", "explanationAttempt", filters
    )


def filter_videos(result: AnalysisResult, filters: FilterState) -> List[ProcessedVideo]:
    term = filters.search_term
    return [
        video
        for video in result.get("processedVideos") or []
        if matches_search(video.get("title"), term)
        or matches_search(video.get("creator"), term)
        or matches_search(video.get("url"), term)
    ]


def all_creators(result: AnalysisResult) -> List[str]:
    """Sorted unique creators across processed videos."""
    return sorted(
        {video.get("creator") for video in result.get("processedVideos") or [] if video.get("creator")}
    )


__all__ = [
    "matches_search",
    "is_any_filter_active",
    "filter_themes",
    "filter_confusion_points",
    "filter_videos",
    "all_creators",
]
