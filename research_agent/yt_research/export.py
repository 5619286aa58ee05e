"""
Report exports: CSV rows, pretty JSON and a printable Markdown report.
"""

from __future__ import annotations

import csv
import io
import json
import re
from typing import List

from .types import AnalysisResult

CSV_HEADER = ["Type", "Category", "Description/Attempt", "Excerpt", "Creator", "Tag"]


def csv_rows(result: AnalysisResult) -> List[List[str]]:
    """One row per supporting excerpt, themes first, then confusion points."""
    rows = [list(CSV_HEADER)]
    for theme in result.get("aggregatedThemes") or []:
        for excerpt in theme.get("supportingExcerpts") or []:
            rows.append([
                "Theme",
                theme.get("theme", ""),
                theme.get("description", ""),
                excerpt.get("text", ""),
                excerpt.get("creatorName", ""),
                excerpt.get("tag", ""),
            ])
    for point in result.get("commonConfusionPoints") or []:
        for excerpt in point.get("supportingExcerpts") or []:
            rows.append([
                "Confusion",
                point.get("point", ""),
                point.get("explanationAttempt", ""),
                excerpt.get("text", ""),
                excerpt.get("creatorName", ""),
                excerpt.get("tag", ""),
            ])
    return rows


def to_csv(result: AnalysisResult) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(csv_rows(result))
    return buffer.getvalue()


def export_filename(topic: str, extension: str = "csv") -> str:
    """e.g. ``research_report_react_hooks.csv`` for topic "React Hooks"."""
    slug = re.sub(r"\s+", "_", (topic or "").lower())
    return f"research_report_{slug}.{extension}"


def to_json(result: AnalysisResult) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)


def _excerpt_lines(excerpts) -> List[str]:
    lines = []
    for excerpt in excerpts or []:
        tag = str(excerpt.get("tag", "")).replace("_", " ")
        lines.append(f"> {excerpt.get('text', '')}")
        lines.append(f"> (*{excerpt.get('creatorName', 'Unknown')}*, {tag})")
        lines.append("")
    return lines


def to_markdown(result: AnalysisResult) -> str:
    """Render the report as Markdown suitable for printing or sharing."""
    overview = result.get("datasetOverview") or {}
    sources = ", ".join(overview.get("transcriptSources") or []) or "Mixed Transcripts"
    lines = [
        f"# Research Report: {result.get('topic', '')}",
        "",
        f"**Videos analysed:** {overview.get('count', 0)}  ",
        f"**Transcript sources:** {sources}",
        "",
        "## Aggregated Themes",
        "",
    ]
    for theme in result.get("aggregatedThemes") or []:
        lines += [f"### {theme.get('theme', '')}", "", theme.get("description", ""), ""]
        lines += _excerpt_lines(theme.get("supportingExcerpts"))

    lines += ["## Common Confusion Points", ""]
    for point in result.get("commonConfusionPoints") or []:
        lines += [f"### {point.get('point', '')}", "", point.get("explanationAttempt", ""), ""]
        lines += _excerpt_lines(point.get("supportingExcerpts"))

    lines += ["## Expert Disagreements", ""]
    for item in result.get("disagreements") or []:
        lines += [f"### {item.get('topic', '')}", "", item.get("variations", ""), ""]

    lines += ["## Implied Questions", ""]
    for item in result.get("impliedQuestions") or []:
        lines += [f"- **{item.get('question', '')}** {item.get('evidence', '')}"]
    lines.append("")

    lines += ["## Processed Videos", ""]
    for video in result.get("processedVideos") or []:
        lines.append(f"- [{video.get('title', '')}]({video.get('url', '')}) by {video.get('creator', '')}")
    lines.append("")

    sources_list = result.get("sources") or []
    if sources_list:
        lines += ["## Sources", ""]
        for source in sources_list:
            lines.append(f"- [{source.get('title', '')}]({source.get('uri', '')})")
        lines.append("")

    return "\n".join(lines)


__all__ = ["CSV_HEADER", "csv_rows", "to_csv", "export_filename", "to_json", "to_markdown"]
