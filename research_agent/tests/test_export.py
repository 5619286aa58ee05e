
import csv
import io
import json

from yt_research import export


RESULT = {
    "topic": "React  Hooks Basics",
    "datasetOverview": {"count": 1, "transcriptSources": ["official"]},
    "processedVideos": [{"title": "Hooks", "url": "https://youtu.be/x", "creator": "Dev Ed"}],
    "aggregatedThemes": [
        {
            "theme": "useEffect",
            "description": "Runs after render",
            "supportingExcerpts": [
                {"videoId": "x", "creatorName": "Dev Ed", "text": 'Say "cleanup", always.', "tag": "Warning_or_Caveat"}
            ],
        }
    ],
    "commonConfusionPoints": [
        {
            "point": "Dependency arrays",
            "explanationAttempt": "List what you read",
            "supportingExcerpts": [
                {"videoId": "x", "creatorName": "Dev Ed", "text": "Empty means once.", "tag": "Beginner_Confusion"}
            ],
        }
    ],
    "disagreements": [{"topic": "useMemo", "variations": "- Always\n- Rarely"}],
    "impliedQuestions": [{"question": "When to memoize?", "evidence": "Repeated asides"}],
    "sources": [{"uri": "https://react.dev", "title": "React Docs"}],
}


def test_csv_rows_layout():
    rows = export.csv_rows(RESULT)
    assert rows[0] == ["Type", "Category", "Description/Attempt", "Excerpt", "Creator", "Tag"]
    assert rows[1] == ["Theme", "useEffect", "Runs after render", 'Say "cleanup", always.', "Dev Ed", "Warning_or_Caveat"]
    assert rows[2][0] == "Confusion"
    assert len(rows) == 3


def test_to_csv_quotes_every_cell_and_escapes_quotes():
    text = export.to_csv(RESULT)
    first_line = text.splitlines()[0]
    assert first_line == '"Type","Category","Description/Attempt","Excerpt","Creator","Tag"'
    assert '"Say ""cleanup"", always."' in text
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed == export.csv_rows(RESULT)


def test_csv_for_empty_report_is_header_only():
    assert export.csv_rows({}) == [export.CSV_HEADER]


def test_export_filename():
    assert export.export_filename("React  Hooks Basics") == "research_report_react_hooks_basics.csv"
    assert export.export_filename("Sourdough", "md") == "research_report_sourdough.md"


def test_to_json_round_trips():
    assert json.loads(export.to_json(RESULT)) == RESULT


def test_to_markdown_contains_sections():
    text = export.to_markdown(RESULT)
    assert text.startswith("# Research Report: React  Hooks Basics")
    assert "### useEffect" in text
    assert "> Empty means once." in text
    assert "Warning or Caveat" in text
    assert "- **When to memoize?** Repeated asides" in text
    assert "[React Docs](https://react.dev)" in text
    assert "[Hooks](https://youtu.be/x) by Dev Ed" in text
