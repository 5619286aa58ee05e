
import json
from types import SimpleNamespace

import pytest

from yt_research import config, research
from yt_research.cancellation import CancellationToken
from yt_research.errors import AnalysisCancelled, EmptyReportError, MalformedOutput


REPORT = {
    "topic": "Sourdough baking",
    "datasetOverview": {"count": 2, "transcriptSources": ["auto-generated"]},
    "processedVideos": [
        {"title": "Starter 101", "url": "https://youtu.be/abc", "creator": "Bake Lab"},
        {"title": "Shaping", "url": "https://youtu.be/def", "creator": "Crumb Club"},
    ],
    "aggregatedThemes": [
        {
            "theme": "Hydration",
            "description": "Wetter doughs give an open crumb.",
            "supportingExcerpts": [
                {"videoId": "abc", "creatorName": "Bake Lab", "text": "Go to 75%.", "tag": "Explanation"}
            ],
        }
    ],
    "commonConfusionPoints": [],
    "disagreements": [],
    "impliedQuestions": [],
}


def _response(text, chunks=None):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    candidate = SimpleNamespace(grounding_metadata=metadata)
    return SimpleNamespace(text=text, candidates=[candidate])


def _chunk(uri, title=None):
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


class FakeModels:
    def __init__(self, response, on_call=None):
        self.response = response
        self.on_call = on_call
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.on_call:
            self.on_call()
        return self.response


class FakeClient:
    def __init__(self, response, on_call=None):
        self.models = FakeModels(response, on_call)


@pytest.fixture(autouse=True)
def _gemini_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-test")
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    monkeypatch.delenv("GEMINI_ENABLE_SEARCH", raising=False)
    config.clear_config_caches()
    yield
    config.clear_config_caches()


def test_analyse_topic_returns_report_with_sources():
    client = FakeClient(_response(json.dumps(REPORT), [_chunk("https://example.com/a", "Guide")]))

    result = research.analyse_topic("sourdough", client=client)

    assert result["topic"] == "Sourdough baking"
    assert result["aggregatedThemes"][0]["theme"] == "Hydration"
    assert result["sources"] == [{"uri": "https://example.com/a", "title": "Guide"}]


def test_analyse_topic_sends_schema_and_prompt():
    client = FakeClient(_response(json.dumps(REPORT)))

    research.analyse_topic("@bakelab", "summary", client=client)

    call = client.models.calls[0]
    assert call["model"] == "gemini-3-flash-preview"
    assert "handle: @bakelab" in call["contents"]
    assert "executive summary" in call["contents"]
    generation_config = call["config"]
    assert generation_config.response_mime_type == "application/json"
    assert generation_config.tools


def test_analyse_topic_without_search_tool(monkeypatch):
    monkeypatch.setenv("GEMINI_ENABLE_SEARCH", "false")
    config.clear_config_caches()
    client = FakeClient(_response(json.dumps(REPORT)))

    research.analyse_topic("sourdough", client=client)

    assert not client.models.calls[0]["config"].tools


def test_analyse_topic_recovers_truncated_response():
    raw = json.dumps(REPORT)
    truncated = raw[: raw.index('"commonConfusionPoints"')] + '"commonConfusionPoints": [{"point": "Float te'
    client = FakeClient(_response(truncated))

    result = research.analyse_topic("sourdough", client=client)

    assert result["commonConfusionPoints"] == [{"point": "Float te"}]
    # Sections cut off entirely are filled with defaults
    assert result["disagreements"] == []
    assert result["impliedQuestions"] == []


def test_analyse_topic_rejects_empty_response():
    client = FakeClient(_response("   "))

    with pytest.raises(EmptyReportError):
        research.analyse_topic("sourdough", client=client)


def test_analyse_topic_raises_malformed_output():
    client = FakeClient(_response('{"topic": }'))

    with pytest.raises(MalformedOutput):
        research.analyse_topic("sourdough", client=client)


def test_analyse_topic_rejects_non_object_json():
    client = FakeClient(_response('["not", "a", "report"]'))

    with pytest.raises(MalformedOutput):
        research.analyse_topic("sourdough", client=client)


def test_analyse_topic_discards_response_after_cancel():
    token = CancellationToken()
    client = FakeClient(_response(json.dumps(REPORT)), on_call=token.cancel)

    with pytest.raises(AnalysisCancelled):
        research.analyse_topic("sourdough", client=client, cancel_token=token)


def test_analyse_topic_rejects_unknown_format():
    client = FakeClient(_response(json.dumps(REPORT)))

    with pytest.raises(ValueError):
        research.analyse_topic("sourdough", "haiku", client=client)
    assert client.models.calls == []


def test_extract_grounding_sources_defaults_and_filters():
    response = _response("{}", [_chunk("https://a.example"), _chunk(""), _chunk(None, "No uri")])

    assert research.extract_grounding_sources(response) == [
        {"uri": "https://a.example", "title": "Research Source"}
    ]


def test_extract_grounding_sources_handles_missing_metadata():
    assert research.extract_grounding_sources(SimpleNamespace(candidates=None)) == []
    assert research.extract_grounding_sources(_response("{}", None)) == []


def test_normalise_result_fills_defaults():
    normalised = research.normalise_result({"topic": "x", "disagreements": None})
    assert normalised["topic"] == "x"
    assert normalised["datasetOverview"] == {"count": 0, "transcriptSources": []}
    assert normalised["disagreements"] == []
    assert normalised["processedVideos"] == []
