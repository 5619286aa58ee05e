
import pytest

from yt_research.prompts.research import build_user_prompt
from yt_research.query_input import InputType, classify_query, is_handle


def test_empty_query():
    result = classify_query("   ")
    assert result.type is InputType.NONE
    assert result.items == []
    assert result.all_valid


def test_topic_query_keeps_full_text():
    result = classify_query("react hooks, state management")
    assert result.type is InputType.TOPIC
    assert [item.text for item in result.items] == ["react hooks, state management"]
    assert result.all_valid


@pytest.mark.parametrize("handle", ["@mkbhd", "@Some.Creator-01", "  @under_score  "])
def test_single_handle(handle):
    result = classify_query(handle)
    assert result.type is InputType.USERNAME
    assert result.items[0].text == handle.strip()


def test_handle_with_spaces_is_a_topic():
    assert classify_query("@two words").type is InputType.TOPIC


def test_url_list_all_valid():
    result = classify_query("https://www.youtube.com/watch?v=abc, youtu.be/def")
    assert result.type is InputType.URL
    assert [item.text for item in result.items] == [
        "https://www.youtube.com/watch?v=abc",
        "youtu.be/def",
    ]
    assert result.all_valid


def test_url_mode_flags_invalid_entries():
    result = classify_query("https://youtube.com/watch?v=abc, not a url, ftp://youtube.com/x")
    assert result.type is InputType.URL
    assert not result.all_valid
    assert [item.text for item in result.invalid_items] == ["not a url", "ftp://youtube.com/x"]


def test_is_handle():
    assert is_handle(" @creator")
    assert not is_handle("creator")


def test_handle_selects_creator_prompt():
    assert "transcripts from handle: @bakelab" in build_user_prompt("@bakelab")
    assert "handle:" not in build_user_prompt("bakelab sourdough")
