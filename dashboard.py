import logging
import os
import time
import uuid
from pathlib import Path

import dotenv
import streamlit as st

from yt_research import config as research_config
from yt_research import export
from yt_research import filters as report_filters
from yt_research.cancellation import start_research
from yt_research.errors import user_message_for
from yt_research.query_input import InputType, classify_query
from yt_research.state import (
    AppState,
    cancel,
    clear_filters,
    clear_history,
    fail,
    reduce,
    set_search_term,
    submit,
    succeed,
    toggle_creator,
    toggle_tag,
)
from yt_research.types import OUTPUT_FORMATS, AnalysisTag

# --- Config & Setup ---
st.set_page_config(
    page_title="Transcript Research Agent",
    page_icon="🔬",
    layout="wide",
    initial_sidebar_state="expanded",
)

ENV_PATH = Path(".env")

# Ensure .env exists
if not ENV_PATH.exists():
    ENV_PATH.touch()

logging.basicConfig(
    level=research_config.get_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("yt_research.dashboard")

LOADING_STAGES = [
    "Initiating research protocol...",
    "Accessing YouTube transcript database...",
    "Normalizing text and removing artifacts...",
    "Identifying cross-creator patterns...",
    "Synthesizing analytical findings...",
]
STAGE_SECONDS = 3.0

FORMAT_LABELS = {
    "detailed": "Detailed JSON",
    "bulleted": "Bulleted Themes",
    "summary": "Executive Summary",
}

INPUT_ICONS = {
    InputType.URL: "🔗",
    InputType.USERNAME: "👤",
    InputType.TOPIC: "🔍",
    InputType.NONE: "🔍",
}


def load_env_vars():
    """Reload environment variables from file."""
    dotenv.load_dotenv(ENV_PATH, override=True)


def save_env_var(key: str, value: str):
    """Update a single key in the .env file."""
    dotenv.set_key(ENV_PATH, key, value)
    load_env_vars()
    # Clear config caches so new values are picked up
    research_config.clear_config_caches()


def _history_limit() -> int:
    try:
        return research_config.get_app_config().history_limit
    except ValueError:
        return research_config.DEFAULT_HISTORY_LIMIT


def dispatch(action):
    st.session_state.app_state = reduce(
        st.session_state.app_state, action, history_limit=_history_limit()
    )


def _reset_filter_widgets():
    for key in list(st.session_state.keys()):
        if key == "filter_term" or key.startswith(("tag_", "creator_")):
            del st.session_state[key]


def _clear_filters():
    dispatch(clear_filters())
    _reset_filter_widgets()


def _on_filter_term_change():
    dispatch(set_search_term(st.session_state.get("filter_term", "")))


def _use_history_item(item: str):
    st.session_state.query = item
    st.session_state.pending_query = item


def _start(query: str, output_format: str):
    request_id = uuid.uuid4().hex
    dispatch(submit(query, request_id))
    st.session_state.started_at = time.monotonic()
    st.session_state.task = start_research(query, output_format, request_id=request_id)


def _stop():
    task = st.session_state.get("task")
    if task is not None:
        task.cancel()
    st.session_state.task = None
    dispatch(cancel())
    logger.info("Analysis cancelled by user.")


def _collect_finished_task():
    task = st.session_state.get("task")
    if task is None or not task.done():
        return
    st.session_state.task = None
    if task.cancelled:
        return
    try:
        result = task.outcome()
    except Exception as exc:
        logger.error("Research request %s failed: %s", task.request_id, exc)
        dispatch(fail(task.request_id, user_message_for(exc)))
    else:
        dispatch(succeed(task.request_id, result))
        _reset_filter_widgets()


# --- Session State ---
load_env_vars()
if "app_state" not in st.session_state:
    st.session_state.app_state = AppState()
if "task" not in st.session_state:
    st.session_state.task = None

_collect_finished_task()


# --- Sidebar ---
st.sidebar.title("🔬 Research Agent")

st.sidebar.subheader("System Status")
if os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"):
    st.sidebar.success("✅ Gemini Key Set")
else:
    st.sidebar.error("❌ Gemini Key Missing")

try:
    models = research_config.describe_active_models()
    st.sidebar.caption(
        f"Model: `{models['research_model']}` | Search grounding: {'on' if models['google_search'] else 'off'}"
    )
except (RuntimeError, ValueError) as e:
    st.sidebar.caption(f"Config incomplete: {e}")

st.sidebar.divider()
st.sidebar.subheader("🕘 Search History")
app_state: AppState = st.session_state.app_state
if app_state.search_history:
    for idx, item in enumerate(app_state.search_history):
        st.sidebar.button(
            item,
            key=f"history_{idx}",
            on_click=_use_history_item,
            args=(item,),
            disabled=app_state.is_searching,
            use_container_width=True,
        )
    st.sidebar.button("Clear History", on_click=dispatch, args=(clear_history(),))
else:
    st.sidebar.caption("No searches yet.")


# --- Main Tabs ---
tab_research, tab_config = st.tabs(["🔍 Research", "⚙️ Configuration"])

# --- Configuration Tab ---
with tab_config:
    st.header("Environment Configuration")
    st.info("Values are saved directly to `.env`.")

    with st.form("env_config_form"):
        st.text_input("GOOGLE_API_KEY", value=os.getenv("GOOGLE_API_KEY", ""), key="env_GOOGLE_API_KEY", type="password")
        st.text_input("GEMINI_MODEL", value=os.getenv("GEMINI_MODEL", research_config.DEFAULT_GEMINI_MODEL), key="env_GEMINI_MODEL")
        st.checkbox(
            "GEMINI_ENABLE_SEARCH",
            value=os.getenv("GEMINI_ENABLE_SEARCH", "true").lower() in ("1", "true", "yes", "on"),
            key="env_GEMINI_ENABLE_SEARCH",
            help="Ground research in Google Search results. Sources are listed under the Sources tab.",
        )
        st.number_input("HISTORY_LIMIT", value=int(os.getenv("HISTORY_LIMIT", "10")), min_value=1, max_value=50, key="env_HISTORY_LIMIT")

        if st.form_submit_button("💾 Save Configuration"):
            save_env_var("GOOGLE_API_KEY", str(st.session_state.get("env_GOOGLE_API_KEY", "")))
            save_env_var("GEMINI_MODEL", str(st.session_state.get("env_GEMINI_MODEL", "")))
            save_env_var("GEMINI_ENABLE_SEARCH", "true" if st.session_state.get("env_GEMINI_ENABLE_SEARCH") else "false")
            save_env_var("HISTORY_LIMIT", str(st.session_state.get("env_HISTORY_LIMIT", 10)))
            st.success("Configuration saved and reloaded! Config caches cleared.")
            time.sleep(1)
            st.rerun()


def render_excerpts(excerpts):
    for excerpt in excerpts:
        tag = str(excerpt.get("tag", "")).replace("_", " ")
        st.markdown(f"> {excerpt.get('text', '')}")
        st.caption(f"{excerpt.get('creatorName', 'Unknown')} · `{tag}` · video `{excerpt.get('videoId', '')}`")


def render_result(result: dict, state: AppState):
    overview = result.get("datasetOverview") or {}
    st.header(result.get("topic") or "Research Report")

    col_count, col_sources, col_export = st.columns([1, 2, 2])
    col_count.metric("Videos Analysed", overview.get("count", 0))
    col_sources.caption("Transcript Sources")
    col_sources.write(", ".join(overview.get("transcriptSources") or []) or "Mixed Transcripts")
    with col_export:
        topic = result.get("topic", "")
        st.download_button("📊 Export as CSV", export.to_csv(result), file_name=export.export_filename(topic, "csv"), mime="text/csv")
        st.download_button("📝 Export Report (Markdown)", export.to_markdown(result), file_name=export.export_filename(topic, "md"), mime="text/markdown")
        st.download_button("📋 Copy JSON", export.to_json(result), file_name=export.export_filename(topic, "json"), mime="application/json")

    # Filter bar
    filters = state.filters
    col_term, col_reset = st.columns([4, 1])
    col_term.text_input(
        "Filter by keyword or creator...",
        value=filters.search_term,
        key="filter_term",
        on_change=_on_filter_term_change,
    )
    if report_filters.is_any_filter_active(filters):
        col_reset.button("Reset", on_click=_clear_filters)
        st.caption("Active Filters Applied")

    with st.expander("Filters", expanded=False):
        st.caption("Classification Tags")
        tag_cols = st.columns(len(AnalysisTag))
        for col, tag in zip(tag_cols, AnalysisTag):
            col.checkbox(
                tag.label,
                value=tag.value in filters.tags,
                key=f"tag_{tag.value}",
                on_change=dispatch,
                args=(toggle_tag(tag.value),),
            )
        st.caption("Creator Consensus Filter")
        for creator in report_filters.all_creators(result):
            st.checkbox(
                creator,
                value=creator in filters.creators,
                key=f"creator_{creator}",
                on_change=dispatch,
                args=(toggle_creator(creator),),
            )

    themes = report_filters.filter_themes(result, filters)
    confusion = report_filters.filter_confusion_points(result, filters)
    videos = report_filters.filter_videos(result, filters)

    tab_themes, tab_confusion, tab_disagreements, tab_questions, tab_videos, tab_sources = st.tabs(
        ["Themes", "Confusion", "Disagreements", "Questions", "Videos", "Sources"]
    )
    with tab_themes:
        st.caption(f"Showing {len(themes)} matches")
        for theme in themes:
            st.subheader(theme.get("theme", ""))
            st.write(theme.get("description", ""))
            render_excerpts(theme.get("supportingExcerpts") or [])
        if not themes:
            st.info("No themes match the current filters.")
    with tab_confusion:
        st.caption(f"Showing {len(confusion)} matches")
        for point in confusion:
            st.subheader(point.get("point", ""))
            st.write(point.get("explanationAttempt", ""))
            render_excerpts(point.get("supportingExcerpts") or [])
        if not confusion:
            st.info("No confusion points match the current filters.")
    with tab_disagreements:
        for item in result.get("disagreements") or []:
            st.subheader(item.get("topic", ""))
            st.markdown(item.get("variations", ""))
    with tab_questions:
        for item in result.get("impliedQuestions") or []:
            st.markdown(f"**{item.get('question', '')}**")
            st.caption(item.get("evidence", ""))
    with tab_videos:
        st.caption(f"Total: {len(videos)} Videos")
        for video in videos:
            st.markdown(f"[{video.get('title', '')}]({video.get('url', '')}) · {video.get('creator', '')}")
        if not videos:
            st.info("No videos match the current filter.")
    with tab_sources:
        sources = result.get("sources") or []
        for source in sources:
            st.markdown(f"- [{source.get('title', '')}]({source.get('uri', '')})")
        if not sources:
            st.caption("No grounding sources were returned.")


# --- Research Tab ---
with tab_research:
    st.header("Cross-Video Transcript Research")

    with st.form("search_form"):
        col_query, col_format = st.columns([4, 1])
        query = col_query.text_input(
            "Query",
            key="query",
            placeholder="Topic, @username, or video URLs (comma-separated)...",
        )
        output_format = col_format.selectbox(
            "Output", OUTPUT_FORMATS, format_func=lambda value: FORMAT_LABELS[value], key="output_format"
        )
        submitted = st.form_submit_button(
            "🚀 Analyze", type="primary", disabled=st.session_state.app_state.is_searching
        )

    validated = classify_query(query)
    if validated.type == InputType.URL:
        st.markdown(
            " ".join(f"{'✅' if item.is_valid else '❌'} `{item.text}`" for item in validated.items)
        )
        if not validated.all_valid:
            st.error("Some entries are not valid YouTube URLs.")
    elif validated.type != InputType.NONE:
        st.caption(f"{INPUT_ICONS[validated.type]} Detected input: {validated.type.value}")

    pending = st.session_state.pop("pending_query", None)
    if pending and not st.session_state.app_state.is_searching:
        if classify_query(pending).all_valid:
            _start(pending, output_format)
    elif submitted and query.strip() and validated.all_valid:
        _start(query, output_format)

    state: AppState = st.session_state.app_state

    if state.is_searching:
        elapsed = time.monotonic() - st.session_state.get("started_at", time.monotonic())
        stage = LOADING_STAGES[int(elapsed // STAGE_SECONDS) % len(LOADING_STAGES)]
        st.progress(min(int(elapsed * 1.5), 95), text=stage)
        st.button("⏹ Stop", on_click=_stop)

    if state.error:
        st.error(state.error)

    if state.result:
        render_result(state.result, state)
    elif not state.is_searching:
        st.info("Enter a topic, a creator handle, or YouTube video URLs to start.")

    if state.is_searching:
        try:
            poll_interval = research_config.get_app_config().poll_interval_seconds
        except ValueError:
            poll_interval = 1.0
        time.sleep(poll_interval)
        st.rerun()
