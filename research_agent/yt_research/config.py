"""
Configuration helpers for the YouTube research agent.

Centralises environment variable loading/validation so the rest of the codebase
can depend on typed config objects instead of sprinkling os.getenv calls.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_HISTORY_LIMIT = 10
LOG_LEVEL_CHOICES = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class GeminiConfig:
    """Gemini API credentials and model selection."""

    api_key: str
    model_name: str
    enable_search: bool


@dataclass(frozen=True)
class AppConfig:
    """Misc application knobs."""

    log_level: str
    history_limit: int
    poll_interval_seconds: float


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Wrapper around os.getenv that trims whitespace."""
    value = os.getenv(name, default)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or default


def _require_env(*names: str) -> str:
    """Fetch the first set environment variable of ``names`` or raise a helpful error."""
    for name in names:
        value = _get_env(name)
        if value:
            return value
    joined = "' or '".join(names)
    raise RuntimeError(f"Expected environment variable '{joined}' to be set.")


def _get_bool_env(name: str, default: bool) -> bool:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got '{raw}'.")


def _get_int_env(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _get_float_env(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


@lru_cache(maxsize=1)
def get_gemini_config() -> GeminiConfig:
    """Return Gemini configuration for the research agent."""
    model_name = _get_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL
    if not model_name.startswith("gemini"):
        logger.warning(
            "GEMINI_MODEL '%s' does not look like a Gemini model name.", model_name
        )
    return GeminiConfig(
        api_key=_require_env("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        model_name=model_name,
        enable_search=_get_bool_env("GEMINI_ENABLE_SEARCH", True),
    )


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """Return misc application toggles."""
    log_level = (_get_env("LOG_LEVEL") or "INFO").upper()
    if log_level not in LOG_LEVEL_CHOICES:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(LOG_LEVEL_CHOICES)}, got '{log_level}'."
        )
    return AppConfig(
        log_level=log_level,
        history_limit=_get_int_env("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        poll_interval_seconds=_get_float_env("POLL_INTERVAL_SECONDS", 1.0),
    )


def get_log_level(default: str = "INFO") -> str:
    """Validated LOG_LEVEL, falling back to ``default`` when it is misconfigured."""
    try:
        return get_app_config().log_level
    except ValueError as exc:
        logger.warning("Invalid app config, logging at %s: %s", default, exc)
        return default


def clear_config_caches() -> None:
    """Drop cached config objects so updated environment values are picked up."""
    get_gemini_config.cache_clear()
    get_app_config.cache_clear()


def describe_active_models() -> dict:
    """Return a summary of the currently selected model and tools."""
    gemini_cfg = get_gemini_config()
    return {
        "research_model": gemini_cfg.model_name,
        "google_search": gemini_cfg.enable_search,
    }


__all__ = [
    "GeminiConfig",
    "AppConfig",
    "DEFAULT_GEMINI_MODEL",
    "get_gemini_config",
    "get_app_config",
    "get_log_level",
    "clear_config_caches",
    "describe_active_models",
]
