"""
Centralized configuration with environment variable overrides.

Assistant naming, external model settings, and reply sizing are
configurable here. Nothing is hardcoded in the classifier, resolver,
or generator logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from catalog_chat.logging_context import attach_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(session_id)s]: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class AssistantConfig:
    """How the assistant introduces itself."""

    name: str = os.getenv("ASSISTANT_NAME", "LibraryBot")
    library_name: str = os.getenv("LIBRARY_NAME", "the Library")


@dataclass(frozen=True)
class ModelConfig:
    """External text-generation service settings."""

    api_url: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
    api_key: str = os.getenv("OPENAI_API_KEY", "")
    llm_model: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_temperature: float = _safe_float("LLM_TEMPERATURE", "0.7")
    max_tokens: int = _safe_int("LLM_MAX_TOKENS", "500")
    request_timeout_sec: float = _safe_float("LLM_REQUEST_TIMEOUT", "10.0")


@dataclass(frozen=True)
class DialogueConfig:
    """Reply sizing and transcript retention."""

    search_page_size: int = _safe_int("SEARCH_PAGE_SIZE", "5")
    collection_preview_size: int = _safe_int("COLLECTION_PREVIEW_SIZE", "10")
    recommendation_count: int = _safe_int("RECOMMENDATION_COUNT", "3")
    # 0 keeps the whole conversation for the lifetime of the session
    transcript_max_turns: int = _safe_int("TRANSCRIPT_MAX_TURNS", "0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    dialogue: DialogueConfig = field(default_factory=DialogueConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 0.0 <= config.model.llm_temperature <= 2.0:
        raise ValueError(
            f"LLM_TEMPERATURE must be between 0.0 and 2.0, got {config.model.llm_temperature}"
        )
    if config.model.max_tokens < 1:
        raise ValueError(
            f"LLM_MAX_TOKENS must be >= 1, got {config.model.max_tokens}"
        )
    if config.model.request_timeout_sec <= 0:
        raise ValueError(
            f"LLM_REQUEST_TIMEOUT must be > 0, got {config.model.request_timeout_sec}"
        )

    for size_name, size_value in [
        ("SEARCH_PAGE_SIZE", config.dialogue.search_page_size),
        ("COLLECTION_PREVIEW_SIZE", config.dialogue.collection_preview_size),
        ("RECOMMENDATION_COUNT", config.dialogue.recommendation_count),
    ]:
        if size_value < 1:
            raise ValueError(f"{size_name} must be >= 1, got {size_value}")

    if config.dialogue.transcript_max_turns < 0:
        raise ValueError(
            f"TRANSCRIPT_MAX_TURNS must be >= 0, got {config.dialogue.transcript_max_turns}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        attach_session_filter(handler)
    logger.info("Configuration loaded for '%s'", config.assistant.name)
    return config


# Singleton instance
settings = load_config()
