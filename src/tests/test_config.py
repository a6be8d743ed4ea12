"""
Tests for environment-driven settings.
"""

from unittest.mock import patch

import pytest

from chapterwise.config import Settings, build_model_client, build_processor, load_settings
from chapterwise.errors import UnknownModelError
from chapterwise.filters import DEFAULT_BLOCKED_CHAPTER_PHRASES
from conftest import make_openai_sdk

ENV_KEYS = [
    "OPENAI_API_KEY",
    "YOUTUBE_API_KEY",
    "CHAPTERWISE_MODEL",
    "CHAPTERWISE_OVERLAP_SECONDS",
    "CHAPTERWISE_MAX_CONCURRENT",
    "CHAPTERWISE_BLOCKED_CHAPTER_PHRASES",
    "CHAPTERWISE_BLOCKED_SEGMENT_PHRASES",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so values loaded from .env files are removed on teardown
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    """Test defaults with an empty environment."""
    settings = load_settings(tmp_path / "missing.env")

    assert settings.model == "gpt-4o-mini"
    assert settings.overlap_offset_seconds == 5.0
    assert settings.max_concurrent is None
    assert settings.blocked_chapter_phrases == DEFAULT_BLOCKED_CHAPTER_PHRASES
    assert settings.openai_api_key is None


def test_env_file_values(clean_env, tmp_path):
    """Test values read from a .env file."""
    env = tmp_path / ".env"
    env.write_text(
        "OPENAI_API_KEY=sk-test\n"
        "CHAPTERWISE_OVERLAP_SECONDS=2.5\n"
        "CHAPTERWISE_MAX_CONCURRENT=4\n"
        "CHAPTERWISE_BLOCKED_CHAPTER_PHRASES=promo, merch ,\n",
        encoding="utf-8",
    )

    settings = load_settings(env)

    assert settings.openai_api_key == "sk-test"
    assert settings.overlap_offset_seconds == 2.5
    assert settings.max_concurrent == 4
    assert settings.blocked_chapter_phrases == ("promo", "merch")


def test_negative_overlap_rejected(clean_env, tmp_path):
    """Test overlap validation."""
    clean_env.setenv("CHAPTERWISE_OVERLAP_SECONDS", "-3")

    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.env")


def test_build_processor_uses_settings():
    """Test that model and concurrency limit flow from settings into the processor."""
    sdk = make_openai_sdk()
    settings = Settings(openai_api_key="sk-test", model="gpt-4o", max_concurrent=3)

    processor = build_processor(settings, client=sdk)

    assert processor.max_concurrent == 3
    assert processor.client.model == "gpt-4o"
    assert processor.client.client is sdk


def test_build_model_client_passes_api_key():
    """Test that the configured API key reaches the SDK constructor."""
    with patch("chapterwise.llm.AsyncOpenAI") as sdk_cls:
        client = build_model_client(Settings(openai_api_key="sk-test"))

    sdk_cls.assert_called_once_with(api_key="sk-test")
    assert client.model == "gpt-4o-mini"


def test_build_model_client_rejects_unpriced_model():
    """Test that a misconfigured model fails before a client is built."""
    with pytest.raises(UnknownModelError):
        build_model_client(Settings(model="not-a-model"), client=make_openai_sdk())
