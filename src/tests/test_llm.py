"""
Tests for the OpenAI language model client.
"""

import asyncio

import pytest

from chapterwise.errors import ResponseParseError, UnknownModelError
from chapterwise.llm import LanguageModelClient, OpenAIModelClient, parse_json_text
from conftest import make_openai_response, make_openai_sdk


def test_generate_text_usage_and_cost():
    """Test text generation with usage-based cost."""
    sdk = make_openai_sdk(make_openai_response("  A summary.  ", prompt_tokens=1000, completion_tokens=1000))
    client = OpenAIModelClient("gpt-4o-mini", client=sdk)

    response = asyncio.run(client.generate_text("Summarize"))

    assert response.text == "A summary."
    assert response.usage.total_tokens == 2000
    assert response.cost == pytest.approx(0.00015 + 0.0006)
    kwargs = sdk.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["messages"] == [{"role": "user", "content": "Summarize"}]
    assert "response_format" not in kwargs


def test_generate_json_uses_json_mode():
    """Test JSON generation."""
    sdk = make_openai_sdk(make_openai_response('{"items": [1, 2]}'))
    client = OpenAIModelClient("gpt-4o", client=sdk)

    response = asyncio.run(client.generate_json("List"))

    assert response.json == {"items": [1, 2]}
    assert sdk.chat.completions.create.call_args.kwargs["response_format"] == {"type": "json_object"}


def test_generate_json_unparsable():
    """Test that garbage output raises ResponseParseError."""
    sdk = make_openai_sdk(make_openai_response("sorry, I cannot do that"))
    client = OpenAIModelClient("gpt-4o", client=sdk)

    with pytest.raises(ResponseParseError):
        asyncio.run(client.generate_json("List"))


def test_parse_json_text_with_surrounding_prose():
    """Test lenient JSON extraction."""
    assert parse_json_text('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_text("result: [1, 2, 3]") == [1, 2, 3]
    with pytest.raises(ValueError):
        parse_json_text("{broken")


def test_client_satisfies_protocol():
    """Test structural typing of the client."""
    client = OpenAIModelClient(client=make_openai_sdk())

    assert isinstance(client, LanguageModelClient)


def test_unpriced_model_rejected_before_any_call():
    """Test that a model missing from the price table fails at construction."""
    sdk = make_openai_sdk(make_openai_response("never used"))

    with pytest.raises(UnknownModelError):
        OpenAIModelClient("gpt-4.1", client=sdk)

    sdk.chat.completions.create.assert_not_called()
