"""Shared test fixtures and utilities."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from chapterwise.models import JSONResponse, TextResponse, Usage


def make_openai_response(text="hello", prompt_tokens=10, completion_tokens=5):
    """Build a mock OpenAI ChatCompletion response."""
    msg = MagicMock()
    msg.content = text
    choice = MagicMock()
    choice.message = msg
    usage = MagicMock()
    usage.prompt_tokens = prompt_tokens
    usage.completion_tokens = completion_tokens
    usage.total_tokens = prompt_tokens + completion_tokens
    resp = MagicMock()
    resp.choices = [choice]
    resp.usage = usage
    return resp


def make_openai_sdk(*responses):
    """Mock AsyncOpenAI client returning ``responses`` in order."""
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(side_effect=list(responses))
    return sdk


class FakeModelClient:
    """Language model stand-in keyed by prompt text.

    ``texts`` maps a prompt to its reply or to an exception to raise; ``reduce`` is the
    JSON result (or exception) for every generate_json call.
    """

    def __init__(self, texts=None, costs=None, reduce=None, reduce_cost=0.0):
        self.texts = texts or {}
        self.costs = costs or {}
        self.reduce = reduce
        self.reduce_cost = reduce_cost
        self.text_prompts = []
        self.json_prompts = []

    async def generate_text(self, prompt):
        self.text_prompts.append(prompt)
        reply = self.texts.get(prompt, "")
        if isinstance(reply, BaseException):
            raise reply
        return TextResponse(text=reply, usage=Usage(1, 1, 2), cost=self.costs.get(prompt, 0.0))

    async def generate_json(self, prompt):
        self.json_prompts.append(prompt)
        reply = self.reduce(prompt) if callable(self.reduce) else self.reduce
        if isinstance(reply, BaseException):
            raise reply
        return JSONResponse(json=reply, usage=Usage(3, 4, 7), cost=self.reduce_cost)


@pytest.fixture
def fake_client_factory():
    return FakeModelClient
