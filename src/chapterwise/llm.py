"""
Language model clients used by the chapter map-reduce processor.
"""

import json
import logging
from typing import Any, Optional, Protocol, runtime_checkable

from .cost import calculate_cost, price_per_1k
from .errors import ResponseParseError
from .models import JSONResponse, TextResponse, Usage

logger = logging.getLogger("chapterwise")

# Optional OpenAI SDK
try:
    from openai import AsyncOpenAI
except ImportError:
    AsyncOpenAI = None

DEFAULT_MODEL = "gpt-4o-mini"


@runtime_checkable
class LanguageModelClient(Protocol):
    async def generate_text(self, prompt: str) -> TextResponse: ...

    async def generate_json(self, prompt: str) -> JSONResponse: ...


def parse_json_text(content: str) -> Any:
    """Parse model output as JSON, tolerating prose or code fences around the object."""
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        start = content.find(open_ch)
        end = content.rfind(close_ch)
        if start != -1 and end > start:
            try:
                return json.loads(content[start : end + 1])
            except json.JSONDecodeError:
                continue
    raise ResponseParseError("Model did not return valid JSON", raw_text=content)


class OpenAIModelClient:
    """OpenAI chat completions with usage-based cost accounting."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        *,
        api_key: Optional[str] = None,
        client: Optional["AsyncOpenAI"] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        # Unpriced models fail here, not after a billed call
        price_per_1k(model, 0)
        if client is None:
            if AsyncOpenAI is None:
                raise RuntimeError("openai package not installed. Install with: pip install openai")
            client = AsyncOpenAI(api_key=api_key) if api_key else AsyncOpenAI()
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _complete(self, prompt: str, **extra: Any) -> tuple[str, Usage]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            **extra,
        )
        raw_usage = response.usage
        usage = Usage(
            prompt_tokens=getattr(raw_usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(raw_usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(raw_usage, "total_tokens", 0) or 0,
        )
        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        return content, usage

    async def generate_text(self, prompt: str) -> TextResponse:
        text, usage = await self._complete(prompt)
        return TextResponse(text=text.strip(), usage=usage, cost=calculate_cost(self.model, usage))

    async def generate_json(self, prompt: str) -> JSONResponse:
        text, usage = await self._complete(prompt, response_format={"type": "json_object"})
        try:
            data = parse_json_text(text)
        except ResponseParseError:
            logger.error(f"Failed to parse JSON response from {self.model}: {text[:300]!r}")
            raise
        return JSONResponse(json=data, usage=usage, cost=calculate_cost(self.model, usage))
