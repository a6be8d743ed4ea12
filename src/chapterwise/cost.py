"""
Cost calculation for language model calls.
"""

import math
from typing import Optional, Union

from .errors import UnknownModelError
from .models import Usage

# Tiered prices switch at this many tokens per call
TIER_THRESHOLD_TOKENS = 128_000

TieredRate = dict[str, float]

# USD per 1K tokens
PRICING: dict[str, dict[str, Union[float, TieredRate]]] = {
    "gpt-4o": {"input": 0.0025, "output": 0.01},
    "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    "gpt-4.5": {"input": 0.075, "output": 0.15},
    "o1": {"input": 0.015, "output": 0.06},
    "o3-mini": {"input": 0.0011, "output": 0.0044},
    "claude-3.5-sonnet": {"input": 0.003, "output": 0.015},
    "gemini-1.5-pro": {
        "input": {"up_to_128k": 0.00125, "over_128k": 0.0025},
        "output": {"up_to_128k": 0.005, "over_128k": 0.01},
    },
    "gemini-1.5-flash-8b": {
        "input": {"up_to_128k": 0.0000375, "over_128k": 0.000075},
        "output": {"up_to_128k": 0.00015, "over_128k": 0.0003},
    },
    "deepseek-v2": {"input": 0.0003, "output": 0.0003},
}


def _rate(rate: Union[float, TieredRate], tokens: int) -> float:
    if isinstance(rate, dict):
        return float(rate["up_to_128k"] if tokens <= TIER_THRESHOLD_TOKENS else rate["over_128k"])
    return float(rate)


def price_per_1k(model_id: str, tokens: int) -> tuple[float, float]:
    """Return (input, output) USD per 1K tokens for a call of ``tokens`` size."""
    model = PRICING.get(model_id)
    if model is None:
        raise UnknownModelError(f"Model not found: {model_id}")
    return _rate(model["input"], tokens), _rate(model["output"], tokens)


def calculate_cost(model_id: str, usage: Usage) -> float:
    """Cost of one call given its reported usage."""
    input_rate, _ = price_per_1k(model_id, usage.prompt_tokens)
    _, output_rate = price_per_1k(model_id, usage.completion_tokens)
    return (usage.prompt_tokens / 1000.0) * input_rate + (usage.completion_tokens / 1000.0) * output_rate


def estimate_cost(
    model_id: str, prompt_tokens: int, expected_output_tokens: Optional[int] = None
) -> float:
    """Estimate a call's cost before making it; output defaults to half the prompt."""
    output_tokens = expected_output_tokens or math.ceil(prompt_tokens / 2)
    return calculate_cost(
        model_id,
        Usage(
            prompt_tokens=prompt_tokens,
            completion_tokens=output_tokens,
            total_tokens=prompt_tokens + output_tokens,
        ),
    )
