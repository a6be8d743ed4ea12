"""
Tests for cost calculation.
"""

import pytest

from chapterwise.cost import calculate_cost, estimate_cost, price_per_1k
from chapterwise.errors import UnknownModelError
from chapterwise.models import Usage


def test_calculate_cost_flat_rate():
    """Test a flat-priced model."""
    usage = Usage(prompt_tokens=1000, completion_tokens=500, total_tokens=1500)

    cost = calculate_cost("gpt-4o-mini", usage)

    assert cost == pytest.approx(0.00015 + 0.5 * 0.0006)


def test_tiered_pricing():
    """Test the 128K tier switch."""
    assert price_per_1k("gemini-1.5-pro", 1000) == (0.00125, 0.005)
    assert price_per_1k("gemini-1.5-pro", 200_000) == (0.0025, 0.01)


def test_estimate_cost_defaults_output_to_half_prompt():
    """Test the default output estimate."""
    assert estimate_cost("gpt-4o", 1000) == pytest.approx(calculate_cost("gpt-4o", Usage(1000, 500, 1500)))
    assert estimate_cost("gpt-4o", 1000, 100) == pytest.approx(0.0025 + 0.1 * 0.01)


def test_unknown_model():
    """Test missing pricing."""
    with pytest.raises(UnknownModelError):
        calculate_cost("no-such-model", Usage())
