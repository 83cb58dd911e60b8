"""Tests for cost estimation."""

import pytest

from coldguard.config import ColdEmailCosts
from coldguard.cost import estimate_cost, estimate_model_cost, DEFAULT_DRAFT_COST


class TestEstimateCost:
    """Test estimate_cost."""

    def test_credits_and_tokens(self):
        """10 credits and 400 tokens at default prices."""
        assert estimate_cost(10, 400) == pytest.approx(1.0002)

    def test_default_tokens(self):
        """Token count defaults to the per-email estimate."""
        assert estimate_cost(10) == pytest.approx(estimate_cost(10, 400))

    def test_zero(self):
        assert estimate_cost(0, 0) == 0

    def test_never_negative(self):
        for credits in range(0, 50, 7):
            for tokens in (0, 1, 999, 100_000):
                assert estimate_cost(credits, tokens) >= 0

    def test_custom_prices(self):
        costs = ColdEmailCosts(credit_price_usd=1.0, price_per_1k_tokens_usd=2.0)

        assert estimate_cost(3, 500, costs) == pytest.approx(4.0)


class TestEstimateModelCost:
    """Test per-model draft cost."""

    def test_known_model(self):
        assert estimate_model_cost("openai/gpt-4o-mini") == pytest.approx(0.002)

    def test_unknown_model_uses_default(self):
        assert estimate_model_cost("someone/new-model") == DEFAULT_DRAFT_COST
