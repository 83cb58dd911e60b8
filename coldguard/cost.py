"""Cost estimation for contact lookups and draft generation."""

from typing import Dict, Optional

from coldguard.config import ColdEmailCosts, DEFAULT_COSTS


# Approximate USD per generated draft, by model.
MODEL_DRAFT_COSTS: Dict[str, float] = {
    "meta-llama/llama-3.1-8b-instruct": 0.0005,
    "openai/gpt-4o-mini": 0.002,
    "anthropic/claude-3-haiku": 0.001,
    "openai/gpt-oss-120b:free": 0.0,
}
DEFAULT_DRAFT_COST = 0.001


def estimate_cost(
    credits_used: int,
    tokens_used: Optional[int] = None,
    costs: ColdEmailCosts = DEFAULT_COSTS,
) -> float:
    """Estimated USD spend for a number of credits and LLM tokens.

    ``tokens_used`` defaults to ``costs.estimated_tokens_per_email``.
    Inputs are expected to be non-negative.

    Example:
        >>> estimate_cost(10, 400)
        1.0002
    """
    if tokens_used is None:
        tokens_used = costs.estimated_tokens_per_email
    credit_cost = credits_used * costs.credit_price_usd
    token_cost = (tokens_used / 1000) * costs.price_per_1k_tokens_usd
    return credit_cost + token_cost


def estimate_model_cost(model: str) -> float:
    """Rough cost of one draft with ``model``."""
    return MODEL_DRAFT_COSTS.get(model, DEFAULT_DRAFT_COST)
