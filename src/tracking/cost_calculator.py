# src/tracking/cost_calculator.py — v2
"""Cost estimation for inference calls.

Known models are priced per 1M input/output tokens. Unknown models fall
back to a flat rate per 1K total tokens.
"""

from __future__ import annotations

import logging

from nexora_ai.tracking.models import ModelPricing

logger = logging.getLogger(__name__)

DEFAULT_FLAT_RATE_PER_1K = 0.01

# Default pricing per 1M tokens
DEFAULT_PRICING: dict[str, ModelPricing] = {
    "gpt-4.1-2025-04-14": ModelPricing(
        model="gpt-4.1-2025-04-14",
        input_price_per_1m=2.0, output_price_per_1m=8.0,
    ),
    "gpt-4o": ModelPricing(
        model="gpt-4o",
        input_price_per_1m=2.50, output_price_per_1m=10.0,
    ),
    "gpt-4o-mini": ModelPricing(
        model="gpt-4o-mini",
        input_price_per_1m=0.15, output_price_per_1m=0.60,
    ),
    "claude-sonnet-4-20250514": ModelPricing(
        model="claude-sonnet-4-20250514",
        input_price_per_1m=3.0, output_price_per_1m=15.0,
    ),
    "claude-haiku-4-5-20251001": ModelPricing(
        model="claude-haiku-4-5-20251001",
        input_price_per_1m=0.80, output_price_per_1m=4.0,
    ),
}


def compute_call_cost(
    model: str | None,
    input_tokens: int,
    output_tokens: int,
    pricing: dict[str, ModelPricing] | None = None,
    flat_rate_per_1k: float = DEFAULT_FLAT_RATE_PER_1K,
) -> float:
    """Compute estimated cost for a single call in USD."""
    if input_tokens <= 0 and output_tokens <= 0:
        return 0.0
    pricing = DEFAULT_PRICING if pricing is None else pricing
    p = pricing.get(model or "")
    if p is None:
        logger.debug("No pricing for model %r, using flat rate", model)
        return (input_tokens + output_tokens) / 1000 * flat_rate_per_1k
    return (input_tokens * p.input_price_per_1m / 1_000_000
            + output_tokens * p.output_price_per_1m / 1_000_000)
