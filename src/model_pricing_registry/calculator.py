"""Cost calculation from token usage and a pricing record.

Two tiered models are supported:

- Threshold-tiered (default): each token category is billed at its base rate
  up to a threshold (200k tokens) and at its "above" rate beyond it.
- Range-tiered: when a record carries ``range_tiers``, the tier whose range
  contains the input token count supplies the input, output and cache-read
  rates. Cache-creation tokens are always billed threshold-tiered.

All arithmetic is plain float arithmetic with no rounding. Token counts are
expected to be non-negative; callers normalize them beforehand.
"""

from typing import Optional, Sequence

from .pricing import DEFAULT_TIERED_THRESHOLD, ZERO_TIER, CostBreakdown, ModelPricing, PricingTier, TokenUsage


def calculate_tiered_cost(
    total_tokens: Optional[int],
    base_price: Optional[float],
    tiered_price: Optional[float],
    threshold: int = DEFAULT_TIERED_THRESHOLD,
) -> float:
    """Calculate the cost of one token category with threshold pricing.

    Args:
        total_tokens: Tokens in the category
        base_price: Rate for tokens up to the threshold
        tiered_price: Rate for tokens above the threshold
        threshold: Token count at which ``tiered_price`` starts to apply

    Returns:
        Cost of the category. Exactly ``threshold`` tokens are billed at the
        base rate only. Without a base rate, tokens up to the threshold are
        free.

    Example:
        >>> calculate_tiered_cost(300_000, 3e-6, 6e-6) == 200_000 * 3e-6 + 100_000 * 6e-6
        True
    """
    if total_tokens is None or total_tokens <= 0:
        return 0.0

    if total_tokens > threshold and tiered_price is not None:
        tokens_above = max(0, total_tokens - threshold)
        above_cost = tokens_above * tiered_price
        if base_price is None:
            return above_cost
        return min(total_tokens, threshold) * base_price + above_cost

    if base_price is not None:
        return total_tokens * base_price

    return 0.0


def select_range_tier(total_input_tokens: int, tiers: Sequence[PricingTier]) -> PricingTier:
    """Pick the range tier for an input token count.

    Tiers are scanned in order and the first one whose inclusive range
    contains the count wins. When none does, the first tier is used.

    Args:
        total_input_tokens: Input tokens of the request
        tiers: Tiers in ascending range order

    Returns:
        The selected tier, or a zero-rate tier when ``tiers`` is empty
    """
    for tier in tiers:
        if tier.contains(total_input_tokens):
            return tier
    if tiers:
        return tiers[0]
    return ZERO_TIER


def calculate_cost_breakdown(
    usage: TokenUsage,
    pricing: ModelPricing,
    threshold: int = DEFAULT_TIERED_THRESHOLD,
) -> CostBreakdown:
    """Calculate the per-category cost of one billable event.

    Args:
        usage: Token counts of the event
        pricing: Pricing record of the model
        threshold: Threshold for threshold-tiered categories

    Returns:
        Cost split by token category
    """
    cache_creation_cost = calculate_tiered_cost(
        usage.cache_creation_tokens,
        pricing.cache_creation_cost_per_token,
        pricing.cache_creation_cost_above_threshold,
        threshold,
    )

    if pricing.range_tiers:
        tier = select_range_tier(usage.input_tokens, pricing.range_tiers)
        return CostBreakdown(
            input_cost=usage.input_tokens * tier.input_cost_per_token,
            output_cost=usage.output_tokens * tier.output_cost_per_token,
            cache_creation_cost=cache_creation_cost,
            cache_read_cost=usage.cache_read_tokens * (tier.cache_read_cost_per_token or 0.0),
        )

    return CostBreakdown(
        input_cost=calculate_tiered_cost(
            usage.input_tokens,
            pricing.input_cost_per_token,
            pricing.input_cost_above_threshold,
            threshold,
        ),
        output_cost=calculate_tiered_cost(
            usage.output_tokens,
            pricing.output_cost_per_token,
            pricing.output_cost_above_threshold,
            threshold,
        ),
        cache_creation_cost=cache_creation_cost,
        cache_read_cost=calculate_tiered_cost(
            usage.cache_read_tokens,
            pricing.cache_read_cost_per_token,
            pricing.cache_read_cost_above_threshold,
            threshold,
        ),
    )


def calculate_cost_from_pricing(
    usage: TokenUsage,
    pricing: ModelPricing,
    threshold: int = DEFAULT_TIERED_THRESHOLD,
) -> float:
    """Calculate the total USD cost of one billable event.

    Args:
        usage: Token counts of the event
        pricing: Pricing record of the model
        threshold: Threshold for threshold-tiered categories

    Returns:
        Unrounded, non-negative total cost
    """
    return calculate_cost_breakdown(usage, pricing, threshold).total
