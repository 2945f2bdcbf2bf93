"""Tests for cost calculation."""

from typing import Any, Dict

import pytest

from model_pricing_registry.calculator import (
    calculate_cost_breakdown,
    calculate_cost_from_pricing,
    calculate_tiered_cost,
    select_range_tier,
)
from model_pricing_registry.dataset import parse_model_pricing
from model_pricing_registry.pricing import ZERO_TIER, ModelPricing, PricingTier, TokenUsage

BASE = 3e-6
ABOVE = 6e-6


class TestTieredCost:
    """Tests for calculate_tiered_cost."""

    def test_zero_and_none_tokens(self) -> None:
        """No tokens cost nothing."""
        assert calculate_tiered_cost(0, BASE, ABOVE) == 0.0
        assert calculate_tiered_cost(None, BASE, ABOVE) == 0.0
        assert calculate_tiered_cost(-10, BASE, ABOVE) == 0.0

    def test_below_threshold(self) -> None:
        """Below the threshold only the base rate applies."""
        assert calculate_tiered_cost(1000, BASE, ABOVE) == 1000 * BASE

    def test_exactly_at_threshold(self) -> None:
        """The threshold itself is billed at the base rate only."""
        assert calculate_tiered_cost(200_000, BASE, ABOVE) == 200_000 * BASE

    def test_one_above_threshold(self) -> None:
        """The first token over the threshold uses the tiered rate."""
        assert calculate_tiered_cost(200_001, BASE, ABOVE) == 200_000 * BASE + 1 * ABOVE

    def test_above_threshold(self) -> None:
        """Tokens split between base and tiered rates."""
        assert calculate_tiered_cost(300_000, BASE, ABOVE) == 200_000 * BASE + 100_000 * ABOVE

    def test_without_tiered_rate(self) -> None:
        """Without a tiered rate everything is billed at the base rate."""
        assert calculate_tiered_cost(300_000, BASE, None) == 300_000 * BASE

    def test_without_base_rate(self) -> None:
        """Without a base rate only tokens above the threshold are charged."""
        assert calculate_tiered_cost(300_000, None, ABOVE) == 100_000 * ABOVE
        assert calculate_tiered_cost(100_000, None, ABOVE) == 0.0

    def test_without_any_rate(self) -> None:
        """No rates means no cost."""
        assert calculate_tiered_cost(300_000, None, None) == 0.0

    def test_custom_threshold(self) -> None:
        """The threshold is configurable."""
        assert calculate_tiered_cost(150, 1.0, 2.0, threshold=100) == 100 * 1.0 + 50 * 2.0


class TestThresholdPricing:
    """Tests for threshold-tiered cost of a full usage record."""

    def test_end_to_end_above_threshold(self, pricing_source: Dict[str, Any]) -> None:
        """Input and output above 200k are split per category."""
        pricing = parse_model_pricing(pricing_source["claude-sonnet-4-20250514"])
        usage = TokenUsage(input_tokens=300_000, output_tokens=250_000)

        cost = calculate_cost_from_pricing(usage, pricing)

        expected = (200_000 * 3e-6 + 100_000 * 6e-6) + (200_000 * 1.5e-5 + 50_000 * 2.25e-5)
        assert cost == pytest.approx(expected)

    def test_all_categories(self, pricing_source: Dict[str, Any]) -> None:
        """Cache categories use their own rates."""
        pricing = parse_model_pricing(pricing_source["claude-sonnet-4-20250514"])
        usage = TokenUsage(input_tokens=1000, output_tokens=500, cache_creation_tokens=2000, cache_read_tokens=4000)

        breakdown = calculate_cost_breakdown(usage, pricing)

        assert breakdown.input_cost == pytest.approx(1000 * 3e-6)
        assert breakdown.output_cost == pytest.approx(500 * 1.5e-5)
        assert breakdown.cache_creation_cost == pytest.approx(2000 * 3.75e-6)
        assert breakdown.cache_read_cost == pytest.approx(4000 * 3e-7)
        assert breakdown.total == pytest.approx(0.003 + 0.0075 + 0.0075 + 0.0012)

    def test_no_base_price_model(self) -> None:
        """A model with only above-threshold rates is free below 200k."""
        pricing = ModelPricing(input_cost_above_threshold=6e-6, output_cost_above_threshold=2.25e-5)

        above = calculate_cost_from_pricing(TokenUsage(input_tokens=300_000, output_tokens=250_000), pricing)
        below = calculate_cost_from_pricing(TokenUsage(input_tokens=100_000, output_tokens=100_000), pricing)

        assert above == pytest.approx(100_000 * 6e-6 + 50_000 * 2.25e-5)
        assert below == 0.0

    def test_free_model(self) -> None:
        """Zero rates cost exactly zero."""
        pricing = ModelPricing(input_cost_per_token=0.0, output_cost_per_token=0.0)
        assert calculate_cost_from_pricing(TokenUsage(10**6, 10**6, 10**6, 10**6), pricing) == 0.0

    def test_missing_rates_cost_nothing(self) -> None:
        """Categories without a rate contribute zero."""
        pricing = ModelPricing(input_cost_per_token=1e-6)
        assert calculate_cost_from_pricing(TokenUsage(1000, 1000, 1000, 1000), pricing) == 1000 * 1e-6


class TestRangeTiers:
    """Tests for input-length range-tiered pricing."""

    @pytest.fixture
    def kat_coder(self, kat_coder_entry: Dict[str, Any]) -> ModelPricing:
        """Parsed range-tiered record."""
        return parse_model_pricing(kat_coder_entry)

    def test_first_tier(self, kat_coder: ModelPricing) -> None:
        """15k input tokens use the first tier for input, output and cache read."""
        usage = TokenUsage(input_tokens=15000, output_tokens=5000, cache_read_tokens=2000)
        assert calculate_cost_from_pricing(usage, kat_coder) == pytest.approx(0.02124)

    def test_second_tier(self, kat_coder: ModelPricing) -> None:
        """50k input tokens use the second tier."""
        usage = TokenUsage(input_tokens=50000, output_tokens=10000, cache_read_tokens=5000)
        expected = 50000 * 9e-7 + 10000 * 3.6e-6 + 5000 * 1.8e-7
        assert calculate_cost_from_pricing(usage, kat_coder) == pytest.approx(expected)

    def test_third_tier(self, kat_coder: ModelPricing) -> None:
        """200k input tokens use the third tier."""
        usage = TokenUsage(input_tokens=200000, output_tokens=20000, cache_read_tokens=10000)
        expected = 200000 * 1.5e-6 + 20000 * 6e-6 + 10000 * 3e-7
        assert calculate_cost_from_pricing(usage, kat_coder) == pytest.approx(expected)

    def test_boundaries(self, kat_coder: ModelPricing) -> None:
        """Range bounds are inclusive, so 32000 stays in the first tier."""
        assert kat_coder.range_tiers is not None
        assert select_range_tier(32000, kat_coder.range_tiers) is kat_coder.range_tiers[0]
        assert select_range_tier(32001, kat_coder.range_tiers) is kat_coder.range_tiers[1]

        at_boundary = calculate_cost_from_pricing(TokenUsage(input_tokens=32000), kat_coder)
        past_boundary = calculate_cost_from_pricing(TokenUsage(input_tokens=32001), kat_coder)
        assert at_boundary == pytest.approx(32000 * 6e-7)
        assert past_boundary == pytest.approx(32001 * 9e-7)

    def test_out_of_range_uses_first_tier(self, kat_coder: ModelPricing) -> None:
        """Counts beyond every range fall back to the first tier."""
        assert kat_coder.range_tiers is not None
        assert select_range_tier(1_000_000, kat_coder.range_tiers) is kat_coder.range_tiers[0]

    def test_empty_tiers(self) -> None:
        """Without tiers the zero-rate tier is returned."""
        assert select_range_tier(10, ()) is ZERO_TIER

    def test_cache_creation_uses_threshold_pricing(self) -> None:
        """Cache creation is billed with threshold pricing even for range-tiered models."""
        pricing = ModelPricing(
            cache_creation_cost_per_token=1e-6,
            cache_creation_cost_above_threshold=2e-6,
            range_tiers=(PricingTier(input_cost_per_token=5e-7, output_cost_per_token=1e-6, token_range=(0, 10**6)),),
        )
        breakdown = calculate_cost_breakdown(TokenUsage(input_tokens=100, cache_creation_tokens=300_000), pricing)
        assert breakdown.cache_creation_cost == pytest.approx(200_000 * 1e-6 + 100_000 * 2e-6)
        assert breakdown.input_cost == pytest.approx(100 * 5e-7)

    def test_tier_without_cache_read_rate(self) -> None:
        """A tier without a cache read rate bills cache reads at zero."""
        pricing = ModelPricing(
            cache_read_cost_per_token=1e-6,
            range_tiers=(PricingTier(input_cost_per_token=1e-6, output_cost_per_token=1e-6, token_range=(0, 100)),),
        )
        breakdown = calculate_cost_breakdown(TokenUsage(input_tokens=10, cache_read_tokens=50), pricing)
        assert breakdown.cache_read_cost == 0.0


def test_calculation_is_idempotent(pricing_source: Dict[str, Any]) -> None:
    """Repeated calculations return identical results."""
    pricing = parse_model_pricing(pricing_source["gpt-5"])
    usage = TokenUsage(input_tokens=12345, output_tokens=678, cache_read_tokens=910)
    results = {calculate_cost_from_pricing(usage, pricing) for _ in range(10)}
    assert len(results) == 1
