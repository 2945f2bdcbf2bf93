#!/usr/bin/env python3
"""Example of basic registry usage."""

from model_pricing_registry import (
    ModelPricingNotFoundError,
    PricingRegistry,
    RegistryConfig,
    TokenUsage,
    calculate_entry_cost,
)


def print_model_info(registry, model_name):
    """Print how a model resolves and what it costs per million tokens.

    Args:
        registry: Registry to query
        model_name: Name of the model to look up
    """
    match = registry.get_pricing_match(model_name)
    if match is None:
        print(f"Model: {model_name}")
        print("  No pricing found")
        print()
        return

    pricing = match.pricing
    print(f"Model: {model_name}")
    print(f"  Resolved to: {match.key} ({match.phase.value})")
    if pricing.input_cost_per_token is not None:
        print(f"  Input:  ${pricing.input_cost_per_token * 1_000_000:.2f} / 1M tokens")
    if pricing.output_cost_per_token is not None:
        print(f"  Output: ${pricing.output_cost_per_token * 1_000_000:.2f} / 1M tokens")
    if pricing.context_limit:
        print(f"  Context limit: {pricing.context_limit:,} tokens")
    if pricing.uses_range_tiers:
        print(f"  Range tiers: {len(pricing.range_tiers)}")
    print()


def main():
    """Run the example."""
    config = RegistryConfig(model_aliases={"sonnet": "claude-sonnet-4-20250514"})

    with PricingRegistry(config) as registry:
        for model in ["claude-sonnet-4-20250514", "anthropic/claude-sonnet-4-20250514", "glm-4.5", "kat-coder-pro-v1"]:
            print_model_info(registry, model)

        print("Cost examples:")
        usage = TokenUsage(input_tokens=300_000, output_tokens=2_000, cache_read_tokens=50_000)
        breakdown = registry.calculate_cost_breakdown(usage, "sonnet")
        print(f"  sonnet, 300k input (above the 200k threshold): ${breakdown.total:.4f}")
        print(f"    input ${breakdown.input_cost:.4f}, output ${breakdown.output_cost:.4f}")

        usage = TokenUsage(input_tokens=15_000, output_tokens=5_000, cache_read_tokens=2_000)
        print(f"  kat-coder-pro-v1, 15k input (first range tier): ${registry.calculate_cost(usage, 'kat-coder-pro-v1'):.5f}")

        try:
            registry.calculate_cost(usage, "totally-unknown-model")
        except ModelPricingNotFoundError as e:
            print(f"  ❌ {e}")

        # Report-style aggregation treats unknown models as free
        cost = calculate_entry_cost(registry, usage, "totally-unknown-model")
        print(f"  unknown model in a usage report: ${cost:.2f}")


if __name__ == "__main__":
    main()
