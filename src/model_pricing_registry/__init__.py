"""Registry for LLM model pricing and token cost calculation.

This package resolves model identifiers (bare, vendor-prefixed or aliased) to
per-token rate schedules from a LiteLLM-style pricing dataset, and computes the
USD cost of token usage under threshold-tiered and range-tiered pricing.
"""

# Version of the package
try:
    from importlib.metadata import version as _version

    __version__ = _version("model-pricing-registry")
except ImportError:
    # Require importlib.metadata which is standard in Python 3.8+
    raise ImportError(
        "Failed to determine package version. This package requires Python 3.8+ "
        "where importlib.metadata is available, or must be installed as a package."
    )

# Import main components for easier access
from .calculator import calculate_cost_breakdown, calculate_cost_from_pricing, calculate_tiered_cost
from .dataset import (
    filter_pricing_dataset,
    load_local_pricing_dataset,
    load_pricing_dataset,
    parse_model_pricing,
)
from .errors import (
    ConfigurationError,
    DatasetLoadError,
    InvalidConfigFormatError,
    InvalidPricingEntryError,
    ModelPricingNotFoundError,
    PricingRegistryError,
)
from .pricing import CostBreakdown, ModelPricing, PricingTier, TokenUsage
from .registry import PricingRegistry, RegistryConfig, get_registry
from .resolver import (
    DEFAULT_PROVIDER_PREFIXES,
    PROVIDER_PREFIX_PRESETS,
    MatchPhase,
    PricingMatch,
    resolve_model_name,
    resolve_model_pricing,
)
from .usage import calculate_entry_cost

# Define public API
__all__ = [
    # Core registry
    "PricingRegistry",
    "RegistryConfig",
    "get_registry",
    # Data model
    "ModelPricing",
    "PricingTier",
    "TokenUsage",
    "CostBreakdown",
    # Loading
    "parse_model_pricing",
    "load_pricing_dataset",
    "load_local_pricing_dataset",
    "filter_pricing_dataset",
    # Resolution
    "DEFAULT_PROVIDER_PREFIXES",
    "PROVIDER_PREFIX_PRESETS",
    "MatchPhase",
    "PricingMatch",
    "resolve_model_pricing",
    # Cost calculation
    "calculate_tiered_cost",
    "calculate_cost_breakdown",
    "calculate_cost_from_pricing",
    "calculate_entry_cost",
    "resolve_model_name",
    # Errors
    "PricingRegistryError",
    "ConfigurationError",
    "InvalidConfigFormatError",
    "DatasetLoadError",
    "InvalidPricingEntryError",
    "ModelPricingNotFoundError",
]
