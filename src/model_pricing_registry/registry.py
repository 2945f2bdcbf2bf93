"""Core registry functionality for resolving model pricing and computing costs.

This module provides the PricingRegistry class, which owns one memoized pricing
dataset and composes resolution and cost calculation on top of it.

Typical usage:

    from model_pricing_registry import PricingRegistry, TokenUsage

    with PricingRegistry() as registry:
        cost = registry.calculate_cost(TokenUsage(input_tokens=1000), "claude-sonnet-4-20250514")

The dataset is loaded at most once per registry instance (concurrent first
callers share a single load) until :meth:`PricingRegistry.invalidate` is called.
"""

import functools
import os
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .calculator import calculate_cost_breakdown
from .config_paths import (
    ENV_DATA_DIR,
    ENV_OVERRIDES_PATH,
    ENV_PRICING_PATH,
    get_overrides_path,
    get_pricing_path_candidates,
    get_user_data_dir,
)
from .dataset import EMPTY_DATASET, PricingDataset, load_local_pricing_source, parse_pricing_entries
from .errors import DatasetLoadError, ModelPricingNotFoundError
from .logging import LogEvent, log_debug, log_error, log_info, log_warning
from .pricing import DEFAULT_TIERED_THRESHOLD, CostBreakdown, ModelPricing, TokenUsage
from .resolver import DEFAULT_PROVIDER_PREFIXES, PricingMatch, resolve_model_name, resolve_pricing_match

# Zero-argument callable returning a raw pricing source mapping
PricingLoader = Callable[[], Mapping[str, Any]]

UsageLike = Union[TokenUsage, Mapping[str, Any]]


class RegistryConfig:
    """Configuration for a pricing registry."""

    def __init__(
        self,
        pricing_path: Optional[str] = None,
        overrides_path: Optional[str] = None,
        provider_prefixes: Optional[Sequence[str]] = None,
        model_aliases: Optional[Mapping[str, str]] = None,
        tiered_threshold: int = DEFAULT_TIERED_THRESHOLD,
    ):
        """Initialize registry configuration.

        Args:
            pricing_path: Custom pricing file, tried before the default
                          locations. Only used by the default loader.
            overrides_path: Custom overrides file. Only used by the default loader.
            provider_prefixes: Prefixes tried during exact lookup, in order.
                               None selects DEFAULT_PROVIDER_PREFIXES; an empty
                               sequence disables prefixed lookup.
            model_aliases: Map of model name to the name used for pricing lookup.
            tiered_threshold: Token threshold for threshold-tiered pricing.
        """
        self.pricing_path = pricing_path
        self.overrides_path = overrides_path
        if provider_prefixes is None:
            provider_prefixes = DEFAULT_PROVIDER_PREFIXES
        self.provider_prefixes = tuple(provider_prefixes)
        self.model_aliases: Dict[str, str] = dict(model_aliases or {})

        if tiered_threshold <= 0:
            raise ValueError("tiered_threshold must be a positive token count")
        self.tiered_threshold = tiered_threshold


class PricingRegistry:
    """Registry resolving model identifiers to pricing and computing costs."""

    _default_instance: Optional["PricingRegistry"] = None
    _instance_lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> "PricingRegistry":
        """Get the default registry instance.

        Alias of :py:meth:`get_default`.

        Returns:
            The shared :class:`PricingRegistry` instance.
        """
        return cls.get_default()

    @classmethod
    def get_default(cls) -> "PricingRegistry":
        """Get the default registry instance with standard configuration.

        Returns:
            The default PricingRegistry instance
        """
        with cls._instance_lock:
            if cls._default_instance is None:
                cls._default_instance = cls()
            return cls._default_instance

    def __init__(self, config: Optional[RegistryConfig] = None, loader: Optional[PricingLoader] = None):
        """Initialize a new registry instance.

        Nothing is loaded until the first lookup.

        Args:
            config: Configuration for this registry instance. If None, default
                   configuration is used.
            loader: Callable returning the raw pricing source. If None, the
                    local pricing file is read using the config paths.
        """
        self.config = config or RegistryConfig()
        self._loader: PricingLoader = loader or functools.partial(
            load_local_pricing_source,
            self.config.pricing_path,
            self.config.overrides_path,
        )
        self._dataset: Optional[PricingDataset] = None
        self._load_lock = threading.Lock()
        self._last_load_stats: Dict[str, Any] = {}

    def __enter__(self) -> "PricingRegistry":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the cached dataset.

        The registry holds no other resources; it stays usable and reloads
        on the next lookup.
        """
        self.invalidate()

    def invalidate(self) -> None:
        """Drop the cached dataset so the next lookup reloads it.

        Callers already holding the previous dataset keep an unchanged snapshot.
        """
        with self._load_lock:
            self._dataset = None

    clear_cache = invalidate

    @property
    def is_loaded(self) -> bool:
        """Whether a dataset is currently cached."""
        return self._dataset is not None

    @property
    def last_load_stats(self) -> Dict[str, Any]:
        """Statistics of the most recent load (total, loaded, skipped, first_error)."""
        return dict(self._last_load_stats)

    def _load(self) -> PricingDataset:
        """Run the loader and validate its output, never raising."""
        try:
            raw = self._loader()
            dataset, stats = parse_pricing_entries(raw)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            if isinstance(e, DatasetLoadError):
                log_warning(LogEvent.PRICING_DATASET, "Failed to load pricing data, using empty dataset", error=error)
            else:
                log_error(LogEvent.PRICING_DATASET, "Loading pricing data raised, using empty dataset", error=error)
            self._last_load_stats = {"total": 0, "loaded": 0, "skipped": 0, "first_error": error}
            return EMPTY_DATASET

        self._last_load_stats = stats
        log_info(
            LogEvent.PRICING_DATASET,
            f"Loaded pricing for {stats['loaded']} models",
            total=stats["total"],
            skipped=stats["skipped"],
        )
        return dataset

    def fetch_all(self) -> PricingDataset:
        """Return the pricing dataset, loading it on first use.

        Concurrent first callers block on a single load and all receive the
        same dataset object.

        Returns:
            Immutable mapping of model identifier to ModelPricing
        """
        dataset = self._dataset
        if dataset is not None:
            return dataset

        with self._load_lock:
            if self._dataset is None:
                self._dataset = self._load()
            return self._dataset

    @property
    def models(self) -> PricingDataset:
        """Get a read-only view of the loaded pricing records."""
        return self.fetch_all()

    def _lookup_name(self, model: str) -> str:
        lookup = resolve_model_name(model, self.config.model_aliases)
        if lookup != model:
            log_debug(LogEvent.PRICING_LOOKUP, "Resolved model alias", model=model, alias=lookup)
        return lookup

    def get_pricing_match(self, model: str) -> Optional[PricingMatch]:
        """Resolve a model and report which key and phase matched.

        Args:
            model: Model identifier, possibly vendor-prefixed or aliased

        Returns:
            The match, or None if the model is not priced
        """
        lookup = self._lookup_name(model)
        match = resolve_pricing_match(lookup, self.fetch_all(), self.config.provider_prefixes)
        if match is None:
            log_debug(LogEvent.PRICING_LOOKUP, "No pricing found", model=model)
        else:
            log_debug(
                LogEvent.PRICING_LOOKUP,
                "Resolved pricing",
                model=model,
                key=match.key,
                phase=match.phase.value,
                score=match.score,
            )
        return match

    def get_pricing(self, model: str) -> Optional[ModelPricing]:
        """Resolve a model identifier to its pricing record.

        Args:
            model: Model identifier, possibly vendor-prefixed or aliased

        Returns:
            The pricing record, or None if the model is not priced
        """
        match = self.get_pricing_match(model)
        return match.pricing if match is not None else None

    def get_context_limit(self, model: str) -> Optional[int]:
        """Get the maximum input tokens of a model, if known.

        Args:
            model: Model identifier

        Returns:
            The context limit, or None when the model or the limit is unknown
        """
        pricing = self.get_pricing(model)
        return pricing.context_limit if pricing is not None else None

    def calculate_cost_breakdown(self, usage: UsageLike, model: Optional[str]) -> CostBreakdown:
        """Calculate the per-category cost of one billable event.

        Args:
            usage: Token counts, as TokenUsage or a raw usage mapping
            model: Model identifier; an empty name bills nothing

        Returns:
            Cost split by token category

        Raises:
            ModelPricingNotFoundError: If no pricing resolves for the model
        """
        if not model:
            return CostBreakdown()

        if not isinstance(usage, TokenUsage):
            usage = TokenUsage.from_mapping(usage)

        pricing = self.get_pricing(model)
        if pricing is None:
            raise ModelPricingNotFoundError(
                f"Model pricing not found for {model}",
                model=model,
                available_models=list(self.fetch_all().keys()),
            )

        return calculate_cost_breakdown(usage, pricing, self.config.tiered_threshold)

    def calculate_cost(self, usage: UsageLike, model: Optional[str]) -> float:
        """Calculate the total USD cost of one billable event.

        Args:
            usage: Token counts, as TokenUsage or a raw usage mapping
            model: Model identifier; an empty name bills nothing

        Returns:
            Unrounded total cost

        Raises:
            ModelPricingNotFoundError: If no pricing resolves for the model.
                A missing price is never reported as a zero cost.
        """
        return self.calculate_cost_breakdown(usage, model).total

    def get_data_info(self) -> Dict[str, Any]:
        """Get information about data sources and load status.

        Returns:
            Dictionary describing candidate paths, overrides and the last load
        """
        return {
            "pricing_candidates": get_pricing_path_candidates(self.config.pricing_path),
            "overrides_path": get_overrides_path(self.config.overrides_path),
            "user_data_dir": str(get_user_data_dir()),
            "provider_prefixes": list(self.config.provider_prefixes),
            "tiered_threshold": self.config.tiered_threshold,
            "loaded": self.is_loaded,
            "load_stats": self.last_load_stats or None,
            "environment_variables": {
                ENV_PRICING_PATH: os.getenv(ENV_PRICING_PATH),
                ENV_OVERRIDES_PATH: os.getenv(ENV_OVERRIDES_PATH),
                ENV_DATA_DIR: os.getenv(ENV_DATA_DIR),
            },
        }

    def list_models(self, contains: Optional[str] = None) -> List[str]:
        """List dataset keys in dataset order.

        Args:
            contains: Optional case-insensitive substring filter

        Returns:
            Matching model identifiers
        """
        keys = list(self.fetch_all().keys())
        if contains:
            needle = contains.lower()
            keys = [key for key in keys if needle in key.lower()]
        return keys

    @staticmethod
    def cleanup() -> None:
        """Clean up the default registry instance."""
        with PricingRegistry._instance_lock:
            PricingRegistry._default_instance = None


def get_registry() -> PricingRegistry:
    """Get the default pricing registry instance.

    This is a convenience function for getting the shared registry.

    Returns:
        PricingRegistry: The default registry instance
    """
    return PricingRegistry.get_instance()
