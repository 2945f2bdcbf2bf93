"""Pricing data structures for the model pricing registry."""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple

# Token threshold above which the "above 200k" rates apply. The pricing
# schema hard-codes this value in its field names.
DEFAULT_TIERED_THRESHOLD = 200_000

MILLION = 1_000_000

# Python attribute -> key used by the pricing source file
SOURCE_FIELDS: Dict[str, str] = {
    "input_cost_per_token": "input_cost_per_token",
    "output_cost_per_token": "output_cost_per_token",
    "cache_creation_cost_per_token": "cache_creation_input_token_cost",
    "cache_read_cost_per_token": "cache_read_input_token_cost",
    "input_cost_above_threshold": "input_cost_per_token_above_200k_tokens",
    "output_cost_above_threshold": "output_cost_per_token_above_200k_tokens",
    "cache_creation_cost_above_threshold": "cache_creation_input_token_cost_above_200k_tokens",
    "cache_read_cost_above_threshold": "cache_read_input_token_cost_above_200k_tokens",
    # Gemini 128k rates are carried for reference only; cost math ignores them
    "input_cost_above_128k": "input_cost_per_token_above_128k_tokens",
    "output_cost_above_128k": "output_cost_per_token_above_128k_tokens",
    "max_tokens": "max_tokens",
    "max_input_tokens": "max_input_tokens",
    "max_output_tokens": "max_output_tokens",
}

RANGE_TIERS_SOURCE_FIELD = "tiered_pricing"


def _check_rate(name: str, value: Optional[float]) -> None:
    if value is None:
        return
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")


@dataclass(frozen=True)
class PricingTier:
    """Rates for one input-length range of a range-tiered model.

    ``token_range`` is inclusive on both ends and is matched against the
    total input token count of a request.
    """

    input_cost_per_token: float
    output_cost_per_token: float
    token_range: Tuple[float, float]
    cache_read_cost_per_token: Optional[float] = None

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation ensuring non-negative costs."""
        _check_rate("input_cost_per_token", self.input_cost_per_token)
        _check_rate("output_cost_per_token", self.output_cost_per_token)
        _check_rate("cache_read_input_token_cost", self.cache_read_cost_per_token)
        if len(self.token_range) != 2:
            raise ValueError("range must contain exactly two numbers")

    def contains(self, tokens: float) -> bool:
        """Check whether a token count falls inside this tier's range."""
        low, high = self.token_range
        return low <= tokens <= high

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the pricing source format."""
        data: Dict[str, Any] = {
            "input_cost_per_token": self.input_cost_per_token,
            "output_cost_per_token": self.output_cost_per_token,
            "range": list(self.token_range),
        }
        if self.cache_read_cost_per_token is not None:
            data["cache_read_input_token_cost"] = self.cache_read_cost_per_token
        return data


# Used when a range-tiered record has no tier to select
ZERO_TIER = PricingTier(input_cost_per_token=0.0, output_cost_per_token=0.0, token_range=(0, math.inf))


@dataclass(frozen=True)
class ModelPricing:
    """Rate schedule for one model identifier.

    All rates are USD per single token. Every field is optional:

    - ``*_cost_per_token``: base rates
    - ``*_cost_above_threshold``: rates for the part of a category above the
      tiered threshold (200k tokens by default)
    - ``range_tiers``: input-length based tiers; when non-empty they replace
      the input, output and cache-read rates
    - ``max_*_tokens``: context window metadata, informational only
    """

    input_cost_per_token: Optional[float] = None
    output_cost_per_token: Optional[float] = None
    cache_creation_cost_per_token: Optional[float] = None
    cache_read_cost_per_token: Optional[float] = None
    input_cost_above_threshold: Optional[float] = None
    output_cost_above_threshold: Optional[float] = None
    cache_creation_cost_above_threshold: Optional[float] = None
    cache_read_cost_above_threshold: Optional[float] = None
    input_cost_above_128k: Optional[float] = None
    output_cost_above_128k: Optional[float] = None
    max_tokens: Optional[float] = None
    max_input_tokens: Optional[float] = None
    max_output_tokens: Optional[float] = None
    range_tiers: Optional[Tuple[PricingTier, ...]] = field(default=None)

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation ensuring non-negative costs and token limits."""
        for name in SOURCE_FIELDS:
            _check_rate(SOURCE_FIELDS[name], getattr(self, name))
        if self.range_tiers is not None and not isinstance(self.range_tiers, tuple):
            # Keep the record hashable and immutable
            object.__setattr__(self, "range_tiers", tuple(self.range_tiers))

    @property
    def uses_range_tiers(self) -> bool:
        """Whether cost calculation uses input-length range tiers."""
        return bool(self.range_tiers)

    @property
    def context_limit(self) -> Optional[int]:
        """Maximum input tokens for the model, if known."""
        if self.max_input_tokens is None:
            return None
        return int(self.max_input_tokens)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the pricing source format, omitting unset fields."""
        data: Dict[str, Any] = {}
        for name, source_key in SOURCE_FIELDS.items():
            value = getattr(self, name)
            if value is not None:
                data[source_key] = value
        if self.range_tiers is not None:
            data[RANGE_TIERS_SOURCE_FIELD] = [tier.to_dict() for tier in self.range_tiers]
        return data


def _coerce_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return count if count > 0 else 0


@dataclass(frozen=True)
class TokenUsage:
    """Token counts for a single billable event."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TokenUsage":
        """Build usage from a raw usage record.

        Accepts both the short field names and the names used in provider
        usage logs (``cache_creation_input_tokens``,
        ``cache_read_input_tokens``). Missing, negative or non-numeric counts
        become zero.

        Args:
            data: Raw usage record

        Returns:
            Normalized token usage
        """

        def pick(*keys: str) -> int:
            for key in keys:
                if key in data:
                    return _coerce_count(data[key])
            return 0

        return cls(
            input_tokens=pick("input_tokens", "input"),
            output_tokens=pick("output_tokens", "output"),
            cache_creation_tokens=pick("cache_creation_tokens", "cache_creation_input_tokens", "cache_creation"),
            cache_read_tokens=pick("cache_read_tokens", "cache_read_input_tokens", "cache_read"),
        )

    @property
    def total_tokens(self) -> int:
        """Sum of all four token categories."""
        return self.input_tokens + self.output_tokens + self.cache_creation_tokens + self.cache_read_tokens


@dataclass(frozen=True)
class CostBreakdown:
    """Cost of one billable event split by token category (USD, unrounded)."""

    input_cost: float = 0.0
    output_cost: float = 0.0
    cache_creation_cost: float = 0.0
    cache_read_cost: float = 0.0

    @property
    def total(self) -> float:
        """Total cost of the event."""
        return self.input_cost + self.output_cost + self.cache_creation_cost + self.cache_read_cost

    def to_dict(self) -> Dict[str, float]:
        """Return the breakdown with its total."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["total_cost"] = self.total
        return data


def to_per_million(value: Optional[float], fallback: Optional[float] = None) -> float:
    """Convert a per-token rate to its per-million-tokens equivalent.

    Args:
        value: Per-token rate
        fallback: Rate used when ``value`` is None

    Returns:
        Rate per million tokens; zero when neither rate is set
    """
    if value is not None:
        per_token = value
    elif fallback is not None:
        per_token = fallback
    else:
        per_token = 0.0
    return per_token * MILLION
