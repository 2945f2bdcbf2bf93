"""Resolution of model identifiers to pricing records.

Resolution runs three phases against an immutable dataset snapshot and stops
at the first phase that produces a hit:

1. Direct and provider-prefixed exact lookup (case-sensitive).
2. Case-insensitive exact match, or a key ending in ``"/" + model``.
3. Scored fuzzy match over substring containment.

All functions here are pure: they never mutate the dataset and are safe to
call concurrently.
"""

from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .pricing import ModelPricing

# Prefixes tried in phase 1 when a registry is not configured otherwise
DEFAULT_PROVIDER_PREFIXES: Tuple[str, ...] = (
    "anthropic/",
    "claude-3-5-",
    "claude-3-",
    "claude-",
    "openai/",
    "azure/",
    "openrouter/openai/",
    "zai/",
    "streamlake/",
)

PROVIDER_PREFIX_PRESETS: Dict[str, Tuple[str, ...]] = {
    "default": DEFAULT_PROVIDER_PREFIXES,
    "claude": (
        "anthropic/",
        "claude-3-5-",
        "claude-3-",
        "claude-",
        "openrouter/openai/",
        "zai/",
        "deepseek/",
        "dashscope/",
    ),
    "codex": ("openai/", "azure/", "openrouter/openai/"),
    "none": (),
}

# Fuzzy scores, highest wins
SCORE_PROVIDER_MODEL = 100
SCORE_ZAI_FAMILY = 95
SCORE_FAMILY = 90
SCORE_AIR_VARIANT = 50
SCORE_PARTIAL = 10
SCORE_NONE = 0


class MatchPhase(str, Enum):
    """Resolution phase that produced a match."""

    DIRECT = "direct"
    SUFFIX = "suffix"
    FUZZY = "fuzzy"


class PricingMatch(NamedTuple):
    """A resolved pricing record together with how it was found."""

    key: str
    pricing: ModelPricing
    phase: MatchPhase
    score: Optional[int] = None


def create_matching_candidates(model: str, provider_prefixes: Sequence[str]) -> List[str]:
    """Build the phase-1 lookup keys for a model identifier.

    Args:
        model: Requested model identifier
        provider_prefixes: Prefixes to prepend, in priority order

    Returns:
        The raw identifier followed by each prefixed form; duplicates are
        dropped keeping the first occurrence
    """
    candidates = [model]
    for prefix in provider_prefixes:
        candidate = f"{prefix}{model}"
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


def score_candidate(key: str, model: str) -> int:
    """Score how well a dataset key matches a model identifier.

    Both arguments are expected to be lower-cased already.

    Args:
        key: Lower-cased dataset key
        model: Lower-cased requested model identifier

    Returns:
        100 for a provider/model shape, 95 for a non-"air" ``zai/`` key
        containing the model, 90 for any other non-"air" key containing it,
        50 for an "air" key containing it, 10 when the model contains the
        key, 0 otherwise
    """
    if model in key:
        if f"{model}/" in key or key.endswith(f"/{model}"):
            return SCORE_PROVIDER_MODEL
        if "air" not in key:
            return SCORE_ZAI_FAMILY if key.startswith("zai/") else SCORE_FAMILY
        return SCORE_AIR_VARIANT
    if key in model:
        return SCORE_PARTIAL
    return SCORE_NONE


def _match_direct(
    model: str, dataset: Mapping[str, ModelPricing], provider_prefixes: Sequence[str]
) -> Optional[PricingMatch]:
    for candidate in create_matching_candidates(model, provider_prefixes):
        pricing = dataset.get(candidate)
        if pricing is not None:
            return PricingMatch(candidate, pricing, MatchPhase.DIRECT)
    return None


def _match_suffix(model: str, dataset: Mapping[str, ModelPricing]) -> Optional[PricingMatch]:
    lower = model.lower()
    suffix = f"/{lower}"
    for key, pricing in dataset.items():
        comparison = key.lower()
        if comparison == lower or comparison.endswith(suffix):
            return PricingMatch(key, pricing, MatchPhase.SUFFIX)
    return None


def _match_fuzzy(model: str, dataset: Mapping[str, ModelPricing]) -> Optional[PricingMatch]:
    lower = model.lower()
    best: Optional[PricingMatch] = None
    best_score = SCORE_NONE

    # Strictly greater only: the first key in dataset order wins ties
    for key, pricing in dataset.items():
        score = score_candidate(key.lower(), lower)
        if score > best_score:
            best = PricingMatch(key, pricing, MatchPhase.FUZZY, score)
            best_score = score

    return best


def resolve_pricing_match(
    model: str,
    dataset: Mapping[str, ModelPricing],
    provider_prefixes: Sequence[str] = (),
) -> Optional[PricingMatch]:
    """Find the best pricing record for a model identifier.

    Args:
        model: Requested model identifier
        dataset: Pricing dataset; iteration order decides ties
        provider_prefixes: Prefixes tried in phase 1, in order

    Returns:
        The match, or None when no phase finds a candidate
    """
    return (
        _match_direct(model, dataset, provider_prefixes)
        or _match_suffix(model, dataset)
        or _match_fuzzy(model, dataset)
    )


def resolve_model_pricing(
    model: str,
    dataset: Mapping[str, ModelPricing],
    provider_prefixes: Sequence[str] = (),
) -> Optional[ModelPricing]:
    """Resolve a model identifier to its pricing record.

    See :func:`resolve_pricing_match` for the phases.

    Returns:
        The pricing record, or None when not found
    """
    match = resolve_pricing_match(model, dataset, provider_prefixes)
    return match.pricing if match is not None else None


def resolve_model_name(model: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    """Map a model name through an alias table before resolution.

    Args:
        model: Model name as recorded by the caller
        aliases: Map of recorded name to pricing name

    Returns:
        The alias target, or ``model`` unchanged when it has no alias
    """
    if not aliases:
        return model
    return aliases.get(model, model)
