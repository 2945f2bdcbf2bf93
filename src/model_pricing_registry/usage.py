"""Helpers for pricing usage records produced by coding-agent logs."""

from typing import Any, Mapping, Optional, Union

from .errors import ModelPricingNotFoundError
from .logging import LogEvent, log_debug
from .pricing import TokenUsage
from .registry import PricingRegistry


def calculate_entry_cost(
    registry: PricingRegistry,
    usage: Union[TokenUsage, Mapping[str, Any]],
    model: Optional[str],
) -> float:
    """Calculate the cost of one log entry, treating unpriced models as free.

    Reports that aggregate many entries usually prefer a $0.00 line over
    aborting on one unknown model; use
    :meth:`PricingRegistry.calculate_cost` directly to get the error instead.

    Args:
        registry: Registry used for lookup
        usage: Token counts of the entry
        model: Model name of the entry

    Returns:
        Cost in USD, 0.0 when the model is not priced
    """
    try:
        return registry.calculate_cost(usage, model)
    except ModelPricingNotFoundError as e:
        log_debug(LogEvent.COST_CALCULATION, "Model not priced, counting as zero cost", model=e.model)
        return 0.0
