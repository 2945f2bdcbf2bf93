"""JSON output formatter for CLI."""

import json
import math
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, TextIO

from ...pricing import CostBreakdown, to_per_million
from ...resolver import PricingMatch


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - Enum -> value (fallback to name)
    - tuple/frozenset -> list
    - Fallback -> str(obj)
    """
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    if isinstance(obj, (tuple, frozenset)):
        return list(obj)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_models_list_json(models: List[str]) -> Dict[str, Any]:
    """Format models list for JSON output.

    Args:
        models: Model identifiers in dataset order

    Returns:
        Formatted data structure
    """
    return {"models": models, "count": len(models)}


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def format_match_json(model: str, match: PricingMatch) -> Dict[str, Any]:
    """Format a resolved pricing match for JSON output.

    Args:
        model: Model identifier as requested
        match: Resolution result

    Returns:
        Formatted data structure, including per-million rates for reading
    """
    pricing = match.pricing
    record = pricing.to_dict()
    # JSON has no infinity; open-ended tier ranges print as null
    for tier in record.get("tiered_pricing", []):
        tier["range"] = [_finite_or_none(bound) for bound in tier["range"]]

    return {
        "model": model,
        "key": match.key,
        "phase": match.phase,
        "score": match.score,
        "pricing": record,
        "per_million": {
            "input": to_per_million(pricing.input_cost_per_token),
            "output": to_per_million(pricing.output_cost_per_token),
            "cache_creation": to_per_million(pricing.cache_creation_cost_per_token, pricing.input_cost_per_token),
            "cache_read": to_per_million(pricing.cache_read_cost_per_token, pricing.input_cost_per_token),
        },
        "context_limit": pricing.context_limit,
        "uses_range_tiers": pricing.uses_range_tiers,
    }


def format_cost_json(
    model: str,
    key: Optional[str],
    breakdown: CostBreakdown,
    include_breakdown: bool = False,
) -> Dict[str, Any]:
    """Format a cost calculation for JSON output.

    Args:
        model: Model identifier as requested
        key: Dataset key the model resolved to
        breakdown: Calculated costs
        include_breakdown: Whether to include per-category costs

    Returns:
        Formatted data structure
    """
    data: Dict[str, Any] = {"model": model, "key": key, "total_cost": breakdown.total}
    if include_breakdown:
        data["breakdown"] = breakdown.to_dict()
    return data


def format_data_paths_json(info: Dict[str, Any], existing: Dict[str, bool]) -> Dict[str, Any]:
    """Format data paths for JSON output.

    Args:
        info: Registry data information
        existing: Map of candidate pricing path to whether it exists

    Returns:
        Formatted data structure
    """
    candidates = info.get("pricing_candidates", [])
    active = next((path for path in candidates if existing.get(path)), None)
    return {
        "pricing_files": [{"path": path, "exists": existing.get(path, False)} for path in candidates],
        "active_pricing_file": active,
        "overrides_file": info.get("overrides_path"),
        "user_data_dir": info.get("user_data_dir"),
        "resolution_order": [
            "--pricing-path option",
            "MPR_PRICING_PATH environment variable",
            "User data directory (MPR_DATA_DIR or platform default)",
            "Current working directory",
            "Bundled package data",
        ],
    }


def format_env_vars_json(env_vars: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Format environment variables for JSON output.

    Args:
        env_vars: Environment variables

    Returns:
        Formatted data structure
    """
    return {
        "environment_variables": {key: {"value": value, "set": value is not None} for key, value in env_vars.items()},
        "set_count": sum(1 for v in env_vars.values() if v is not None),
        "total_count": len(env_vars),
    }
