"""Loading and validation of pricing datasets.

A pricing source is a mapping of model identifier to an untyped record in the
LiteLLM ``model_prices_and_context_window.json`` format. Loading validates each
record independently: a malformed entry is dropped, the rest of the dataset
loads normally, and an unreadable source produces an empty dataset rather than
an error.
"""

import copy
import json
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import yaml

from .config_paths import get_overrides_path, get_pricing_path_candidates
from .config_result import ConfigResult, detect_source_format
from .errors import DatasetLoadError, InvalidConfigFormatError, InvalidPricingEntryError
from .logging import LogEvent, log_debug, log_info, log_warning
from .pricing import RANGE_TIERS_SOURCE_FIELD, SOURCE_FIELDS, ModelPricing, PricingTier

PricingDataset = Mapping[str, ModelPricing]

EMPTY_DATASET: PricingDataset = MappingProxyType({})

# Accepted source key -> attribute; attribute names are accepted as keys too
_FIELD_LOOKUP: Dict[str, str] = {}
for _attr, _source_key in SOURCE_FIELDS.items():
    _FIELD_LOOKUP[_source_key] = _attr
    _FIELD_LOOKUP.setdefault(_attr, _attr)
_RANGE_TIER_KEYS = (RANGE_TIERS_SOURCE_FIELD, "range_tiers")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: float) -> bool:
    # JSON integers are unbounded; isfinite overflows on ones past float range
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _parse_number(value: Any, model: Optional[str], field_name: str) -> float:
    if not _is_number(value):
        raise InvalidPricingEntryError(
            f"Field '{field_name}' must be a number, got {type(value).__name__}",
            model=model,
            field=field_name,
            value=value,
        )
    if not _is_finite(value) or value < 0:
        raise InvalidPricingEntryError(
            f"Field '{field_name}' must be a finite non-negative number, got {value!r}",
            model=model,
            field=field_name,
            value=value,
        )
    return value


def _parse_tier(data: Any, model: Optional[str], index: int) -> PricingTier:
    field_name = f"{RANGE_TIERS_SOURCE_FIELD}[{index}]"
    if not isinstance(data, Mapping):
        raise InvalidPricingEntryError(
            f"Tier {index} must be an object, got {type(data).__name__}",
            model=model,
            field=field_name,
            value=data,
        )

    for required in ("input_cost_per_token", "output_cost_per_token", "range"):
        if required not in data:
            raise InvalidPricingEntryError(
                f"Tier {index} is missing '{required}'",
                model=model,
                field=f"{field_name}.{required}",
            )

    token_range = data["range"]
    if (
        not isinstance(token_range, (list, tuple))
        or len(token_range) != 2
        or not all(_is_number(bound) for bound in token_range)
    ):
        raise InvalidPricingEntryError(
            f"Tier {index} range must be a pair of numbers",
            model=model,
            field=f"{field_name}.range",
            value=token_range,
        )

    cache_read_key = next(
        (key for key in ("cache_read_input_token_cost", "cache_read_cost_per_token") if key in data), None
    )
    return PricingTier(
        input_cost_per_token=_parse_number(data["input_cost_per_token"], model, f"{field_name}.input_cost_per_token"),
        output_cost_per_token=_parse_number(
            data["output_cost_per_token"], model, f"{field_name}.output_cost_per_token"
        ),
        token_range=(token_range[0], token_range[1]),
        cache_read_cost_per_token=(
            None
            if cache_read_key is None
            else _parse_number(data[cache_read_key], model, f"{field_name}.{cache_read_key}")
        ),
    )


def parse_model_pricing(data: Any, model: Optional[str] = None) -> ModelPricing:
    """Validate one raw pricing entry.

    Args:
        data: Raw entry (a mapping) or an already parsed ModelPricing
        model: Model identifier, used in error context

    Returns:
        The validated pricing record

    Raises:
        InvalidPricingEntryError: If the entry is not a mapping or a known
            field is null, not a number, or negative
    """
    if isinstance(data, ModelPricing):
        return data
    if not isinstance(data, Mapping):
        raise InvalidPricingEntryError(
            f"Pricing entry must be an object, got {type(data).__name__}",
            model=model,
            value=data,
        )

    values: Dict[str, Any] = {}
    for key, value in data.items():
        attr = _FIELD_LOOKUP.get(key)
        # Unknown fields are ignored; a known field set to null is invalid
        if attr is None:
            continue
        values[attr] = _parse_number(value, model, key)

    tiers_key = next((key for key in _RANGE_TIER_KEYS if key in data), None)
    if tiers_key is not None:
        raw_tiers = data[tiers_key]
        if not isinstance(raw_tiers, (list, tuple)):
            raise InvalidPricingEntryError(
                f"Field '{tiers_key}' must be a list, got {type(raw_tiers).__name__}",
                model=model,
                field=tiers_key,
                value=raw_tiers,
            )
        values["range_tiers"] = tuple(_parse_tier(tier, model, index) for index, tier in enumerate(raw_tiers))

    try:
        return ModelPricing(**values)
    except ValueError as e:
        raise InvalidPricingEntryError(str(e), model=model) from e


def parse_pricing_entries(raw: Any) -> Tuple[PricingDataset, Dict[str, Any]]:
    """Validate every entry of a raw pricing source.

    Args:
        raw: Mapping of model identifier to raw entry

    Returns:
        Tuple of the immutable dataset (source order preserved) and load
        statistics (``total``, ``loaded``, ``skipped``, ``first_error``)
    """
    if not isinstance(raw, Mapping):
        log_warning(
            LogEvent.PRICING_DATASET,
            "Pricing source is not a mapping, using empty dataset",
            source_type=type(raw).__name__,
        )
        return EMPTY_DATASET, {"total": 0, "loaded": 0, "skipped": 0, "first_error": None}

    entries: Dict[str, ModelPricing] = {}
    skipped = 0
    first_error: Optional[str] = None

    for model_name, model_data in raw.items():
        if not isinstance(model_name, str):
            skipped += 1
            continue
        try:
            entries[model_name] = parse_model_pricing(model_data, model=model_name)
        except InvalidPricingEntryError as e:
            skipped += 1
            if first_error is None:
                first_error = f"{model_name}: {e}"
            log_debug(
                LogEvent.PRICING_DATASET,
                "Skipping invalid pricing entry",
                model=model_name,
                field=e.field,
                error=str(e),
            )

    stats = {
        "total": len(raw),
        "loaded": len(entries),
        "skipped": skipped,
        "first_error": first_error,
    }
    return MappingProxyType(entries), stats


def load_pricing_dataset(raw: Any) -> PricingDataset:
    """Build a pricing dataset from a raw source, dropping invalid entries.

    Never raises: a source that is not a mapping yields an empty dataset.

    Args:
        raw: Mapping of model identifier to raw entry

    Returns:
        Immutable mapping of model identifier to ModelPricing
    """
    dataset, stats = parse_pricing_entries(raw)
    log_info(
        LogEvent.PRICING_DATASET,
        "Pricing load summary",
        total=stats["total"],
        loaded=stats["loaded"],
        skipped=stats["skipped"],
    )
    return dataset


def filter_pricing_dataset(
    dataset: PricingDataset,
    predicate: Callable[[str, ModelPricing], bool],
) -> PricingDataset:
    """Create a dataset with only the entries that satisfy a predicate.

    Args:
        dataset: Source dataset
        predicate: Called with ``(model_name, pricing)``; keep the entry when True

    Returns:
        New immutable dataset, source order preserved
    """
    return MappingProxyType(
        {model_name: pricing for model_name, pricing in dataset.items() if predicate(model_name, pricing)}
    )


def read_pricing_file(path: str) -> ConfigResult:
    """Read a JSON or YAML document that must contain a mapping.

    Files ending in ``.yaml`` or ``.yml`` are parsed with PyYAML, anything
    else as JSON.

    Args:
        path: File to read

    Returns:
        ConfigResult describing the outcome; this function does not raise
    """
    path = str(path)
    source_format = detect_source_format(path)
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ConfigResult(
            success=False, error=f"Cannot read {path}: {e}", exception=e, path=path, source_format=source_format
        )

    if not content.strip():
        return ConfigResult(success=False, error=f"{path} is empty", path=path, source_format=source_format)

    try:
        if source_format == "yaml":
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        return ConfigResult(
            success=False, error=f"Parse error in {path}: {e}", exception=e, path=path, source_format=source_format
        )

    if not isinstance(data, dict):
        error = InvalidConfigFormatError(
            f"Invalid format in {path}: expected dictionary, got {type(data).__name__}",
            path=path,
        )
        return ConfigResult(success=False, error=error.message, exception=error, path=path, source_format=source_format)

    return ConfigResult(success=True, data=data, path=path, source_format=source_format)


def merge_pricing_overrides(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any],
    path: Optional[str] = None,
) -> Dict[str, Any]:
    """Apply an overrides document to a raw pricing source.

    The document has the form ``{"overrides": {model: {field: value}}}``.
    Fields of an existing entry are updated in place (the entry keeps its
    position); unknown models are appended in document order.

    Args:
        base: Raw pricing source
        overrides: Parsed overrides document
        path: Path of the overrides file, for error context

    Returns:
        New raw pricing source; ``base`` is not modified

    Raises:
        InvalidConfigFormatError: If the document or one of its entries is
            not a mapping
    """
    models = overrides.get("overrides")
    if models is None:
        log_warning(LogEvent.PRICING_OVERRIDES, "No 'overrides' key found in overrides document", path=path)
        return dict(base)
    if not isinstance(models, Mapping):
        raise InvalidConfigFormatError(
            f"'overrides' must be a mapping, got {type(models).__name__}",
            path=path,
        )

    merged: Dict[str, Any] = {key: copy.deepcopy(value) for key, value in base.items()}
    for model_name, override in models.items():
        if not isinstance(override, Mapping):
            raise InvalidConfigFormatError(
                f"Override for '{model_name}' must be a mapping, got {type(override).__name__}",
                path=path,
            )
        current = merged.get(model_name)
        if isinstance(current, dict):
            current.update(override)
        else:
            merged[model_name] = dict(override)
        log_debug(LogEvent.PRICING_OVERRIDES, "Applied pricing override", model=model_name, path=path)

    return merged


def load_local_pricing_source(
    pricing_path: Optional[str] = None,
    overrides_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Read the raw pricing source from local disk and apply overrides.

    Candidates are tried in the order given by
    :func:`config_paths.get_pricing_path_candidates`; the first readable one
    wins. A broken overrides file is logged and ignored.

    Args:
        pricing_path: Explicit pricing file, tried first
        overrides_path: Explicit overrides file

    Returns:
        Raw pricing source mapping

    Raises:
        DatasetLoadError: If no candidate pricing file could be read
    """
    candidates = get_pricing_path_candidates(pricing_path)
    result: Optional[ConfigResult] = None
    failures: List[ConfigResult] = []

    for candidate in candidates:
        if not Path(candidate).is_file():
            if pricing_path and candidate == str(pricing_path):
                log_warning(LogEvent.PRICING_DATASET, "Pricing file not found", path=candidate)
            continue
        result = read_pricing_file(candidate)
        if result.success:
            break
        failures.append(result)
        log_warning(LogEvent.PRICING_DATASET, "Ignoring unreadable pricing file", path=candidate, error=result.error)
        result = None

    if result is None or result.data is None:
        detail = "; ".join(failure.describe() for failure in failures) if failures else "no pricing file found"
        raise DatasetLoadError(
            f"Could not load {', '.join(candidates)}: {detail}",
            path=failures[0].path if failures else (candidates[-1] if candidates else None),
            candidates=candidates,
        )

    log_debug(
        LogEvent.PRICING_DATASET,
        "Using pricing file",
        path=result.path,
        source_format=result.source_format,
        entries=result.entry_count,
    )
    raw: Dict[str, Any] = result.data

    resolved_overrides = get_overrides_path(overrides_path)
    if resolved_overrides:
        overrides_result = read_pricing_file(resolved_overrides)
        if overrides_result.success and overrides_result.data is not None:
            try:
                raw = merge_pricing_overrides(raw, overrides_result.data, path=resolved_overrides)
            except InvalidConfigFormatError as e:
                log_warning(LogEvent.PRICING_OVERRIDES, "Invalid overrides ignored", path=e.path, error=e.message)
        else:
            log_warning(
                LogEvent.PRICING_OVERRIDES,
                "Failed to read overrides file",
                path=resolved_overrides,
                error=overrides_result.error,
            )

    return raw


def load_local_pricing_dataset(
    pricing_path: Optional[str] = None,
    overrides_path: Optional[str] = None,
) -> PricingDataset:
    """Load and validate the local pricing dataset.

    Fail-soft variant of :func:`load_local_pricing_source`: when no pricing
    file can be read the failure is logged and an empty dataset is returned,
    so costs degrade to "unpriced" instead of crashing the caller.

    Args:
        pricing_path: Explicit pricing file, tried first
        overrides_path: Explicit overrides file

    Returns:
        Immutable pricing dataset, possibly empty
    """
    try:
        raw = load_local_pricing_source(pricing_path, overrides_path)
    except DatasetLoadError as e:
        log_warning(
            LogEvent.PRICING_DATASET,
            "Failed to load local pricing data, returning empty dataset",
            error=e.message,
        )
        return EMPTY_DATASET
    return load_pricing_dataset(raw)
