"""Error types for the model pricing registry.

This module defines the error types raised while loading pricing data
and resolving model pricing.
"""

from typing import Any, Dict, List, Mapping, Optional, Set, Union


class PricingRegistryError(Exception):
    """Base class for all pricing-registry errors.

    This is the parent class for all registry-specific exceptions.
    """

    pass


class ConfigurationError(PricingRegistryError):
    """Base class for configuration-related errors.

    This is raised for errors related to reading or parsing a pricing
    source or an overrides file.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class InvalidConfigFormatError(ConfigurationError):
    """Raised when a pricing or overrides file has an invalid format.

    Examples:
        >>> try:
        ...     merge_pricing_overrides(base, ["not", "a", "mapping"])
        ... except InvalidConfigFormatError as e:
        ...     print(f"Invalid overrides format: {e}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the file
            expected_type: Expected type of the document
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class DatasetLoadError(ConfigurationError):
    """Raised when no pricing source could be read at all.

    The registry recovers from this error by falling back to an empty
    dataset, so callers only see it when using the strict source readers.

    Examples:
        >>> try:
        ...     load_local_pricing_source("/missing/prices.json")
        ... except DatasetLoadError as e:
        ...     print(f"Tried: {e.candidates}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ) -> None:
        """Initialize dataset load error.

        Args:
            message: Error message
            path: First candidate that existed but could not be read, else
                the last candidate tried
            candidates: All source paths that were tried, in order
        """
        super().__init__(message, path)
        self.candidates = candidates or []


class InvalidPricingEntryError(PricingRegistryError):
    """Raised when a single pricing entry fails validation.

    The dataset loader catches this per entry and drops the entry.

    Examples:
        >>> try:
        ...     parse_model_pricing({"input_cost_per_token": "cheap"}, model="m")
        ... except InvalidPricingEntryError as e:
        ...     print(f"{e.model}: bad field {e.field}")
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        """Initialize invalid pricing entry error.

        Args:
            message: Error message
            model: Model identifier of the rejected entry
            field: Source key of the offending field, if any
            value: Offending value, if any
        """
        super().__init__(message)
        self.message = message
        self.model = model
        self.field = field
        self.value = value


class ModelPricingNotFoundError(PricingRegistryError):
    """Raised when no pricing record resolves for a model.

    This is distinct from a zero cost: the caller decides whether a missing
    price becomes $0.00, a warning, or a hard error.

    Examples:
        >>> try:
        ...     registry.calculate_cost(usage, "totally-unknown-model")
        ... except ModelPricingNotFoundError as e:
        ...     print(f"No pricing for {e.model}")
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        available_models: Optional[Union[List[str], Set[str], Mapping[str, Any]]] = None,
    ) -> None:
        """Initialize model pricing not found error.

        Args:
            message: Error message
            model: The model identifier that could not be resolved
            available_models: Models known to the dataset (optional)
        """
        super().__init__(message)
        self.model = model
        self.message = message
        # Convert other collection types to list for consistency
        if available_models is not None:
            if isinstance(available_models, (dict, Mapping)):
                self.available_models: Optional[List[str]] = list(available_models.keys())
            elif isinstance(available_models, set):
                self.available_models = sorted(available_models)
            else:
                self.available_models = list(available_models)
        else:
            self.available_models = None

    def __str__(self) -> str:
        """Return string representation of the error.

        Returns:
            Error message
        """
        return self.message


def error_details(error: PricingRegistryError) -> Dict[str, Any]:
    """Collect the context attributes of a registry error.

    Args:
        error: Error to describe

    Returns:
        Dictionary with the error type and message (under ``error``) plus any
        context attributes
    """
    details: Dict[str, Any] = {"type": type(error).__name__, "error": str(error)}
    for attr in ("path", "model", "field", "candidates"):
        value = getattr(error, attr, None)
        if value is not None:
            details[attr] = value
    return details
