"""CLI utilities package."""

from .helpers import (
    ExitCode,
    build_registry,
    configure_logging,
    get_mpr_env_vars,
    handle_error,
    parse_aliases,
    require_dataset,
)

__all__ = [
    "ExitCode",
    "build_registry",
    "configure_logging",
    "get_mpr_env_vars",
    "handle_error",
    "parse_aliases",
    "require_dataset",
]
