"""Helper functions for CLI operations."""

import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

import click

from ...config_paths import ENV_DATA_DIR, ENV_OVERRIDES_PATH, ENV_PRICING_PATH
from ...dataset import PricingDataset
from ...errors import DatasetLoadError, PricingRegistryError, error_details
from ...logging import LOGGER_NAME, LogEvent, log_debug
from ...registry import PricingRegistry, RegistryConfig


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    MODEL_NOT_FOUND = 3
    DATA_SOURCE_ERROR = 4


class _ClickEchoHandler(logging.Handler):
    """Logging handler writing through click so output follows the active stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(level: str) -> None:
    """Route package log records to stderr at the given level.

    Only the package logger is touched; calling this again replaces the level
    without adding a second handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(handler, _ClickEchoHandler) for handler in logger.handlers):
        handler = _ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    if isinstance(error, PricingRegistryError):
        log_debug(LogEvent.CLI_COMMAND, "Command failed", exit_code=exit_code, **error_details(error))
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def parse_aliases(values: Sequence[str]) -> Dict[str, str]:
    """Parse ``NAME=TARGET`` alias options.

    Args:
        values: Raw option values

    Returns:
        Alias map

    Raises:
        click.BadParameter: If a value is not of the form NAME=TARGET
    """
    aliases: Dict[str, str] = {}
    for value in values:
        name, sep, target = value.partition("=")
        if not sep or not name.strip() or not target.strip():
            raise click.BadParameter(f"Invalid alias '{value}'. Expected NAME=TARGET.")
        aliases[name.strip()] = target.strip()
    return aliases


def build_registry(ctx_obj: Dict[str, Any]) -> PricingRegistry:
    """Create a registry from the global CLI options.

    Args:
        ctx_obj: Click context object populated by the root command

    Returns:
        A fresh registry; nothing is loaded yet
    """
    config = RegistryConfig(
        pricing_path=ctx_obj.get("pricing_path"),
        overrides_path=ctx_obj.get("overrides_path"),
        provider_prefixes=ctx_obj.get("provider_prefixes"),
        model_aliases=ctx_obj.get("model_aliases"),
    )
    return PricingRegistry(config)


def require_dataset(registry: PricingRegistry) -> PricingDataset:
    """Load the registry dataset, exiting when no pricing data is available.

    The registry itself degrades to an empty dataset; at the command line an
    empty dataset almost always means a missing or corrupt pricing file.

    Args:
        registry: Registry to load

    Returns:
        The non-empty dataset
    """
    dataset = registry.fetch_all()
    if not dataset:
        stats = registry.last_load_stats
        reason = stats.get("first_error") or "pricing source contains no valid entries"
        handle_error(DatasetLoadError(f"No pricing data available: {reason}"), ExitCode.DATA_SOURCE_ERROR)
    return dataset


def get_mpr_env_vars() -> Dict[str, Optional[str]]:
    """Get all MPR_* environment variables.

    Returns:
        Dictionary of MPR environment variables and their values
    """
    mpr_vars: Dict[str, Optional[str]] = {}
    for key, value in os.environ.items():
        if key.startswith("MPR_"):
            mpr_vars[key] = value

    # Include commonly used variables even if not set
    common_vars: List[str] = [ENV_PRICING_PATH, ENV_OVERRIDES_PATH, ENV_DATA_DIR]

    for var in common_vars:
        if var not in mpr_vars:
            mpr_vars[var] = None

    return mpr_vars
