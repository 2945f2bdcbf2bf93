"""CLI commands package."""

# Import all command modules to make them available
from . import cost, data, models

__all__ = ["cost", "data", "models"]
