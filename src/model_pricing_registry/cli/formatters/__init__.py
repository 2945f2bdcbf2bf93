"""CLI formatters package."""

from .json import (
    format_cost_json,
    format_data_paths_json,
    format_env_vars_json,
    format_json,
    format_match_json,
    format_models_list_json,
)

__all__ = [
    "format_json",
    "format_models_list_json",
    "format_match_json",
    "format_cost_json",
    "format_data_paths_json",
    "format_env_vars_json",
]
