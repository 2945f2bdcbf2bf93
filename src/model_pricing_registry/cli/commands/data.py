"""Data inspection commands for the MPR CLI."""

from pathlib import Path

import click

from ..formatters import format_data_paths_json, format_env_vars_json, format_json
from ..utils import ExitCode, build_registry, get_mpr_env_vars, handle_error


@click.group()
def data() -> None:
    """Inspect data sources and configuration."""
    pass


@data.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show resolved data source paths and precedence."""
    try:
        registry = build_registry(ctx.obj)
        info = registry.get_data_info()
        existing = {path: Path(path).is_file() for path in info["pricing_candidates"]}
        format_json(format_data_paths_json(info, existing))
    except Exception as e:
        handle_error(e, ExitCode.DATA_SOURCE_ERROR)


@data.command()
def env() -> None:
    """Show effective MPR environment variables."""
    try:
        format_json(format_env_vars_json(get_mpr_env_vars()))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
