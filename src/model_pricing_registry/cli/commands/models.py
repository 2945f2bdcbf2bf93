"""Model inspection commands for the MPR CLI."""

from typing import Optional

import click

from ...errors import ModelPricingNotFoundError
from ..formatters import format_json, format_match_json, format_models_list_json
from ..utils import ExitCode, build_registry, handle_error, require_dataset


@click.group()
def models() -> None:
    """List and inspect priced models."""
    pass


@models.command("list")
@click.option("--filter", "filter_text", type=str, help="Only list models whose key contains this text (case-insensitive).")
@click.pass_context
def list_models(ctx: click.Context, filter_text: Optional[str] = None) -> None:
    """List model keys in dataset order."""
    try:
        registry = build_registry(ctx.obj)
        require_dataset(registry)
        format_json(format_models_list_json(registry.list_models(filter_text)))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@models.command()
@click.argument("model_name")
@click.pass_context
def get(ctx: click.Context, model_name: str) -> None:
    """Show how MODEL_NAME resolves and the pricing record it resolves to."""
    try:
        registry = build_registry(ctx.obj)
        dataset = require_dataset(registry)

        match = registry.get_pricing_match(model_name)
        if match is None:
            handle_error(
                ModelPricingNotFoundError(
                    f"Model '{model_name}' not found",
                    model=model_name,
                    available_models=dataset,
                ),
                ExitCode.MODEL_NOT_FOUND,
            )
            return

        format_json(format_match_json(model_name, match))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
