"""Cost calculation command for the MPR CLI."""

import click

from ...errors import ModelPricingNotFoundError
from ...pricing import TokenUsage
from ..formatters import format_cost_json, format_json
from ..utils import ExitCode, build_registry, handle_error, require_dataset

_COUNT = click.IntRange(min=0)


@click.command()
@click.argument("model_name")
@click.option("--input", "input_tokens", type=_COUNT, default=0, show_default=True, help="Input tokens.")
@click.option("--output", "output_tokens", type=_COUNT, default=0, show_default=True, help="Output tokens.")
@click.option(
    "--cache-creation",
    "cache_creation_tokens",
    type=_COUNT,
    default=0,
    show_default=True,
    help="Cache creation (write) tokens.",
)
@click.option(
    "--cache-read",
    "cache_read_tokens",
    type=_COUNT,
    default=0,
    show_default=True,
    help="Cache read tokens.",
)
@click.option("--breakdown", is_flag=True, help="Include the cost of each token category.")
@click.pass_context
def cost(
    ctx: click.Context,
    model_name: str,
    input_tokens: int = 0,
    output_tokens: int = 0,
    cache_creation_tokens: int = 0,
    cache_read_tokens: int = 0,
    breakdown: bool = False,
) -> None:
    """Calculate the USD cost of token usage for MODEL_NAME.

    Examples:
      mpr cost claude-sonnet-4-20250514 --input 300000 --output 1000
    """
    try:
        registry = build_registry(ctx.obj)
        require_dataset(registry)

        usage = TokenUsage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cache_creation_tokens=cache_creation_tokens,
            cache_read_tokens=cache_read_tokens,
        )
        try:
            result = registry.calculate_cost_breakdown(usage, model_name)
        except ModelPricingNotFoundError as e:
            handle_error(e, ExitCode.MODEL_NOT_FOUND)
            return

        match = registry.get_pricing_match(model_name)
        format_json(format_cost_json(model_name, match.key if match else None, result, breakdown))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
