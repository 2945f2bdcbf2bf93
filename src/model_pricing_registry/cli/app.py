"""Main CLI application for Model Pricing Registry."""

from typing import Optional, Tuple

import click
import rich_click as rich_click

from ..resolver import PROVIDER_PREFIX_PRESETS
from .utils import ExitCode, configure_logging, handle_error, parse_aliases

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


def _print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version information and exit."""
    if not value or ctx.resilient_parsing:
        return
    try:
        from .. import __version__

        library_version = __version__
    except ImportError:
        library_version = "unknown"

    click.echo(f"MPR CLI version: {library_version}")
    click.echo(f"Library version: {library_version}")
    ctx.exit()


@click.group(cls=rich_click.RichGroup, invoke_without_command=True)
@click.option(
    "--pricing-path",
    type=click.Path(dir_okay=False),
    help="Pricing file to use. Takes precedence over MPR_PRICING_PATH and the default locations.",
)
@click.option(
    "--overrides-path",
    type=click.Path(dir_okay=False),
    help="Overrides file applied on top of the pricing file. Takes precedence over MPR_OVERRIDES_PATH.",
)
@click.option(
    "--preset",
    type=click.Choice(sorted(PROVIDER_PREFIX_PRESETS), case_sensitive=False),
    help="Provider prefix list used for exact lookup. Defaults to 'default'.",
)
@click.option(
    "--alias",
    "aliases",
    multiple=True,
    metavar="NAME=TARGET",
    help="Price model NAME as TARGET (can be used multiple times).",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option(
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Print CLI and library version information.",
)
@click.pass_context
def app(
    ctx: click.Context,
    pricing_path: Optional[str] = None,
    overrides_path: Optional[str] = None,
    preset: Optional[str] = None,
    aliases: Tuple[str, ...] = (),
    verbose: int = 0,
    debug: bool = False,
) -> None:
    """Model Pricing Registry CLI - resolve model pricing and calculate token costs.

    Output is JSON. Pricing data is read from a LiteLLM-style
    model_prices_and_context_window.json file.

    Examples:
      # Show how a model id resolves
      mpr models get anthropic/claude-sonnet-4-20250514

      # Calculate the cost of a request
      mpr cost gpt-5 --input 12000 --output 800 --cache-read 4000 --breakdown

      # Show data source paths
      mpr data paths
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    # Configure logging level based on verbosity
    log_level = "WARNING"
    if debug or verbose >= 2:
        log_level = "DEBUG"
    elif verbose == 1:
        log_level = "INFO"
    configure_logging(log_level)

    try:
        model_aliases = parse_aliases(aliases)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return

    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "pricing_path": pricing_path,
            "overrides_path": overrides_path,
            "preset": preset,
            "provider_prefixes": PROVIDER_PREFIX_PRESETS[preset.lower()] if preset else None,
            "model_aliases": model_aliases,
            "verbose": verbose,
            "debug": debug,
            "log_level": log_level,
        }
    )


# Import and register subcommands
from .commands import cost, data, models  # noqa: E402

app.add_command(models.models)
app.add_command(cost.cost)
app.add_command(data.data)


if __name__ == "__main__":
    app()
