"""
Configuration management commands.

This module provides commands for validating and generating
Schema Diff configuration files.
"""

from pathlib import Path

import click

from schema_diff.cli.context import SchemaDiffContext
from schema_diff.cli.decorators import handle_errors, pass_context
from schema_diff.cli.utils import echo_error, echo_info, echo_success, echo_warning, print_table
from schema_diff.config import SchemaDiffConfig, save_config_to_yaml
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""
    pass


@config.command(name="validate")
@pass_context
@handle_errors
def validate(ctx: SchemaDiffContext) -> None:
    """Validate the configuration and the snapshot it points to.

    Examples:

        schema-diff --config config.yaml config validate
    """
    source = ctx.config_path or "defaults and environment"
    echo_info(f"Validating configuration: {source}")

    settings = ctx.config
    _display_config_summary(settings, ctx.effective_snapshot_path)

    host = ctx.host
    entity_type_ids = host.get_entity_type_ids()
    echo_success(f"Snapshot loaded: {len(entity_type_ids)} entity types")

    if not entity_type_ids:
        echo_error("Snapshot contains no entity types")
        raise click.exceptions.Exit(2)

    echo_success("Configuration is valid")


@config.command(name="init")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default="config.yaml",
    help="Where to write the configuration file (default: config.yaml)",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@handle_errors
def init(output: Path, force: bool) -> None:
    """Write a configuration file with every default setting."""
    if output.exists() and not force:
        if not click.confirm(f"File {output} already exists. Overwrite?"):
            echo_warning("Configuration not written")
            return

    save_config_to_yaml(SchemaDiffConfig(), output)
    logger.info("config_written", path=str(output))
    echo_success(f"Configuration written to {output}")


def _display_config_summary(settings: SchemaDiffConfig, snapshot_path: Path) -> None:
    context = settings.diff
    rows = [
        ["Snapshot file", str(snapshot_path)],
        ["Report directory", settings.paths.report_dir],
        ["Leading context lines", _lines(context.leading_context_lines)],
        ["Trailing context lines", _lines(context.trailing_context_lines)],
        ["Route prefix", context.route_prefix],
        ["Console log level", settings.logging.level],
    ]
    print_table("Configuration Summary", ["Setting", "Value"], rows)


def _lines(value: int | None) -> str:
    return "all" if value is None else str(value)
