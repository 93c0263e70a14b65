"""
Main CLI entry point for Schema Diff.

This module provides the command-line interface for comparing installed
and defined field storage schemas.
"""

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from schema_diff import __version__
from schema_diff.cli.commands import check as check_commands
from schema_diff.cli.commands import config as config_commands
from schema_diff.cli.commands import diff as diff_commands
from schema_diff.cli.context import SchemaDiffContext
from schema_diff.utils.logging import configure_logging, get_logger

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="schema-diff")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
    envvar="SCHEMA_DIFF_CONFIG",
)
@click.option(
    "--snapshot",
    "-s",
    type=click.Path(path_type=Path),
    help="Schema snapshot file (overrides paths.snapshot_file)",
    envvar="SCHEMA_DIFF_SNAPSHOT",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set console logging level (overrides logging.level, default: WARNING)",
    envvar="SCHEMA_DIFF_LOG_LEVEL",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Also write logs to this file (overrides logging.file)",
    envvar="SCHEMA_DIFF_LOG_FILE",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    snapshot: Path | None,
    log_level: str | None,
    log_file: Path | None,
) -> None:
    """Schema Diff - Compare installed and defined field storage schemas.

    Reads a snapshot of the host's schema metadata and shows, for a field,
    how the schema last written to the database differs from the schema
    declared in code. Nothing is ever written back.

    Examples:

        # List fields with pending definition changes
        schema-diff --snapshot snapshot.yaml check

        # Show the diff of one field
        schema-diff --snapshot snapshot.yaml field-diff node title
    """
    # Reconfigured from the logging section once the configuration is loaded
    configure_logging(level=log_level or "WARNING", log_file=str(log_file) if log_file else None)

    ctx.obj = SchemaDiffContext(
        config_path=config,
        snapshot_path=snapshot,
        log_level=log_level,
        log_file=log_file,
    )

    logger.debug(
        "CLI initialized",
        config=str(config) if config else None,
        snapshot=str(snapshot) if snapshot else None,
        log_level=log_level,
    )


cli.add_command(config_commands.config)
cli.add_command(check_commands.check)
cli.add_command(diff_commands.field_diff)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    try:
        result = cli.main(args=argv, standalone_mode=False)
        return result if isinstance(result, int) else 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    except Exception as e:
        logger.error("Unexpected error", error=str(e), exc_info=True)
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
