"""
Decorators for CLI commands.

This module provides decorators for error handling and context passing.
"""

import functools
from collections.abc import Callable

import click

from schema_diff.cli.context import SchemaDiffContext
from schema_diff.host.exceptions import (
    ConfigurationError,
    DefinitionError,
    NotFoundError,
    SnapshotError,
)
from schema_diff.utils.logging import get_logger, log_error

logger = get_logger(__name__)


def pass_context(f: Callable) -> Callable:
    """
    Decorator to pass SchemaDiffContext to command function.

    Usage:
        @click.command()
        @pass_context
        def my_command(ctx: SchemaDiffContext):
            print(ctx.config)
    """

    @click.pass_context
    @functools.wraps(f)
    def wrapper(click_ctx: click.Context, *args, **kwargs):
        diff_ctx: SchemaDiffContext = click_ctx.obj
        return f(diff_ctx, *args, **kwargs)

    return wrapper


def handle_errors(f: Callable) -> Callable:
    """
    Decorator to handle common errors in CLI commands.

    Exit codes:
        0: Success
        1: General error
        2: Configuration error
        3: Not found
        4: Snapshot or definition error
    """

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)

        except click.exceptions.Exit:
            raise

        except ConfigurationError as e:
            logger.error("Configuration error", error=str(e))
            click.echo(f"Configuration Error: {e}", err=True)
            click.echo(
                "\nPlease check your configuration file and ensure all fields are valid.",
                err=True,
            )
            raise click.exceptions.Exit(2) from e

        except NotFoundError as e:
            logger.error("Not found", error=str(e))
            click.echo(f"Not Found: {e}", err=True)
            raise click.exceptions.Exit(3) from e

        except (SnapshotError, DefinitionError) as e:
            logger.error("Snapshot error", error=str(e))
            click.echo(f"Snapshot Error: {e}", err=True)
            click.echo(
                "\nThe schema snapshot could not be read. Check its path and contents.",
                err=True,
            )
            raise click.exceptions.Exit(4) from e

        except Exception as e:
            log_error(logger, e, context=f.__name__)
            click.echo(f"Unexpected Error: {e}", err=True)
            click.echo(
                "\nAn unexpected error occurred. Please check the logs for details.",
                err=True,
            )
            raise click.exceptions.Exit(1) from e

    return wrapper
