"""Field schema diff command."""

from pathlib import Path

import click

from schema_diff.cli.context import SchemaDiffContext
from schema_diff.cli.decorators import handle_errors, pass_context
from schema_diff.cli.utils import console, echo_json, echo_success
from schema_diff.controller import SchemaDiffController
from schema_diff.reporting.display import (
    display_field_diff,
    generate_field_diff_text,
    save_field_diff_report,
)
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)


@click.command(name="field-diff")
@click.argument("entity_type_id")
@click.argument("field_name")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "text", "json"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--full",
    is_flag=True,
    help="Show every unchanged line instead of only the lines around changes",
)
@click.option(
    "--source",
    is_flag=True,
    help="Also show both full YAML documents (table format only)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Save a plain-text report to this file (relative paths go under paths.report_dir)",
)
@click.option(
    "--fail-on-diff",
    is_flag=True,
    help="Exit with status 1 when the installed and defined schemas differ",
)
@pass_context
@handle_errors
def field_diff(
    ctx: SchemaDiffContext,
    entity_type_id: str,
    field_name: str,
    output_format: str,
    full: bool,
    source: bool,
    output: Path | None,
    fail_on_diff: bool,
) -> None:
    """Show the installed versus defined storage schema of a field.

    Examples:

        # Side-by-side diff of node.title
        schema-diff --snapshot snapshot.yaml field-diff node title

        # Machine-readable output
        schema-diff field-diff node title --format json
    """
    if full:
        diff_config = ctx.config.diff.model_copy(
            update={"leading_context_lines": None, "trailing_context_lines": None}
        )
        controller = SchemaDiffController(ctx.host.services(), diff_config)
    else:
        controller = ctx.controller

    page = controller.field_schema_diff(entity_type_id, field_name)

    if output_format == "json":
        echo_json(page.to_dict())
    elif output_format == "text":
        click.echo(generate_field_diff_text(page), nl=False)
    else:
        display_field_diff(page, console=console, show_source=source)

    if output is not None:
        if not output.is_absolute():
            output = Path(ctx.config.paths.report_dir) / output
        save_field_diff_report(page, output)
        if output_format == "table":
            echo_success(f"Report saved to {output}")

    logger.info(
        "field_diff_command_complete",
        entity_type_id=entity_type_id,
        field_name=field_name,
        has_changes=page.has_changes,
    )

    if fail_on_diff and page.has_changes:
        raise click.exceptions.Exit(1)
