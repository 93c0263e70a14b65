"""Definition requirements check command."""

import click

from schema_diff.cli.context import SchemaDiffContext
from schema_diff.cli.decorators import handle_errors, pass_context
from schema_diff.cli.utils import console, echo_json
from schema_diff.reporting.display import display_requirements, generate_requirements_text
from schema_diff.schema.models import RequirementSeverity


@click.command(name="check")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "text", "json"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 when any definition change is pending",
)
@pass_context
@handle_errors
def check(ctx: SchemaDiffContext, output_format: str, strict: bool) -> None:
    """List entity types and fields whose definitions need updates.

    Each updated field links to its field diff.

    Examples:

        schema-diff --snapshot snapshot.yaml check

        # Fail a CI job on pending changes
        schema-diff check --strict --format text
    """
    report = ctx.controller.requirements()

    if output_format == "json":
        echo_json(report.to_dict())
    elif output_format == "text":
        click.echo(generate_requirements_text(report), nl=False)
    else:
        display_requirements(report, console=console)

    if strict and report.severity is not RequirementSeverity.OK:
        raise click.exceptions.Exit(1)
