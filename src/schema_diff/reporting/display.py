"""Console display and text reports for field diffs and requirements."""

from pathlib import Path

from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from schema_diff.reporting.colors import DiffColors
from schema_diff.schema.models import (
    FieldDiffPage,
    RequirementReport,
    RequirementSeverity,
    TableCell,
)

SEVERITY_COLORS = {
    RequirementSeverity.OK: DiffColors.SUCCESS,
    RequirementSeverity.WARNING: DiffColors.WARNING,
    RequirementSeverity.ERROR: DiffColors.ERROR,
}


def _cell_text(cell: TableCell) -> Text:
    """Style one content cell according to its diff classes."""
    text = Text(cell.data)
    if "diff-deletedline" in cell.classes:
        text.stylize(DiffColors.REMOVED)
        highlight = DiffColors.REMOVED_HIGHLIGHT
    elif "diff-addedline" in cell.classes:
        text.stylize(DiffColors.ADDED)
        highlight = DiffColors.ADDED_HIGHLIGHT
    else:
        text.stylize(DiffColors.CONTEXT)
        return text

    for start, end in cell.highlights:
        text.stylize(highlight, start, end)
    return text


def display_field_diff(
    page: FieldDiffPage,
    console: Console | None = None,
    show_source: bool = False,
) -> None:
    """Display a field diff as a side-by-side table.

    Args:
        page: Rendered field diff
        console: Rich console (created if None)
        show_source: Also show both full YAML texts
    """
    if console is None:
        console = Console()

    installed_label, defined_label = (cell.data for cell in page.table.header)

    if not page.has_changes:
        console.print(
            Panel.fit(
                f"[{DiffColors.SUCCESS}]✓ {installed_label} and {defined_label.lower()} "
                f"schemas are identical[/{DiffColors.SUCCESS}]",
                title=page.title,
                border_style=DiffColors.SUCCESS,
            )
        )
    else:
        table = Table(title=page.title, border_style=DiffColors.BORDER, show_lines=False)
        table.add_column("", style=DiffColors.MARKER, width=1, no_wrap=True)
        table.add_column(installed_label, style=DiffColors.HEADER, ratio=1, overflow="fold")
        table.add_column("", style=DiffColors.MARKER, width=1, no_wrap=True)
        table.add_column(defined_label, style=DiffColors.HEADER, ratio=1, overflow="fold")

        # The last row holds the full texts, shown separately below
        for row in page.table.rows[:-1]:
            table.add_row(row[0].data, _cell_text(row[1]), row[2].data, _cell_text(row[3]))

        console.print(table)

    if show_source:
        console.print()
        console.print(
            Columns(
                [
                    Panel(Syntax(page.before_text, "yaml"), title=installed_label),
                    Panel(Syntax(page.after_text, "yaml"), title=defined_label),
                ],
                equal=True,
                expand=True,
            )
        )


def generate_field_diff_text(page: FieldDiffPage) -> str:
    """Generate a plain-text report of a field diff.

    Args:
        page: Rendered field diff

    Returns:
        Multi-line text report with -/+ markers and both full texts
    """
    installed_label, defined_label = (cell.data for cell in page.table.header)

    lines = [
        "=" * 80,
        page.title,
        "=" * 80,
        "",
    ]

    if not page.has_changes:
        lines.append("No differences.")
    else:
        for row in page.table.rows[:-1]:
            before_marker, before, after_marker, after = (cell.data for cell in row)
            if before_marker == "-":
                lines.append(f"- {before}")
            if after_marker == "+":
                lines.append(f"+ {after}")
            if not before_marker and not after_marker:
                lines.append(f"  {before}")

    lines.extend(
        [
            "",
            "-" * 80,
            installed_label,
            "-" * 80,
            page.before_text.rstrip("\n"),
            "",
            "-" * 80,
            defined_label,
            "-" * 80,
            page.after_text.rstrip("\n"),
            "=" * 80,
            "",
        ]
    )

    return "\n".join(lines)


def save_field_diff_report(page: FieldDiffPage, output_path: str | Path) -> None:
    """Save a plain-text field diff report to file.

    Args:
        page: Rendered field diff
        output_path: Path to output file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        f.write(generate_field_diff_text(page))


def display_requirements(report: RequirementReport, console: Console | None = None) -> None:
    """Display the definition requirements entry.

    Args:
        report: Requirements entry from the change scanner
        console: Rich console (created if None)
    """
    if console is None:
        console = Console()

    color = SEVERITY_COLORS[report.severity]
    console.print(
        Panel.fit(
            f"[{color}]{report.severity.name}[/{color}]: {report.value}",
            title=report.title,
            border_style=color,
        )
    )

    if not report.changes:
        return

    table = Table(title="Pending definition changes", border_style=DiffColors.BORDER)
    table.add_column("Entity Type", style=DiffColors.INFO, no_wrap=True)
    table.add_column("Change", style="white")
    table.add_column("Field Diff", style=DiffColors.LINK)

    for changes in report.changes:
        if changes.entity_type_change is not None:
            table.add_row(changes.label, changes.summary[0], "")
        for change in changes.field_changes:
            table.add_row(changes.label, change.summary, change.link or "")

    console.print(table)


def generate_requirements_text(report: RequirementReport) -> str:
    """Generate a plain-text version of the requirements entry.

    Args:
        report: Requirements entry from the change scanner

    Returns:
        Multi-line text report
    """
    lines = [f"{report.title}: {report.severity.name} - {report.value}"]

    for changes in report.changes:
        lines.append("")
        lines.append(f"{changes.label}:")
        if changes.entity_type_change is not None:
            lines.append(f"  • {changes.summary[0]}")
        for change in changes.field_changes:
            line = f"  • {change.summary}"
            if change.link:
                line += f" ({change.link})"
            lines.append(line)

    return "\n".join(lines) + "\n"
