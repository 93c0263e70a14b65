"""Diff rendering and reporting for Schema Diff."""

from schema_diff.reporting.diff_report import DifferenceRenderer, word_level_changes
from schema_diff.reporting.display import (
    display_field_diff,
    display_requirements,
    generate_field_diff_text,
    generate_requirements_text,
    save_field_diff_report,
)

__all__ = [
    "DifferenceRenderer",
    "word_level_changes",
    "display_field_diff",
    "display_requirements",
    "generate_field_diff_text",
    "generate_requirements_text",
    "save_field_diff_report",
]
