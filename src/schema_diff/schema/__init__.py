"""Field schema extraction and change detection.

This module provides tools for comparing the installed storage schema of
entity fields with the schema currently declared in code.
"""

from schema_diff.schema.changes import ChangeScanner, field_diff_path
from schema_diff.schema.extractor import SchemaExtractor
from schema_diff.schema.models import (
    ComparisonPair,
    DiffOp,
    DiffRow,
    EntityContext,
    FieldDiffPage,
    FieldSchemaRecord,
    RequirementReport,
)

__all__ = [
    "ChangeScanner",
    "field_diff_path",
    "SchemaExtractor",
    "ComparisonPair",
    "DiffOp",
    "DiffRow",
    "EntityContext",
    "FieldDiffPage",
    "FieldSchemaRecord",
    "RequirementReport",
]
