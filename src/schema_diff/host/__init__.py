"""Host system adapters for Schema Diff.

This package describes the read-only services of the host content
management system that the comparison relies on, and provides an
implementation over YAML metadata snapshots.
"""

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition
from schema_diff.host.exceptions import (
    ConfigurationError,
    DefinitionError,
    NotFoundError,
    SchemaDiffError,
    SnapshotError,
)
from schema_diff.host.interfaces import HostServices
from schema_diff.host.snapshot import SnapshotHost
from schema_diff.host.table_mapping import SqlTableMapping, SqlTableMappingResolver

__all__ = [
    "EntityTypeDefinition",
    "FieldStorageDefinition",
    "HostServices",
    "SnapshotHost",
    "SqlTableMapping",
    "SqlTableMappingResolver",
    "SchemaDiffError",
    "NotFoundError",
    "DefinitionError",
    "SnapshotError",
    "ConfigurationError",
]
