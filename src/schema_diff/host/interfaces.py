"""Interfaces of the host system services used by the comparison.

The comparison only ever reads from the host. Each protocol below is the
narrow slice of a host service that Schema Diff needs; an adapter such as
:class:`schema_diff.host.snapshot.SnapshotHost` implements them, and the
whole set is handed around explicitly as :class:`HostServices`.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition


class EntityTypeRegistry(Protocol):
    """Lookup of entity type definitions."""

    def get_active_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        """Get the entity type definition currently in effect.

        Raises:
            NotFoundError: If the entity type is unknown
        """
        ...

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition | None:
        """Get the entity type definition declared in code, if any."""
        ...

    def get_entity_type_ids(self) -> list[str]:
        """Get every entity type ID known on either side."""
        ...


class FieldDefinitionRegistry(Protocol):
    """Lookup of field storage definitions."""

    def get_field_storage_definitions(self, entity_type_id: str) -> dict[str, FieldStorageDefinition]:
        """Get the field storage definitions declared in code."""
        ...

    def get_active_field_storage_definitions(
        self, entity_type_id: str
    ) -> dict[str, FieldStorageDefinition]:
        """Get the field storage definitions currently in effect."""
        ...


class LastInstalledSchemaRepository(Protocol):
    """Read access to what was last written to the database schema."""

    def get_last_installed_definition(self, entity_type_id: str) -> EntityTypeDefinition | None:
        ...

    def get_last_installed_field_storage_definitions(
        self, entity_type_id: str
    ) -> dict[str, FieldStorageDefinition]:
        ...

    def load_field_schema_data(self, storage_definition: FieldStorageDefinition) -> dict[str, Any]:
        """Load the physical schema stored when the field was last installed.

        Returns:
            Dict of {table_name: table_schema}, empty if nothing was stored
        """
        ...


class TableMapping(Protocol):
    """Resolution of fields to physical tables and columns."""

    def allows_shared_table_storage(self, storage_definition: FieldStorageDefinition) -> bool:
        ...

    def requires_dedicated_table_storage(self, storage_definition: FieldStorageDefinition) -> bool:
        ...

    def get_schema_from_storage_definition(
        self, storage_definition: FieldStorageDefinition
    ) -> dict[str, Any]:
        """Derive the physical schema a field would be installed with."""
        ...


class TableMappingResolver(Protocol):
    """Factory for the table mapping of an entity type."""

    def get_table_mapping(
        self,
        entity_type: EntityTypeDefinition,
        storage_definitions: dict[str, FieldStorageDefinition],
    ) -> TableMapping:
        ...


@dataclass
class HostServices:
    """The host services needed to compare field schemas.

    Attributes:
        entity_types: Entity type definition registry
        field_definitions: Field storage definition registry
        installed_schema: Last-installed schema repository
        table_mappings: Table mapping resolver
    """

    entity_types: EntityTypeRegistry
    field_definitions: FieldDefinitionRegistry
    installed_schema: LastInstalledSchemaRepository
    table_mappings: TableMappingResolver
