"""Host adapter backed by a YAML snapshot of the host's schema metadata.

A snapshot holds, per entity type, the entity type definition as last
installed and as declared in code, the field storage definitions of both
generations, and the physical field schema stored at install time:

.. code-block:: yaml

    entity_types:
      node:
        installed: {label: Content, base_table: node, keys: {id: nid}}
        defined: {label: Content, base_table: node, keys: {id: nid}}
    fields:
      node:
        installed:
          title: {type: string, schema: {columns: {value: {type: varchar}}}}
        defined:
          title: {type: string, schema: {columns: {value: {type: varchar}}}}
        schema_data:
          title: {node: {fields: {title: {type: varchar}}}}

``defined`` entity types default to their ``installed`` counterpart. The
snapshot is read once and never written back.
"""

import copy
from pathlib import Path
from typing import Any

import yaml

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition
from schema_diff.host.exceptions import DefinitionError, NotFoundError, SnapshotError
from schema_diff.host.interfaces import HostServices
from schema_diff.host.table_mapping import SqlTableMapping, SqlTableMappingResolver
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)


class SnapshotHost:
    """Read-only host services over a loaded snapshot.

    Implements the entity type registry, field definition registry,
    last-installed schema repository and table mapping resolver
    protocols from :mod:`schema_diff.host.interfaces`.
    """

    def __init__(self, data: dict[str, Any], source: str = "<memory>"):
        """Initialize snapshot host.

        Args:
            data: Parsed snapshot document
            source: Where the snapshot came from, for messages

        Raises:
            SnapshotError: If the snapshot is malformed
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot {source} must be a mapping at the top level")

        self.source = source
        self._installed_entity_types: dict[str, EntityTypeDefinition] = {}
        self._defined_entity_types: dict[str, EntityTypeDefinition] = {}
        self._installed_fields: dict[str, dict[str, FieldStorageDefinition]] = {}
        self._defined_fields: dict[str, dict[str, FieldStorageDefinition]] = {}
        self._schema_data: dict[str, dict[str, Any]] = {}
        self._table_mappings = SqlTableMappingResolver()

        try:
            self._load_entity_types(data.get("entity_types") or {})
            self._load_fields(data.get("fields") or {})
        except DefinitionError as e:
            raise SnapshotError(f"Invalid snapshot {source}: {e}") from e

        logger.info(
            "snapshot_loaded",
            source=source,
            entity_types=len(self.get_entity_type_ids()),
        )

    @classmethod
    def from_file(cls, snapshot_path: Path | str) -> "SnapshotHost":
        """Load a snapshot from a YAML file.

        Args:
            snapshot_path: Path to the snapshot file

        Returns:
            SnapshotHost

        Raises:
            SnapshotError: If the file doesn't exist or is not valid YAML
        """
        snapshot_path = Path(snapshot_path)

        if not snapshot_path.exists():
            raise SnapshotError(f"Snapshot file not found: {snapshot_path}")

        try:
            with open(snapshot_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SnapshotError(f"Snapshot file is not valid YAML: {snapshot_path}: {e}") from e

        if not data:
            raise SnapshotError(f"Empty snapshot file: {snapshot_path}")

        return cls(data, source=str(snapshot_path))

    def services(self) -> HostServices:
        """Bundle this snapshot as the host services of a comparison."""
        return HostServices(
            entity_types=self,
            field_definitions=self,
            installed_schema=self,
            table_mappings=self,
        )

    def _load_entity_types(self, entity_types: dict[str, Any]) -> None:
        for entity_type_id, sides in entity_types.items():
            if not isinstance(sides, dict) or not ({"installed", "defined"} & set(sides)):
                raise DefinitionError(
                    f"Entity type '{entity_type_id}' needs an 'installed' or 'defined' definition"
                )
            if sides.get("installed") is not None:
                self._installed_entity_types[entity_type_id] = EntityTypeDefinition.from_dict(
                    entity_type_id, sides["installed"]
                )
            defined = sides.get("defined", sides.get("installed"))
            if defined is not None:
                self._defined_entity_types[entity_type_id] = EntityTypeDefinition.from_dict(
                    entity_type_id, defined
                )

    def _load_fields(self, fields: dict[str, Any]) -> None:
        for entity_type_id, sides in fields.items():
            if not isinstance(sides, dict):
                raise DefinitionError(f"Fields of '{entity_type_id}' must be a mapping")
            self._installed_fields[entity_type_id] = {
                name: FieldStorageDefinition.from_dict(entity_type_id, name, definition)
                for name, definition in (sides.get("installed") or {}).items()
            }
            self._defined_fields[entity_type_id] = {
                name: FieldStorageDefinition.from_dict(entity_type_id, name, definition)
                for name, definition in (sides.get("defined") or {}).items()
            }
            self._schema_data[entity_type_id] = _validate_schema_data(
                entity_type_id, sides.get("schema_data") or {}
            )

    # Entity type registry

    def get_active_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        """Get the last installed entity type, or the code one if never installed.

        Raises:
            NotFoundError: If neither side knows the entity type
        """
        definition = self._installed_entity_types.get(
            entity_type_id, self._defined_entity_types.get(entity_type_id)
        )
        if definition is None:
            logger.info("entity_type_not_found", entity_type_id=entity_type_id)
            raise NotFoundError("Unknown entity type", entity_type_id=entity_type_id)
        return definition

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition | None:
        return self._defined_entity_types.get(entity_type_id)

    def get_entity_type_ids(self) -> list[str]:
        ids = list(self._installed_entity_types)
        ids.extend(i for i in self._defined_entity_types if i not in self._installed_entity_types)
        return ids

    # Field definition registry

    def get_field_storage_definitions(self, entity_type_id: str) -> dict[str, FieldStorageDefinition]:
        return dict(self._defined_fields.get(entity_type_id, {}))

    def get_active_field_storage_definitions(
        self, entity_type_id: str
    ) -> dict[str, FieldStorageDefinition]:
        # Active definitions are the installed ones for as long as an update is pending
        return self.get_last_installed_field_storage_definitions(entity_type_id)

    # Last-installed schema repository

    def get_last_installed_definition(self, entity_type_id: str) -> EntityTypeDefinition | None:
        return self._installed_entity_types.get(entity_type_id)

    def get_last_installed_field_storage_definitions(
        self, entity_type_id: str
    ) -> dict[str, FieldStorageDefinition]:
        return dict(self._installed_fields.get(entity_type_id, {}))

    def load_field_schema_data(self, storage_definition: FieldStorageDefinition) -> dict[str, Any]:
        schema_data = self._schema_data.get(storage_definition.entity_type_id, {})
        return copy.deepcopy(schema_data.get(storage_definition.name) or {})

    # Table mapping resolver

    def get_table_mapping(
        self,
        entity_type: EntityTypeDefinition,
        storage_definitions: dict[str, FieldStorageDefinition],
    ) -> SqlTableMapping:
        return self._table_mappings.get_table_mapping(entity_type, storage_definitions)


def _validate_schema_data(entity_type_id: str, schema_data: Any) -> dict[str, Any]:
    """Check stored schemas are {field: {table: {"fields": {column: {...}}}}}.

    Raises:
        DefinitionError: If any level has the wrong shape
    """
    if not isinstance(schema_data, dict):
        raise DefinitionError(f"Schema data of '{entity_type_id}' must be a mapping")

    for field_name, tables in schema_data.items():
        where = f"'{entity_type_id}.{field_name}'"
        if tables is None:
            continue
        if not isinstance(tables, dict):
            raise DefinitionError(f"Schema data of {where} must map table names to schemas")
        for table_name, table_schema in tables.items():
            if not isinstance(table_schema, dict):
                raise DefinitionError(
                    f"Schema of table '{table_name}' in {where} must be a mapping"
                )
            columns = table_schema.get("fields") or {}
            if not isinstance(columns, dict):
                raise DefinitionError(
                    f"Fields of table '{table_name}' in {where} must be a mapping"
                )
            for column_name, column_schema in columns.items():
                if not isinstance(column_schema, dict):
                    raise DefinitionError(
                        f"Column '{column_name}' of table '{table_name}' in {where} "
                        "must be a mapping"
                    )

    return dict(schema_data)
