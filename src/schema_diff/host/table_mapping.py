"""SQL table mapping for entity field storage.

Resolves which physical tables and columns a field storage definition
lives in. Single-valued base fields share the entity's own tables; every
other field gets dedicated per-field tables. The derived schema is what
the field *would* be installed with today, which is what the defined side
of a comparison is measured by.
"""

import copy
import hashlib
from typing import Any

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)

# Longest table name generated before falling back to a hashed name
MAX_TABLE_NAME_LENGTH = 48

# Entity keys whose columns are stored in the base table of a translatable entity
BASE_TABLE_KEYS = ("id", "revision", "bundle", "uuid", "langcode")

# Entity keys that are repeated in every revision table
REVISION_TABLE_KEYS = ("id", "revision", "langcode")

# Entity keys whose shared-table columns may never be NULL
NOT_NULL_KEYS = ("id", "revision", "bundle", "langcode")

# Columns of dedicated tables that field properties may not be prefixed onto
RESERVED_COLUMNS = ("deleted",)

INTEGER_ID_TYPES = ("integer", "entity_reference_id", "serial")


class SqlTableMapping:
    """Table mapping of one entity type.

    Args:
        entity_type: Entity type whose tables are mapped
        storage_definitions: All field storage definitions of the entity type
            on the same side of the comparison
    """

    def __init__(
        self,
        entity_type: EntityTypeDefinition,
        storage_definitions: dict[str, FieldStorageDefinition],
    ):
        self.entity_type = entity_type
        self.storage_definitions = storage_definitions

    def allows_shared_table_storage(self, storage_definition: FieldStorageDefinition) -> bool:
        """Check if a field can be stored in the entity type's shared tables."""
        return (
            not storage_definition.has_custom_storage()
            and storage_definition.is_base_field()
            and not storage_definition.is_multiple()
            and not storage_definition.is_deleted()
        )

    def requires_dedicated_table_storage(self, storage_definition: FieldStorageDefinition) -> bool:
        """Check if a field needs its own tables."""
        return not storage_definition.has_custom_storage() and not self.allows_shared_table_storage(
            storage_definition
        )

    def get_field_column_name(
        self, storage_definition: FieldStorageDefinition, property_name: str
    ) -> str:
        """Get the physical column name of one property of a field.

        Args:
            storage_definition: Field storage definition
            property_name: Column name declared by the field type

        Returns:
            Column name in the table the field is stored in
        """
        field_name = storage_definition.name

        if self.allows_shared_table_storage(storage_definition):
            if len(storage_definition.get_columns()) == 1:
                return field_name
            return f"{field_name}__{property_name}"

        if self.requires_dedicated_table_storage(storage_definition):
            if property_name in RESERVED_COLUMNS:
                return property_name
            return f"{field_name}_{property_name}"

        return ""

    def get_column_names(self, storage_definition: FieldStorageDefinition) -> dict[str, str]:
        """Get {property_name: column_name} for every column of a field."""
        return {
            property_name: self.get_field_column_name(storage_definition, property_name)
            for property_name in storage_definition.get_columns()
        }

    def get_shared_table_names(self, storage_definition: FieldStorageDefinition) -> list[str]:
        """Get the shared tables a single-valued base field is stored in.

        Args:
            storage_definition: Field storage definition

        Returns:
            Table names in base, data, revision, revision data order
        """
        entity_type = self.entity_type
        field_name = storage_definition.name
        key_names = {name for name, key_field in entity_type.keys.items() if key_field == field_name}

        tables = []
        if entity_type.is_translatable():
            if key_names & set(BASE_TABLE_KEYS):
                tables.append(entity_type.get_base_table())
            if "uuid" not in key_names:
                tables.append(entity_type.data_table)
        else:
            tables.append(entity_type.get_base_table())

        if entity_type.is_revisionable():
            in_revision = storage_definition.is_revisionable() or bool(
                key_names & set(REVISION_TABLE_KEYS)
            )
            if in_revision:
                if entity_type.is_translatable() and entity_type.revision_data_table:
                    if key_names & set(REVISION_TABLE_KEYS):
                        tables.append(entity_type.revision_table)
                    tables.append(entity_type.revision_data_table)
                else:
                    tables.append(entity_type.revision_table)

        return [table for table in tables if table]

    def get_dedicated_data_table_name(self, storage_definition: FieldStorageDefinition) -> str:
        return self._generate_field_table_name(storage_definition, revision=False)

    def get_dedicated_revision_table_name(self, storage_definition: FieldStorageDefinition) -> str:
        return self._generate_field_table_name(storage_definition, revision=True)

    def _generate_field_table_name(
        self, storage_definition: FieldStorageDefinition, revision: bool
    ) -> str:
        entity_type_id = self.entity_type.id
        field_hash = hashlib.sha256(
            f"{entity_type_id}.{storage_definition.name}".encode()
        ).hexdigest()[:10]

        if storage_definition.is_deleted():
            prefix = "field_deleted_revision_" if revision else "field_deleted_data_"
            return prefix + field_hash

        separator = "_revision__" if revision else "__"
        table_name = f"{entity_type_id}{separator}{storage_definition.name}"
        if len(table_name) > MAX_TABLE_NAME_LENGTH:
            separator = "_r__" if revision else "__"
            table_name = f"{entity_type_id[:10]}{separator}{field_hash}"
        return table_name

    def get_schema_from_storage_definition(
        self, storage_definition: FieldStorageDefinition
    ) -> dict[str, Any]:
        """Derive the physical schema of a field from its definition.

        Args:
            storage_definition: Field storage definition

        Returns:
            Dict of {table_name: table_schema}; empty for custom storage
        """
        schema: dict[str, Any] = {}

        if self.requires_dedicated_table_storage(storage_definition):
            schema = self.get_dedicated_table_schema(storage_definition)
        elif self.allows_shared_table_storage(storage_definition):
            column_names = self.get_column_names(storage_definition)
            for table_name in self.get_shared_table_names(storage_definition):
                schema[table_name] = self.get_shared_table_field_schema(
                    storage_definition, table_name, column_names
                )

        logger.debug(
            "field_schema_derived",
            entity_type_id=self.entity_type.id,
            field_name=storage_definition.name,
            tables=list(schema),
        )

        return schema

    def get_shared_table_field_schema(
        self,
        storage_definition: FieldStorageDefinition,
        table_name: str,
        column_names: dict[str, str],
    ) -> dict[str, Any]:
        """Get the part of a shared table's schema contributed by one field.

        Args:
            storage_definition: Field storage definition
            table_name: Shared table the field is stored in
            column_names: {property_name: column_name} for the field

        Returns:
            Table schema with fields, indexes, unique keys and foreign keys
        """
        entity_type = self.entity_type
        field_name = storage_definition.name
        field_schema = storage_definition.get_schema()
        not_null_fields = {entity_type.get_key(key) for key in NOT_NULL_KEYS}

        schema: dict[str, Any] = {"fields": {}}
        for property_name, column_schema in field_schema["columns"].items():
            column_name = column_names[property_name]
            schema["fields"][column_name] = copy.deepcopy(column_schema)
            schema["fields"][column_name]["not null"] = field_name in not_null_fields

        for section in ("indexes", "unique keys"):
            for index_name, index_columns in field_schema[section].items():
                real_name = self._get_field_index_name(storage_definition, index_name)
                schema.setdefault(section, {})[real_name] = self._map_index_columns(
                    index_columns, column_names
                )

        for key_name, foreign_key in field_schema["foreign keys"].items():
            real_name = self._get_field_index_name(storage_definition, key_name)
            schema.setdefault("foreign keys", {})[real_name] = {
                "table": foreign_key.get("table"),
                "columns": {
                    column_names.get(local, local): remote
                    for local, remote in (foreign_key.get("columns") or {}).items()
                },
            }

        is_identifier = (
            field_name == entity_type.get_key("id") and table_name == entity_type.get_base_table()
        ) or (
            field_name == entity_type.get_key("revision")
            and table_name == entity_type.revision_table
        )
        if is_identifier:
            self._process_identifier_schema(schema, column_names)

        return schema

    def get_dedicated_table_schema(self, storage_definition: FieldStorageDefinition) -> dict[str, Any]:
        """Get the schema of the per-field tables of a field.

        Args:
            storage_definition: Field storage definition

        Returns:
            Dict of {table_name: table_schema} for the data table and, for
            revisionable entity types, the revision table
        """
        entity_type = self.entity_type
        field_schema = storage_definition.get_schema()
        column_names = self.get_column_names(storage_definition)
        id_schema = self._get_identifier_column_schema(entity_type.get_key("id"))
        revision_schema = self._get_identifier_column_schema(entity_type.get_key("revision"))

        fields: dict[str, Any] = {
            "bundle": {"type": "varchar_ascii", "length": 128, "not null": True, "default": ""},
            "deleted": {"type": "int", "size": "tiny", "not null": True, "default": 0},
            "entity_id": id_schema,
            "revision_id": revision_schema if entity_type.is_revisionable() else id_schema,
            "langcode": {"type": "varchar_ascii", "length": 32, "not null": True, "default": ""},
            "delta": {"type": "int", "unsigned": True, "not null": True},
        }
        for property_name, column_schema in field_schema["columns"].items():
            fields[column_names[property_name]] = copy.deepcopy(column_schema)

        data_schema: dict[str, Any] = {
            "description": f"Data storage for {entity_type.id} field {storage_definition.name}.",
            "fields": copy.deepcopy(fields),
            "primary key": ["entity_id", "deleted", "delta", "langcode"],
            "indexes": {"bundle": ["bundle"], "revision_id": ["revision_id"]},
        }

        field_indexes: dict[str, Any] = {}
        for section in ("indexes", "unique keys"):
            for index_name, index_columns in field_schema[section].items():
                real_name = f"{storage_definition.name}_{index_name}"
                field_indexes.setdefault(section, {})[real_name] = self._map_index_columns(
                    index_columns, column_names
                )
        for section, indexes in field_indexes.items():
            data_schema.setdefault(section, {}).update(indexes)

        if field_schema["foreign keys"]:
            data_schema["foreign keys"] = {
                f"{storage_definition.name}_{key_name}": {
                    "table": foreign_key.get("table"),
                    "columns": {
                        column_names.get(local, local): remote
                        for local, remote in (foreign_key.get("columns") or {}).items()
                    },
                }
                for key_name, foreign_key in field_schema["foreign keys"].items()
            }

        schema = {self.get_dedicated_data_table_name(storage_definition): data_schema}

        if entity_type.is_revisionable():
            revision_schema_table = copy.deepcopy(data_schema)
            revision_schema_table["description"] = (
                f"Revision archive storage for {entity_type.id} field {storage_definition.name}."
            )
            revision_schema_table["primary key"] = [
                "entity_id",
                "revision_id",
                "deleted",
                "delta",
                "langcode",
            ]
            revision_schema_table["indexes"].pop("revision_id", None)
            schema[self.get_dedicated_revision_table_name(storage_definition)] = (
                revision_schema_table
            )

        return schema

    def _get_identifier_column_schema(self, key_field_name: str | None) -> dict[str, Any]:
        """Column schema used to reference an entity from a dedicated table."""
        key_definition = self.storage_definitions.get(key_field_name) if key_field_name else None
        if key_definition is None or key_definition.type in INTEGER_ID_TYPES:
            return {"type": "int", "unsigned": True, "not null": True}
        return {"type": "varchar_ascii", "length": 128, "not null": True}

    def _get_field_index_name(self, storage_definition: FieldStorageDefinition, index: str) -> str:
        return f"{self.entity_type.id}_field__{storage_definition.name}__{index}"

    @staticmethod
    def _map_index_columns(index_columns: list[Any], column_names: dict[str, str]) -> list[Any]:
        """Replace property names in an index definition with real column names.

        Index columns are either a property name or a [name, length] pair.
        """
        mapped = []
        for column in index_columns:
            if isinstance(column, list | tuple):
                mapped.append([column_names.get(column[0], column[0]), column[1]])
            else:
                mapped.append(column_names.get(column, column))
        return mapped

    @staticmethod
    def _process_identifier_schema(schema: dict[str, Any], column_names: dict[str, str]) -> None:
        """Turn integer identifier columns into auto-increment columns."""
        for column_name in column_names.values():
            column = schema["fields"][column_name]
            if column.get("type") == "int":
                column["type"] = "serial"
            column["not null"] = True
            column.pop("default", None)


class SqlTableMappingResolver:
    """Builds a :class:`SqlTableMapping` for an entity type."""

    def get_table_mapping(
        self,
        entity_type: EntityTypeDefinition,
        storage_definitions: dict[str, FieldStorageDefinition],
    ) -> SqlTableMapping:
        return SqlTableMapping(entity_type, storage_definitions)
