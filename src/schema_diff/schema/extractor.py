"""Extraction of comparable field schema records from the host."""

import copy
from collections.abc import Callable
from typing import Any

from schema_diff.host.definitions import FieldStorageDefinition
from schema_diff.host.exceptions import NotFoundError
from schema_diff.host.interfaces import HostServices, TableMapping
from schema_diff.schema.models import ComparisonPair, EntityContext, FieldSchemaRecord
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)

# Column properties that only matter while a field is being created
TRANSIENT_COLUMN_PROPERTIES = ("initial", "initial_from_field")

SchemaResolver = Callable[[FieldStorageDefinition], dict[str, Any]]


class SchemaExtractor:
    """Build the installed and defined schema records of a field.

    The installed side's physical schema is whatever was stored when the
    field was last installed; the defined side's is derived from the
    current definition through the live table mapping. The two paths are
    deliberately different: a layout that the table mapping would now
    produce differently is exactly what the comparison must show.

    Args:
        host: Host services to read definitions and schemas from
    """

    def __init__(self, host: HostServices):
        self.host = host

    def resolve_context(self, entity_type_id: str) -> EntityContext:
        """Load the active definitions of an entity type.

        Args:
            entity_type_id: Entity type ID

        Returns:
            EntityContext with entity type, table mapping and active field
            storage definitions

        Raises:
            NotFoundError: If the entity type is unknown
        """
        entity_type = self.host.entity_types.get_active_definition(entity_type_id)
        storage_definitions = self.host.field_definitions.get_active_field_storage_definitions(
            entity_type_id
        )
        table_mapping = self.host.table_mappings.get_table_mapping(entity_type, storage_definitions)

        logger.debug(
            "entity_context_resolved",
            entity_type_id=entity_type_id,
            fields_count=len(storage_definitions),
        )

        return EntityContext(
            entity_type=entity_type,
            table_mapping=table_mapping,
            field_storage_definitions=storage_definitions,
        )

    def get_comparison_pair(self, entity_type_id: str, field_name: str) -> ComparisonPair:
        """Look up both generations of a field storage definition.

        Args:
            entity_type_id: Entity type ID
            field_name: Field name

        Returns:
            ComparisonPair of the last-installed and the defined definition

        Raises:
            NotFoundError: If either side has no definition for the field
        """
        defined = self.host.field_definitions.get_field_storage_definitions(entity_type_id)
        installed = self.host.installed_schema.get_last_installed_field_storage_definitions(
            entity_type_id
        )

        if field_name not in defined or field_name not in installed:
            logger.info(
                "field_definition_missing",
                entity_type_id=entity_type_id,
                field_name=field_name,
                defined=field_name in defined,
                installed=field_name in installed,
            )
            raise NotFoundError(
                "Field is not defined on both sides",
                entity_type_id=entity_type_id,
                field_name=field_name,
            )

        return ComparisonPair(installed=installed[field_name], defined=defined[field_name])

    def build_record(
        self,
        definition: FieldStorageDefinition,
        schema_resolver: SchemaResolver,
        table_mapping: TableMapping,
    ) -> FieldSchemaRecord:
        """Extract the comparable attributes of one field storage definition.

        Args:
            definition: Field storage definition of one side
            schema_resolver: Produces the physical schema for this side
            table_mapping: Table mapping of the entity type

        Returns:
            FieldSchemaRecord
        """
        installed_schema = self.normalize_schema_processing(schema_resolver(definition))

        return FieldSchemaRecord(
            has_custom_storage=definition.has_custom_storage(),
            schema=canonical_order(definition.get_schema()),
            is_revisionable=definition.is_revisionable(),
            allows_shared_table_storage=table_mapping.allows_shared_table_storage(definition),
            requires_dedicated_table_storage=table_mapping.requires_dedicated_table_storage(
                definition
            ),
            installed_schema=installed_schema,
        )

    def normalize_schema_processing(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Strip column properties that should not count as differences.

        ``initial`` and ``initial_from_field`` only seed values while a
        column is added, so they never survive in a stored schema. Mapping
        keys are put in canonical order, since a stored schema and a derived
        one may list the same keys differently.

        Args:
            schema: Dict of {table_name: table_schema}

        Returns:
            A normalized copy; the input is left untouched
        """
        normalized = copy.deepcopy(schema)
        for table_schema in normalized.values():
            for column_schema in (table_schema.get("fields") or {}).values():
                for name in TRANSIENT_COLUMN_PROPERTIES:
                    column_schema.pop(name, None)
        return canonical_order(normalized)

    def compare(
        self, entity_type_id: str, field_name: str
    ) -> tuple[FieldSchemaRecord, FieldSchemaRecord]:
        """Build the installed and defined records of a field.

        Args:
            entity_type_id: Entity type ID
            field_name: Field name

        Returns:
            (installed record, defined record)

        Raises:
            NotFoundError: If the entity type or either field definition is missing
        """
        context = self.resolve_context(entity_type_id)
        pair = self.get_comparison_pair(entity_type_id, field_name)
        table_mapping = context.table_mapping

        before = self.build_record(
            pair.installed, self.host.installed_schema.load_field_schema_data, table_mapping
        )
        after = self.build_record(
            pair.defined, table_mapping.get_schema_from_storage_definition, table_mapping
        )

        logger.info(
            "field_schema_records_built",
            entity_type_id=entity_type_id,
            field_name=field_name,
            identical=before == after,
        )

        return before, after


def canonical_order(value: Any) -> Any:
    """Rebuild every mapping in a schema with its keys sorted.

    Lists keep their order; column order matters in keys and indexes.

    Args:
        value: Schema or any part of one

    Returns:
        A copy whose mappings iterate in sorted key order
    """
    if isinstance(value, dict):
        return {key: canonical_order(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, list | tuple):
        return [canonical_order(item) for item in value]
    return value
