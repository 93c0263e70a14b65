"""Entity type and field storage definitions as seen by the comparison.

These are read-only snapshots of the host system's metadata. Both the
definitions declared in code and the last-installed definitions use the
same types, so two generations of the same field compare by value.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from schema_diff.host.exceptions import DefinitionError

CARDINALITY_UNLIMITED = -1

# Order in which field schema sections are always presented
SCHEMA_SECTIONS = ("columns", "unique keys", "indexes", "foreign keys")


@dataclass(frozen=True)
class EntityTypeDefinition:
    """Definition of an entity type and its storage tables."""

    id: str
    label: str = ""
    base_table: str | None = None
    data_table: str | None = None
    revision_table: str | None = None
    revision_data_table: str | None = None
    keys: dict[str, str] = field(default_factory=dict)
    revisionable: bool = False
    translatable: bool = False

    def is_revisionable(self) -> bool:
        """Check if the entity type keeps revisions in its own tables."""
        return self.revisionable and bool(self.revision_table)

    def is_translatable(self) -> bool:
        """Check if the entity type stores field values per language."""
        return self.translatable and bool(self.data_table)

    def get_key(self, name: str) -> str | None:
        """Get the field name used for an entity key (id, revision, bundle...)."""
        return self.keys.get(name)

    def get_base_table(self) -> str:
        return self.base_table or self.id

    @classmethod
    def from_dict(cls, entity_type_id: str, data: dict[str, Any]) -> "EntityTypeDefinition":
        """Build a definition from its snapshot representation.

        Args:
            entity_type_id: Entity type ID
            data: Mapping read from a snapshot file

        Returns:
            EntityTypeDefinition
        """
        if not isinstance(data, dict):
            raise DefinitionError(
                f"Entity type '{entity_type_id}' must be a mapping, got {type(data).__name__}"
            )

        return cls(
            id=entity_type_id,
            label=data.get("label", entity_type_id),
            base_table=data.get("base_table"),
            data_table=data.get("data_table"),
            revision_table=data.get("revision_table"),
            revision_data_table=data.get("revision_data_table"),
            keys=dict(data.get("keys") or {}),
            revisionable=bool(data.get("revisionable", False)),
            translatable=bool(data.get("translatable", False)),
        )


@dataclass(frozen=True)
class FieldStorageDefinition:
    """Storage shape of one field of an entity type.

    ``schema`` holds the field type's declared columns plus optional
    indexes, unique keys and foreign keys, exactly as the field type
    provides them.
    """

    name: str
    entity_type_id: str
    type: str
    provider: str = "core"
    cardinality: int = 1
    revisionable: bool = False
    translatable: bool = False
    custom_storage: bool = False
    base_field: bool = True
    deleted: bool = False
    schema: dict[str, Any] = field(default_factory=dict)

    def has_custom_storage(self) -> bool:
        return self.custom_storage

    def is_revisionable(self) -> bool:
        return self.revisionable

    def is_translatable(self) -> bool:
        return self.translatable

    def is_base_field(self) -> bool:
        return self.base_field

    def is_deleted(self) -> bool:
        return self.deleted

    def is_multiple(self) -> bool:
        """Check if the field may hold more than one value."""
        return self.cardinality == CARDINALITY_UNLIMITED or self.cardinality > 1

    def get_columns(self) -> dict[str, Any]:
        return self.get_schema()["columns"]

    def get_schema(self) -> dict[str, Any]:
        """Get the field schema with every section present.

        Missing sections are filled in as empty mappings and the sections
        are always returned in the same order, so two generations of the
        same field produce structurally identical schemas. A copy is
        returned; callers may modify it freely.

        Returns:
            Dict with columns, unique keys, indexes and foreign keys
        """
        schema = copy.deepcopy(self.schema)
        unknown = set(schema) - set(SCHEMA_SECTIONS)
        if unknown:
            raise DefinitionError(
                f"Field '{self.entity_type_id}.{self.name}' has unknown schema "
                f"sections: {', '.join(sorted(unknown))}"
            )
        return {section: schema.get(section) or {} for section in SCHEMA_SECTIONS}

    @classmethod
    def from_dict(
        cls, entity_type_id: str, name: str, data: dict[str, Any]
    ) -> "FieldStorageDefinition":
        """Build a field storage definition from its snapshot representation.

        Args:
            entity_type_id: Entity type the field belongs to
            name: Field name
            data: Mapping read from a snapshot file

        Returns:
            FieldStorageDefinition
        """
        if not isinstance(data, dict):
            raise DefinitionError(
                f"Field '{entity_type_id}.{name}' must be a mapping, got {type(data).__name__}"
            )
        if "type" not in data:
            raise DefinitionError(f"Field '{entity_type_id}.{name}' has no type")
        try:
            cardinality = int(data.get("cardinality", 1))
        except (TypeError, ValueError) as e:
            raise DefinitionError(
                f"Field '{entity_type_id}.{name}' has invalid cardinality: "
                f"{data['cardinality']!r}"
            ) from e
        if not isinstance(data.get("schema") or {}, dict):
            raise DefinitionError(f"Schema of field '{entity_type_id}.{name}' must be a mapping")

        return cls(
            name=name,
            entity_type_id=entity_type_id,
            type=data["type"],
            provider=data.get("provider", "core"),
            cardinality=cardinality,
            revisionable=bool(data.get("revisionable", False)),
            translatable=bool(data.get("translatable", False)),
            custom_storage=bool(data.get("custom_storage", False)),
            base_field=bool(data.get("base_field", True)),
            deleted=bool(data.get("deleted", False)),
            schema=dict(data.get("schema") or {}),
        )
