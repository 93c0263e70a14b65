"""SQL table mapping tests."""

from __future__ import annotations

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition
from schema_diff.host.table_mapping import MAX_TABLE_NAME_LENGTH, SqlTableMapping

NODE = EntityTypeDefinition(
    id="node",
    label="Content",
    base_table="node",
    revision_table="node_revision",
    revisionable=True,
    keys={"id": "nid", "revision": "vid", "bundle": "type"},
)


def _field(name: str, columns: dict, **kwargs) -> FieldStorageDefinition:
    schema = {"columns": columns, **kwargs.pop("schema", {})}
    return FieldStorageDefinition(
        name=name, entity_type_id="node", type=kwargs.pop("type", "string"), schema=schema, **kwargs
    )


def _mapping(*fields: FieldStorageDefinition) -> SqlTableMapping:
    return SqlTableMapping(NODE, {definition.name: definition for definition in fields})


def test_single_valued_base_field_uses_shared_tables() -> None:
    title = _field("title", {"value": {"type": "varchar"}})
    mapping = _mapping(title)

    assert mapping.allows_shared_table_storage(title)
    assert not mapping.requires_dedicated_table_storage(title)


def test_multiple_or_configurable_fields_need_dedicated_tables() -> None:
    tags = _field("tags", {"target_id": {"type": "int"}}, cardinality=-1)
    body = _field("body", {"value": {"type": "text"}}, base_field=False)
    mapping = _mapping(tags, body)

    for definition in (tags, body):
        assert not mapping.allows_shared_table_storage(definition)
        assert mapping.requires_dedicated_table_storage(definition)


def test_custom_storage_field_has_no_tables() -> None:
    path = _field("path", {"alias": {"type": "varchar"}}, custom_storage=True)
    mapping = _mapping(path)

    assert not mapping.allows_shared_table_storage(path)
    assert not mapping.requires_dedicated_table_storage(path)
    assert mapping.get_schema_from_storage_definition(path) == {}


def test_column_names_follow_storage_kind() -> None:
    title = _field("title", {"value": {"type": "varchar"}})
    link = _field("link", {"uri": {"type": "varchar"}, "title": {"type": "varchar"}})
    tags = _field("tags", {"target_id": {"type": "int"}}, cardinality=-1)
    mapping = _mapping(title, link, tags)

    assert mapping.get_column_names(title) == {"value": "title"}
    assert mapping.get_column_names(link) == {"uri": "link__uri", "title": "link__title"}
    assert mapping.get_column_names(tags) == {"target_id": "tags_target_id"}


def test_revisionable_shared_field_is_stored_in_base_and_revision_tables() -> None:
    title = _field("title", {"value": {"type": "varchar", "length": 255}}, revisionable=True)
    schema = _mapping(title).get_schema_from_storage_definition(title)

    assert list(schema) == ["node", "node_revision"]
    assert schema["node"]["fields"]["title"] == {
        "type": "varchar",
        "length": 255,
        "not null": False,
    }


def test_non_revisionable_field_stays_out_of_revision_table() -> None:
    status = _field("promote", {"value": {"type": "int"}})
    schema = _mapping(status).get_schema_from_storage_definition(status)

    assert list(schema) == ["node"]


def test_entity_id_column_becomes_serial_in_base_table_only() -> None:
    nid = _field("nid", {"value": {"type": "int", "unsigned": True, "default": 0}}, type="integer")
    schema = _mapping(nid).get_schema_from_storage_definition(nid)

    assert schema["node"]["fields"]["nid"] == {
        "type": "serial",
        "unsigned": True,
        "not null": True,
    }
    assert schema["node_revision"]["fields"]["nid"]["type"] == "int"
    assert schema["node_revision"]["fields"]["nid"]["not null"] is True


def test_shared_indexes_are_prefixed_with_entity_and_field() -> None:
    owner = _field(
        "owner",
        {"target_id": {"type": "int"}},
        schema={
            "indexes": {"target_id": ["target_id"]},
            "foreign keys": {"target": {"table": "users", "columns": {"target_id": "uid"}}},
        },
    )
    schema = _mapping(owner).get_schema_from_storage_definition(owner)["node"]

    assert schema["indexes"] == {"node_field__owner__target_id": ["owner"]}
    assert schema["foreign keys"] == {
        "node_field__owner__target": {"table": "users", "columns": {"owner": "uid"}}
    }


def test_dedicated_tables_hold_entity_columns_and_field_indexes() -> None:
    tags = _field(
        "tags",
        {"target_id": {"type": "int", "unsigned": True}},
        cardinality=-1,
        schema={"indexes": {"target_id": [["target_id", 10]]}},
    )
    nid = _field("nid", {"value": {"type": "int"}}, type="integer")
    schema = _mapping(tags, nid).get_schema_from_storage_definition(tags)

    data_table = schema["node__tags"]
    revision_table = schema["node_revision__tags"]

    assert list(data_table["fields"]) == [
        "bundle",
        "deleted",
        "entity_id",
        "revision_id",
        "langcode",
        "delta",
        "tags_target_id",
    ]
    assert data_table["fields"]["entity_id"] == {"type": "int", "unsigned": True, "not null": True}
    assert data_table["primary key"] == ["entity_id", "deleted", "delta", "langcode"]
    assert data_table["indexes"] == {
        "bundle": ["bundle"],
        "revision_id": ["revision_id"],
        "tags_target_id": [["tags_target_id", 10]],
    }
    assert revision_table["primary key"] == [
        "entity_id",
        "revision_id",
        "deleted",
        "delta",
        "langcode",
    ]
    assert "revision_id" not in revision_table["indexes"]


def test_string_entity_ids_give_varchar_reference_columns() -> None:
    tags = _field("tags", {"target_id": {"type": "int"}}, cardinality=-1)
    nid = _field("nid", {"value": {"type": "varchar"}}, type="string")
    schema = _mapping(tags, nid).get_dedicated_table_schema(tags)

    assert schema["node__tags"]["fields"]["entity_id"]["type"] == "varchar_ascii"


def test_long_dedicated_table_names_are_hashed() -> None:
    name = "field_with_a_remarkably_long_machine_name_indeed"
    long_field = _field(name, {"value": {"type": "varchar"}}, cardinality=-1)
    mapping = _mapping(long_field)

    data_table = mapping.get_dedicated_data_table_name(long_field)
    revision_table = mapping.get_dedicated_revision_table_name(long_field)

    assert len(data_table) <= MAX_TABLE_NAME_LENGTH
    assert data_table.startswith("node__")
    assert revision_table.startswith("node_r__")
    assert data_table != revision_table


def test_deleted_field_tables_use_deleted_prefix() -> None:
    old = _field("old", {"value": {"type": "varchar"}}, cardinality=-1, deleted=True)
    mapping = _mapping(old)

    assert mapping.get_dedicated_data_table_name(old).startswith("field_deleted_data_")
    assert mapping.get_dedicated_revision_table_name(old).startswith("field_deleted_revision_")
