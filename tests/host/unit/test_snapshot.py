"""Snapshot host tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from schema_diff.host.definitions import FieldStorageDefinition
from schema_diff.host.exceptions import DefinitionError, NotFoundError, SnapshotError
from schema_diff.host.snapshot import SnapshotHost


def test_loads_snapshot_file(snapshot_file: Path) -> None:
    host = SnapshotHost.from_file(snapshot_file)

    assert host.source == str(snapshot_file)
    assert host.get_entity_type_ids() == ["node", "user", "comment"]


def test_missing_snapshot_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(SnapshotError, match="not found"):
        SnapshotHost.from_file(tmp_path / "missing.yaml")


def test_empty_snapshot_file_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(SnapshotError, match="Empty snapshot"):
        SnapshotHost.from_file(path)


def test_invalid_yaml_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("entity_types: [unclosed", encoding="utf-8")

    with pytest.raises(SnapshotError, match="not valid YAML"):
        SnapshotHost.from_file(path)


def test_malformed_field_definition_is_a_snapshot_error(snapshot_data: dict[str, Any]) -> None:
    snapshot_data["fields"]["node"]["defined"]["title"] = {"schema": {}}

    with pytest.raises(SnapshotError, match="has no type"):
        SnapshotHost(snapshot_data)


def test_defined_entity_type_defaults_to_installed(snapshot_host: SnapshotHost) -> None:
    assert snapshot_host.get_definition("node") == snapshot_host.get_last_installed_definition(
        "node"
    )


def test_entity_type_only_defined_in_code(snapshot_host: SnapshotHost) -> None:
    assert snapshot_host.get_last_installed_definition("comment") is None
    assert snapshot_host.get_active_definition("comment").label == "Comment"


def test_unknown_entity_type_raises_not_found(snapshot_host: SnapshotHost) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        snapshot_host.get_active_definition("taxonomy_term")

    assert exc_info.value.entity_type_id == "taxonomy_term"
    assert str(exc_info.value) == "Unknown entity type (taxonomy_term)"


def test_active_field_definitions_are_the_installed_ones(snapshot_host: SnapshotHost) -> None:
    active = snapshot_host.get_active_field_storage_definitions("node")

    assert set(active) == {"nid", "title", "path", "legacy"}
    assert active["title"].get_columns()["value"]["length"] == 255


def test_field_schema_data_is_a_copy(snapshot_host: SnapshotHost) -> None:
    title = snapshot_host.get_last_installed_field_storage_definitions("node")["title"]

    schema_data = snapshot_host.load_field_schema_data(title)
    schema_data["node"]["fields"]["title"]["length"] = 1

    assert snapshot_host.load_field_schema_data(title)["node"]["fields"]["title"]["length"] == 255


def test_field_without_stored_schema_has_empty_schema_data(snapshot_host: SnapshotHost) -> None:
    path = snapshot_host.get_last_installed_field_storage_definitions("node")["path"]

    assert snapshot_host.load_field_schema_data(path) == {}


def test_field_schema_fills_in_missing_sections() -> None:
    definition = FieldStorageDefinition(
        name="title",
        entity_type_id="node",
        type="string",
        schema={"indexes": {"value": ["value"]}, "columns": {"value": {"type": "varchar"}}},
    )

    assert list(definition.get_schema()) == ["columns", "unique keys", "indexes", "foreign keys"]
    assert definition.get_schema()["unique keys"] == {}


def test_field_schema_rejects_unknown_sections() -> None:
    definition = FieldStorageDefinition(
        name="title", entity_type_id="node", type="string", schema={"primary key": ["value"]}
    )

    with pytest.raises(DefinitionError, match="unknown schema sections: primary key"):
        definition.get_schema()


def test_stored_table_schema_must_be_a_mapping(snapshot_data: dict[str, Any]) -> None:
    snapshot_data["fields"]["user"]["schema_data"]["name"] = {"users": ["oops"]}

    with pytest.raises(SnapshotError, match="Schema of table 'users' in 'user.name'"):
        SnapshotHost(snapshot_data)


def test_stored_column_schema_must_be_a_mapping(snapshot_data: dict[str, Any]) -> None:
    snapshot_data["fields"]["user"]["schema_data"]["name"]["users"]["fields"]["name"] = "varchar"

    with pytest.raises(SnapshotError, match="Column 'name' of table 'users'"):
        SnapshotHost(snapshot_data)


def test_non_numeric_cardinality_is_a_snapshot_error(snapshot_data: dict[str, Any]) -> None:
    snapshot_data["fields"]["node"]["defined"]["summary"] = {"type": "text", "cardinality": "many"}

    with pytest.raises(SnapshotError, match="invalid cardinality: 'many'"):
        SnapshotHost(snapshot_data)


def test_field_schema_must_be_a_mapping(snapshot_data: dict[str, Any]) -> None:
    snapshot_data["fields"]["node"]["defined"]["summary"] = {"type": "text", "schema": ["value"]}

    with pytest.raises(SnapshotError, match="must be a mapping"):
        SnapshotHost(snapshot_data)
