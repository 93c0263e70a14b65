"""Shared fixtures: a small host snapshot with one field of every change kind."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml
from schema_diff.host.interfaces import HostServices
from schema_diff.host.snapshot import SnapshotHost

NODE_TYPE: dict[str, Any] = {
    "label": "Content",
    "base_table": "node",
    "revision_table": "node_revision",
    "revisionable": True,
    "keys": {"id": "nid", "revision": "vid", "bundle": "type"},
}

USER_TYPE: dict[str, Any] = {
    "label": "User",
    "base_table": "users",
    "keys": {"id": "uid"},
}


def _title(length: int) -> dict[str, Any]:
    return {
        "type": "string",
        "revisionable": True,
        "schema": {"columns": {"value": {"type": "varchar", "length": length}}},
    }


def _stored_title(length: int) -> dict[str, Any]:
    column = {"type": "varchar", "length": length, "not null": False}
    return {
        "node": {"fields": {"title": dict(column)}},
        "node_revision": {"fields": {"title": dict(column)}},
    }


NID = {"type": "integer", "schema": {"columns": {"value": {"type": "int", "unsigned": True}}}}

PATH = {"type": "path", "custom_storage": True, "schema": {"columns": {"alias": {"type": "varchar"}}}}

USER_NAME = {
    "type": "string",
    "schema": {"columns": {"value": {"type": "varchar", "length": 60}}},
}

SNAPSHOT: dict[str, Any] = {
    "entity_types": {
        "node": {"installed": NODE_TYPE},
        "user": {"installed": USER_TYPE},
        "comment": {"defined": {"label": "Comment", "base_table": "comment"}},
    },
    "fields": {
        "node": {
            "installed": {
                "nid": NID,
                "title": _title(255),
                "path": PATH,
                "legacy": {"type": "string"},
            },
            "defined": {
                "nid": NID,
                "title": _title(512),
                "path": PATH,
                "summary": {"type": "text"},
            },
            "schema_data": {
                "nid": {
                    "node": {
                        "fields": {"nid": {"type": "serial", "unsigned": True, "not null": True}}
                    },
                    "node_revision": {
                        "fields": {"nid": {"type": "int", "unsigned": True, "not null": True}}
                    },
                },
                "title": _stored_title(255),
            },
        },
        "user": {
            "installed": {"name": USER_NAME},
            "defined": {"name": USER_NAME},
            "schema_data": {
                "name": {
                    "users": {
                        "fields": {
                            "name": {
                                "type": "varchar",
                                "length": 60,
                                "not null": False,
                                "initial": "",
                            }
                        }
                    }
                }
            },
        },
    },
}


@pytest.fixture
def snapshot_data() -> dict[str, Any]:
    return copy.deepcopy(SNAPSHOT)


@pytest.fixture
def up_to_date_data() -> dict[str, Any]:
    data = copy.deepcopy(SNAPSHOT)
    del data["entity_types"]["node"]
    del data["entity_types"]["comment"]
    del data["fields"]["node"]
    return data


@pytest.fixture
def snapshot_host(snapshot_data: dict[str, Any]) -> SnapshotHost:
    return SnapshotHost(snapshot_data, source="fixture")


@pytest.fixture
def host_services(snapshot_host: SnapshotHost) -> HostServices:
    return snapshot_host.services()


@pytest.fixture
def snapshot_file(tmp_path: Path, snapshot_data: dict[str, Any]) -> Path:
    path = tmp_path / "snapshot.yaml"
    path.write_text(yaml.safe_dump(snapshot_data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def up_to_date_file(tmp_path: Path, up_to_date_data: dict[str, Any]) -> Path:
    path = tmp_path / "up_to_date.yaml"
    path.write_text(yaml.safe_dump(up_to_date_data, sort_keys=False), encoding="utf-8")
    return path
