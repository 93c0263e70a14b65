"""CLI command tests."""

from __future__ import annotations

import json
from pathlib import Path

from schema_diff import __version__
from schema_diff.cli.main import main


def test_version(capsys) -> None:
    exit_code = main(["--version"])

    assert exit_code == 0
    assert __version__ in capsys.readouterr().out


def test_field_diff_json_output(capsys, snapshot_file: Path) -> None:
    exit_code = main(
        ["--snapshot", str(snapshot_file), "field-diff", "node", "title", "--format", "json"]
    )
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["title"] == "View difference"
    assert payload["attached"] == ["system/diff"]
    assert payload["has_changes"] is True
    assert payload["table"]["header"][0] == {"data": "Installed", "colspan": 2}
    assert payload["table"]["rows"][-1][0]["data"] == payload["before"]
    assert payload["table"]["rows"][-1][1]["data"] == payload["after"]


def test_field_diff_full_shows_every_line(capsys, snapshot_file: Path) -> None:
    exit_code = main(
        [
            "--snapshot",
            str(snapshot_file),
            "field-diff",
            "node",
            "title",
            "--format",
            "json",
            "--full",
        ]
    )
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert len(payload["table"]["rows"]) == payload["before"].count("\n") + 2


def test_field_diff_table_output(capsys, snapshot_file: Path) -> None:
    exit_code = main(["--snapshot", str(snapshot_file), "field-diff", "node", "title"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "View difference" in output
    assert "length: 512" in output


def test_field_diff_saves_report(capsys, snapshot_file: Path, tmp_path: Path) -> None:
    report = tmp_path / "title.txt"

    exit_code = main(
        ["--snapshot", str(snapshot_file), "field-diff", "node", "title", "-o", str(report)]
    )

    assert exit_code == 0
    assert "Report saved" in capsys.readouterr().out
    assert "+         length: 512" in report.read_text()


def test_fail_on_diff(snapshot_file: Path) -> None:
    args = ["--snapshot", str(snapshot_file), "field-diff", "--format", "text", "--fail-on-diff"]

    assert main([*args[:3], "node", "title", *args[3:]]) == 1
    assert main([*args[:3], "user", "name", *args[3:]]) == 0


def test_field_defined_on_one_side_only_is_not_found(capsys, snapshot_file: Path) -> None:
    exit_code = main(["--snapshot", str(snapshot_file), "field-diff", "node", "summary"])
    captured = capsys.readouterr()

    assert exit_code == 3
    assert "Not Found: Field is not defined on both sides (node.summary)" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_entity_type_is_not_found(snapshot_file: Path) -> None:
    assert main(["--snapshot", str(snapshot_file), "field-diff", "taxonomy_term", "name"]) == 3


def test_missing_snapshot_returns_snapshot_error(capsys, tmp_path: Path) -> None:
    exit_code = main(["--snapshot", str(tmp_path / "none.yaml"), "field-diff", "node", "title"])

    assert exit_code == 4
    assert "Snapshot Error" in capsys.readouterr().err


def test_invalid_configuration_returns_configuration_error(
    capsys, snapshot_file: Path, tmp_path: Path
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("diff:\n  leading_context_lines: -5\n", encoding="utf-8")

    exit_code = main(
        ["--config", str(config_path), "--snapshot", str(snapshot_file), "check"]
    )

    assert exit_code == 2
    assert "Configuration Error" in capsys.readouterr().err


def test_check_lists_pending_changes(capsys, snapshot_file: Path) -> None:
    exit_code = main(["--snapshot", str(snapshot_file), "check", "--format", "json"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["severity"] == "ERROR"
    assert [entry["entity_type_id"] for entry in payload["entity_types"]] == ["node", "comment"]


def test_check_strict(snapshot_file: Path, up_to_date_file: Path) -> None:
    assert main(["--snapshot", str(snapshot_file), "check", "--strict", "--format", "text"]) == 1
    assert main(["--snapshot", str(up_to_date_file), "check", "--strict", "--format", "text"]) == 0


def test_check_table_output(capsys, up_to_date_file: Path) -> None:
    exit_code = main(["--snapshot", str(up_to_date_file), "check"])

    assert exit_code == 0
    assert "Up to date" in capsys.readouterr().out


def test_config_validate(capsys, snapshot_file: Path) -> None:
    exit_code = main(["--snapshot", str(snapshot_file), "config", "validate"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Snapshot loaded: 3 entity types" in output
    assert "Configuration is valid" in output


def test_config_validate_rejects_snapshot_without_entity_types(
    capsys, tmp_path: Path
) -> None:
    snapshot = tmp_path / "snapshot.yaml"
    snapshot.write_text("entity_types: {}\nfields: {}\n", encoding="utf-8")

    assert main(["--snapshot", str(snapshot), "config", "validate"]) == 2
    assert "Snapshot contains no entity types" in capsys.readouterr().err


def test_config_init_writes_defaults(tmp_path: Path) -> None:
    output = tmp_path / "config.yaml"

    assert main(["config", "init", "--output", str(output)]) == 0
    assert "leading_context_lines: 2" in output.read_text()


def test_logging_section_of_configuration_is_applied(
    snapshot_file: Path, tmp_path: Path
) -> None:
    log_file = tmp_path / "logs" / "schema-diff.log"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"logging:\n  level: ERROR\n  file_level: INFO\n  file: {log_file}\n", encoding="utf-8"
    )

    exit_code = main(["--config", str(config_path), "--snapshot", str(snapshot_file), "check"])

    assert exit_code == 0
    assert "change_list_computed" in log_file.read_text()


def test_log_file_option_overrides_configuration(snapshot_file: Path, tmp_path: Path) -> None:
    configured = tmp_path / "configured.log"
    given = tmp_path / "given.log"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"logging:\n  file: {configured}\n", encoding="utf-8")

    exit_code = main(
        [
            "--config",
            str(config_path),
            "--snapshot",
            str(snapshot_file),
            "--log-file",
            str(given),
            "check",
        ]
    )

    assert exit_code == 0
    assert given.exists()
    assert not configured.exists()


def test_malformed_stored_schema_returns_snapshot_error(capsys, tmp_path: Path) -> None:
    snapshot = tmp_path / "snapshot.yaml"
    snapshot.write_text(
        "entity_types:\n"
        "  user: {installed: {base_table: users}}\n"
        "fields:\n"
        "  user:\n"
        "    installed: {name: {type: string}}\n"
        "    schema_data: {name: {users: [oops]}}\n",
        encoding="utf-8",
    )

    exit_code = main(["--snapshot", str(snapshot), "field-diff", "user", "name"])

    assert exit_code == 4
    assert "Snapshot Error" in capsys.readouterr().err


def test_relative_report_path_is_saved_under_report_dir(
    snapshot_file: Path, tmp_path: Path
) -> None:
    report_dir = tmp_path / "reports"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"paths:\n  report_dir: {report_dir}\n", encoding="utf-8")

    exit_code = main(
        [
            "--config",
            str(config_path),
            "--snapshot",
            str(snapshot_file),
            "field-diff",
            "node",
            "title",
            "--format",
            "text",
            "-o",
            "node/title.txt",
        ]
    )

    assert exit_code == 0
    assert "length: 512" in (report_dir / "node" / "title.txt").read_text()
