"""Tests for the apply CLI command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from ctrctl.cli import cli


def _write(path: Path, payload: Any) -> str:
    path.write_text(json.dumps(payload))
    return str(path)


class TestApplyCommand:
    def test_add_edit_delete(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(
            tmp_path / "ops.json",
            [
                {"op": "add", "number": "MSCU1234565", "isoCode": "22G1"},
                {"op": "edit", "target": "MSCU1234565", "isoCode": "45R1"},
                {"op": "delete", "target": "TCNU1234567"},
            ],
        )
        result = cli_runner.invoke(cli, ["--json", "apply", script])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["applied"] == 3
        assert [(i["number"], i["isoCode"]) for i in data["items"]] == [
            ("GESU9876543", "45G1"),
            ("MSCU1234565", "45R1"),
        ]

    def test_rich_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(tmp_path / "ops.json", [{"op": "add", "number": "A1", "isoCode": "22G1"}])
        result = cli_runner.invoke(cli, ["apply", script])
        assert result.exit_code == 0
        assert "applied: 1" in result.stdout
        assert "A1" in result.stdout

    def test_stdin(self, cli_runner: CliRunner) -> None:
        ops = json.dumps([{"op": "add", "number": "A1", "isoCode": "22G1"}])
        result = cli_runner.invoke(cli, ["-q", "apply", "-"], input=ops)
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["TCNU1234567", "GESU9876543", "A1"]

    def test_failure_stops(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(
            tmp_path / "ops.json",
            [
                {"op": "add", "number": "TCNU1234567", "isoCode": "22G1"},
                {"op": "add", "number": "A2", "isoCode": "22G1"},
            ],
        )
        result = cli_runner.invoke(cli, ["--json", "apply", script])
        assert result.exit_code == 1
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "BATCH_FAILED"
        assert len(data["error"]["detail"]["results"]) == 1

    def test_keep_going(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(
            tmp_path / "ops.json",
            [
                {"op": "add", "number": "", "isoCode": "22G1"},
                {"op": "add", "number": "A2", "isoCode": "22G1"},
            ],
        )
        result = cli_runner.invoke(cli, ["--json", "apply", script, "--keep-going"])
        assert result.exit_code == 1
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "BATCH_PARTIAL"
        assert data["data"]["applied"] == 1
        assert data["data"]["items"][-1]["number"] == "A2"

    def test_bracketed_number_in_error(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        add = {"op": "add", "number": "[/x]", "isoCode": "22G1"}
        script = _write(tmp_path / "ops.json", [add, add])
        result = cli_runner.invoke(cli, ["apply", script])
        assert result.exit_code == 1
        assert "Container number already exists: [/x]" in result.stderr

    def test_non_object_entry(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(tmp_path / "ops.json", ["add"])
        result = cli_runner.invoke(cli, ["--json", "apply", script])
        assert result.exit_code == 1
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "BATCH_FAILED"
        assert "must be an object" in data["error"]["message"]

    def test_invalid_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "ops.json"
        bad.write_text("{not json")
        result = cli_runner.invoke(cli, ["--json", "apply", str(bad)])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_FORMAT"

    def test_not_an_array(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write(tmp_path / "ops.json", {"op": "add"})
        result = cli_runner.invoke(cli, ["apply", script])
        assert result.exit_code == 1
        assert "Expected a JSON array" in result.stderr

    def test_missing_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["apply", "nope.json"])
        assert result.exit_code == 2


class TestApplyWithRecords:
    def test_imports_then_applies(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        records = _write(
            tmp_path / "records.json",
            [
                {"number": "A1", "isoCode": "22G1", "createdAt": "2024-05-01T09:30:00+00:00"},
                {"number": "A2", "isoCode": "45G1", "createdAt": "2024-05-01T09:31:00+00:00"},
            ],
        )
        script = _write(tmp_path / "ops.json", [{"op": "delete", "target": "A1"}])
        result = cli_runner.invoke(cli, ["-q", "apply", script, "--records", records])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["TCNU1234567", "GESU9876543", "A2"]

    def test_bad_records_abort_before_script(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        records = _write(tmp_path / "records.json", [{"number": "A1"}])
        script = _write(tmp_path / "ops.json", [{"op": "add", "number": "B1", "isoCode": "22G1"}])
        result = cli_runner.invoke(cli, ["--json", "apply", script, "--records", records])
        assert result.exit_code == 1
        data = json.loads(result.stderr)
        assert data["op"] == "import_records"
        assert data["error"]["code"] == "INVALID_FORMAT"

    def test_export_round_trip(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        exported = cli_runner.invoke(cli, ["export"])
        assert exported.exit_code == 0
        (tmp_path / "ctrctl.toml").write_text("[registry]\nseed = []\n")
        records = tmp_path / "records.json"
        records.write_text(exported.stdout)
        script = _write(tmp_path / "ops.json", [])
        result = cli_runner.invoke(cli, ["--json", "apply", script, "--records", str(records)])
        assert result.exit_code == 0
        items = json.loads(result.stdout)["data"]["items"]
        assert [(i["number"], i["createdAt"]) for i in items] == [
            (r["number"], r["createdAt"]) for r in json.loads(exported.stdout)
        ]
