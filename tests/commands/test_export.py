"""Tests for the export CLI command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from ctrctl.cli import cli
from ctrctl.domain.records import ContainerRecord


class TestExportCommand:
    def test_prints_record_array(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["export"])
        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [r["number"] for r in records] == ["TCNU1234567", "GESU9876543"]
        assert all(set(r) == {"number", "isoCode", "createdAt"} for r in records)
        parsed = [ContainerRecord.from_dict(r) for r in records]
        assert parsed[0].created_at < parsed[1].created_at

    def test_json_envelope(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "export"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["op"] == "export_containers"
        assert data["data"]["count"] == 2
