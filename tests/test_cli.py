"""End-to-end smoke tests for the Typer-based licensemap CLI."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from licensemap.cli.common import parse_override
from licensemap.cli.main import app
from licensemap.entities import KnowledgeSource
from licensemap.repository import JsonDirectorySourceRepository
from main import main as cli_main


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_env(tmp_path: Path) -> dict[str, str]:
    return {
        "LICENSEMAP_SETTINGS__PATHS__OUTPUT_DIR": str(tmp_path / "output"),
        "LICENSEMAP_SETTINGS__PATHS__LOGS_DIR": str(tmp_path / "logs"),
        "LICENSEMAP_SETTINGS__PATHS__SOURCES_DIR": str(tmp_path / "sources"),
    }


@pytest.fixture()
def sources_dir(tmp_path: Path, enterprise_doc: KnowledgeSource, business_doc: KnowledgeSource) -> Path:
    store = JsonDirectorySourceRepository(tmp_path / "sources")
    store.add(enterprise_doc)
    store.add(business_doc)
    return tmp_path / "sources"


def test_parse_override_builds_nested_mapping() -> None:
    assert parse_override("policies.merge.missing_status=Unavailable") == {
        "policies": {"merge": {"missing_status": "Unavailable"}}
    }
    assert parse_override("create_dirs=true") == {"create_dirs": True}


def test_sources_list(runner: CliRunner, cli_env: dict[str, str], sources_dir: Path) -> None:
    result = runner.invoke(app, ["sources", "list"], env=cli_env)
    assert result.exit_code == 0, result.output
    assert "EnterpriseDoc" in result.output
    assert "BusinessDoc" in result.output

    filtered = runner.invoke(app, ["sources", "list", "--track", "business"], env=cli_env)
    assert filtered.exit_code == 0, filtered.output
    assert "BusinessDoc" in filtered.output
    assert "EnterpriseDoc" not in filtered.output


def test_compare_renders_and_exports(
    runner: CliRunner, cli_env: dict[str, str], sources_dir: Path, tmp_path: Path
) -> None:
    export_path = tmp_path / "matrix.csv"
    result = runner.invoke(
        app,
        [
            "compare",
            "--select",
            "ent:E3",
            "--select",
            "biz:Premium",
            "--query",
            "defender",
            "--export",
            str(export_path),
        ],
        env=cli_env,
    )
    assert result.exit_code == 0, result.output
    assert "Defender" in result.output
    assert "1 features in 1 categories." in result.output

    with export_path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert rows[0]["EnterpriseDoc - E3"] == "Partial"


def test_compare_with_sources_dir_option(runner: CliRunner, tmp_path: Path, sources_dir: Path) -> None:
    env = {"LICENSEMAP_SETTINGS__PATHS__LOGS_DIR": str(tmp_path / "logs")}
    export_path = tmp_path / "matrix.json"
    result = runner.invoke(
        app,
        [
            "--sources-dir",
            str(sources_dir),
            "compare",
            "-s",
            "ent:E3",
            "-s",
            "ent:E5",
            "--diff-only",
            "--detail",
            "availability",
            "--export",
            str(export_path),
            "--format",
            "json",
        ],
        env=env,
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(export_path.read_text(encoding="utf-8"))
    assert [row["Feature"] for row in payload["rows"]] == ["Microsoft Defender", "Entra ID Plan 2"]


def test_compare_unresolvable_selection(runner: CliRunner, cli_env: dict[str, str], sources_dir: Path) -> None:
    result = runner.invoke(app, ["compare", "--select", "missing:E3"], env=cli_env)
    assert result.exit_code == 0, result.output
    assert "Nothing to compare" in result.output


def test_compare_rejects_malformed_selection(
    runner: CliRunner, cli_env: dict[str, str], sources_dir: Path
) -> None:
    result = runner.invoke(app, ["compare", "--select", "no-tier"], env=cli_env)
    assert result.exit_code != 0


def test_cli_errors_exit_with_code_two(
    cli_env: dict[str, str], sources_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    for key, value in cli_env.items():
        monkeypatch.setenv(key, value)
    assert cli_main(["compare", "--select", "no-tier"]) == 2
    output = capsys.readouterr().out
    assert "Error:" in output
    assert "Traceback" not in output


def test_set_link_and_delete(runner: CliRunner, cli_env: dict[str, str], sources_dir: Path) -> None:
    result = runner.invoke(
        app,
        [
            "sources",
            "set-link",
            "biz",
            "--category",
            "Device Management",
            "--feature",
            "Intune",
            "--link",
            "https://example.com/intune",
        ],
        env=cli_env,
    )
    assert result.exit_code == 0, result.output
    stored = JsonDirectorySourceRepository(sources_dir).get("biz")
    assert stored.data.find_feature("Device Management", "Intune").link == "https://example.com/intune"

    deleted = runner.invoke(app, ["sources", "delete", "biz", "--yes"], env=cli_env)
    assert deleted.exit_code == 0, deleted.output
    assert JsonDirectorySourceRepository(sources_dir).get("biz") is None


def test_config_command(runner: CliRunner, cli_env: dict[str, str]) -> None:
    result = runner.invoke(app, ["config"], env=cli_env)
    assert result.exit_code == 0, result.output
    assert "missing_status" in result.output
