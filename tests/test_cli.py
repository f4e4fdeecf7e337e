"""Tests for the command implementations and the click entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from assetmin.cli import cli
from assetmin.commands.ledger_cmd import run_history, run_ledger
from assetmin.commands.minify_cmd import run_minify
from assetmin.config import MinifierConfig
from assetmin.models import AssetKind, CompactionRequest


def test_minify_dry_run_writes_nothing(config: MinifierConfig, capsys):
    (config.input_dir(AssetKind.JS) / "app.js").write_text("var a = 1;\n", encoding="utf-8")

    exit_code = run_minify(config, CompactionRequest(AssetKind.JS), dry_run=True)

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Publish Plan (js)" in out
    assert "app.js" in out
    assert "no previous entry" in out
    assert list(config.output_dir(AssetKind.JS).iterdir()) == []
    assert not config.ledger_path.exists()


def test_minify_failure_exit_code(config: MinifierConfig, capsys):
    request = CompactionRequest(AssetKind.CSS)

    assert run_minify(config, request) == 0
    assert run_minify(config, request, strict=True) == 1
    assert run_minify(config, request, strict=True, dry_run=True) == 1
    assert "No input file given to minify" in capsys.readouterr().out


def test_minify_reports_artifact_path(config: MinifierConfig, capsys):
    (config.input_dir(AssetKind.CSS) / "a.css").write_text("a { b: c }", encoding="utf-8")

    assert run_minify(config, CompactionRequest(AssetKind.CSS, append_version=False)) == 0

    out = capsys.readouterr().out
    assert "CSS Minification: Successfully Done!!" in out
    assert "main.css" in out


def test_minify_quiet(config: MinifierConfig, capsys):
    (config.input_dir(AssetKind.CSS) / "a.css").write_text("a { b: c }", encoding="utf-8")

    assert run_minify(config, CompactionRequest(AssetKind.CSS), verbose=False) == 0
    assert capsys.readouterr().out == ""


def test_ledger_json(config: MinifierConfig, capsys):
    (config.output_dir(AssetKind.JS) / "main-2000.js").write_text("x", encoding="utf-8")
    config.ledger_path.write_text("MAIN_JS=2000\nSITE_CSS=10\nNOTES=1\n", encoding="utf-8")

    assert run_ledger(config, output_json=True) == 0

    rows = json.loads(capsys.readouterr().out)
    assert rows == [
        {"key": "MAIN_JS", "stamp": "2000", "artifact": "main-2000.js", "present": True},
        {"key": "SITE_CSS", "stamp": "10", "artifact": "site-10.css", "present": False},
        {"key": "NOTES", "stamp": "1", "artifact": None, "present": False},
    ]


def test_ledger_table(config: MinifierConfig, capsys):
    config.ledger_path.write_text("MAIN_CSS=10\n", encoding="utf-8")

    assert run_ledger(config) == 0

    out = capsys.readouterr().out
    assert "MAIN_CSS" in out
    assert "main-10.css" in out
    assert "missing" in out


def test_ledger_missing(config: MinifierConfig, capsys):
    assert run_ledger(config) == 1
    assert "Ledger not found" in capsys.readouterr().out


def test_history(config: MinifierConfig, capsys):
    assert run_history(config.audit_log_path) == 0
    assert "No publishes recorded yet." in capsys.readouterr().out

    (config.input_dir(AssetKind.CSS) / "a.css").write_text("a { b: c }", encoding="utf-8")
    run_minify(config, CompactionRequest(AssetKind.CSS), verbose=False)
    run_minify(config, CompactionRequest(AssetKind.CSS, output_name="site"), verbose=False)

    assert run_history(config.audit_log_path) == 2
    assert run_history(config.audit_log_path, last_n=1) == 1
    out = capsys.readouterr().out
    assert "publish-css" in out
    assert "+ main-" in out
    assert "+ site-" in out


def _project(tmp_path: Path) -> Path:
    config_path = tmp_path / "assetmin.toml"
    config_path.write_text('[assetmin]\nbase_dir = "assets"\n', encoding="utf-8")
    js_dir = tmp_path / "assets" / "js"
    js_dir.mkdir(parents=True)
    (js_dir / "app.js").write_text("function f() {\n  return 1;\n}\n", encoding="utf-8")
    return config_path


def test_cli_minify(tmp_path: Path):
    config_path = _project(tmp_path)

    result = CliRunner().invoke(cli, ["--config", str(config_path), "minify", "--type", "JS"])

    assert result.exit_code == 0, result.output
    artifacts = list((tmp_path / "assets" / "livejs").glob("main-*.js"))
    assert len(artifacts) == 1
    assert artifacts[0].read_text(encoding="utf-8") == "function\nf(){return 1;}"
    stamp = artifacts[0].stem.split("-", 1)[1]
    assert (tmp_path / "etc" / "timestamp").read_text(encoding="utf-8") == f"MAIN_JS={stamp}\n"


def test_cli_minify_strict_failure(tmp_path: Path):
    config_path = _project(tmp_path)
    args = ["--config", str(config_path), "minify", "-t", "css"]

    assert CliRunner().invoke(cli, args).exit_code == 0
    assert CliRunner().invoke(cli, args + ["--strict"]).exit_code == 1


def test_cli_rejects_unknown_type(tmp_path: Path):
    config_path = _project(tmp_path)

    result = CliRunner().invoke(cli, ["--config", str(config_path), "minify", "-t", "sass"])

    assert result.exit_code == 2


def test_cli_bad_config(tmp_path: Path):
    config_path = tmp_path / "assetmin.toml"
    config_path.write_text("[assetmin]\nverbose = 1\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(config_path), "ledger"])

    assert result.exit_code == 1
    assert "verbose must be true or false" in result.output


def test_ledger_unreadable(config: MinifierConfig, capsys):
    config.ledger_path.mkdir()

    assert run_ledger(config) == 1
    assert "Ledger not readable" in capsys.readouterr().out


def test_minify_dry_run_with_unreadable_ledger(config: MinifierConfig, capsys):
    (config.input_dir(AssetKind.JS) / "app.js").write_text("var a;", encoding="utf-8")
    config.ledger_path.mkdir()

    assert run_minify(config, CompactionRequest(AssetKind.JS), dry_run=True) == 0
    assert run_minify(config, CompactionRequest(AssetKind.JS), dry_run=True, strict=True) == 1
    assert "Could not read version ledger" in capsys.readouterr().out
