"""Tests for assetmin.toml loading."""

from pathlib import Path

import pytest

from assetmin.config import MinifierConfig, find_config, load_config
from assetmin.errors import ConfigError
from assetmin.models import AssetKind


def write_config(directory: Path, body: str) -> Path:
    path = directory / "assetmin.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_layout():
    config = MinifierConfig(base_dir=Path("/srv/assets"))
    assert config.input_dir(AssetKind.JS) == Path("/srv/assets/js")
    assert config.output_dir(AssetKind.JS) == Path("/srv/assets/livejs")
    assert config.output_dir(AssetKind.CSS) == Path("/srv/assets/livecss")
    assert config.output_name == "main"
    assert config.append_version is True


def test_empty_file_resolves_defaults_next_to_config(tmp_path: Path):
    config = load_config(write_config(tmp_path, ""))
    root = tmp_path.resolve()
    assert config.base_dir == root / "assets"
    assert config.ledger_path == root / "etc" / "timestamp"
    assert config.audit_log_path == root / ".assetmin" / "audit.log"


def test_full_config(tmp_path: Path):
    path = write_config(tmp_path, """
[assetmin]
base_dir = "static"
ledger = "/var/lib/site/timestamp"
output_name = " bundle "
append_version = false
verbose = false

[assetmin.dirs.js]
input = "src/scripts"
output = "public/js"

[assetmin.dirs.CSS]
output = "public/css"
""")
    config = load_config(path)
    root = tmp_path.resolve()

    assert config.base_dir == root / "static"
    assert config.ledger_path == Path("/var/lib/site/timestamp")
    assert config.output_name == "bundle"
    assert config.append_version is False
    assert config.verbose is False
    assert config.input_dir(AssetKind.JS) == root / "src" / "scripts"
    assert config.output_dir(AssetKind.JS) == root / "public" / "js"
    # Only the output is overridden for CSS
    assert config.input_dir(AssetKind.CSS) == root / "static" / "css"
    assert config.output_dir(AssetKind.CSS) == root / "public" / "css"


@pytest.mark.parametrize(
    "body, fragment",
    [
        ("[assetmin\n", "Invalid TOML"),
        ('[assetmin]\nbase_dir = 3\n', "base_dir"),
        ('[assetmin]\nledger = "  "\n', "ledger"),
        ('[assetmin]\nappend_version = "yes"\n', "append_version"),
        ('[assetmin]\noutput_name = ""\n', "output_name"),
        ('[assetmin.dirs.sass]\ninput = "x"\n', "dirs.sass"),
    ],
)
def test_invalid_config(tmp_path: Path, body: str, fragment: str):
    with pytest.raises(ConfigError, match=fragment):
        load_config(write_config(tmp_path, body))


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="Cannot read config"):
        load_config(tmp_path / "absent.toml")


def test_find_config_walks_up(tmp_path: Path):
    path = write_config(tmp_path, "")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config(nested) == path.resolve()


def test_with_overrides_ignores_none(tmp_path: Path):
    config = MinifierConfig(base_dir=tmp_path)
    updated = config.with_overrides(base_dir=None, ledger_path=tmp_path / "ledger")
    assert updated.base_dir == tmp_path
    assert updated.ledger_path == tmp_path / "ledger"
    assert config.ledger_path == Path("etc/timestamp")
