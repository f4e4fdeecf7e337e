"""Tests for the KEY=VALUE version ledger."""

from pathlib import Path

from assetmin.ledger import TextFileLedger, iter_entries, lookup_version, set_version
from assetmin.models import AssetKind, CompactionRequest, artifact_name, ledger_key


def test_ledger_key_and_artifact_name():
    assert ledger_key("main", AssetKind.JS) == "MAIN_JS"
    assert ledger_key("Site", AssetKind.CSS) == "SITE_CSS"
    assert artifact_name("Main", AssetKind.JS, 1000) == "main-1000.js"
    assert artifact_name("main", AssetKind.CSS) == "main.css"


def test_request_artifact_name_honours_append_version():
    assert CompactionRequest(AssetKind.JS).artifact_name(5) == "main-5.js"
    assert CompactionRequest(AssetKind.JS, append_version=False).artifact_name(5) == "main.js"


def test_lookup_present_and_absent():
    text = "MAIN_CSS=900\nMAIN_JS=1000\n"
    assert lookup_version(text, "MAIN_JS") == "1000"
    assert lookup_version(text, "SITE_JS") is None
    assert lookup_version("", "MAIN_JS") is None


def test_lookup_is_anchored_to_line_start():
    text = "XMAIN_JS=5\nMAIN_JS=7\n"
    assert lookup_version(text, "MAIN_JS") == "7"


def test_set_version_rewrites_one_line_in_place():
    text = "# stamps\nMAIN_CSS=1\nMAIN_JS=1000\nOTHER=3\n"
    assert set_version(text, "MAIN_JS", 2000) == "# stamps\nMAIN_CSS=1\nMAIN_JS=2000\nOTHER=3\n"


def test_set_version_appends_absent_key():
    assert set_version("", "MAIN_JS", 5) == "MAIN_JS=5\n"
    assert set_version("A_JS=1", "MAIN_JS", 5) == "A_JS=1\nMAIN_JS=5\n"
    assert set_version("A_JS=1\n", "MAIN_JS", 5) == "A_JS=1\nMAIN_JS=5\n"


def test_iter_entries():
    text = "MAIN_JS=1\n\n# note\nMAIN_CSS=2\n"
    assert list(iter_entries(text)) == [("MAIN_JS", "1"), ("MAIN_CSS", "2")]


def test_text_file_ledger_round_trip(tmp_path: Path):
    ledger = TextFileLedger(tmp_path / "etc" / "timestamp")
    assert ledger.read_all() == ""
    assert ledger.write_all("MAIN_JS=1\r\n")
    assert ledger.read_all() == "MAIN_JS=1\r\n"


def test_text_file_ledger_write_failure(tmp_path: Path):
    blocker = tmp_path / "etc"
    blocker.write_text("not a directory", encoding="utf-8")
    ledger = TextFileLedger(blocker / "timestamp")
    assert ledger.write_all("MAIN_JS=1\n") is False


def test_text_file_ledger_read_failure(tmp_path: Path):
    path = tmp_path / "timestamp"
    path.mkdir()
    assert TextFileLedger(path).read_all() is None
