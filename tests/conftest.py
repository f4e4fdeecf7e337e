"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from assetmin.config import MinifierConfig
from assetmin.models import AssetKind


@pytest.fixture
def config(tmp_path: Path) -> MinifierConfig:
    """Config rooted in a fresh temporary asset tree."""
    cfg = MinifierConfig(
        base_dir=tmp_path / "assets",
        ledger_path=tmp_path / "etc" / "timestamp",
        audit_log_path=tmp_path / ".assetmin" / "audit.log",
    )
    for kind in AssetKind:
        cfg.input_dir(kind).mkdir(parents=True)
        cfg.output_dir(kind).mkdir(parents=True)
    cfg.ledger_path.parent.mkdir(parents=True)
    return cfg
