"""
Compaction of aggregated asset text.

- aggregate: concatenate input files in order
- css: comment stripping and whitespace removal
- js: token-aware scanner that keeps program meaning intact
"""

from __future__ import annotations

from ..models import AssetKind
from .aggregate import aggregate
from .css import compact_css
from .js import JsScanner, compact_js

_COMPACTORS = {
    AssetKind.JS: compact_js,
    AssetKind.CSS: compact_css,
}


def compact(kind: AssetKind, buffer: str) -> str:
    """Compact ``buffer`` with the compactor matching ``kind``."""
    return _COMPACTORS[kind](buffer)


__all__ = [
    "JsScanner",
    "aggregate",
    "compact",
    "compact_css",
    "compact_js",
]
