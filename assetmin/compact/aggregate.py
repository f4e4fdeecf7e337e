"""Concatenate input files into one buffer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..store import AssetStore

logger = logging.getLogger(__name__)


def aggregate(store: AssetStore, input_dir: Path, filenames: Iterable[str]) -> str:
    """
    Concatenate the contents of ``filenames`` (relative to ``input_dir``) in order.

    A file that cannot be read contributes nothing. Line endings are left as-is.
    """
    parts: list[str] = []
    for name in filenames:
        content = store.read_file(input_dir / name)
        if content is None:
            logger.info("Skipping unreadable input %s", input_dir / name)
            continue
        parts.append(content)
    return "".join(parts)
