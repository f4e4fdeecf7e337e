"""
Asset storage capability.

The publisher never touches the filesystem directly; it goes through an
``AssetStore``. Failures are reported as return values (``None`` / ``False``)
so the publisher decides which error they become.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# Raw bytes survive a read/write round trip even when they are not valid UTF-8.
ENCODING = "utf-8"
ERRORS = "surrogateescape"


class AssetStore(Protocol):
    """Protocol for listing, reading, writing and deleting asset files."""

    def list_files(self, directory: Path) -> list[str]:
        """
        List file names (not paths) in a directory.

        Returns:
            Sorted file names, or an empty list if the directory is missing.
        """
        ...

    def read_file(self, path: Path) -> str | None:
        """Return the file contents, or None if it cannot be read."""
        ...

    def write_file(self, path: Path, content: str) -> bool:
        """Write content, returning True on success."""
        ...

    def exists(self, path: Path) -> bool:
        ...

    def delete_file(self, path: Path) -> bool:
        """Delete a file, returning True on success."""
        ...


class LocalAssetStore:
    """AssetStore backed by the local filesystem."""

    def list_files(self, directory: Path) -> list[str]:
        if not directory.is_dir():
            logger.debug("Input directory %s does not exist", directory)
            return []
        return sorted(p.name for p in directory.iterdir() if p.is_file())

    def read_file(self, path: Path) -> str | None:
        try:
            # newline="" keeps CRLF intact; line endings are the compactor's business
            with path.open("r", encoding=ENCODING, errors=ERRORS, newline="") as f:
                return f.read()
        except OSError as e:
            logger.debug("Could not read %s: %s", path, e)
            return None

    def write_file(self, path: Path, content: str) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding=ENCODING, errors=ERRORS, newline="") as f:
                f.write(content)
        except OSError as e:
            logger.warning("Could not write %s: %s", path, e)
            return False
        return True

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def delete_file(self, path: Path) -> bool:
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not delete %s: %s", path, e)
            return False
        return True


def byte_length(text: str) -> int:
    """Size of ``text`` once written by a LocalAssetStore."""
    return len(text.encode(ENCODING, ERRORS))
