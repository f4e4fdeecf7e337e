"""
Version ledger.

A flat text file of ``KEY=VALUE`` lines mapping ``<NAME>_<KIND>`` keys to the
version stamp of the live artifact:

    MAIN_JS=1700000000
    MAIN_CSS=1699999000

Lookup and rewrite are textual: one line is replaced in place and every other
line (comments, unknown keys, blank lines) is left untouched. There is no lock
between reading and rewriting; concurrent publishes for the same key must be
serialized by the caller.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Protocol

from .store import ENCODING, ERRORS

logger = logging.getLogger(__name__)

_ENTRY_RE = re.compile(r"^([A-Z0-9_]+)=(\w+)", re.MULTILINE)


class VersionLedger(Protocol):
    """Protocol for the persisted ledger medium."""

    def read_all(self) -> str | None:
        """
        Return the raw ledger text.

        An absent ledger reads as empty; one that exists but cannot be read
        returns None.
        """
        ...

    def write_all(self, text: str) -> bool:
        """Replace the ledger text, returning True on success."""
        ...


class TextFileLedger:
    """VersionLedger stored as a plain text file."""

    def __init__(self, path: Path):
        self.path = path

    def read_all(self) -> str | None:
        if not self.path.exists():
            return ""
        try:
            with self.path.open("r", encoding=ENCODING, errors=ERRORS, newline="") as f:
                return f.read()
        except OSError as e:
            logger.warning("Could not read ledger %s: %s", self.path, e)
            return None

    def write_all(self, text: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding=ENCODING, errors=ERRORS, newline="") as f:
                f.write(text)
        except OSError as e:
            logger.warning("Could not rewrite ledger %s: %s", self.path, e)
            return False
        return True


def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"^({re.escape(key)})=(\w+)", re.MULTILINE)


def lookup_version(text: str, key: str) -> str | None:
    """Return the value recorded for ``key``, or None if the key is absent."""
    match = _key_pattern(key).search(text)
    return match.group(2) if match else None


def set_version(text: str, key: str, value: int | str) -> str:
    """
    Return ``text`` with ``key`` set to ``value``.

    The first ``KEY=VALUE`` line for the key is rewritten in place. An absent
    key is appended as a new line so the next publish can find it.
    """
    pattern = _key_pattern(key)
    if pattern.search(text):
        return pattern.sub(lambda m: f"{key}={value}", text, count=1)
    if text and not text.endswith("\n"):
        text += "\n"
    return f"{text}{key}={value}\n"


def iter_entries(text: str) -> Iterator[tuple[str, str]]:
    """Iterate over ``(key, value)`` pairs in ledger order."""
    for match in _ENTRY_RE.finditer(text):
        yield match.group(1), match.group(2)
