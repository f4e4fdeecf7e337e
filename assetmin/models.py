"""Data models for a compaction run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import UnknownKindError


class AssetKind(str, Enum):
    """Types of assets the minifier handles."""

    JS = "js"
    CSS = "css"

    @classmethod
    def parse(cls, value: str | None) -> AssetKind:
        """Parse a kind name case-insensitively."""
        if not value:
            raise UnknownKindError("No minifier type defined. Exiting!")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise UnknownKindError(f"Unknown minifier type: {value!r}") from None

    @property
    def extension(self) -> str:
        return "." + self.value


@dataclass(frozen=True)
class CompactionRequest:
    """One publish invocation.

    An empty ``input_files`` means "every file of this kind in the input
    directory".
    """

    kind: AssetKind
    input_files: tuple[str, ...] = ()
    output_name: str = "main"
    append_version: bool = True

    @property
    def ledger_key(self) -> str:
        return ledger_key(self.output_name, self.kind)

    def artifact_name(self, stamp: int | str | None) -> str:
        """Filename of the artifact for a given version stamp."""
        return artifact_name(self.output_name, self.kind, stamp if self.append_version else None)


def ledger_key(output_name: str, kind: AssetKind) -> str:
    """Ledger key for an (output name, kind) pair, e.g. ``MAIN_JS``."""
    return f"{output_name}_{kind.value}".upper()


def artifact_name(output_name: str, kind: AssetKind, stamp: int | str | None = None) -> str:
    """Versioned artifact filename, e.g. ``main-1700000000.js``."""
    suffix = f"-{stamp}" if stamp not in (None, "") else ""
    return f"{output_name.lower()}{suffix}.{kind.value}"
