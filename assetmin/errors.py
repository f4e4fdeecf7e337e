"""
Failure taxonomy for a publish attempt.

Every step of the publisher raises one of these; the top-level
``VersionedArtifactPublisher.publish`` is the only place they are caught.
"""

from __future__ import annotations

from pathlib import Path


class MinifyError(Exception):
    """Recoverable failure of a single publish attempt."""


class UnknownKindError(MinifyError):
    """No (or an unsupported) minifier type was given."""


class ConfigError(MinifyError):
    """Configuration file is unreadable or holds invalid values."""


class NoInputError(MinifyError):
    """No input files resolved for compaction."""


class EmptyResultError(MinifyError):
    """Compaction produced an empty buffer."""


class WriteError(MinifyError):
    """The versioned artifact could not be written."""


class LedgerWriteError(MinifyError):
    """The version ledger could not be rewritten. Cleanup is skipped."""


class CleanupError(MinifyError):
    """The previous artifact was expected on disk but is missing."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class LedgerReadError(MinifyError):
    """The version ledger exists but could not be read. Cleanup is skipped."""
