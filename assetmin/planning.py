"""
Plan and result objects for a publish.

The plan is the diagnostic half (what would be written and deleted, computed
without side effects); the result is the action half (what actually happened).
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .audit_log import ArtifactChange, log_publish
from .models import AssetKind


class PublishState(str, Enum):
    """Steps of one publish attempt, in order. FAILED is absorbing."""

    IDLE = "idle"
    RESOLVE_INPUTS = "resolve_inputs"
    AGGREGATE = "aggregate"
    COMPACT = "compact"
    WRITE_ARTIFACT = "write_artifact"
    UPDATE_LEDGER = "update_ledger"
    CLEANUP_OLD = "cleanup_old"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PublishPlan:
    """What a publish would do, computed without writing."""
    kind: AssetKind
    input_dir: Path
    output_dir: Path
    input_files: list[str] = field(default_factory=list)
    artifact_name: str = ""
    ledger_key: str = ""
    previous_stamp: str | None = None
    stale_artifact: str | None = None
    bytes_in: int = 0
    bytes_out: int = 0

    def summary(self) -> str:
        lines = [
            f"Publish Plan ({self.kind.value})",
            f"  Inputs ({len(self.input_files)}): {', '.join(self.input_files) or '-'}",
            f"  Size: {self.bytes_in} -> {self.bytes_out} bytes",
            f"  Artifact: {self.output_dir / self.artifact_name}",
            f"  Ledger: {self.ledger_key} ({self.previous_stamp or 'no previous entry'})",
        ]
        if self.stale_artifact:
            lines.append(f"  [DESTRUCTIVE] Will delete: {self.output_dir / self.stale_artifact}")
        return "\n".join(lines)


@dataclass
class PublishResult:
    """Outcome of a publish attempt."""
    kind: AssetKind
    state: PublishState = PublishState.IDLE
    # Last step entered; on failure, the step that failed.
    failed_step: PublishState | None = None
    input_files: list[str] = field(default_factory=list)
    artifact_path: Path | None = None
    stamp: int | None = None
    previous_stamp: str | None = None
    deleted_path: Path | None = None
    bytes_in: int = 0
    bytes_out: int = 0
    created: ArtifactChange | None = None
    erased: ArtifactChange | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def success(self) -> bool:
        return self.state == PublishState.DONE

    @property
    def reduction(self) -> float:
        """Fraction of bytes removed by compaction (0.0 when nothing was read)."""
        if not self.bytes_in:
            return 0.0
        return 1.0 - self.bytes_out / self.bytes_in

    def log_to_audit(self, log_path: Path, operation: str, metadata: dict[str, Any] | None = None) -> None:
        """Log this result to the audit trail."""
        log_publish(log_path, operation, self.created, self.erased, metadata)
