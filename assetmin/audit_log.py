"""
Publish audit log.

One JSON line per successful publish:

    {"timestamp": "...", "operation": "publish-js",
     "created": {"name": "main-2000.js", "size": 17},
     "erased": {"name": "main-1000.js", "size": 15},
     "metadata": {"stamp": 2000, "previous_stamp": "1000", "inputs": [...]}}

``erased`` is null when the publish retired nothing (first publish, unversioned
output).
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ArtifactChange:
    """An artifact written or deleted by a publish."""
    name: str
    size: int = 0


@dataclass
class AuditEntry:
    timestamp: str
    operation: str
    created: ArtifactChange | None = None
    erased: ArtifactChange | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "created": asdict(self.created) if self.created else None,
            "erased": asdict(self.erased) if self.erased else None,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        """Rebuild an entry; raises KeyError/TypeError/ValueError on bad records."""
        return cls(
            timestamp=str(data["timestamp"]),
            operation=str(data["operation"]),
            created=_change(data.get("created")),
            erased=_change(data.get("erased")),
            metadata=dict(data.get("metadata") or {}),
        )


def _change(raw: Any) -> ArtifactChange | None:
    if raw is None:
        return None
    return ArtifactChange(name=str(raw["name"]), size=int(raw.get("size", 0)))


def log_publish(
    log_path: Path,
    operation: str,
    created: ArtifactChange | None = None,
    erased: ArtifactChange | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditEntry:
    """Append one publish to the audit log, creating its directory if needed."""
    entry = AuditEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        operation=operation,
        created=created,
        erased=erased,
        metadata=metadata or {},
    )
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict()) + "\n")
    return entry


def read_audit_log(log_path: Path, last_n: int | None = None) -> list[AuditEntry]:
    """
    Read publishes back, oldest first.

    Lines that are not valid entries are skipped. ``last_n`` keeps only the
    most recent N (none for ``last_n <= 0``).
    """
    if not log_path.exists():
        return []

    entries = []
    for line in log_path.read_text(encoding="utf-8", errors="replace").splitlines():
        if not line.strip():
            continue
        try:
            entries.append(AuditEntry.from_dict(json.loads(line)))
        except (ValueError, KeyError, TypeError):
            continue

    if last_n is None:
        return entries
    return entries[-last_n:] if last_n > 0 else []


def format_audit_entry(entry: AuditEntry) -> str:
    lines = [f"[{entry.timestamp}] {entry.operation}"]
    if entry.created:
        lines.append(f"  + {entry.created.name} ({entry.created.size} bytes)")
    if entry.erased:
        lines.append(f"  - {entry.erased.name} ({entry.erased.size} bytes)")
    for key, value in entry.metadata.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        lines.append(f"  {key}: {value}")
    return "\n".join(lines)
