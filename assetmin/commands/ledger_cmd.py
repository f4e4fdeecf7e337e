"""Ledger and publish history command implementations."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..audit_log import format_audit_entry, read_audit_log
from ..config import MinifierConfig
from ..errors import UnknownKindError
from ..ledger import TextFileLedger, iter_entries
from ..models import AssetKind, artifact_name


def _live_artifact(config: MinifierConfig, key: str, stamp: str) -> tuple[str, bool] | None:
    """Artifact name for a ledger entry and whether it exists on disk."""
    name, _, kind_name = key.rpartition("_")
    try:
        kind = AssetKind.parse(kind_name)
    except UnknownKindError:
        return None
    if not name:
        return None
    filename = artifact_name(name, kind, stamp)
    return filename, (config.output_dir(kind) / filename).is_file()


def run_ledger(config: MinifierConfig, *, output_json: bool = False) -> int:
    """
    List ledger entries with the artifact each one points at.

    Returns exit code (0 = ok, 1 = ledger missing or unreadable).
    """
    console = Console()
    ledger_path = config.ledger_path
    if not ledger_path.exists():
        console.print(f"Ledger not found: {ledger_path}", style="bold red", markup=False)
        return 1

    text = TextFileLedger(ledger_path).read_all()
    if text is None:
        console.print(f"Ledger not readable: {ledger_path}", style="bold red", markup=False)
        return 1

    rows = []
    for key, stamp in iter_entries(text):
        live = _live_artifact(config, key, stamp)
        rows.append({
            "key": key,
            "stamp": stamp,
            "artifact": live[0] if live else None,
            "present": live[1] if live else False,
        })

    if output_json:
        print(json.dumps(rows, indent=2))
        return 0

    if not rows:
        console.print("[dim]Ledger has no entries.[/dim]")
        return 0

    table = Table(title=f"Version Ledger ({ledger_path})")
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("stamp")
    table.add_column("artifact", style="magenta")
    table.add_column("present")
    for row in rows:
        table.add_row(
            row["key"],
            row["stamp"],
            row["artifact"] or "",
            "yes" if row["present"] else "[red]missing[/red]",
        )
    console.print(table)
    return 0


def run_history(audit_log_path: Path, *, last_n: int | None = None) -> int:
    """
    Show the publish audit log.

    Returns the number of entries displayed.
    """
    console = Console()
    entries = read_audit_log(audit_log_path, last_n=last_n)
    if not entries:
        console.print("[dim]No publishes recorded yet.[/dim]")
        return 0

    for entry in entries:
        console.print(format_audit_entry(entry), markup=False, highlight=False, soft_wrap=True)
        console.print()
    return len(entries)
