"""Minify and watch command implementations."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..config import MinifierConfig
from ..errors import MinifyError
from ..models import CompactionRequest
from ..publisher import VersionedArtifactPublisher
from ..watcher import run_watch_loop


def run_minify(
    config: MinifierConfig,
    request: CompactionRequest,
    *,
    verbose: bool = True,
    strict: bool = False,
    dry_run: bool = False,
) -> int:
    """Publish one asset kind.

    Args:
        config: Directory layout and ledger location
        request: What to publish
        verbose: Print progress and failure messages
        strict: Return a failing exit code when the publish fails
        dry_run: Print the plan and write nothing

    Returns:
        Exit code (0 = success or non-strict failure, 1 = strict failure)
    """
    console = Console()
    publisher = VersionedArtifactPublisher(config, console=console, verbose=verbose)

    if dry_run:
        try:
            plan = publisher.plan(request)
        except MinifyError as e:
            console.print(str(e), style="red", markup=False, highlight=False)
            return 1 if strict else 0
        console.print(plan.summary(), markup=False, highlight=False, soft_wrap=True)
        return 0

    result = publisher.publish(request)
    if result.success and verbose and result.artifact_path is not None:
        console.print(f"  -> {result.artifact_path}", style="dim", markup=False, highlight=False, soft_wrap=True)
    if not result.success and strict:
        return 1
    return 0


def run_watch(
    config: MinifierConfig,
    request: CompactionRequest,
    *,
    verbose: bool = True,
) -> None:
    """
    Publish once, then republish whenever the kind's sources change.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    publisher = VersionedArtifactPublisher(config, verbose=verbose)
    input_dir = config.input_dir(request.kind)

    if not input_dir.is_dir():
        console.print(f"Input directory not found: {input_dir}", style="bold red", markup=False)
        return

    console.print(f"[bold]Watching[/bold] {input_dir} ({request.kind.value})")
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    publisher.publish(request)
    rebuilds = 0

    def on_change(changed: list[Path]) -> None:
        nonlocal rebuilds
        rebuilds += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        names = ", ".join(p.name for p in changed)
        console.print(f"[dim]{timestamp}[/dim] changed: {names}", highlight=False)
        publisher.publish(request)

    run_watch_loop(input_dir, request.kind, on_change)
    console.print()
    console.print(f"[bold]Stopped.[/bold] Rebuilt {rebuilds} times.")
