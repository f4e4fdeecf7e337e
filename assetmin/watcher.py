"""
Source watcher for automatic republishing.

Watches the input directory of one asset kind and calls back once per quiet
window after relevant files change:

- Only files with the kind's extension count (hidden files are ignored)
- Bursts of events (editor save cycles) are debounced into one republish
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .models import AssetKind

logger = logging.getLogger(__name__)


class AssetEventHandler(FileSystemEventHandler):
    """
    Collects changes to source assets and flushes them as one rebuild.

    ``flush_pending`` is driven by the watch loop; it fires ``on_change`` with
    the changed paths once no new event arrived for DEBOUNCE_SECONDS.
    """

    DEBOUNCE_SECONDS = 1.0

    def __init__(
        self,
        kind: AssetKind,
        on_change: Callable[[list[Path]], None],
        clock: Callable[[], float] = time.time,
    ):
        super().__init__()
        self.kind = kind
        self.on_change = on_change
        self.clock = clock
        # Written by the observer thread, drained by the watch loop.
        self.pending: dict[str, float] = {}
        self._lock = threading.Lock()

    def is_relevant(self, path: str) -> bool:
        """Check if the file is a source asset of this kind."""
        p = Path(path)
        if p.name.startswith("."):
            return False
        return p.suffix.lower() == self.kind.extension

    def _mark(self, path: str) -> None:
        if self.is_relevant(path):
            with self._lock:
                self.pending[path] = self.clock()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._mark(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._mark(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._mark(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._mark(event.src_path)
        self._mark(event.dest_path)

    def flush_pending(self) -> bool:
        """Fire one rebuild if the pending batch has been quiet long enough."""
        with self._lock:
            if not self.pending:
                return False
            if self.clock() - max(self.pending.values()) < self.DEBOUNCE_SECONDS:
                return False
            batch, self.pending = self.pending, {}

        changed = sorted(Path(p) for p in batch)
        logger.debug("Rebuilding %s after %d changes", self.kind.value, len(changed))
        self.on_change(changed)
        return True


def watch_assets(
    directory: Path,
    kind: AssetKind,
    on_change: Callable[[list[Path]], None],
) -> tuple[Observer, AssetEventHandler]:
    """
    Start watching ``directory`` for changes to assets of ``kind``.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = AssetEventHandler(kind, on_change)
    observer = Observer()
    observer.schedule(handler, str(directory), recursive=False)
    observer.start()
    return observer, handler


def run_watch_loop(
    directory: Path,
    kind: AssetKind,
    on_change: Callable[[list[Path]], None],
) -> None:
    """
    Run the watch loop until interrupted.

    Blocking; flushes pending changes twice a second.
    """
    observer, handler = watch_assets(directory, kind, on_change)
    try:
        while True:
            time.sleep(0.5)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
