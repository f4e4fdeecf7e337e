"""
Versioned artifact publisher.

One publish walks a fixed sequence of steps:

    RESOLVE_INPUTS -> AGGREGATE -> COMPACT -> WRITE_ARTIFACT
        -> UPDATE_LEDGER -> CLEANUP_OLD -> DONE

Any step may fail with a MinifyError, which moves the attempt to FAILED.
Nothing is retried and nothing already written is rolled back. The previous
artifact is only deleted after both the new artifact and the ledger rewrite
succeeded; an orphaned new artifact is preferred over deleting a live one.

There is no locking. Two overlapping publishes for the same output name and
kind can delete each other's artifacts; serialize them externally.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from rich.console import Console

from .audit_log import ArtifactChange
from .compact import aggregate, compact
from .config import MinifierConfig
from .errors import (
    CleanupError,
    EmptyResultError,
    LedgerReadError,
    LedgerWriteError,
    MinifyError,
    NoInputError,
    WriteError,
)
from .ledger import TextFileLedger, VersionLedger, lookup_version, set_version
from .models import CompactionRequest, artifact_name
from .planning import PublishPlan, PublishResult, PublishState
from .store import AssetStore, LocalAssetStore, byte_length

logger = logging.getLogger(__name__)


class VersionedArtifactPublisher:
    """Combine, compact and publish one asset kind under a versioned name."""

    def __init__(
        self,
        config: MinifierConfig,
        store: AssetStore | None = None,
        ledger: VersionLedger | None = None,
        *,
        clock: Callable[[], float] = time.time,
        console: Console | None = None,
        verbose: bool | None = None,
        audit: bool = True,
    ):
        """
        Args:
            config: Directory layout and defaults
            store: File access (defaults to the local filesystem)
            ledger: Version ledger (defaults to the text file at config.ledger_path)
            clock: Source of version stamps, seconds since the epoch
            console: Where verbose messages go
            verbose: Overrides config.verbose
            audit: Append successful publishes to config.audit_log_path
        """
        self.config = config
        self.store = store or LocalAssetStore()
        self.ledger = ledger or TextFileLedger(config.ledger_path)
        self.clock = clock
        self.console = console or Console()
        self.verbose = config.verbose if verbose is None else verbose
        self.audit = audit

    def _say(self, message: str, style: str | None = None) -> None:
        if self.verbose:
            self.console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)

    # --- Public entry points ---

    def publish(self, request: CompactionRequest) -> PublishResult:
        """
        Run one publish attempt.

        Never raises MinifyError: failures are reported (when verbose) and
        recorded on the returned result.
        """
        result = PublishResult(kind=request.kind)
        try:
            self._run(request, result)
        except MinifyError as e:
            result.failed_step = result.state
            result.state = PublishState.FAILED
            result.error = str(e)
            result.error_type = type(e).__name__
            logger.info("Publish of %s failed at %s: %s", request.ledger_key, result.failed_step.value, e)
            self._say(str(e), style="red")
            return result

        if self.audit:
            self._log_audit(request, result)
        return result

    def plan(self, request: CompactionRequest) -> PublishPlan:
        """
        Compute what a publish would do without writing anything.

        Raises:
            NoInputError: no input files resolved
            EmptyResultError: compaction produced nothing
            LedgerReadError: the ledger exists but cannot be read
        """
        kind = request.kind
        files = self.resolve_inputs(request)
        buffer = aggregate(self.store, self.config.input_dir(kind), files)
        compacted = compact(kind, buffer)
        if not compacted:
            raise EmptyResultError(f"{kind.value.upper()} compaction produced no output")

        stamp = int(self.clock())
        previous = lookup_version(self._read_ledger(request.ledger_key), request.ledger_key)
        new_name = request.artifact_name(stamp)
        stale = self._stale_artifact_name(request, previous, new_name)

        return PublishPlan(
            kind=kind,
            input_dir=self.config.input_dir(kind),
            output_dir=self.config.output_dir(kind),
            input_files=files,
            artifact_name=new_name,
            ledger_key=request.ledger_key,
            previous_stamp=previous,
            stale_artifact=stale,
            bytes_in=byte_length(buffer),
            bytes_out=byte_length(compacted),
        )

    def resolve_inputs(self, request: CompactionRequest) -> list[str]:
        """Explicit input list, or every file of the kind in the input directory."""
        if request.input_files:
            files = list(request.input_files)
        else:
            ext = request.kind.extension
            listed = self.store.list_files(self.config.input_dir(request.kind))
            files = [name for name in listed if Path(name).suffix.lower() == ext]
        if not files:
            raise NoInputError("Error: No input file given to minify!")
        return files

    # --- Steps ---

    def _run(self, request: CompactionRequest, result: PublishResult) -> None:
        kind = request.kind
        input_dir = self.config.input_dir(kind)

        result.state = PublishState.RESOLVE_INPUTS
        result.input_files = self.resolve_inputs(request)
        logger.debug("Resolved %d %s inputs from %s", len(result.input_files), kind.value, input_dir)

        result.state = PublishState.AGGREGATE
        buffer = aggregate(self.store, input_dir, result.input_files)
        result.bytes_in = byte_length(buffer)

        result.state = PublishState.COMPACT
        buffer = compact(kind, buffer)
        if not buffer:
            raise EmptyResultError(f"{kind.value.upper()} compaction produced no output")
        result.bytes_out = byte_length(buffer)

        result.state = PublishState.WRITE_ARTIFACT
        result.stamp = int(self.clock())
        new_name = request.artifact_name(result.stamp)
        result.artifact_path = self.config.output_dir(kind) / new_name
        if not self.store.write_file(result.artifact_path, buffer):
            raise WriteError("Could not create minified file!")
        result.created = ArtifactChange(new_name, result.bytes_out)

        result.state = PublishState.UPDATE_LEDGER
        result.previous_stamp = self._update_ledger(request, result.stamp)

        result.state = PublishState.CLEANUP_OLD
        self._cleanup_old(request, result, new_name)

        result.state = PublishState.DONE
        self._say(
            f"{kind.value.upper()} Minification: Successfully Done!! "
            f"({result.bytes_in} -> {result.bytes_out} bytes, {result.reduction:.0%} smaller)",
            style="green",
        )

    def _read_ledger(self, key: str) -> str:
        text = self.ledger.read_all()
        if text is None:
            raise LedgerReadError(f"Could not read version ledger for {key}; old artifact kept")
        return text

    def _update_ledger(self, request: CompactionRequest, stamp: int) -> str | None:
        """Point the ledger at ``stamp``; return the value it replaced."""
        key = request.ledger_key
        text = self._read_ledger(key)
        previous = lookup_version(text, key)
        if previous is None:
            logger.info("Ledger has no entry for %s; adding one", key)
            self._say("No key exists with provided name!", style="yellow")

        if not self.ledger.write_all(set_version(text, key, stamp)):
            raise LedgerWriteError(f"Could not update version ledger for {key}; old artifact kept")
        logger.debug("Ledger %s: %s -> %s", key, previous, stamp)
        return previous

    def _stale_artifact_name(
        self,
        request: CompactionRequest,
        previous: str | None,
        new_name: str,
    ) -> str | None:
        """Name of the artifact the publish supersedes, or None if nothing is retired."""
        if previous is None or not request.append_version:
            return None
        old_name = artifact_name(request.output_name, request.kind, previous)
        if old_name == new_name:
            return None
        return old_name

    def _cleanup_old(self, request: CompactionRequest, result: PublishResult, new_name: str) -> None:
        kind = request.kind
        old_name = self._stale_artifact_name(request, result.previous_stamp, new_name)
        if old_name is None:
            logger.debug("Nothing to retire for %s", request.ledger_key)
            return

        old_path = self.config.output_dir(kind) / old_name
        if not self.store.exists(old_path):
            raise CleanupError(f"Old {kind.value} file {old_path} could not be deleted: not found", old_path)

        content = self.store.read_file(old_path)
        if not self.store.delete_file(old_path):
            raise CleanupError(f"Old {kind.value} file {old_path} could not be deleted", old_path)

        result.deleted_path = old_path
        result.erased = ArtifactChange(old_name, byte_length(content) if content else 0)
        self._say(f"Old {kind.value} file successfully deleted")

    def _log_audit(self, request: CompactionRequest, result: PublishResult) -> None:
        metadata = {
            "stamp": result.stamp,
            "previous_stamp": result.previous_stamp,
            "inputs": result.input_files,
        }
        try:
            result.log_to_audit(self.config.audit_log_path, f"publish-{request.kind.value}", metadata)
        except OSError as e:
            logger.warning("Could not append to audit log %s: %s", self.config.audit_log_path, e)
