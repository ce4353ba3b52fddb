"""Concurrent audit of project directories."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from disguisetool.config import AuditRequest
from disguisetool.filters import should_include
from disguisetool.probe import probe_media
from disguisetool.records import (
    AuditRecord,
    FileAccessFailure,
    build_record,
    split_extension,
    with_media,
)
from disguisetool.resolver import ProjectNotFound, ScanRoot, resolve_scan_root
from disguisetool.scanner import iter_files

logger = logging.getLogger(__name__)

# How long enumeration waits for a free file slot before re-checking cancel.
_SLOT_WAIT_SECS = 0.1


@dataclass(frozen=True)
class AuditResult:
    """Everything one audit run produced. Record order is not meaningful."""

    records: tuple[AuditRecord, ...]
    skipped_projects: tuple[ProjectNotFound, ...] = ()
    failed_projects: tuple[Path, ...] = ()
    failed_files: int = 0
    cancelled: bool = False


class _ResultSink:
    """Append-only collection shared by all worker threads of a run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[AuditRecord] = []
        self._skipped: list[ProjectNotFound] = []
        self._failed_projects: list[Path] = []
        self._failed_files = 0

    def append(self, record: AuditRecord) -> None:
        with self._lock:
            self._records.append(record)

    def skip_project(self, not_found: ProjectNotFound) -> None:
        with self._lock:
            self._skipped.append(not_found)

    def fail_project(self, project_path: Path) -> None:
        with self._lock:
            self._failed_projects.append(project_path)

    def fail_file(self) -> None:
        with self._lock:
            self._failed_files += 1

    def result(self, cancelled: bool) -> AuditResult:
        with self._lock:
            return AuditResult(
                records=tuple(self._records),
                skipped_projects=tuple(self._skipped),
                failed_projects=tuple(self._failed_projects),
                failed_files=self._failed_files,
                cancelled=cancelled,
            )


class ProjectAuditor:
    """Audits every project of a request with two bounded levels of threads.

    Projects run on one pool of ``max_parallel_projects`` workers. Each
    project runs its files on its own pool of ``max_parallel_files``
    workers, so a large project cannot take file slots from the others.
    Failures of a single project or file are logged and skipped.

    Args:
        request: The validated audit request.
        cancel: Event that aborts the run when set. The run then returns a
            result flagged ``cancelled``.
        on_file: Called from worker threads after each discovered file has
            been handled, whether or not it produced a record.
    """

    def __init__(
        self,
        request: AuditRequest,
        cancel: threading.Event | None = None,
        on_file: Callable[[Path], None] | None = None,
    ) -> None:
        self.request = request
        self.cancel = cancel if cancel is not None else threading.Event()
        self.on_file = on_file

    def run(self) -> AuditResult:
        sink = _ResultSink()
        projects = self.request.project_paths
        workers = min(self.request.max_parallel_projects, len(projects))

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="project"
        ) as pool:
            futures = {
                pool.submit(self._audit_project, project_path, sink): project_path
                for project_path in projects
            }
            for future in as_completed(futures):
                future.result()

        result = sink.result(cancelled=self.cancel.is_set())
        logger.info(
            "Audit %s: %d records, %d projects skipped, %d files failed",
            "cancelled" if result.cancelled else "finished",
            len(result.records),
            len(result.skipped_projects) + len(result.failed_projects),
            result.failed_files,
        )
        return result

    def _audit_project(self, project_path: Path, sink: _ResultSink) -> None:
        if self.cancel.is_set():
            return

        try:
            resolved = resolve_scan_root(project_path, self.request.raw)
            if isinstance(resolved, ProjectNotFound):
                logger.warning("%s", resolved)
                sink.skip_project(resolved)
                return

            logger.info("Auditing %s", resolved.path)
            self._audit_files(resolved, sink)
        except OSError as e:
            logger.warning("Error walking %s: %s", project_path, e)
            sink.fail_project(project_path)
        except Exception:
            logger.exception("Error auditing project %s", project_path)
            sink.fail_project(project_path)

    def _audit_files(self, scan_root: ScanRoot, sink: _ResultSink) -> None:
        limit = self.request.max_parallel_files
        slots = threading.BoundedSemaphore(limit)

        with ThreadPoolExecutor(
            max_workers=limit, thread_name_prefix="file"
        ) as pool:
            for file_path in iter_files(scan_root.path, self.cancel):
                if not self._acquire_slot(slots):
                    break
                future = pool.submit(self._audit_file, scan_root, file_path, sink)
                future.add_done_callback(lambda _: slots.release())

    def _acquire_slot(self, slots: threading.BoundedSemaphore) -> bool:
        """Wait for a free file slot. Returns False once the run is cancelled."""
        while not slots.acquire(timeout=_SLOT_WAIT_SECS):
            if self.cancel.is_set():
                return False
        if self.cancel.is_set():
            slots.release()
            return False
        return True

    def _audit_file(
        self, scan_root: ScanRoot, file_path: Path, sink: _ResultSink
    ) -> None:
        try:
            record = self._build(scan_root, file_path)
            if record is not None:
                sink.append(record)
        except FileAccessFailure as e:
            logger.warning("Skipping %s: %s", file_path, e.reason)
            sink.fail_file()
        except Exception:
            logger.exception("Error auditing %s", file_path)
            sink.fail_file()
        finally:
            if self.on_file is not None:
                self.on_file(file_path)

    def _build(self, scan_root: ScanRoot, file_path: Path) -> AuditRecord | None:
        """Return the record for a file, or None if it is filtered out."""
        if self.cancel.is_set():
            return None

        request = self.request
        name, extension = split_extension(file_path)
        if not should_include(
            name, extension, request.include, request.exclude, request.search
        ):
            return None

        record = build_record(scan_root.path, scan_root.project_path, file_path)
        if request.media_info:
            media = probe_media(file_path, request.ffprobe_path, self.cancel)
            if media is not None:
                record = with_media(record, media)

        if self.cancel.is_set():
            return None
        return record


def run_audit(
    request: AuditRequest,
    cancel: threading.Event | None = None,
    on_file: Callable[[Path], None] | None = None,
) -> AuditResult:
    """Audit all projects of a request and return the collected records."""
    return ProjectAuditor(request, cancel=cancel, on_file=on_file).run()
