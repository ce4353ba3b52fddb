"""Audit records built from discovered files."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from disguisetool.probe import MediaInfo

BYTES_PER_MB = 1024 * 1024


class FileAccessFailure(Exception):
    """Raised when a discovered file's metadata cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class AuditRecord:
    """One row of the audit report."""

    project_path: str
    file_name: str
    extension: str
    creation_time: datetime
    last_write_time: datetime
    size_mb: float
    media: MediaInfo | None = None


def split_extension(file_path: Path) -> tuple[str, str]:
    """Return the base name and the extension (no leading dot) of a path."""
    return file_path.stem, file_path.suffix.lstrip(".")


def build_record(
    scan_root: Path,
    project_path: Path,
    file_path: Path,
    media: MediaInfo | None = None,
) -> AuditRecord:
    """Build the audit record for a file found under scan_root.

    The file name is the path relative to ``scan_root`` with its final
    extension removed. Size is reported in binary megabytes.

    Raises:
        FileAccessFailure: The file could not be stat'd.
    """
    try:
        stat = file_path.stat()
    except OSError as e:
        raise FileAccessFailure(file_path, e.strerror or str(e)) from e

    relative = file_path.relative_to(scan_root)
    _, extension = split_extension(file_path)

    # st_birthtime only exists on platforms that track creation time
    created = getattr(stat, "st_birthtime", stat.st_ctime)

    return AuditRecord(
        project_path=str(project_path),
        file_name=str(relative.with_suffix("")) if extension else str(relative),
        extension=extension,
        creation_time=datetime.fromtimestamp(created),
        last_write_time=datetime.fromtimestamp(stat.st_mtime),
        size_mb=stat.st_size / BYTES_PER_MB,
        media=media,
    )


def with_media(record: AuditRecord, media: MediaInfo) -> AuditRecord:
    """Return a copy of record carrying the media block."""
    return dataclasses.replace(record, media=media)
