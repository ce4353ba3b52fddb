"""CSV report writing."""

from __future__ import annotations

import csv
import math
import tempfile
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from disguisetool.records import AuditRecord

COLUMNS = (
    "ProjectPath",
    "FileName",
    "Extensions",
    "Creation Time",
    "Last Write Time",
    "Size (MB)",
    "Width",
    "Height",
    "Codec Name",
    "Duration",
    "Framerate",
)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
FILENAME_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def report_path(output_dir: Path, output_name: str, now: datetime | None = None) -> Path:
    """Return the report path ``{output_name}_{timestamp}.csv``."""
    now = now or datetime.now()
    return output_dir / f"{output_name}_{now.strftime(FILENAME_TIMESTAMP_FORMAT)}.csv"


def record_row(record: AuditRecord) -> list[str]:
    """Format one record as a CSV row. Missing media values are empty."""
    media = record.media
    return [
        record.project_path,
        record.file_name,
        record.extension,
        record.creation_time.strftime(TIMESTAMP_FORMAT),
        record.last_write_time.strftime(TIMESTAMP_FORMAT),
        f"{record.size_mb:.2f}",
        str(media.width) if media else "",
        str(media.height) if media else "",
        media.codec_name if media else "",
        format_duration(media.duration_secs) if media else "",
        f"{media.frame_rate:.2f}" if media and media.frame_rate is not None else "",
    ]


def format_duration(seconds: float | None) -> str:
    """Format seconds as ``HH:MM:SS.fff``."""
    if seconds is None or not math.isfinite(seconds):
        return ""
    millis = round(seconds * 1000)
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def write_report(
    records: Iterable[AuditRecord],
    output_dir: Path,
    output_name: str,
    now: datetime | None = None,
) -> Path:
    """Write the audit report and return its path.

    Rows are sorted by project path and file name. The file is written to
    a temporary file first and renamed into place.
    """
    output_path = report_path(output_dir, output_name, now)
    output_dir.mkdir(parents=True, exist_ok=True)

    rows = sorted(records, key=lambda r: (r.project_path, r.file_name, r.extension))

    fd, tmp_path_str = tempfile.mkstemp(dir=output_dir, suffix=".tmp")
    tmp_path = Path(tmp_path_str)
    try:
        with open(fd, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(COLUMNS)
            for record in rows:
                writer.writerow(record_row(record))
        tmp_path.replace(output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return output_path
