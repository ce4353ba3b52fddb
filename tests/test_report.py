"""Tests for CSV report writing."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from disguisetool.probe import MediaInfo
from disguisetool.records import AuditRecord
from disguisetool.report import (
    COLUMNS,
    format_duration,
    record_row,
    report_path,
    write_report,
)

NOW = datetime(2026, 10, 17, 9, 5, 30)


def _record(
    file_name: str = "clip",
    project: str = "/shows/a",
    media: MediaInfo | None = None,
    size_mb: float = 10.0,
) -> AuditRecord:
    return AuditRecord(
        project_path=project,
        file_name=file_name,
        extension="mov",
        creation_time=datetime(2025, 1, 2, 3, 4, 5),
        last_write_time=datetime(2025, 6, 7, 8, 9, 10),
        size_mb=size_mb,
        media=media,
    )


def _read_rows(path: Path) -> list[list[str]]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_report_path_embeds_stem_and_timestamp(tmp_path: Path) -> None:
    assert report_path(tmp_path, "audit", NOW) == tmp_path / "audit_2026-10-17_09-05-30.csv"


def test_row_without_media_has_empty_media_cells() -> None:
    row = record_row(_record(size_mb=1.0 / 3))
    assert row == [
        "/shows/a",
        "clip",
        "mov",
        "2025-01-02T03:04:05",
        "2025-06-07T08:09:10",
        "0.33",
        "", "", "", "", "",
    ]


def test_row_with_media() -> None:
    media = MediaInfo(width=1920, height=1080, codec_name="hap", duration_secs=83.456, frame_rate=29.97003)
    row = record_row(_record(media=media))
    assert row[6:] == ["1920", "1080", "hap", "00:01:23.456", "29.97"]


def test_row_with_media_but_no_duration() -> None:
    media = MediaInfo(width=640, height=480, codec_name="png")
    row = record_row(_record(media=media))
    assert row[6:] == ["640", "480", "png", "", ""]


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0.5, "00:00:00.500"),
        (59.9999, "00:01:00.000"),
        (3723.25, "01:02:03.250"),
        (None, ""),
        (float("inf"), ""),
        (float("nan"), ""),
    ],
)
def test_format_duration(seconds: float | None, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_write_report_header_and_rows(tmp_path: Path) -> None:
    records = [_record("b"), _record("a", project="/shows/z"), _record("a")]

    path = write_report(records, tmp_path, "audit", NOW)

    rows = _read_rows(path)
    assert rows[0] == list(COLUMNS)
    assert [(r[0], r[1]) for r in rows[1:]] == [
        ("/shows/a", "a"),
        ("/shows/a", "b"),
        ("/shows/z", "a"),
    ]
    assert all(len(r) == len(COLUMNS) for r in rows)


def test_write_report_empty_result_has_header_only(tmp_path: Path) -> None:
    path = write_report([], tmp_path, "empty", NOW)
    assert _read_rows(path) == [list(COLUMNS)]


def test_write_report_creates_output_dir(tmp_path: Path) -> None:
    out = tmp_path / "reports" / "nested"
    path = write_report([_record()], out, "audit", NOW)
    assert path.parent == out
    assert path.exists()


def test_write_report_leaves_no_partial_file_on_error(tmp_path: Path) -> None:
    with patch("disguisetool.report.record_row", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            write_report([_record()], tmp_path, "audit", NOW)

    assert list(tmp_path.iterdir()) == []
