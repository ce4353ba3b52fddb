"""Reading and writing disguise cue table files.

A cue table file starts with a ``Cue table for <track name>`` line followed
by a tab-delimited table with a header row::

    Cue table for Main Show
    Beat	Tag	Note	Track_Time	TC_Time
    0	CUE 1	Opening	00:00:00.00	10:00:00:00
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from pathlib import Path

_HEADER_RE = re.compile(r"^Cue table for (.+)$")

FIELDS = ("Beat", "Tag", "Note", "Track_Time", "TC_Time")

NEWLINE = "\r\n"


class CueTableFormatError(ValueError):
    """Raised when a cue table file is not in the expected format."""


@dataclass(frozen=True)
class CueTableEntry:
    """One row of a cue table. Empty cells are None."""

    beat: int
    tag: str | None = None
    note: str | None = None
    track_time: str | None = None
    tc_time: str | None = None


@dataclass(frozen=True)
class CueTable:
    """A track name and its cue table rows in file order."""

    track_name: str
    entries: tuple[CueTableEntry, ...] = ()


def read_cue_table(path: Path) -> CueTable:
    """Parse a cue table file.

    Raises:
        CueTableFormatError: The file is empty, the first line is not a
            ``Cue table for`` line, a column is missing or a beat is not an
            integer.
    """
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        header_line = f.readline()
        if not header_line:
            raise CueTableFormatError("Cue table file is empty")

        match = _HEADER_RE.match(header_line.rstrip("\r\n"))
        if match is None:
            raise CueTableFormatError(
                "Cue table incorrectly formatted, first line should contain "
                "'Cue table for [Track Name]'"
            )

        reader = csv.DictReader(f, delimiter="\t")
        if reader.fieldnames is None:
            return CueTable(track_name=match.group(1))

        missing = [name for name in FIELDS if name not in reader.fieldnames]
        if missing:
            raise CueTableFormatError(
                f"Cue table is missing columns: {', '.join(missing)}"
            )

        entries: list[CueTableEntry] = []
        for row in reader:
            beat = (row["Beat"] or "").strip()
            try:
                beat_number = int(beat)
            except ValueError:
                raise CueTableFormatError(
                    f"Line {reader.line_num + 1}: invalid beat {beat!r}"
                ) from None
            entries.append(CueTableEntry(
                beat=beat_number,
                tag=row["Tag"] or None,
                note=row["Note"] or None,
                track_time=row["Track_Time"] or None,
                tc_time=row["TC_Time"] or None,
            ))

    return CueTable(track_name=match.group(1), entries=tuple(entries))


def write_cue_table(table: CueTable, path: Path) -> None:
    """Write a cue table file with CRLF line endings."""
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(f"Cue table for {table.track_name}{NEWLINE}")
        writer = csv.writer(f, delimiter="\t", lineterminator=NEWLINE)
        writer.writerow(FIELDS)
        for entry in table.entries:
            writer.writerow([
                entry.beat,
                entry.tag or "",
                entry.note or "",
                entry.track_time or "",
                entry.tc_time or "",
            ])
