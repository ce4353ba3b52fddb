"""Conversion of cue tables into lighting console cue lists."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path

from disguisetool.cuenumber import DmxCueNumber
from disguisetool.cuetable import CueTable

logger = logging.getLogger(__name__)

_CUE_TAG_RE = re.compile(r"^CUE ([0-9.]+)$")

EOS_COLUMNS = (
    "TARGET_TYPE",
    "TARGET_TYPE_AS_TEXT",
    "TARGET_LIST_NUMBER",
    "TARGET_ID",
    "LABEL",
    "NOTES",
)

EOS_CUE_TARGET_TYPE = 1


class CueListFormat(str, Enum):
    EOS_CSV = "eos-csv"


class SelectMode(str, Enum):
    """Which cue tags of a cue table end up in the cue list."""

    ALL = "all"
    DMX = "dmx"
    STANDARD = "standard"


@dataclass(frozen=True)
class LxCue:
    """A cue to create on the lighting console."""

    number: Decimal
    label: str = ""
    notes: str = ""
    dmx_format: bool = False


def extract_cues(table: CueTable, select: SelectMode = SelectMode.ALL) -> list[LxCue]:
    """Collect the cues tagged ``CUE <number>`` in a cue table.

    Numbers in ``XX.YY.ZZ`` form are DMX cue numbers and are converted to
    their cue value. Other numbers are used as they are. Cues are returned
    sorted by number; a repeated number keeps its first occurrence.
    """
    cues: dict[Decimal, LxCue] = {}

    for entry in table.entries:
        if not entry.tag:
            continue
        match = _CUE_TAG_RE.match(entry.tag.strip())
        if match is None:
            continue

        text = match.group(1)
        dmx_format = DmxCueNumber.is_dmx_format(text)
        if select is SelectMode.DMX and not dmx_format:
            continue
        if select is SelectMode.STANDARD and dmx_format:
            continue

        if dmx_format:
            number = DmxCueNumber.parse(text).value
        else:
            try:
                number = Decimal(text)
            except InvalidOperation:
                logger.warning("Skipping beat %d: invalid cue number %r", entry.beat, text)
                continue

        if number in cues:
            logger.warning("Skipping beat %d: duplicate cue %s", entry.beat, format_cue_number(number))
            continue

        cues[number] = LxCue(
            number=number,
            label=entry.note or "",
            notes=entry.track_time or "",
            dmx_format=dmx_format,
        )

    return [cues[number] for number in sorted(cues)]


def format_cue_number(number: Decimal) -> str:
    """Format a cue number without exponent or trailing zeros."""
    return format(number.normalize(), "f")


def write_eos_csv(cues: list[LxCue], path: Path, list_number: int = 1) -> None:
    """Write cues as an ETC Eos CSV import file."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\r\n")
        writer.writerow(["START_TARGETS"])
        writer.writerow(EOS_COLUMNS)
        for cue in cues:
            writer.writerow([
                EOS_CUE_TARGET_TYPE,
                "Cue",
                list_number,
                format_cue_number(cue.number),
                cue.label,
                cue.notes,
            ])
        writer.writerow(["END_TARGETS"])


def convert_cue_table(
    table: CueTable,
    output_path: Path,
    fmt: CueListFormat = CueListFormat.EOS_CSV,
    select: SelectMode = SelectMode.ALL,
    list_number: int = 1,
) -> int:
    """Write the cue list for a cue table and return the number of cues."""
    cues = extract_cues(table, select)
    if fmt is CueListFormat.EOS_CSV:
        write_eos_csv(cues, output_path, list_number)
    logger.info(
        "Wrote %d cues from '%s' to %s", len(cues), table.track_name, output_path
    )
    return len(cues)
