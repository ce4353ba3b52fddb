"""DMX cue numbers in disguise's ``XX.YY.ZZ`` notation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

_FORMAT_RE = re.compile(r"(\d\d)\.(\d\d)\.(\d\d)")

CUE_WHOLE_MAX = 9999
CUE_PART_MAX = 99


@dataclass(frozen=True, order=True)
class DmxCueNumber:
    """A DMX cue number made of three parts in the range 0-99.

    The cue value is ``x * 100 + y + z / 100``. Ordering follows that value.
    """

    x: int
    y: int
    z: int = 0

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            part = getattr(self, name)
            if not 0 <= part <= CUE_PART_MAX:
                raise ValueError(
                    f"{name} must be between 0 and {CUE_PART_MAX}, got {part}"
                )

    @classmethod
    def from_cue(cls, cue: int, fractional: int = 0) -> DmxCueNumber:
        """Build from a whole cue number (0-9999) and a fractional part."""
        if not 0 <= cue <= CUE_WHOLE_MAX:
            raise ValueError(f"cue must be between 0 and {CUE_WHOLE_MAX}, got {cue}")
        if not 0 <= fractional <= CUE_PART_MAX:
            raise ValueError(
                f"fractional must be between 0 and {CUE_PART_MAX}, got {fractional}"
            )
        return cls(cue // 100, cue % 100, fractional)

    @classmethod
    def parse(cls, value: str) -> DmxCueNumber:
        """Parse ``XX.YY.ZZ``. Raises ValueError for any other format."""
        match = _FORMAT_RE.fullmatch(value.strip())
        if match is None:
            raise ValueError("DMX cue number must be formatted as XX.YY.ZZ")
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    @classmethod
    def is_dmx_format(cls, value: str) -> bool:
        return _FORMAT_RE.fullmatch(value.strip()) is not None

    @property
    def value(self) -> Decimal:
        return self.x * 100 + self.y + Decimal(self.z) / 100

    def __str__(self) -> str:
        return f"{self.x:02d}.{self.y:02d}.{self.z:02d}"
