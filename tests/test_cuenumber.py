"""Tests for the DMX cue number value type."""

from __future__ import annotations

from decimal import Decimal

import pytest

from disguisetool.cuenumber import DmxCueNumber


def test_parts_and_string_form() -> None:
    number = DmxCueNumber(1, 2, 3)
    assert (number.x, number.y, number.z) == (1, 2, 3)
    assert str(number) == "01.02.03"


def test_value() -> None:
    assert DmxCueNumber(1, 2, 3).value == Decimal("102.03")
    assert DmxCueNumber(0, 5).value == Decimal("5")
    assert DmxCueNumber(99, 99, 99).value == Decimal("9999.99")


@pytest.mark.parametrize("parts", [(-1, 0, 0), (100, 0, 0), (0, 100, 0), (0, 0, 100)])
def test_parts_out_of_range(parts: tuple[int, int, int]) -> None:
    with pytest.raises(ValueError, match="between 0 and 99"):
        DmxCueNumber(*parts)


def test_from_cue_splits_whole_number() -> None:
    number = DmxCueNumber.from_cue(1234, 5)
    assert number == DmxCueNumber(12, 34, 5)
    assert number.value == Decimal("1234.05")


@pytest.mark.parametrize(("cue", "fractional"), [(10000, 0), (-1, 0), (5, 100), (5, -1)])
def test_from_cue_out_of_range(cue: int, fractional: int) -> None:
    with pytest.raises(ValueError):
        DmxCueNumber.from_cue(cue, fractional)


def test_parse() -> None:
    assert DmxCueNumber.parse("12.34.56") == DmxCueNumber(12, 34, 56)
    assert DmxCueNumber.parse(" 00.01.00 ") == DmxCueNumber(0, 1, 0)


@pytest.mark.parametrize("text", ["1.2.3", "12.34", "12.34.56.78", "ab.cd.ef", ""])
def test_parse_rejects_other_formats(text: str) -> None:
    with pytest.raises(ValueError, match="XX.YY.ZZ"):
        DmxCueNumber.parse(text)
    assert not DmxCueNumber.is_dmx_format(text)


def test_ordering_follows_value() -> None:
    numbers = [DmxCueNumber(1, 0, 0), DmxCueNumber(0, 99, 99), DmxCueNumber(0, 99, 1)]
    assert sorted(numbers) == [DmxCueNumber(0, 99, 1), DmxCueNumber(0, 99, 99), DmxCueNumber(1, 0, 0)]
    assert DmxCueNumber(0, 1) < DmxCueNumber(0, 1, 1)
    assert DmxCueNumber(2, 0) >= DmxCueNumber(1, 99, 99)


def test_hashable_and_frozen() -> None:
    number = DmxCueNumber(1, 2, 3)
    assert {number, DmxCueNumber(1, 2, 3)} == {number}
    with pytest.raises(AttributeError):
        number.x = 5  # type: ignore[misc]
