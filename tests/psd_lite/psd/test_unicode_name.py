from typing import List

import pytest

from psd_lite.errors import TruncatedDataError
from psd_lite.psd.unicode_name import (
    decode_luni_name,
    read_luni_units,
    units_to_str,
    units_to_utf8,
    widen,
)

from ..utils import luni_data


@pytest.mark.parametrize(
    "units, expected",
    [
        ([], b""),
        ([0x41, 0x42], b"AB"),
        ([0x7F], b"\x7f"),
        ([0x80], b"\xc2\x80"),
        ([0xE9], b"\xc3\xa9"),
        ([0x7FF], b"\xdf\xbf"),
        ([0x800], b"\xe0\xa0\x80"),
        ([0x3042], b"\xe3\x81\x82"),
        ([0xFFFF], b"\xef\xbf\xbf"),
    ],
)
def test_units_to_utf8(units: List[int], expected: bytes) -> None:
    assert units_to_utf8(units) == expected


def test_units_to_utf8_surrogate_halves() -> None:
    units = read_luni_units(luni_data("\U0001f600"))
    assert units == [0xD83D, 0xDE00]
    assert units_to_utf8(units) == b"\xed\xa0\xbd\xed\xb8\x80"
    assert units_to_str(units) == "\U0001f600"


@pytest.mark.parametrize("text", ["", "Layer 1", "Calque été", "レイヤ"])
def test_decode_luni_name(text: str) -> None:
    units, utf8 = decode_luni_name(luni_data(text))
    assert units_to_str(units) == text
    assert utf8 == text.encode("utf-8")


def test_read_luni_units_ignores_trailing_bytes() -> None:
    assert read_luni_units(b"\x00\x00\x00\x01\x00A\x00\x00") == [0x41]


@pytest.mark.parametrize(
    "data",
    [b"", b"\x00\x00\x00", b"\x00\x00\x00\x02\x00A", b"\x00\x00\x00\x01\x00"],
)
def test_read_luni_units_truncated(data: bytes) -> None:
    with pytest.raises(TruncatedDataError):
        read_luni_units(data)


def test_widen() -> None:
    assert widen(b"A\xe9") == [0x41, 0xE9]
    assert units_to_utf8(widen(b"\xe9")) == b"\xc3\xa9"
