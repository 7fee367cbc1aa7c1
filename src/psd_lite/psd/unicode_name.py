"""
Unicode layer name (``luni``) transcoding.

The ``luni`` payload is a 32-bit big-endian count followed by that many
16-bit big-endian UTF-16 code units. Code units are converted to UTF-8 one
at a time: surrogate pairs are not combined, so each half is written with
the 3-byte form, and the result is not valid UTF-8 for characters outside
the Basic Multilingual Plane.

Example::

    units, utf8 = decode_luni_name(b"\\x00\\x00\\x00\\x01\\x00\\xe9")
    assert units == [0xE9]
    assert utf8 == b"\\xc3\\xa9"
"""

import array
import logging
import sys
from typing import Iterable

from psd_lite.errors import TruncatedDataError
from psd_lite.psd.bin_utils import be_int_from_bytes, be_int_to_bytes

logger = logging.getLogger(__name__)


def read_luni_units(data: bytes) -> list[int]:
    """
    Reads UTF-16 code units from a ``luni`` payload.

    :raise TruncatedDataError: when the payload is shorter than declared.
    """
    if len(data) < 4:
        raise TruncatedDataError("luni payload has no length field")
    count = be_int_from_bytes(data[:4])
    if len(data) < 4 + count * 2:
        raise TruncatedDataError(
            "luni payload declares %d code units, has %d bytes"
            % (count, len(data) - 4)
        )
    units = array.array("H", data[4 : 4 + count * 2])
    if sys.byteorder == "little":
        units.byteswap()
    return units.tolist()


def widen(name: bytes) -> list[int]:
    """
    Widens each byte of a Pascal string name to one code unit.
    """
    return list(name)


def units_to_utf8(units: Iterable[int]) -> bytes:
    """
    Encodes code units with the 1, 2 and 3-byte UTF-8 forms.
    """
    encoded = bytearray()
    for unit in units:
        if unit < 0x80:
            encoded.append(unit)
        elif unit < 0x800:
            encoded.append(0xC0 | ((unit >> 6) & 0x1F))
            encoded.append(0x80 | (unit & 0x3F))
        else:
            encoded.append(0xE0 | ((unit >> 12) & 0x0F))
            encoded.append(0x80 | ((unit >> 6) & 0x3F))
            encoded.append(0x80 | (unit & 0x3F))
    return bytes(encoded)


def units_to_str(units: Iterable[int]) -> str:
    """
    Decodes code units as UTF-16, combining surrogate pairs.
    """
    data = b"".join(be_int_to_bytes(unit, 2) for unit in units)
    return data.decode("utf-16-be", "replace")


def decode_luni_name(data: bytes) -> tuple[list[int], bytes]:
    """
    Decodes a ``luni`` payload into code units and their UTF-8 bytes.
    """
    units = read_luni_units(data)
    return units, units_to_utf8(units)
