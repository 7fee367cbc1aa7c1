import io

import pytest

from psd_lite.errors import SizeInvariantError, TruncatedDataError
from psd_lite.psd.bin_utils import (
    be_int_from_bytes,
    be_int_to_bytes,
    is_readable,
    pack,
    padded_size,
    read_bytes,
    read_fmt,
    read_length_block,
    skip_bytes,
    trimmed_repr,
    write_fmt,
    write_length_block,
)


@pytest.mark.parametrize(
    "data, signed, expected",
    [
        (b"\x01\x02", False, 0x0102),
        (b"\x00\x00\x01\x00", False, 256),
        (b"\xff\xfd", True, -3),
        (b"\xff\xfd", False, 0xFFFD),
        (b"\x80\x00\x00\x00", True, -(2**31)),
    ],
)
def test_be_int(data: bytes, signed: bool, expected: int) -> None:
    assert be_int_from_bytes(data, signed=signed) == expected
    assert be_int_to_bytes(expected, len(data), signed=signed) == data


@pytest.mark.parametrize(
    "size, align, expected",
    [(0, 2, 0), (1, 2, 2), (2, 2, 2), (5, 4, 8), (8, 4, 8)],
)
def test_padded_size(size: int, align: int, expected: int) -> None:
    assert padded_size(size, align) == expected


def test_read_fmt_is_big_endian() -> None:
    with io.BytesIO(b"\x00\x01\x00\x00\x00\x02") as f:
        assert read_fmt("HI", f) == (1, 2)


def test_read_bytes_truncated() -> None:
    with io.BytesIO(b"\x00\x01\x02") as f:
        f.seek(1)
        with pytest.raises(TruncatedDataError) as excinfo:
            read_bytes(f, 4)
    assert excinfo.value.offset == 1


def test_skip_bytes_truncated() -> None:
    with io.BytesIO(b"\x00") as f:
        assert skip_bytes(f, 0) == 0
        with pytest.raises(TruncatedDataError):
            skip_bytes(f, 2)


def test_read_length_block() -> None:
    with io.BytesIO(b"\x00\x00\x00\x02ab" + b"c") as f:
        assert read_length_block(f) == b"ab"
        assert f.tell() == 6


def test_write_length_block() -> None:
    with io.BytesIO() as f:
        written = write_length_block(f, lambda f: write_fmt(f, "H", 7))
        assert written == 6
        assert f.getvalue() == b"\x00\x00\x00\x02\x00\x07"


def test_write_length_block_misreported() -> None:
    with io.BytesIO() as f:
        with pytest.raises(SizeInvariantError):
            write_length_block(f, lambda f: write_fmt(f, "H", 7) + 1)


def test_is_readable() -> None:
    with io.BytesIO(b"\x00\x01") as f:
        assert is_readable(f, 2)
        assert not is_readable(f, 3)
        assert f.tell() == 0


def test_trimmed_repr() -> None:
    assert trimmed_repr(b"ab") == repr(b"ab")
    assert trimmed_repr(b"a" * 20).endswith(" ... =20'")
    assert pack("H", 1) == b"\x00\x01"
