from typing import Any, Iterator

import pytest

from psd_lite.constants import ColorMode
from psd_lite.errors import (
    InvalidFieldError,
    MagicMismatchError,
    TruncatedDataError,
    UnsupportedFeatureError,
)
from psd_lite.psd.header import FileHeader

from ..utils import check_read_write, check_write_read, header_bytes


@pytest.fixture
def fixture() -> Iterator[bytes]:
    yield (
        b"8BPS\x00\x01\x00\x00\x00\x00\x00\x00\x00\x03\x00\x00\x00\x96\x00"
        b"\x00\x00d\x00\x08\x00\x03"
    )


def test_header_from_to(fixture: bytes) -> None:
    check_read_write(FileHeader, fixture)
    header = FileHeader.frombytes(fixture)
    assert header.channels == 3
    assert header.height == 150
    assert header.width == 100
    assert header.depth == 8
    assert header.color_mode == ColorMode.RGB
    assert len(fixture) == FileHeader.SIZE


def test_header_write_read() -> None:
    check_write_read(
        FileHeader(channels=2, height=359, width=400, color_mode=ColorMode.GRAYSCALE)
    )


def test_header_exception(fixture: bytes) -> None:
    with pytest.raises(MagicMismatchError) as excinfo:
        FileHeader.frombytes(b" " + fixture)
    assert excinfo.value.offset == 0


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"signature": b"8BPX"}, MagicMismatchError),
        ({"version": 2}, UnsupportedFeatureError),
        ({"version": 3}, InvalidFieldError),
        ({"channels": 0}, InvalidFieldError),
        ({"channels": 57}, InvalidFieldError),
        ({"height": 0}, InvalidFieldError),
        ({"width": 30001}, InvalidFieldError),
        ({"depth": 7}, InvalidFieldError),
        ({"color_mode": 5}, InvalidFieldError),
    ],
)
def test_header_invalid(kwargs: Any, error: type) -> None:
    with pytest.raises(error) as excinfo:
        FileHeader.frombytes(header_bytes(**kwargs))
    assert excinfo.value.offset == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"channels": 56, "height": 30000, "width": 30000, "depth": 32},
        {"channels": 1, "height": 1, "width": 1, "depth": 1},
        {"color_mode": ColorMode.LAB},
    ],
)
def test_header_bounds(kwargs: Any) -> None:
    FileHeader.frombytes(header_bytes(**kwargs))


def test_header_truncated(fixture: bytes) -> None:
    with pytest.raises(TruncatedDataError):
        FileHeader.frombytes(fixture[:20])


def test_header_defaults() -> None:
    header = FileHeader()
    assert header.version == 1
    assert len(header.tobytes()) == FileHeader.SIZE
    with pytest.raises(UnsupportedFeatureError):
        FileHeader(version=2)
    with pytest.raises(InvalidFieldError):
        header.version = 0
