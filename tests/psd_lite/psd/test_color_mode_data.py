import pytest

from psd_lite.errors import TruncatedDataError, UnsupportedFeatureError
from psd_lite.psd.color_mode_data import ColorModeData

from ..utils import check_read_write, check_write_read


def test_color_mode_data_empty() -> None:
    check_read_write(ColorModeData, b"\x00\x00\x00\x00")
    check_write_read(ColorModeData())


def test_color_mode_data_unsupported() -> None:
    with pytest.raises(UnsupportedFeatureError) as excinfo:
        ColorModeData.frombytes(b"\x00\x00\x03\x00" + b"\x00" * 768)
    assert excinfo.value.offset == 0

    with pytest.raises(UnsupportedFeatureError):
        ColorModeData(b"\x00")


def test_color_mode_data_truncated() -> None:
    with pytest.raises(TruncatedDataError):
        ColorModeData.frombytes(b"\x00\x00")
