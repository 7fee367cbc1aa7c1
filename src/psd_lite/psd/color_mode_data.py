"""
Color mode data structure.
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import define, field

from psd_lite.errors import UnsupportedFeatureError
from psd_lite.psd.base import BaseElement
from psd_lite.psd.bin_utils import read_fmt, write_fmt

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ColorModeData")


@define(repr=True)
class ColorModeData(BaseElement):
    """
    Color mode data section of the PSD file.

    Indexed color and duotone images keep a color table here. Only the empty
    section is supported; a nonzero length is an
    :py:class:`~psd_lite.errors.UnsupportedFeatureError`, which lets callers
    tell a PSD feature this package does not handle apart from a file that
    is not a PSD at all.

    .. py:attribute:: value

        Section payload, always empty.
    """

    value: bytes = field(default=b"")

    @value.validator
    def _validate_value(self, attribute: Any, value: bytes) -> None:
        if value:
            raise UnsupportedFeatureError(
                "Color mode data is not supported, len=%d" % len(value)
            )

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        offset = fp.tell()
        length = read_fmt("I", fp)[0]
        logger.debug("reading color mode data, len=%d" % length)
        if length != 0:
            raise UnsupportedFeatureError(
                "Color mode data is not supported, len=%d" % length, offset=offset
            )
        return cls()

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        logger.debug("writing color mode data, len=%d" % len(self.value))
        return write_fmt(fp, "I", len(self.value))
