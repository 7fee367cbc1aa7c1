"""
File header structure.
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import astuple, define, field

from psd_lite.constants import ColorMode
from psd_lite.errors import (
    InvalidFieldError,
    MagicMismatchError,
    PSDError,
    UnsupportedFeatureError,
)
from psd_lite.psd.base import BaseElement
from psd_lite.psd.bin_utils import read_fmt, write_fmt
from psd_lite.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FileHeader")


@define(repr=True)
class FileHeader(BaseElement):
    """
    Header section of the PSD file.

    Example::

        from psd_lite.psd.header import FileHeader
        from psd_lite.constants import ColorMode

        header = FileHeader(channels=2, height=359, width=400, depth=8,
                            color_mode=ColorMode.GRAYSCALE)

    .. py:attribute:: signature

        Signature: always equal to ``b'8BPS'``.

    .. py:attribute:: version

        Version number. Only PSD (1) is supported; PSB (2) is rejected.

    .. py:attribute:: channels

        The number of channels in the image, including any user-defined alpha
        channel.

    .. py:attribute:: height

        The height of the image in pixels.

    .. py:attribute:: width

        The width of the image in pixels.

    .. py:attribute:: depth

        The number of bits per channel.

    .. py:attribute:: color_mode

        The color mode of the file. See
        :py:class:`~psd_lite.constants.ColorMode`
    """

    _FORMAT = "4sH6xHIIHH"
    SIZE = 26

    signature: bytes = field(default=b"8BPS", repr=False)
    version: int = field(default=1)
    channels: int = field(default=4, validator=range_(1, 56))
    height: int = field(default=64, validator=range_(1, 30000))
    width: int = field(default=64, validator=range_(1, 30000))
    depth: int = field(default=8, validator=in_((1, 8, 16, 32)))
    color_mode: ColorMode = field(default=ColorMode.RGB, validator=in_(list(ColorMode)))

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value != b"8BPS":
            raise MagicMismatchError("This is not a PSD file: %r" % (value,))

    @version.validator
    def _validate_version(self, attribute: Any, value: int) -> None:
        if value == 2:
            raise UnsupportedFeatureError("PSB (version 2) is not supported")
        if value != 1:
            raise InvalidFieldError("Unknown version %d" % value)

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        offset = fp.tell()
        signature, version, channels, height, width, depth, color_mode = read_fmt(
            cls._FORMAT, fp
        )
        if signature != b"8BPS":
            raise MagicMismatchError(
                "This is not a PSD file: %r" % (signature,), offset=offset
            )
        try:
            color_mode = ColorMode(color_mode)
        except ValueError:
            raise InvalidFieldError(
                "Unknown color mode %d" % color_mode, offset=offset
            )
        try:
            return cls(signature, version, channels, height, width, depth, color_mode)
        except PSDError as e:
            if e.offset is None:
                e.offset = offset
            raise

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, self._FORMAT, *astuple(self))
