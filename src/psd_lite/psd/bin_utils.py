"""
Binary processing utilities.

All multi-byte values in a PSD file are big-endian. The stream helpers
prefix every struct format with ``>`` so they read the same on any host.
"""

import struct
from typing import Any, BinaryIO, Callable

from psd_lite.errors import SizeInvariantError, TruncatedDataError


def be_int_from_bytes(data: bytes, signed: bool = False) -> int:
    """
    Interprets ``data`` as a most-significant-byte-first integer.
    """
    return int.from_bytes(data, "big", signed=signed)


def be_int_to_bytes(value: int, width: int, signed: bool = False) -> bytes:
    """
    Serializes ``value`` into ``width`` most-significant-byte-first bytes.
    """
    return value.to_bytes(width, "big", signed=signed)


def pack(fmt: str, *args: Any) -> bytes:
    fmt = ">" + fmt
    return struct.pack(fmt, *args)


def padded_size(size: int, align: int) -> int:
    """
    Returns the smallest multiple of ``align`` that is not less than ``size``.
    """
    return (size + align - 1) // align * align


def read_bytes(fp: BinaryIO, size: int) -> bytes:
    """
    Reads exactly ``size`` bytes from ``fp``.

    :raise TruncatedDataError: when the stream ends early.
    """
    offset = fp.tell()
    data = fp.read(size)
    if len(data) != size:
        raise TruncatedDataError(
            "expected %d bytes, got %d" % (size, len(data)), offset=offset
        )
    return data


def write_bytes(fp: BinaryIO, data: bytes) -> int:
    """
    Write bytes to the file object and returns bytes written.

    :return: written byte size
    """
    assert isinstance(data, bytes), type(data)
    written = fp.write(data)
    assert written == len(data)
    return written


def skip_bytes(fp: BinaryIO, size: int) -> int:
    """
    Skips ``size`` padding bytes. Skipping past the end of the stream is a
    truncation.

    :return: skipped byte size
    """
    if size:
        read_bytes(fp, size)
    return size


def read_fmt(fmt: str, fp: BinaryIO) -> tuple:
    """
    Reads data from ``fp`` according to ``fmt``.
    """
    fmt = ">" + fmt
    return struct.unpack(fmt, read_bytes(fp, struct.calcsize(fmt)))


def write_fmt(fp: BinaryIO, fmt: str, *args: Any) -> int:
    """
    Writes data to ``fp`` according to ``fmt``.
    """
    fmt = ">" + fmt
    fmt_size = struct.calcsize(fmt)
    written = write_bytes(fp, struct.pack(fmt, *args))
    assert written == fmt_size, "written=%d, expected=%d" % (written, fmt_size)
    return written


def read_length_block(fp: BinaryIO, fmt: str = "I") -> bytes:
    """
    Read a block of data with a length marker at the beginning.

    :param fp: file-like
    :param fmt: format of the length marker
    :return: bytes object
    """
    length = read_fmt(fmt, fp)[0]
    return read_bytes(fp, length)


def write_length_block(
    fp: BinaryIO, writer: Callable[[BinaryIO], int], fmt: str = "I"
) -> int:
    """
    Writes a block of data with a length marker at the beginning.

    Example::

        with io.BytesIO() as fp:
            write_length_block(fp, lambda f: f.write(b'\\x00\\x00'))

    :param fp: file-like
    :param writer: function object that takes file-like object as an argument
    :param fmt: format of the length marker
    :return: written byte size
    """
    length_position = reserve_position(fp, fmt)
    start_position = fp.tell()
    written = writer(fp)
    if fp.tell() - start_position != written:
        raise SizeInvariantError(
            "block writer reported %d bytes, wrote %d"
            % (written, fp.tell() - start_position),
            offset=start_position,
        )
    written += write_position(fp, length_position, written, fmt)
    return written


def reserve_position(fp: BinaryIO, fmt: str = "I") -> int:
    """
    Reserves the current position for write.

    Use with `write_position`.

    :param fp: file-like object
    :param fmt: format of the reserved position
    :return: the position
    """
    position = fp.tell()
    fp.seek(struct.calcsize(">" + fmt), 1)
    return position


def write_position(fp: BinaryIO, position: int, value: int, fmt: str = "I") -> int:
    """
    Writes a value to the specified position.

    :param fp: file-like object
    :param position: position of the value marker
    :param value: value to write
    :param fmt: format of the value
    :return: written byte size
    """
    current_position = fp.tell()
    fp.seek(position)
    written = write_bytes(fp, pack(fmt, value))
    fp.seek(current_position)
    return written


def is_readable(fp: BinaryIO, size: int = 1) -> bool:
    """
    Check if the file-like object is readable.

    :param fp: file-like object
    :param size: byte size
    :return: bool
    """
    read_size = len(fp.read(size))
    fp.seek(-read_size, 1)
    return read_size == size


def trimmed_repr(data: Any, trim_length: int = 16) -> str:
    if isinstance(data, bytes):
        if len(data) > trim_length:
            return repr(
                data[:trim_length] + b" ... =" + str(len(data)).encode("ascii")
            )
    return repr(data)
