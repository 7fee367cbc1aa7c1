import io
import logging
from typing import Any, Type, TypeVar

from psd_lite.constants import ColorMode
from psd_lite.psd.base import BaseElement
from psd_lite.psd.bin_utils import pack, trimmed_repr

T = TypeVar("T", bound=BaseElement)

logging.basicConfig(level=logging.DEBUG)


def check_write_read(element: T, *args: Any, **kwargs: Any) -> None:
    with io.BytesIO() as f:
        element.write(f, *args, **kwargs)
        f.flush()
        f.seek(0)
        new_element = element.read(f, *args, **kwargs)
    assert element == new_element, "%s vs %s" % (element, new_element)


def check_read_write(cls: Type[T], data: bytes, *args: Any, **kwargs: Any) -> None:
    element = cls.frombytes(data, *args, **kwargs)
    new_data = element.tobytes(*args, **kwargs)
    assert data == new_data, "%s vs %s" % (trimmed_repr(data), trimmed_repr(new_data))


def header_bytes(
    signature: bytes = b"8BPS",
    version: int = 1,
    channels: int = 3,
    height: int = 150,
    width: int = 100,
    depth: int = 8,
    color_mode: int = ColorMode.RGB,
) -> bytes:
    return pack(
        "4sH6xHIIHH", signature, version, channels, height, width, depth, color_mode
    )


def luni_data(text: str) -> bytes:
    encoded = text.encode("utf-16-be")
    return pack("I", len(encoded) // 2) + encoded


def layer_record_bytes(
    name: bytes = b"abcde",
    signature: bytes = b"8BIM",
    blocks: bytes = b"",
    extra_length: Any = None,
) -> bytes:
    """
    Single channel layer record without mask and blending ranges.
    """
    padding = (3, 2, 1, 0)[len(name) % 4]
    extra = (
        pack("I", 0)
        + pack("I", 0)
        + pack("B", len(name))
        + name
        + b"\x00" * padding
        + blocks
    )
    if extra_length is None:
        extra_length = len(extra)
    return (
        pack("4iH", 0, 0, 10, 20, 1)
        + pack("hI", 0, 100)
        + pack("4s4sBBBxI", signature, b"norm", 255, 0, 0, extra_length)
        + extra
    )


def document_bytes(
    header: bytes = b"",
    color_mode: bytes = b"\x00\x00\x00\x00",
    image_resources: bytes = b"\x00\x00\x00\x00",
    layer_and_mask: bytes = b"\x00\x00\x00\x00",
) -> bytes:
    return (header or header_bytes()) + color_mode + image_resources + layer_and_mask


def layer_section_bytes(*records: bytes) -> bytes:
    """
    Layer and mask section holding the given layer records.
    """
    body = pack("h", len(records)) + b"".join(records)
    return pack("I", 4 + len(body)) + pack("I", len(body)) + body
