"""
Tagged block data structure.

Tagged blocks, also called additional layer information, are keyed records
at the end of each layer record. The payloads are kept as raw bytes; the
layer record only interprets the ``luni`` (Unicode name) and ``TySh`` (type
tool) keys. See :py:class:`~psd_lite.constants.Tag` for the named keys.
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar

from attrs import define, field

from psd_lite.constants import Tag
from psd_lite.errors import InvalidFieldError, MagicMismatchError
from psd_lite.psd.base import BaseElement, ListElement
from psd_lite.psd.bin_utils import (
    is_readable,
    read_bytes,
    read_fmt,
    trimmed_repr,
    write_bytes,
    write_fmt,
)
from psd_lite.psd.unicode_name import decode_luni_name
from psd_lite.validators import in_

logger = logging.getLogger(__name__)

T_TaggedBlocks = TypeVar("T_TaggedBlocks", bound="TaggedBlocks")
T_TaggedBlock = TypeVar("T_TaggedBlock", bound="TaggedBlock")


def _convert_key(key: Any) -> Any:
    if isinstance(key, Tag):
        return key
    try:
        return Tag(key)
    except ValueError:
        return key


@define(repr=False)
class TaggedBlocks(ListElement):
    """
    List of tagged block items in file order.

    Example::

        from psd_lite.constants import Tag

        # Iterate over keys
        for key in tagged_blocks.keys():
            print(key)

        # Get a field
        value = tagged_blocks.get_data(Tag.LAYER_ID)
    """

    def keys(self) -> list[Any]:
        return [item.key for item in self]

    def get(self, key: Any, default: Any = None) -> Optional["TaggedBlock"]:
        """
        Get the last block with the given key.
        """
        key = getattr(key, "value", key)
        for item in reversed(self._items):
            if getattr(item.key, "value", item.key) == key:
                return item
        return default

    def get_data(self, key: Any, default: Any = None) -> Any:
        """
        Get data from the tagged blocks.

        Shortcut for the following::

            if key in tagged_blocks:
                value = tagged_blocks.get(key).data
        """
        item = self.get(key)
        if item is None:
            return default
        return item.data

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    @classmethod
    def read(
        cls: type[T_TaggedBlocks],
        fp: BinaryIO,
        end_pos: Optional[int] = None,
        **kwargs: Any,
    ) -> T_TaggedBlocks:
        """
        Read blocks back to back until the stream position reaches
        ``end_pos``, or until the end of the stream when it is `None`.
        """
        items = []
        while True:
            if end_pos is None:
                if not is_readable(fp):
                    break
            elif fp.tell() >= end_pos:
                break
            items.append(TaggedBlock.read(fp))
        return cls(items)  # type: ignore[arg-type]


@define(repr=False)
class TaggedBlock(BaseElement):
    """
    Layer tagged block with extra info.

    .. py:attribute:: signature

        ``b'8BIM'`` or ``b'8B64'``. Both use a 32-bit length here.

    .. py:attribute:: key

        4-character code. See :py:class:`~psd_lite.constants.Tag`

    .. py:attribute:: data

        Data.
    """

    _SIGNATURES = (b"8BIM", b"8B64")

    key: Any = field(converter=_convert_key)
    signature: bytes = field(default=b"8BIM", repr=False, validator=in_(_SIGNATURES))
    data: bytes = field(default=b"", repr=True)

    @key.validator
    def _validate_key(self, attribute: Any, value: Any) -> None:
        key = getattr(value, "value", value)
        if not isinstance(key, bytes) or len(key) != 4:
            raise InvalidFieldError("Tagged block key must be 4 bytes: %r" % (key,))

    def __repr__(self) -> str:
        return "TaggedBlock(key=%r, data=%s)" % (self.key, trimmed_repr(self.data))

    def size(self) -> int:
        """
        Byte size of the block as :py:meth:`write` emits it.
        """
        return 12 + len(self.data) + len(self.data) % 2

    @classmethod
    def read(cls: type[T_TaggedBlock], fp: BinaryIO, **kwargs: Any) -> T_TaggedBlock:
        start_pos = fp.tell()
        signature = read_fmt("4s", fp)[0]
        if signature not in cls._SIGNATURES:
            raise MagicMismatchError(
                "Invalid tagged block signature: %r" % (signature),
                offset=start_pos,
            )

        key, length = read_fmt("4sI", fp)
        key = _convert_key(key)
        if not isinstance(key, Tag):
            logger.info("Unknown key: %r" % (key))

        data = read_bytes(fp, length)
        logger.debug("read tagged block %r, %s" % (key, trimmed_repr(data)))
        return cls(key=key, signature=signature, data=data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        # Odd payloads are padded in place and the length covers the pad byte.
        if len(self.data) % 2 == 1:
            self.data = self.data + b"\x00"
        key = getattr(self.key, "value", self.key)
        written = write_fmt(fp, "4s4sI", self.signature, key, len(self.data))
        written += write_bytes(fp, self.data)
        return written

    def luni_read_name(self) -> tuple[list[int], bytes]:
        """
        Decodes the payload as a Unicode layer name.

        :return: tuple of UTF-16 code units and UTF-8 bytes.
        """
        return decode_luni_name(self.data)
