"""
Image resources section structure. Image resources are used to store non-pixel
data associated with images, such as pen tool paths or slices.

See :py:class:`~psd_lite.constants.Resource` to check available
resource names. Resource payloads are kept as plain bytes.

Example::

    from psd_lite.constants import Resource

    xmp = psd.image_resources.get_data(Resource.XMP_METADATA)
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar

from attrs import define, field

from psd_lite.constants import Resource
from psd_lite.errors import InvalidFieldError, MagicMismatchError, SizeInvariantError
from psd_lite.psd.base import BaseElement, ListElement
from psd_lite.psd.bin_utils import (
    padded_size,
    read_bytes,
    read_fmt,
    skip_bytes,
    trimmed_repr,
    write_bytes,
    write_fmt,
)
from psd_lite.validators import in_

logger = logging.getLogger(__name__)

T_ImageResources = TypeVar("T_ImageResources", bound="ImageResources")
T_ImageResource = TypeVar("T_ImageResource", bound="ImageResource")


@define(repr=False)
class ImageResources(ListElement):
    """
    Image resources section of the PSD file. List of
    :py:class:`.ImageResource` in file order.
    """

    def get(self, key: Any, default: Any = None) -> Optional["ImageResource"]:
        """
        Get the first resource block with the given id.
        """
        key = getattr(key, "value", key)
        for item in self:
            if getattr(item.key, "value", item.key) == key:
                return item
        return default

    def get_data(self, key: Any, default: Any = None) -> Any:
        """
        Get data from the image resources.

        Shortcut for the following::

            if key in image_resources:
                value = image_resources.get(key).data
        """
        item = self.get(key)
        if item is None:
            return default
        return item.data

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    @classmethod
    def read(
        cls: type[T_ImageResources],
        fp: BinaryIO,
        **kwargs: Any,
    ) -> T_ImageResources:
        length = read_fmt("I", fp)[0]
        start_pos = fp.tell()
        logger.debug(
            "reading image resources, len=%d, offset=%d" % (length, start_pos)
        )
        items = []
        while fp.tell() - start_pos < length:
            items.append(ImageResource.read(fp))
        if fp.tell() - start_pos != length:
            raise SizeInvariantError(
                "Image resources overrun the section: read=%d, expected=%d"
                % (fp.tell() - start_pos, length),
                offset=fp.tell(),
            )
        return cls(items)  # type: ignore[arg-type]

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        length = self.size()
        logger.debug("writing image resources, len=%d" % (length))
        written = write_fmt(fp, "I", length)
        written += sum(item.write(fp) for item in self)
        return written


@define(repr=False)
class ImageResource(BaseElement):
    """
    Image resource block.

    .. py:attribute:: signature

        Binary signature, always ``b'8BIM'``.

    .. py:attribute:: key

        Unique identifier for the resource. See
        :py:class:`~psd_lite.constants.Resource`. Unknown ids stay `int`.

    .. py:attribute:: name

        Raw Pascal string name, usually empty.

    .. py:attribute:: data

        The resource data.
    """

    signature: bytes = field(default=b"8BIM", repr=False, validator=in_((b"8BIM",)))
    key: int = 1000
    name: bytes = b""
    data: bytes = field(default=b"", repr=False)

    def __repr__(self) -> str:
        return "ImageResource(key=%r, name=%r, data=%s)" % (
            self.key,
            self.name,
            trimmed_repr(self.data),
        )

    def size(self) -> int:
        """
        Byte size of the block including the signature and paddings.
        """
        return self._block_size(len(self.name), len(self.data))

    @staticmethod
    def _block_size(name_length: int, data_length: int) -> int:
        return (
            4 + 2 + padded_size(1 + name_length, 2) + 4 + padded_size(data_length, 2)
        )

    @classmethod
    def read(
        cls: type[T_ImageResource],
        fp: BinaryIO,
        **kwargs: Any,
    ) -> T_ImageResource:
        start_pos = fp.tell()
        signature = read_fmt("4s", fp)[0]
        if signature != b"8BIM":
            raise MagicMismatchError(
                "Invalid image resource block signature: %r" % (signature),
                offset=start_pos,
            )

        key, name_length = read_fmt("HB", fp)
        try:
            key = Resource(key)
        except ValueError:
            if Resource.is_path_info(key):
                logger.debug("Undefined PATH_INFO found: %d" % (key))
            elif Resource.is_plugin_resource(key):
                logger.debug("Undefined PLUGIN_RESOURCE found: %d" % (key))
            else:
                logger.info("Unknown image resource %d" % (key))

        name = read_bytes(fp, name_length)
        # The length byte itself makes an even name odd-sized.
        if name_length % 2 == 0:
            skip_bytes(fp, 1)

        data_length = read_fmt("I", fp)[0]
        data = read_bytes(fp, data_length)
        if data_length % 2 == 1:
            skip_bytes(fp, 1)

        self = cls(signature, key, name, data)
        logger.debug(
            "read image resource %r, name=%r, len=%d" % (key, name, data_length)
        )
        expected = self._block_size(name_length, data_length)
        if fp.tell() - start_pos != expected:
            raise SizeInvariantError(
                "Image resource %r: read=%d, size=%d"
                % (key, fp.tell() - start_pos, expected),
                offset=start_pos,
            )
        return self

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        name = self.name
        if len(name) > 255:
            raise InvalidFieldError(
                "Image resource name is too long: %d bytes" % len(name),
                offset=fp.tell(),
            )
        written = write_fmt(
            fp, "4sHB", b"8BIM", getattr(self.key, "value", self.key), len(name)
        )
        written += write_bytes(fp, name)
        if len(name) % 2 == 0:
            written += write_fmt(fp, "x")

        written += write_fmt(fp, "I", len(self.data))
        written += write_bytes(fp, self.data)
        if len(self.data) % 2 == 1:
            written += write_fmt(fp, "x")

        if written != self.size():
            raise SizeInvariantError(
                "Image resource %r: written=%d, size=%d"
                % (self.key, written, self.size()),
                offset=fp.tell(),
            )
        return written
