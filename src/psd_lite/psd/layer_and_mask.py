"""
Layer and mask data structures.

This module implements the low-level binary structures for PSD layers and masks,
corresponding to the "Layer and Mask Information" section of PSD files.

Key classes:

- :py:class:`LayerAndMaskInformation`: Top-level container for all layer data
- :py:class:`LayerInfo`: Contains layer records and the merged alpha flag
- :py:class:`LayerRecords`: List of individual layer records
- :py:class:`LayerRecord`: Single layer metadata (name, bounds, blend mode, etc.)
- :py:class:`ChannelInfo`: Channel metadata within a layer record
- :py:class:`LayerMask`: Layer mask rectangle and the opaque mask tail
- :py:class:`LayerBlendingRanges`: Opaque blending ranges
- :py:class:`~psd_lite.psd.tagged_blocks.TaggedBlocks`: Extended layer metadata

Each layer record contains:

1. **Metadata**: Rectangle bounds, blend mode, opacity, flags
2. **Channel info**: List of channels (R, G, B, A, masks, etc.) with byte sizes
3. **Mask and blend ranges**
4. **Layer name**: Pascal string padded to 4 bytes
5. **Tagged blocks**: Extended metadata in key-value format

Channel image data following the layer records and the global layer mask
info are not decoded; they are kept as bytes so the section can be written
back.

Example of reading layer metadata::

    from psd_lite.psd import PSD

    with open('file.psd', 'rb') as f:
        psd = PSD.read(f)

    layer_info = psd.layer_and_mask_information.layer_info
    for record in layer_info.layer_records:
        print(f"Layer: {record.unicode_name}")
        print(f"  Bounds: {record.top}, {record.left}, {record.bottom}, {record.right}")
        print(f"  Blend mode: {record.blend_mode}")
        print(f"  Channels: {len(record.channel_info)}")
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar

from attrs import astuple, define, field

from psd_lite.constants import BlendMode, Clipping, Tag
from psd_lite.errors import (
    InvalidFieldError,
    MagicMismatchError,
    PSDError,
    SizeInvariantError,
)
from psd_lite.psd.base import BaseElement, ListElement
from psd_lite.psd.bin_utils import (
    read_bytes,
    read_fmt,
    read_length_block,
    skip_bytes,
    write_bytes,
    write_fmt,
    write_length_block,
)
from psd_lite.psd.tagged_blocks import TaggedBlocks
from psd_lite.psd.unicode_name import units_to_str, widen
from psd_lite.validators import in_, range_

logger = logging.getLogger(__name__)

T_LayerAndMaskInformation = TypeVar(
    "T_LayerAndMaskInformation", bound="LayerAndMaskInformation"
)
T_LayerInfo = TypeVar("T_LayerInfo", bound="LayerInfo")
T_ChannelInfo = TypeVar("T_ChannelInfo", bound="ChannelInfo")
T_LayerMask = TypeVar("T_LayerMask", bound="LayerMask")
T_LayerBlendingRanges = TypeVar("T_LayerBlendingRanges", bound="LayerBlendingRanges")
T_LayerRecords = TypeVar("T_LayerRecords", bound="LayerRecords")
T_LayerRecord = TypeVar("T_LayerRecord", bound="LayerRecord")

def _convert_blend_mode(value: Any) -> Any:
    if isinstance(value, BlendMode):
        return value
    try:
        return BlendMode(value)
    except ValueError:
        logger.info("Unknown blend mode: %r" % (value,))
        return value


def _convert_clipping(value: Any) -> Any:
    if isinstance(value, Clipping):
        return value
    try:
        return Clipping(value)
    except ValueError:
        logger.info("Unknown clipping: %r" % (value,))
        return value


# Padding after a layer name keyed by ``len(name) % 4``, so that the length
# byte, the name and the padding add up to a multiple of 4.
_NAME_PADDING = (3, 2, 1, 0)


@define(repr=False)
class LayerAndMaskInformation(BaseElement):
    """
    Layer and mask information section.

    .. py:attribute:: layer_info

        See :py:class:`.LayerInfo`, or `None` when the section is empty.

    .. py:attribute:: global_mask_info

        Bytes following the layer info up to the end of the section: global
        layer mask info, global tagged blocks and padding. Not decoded.
    """

    layer_info: Optional["LayerInfo"] = None
    global_mask_info: bytes = field(default=b"", repr=False)

    @classmethod
    def read(
        cls: type[T_LayerAndMaskInformation], fp: BinaryIO, **kwargs: Any
    ) -> T_LayerAndMaskInformation:
        start_pos = fp.tell()
        length = read_fmt("I", fp)[0]
        end_pos = fp.tell() + length
        logger.debug(
            "reading layer and mask info, len=%d, offset=%d" % (length, start_pos)
        )
        if length == 0:
            return cls()

        layer_info = LayerInfo.read(fp)
        if fp.tell() > end_pos:
            raise SizeInvariantError(
                "LayerAndMaskInformation is broken: current fp=%d, expected=%d"
                % (fp.tell(), end_pos),
                offset=fp.tell(),
            )
        global_mask_info = read_bytes(fp, end_pos - fp.tell())
        logger.debug("  skipped global mask info, len=%d" % len(global_mask_info))
        return cls(layer_info, global_mask_info)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        if self.layer_info is None and not self.global_mask_info:
            return write_fmt(fp, "I", 0)

        def writer(f: BinaryIO) -> int:
            written = 0
            if self.layer_info is not None:
                written += self.layer_info.write(f)
            written += write_bytes(f, self.global_mask_info)
            logger.debug("writing layer and mask info, len=%d" % (written))
            return written

        return write_length_block(fp, writer)


@define(repr=False)
class LayerInfo(BaseElement):
    """
    High-level organization of the layer information.

    The layer count is stored as a signed 16-bit value. If it is negative,
    its absolute value is the number of layers and the first alpha channel
    contains the transparency data for the merged result.

    .. py:attribute:: layer_records

        Information about each layer. See :py:class:`.LayerRecords`.

    .. py:attribute:: has_merged_alpha

        Whether the merged result has an alpha channel.

    .. py:attribute:: channel_image_data

        Compressed channel image data of all layers, not decoded.
    """

    layer_records: "LayerRecords" = field(
        factory=lambda: LayerRecords(), converter=lambda x: LayerRecords(x)
    )
    has_merged_alpha: bool = False
    channel_image_data: bytes = field(default=b"", repr=False)

    @property
    def layer_count(self) -> int:
        """Number of layer records."""
        return len(self.layer_records)

    @classmethod
    def read(cls: type[T_LayerInfo], fp: BinaryIO, **kwargs: Any) -> T_LayerInfo:
        length = read_fmt("I", fp)[0]
        logger.debug("reading layer info, len=%d" % length)
        end_pos = fp.tell() + length
        if length == 0:
            return cls()

        start_pos = fp.tell()
        layer_count = read_fmt("h", fp)[0]
        has_merged_alpha = layer_count < 0
        layer_records = LayerRecords.read(fp, abs(layer_count))
        logger.debug(
            "  read layer records, count=%d, merged alpha=%r, len=%d"
            % (abs(layer_count), has_merged_alpha, fp.tell() - start_pos)
        )
        if fp.tell() > end_pos:
            raise SizeInvariantError(
                "Layer records overrun the layer info: current fp=%d, expected=%d"
                % (fp.tell(), end_pos),
                offset=fp.tell(),
            )
        channel_image_data = read_bytes(fp, end_pos - fp.tell())
        return cls(layer_records, has_merged_alpha, channel_image_data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        if self.has_merged_alpha and not self.layer_records:
            # Merged alpha is stored as the sign of the layer count.
            raise InvalidFieldError(
                "Merged alpha needs at least one layer record", offset=fp.tell()
            )
        if not self.layer_records and not self.channel_image_data:
            return write_fmt(fp, "I", 0)

        def writer(f: BinaryIO) -> int:
            layer_count = len(self.layer_records)
            if self.has_merged_alpha:
                layer_count = -layer_count
            written = write_fmt(f, "h", layer_count)
            written += self.layer_records.write(f)
            written += write_bytes(f, self.channel_image_data)
            logger.debug("writing layer info, len=%d" % (written))
            return written

        return write_length_block(fp, writer)


@define(repr=False)
class ChannelInfo(BaseElement):
    """
    Channel information.

    .. py:attribute:: id

        Channel ID: 0 = red, 1 = green, etc.; -1 = transparency mask; -2 =
        user supplied layer mask, -3 real user supplied layer mask (when both
        a user mask and a vector mask are present).

    .. py:attribute:: length

        Length of the corresponding channel data.
    """

    id: int = 0
    length: int = 0

    @classmethod
    def read(cls: type[T_ChannelInfo], fp: BinaryIO, **kwargs: Any) -> T_ChannelInfo:
        return cls(*read_fmt("hI", fp))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "hI", *astuple(self))


@define(repr=False)
class LayerMask(BaseElement):
    """
    Layer mask data.

    A zero length prefix means the layer has no mask; :py:meth:`read` then
    returns `None`. Otherwise the body starts with the mask rectangle, the
    default color and the flags, followed by an opaque tail.

    .. py:attribute:: top
    .. py:attribute:: left
    .. py:attribute:: bottom
    .. py:attribute:: right
    .. py:attribute:: default_color

        0 or 255.

    .. py:attribute:: flags
    .. py:attribute:: data

        Remaining mask bytes (real mask rectangle, mask parameters, padding).
    """

    _FORMAT = "4iBB"
    FIXED_SIZE = 4 * 4 + 2

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    default_color: int = field(default=0, validator=range_(0, 255))
    flags: int = field(default=0, validator=range_(0, 255))
    data: bytes = field(default=b"", repr=False)

    def size(self) -> int:
        return 4 + self.FIXED_SIZE + len(self.data)

    @classmethod
    def read(
        cls: type[T_LayerMask], fp: BinaryIO, **kwargs: Any
    ) -> Optional[T_LayerMask]:
        offset = fp.tell()
        length = read_fmt("I", fp)[0]
        logger.debug("  reading mask, len=%d" % length)
        if length == 0:
            return None
        if length < cls.FIXED_SIZE:
            raise SizeInvariantError(
                "Layer mask is too small: len=%d, minimum=%d"
                % (length, cls.FIXED_SIZE),
                offset=offset,
            )
        values = read_fmt(cls._FORMAT, fp)
        data = read_bytes(fp, length - cls.FIXED_SIZE)
        return cls(*values, data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = write_fmt(fp, "I", self.FIXED_SIZE + len(self.data))
        written += write_fmt(fp, self._FORMAT, *astuple(self)[:6])
        written += write_bytes(fp, self.data)
        return written


@define(repr=False)
class LayerBlendingRanges(BaseElement):
    """
    Layer blending ranges.

    .. py:attribute:: data

        Composite and per-channel source and destination ranges, not decoded.
    """

    data: bytes = field(default=b"", repr=False)

    def size(self) -> int:
        return 4 + len(self.data)

    @classmethod
    def read(
        cls: type[T_LayerBlendingRanges], fp: BinaryIO, **kwargs: Any
    ) -> T_LayerBlendingRanges:
        data = read_length_block(fp)
        logger.debug("  read blending ranges, len=%d" % len(data))
        return cls(data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = write_fmt(fp, "I", len(self.data))
        written += write_bytes(fp, self.data)
        return written


class LayerRecords(ListElement):
    """
    List of layer records. See :py:class:`.LayerRecord`.
    """

    @classmethod
    def read(  # type: ignore[override]
        cls: type[T_LayerRecords],
        fp: BinaryIO,
        layer_count: int,
        **kwargs: Any,
    ) -> T_LayerRecords:
        items = []
        for index in range(layer_count):
            logger.debug("  reading layer %d" % index)
            items.append(LayerRecord.read(fp))
        return cls(items)  # type: ignore[arg-type]


@define(repr=False)
class LayerRecord(BaseElement):
    """
    Layer record.

    .. py:attribute:: top

        Top position.

    .. py:attribute:: left

        Left position.

    .. py:attribute:: bottom

        Bottom position.

    .. py:attribute:: right

        Right position.

    .. py:attribute:: channel_info

        List of :py:class:`.ChannelInfo`.

    .. py:attribute:: signature

        Blend mode signature ``b'8BIM'``.

    .. py:attribute:: blend_mode

        Blend mode key. See :py:class:`~psd_lite.constants.BlendMode`.
        Unknown keys stay `bytes`.

    .. py:attribute:: opacity

        Opacity, 0 = transparent, 255 = opaque.

    .. py:attribute:: clipping

        Clipping, 0 = base, 1 = non-base. See
        :py:class:`~psd_lite.constants.Clipping`. Unknown values stay `int`.

    .. py:attribute:: flags

        Layer flag bits: 1 = transparency protected, 2 = hidden, etc.

    .. py:attribute:: mask_data

        :py:class:`.LayerMask` or None.

    .. py:attribute:: blending_ranges

        See :py:class:`.LayerBlendingRanges`.

    .. py:attribute:: name

        Raw Pascal string name. Prefer :py:attr:`unicode_name`.

    .. py:attribute:: tagged_blocks

        See :py:class:`~psd_lite.psd.tagged_blocks.TaggedBlocks`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    channel_info: list[ChannelInfo] = field(factory=list)
    signature: bytes = field(default=b"8BIM", repr=False, validator=in_((b"8BIM",)))
    blend_mode: Any = field(default=BlendMode.NORMAL, converter=_convert_blend_mode)
    opacity: int = field(default=255, validator=range_(0, 255))
    clipping: Any = field(default=Clipping.BASE, converter=_convert_clipping)
    flags: int = field(default=0, validator=range_(0, 255))
    mask_data: Optional[LayerMask] = None
    blending_ranges: LayerBlendingRanges = field(factory=LayerBlendingRanges)
    name: bytes = field(default=b"")
    tagged_blocks: TaggedBlocks = field(factory=TaggedBlocks, converter=TaggedBlocks)

    @name.validator
    def _validate_name(self, attribute: Any, value: bytes) -> None:
        if len(value) > 255:
            raise InvalidFieldError("Layer name is too long: %d bytes" % len(value))

    @classmethod
    def read(cls: type[T_LayerRecord], fp: BinaryIO, **kwargs: Any) -> T_LayerRecord:
        start_pos = fp.tell()
        top, left, bottom, right, num_channels = read_fmt("4iH", fp)
        channel_info = [ChannelInfo.read(fp) for i in range(num_channels)]

        blend_pos = fp.tell()
        signature, blend_mode, opacity, clipping, flags, extra_length = read_fmt(
            "4s4sBBBxI", fp
        )
        if signature != b"8BIM":
            raise MagicMismatchError(
                "Invalid blend mode signature: %r" % (signature), offset=blend_pos
            )

        extra_pos = fp.tell()
        end_pos = extra_pos + extra_length
        mask_data = LayerMask.read(fp)
        blending_ranges = LayerBlendingRanges.read(fp)
        name = cls._read_name(fp)
        tagged_blocks = TaggedBlocks.read(fp, end_pos=end_pos)
        if fp.tell() != end_pos:
            raise SizeInvariantError(
                "Layer extra data overruns its length: read=%d, expected=%d"
                % (fp.tell() - extra_pos, extra_length),
                offset=fp.tell(),
            )

        try:
            self = cls(
                top=top,
                left=left,
                bottom=bottom,
                right=right,
                channel_info=channel_info,
                signature=signature,
                blend_mode=blend_mode,
                opacity=opacity,
                clipping=clipping,
                flags=flags,
                mask_data=mask_data,
                blending_ranges=blending_ranges,
                name=name,
                tagged_blocks=tagged_blocks,
            )
        except PSDError as e:
            if e.offset is None:
                e.offset = blend_pos
            raise

        utf8_name = name
        luni = tagged_blocks.get(Tag.UNICODE_LAYER_NAME)
        if luni is not None:
            try:
                utf8_name = luni.luni_read_name()[1]
            except PSDError as e:
                if e.offset is None:
                    e.offset = extra_pos
                raise
        logger.debug(
            "  read layer record %r, len=%d" % (utf8_name, fp.tell() - start_pos)
        )
        return self

    @staticmethod
    def _read_name(fp: BinaryIO) -> bytes:
        name_length = read_fmt("B", fp)[0]
        name = read_bytes(fp, name_length)
        skip_bytes(fp, _NAME_PADDING[name_length % 4])
        return name

    def _write_name(self, fp: BinaryIO) -> int:
        written = write_fmt(fp, "B", len(self.name))
        written += write_bytes(fp, self.name)
        written += write_bytes(fp, b"\x00" * _NAME_PADDING[len(self.name) % 4])
        return written

    def _name_size(self) -> int:
        return 1 + len(self.name) + _NAME_PADDING[len(self.name) % 4]

    def extra_data_length(self) -> int:
        """
        Byte size of the mask, blending ranges, name and tagged blocks.
        """
        mask_size = 4 if self.mask_data is None else self.mask_data.size()
        return (
            mask_size
            + self.blending_ranges.size()
            + self._name_size()
            + self.tagged_blocks.size()
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        start_pos = fp.tell()
        written = write_fmt(
            fp,
            "4iH",
            self.top,
            self.left,
            self.bottom,
            self.right,
            len(self.channel_info),
        )
        written += sum(c.write(fp) for c in self.channel_info)

        extra_length = self.extra_data_length()
        written += write_fmt(
            fp,
            "4s4sBBBxI",
            self.signature,
            getattr(self.blend_mode, "value", self.blend_mode),
            self.opacity,
            int(self.clipping),
            self.flags,
            extra_length,
        )

        extra_pos = fp.tell()
        if self.mask_data is not None:
            written += self.mask_data.write(fp)
        else:
            written += write_fmt(fp, "I", 0)
        written += self.blending_ranges.write(fp)
        written += self._write_name(fp)
        written += self.tagged_blocks.write(fp)
        if fp.tell() - extra_pos != extra_length:
            raise SizeInvariantError(
                "Layer extra data size mismatch: written=%d, expected=%d"
                % (fp.tell() - extra_pos, extra_length),
                offset=fp.tell(),
            )
        logger.debug("  wrote layer record, len=%d" % (fp.tell() - start_pos))
        return written

    @property
    def wide_name(self) -> list[int]:
        """
        Layer name as UTF-16 code units.

        The last ``luni`` tagged block wins; without one the Pascal string
        bytes are widened one by one.
        """
        block = self.tagged_blocks.get(Tag.UNICODE_LAYER_NAME)
        if block is None:
            return widen(self.name)
        return block.luni_read_name()[0]

    @property
    def utf8_name(self) -> bytes:
        """
        Layer name encoded by :py:func:`~psd_lite.psd.unicode_name.units_to_utf8`,
        or the raw Pascal string when there is no ``luni`` tagged block.
        """
        block = self.tagged_blocks.get(Tag.UNICODE_LAYER_NAME)
        if block is None:
            return self.name
        return block.luni_read_name()[1]

    @property
    def unicode_name(self) -> str:
        """Layer name as `str`."""
        return units_to_str(self.wide_name)

    @property
    def has_text(self) -> bool:
        """Whether the layer has type tool data (``TySh``)."""
        return Tag.TYPE_TOOL_OBJECT_SETTING in self.tagged_blocks

    @property
    def width(self) -> int:
        """Width of the layer."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the layer."""
        return max(self.bottom - self.top, 0)
