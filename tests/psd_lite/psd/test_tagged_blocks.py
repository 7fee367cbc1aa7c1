import logging

import pytest

from psd_lite.constants import Tag
from psd_lite.errors import InvalidFieldError, MagicMismatchError, TruncatedDataError
from psd_lite.psd.tagged_blocks import TaggedBlock, TaggedBlocks

from ..utils import check_read_write, check_write_read, luni_data

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "key, data",
    [
        (Tag.LAYER_ID, b"\x00\x00\x00\x01"),
        (Tag.UNICODE_LAYER_NAME, luni_data("Layer")),
        (Tag.TYPE_TOOL_OBJECT_SETTING, b""),
        (b"zzzz", b"\x01\x02"),
    ],
)
def test_tagged_block(key: object, data: bytes) -> None:
    check_write_read(TaggedBlock(key=key, data=data))


def test_tagged_block_key() -> None:
    block = TaggedBlock.frombytes(b"8BIMlyid\x00\x00\x00\x04\x00\x00\x00\x07")
    assert block.key == Tag.LAYER_ID
    assert block.data == b"\x00\x00\x00\x07"

    block = TaggedBlock.frombytes(b"8BIMzzzz\x00\x00\x00\x00")
    assert block.key == b"zzzz"


def test_tagged_block_odd_padding() -> None:
    block = TaggedBlock(key=Tag.LAYER_ID, data=b"\x01\x02\x03")
    assert block.size() == 16
    data = block.tobytes()
    assert data == b"8BIMlyid\x00\x00\x00\x04\x01\x02\x03\x00"
    assert len(data) == block.size()
    assert TaggedBlock.frombytes(data).data == b"\x01\x02\x03\x00"


def test_tagged_block_8b64() -> None:
    fixture = b"8B64luni\x00\x00\x00\x06" + luni_data("A")
    block = TaggedBlock.frombytes(fixture)
    assert block.signature == b"8B64"
    assert block.key == Tag.UNICODE_LAYER_NAME
    assert block.luni_read_name() == ([0x41], b"A")
    check_read_write(TaggedBlock, fixture)


def test_tagged_block_bad_signature() -> None:
    with pytest.raises(MagicMismatchError) as excinfo:
        TaggedBlock.frombytes(b"8BIXlyid\x00\x00\x00\x00")
    assert excinfo.value.offset == 0


def test_tagged_block_truncated() -> None:
    with pytest.raises(TruncatedDataError):
        TaggedBlock.frombytes(b"8BIMlyid\x00\x00\x00\x08\x00\x00")


def test_tagged_blocks() -> None:
    blocks = TaggedBlocks(
        [
            TaggedBlock(key=Tag.UNICODE_LAYER_NAME, data=luni_data("first")),
            TaggedBlock(key=Tag.LAYER_ID, data=b"\x00\x00\x00\x01"),
            TaggedBlock(key=Tag.UNICODE_LAYER_NAME, data=luni_data("last")),
        ]
    )
    check_write_read(blocks)
    assert blocks.keys() == [
        Tag.UNICODE_LAYER_NAME,
        Tag.LAYER_ID,
        Tag.UNICODE_LAYER_NAME,
    ]
    assert blocks.get_data(Tag.UNICODE_LAYER_NAME) == luni_data("last")
    assert blocks.get_data(b"lyid") == b"\x00\x00\x00\x01"
    assert blocks.get_data(Tag.TYPE_TOOL_OBJECT_SETTING) is None
    assert Tag.LAYER_ID in blocks
    assert blocks.size() == len(blocks.tobytes())


def test_tagged_blocks_end_pos() -> None:
    fixture = b"8BIMlyid\x00\x00\x00\x00" + b"8BIMluni\x00\x00\x00\x00"
    blocks = TaggedBlocks.frombytes(fixture, end_pos=12)
    assert len(blocks) == 1
    assert len(TaggedBlocks.frombytes(fixture)) == 2


@pytest.mark.parametrize("key", [b"", b"lyi", b"lyidx", "lyid", None])
def test_tagged_block_invalid_key(key: object) -> None:
    with pytest.raises(InvalidFieldError):
        TaggedBlock(key=key)

    block = TaggedBlock(key=Tag.LAYER_ID)
    with pytest.raises(InvalidFieldError):
        block.key = key
