"""
Base data structures intended for inheritance.

Every section and block in :py:mod:`psd_lite.psd` is an attrs_ class
deriving from :py:class:`BaseElement`. A subclass decodes itself from a
stream in :py:meth:`~BaseElement.read` and returns the number of bytes it
emitted from :py:meth:`~BaseElement.write`; byte-level helpers are derived
from those two.

Sequences of blocks that are framed back to back, such as image resources
or tagged blocks, derive from :py:class:`ListElement`.

.. _attrs: https://www.attrs.org/en/stable/index.html
"""

import io
import logging
from typing import Any, BinaryIO, Iterator, TypeVar

from attrs import define, field

from psd_lite.errors import UnimplementedOperationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseElement")


class BaseElement:
    """
    Base element of the PSD file structures.

    .. py:classmethod:: read(cls, fp, **kwargs)

        Decode the element at the current position of ``fp``.

    .. py:method:: write(self, fp, **kwargs)

        Encode the element to ``fp`` and return the written byte size.

    .. py:classmethod:: frombytes(cls, data, *args, **kwargs)

        Decode the element from the start of ``data``.

    .. py:method:: tobytes(self, *args, **kwargs)

        Encode the element to bytes.
    """

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        raise UnimplementedOperationError(
            "%s does not implement read" % cls.__name__, offset=fp.tell()
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        raise UnimplementedOperationError(
            "%s does not implement write" % self.__class__.__name__,
            offset=fp.tell(),
        )

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        with io.BytesIO(data) as f:
            return cls.read(f, *args, **kwargs)

    def tobytes(self, *args: Any, **kwargs: Any) -> bytes:
        with io.BytesIO() as f:
            self.write(f, *args, **kwargs)
            return f.getvalue()


@define(repr=False)
class ListElement(BaseElement):
    """
    Blocks stored back to back, in file order.

    Items are elements that implement ``write`` and ``size``.
    """

    _items: list = field(factory=list, converter=list)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, key: Any) -> Any:
        return self._items[key]

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self._items)

    def size(self) -> int:
        """Sum of the item sizes, without any section length."""
        return sum(item.size() for item in self)

    def write(self, fp: BinaryIO, *args: Any, **kwargs: Any) -> int:
        return sum(item.write(fp, *args, **kwargs) for item in self)
