"""
Exceptions raised while decoding or encoding PSD structures.

Every decoder in :py:mod:`psd_lite.psd` raises a subclass of
:py:class:`PSDError`. The error records the stream offset where the problem
was detected and, once it crossed a document stage, the name of that stage::

    try:
        psd = PSD.read(f)
    except MagicMismatchError:
        print("not a PSD file")
    except UnsupportedFeatureError as e:
        print("unsupported PSD feature in %s" % e.stage)
"""

from typing import Optional


class PSDError(ValueError):
    """
    Base class of the decoding and encoding errors.

    .. py:attribute:: message
    .. py:attribute:: offset

        Stream position where the error was detected, or `None`.

    .. py:attribute:: stage

        Document stage name, e.g. ``"image_resources"``, or `None`.
    """

    def __init__(
        self, message: str, offset: Optional[int] = None, stage: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.stage = stage

    def __str__(self) -> str:
        context = []
        if self.stage is not None:
            context.append("stage=%s" % self.stage)
        if self.offset is not None:
            context.append("offset=%d" % self.offset)
        if context:
            return "%s (%s)" % (self.message, ", ".join(context))
        return self.message


class MagicMismatchError(PSDError):
    """Signature bytes do not match the expected magic."""


class UnsupportedFeatureError(PSDError):
    """The structure is valid PSD but not handled here."""


class SizeInvariantError(PSDError):
    """Computed size disagrees with the declared or consumed size."""


class TruncatedDataError(PSDError, EOFError):
    """The stream ended before a declared length was satisfied."""


class InvalidFieldError(PSDError):
    """A decoded field is outside of its allowed domain."""


class UnimplementedOperationError(PSDError, NotImplementedError):
    """The element does not implement the requested read or write."""
