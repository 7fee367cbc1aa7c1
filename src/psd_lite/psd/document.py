"""
PSD document structure module.

This module contains the main PSD class that drives the decoding stages of a
PSD file: header, color mode data, image resources, and layer and mask
information. Each stage must succeed before the next one starts.
"""

import contextlib
import logging
from typing import Any, BinaryIO, Iterator, Optional, TypeVar

from attrs import define, field

from psd_lite.errors import InvalidFieldError, PSDError

from .base import BaseElement
from .color_mode_data import ColorModeData
from .header import FileHeader
from .image_resources import ImageResources
from .layer_and_mask import LayerAndMaskInformation, LayerRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PSD")


@define(repr=False)
class PSD(BaseElement):
    """
    Low-level PSD file structure that resembles the specification_.

    .. _specification: https://www.adobe.com/devnet-apps/photoshop/fileformatashtml/

    Example::

        from psd_lite.psd import PSD

        psd = PSD()
        with open(input_file, 'rb') as f:
            if not psd.load(f):
                print(psd.error)

        with open(output_file, 'wb') as f:
            psd.save(f)

    :py:meth:`read` raises the :py:class:`~psd_lite.errors.PSDError` instead
    of recording it.

    :py:meth:`save` only writes the header and the empty color mode section.
    :py:meth:`write_image_resources` and :py:meth:`write_layers_and_masks`
    write the remaining sections when called explicitly.

    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: color_mode_data

        See :py:class:`.ColorModeData`.

    .. py:attribute:: image_resources

        See :py:class:`.ImageResources`.

    .. py:attribute:: layer_and_mask_information

        See :py:class:`.LayerAndMaskInformation`.

    .. py:attribute:: valid

        `True` after all the decoding stages succeeded.

    .. py:attribute:: error

        The :py:class:`~psd_lite.errors.PSDError` of the last failed
        :py:meth:`load`, or `None`.

    .. py:attribute:: logger

        Logger receiving the stage messages. Defaults to the module logger.
    """

    header: FileHeader = field(factory=FileHeader)
    color_mode_data: ColorModeData = field(factory=ColorModeData)
    image_resources: ImageResources = field(factory=ImageResources)
    layer_and_mask_information: LayerAndMaskInformation = field(
        factory=LayerAndMaskInformation
    )
    valid: bool = field(default=False, eq=False)
    error: Optional[PSDError] = field(default=None, eq=False)
    logger: logging.Logger = field(default=logger, eq=False, repr=False)

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        self = cls(**kwargs)
        self._read_stages(fp)
        self.valid = True
        return self

    def load(self, fp: BinaryIO) -> bool:
        """
        Decode all the stages from ``fp``.

        :return: `True` on success. On failure :py:attr:`error` holds the
            exception.
        """
        self.valid = False
        self.error = None
        try:
            self._read_stages(fp)
        except PSDError as e:
            self.logger.error("Failed to load PSD: %s" % e)
            self.error = e
            return False
        self.valid = True
        return True

    def _read_stages(self, fp: BinaryIO) -> None:
        self.read_header(fp)
        self.read_color_mode(fp)
        self.read_image_resources(fp)
        self.read_layers_and_masks(fp)

    def save(self, fp: BinaryIO) -> bool:
        """
        Write the header and the color mode section to ``fp``.

        :return: `True` on success.
        """
        try:
            self.write_header(fp)
            self.write_color_mode(fp)
        except PSDError as e:
            self.logger.error("Failed to save PSD: %s" % e)
            self.error = e
            return False
        return True

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = self.write_header(fp)
        written += self.write_color_mode(fp)
        return written

    @contextlib.contextmanager
    def _stage(self, name: str, fp: BinaryIO) -> Iterator[None]:
        offset = fp.tell()
        self.logger.debug("%s stage at offset %d" % (name, offset))
        try:
            yield
        except PSDError as e:
            if e.stage is None:
                e.stage = name
            if e.offset is None:
                e.offset = offset
            raise
        except ValueError as e:
            raise InvalidFieldError(str(e), offset=offset, stage=name) from e

    def read_header(self, fp: BinaryIO) -> FileHeader:
        with self._stage("header", fp):
            fp.seek(0)
            self.header = FileHeader.read(fp)
            self.logger.debug("read %s" % self.header)
        return self.header

    def read_color_mode(self, fp: BinaryIO) -> ColorModeData:
        with self._stage("color_mode", fp):
            self.color_mode_data = ColorModeData.read(fp)
        return self.color_mode_data

    def read_image_resources(self, fp: BinaryIO) -> ImageResources:
        with self._stage("image_resources", fp):
            self.image_resources = ImageResources.read(fp)
            self.logger.debug("read %d image resources" % len(self.image_resources))
        return self.image_resources

    def read_layers_and_masks(self, fp: BinaryIO) -> LayerAndMaskInformation:
        with self._stage("layers_and_masks", fp):
            self.layer_and_mask_information = LayerAndMaskInformation.read(fp)
        return self.layer_and_mask_information

    def write_header(self, fp: BinaryIO) -> int:
        with self._stage("header", fp):
            self.logger.debug("writing %s" % self.header)
            return self.header.write(fp)

    def write_color_mode(self, fp: BinaryIO) -> int:
        with self._stage("color_mode", fp):
            return self.color_mode_data.write(fp)

    def write_image_resources(self, fp: BinaryIO) -> int:
        with self._stage("image_resources", fp):
            return self.image_resources.write(fp)

    def write_layers_and_masks(self, fp: BinaryIO) -> int:
        with self._stage("layers_and_masks", fp):
            return self.layer_and_mask_information.write(fp)

    @property
    def has_merged_alpha(self) -> bool:
        layer_info = self.layer_and_mask_information.layer_info
        return layer_info is not None and layer_info.has_merged_alpha

    @property
    def layer_records(self) -> list[LayerRecord]:
        """Layer records in file order, empty when there are no layers."""
        layer_info = self.layer_and_mask_information.layer_info
        if layer_info is None:
            return []
        return list(layer_info.layer_records)
