"""
Low-level API that translates binary data to Python structure.

All the data structure in this subpackage inherits from one of the object
defined in :py:mod:`psd_lite.psd.base` module.
"""

# Main PSD document class
from .document import PSD as PSD

# Layer and mask structures
from .layer_and_mask import (
    LayerAndMaskInformation as LayerAndMaskInformation,
    LayerInfo as LayerInfo,
    LayerRecord as LayerRecord,
    LayerRecords as LayerRecords,
)
from .tagged_blocks import TaggedBlock as TaggedBlock, TaggedBlocks as TaggedBlocks

__all__ = [
    "PSD",
    "LayerAndMaskInformation",
    "LayerInfo",
    "LayerRecord",
    "LayerRecords",
    "TaggedBlock",
    "TaggedBlocks",
]
