"""
psd-lite: Python package for decoding the framing of Adobe Photoshop PSD files.

The package reads the header, color mode, image resource and layer/mask
sections of a PSD file into plain Python structures. Pixel data is not
decoded.

Basic usage::

    from psd_lite import PSD

    psd = PSD()
    with open('example.psd', 'rb') as f:
        if psd.load(f):
            for record in psd.layer_records:
                print(record.unicode_name)
        else:
            print(psd.error)

Architecture:

- :py:mod:`psd_lite.psd`: Low-level binary structure parsing/writing
- :py:mod:`psd_lite.errors`: Exceptions raised by the decoders
- :py:mod:`psd_lite.constants`: Enumerations of keys and modes
"""

from psd_lite.errors import PSDError
from psd_lite.psd import PSD
from psd_lite.version import __version__

__all__ = ["PSD", "PSDError", "__version__"]
