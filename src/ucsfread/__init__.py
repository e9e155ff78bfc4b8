"""`ucsfread` is a module to read NMR spectra stored in the UCSF format, as written by Sparky and NMRPipe (`pipe2ucsf`).

A UCSF file holds an N-dimensional frequency-domain spectrum, stored as fixed-size tiles. Spectra are read lazily: data is only read one tile at a time, so spectra larger than memory can be iterated over.

## Contents

* [`ucsfread.spectrum`][ucsfread.spectrum]: Open a spectrum and access its data points
* [`ucsfread.parsing`][ucsfread.parsing]: Functions to decode the file and axis headers
* [`ucsfread.data_models`][ucsfread.data_models]: Data models describing the decoded headers
* [`ucsfread.structdef`][ucsfread.structdef]: Definitions of the binary header structures and layout constants
* [`ucsfread.geometry`][ucsfread.geometry]: Tile layout derived from the headers
* [`ucsfread.addressing`][ucsfread.addressing]: Mapping between coordinates and byte offsets
* [`ucsfread.tiles`][ucsfread.tiles]: Tiles and sequential iteration over data points
* [`ucsfread.transformation`][ucsfread.transformation]: Conversion between point indices and Hz / ppm
* [`ucsfread.source`][ucsfread.source]: Byte sources a spectrum can be read from
* [`ucsfread.errors`][ucsfread.errors]: Exceptions raised while decoding
"""

__all__ = [
    "open_spectrum",
    "read_ucsf_file",
    "Spectrum",
    "__version__",
    "__version_tuple__",
    "version",
    "version_tuple",
]

import logging

from ucsfread.spectrum import Spectrum, open_spectrum, read_ucsf_file

from ._version import __version__, __version_tuple__, version, version_tuple

logging.getLogger(__name__).addHandler(logging.NullHandler())
