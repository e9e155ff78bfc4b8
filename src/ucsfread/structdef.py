"""Definitions of the binary structures found at the start of a UCSF file.

A UCSF (Sparky) file starts with a 180 byte file header, followed by one 128 byte axis header per dimension.
All multi-byte fields are stored big-endian, so the structures derive from `ctypes.BigEndianStructure` and can be filled directly from the raw bytes with `from_buffer_copy`.

The layout follows the description at <https://www.cgl.ucsf.edu/home/sparky/manual/files.html#UCSFFormat>.
"""

import ctypes

HEADERSIZE = 180
"""Size of the file header in bytes."""
AXISHEADERSIZE = 128
"""Size of a single axis header in bytes."""
MAGIC = b"UCSF NMR"
"""Identifier at the very start of the file, NUL padded to 10 bytes."""
SUPPORTED_VERSIONS = frozenset({2})
FLOAT_SIZE = 4
"""Every component of a sample is a 4 byte big-endian IEEE float."""
SAMPLE_DTYPE = ">f4"

AXIS_ORDER = "C"
"""Tiles and cells are stored row-major, the first declared axis varies slowest."""
PADDING_FILL = 0.0
"""Value written into padding cells of boundary tiles. Never read back."""

DIMENSION_OFFSET = 10
"""Offset of the dimension count, readable before the rest of the header is trusted."""


class UCSFFileHeader(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_ = [
        ("ident", ctypes.c_char * 10),  # 0-9     "UCSF NMR"
        ("ndim", ctypes.c_uint8),  # 10
        ("ncomponents", ctypes.c_uint8),  # 11      1 = real, 2 = complex
        ("version", ctypes.c_uint16),  # 12-13
        ("remainder", ctypes.c_uint8 * 166),  # 14-179  unspecified, often recording date etc.
    ]


class UCSFAxisHeader(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_ = [
        ("nucleus", ctypes.c_char * 8),  # 0-7     "1H", "13C", "15N", ...
        ("npoints", ctypes.c_uint32),  # 8-11
        ("unused", ctypes.c_uint32),  # 12-15
        ("tilesize", ctypes.c_uint32),  # 16-19
        ("spectrometer_freq", ctypes.c_float),  # 20-23   MHz
        ("spectral_width", ctypes.c_float),  # 24-27   Hz
        ("center", ctypes.c_float),  # 28-31   ppm
        ("remainder", ctypes.c_uint8 * 96),  # 32-127
    ]
