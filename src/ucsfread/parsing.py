"""Module for decoding the header of UCSF files.

A UCSF file starts with a 180 byte file header, holding the format identifier, the number of dimensions, the number of components per data point and the format version.

It is followed by one 128 byte axis header per dimension, with the size, tile size and frequency calibration of that axis.
The tiled data section starts directly after the last axis header.

Decoding only ever reads the header region, no data bytes are touched, so an invalid file fails fast.
"""

import logging

from .data_models import AxisHeader, FileHeader, SampleKind
from .errors import MalformedHeader, TruncatedInput, UnsupportedVersion
from .source import ByteSource, as_byte_source, read_checked
from .structdef import (
    AXISHEADERSIZE,
    DIMENSION_OFFSET,
    HEADERSIZE,
    MAGIC,
    SUPPORTED_VERSIONS,
    UCSFAxisHeader,
    UCSFFileHeader,
)

logger = logging.getLogger(__name__)


def parse_file_header(raw: bytes) -> FileHeader:
    """Decode and validate the 180 byte file header.

    Args:
        raw (bytes):    At least the first `HEADERSIZE` bytes of the file.

    Raises:
        TruncatedInput:         When fewer than `HEADERSIZE` bytes are given.
        MalformedHeader:        When the identifier does not match, or the dimension or component count is invalid.
        UnsupportedVersion:     When the format version is not one of `SUPPORTED_VERSIONS`.
    """
    if len(raw) < HEADERSIZE:
        raise TruncatedInput(f"File header needs {HEADERSIZE} bytes, only {len(raw)} available")
    if raw[: len(MAGIC)] != MAGIC:
        raise MalformedHeader(f"Not a UCSF file, identifier is {raw[: len(MAGIC)]!r} instead of {MAGIC!r}")
    header = UCSFFileHeader.from_buffer_copy(raw[:HEADERSIZE])
    if header.version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersion(
            f"Format version {header.version} is not supported, expected one of {sorted(SUPPORTED_VERSIONS)}"
        )
    if header.ndim < 1:
        raise MalformedHeader(f"Header declares {header.ndim} dimensions")
    if header.ncomponents not in set(SampleKind):
        raise MalformedHeader(f"Header declares {header.ncomponents} components per data point, expected 1 or 2")
    return FileHeader.from_struct(header)


def parse_axis_headers(raw: bytes, dimensions: int) -> list[AxisHeader]:
    """Decode `dimensions` consecutive 128 byte axis headers from `raw`."""
    if len(raw) < dimensions * AXISHEADERSIZE:
        raise TruncatedInput(
            f"{dimensions} axis headers need {dimensions * AXISHEADERSIZE} bytes, only {len(raw)} available"
        )
    return [
        AxisHeader.from_struct(UCSFAxisHeader.from_buffer_copy(raw, d * AXISHEADERSIZE)) for d in range(dimensions)
    ]


def parse_ucsf_header(source: ByteSource) -> tuple[FileHeader, list[AxisHeader]]:
    """Read and decode the file header and all axis headers from `source`.

    The file header is read in a single read, and only when it is valid are the axis headers read.

    Args:
        source (ByteSource):    Any byte source, or something [`as_byte_source`][ucsfread.source.as_byte_source] accepts.

    Returns:
        tuple[FileHeader, list[AxisHeader]]: The file header and the axis headers in file order.
    """
    source = as_byte_source(source)
    total = source.total_length()
    if total < HEADERSIZE:
        # the dimension count at DIMENSION_OFFSET lies inside the fixed header
        raise TruncatedInput(
            f"Source holds {total} bytes, the file header needs {HEADERSIZE} to read the dimension count at "
            f"offset {DIMENSION_OFFSET}"
        )
    header = parse_file_header(read_checked(source, 0, HEADERSIZE))

    axes_size = header.dimensions * AXISHEADERSIZE
    if total < HEADERSIZE + axes_size:
        raise TruncatedInput(
            f"Source holds {total} bytes, {header.dimensions} axis headers end at byte {HEADERSIZE + axes_size}"
        )
    axes = parse_axis_headers(read_checked(source, HEADERSIZE, axes_size), header.dimensions)
    logger.debug(
        "Decoded UCSF header: %d axes (%s), %s", header.dimensions, ", ".join(a.nucleus for a in axes), header.components.name
    )
    return header, axes
