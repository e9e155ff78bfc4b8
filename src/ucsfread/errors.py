"""Exceptions raised while decoding a UCSF file.

Every error derives from [`UCSFError`][ucsfread.errors.UCSFError], and additionally from the closest built-in exception, so callers that only catch `ValueError`, `IndexError` or `OSError` keep working.
"""


class UCSFError(Exception):
    """Base class for all errors raised by `ucsfread`."""


class MalformedHeader(UCSFError, ValueError):
    """The file identifier or another header field does not describe a valid UCSF file."""


class UnsupportedVersion(UCSFError, ValueError):
    """The header declares a format version this package cannot read."""


class TruncatedInput(UCSFError, ValueError):
    """The declared structure extends past the bytes available in the source."""


class InvalidGeometry(UCSFError, ValueError):
    """The tile layout cannot be addressed, e.g. a zero tile size or an oversized tile grid."""


class OutOfRange(UCSFError, IndexError):
    """A coordinate, index or offset lies outside the logical extent of the spectrum."""


class IoFailure(UCSFError, OSError):
    """Reading from the byte source failed.

    Attributes:
        offset (int):   Start of the byte range that could not be read.
        length (int):   Number of bytes requested.
    """

    def __init__(self, offset: int, length: int, reason: str = "read failed"):
        super().__init__(f"{reason} (offset={offset}, length={length})")
        self.offset = offset
        self.length = length
