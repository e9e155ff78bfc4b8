"""Sources of bytes a spectrum can be read from.

The decoder only needs random access reads of a byte range and the total length of the source, described by the [`ByteSource`][ucsfread.source.ByteSource] protocol.
Any object implementing `read_exact` and `total_length` can be used, e.g. a wrapper around a remote object store.

Reads never return fewer bytes than requested: a short read raises [`IoFailure`][ucsfread.errors.IoFailure].
Sources are borrowed, not owned, by a [`Spectrum`][ucsfread.spectrum.Spectrum] and must outlive it.
"""

from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from .errors import IoFailure, UCSFError


@runtime_checkable
class ByteSource(Protocol):
    def read_exact(self, offset: int, length: int) -> bytes: ...

    def total_length(self) -> int: ...


def _check_range(offset: int, length: int, total: int):
    if offset < 0 or length < 0:
        raise IoFailure(offset, length, "negative read range")
    if offset + length > total:
        raise IoFailure(offset, length, f"read past end of source of {total} bytes")


def read_checked(source: ByteSource, offset: int, length: int) -> bytes:
    """Read exactly `length` bytes at `offset` from any byte source.

    Failures of sources not provided by this package are wrapped in [`IoFailure`][ucsfread.errors.IoFailure], and a short read is reported as one.
    """
    try:
        data = source.read_exact(offset, length)
    except UCSFError:
        raise
    except Exception as err:
        raise IoFailure(offset, length, f"{type(err).__name__}: {err}") from err
    if len(data) != length:
        raise IoFailure(offset, length, f"short read of {len(data)} bytes")
    return data


class BufferSource:
    """Read from bytes held in memory.

    The buffer is never modified, so concurrent reads are safe.
    """

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = memoryview(data).cast("B")

    def read_exact(self, offset: int, length: int) -> bytes:
        _check_range(offset, length, len(self._data))
        return self._data[offset : offset + length].tobytes()

    def total_length(self) -> int:
        return len(self._data)


class FileSource:
    """Read from a file on disk.

    Every read opens its own handle, so concurrent reads from multiple threads never share a file position.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def read_exact(self, offset: int, length: int) -> bytes:
        try:
            with self.path.open("rb") as fo:
                fo.seek(offset)
                data = fo.read(length)
        except OSError as err:
            raise IoFailure(offset, length, f"could not read {self.path}: {err}") from err
        if len(data) != length:
            raise IoFailure(offset, length, f"short read of {len(data)} bytes from {self.path}")
        return data

    def total_length(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError as err:
            raise IoFailure(0, 0, f"could not stat {self.path}: {err}") from err

    def __repr__(self):
        return f"{type(self).__name__}({str(self.path)!r})"


class FileObjectSource:
    """Read from an already opened, seekable binary file object.

    The file position is shared, so reads from multiple threads must be serialized by the caller.
    """

    def __init__(self, buff: BinaryIO):
        self._buff = buff

    def read_exact(self, offset: int, length: int) -> bytes:
        _check_range(offset, length, self.total_length())
        try:
            self._buff.seek(offset)
            data = self._buff.read(length)
        except OSError as err:
            raise IoFailure(offset, length, str(err)) from err
        if len(data) != length:
            raise IoFailure(offset, length, f"short read of {len(data)} bytes")
        return data

    def total_length(self) -> int:
        try:
            position = self._buff.tell()
            end = self._buff.seek(0, 2)
            self._buff.seek(position)
        except OSError as err:
            raise IoFailure(0, 0, str(err)) from err
        return end


def as_byte_source(source) -> ByteSource:
    """Wrap `source` in a [`ByteSource`][ucsfread.source.ByteSource] when it is not one already.

    Accepts a path, a bytes-like object, a seekable binary file object or any `ByteSource`.
    """
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, (str, Path)):
        return FileSource(source)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BufferSource(source)
    if hasattr(source, "seek") and hasattr(source, "read"):
        return FileObjectSource(source)
    raise TypeError(f"Cannot read a spectrum from {type(source).__name__}")
