"""
Primitive reader for the osu! database binary encoding.

All values are little-endian. Strings are a marker byte (0x00 absent,
0x0b present) followed by a ULEB128 length and UTF-8 bytes. Dates are
Windows ticks (100ns intervals since 0001-01-01).

Reference: https://github.com/ppy/osu/wiki/Legacy-database-file-structure
"""

import struct
from datetime import datetime, timedelta
from pathlib import Path


class IngestionError(Exception):
    """Custom exception for database ingestion errors"""
    pass


class DatabaseLoadError(IngestionError):
    """A source database could not be read or decoded. Fatal for the run."""
    pass


STRING_ABSENT = 0x00
STRING_PRESENT = 0x0B
PAIR_INT_MARKER = 0x08
PAIR_FLOAT_MARKER = 0x0C
PAIR_DOUBLE_MARKER = 0x0D

_WINDOWS_EPOCH = datetime(1, 1, 1)
_BYTE = struct.Struct("<B")
_SHORT = struct.Struct("<H")
_INT = struct.Struct("<i")
_UINT = struct.Struct("<I")
_LONG = struct.Struct("<q")
_SINGLE = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")


def ticks_to_datetime(ticks: int) -> datetime:
    """Convert Windows ticks to a naive datetime, clamping out-of-range values."""
    if ticks <= 0:
        return _WINDOWS_EPOCH
    try:
        return _WINDOWS_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError:
        return datetime.max


class BinaryReader:
    """Sequential reader over an in-memory osu! database file."""

    def __init__(self, data: bytes, source: str = "<bytes>"):
        self._data = data
        self._offset = 0
        self.source = source

    @classmethod
    def from_path(cls, path: Path) -> "BinaryReader":
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise DatabaseLoadError(f"Could not read {path}: {e}") from e
        return cls(data, source=str(path))

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _unpack(self, fmt: struct.Struct):
        if self.remaining < fmt.size:
            raise DatabaseLoadError(
                f"Unexpected end of {self.source} at offset {self._offset} "
                f"(needed {fmt.size} bytes, {self.remaining} left)"
            )
        (value,) = fmt.unpack_from(self._data, self._offset)
        self._offset += fmt.size
        return value

    def skip(self, count: int) -> None:
        if count < 0 or self.remaining < count:
            raise DatabaseLoadError(
                f"Cannot skip {count} bytes at offset {self._offset} of {self.source}"
            )
        self._offset += count

    def read_byte(self) -> int:
        return self._unpack(_BYTE)

    def read_short(self) -> int:
        return self._unpack(_SHORT)

    def read_int(self) -> int:
        return self._unpack(_INT)

    def read_uint(self) -> int:
        return self._unpack(_UINT)

    def read_long(self) -> int:
        return self._unpack(_LONG)

    def read_single(self) -> float:
        return self._unpack(_SINGLE)

    def read_double(self) -> float:
        return self._unpack(_DOUBLE)

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_datetime(self) -> datetime:
        return ticks_to_datetime(self.read_long())

    def read_uleb128(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7

    def read_string(self) -> str | None:
        marker = self.read_byte()
        if marker == STRING_ABSENT:
            return None
        if marker != STRING_PRESENT:
            raise DatabaseLoadError(
                f"Invalid string marker 0x{marker:02x} at offset {self._offset - 1} of {self.source}"
            )
        length = self.read_uleb128()
        if self.remaining < length:
            raise DatabaseLoadError(
                f"String of {length} bytes runs past the end of {self.source}"
            )
        raw = self._data[self._offset:self._offset + length]
        self._offset += length
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DatabaseLoadError(f"Invalid UTF-8 string in {self.source}: {e}") from e

    def read_star_pair(self, float_stars: bool) -> tuple[int, float]:
        """Read one (mods, star rating) pair from a star rating table."""
        self._expect(PAIR_INT_MARKER)
        mods = self.read_int()
        if float_stars:
            self._expect(PAIR_FLOAT_MARKER)
            return mods, self.read_single()
        self._expect(PAIR_DOUBLE_MARKER)
        return mods, self.read_double()

    def _expect(self, marker: int) -> None:
        found = self.read_byte()
        if found != marker:
            raise DatabaseLoadError(
                f"Expected marker 0x{marker:02x} but found 0x{found:02x} "
                f"at offset {self._offset - 1} of {self.source}"
            )
