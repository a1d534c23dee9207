# src/consignment_forge/core/strict.py
"""Strict binary encoding primitives.

Strict encoding is deterministic: every value has exactly one valid byte
representation. The reader rejects anything the writer would not produce
(non-zero reserved bytes, unknown tags, unsorted map keys, non-canonical
CompactSize integers), which is what allows a decoded stream to be
re-encoded byte-for-byte.

Integers are little-endian. Collections and blobs are prefixed by a length
whose width is set by their Confinement.
"""

from __future__ import annotations

from enum import IntEnum
from typing import BinaryIO

from consignment_forge.contracts.errors import DecodingError, InvalidDataError, UnexpectedEofError

U16_MAX = 0xFFFF
U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
I32_MIN, I32_MAX = -(2**31), 2**31 - 1
I64_MIN, I64_MAX = -(2**63), 2**63 - 1

# Upper bound on a single read from the underlying stream
READ_CHUNK_SIZE = 1 << 16


class Confinement(IntEnum):
    """Width in bytes of a collection length prefix."""

    TINY = 1
    SMALL = 2
    MEDIUM = 3
    LARGE = 4

    @property
    def max_len(self) -> int:
        return (1 << (8 * self.value)) - 1


class StrictReader:
    """Reads strict-encoded values from a binary stream.

    Keeps a single byte of lookahead so callers can distinguish a clean end
    of stream (nothing left before a record starts) from truncation inside a
    record.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending = b""
        self.position = 0

    def at_eof(self) -> bool:
        """Check whether the stream is exhausted without consuming data."""
        if self._pending:
            return False
        self._pending = self._stream.read(1)
        return not self._pending

    def read_upto(self, size: int) -> bytes:
        """Read at most size bytes, returning fewer only at end of stream."""
        data = bytearray(self._pending[:size])
        self._pending = self._pending[size:]
        while len(data) < size:
            chunk = self._stream.read(min(size - len(data), READ_CHUNK_SIZE))
            if not chunk:
                break
            data += chunk
        self.position += len(data)
        return bytes(data)

    def read_exact(self, size: int) -> bytes:
        data = self.read_upto(size)
        if len(data) != size:
            raise UnexpectedEofError(expected=size, received=len(data))
        return data

    def read_uint(self, width: int) -> int:
        return int.from_bytes(self.read_exact(width), "little")

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self) -> int:
        return self.read_uint(2)

    def read_u32(self) -> int:
        return self.read_uint(4)

    def read_u64(self) -> int:
        return self.read_uint(8)

    def read_i32(self) -> int:
        return int.from_bytes(self.read_exact(4), "little", signed=True)

    def read_i64(self) -> int:
        return int.from_bytes(self.read_exact(8), "little", signed=True)

    def read_bool(self) -> bool:
        value = self.read_u8()
        if value > 1:
            raise DecodingError(f"Invalid bool value 0x{value:02x} at offset {self.position - 1}")
        return value == 1

    def read_reserved(self, size: int) -> None:
        data = self.read_exact(size)
        if any(data):
            raise DecodingError(f"Reserved bytes must be zero, got {data.hex()} at offset {self.position - size}")

    def read_len(self, confinement: Confinement) -> int:
        return self.read_uint(confinement.value)

    def read_blob(self, confinement: Confinement) -> bytes:
        return self.read_exact(self.read_len(confinement))

    def read_string(self, confinement: Confinement) -> str:
        raw = self.read_blob(confinement)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"Invalid UTF-8 string at offset {self.position - len(raw)}: {e}") from e

    def read_option_tag(self) -> bool:
        """Read an Option discriminant; True means a value follows."""
        tag = self.read_u8()
        if tag > 1:
            raise DecodingError(f"Invalid option tag 0x{tag:02x} at offset {self.position - 1}")
        return tag == 1

    def read_compact_size(self) -> int:
        """Read a Bitcoin CompactSize integer, rejecting non-canonical forms."""
        first = self.read_u8()
        if first < 0xFD:
            return first
        if first == 0xFD:
            value, minimum = self.read_u16(), 0xFD
        elif first == 0xFE:
            value, minimum = self.read_u32(), 0x1_0000
        else:
            value, minimum = self.read_u64(), 0x1_0000_0000
        if value < minimum:
            raise DecodingError(f"Non-canonical CompactSize {value} with prefix 0x{first:02x}")
        return value

    def read_compact_blob(self) -> bytes:
        return self.read_exact(self.read_compact_size())


class StrictWriter:
    """Writes strict-encoded values to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.written = 0

    def write_raw(self, data: bytes) -> None:
        self._stream.write(data)
        self.written += len(data)

    def write_uint(self, value: int, width: int) -> None:
        if not 0 <= value < (1 << (8 * width)):
            raise InvalidDataError(f"Value {value} does not fit in an unsigned {8 * width}-bit integer")
        self.write_raw(value.to_bytes(width, "little"))

    def write_u8(self, value: int) -> None:
        self.write_uint(value, 1)

    def write_u16(self, value: int) -> None:
        self.write_uint(value, 2)

    def write_u32(self, value: int) -> None:
        self.write_uint(value, 4)

    def write_u64(self, value: int) -> None:
        self.write_uint(value, 8)

    def write_i32(self, value: int) -> None:
        if not I32_MIN <= value <= I32_MAX:
            raise InvalidDataError(f"Value {value} does not fit in a signed 32-bit integer")
        self.write_raw(value.to_bytes(4, "little", signed=True))

    def write_i64(self, value: int) -> None:
        if not I64_MIN <= value <= I64_MAX:
            raise InvalidDataError(f"Value {value} does not fit in a signed 64-bit integer")
        self.write_raw(value.to_bytes(8, "little", signed=True))

    def write_bool(self, value: bool) -> None:
        self.write_u8(1 if value else 0)

    def write_reserved(self, size: int) -> None:
        self.write_raw(bytes(size))

    def write_fixed(self, data: bytes, size: int) -> None:
        if len(data) != size:
            raise InvalidDataError(f"Expected {size} bytes, got {len(data)}")
        self.write_raw(data)

    def write_len(self, length: int, confinement: Confinement) -> None:
        if length > confinement.max_len:
            raise InvalidDataError(f"Length {length} exceeds {confinement.name} confinement ({confinement.max_len})")
        self.write_uint(length, confinement.value)

    def write_blob(self, data: bytes, confinement: Confinement) -> None:
        self.write_len(len(data), confinement)
        self.write_raw(data)

    def write_string(self, value: str, confinement: Confinement) -> None:
        self.write_blob(value.encode("utf-8"), confinement)

    def write_option_tag(self, present: bool) -> None:
        self.write_u8(1 if present else 0)

    def write_compact_size(self, value: int) -> None:
        if value < 0xFD:
            self.write_u8(value)
        elif value <= U16_MAX:
            self.write_u8(0xFD)
            self.write_u16(value)
        elif value <= U32_MAX:
            self.write_u8(0xFE)
            self.write_u32(value)
        else:
            self.write_u8(0xFF)
            self.write_u64(value)

    def write_compact_blob(self, data: bytes) -> None:
        self.write_compact_size(len(data))
        self.write_raw(data)
