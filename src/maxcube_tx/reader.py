#!/usr/bin/env python3
"""MAX! Cube - a bounds-checked reader over a decoded (binary) payload."""

from __future__ import annotations

from . import exceptions as exc


class ByteReader:
    """Read the fields of a binary payload, in order, from a cursor.

    Every read is bounds-checked: reading beyond the end of the buffer raises a
    PayloadTruncated, rather than returning a short result.
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = data
        self._pos = offset

    def __repr__(self) -> str:
        return f"ByteReader(pos={self._pos}, remaining={self.remaining})"

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._pos

    def _require(self, count: int) -> None:
        if count < 0:
            raise exc.PayloadTruncated(f"Invalid byte count: {count}")
        if count > self.remaining:
            raise exc.PayloadTruncated(
                f"Payload truncated: wanted {count} byte(s) at offset {self._pos}, "
                f"but only {self.remaining} remain"
            )

    def read_byte(self) -> int:
        self._require(1)
        result = self._data[self._pos]
        self._pos += 1
        return result

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        result = self._data[self._pos : self._pos + count]
        self._pos += count
        return result

    def read_rf_address(self) -> int:
        """Return a 24-bit (big-endian) RF address."""
        return int.from_bytes(self.read_bytes(3), "big")

    def read_str(self, count: int) -> str:
        """Return a name (raw bytes), decoded as UTF-8; never fails to decode."""
        return self.read_bytes(count).decode("utf-8", errors="replace")

    def skip(self, count: int) -> None:
        self._require(count)
        self._pos += count

    def skip_rest(self) -> None:
        self._pos = len(self._data)

    def sub_reader(self, count: int) -> ByteReader:
        """Return a reader over the next count bytes, and advance past them."""
        return ByteReader(self.read_bytes(count))
