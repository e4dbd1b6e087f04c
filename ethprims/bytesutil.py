"""Helpers for printing byte strings and writing into byte buffers."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def pretty(data: BytesLike) -> str:
    """Hex form of ``data`` with a middle dot between bytes, for display."""
    return "·".join(f"{byte:02x}" for byte in bytes(data))


def to_hex(data: BytesLike) -> str:
    """Plain lowercase hex form of ``data``."""
    return bytes(data).hex()


class FlexibleBytesRef:
    """A growable byte buffer that writes may extend."""

    def __init__(self, buffer: bytearray) -> None:
        if not isinstance(buffer, bytearray):
            raise TypeError("a flexible reference needs a bytearray")
        self._buffer = buffer

    def write(self, offset: int, data: BytesLike) -> int:
        """Truncate or zero-pad the buffer to ``offset``, then append ``data``.

        Returns the number of bytes added, which includes any zero padding.
        """
        size = len(self._buffer)
        wrote = len(data) + max(0, offset - size)
        if size > offset:
            del self._buffer[offset:]
        else:
            self._buffer.extend(bytes(offset - size))
        self._buffer.extend(data)
        return wrote

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class FixedBytesRef:
    """A fixed-size writable byte buffer; writes past its end are cut off."""

    def __init__(self, buffer: bytearray | memoryview) -> None:
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("a fixed reference needs a writable buffer")
        self._view = view.cast("B")

    def write(self, offset: int, data: BytesLike) -> int:
        """Copy as much of ``data`` as fits at ``offset``; return the count copied."""
        size = len(self._view)
        if offset >= size:
            return 0
        count = min(size - offset, len(data))
        self._view[offset : offset + count] = bytes(data[:count])
        return count

    def __bytes__(self) -> bytes:
        return self._view.tobytes()

    def __len__(self) -> int:
        return len(self._view)