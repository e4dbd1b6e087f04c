"""Incremental RLP encoder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

_SHORT_LIMIT = 55


def _be_bytes(value: int) -> bytes:
    """Minimal big-endian representation of a non-negative integer."""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


@dataclass
class _ListInfo:
    position: int
    max: int | None
    current: int = 0


class RlpStream:
    """Appendable RLP encoder that writes into a byte buffer.

    Anything that already sits in ``buffer`` when the stream is created is kept
    in front of the encoded output and is left alone by :meth:`clear`.
    """

    def __init__(self, buffer: bytearray | None = None) -> None:
        if buffer is None:
            buffer = bytearray()
        if not isinstance(buffer, bytearray):
            raise TypeError("an RLP stream writes into a bytearray")
        self._buffer = buffer
        self._start = len(buffer)
        self._lists: list[_ListInfo] = []
        self._finished_list = False

    @classmethod
    def new_list(cls, length: int, buffer: bytearray | None = None) -> RlpStream:
        """Create a stream that starts with a list of ``length`` items."""
        stream = cls(buffer)
        stream.begin_list(length)
        return stream

    @property
    def _total_written(self) -> int:
        return len(self._buffer) - self._start

    def append_empty_data(self) -> RlpStream:
        """Append the empty data item."""
        self._buffer.append(0x80)
        self._note_appended(1)
        return self

    def append_raw(self, data: bytes | bytearray | memoryview, item_count: int) -> RlpStream:
        """Append already encoded RLP holding ``item_count`` items."""
        self._buffer.extend(data)
        self._note_appended(item_count)
        return self

    def append(self, value: Any) -> RlpStream:
        """Append one value and count it as one item."""
        self._finished_list = False
        self._write(value)
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_iter(self, values: Iterable[int]) -> RlpStream:
        """Append the bytes produced by ``values`` as one data item."""
        self._finished_list = False
        self.encode_value(bytes(values))
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_list(self, values: Sequence[Any]) -> RlpStream:
        """Append ``values`` as one list."""
        self.begin_list(len(values))
        for value in values:
            self.append(value)
        return self

    def append_internal(self, value: Any) -> RlpStream:
        """Append a value without counting it as an item; useful for wrappers."""
        self._write(value)
        return self

    def begin_list(self, length: int) -> RlpStream:
        """Start a list of ``length`` items."""
        if length < 0:
            raise ValueError("a list cannot have a negative length")
        self._finished_list = False
        if length == 0:
            self._buffer.append(0xC0)
            self._note_appended(1)
            self._finished_list = True
        else:
            # One header byte is reserved now and fixed up once the list is full.
            self._buffer.append(0)
            self._lists.append(_ListInfo(self._total_written, length))
        return self

    def begin_unbounded_list(self) -> RlpStream:
        """Start a list whose length is set by :meth:`finalize_unbounded_list`."""
        self._finished_list = False
        self._buffer.append(0)
        self._lists.append(_ListInfo(self._total_written, None))
        return self

    def finalize_unbounded_list(self) -> None:
        """Close the innermost open list, which must be unbounded."""
        if not self._lists:
            raise ValueError("no open list")
        if self._lists[-1].max is not None:
            raise ValueError("list type mismatch: the open list is bounded")
        info = self._lists.pop()
        self._insert_list_payload(self._total_written - info.position, info.position)
        self._note_appended(1)
        self._finished_list = True

    def append_raw_checked(
        self, data: bytes | bytearray | memoryview, item_count: int, max_size: int
    ) -> bool:
        """Append raw RLP only if the result stays within ``max_size`` bytes."""
        if self.estimate_size(len(data)) > max_size:
            return False
        self.append_raw(data, item_count)
        return True

    def estimate_size(self, add: int) -> int:
        """Total encoded size after appending ``add`` more payload bytes."""
        total = self._total_written + add
        size = total
        for info in self._lists:
            length = total - info.position
            if length > _SHORT_LIMIT:
                size += len(_be_bytes(length))
        return size

    def __len__(self) -> int:
        return self.estimate_size(0)

    def is_finished(self) -> bool:
        """True when no list is waiting for more items."""
        return not self._lists

    def as_raw(self) -> bytes:
        """The whole buffer as it stands."""
        return bytes(self._buffer)

    def out(self) -> bytes:
        """The encoded bytes; every list must be complete."""
        if not self.is_finished():
            raise ValueError("the stream still has unfinished lists")
        return bytes(self._buffer)

    def clear(self) -> None:
        """Drop everything written by this stream."""
        del self._buffer[self._start :]
        self._lists.clear()

    def encode_value(self, value: bytes | bytearray | memoryview) -> None:
        """Write ``value`` as one data item without counting it."""
        data = bytes(value)
        if len(data) == 1 and data[0] < 0x80:
            self._buffer.append(data[0])
        elif len(data) <= _SHORT_LIMIT:
            self._buffer.append(0x80 + len(data))
            self._buffer.extend(data)
        else:
            size = _be_bytes(len(data))
            self._buffer.append(0xB7 + len(size))
            self._buffer.extend(size)
            self._buffer.extend(data)

    def _write(self, value: Any) -> None:
        append_to = getattr(value, "rlp_append", None)
        if append_to is not None and not isinstance(value, type):
            append_to(self)
        elif isinstance(value, bool):
            self.encode_value(b"\x01" if value else b"")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError("RLP cannot encode negative integers")
            self.encode_value(_be_bytes(value))
        elif isinstance(value, str):
            self.encode_value(value.encode("utf-8"))
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.encode_value(value)
        elif value is None:
            self.begin_list(0)
        elif isinstance(value, (list, tuple)):
            self.append_list(value)
        else:
            raise TypeError(f"cannot RLP encode {type(value).__name__}")

    def _note_appended(self, inserted: int) -> None:
        if not self._lists:
            return
        top = self._lists[-1]
        top.current += inserted
        if top.max is not None and top.current > top.max:
            raise ValueError("cannot append more items than the list was declared with")
        should_finish = top.max is not None and top.current == top.max
        if should_finish:
            self._lists.pop()
            self._insert_list_payload(self._total_written - top.position, top.position)
            self._note_appended(1)
        self._finished_list = should_finish

    def _insert_list_payload(self, length: int, position: int) -> None:
        header = self._start + position - 1
        if length <= _SHORT_LIMIT:
            self._buffer[header] = 0xC0 + length
        else:
            size = _be_bytes(length)
            at = self._start + position
            self._buffer[at:at] = size
            self._buffer[header] = 0xF7 + len(size)