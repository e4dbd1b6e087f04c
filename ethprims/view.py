"""Read-only, lazily decoded view onto RLP encoded data."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterator, TypeVar

from .errors import DecoderError, DecoderErrorKind

T = TypeVar("T")

USIZE_MAX = 2**64 - 1
_USIZE_BYTES = 8


def decode_usize(data: bytes | memoryview) -> int:
    """Decode a big-endian length of at most eight bytes without leading zeros."""
    if len(data) > _USIZE_BYTES:
        raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
    if len(data) == 0:
        raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
    if data[0] == 0:
        raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
    return int.from_bytes(bytes(data), "big")


class PrototypeKind(enum.Enum):
    """The shape of an RLP item."""

    NULL = "null"
    DATA = "data"
    LIST = "list"


@dataclass(frozen=True)
class Prototype:
    """Shape of an RLP item with its data size or list item count."""

    kind: PrototypeKind
    length: int = 0


@dataclass(frozen=True)
class PayloadInfo:
    """Header and value lengths of an RLP item."""

    header_len: int
    value_len: int

    def total(self) -> int:
        """Total size of the item in bytes."""
        return self.header_len + self.value_len

    @classmethod
    def from_bytes(cls, header_bytes: bytes | memoryview) -> PayloadInfo:
        """Read the payload information from the start of an RLP item."""
        if len(header_bytes) == 0:
            raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
        first = header_bytes[0]
        if first <= 0x7F:
            return cls(0, 1)
        if first <= 0xB7:
            return cls(1, first - 0x80)
        if first <= 0xBF:
            return cls._long(header_bytes, first - 0xB7)
        if first <= 0xF7:
            return cls(1, first - 0xC0)
        return cls._long(header_bytes, first - 0xF7)

    @classmethod
    def _long(cls, header_bytes: bytes | memoryview, len_of_len: int) -> PayloadInfo:
        header_len = 1 + len_of_len
        if len(header_bytes) < 2:
            raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
        if header_bytes[1] == 0:
            raise DecoderError(DecoderErrorKind.RLP_DATA_LEN_WITH_ZERO_PREFIX)
        if len(header_bytes) < header_len:
            raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
        value_len = decode_usize(header_bytes[1:header_len])
        if value_len <= 55:
            raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
        return cls(header_len, value_len)


def _payload_info(data: bytes | memoryview) -> PayloadInfo:
    info = PayloadInfo.from_bytes(data)
    total = info.total()
    if total > USIZE_MAX or total > len(data):
        raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
    return info


def _consume(data: memoryview, length: int) -> memoryview:
    if len(data) < length:
        raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
    return data[length:]


def _consume_items(data: memoryview, count: int) -> tuple[memoryview, int]:
    consumed = 0
    for _ in range(count):
        size = _payload_info(data).total()
        data = _consume(data, size)
        consumed += size
    return data, consumed


class Rlp:
    """Immutable view onto an RLP encoded item; nested items are decoded on demand."""

    __slots__ = ("_raw", "_offset_cache", "_count_cache")

    def __init__(self, raw: bytes | bytearray | memoryview) -> None:
        self._raw = bytes(raw)
        self._offset_cache: tuple[int, int] | None = None
        self._count_cache: int | None = None

    def __repr__(self) -> str:
        return f"Rlp({self._raw.hex()!r})"

    def __str__(self) -> str:
        try:
            proto = self.prototype()
            if proto.kind is PrototypeKind.NULL:
                return "null"
            if proto.kind is PrototypeKind.DATA:
                return f'"0x{self.data().hex()}"'
            items = ", ".join(str(self.at(i)) for i in range(proto.length))
            return f"[{items}]"
        except DecoderError as err:
            return str(err)

    def as_raw(self) -> bytes:
        """The raw bytes of this item."""
        return self._raw

    def prototype(self) -> Prototype:
        """The shape of this item."""
        if self.is_data():
            return Prototype(PrototypeKind.DATA, self.size())
        if self.is_list():
            return Prototype(PrototypeKind.LIST, self.item_count())
        return Prototype(PrototypeKind.NULL)

    def payload_info(self) -> PayloadInfo:
        """Header and value lengths of this item."""
        return _payload_info(self._raw)

    def data(self) -> bytes:
        """The payload bytes of this item."""
        info = _payload_info(self._raw)
        return self._raw[info.header_len : info.total()]

    def item_count(self) -> int:
        """Number of items in this list."""
        if not self.is_list():
            raise DecoderError(DecoderErrorKind.RLP_EXPECTED_TO_BE_LIST)
        if self._count_cache is None:
            self._count_cache = sum(1 for _ in self)
        return self._count_cache

    def size(self) -> int:
        """Payload size of a data item; 0 for lists and malformed data."""
        if not self.is_data():
            return 0
        try:
            return _payload_info(self._raw).value_len
        except DecoderError:
            return 0

    def at(self, index: int) -> Rlp:
        """The list item at ``index``."""
        item, _ = self.at_with_offset(index)
        return item

    def at_with_offset(self, index: int) -> tuple[Rlp, int]:
        """The list item at ``index`` with its byte offset into the raw data."""
        if not self.is_list():
            raise DecoderError(DecoderErrorKind.RLP_EXPECTED_TO_BE_LIST)
        view = memoryview(self._raw)
        cache = self._offset_cache
        if cache is not None and cache[0] <= index:
            rest = _consume(view, cache[1])
            to_skip = index - cache[0]
            consumed_before = cache[1]
        else:
            rest, consumed_before = self._consume_list_payload(view)
            to_skip = index
        rest, consumed = _consume_items(rest, to_skip)
        offset = consumed_before + consumed
        self._offset_cache = (index, offset)
        found = _payload_info(rest)
        return Rlp(rest[: found.total()]), offset

    def _consume_list_payload(self, view: memoryview) -> tuple[memoryview, int]:
        info = _payload_info(view)
        return view[info.header_len : info.total()], info.header_len

    def is_null(self) -> bool:
        """True when there are no bytes at all."""
        return len(self._raw) == 0

    def is_empty(self) -> bool:
        """True for the empty list or the empty data item."""
        return not self.is_null() and self._raw[0] in (0xC0, 0x80)

    def is_list(self) -> bool:
        """True when this item is a list."""
        return not self.is_null() and self._raw[0] >= 0xC0

    def is_data(self) -> bool:
        """True when this item is data."""
        return not self.is_null() and self._raw[0] < 0xC0

    def is_int(self) -> bool:
        """True when this item looks like a canonically encoded integer."""
        if self.is_null():
            return False
        first = self._raw[0]
        if first <= 0x80:
            return True
        if first <= 0xB7:
            return len(self._raw) > 1 and self._raw[1] != 0
        if first <= 0xBF:
            payload_idx = 1 + first - 0xB7
            return payload_idx < len(self._raw) and self._raw[payload_idx] != 0
        return False

    def iter(self) -> RlpIterator:
        """Iterate over the items of this list."""
        return RlpIterator(self)

    def __iter__(self) -> RlpIterator:
        return RlpIterator(self)

    def as_val(self, sedes: Any) -> Any:
        """Decode this item with ``sedes``, an object with a ``decode(rlp)`` method."""
        return sedes.decode(self)

    def as_list(self, sedes: Any) -> list[Any]:
        """Decode every list item with ``sedes``."""
        return [item.as_val(sedes) for item in self]

    def val_at(self, index: int, sedes: Any) -> Any:
        """Decode the list item at ``index`` with ``sedes``."""
        return self.at(index).as_val(sedes)

    def list_at(self, index: int, sedes: Any) -> list[Any]:
        """Decode the list item at ``index`` as a list of ``sedes`` values."""
        return self.at(index).as_list(sedes)

    def decode_value(self, convert: Callable[[bytes], T]) -> T:
        """Check that this item is canonical data and pass its payload to ``convert``."""
        raw = self._raw
        if not raw:
            raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
        first = raw[0]
        if first <= 0x7F:
            return convert(bytes([first]))
        if first <= 0xB7:
            end = 1 + first - 0x80
            if len(raw) < end:
                raise DecoderError(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            payload = raw[1:end]
            if first == 0x81 and payload[0] < 0x80:
                raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            return convert(payload)
        if first <= 0xBF:
            begin = 1 + first - 0xB7
            if len(raw) < begin:
                raise DecoderError(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            length = decode_usize(raw[1:begin])
            end = begin + length
            if end > USIZE_MAX:
                raise DecoderError(DecoderErrorKind.RLP_INVALID_LENGTH)
            if len(raw) < end:
                raise DecoderError(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            return convert(raw[begin:end])
        raise DecoderError(DecoderErrorKind.RLP_EXPECTED_TO_BE_DATA)


class RlpIterator(Iterator[Rlp]):
    """Iterator over the items of an RLP list."""

    def __init__(self, rlp: Rlp) -> None:
        self._rlp = rlp
        self._index = 0

    def __iter__(self) -> RlpIterator:
        return self

    def __next__(self) -> Rlp:
        index = self._index
        self._index += 1
        try:
            return self._rlp.at(index)
        except DecoderError:
            raise StopIteration from None

    def __len__(self) -> int:
        try:
            count = self._rlp.item_count()
        except DecoderError:
            count = 0
        return max(0, count - self._index)