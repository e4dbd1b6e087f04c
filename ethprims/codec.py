"""RLP encoding and decoding of Python values."""

from __future__ import annotations

import abc
from typing import Any, Sequence

from .errors import DecoderError, DecoderErrorKind
from .stream import RlpStream
from .view import Rlp

__all__ = [
    "Encodable",
    "Decodable",
    "BigEndianInt",
    "Binary",
    "Text",
    "Boolean",
    "OptionalOf",
    "ListOf",
    "encode",
    "encode_list",
    "decode",
    "decode_list",
    "binary",
    "text",
    "boolean",
]


class Encodable(abc.ABC):
    """A value that knows how to write itself to an RLP stream."""

    @abc.abstractmethod
    def rlp_append(self, stream: RlpStream) -> None:
        """Append this value to ``stream``."""


class Decodable(abc.ABC):
    """A description of how to decode a value from an RLP item."""

    @abc.abstractmethod
    def decode(self, rlp: Rlp) -> Any:
        """Decode a value from ``rlp``."""


class BigEndianInt(Decodable):
    """Canonical unsigned big-endian integer of at most ``bits`` bits."""

    def __init__(self, bits: int = 64) -> None:
        if bits <= 0 or bits % 8:
            raise ValueError("bits must be a positive multiple of 8")
        self.bits = bits

    def __repr__(self) -> str:
        return f"BigEndianInt({self.bits})"

    def decode(self, rlp: Rlp) -> int:
        size = self.bits // 8

        def convert(data: bytes) -> int:
            if len(data) > size:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
            if not data:
                return 0
            if data[0] == 0:
                raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            return int.from_bytes(data, "big")

        return rlp.decode_value(convert)


class Binary(Decodable):
    """Raw bytes."""

    def decode(self, rlp: Rlp) -> bytes:
        return rlp.decode_value(bytes)


class Text(Decodable):
    """UTF-8 text."""

    def decode(self, rlp: Rlp) -> str:
        def convert(data: bytes) -> str:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                raise DecoderError(DecoderErrorKind.RLP_EXPECTED_TO_BE_DATA) from None

        return rlp.decode_value(convert)


class Boolean(Decodable):
    """A boolean stored as the integer 0 or 1."""

    def decode(self, rlp: Rlp) -> bool:
        value = BigEndianInt(8).decode(rlp)
        if value == 0:
            return False
        if value == 1:
            return True
        raise DecoderError(DecoderErrorKind.CUSTOM, "invalid boolean value")


class OptionalOf(Decodable):
    """A value stored as a list of zero or one items."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner

    def decode(self, rlp: Rlp) -> Any:
        count = rlp.item_count()
        if count == 1:
            return rlp.val_at(0, self.inner)
        if count == 0:
            return None
        raise DecoderError(DecoderErrorKind.RLP_INCORRECT_LIST_LEN)


class ListOf(Decodable):
    """A list whose items are all decoded the same way."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner

    def decode(self, rlp: Rlp) -> list[Any]:
        return rlp.as_list(self.inner)


binary = Binary()
text = Text()
boolean = Boolean()


def encode(value: Any) -> bytes:
    """RLP encode a single value."""
    stream = RlpStream()
    stream.append(value)
    return stream.out()


def encode_list(values: Sequence[Any]) -> bytes:
    """RLP encode ``values`` as one list."""
    stream = RlpStream()
    stream.append_list(values)
    return stream.out()


def decode(data: bytes | bytearray | memoryview, sedes: Any) -> Any:
    """Decode ``data`` with ``sedes``, anything with a ``decode(rlp)`` method."""
    return Rlp(data).as_val(sedes)


def decode_list(data: bytes | bytearray | memoryview, sedes: Any) -> list[Any]:
    """Decode every item of the list in ``data`` with ``sedes``."""
    return Rlp(data).as_list(sedes)