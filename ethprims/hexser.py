"""Hex string serialization of byte strings, integers and fixed hashes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, MutableSequence, TypeVar

if TYPE_CHECKING:
    from .primitives import FixedHash, UInt

__all__ = [
    "to_hex",
    "from_hex",
    "FromHexError",
    "ExpectedLen",
    "serialize",
    "serialize_uint",
    "deserialize",
    "deserialize_check_len",
    "uint_to_hex",
    "uint_from_hex",
    "hash_to_hex",
    "hash_from_hex",
]

U = TypeVar("U", bound="UInt")
H = TypeVar("H", bound="FixedHash")

_EXPECTING = "a (both 0x-prefixed or not) hex string or byte array"
_WHITESPACE = frozenset(b" \r\n\t")


class FromHexError(ValueError):
    """A non-hex character was found while decoding a hex string."""

    def __init__(self, character: str, index: int) -> None:
        self.character = character
        self.index = index
        super().__init__(f"invalid hex character: {character}, at {index}")


def _strip_prefix(text: str) -> tuple[str, bool]:
    if text.startswith("0x"):
        return text[2:], True
    return text, False


def to_hex(data: bytes | bytearray | memoryview, skip_leading_zero: bool) -> str:
    """Hex string with a ``0x`` prefix.

    With ``skip_leading_zero`` leading zeros are dropped, and an all-zero or
    empty input gives ``0x0``; otherwise an empty input gives ``0x``.
    """
    raw = bytes(data)
    if skip_leading_zero:
        raw = raw.lstrip(b"\x00")
        if not raw:
            return "0x0"
        digits = raw.hex()
        if digits[0] == "0":
            digits = digits[1:]
        return "0x" + digits
    return "0x" + raw.hex()


def _decode_hex_into(text: str, target: MutableSequence[int], stripped: bool) -> int:
    """Decode hex digits into ``target``; whitespace is skipped. Returns bytes written."""
    data = text.encode("utf-8")
    modulus = len(data) % 2
    buf = 0
    pos = 0
    for index, byte in enumerate(data):
        buf = (buf << 4) & 0xFF
        if 0x41 <= byte <= 0x46:
            buf |= byte - 0x41 + 10
        elif 0x61 <= byte <= 0x66:
            buf |= byte - 0x61 + 10
        elif 0x30 <= byte <= 0x39:
            buf |= byte - 0x30
        elif byte in _WHITESPACE:
            buf >>= 4
            continue
        else:
            raise FromHexError(chr(byte), index + (2 if stripped else 0))
        modulus += 1
        if modulus == 2:
            modulus = 0
            target[pos] = buf
            pos += 1
    return pos


def from_hex(text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix."""
    digits, stripped = _strip_prefix(text)
    buffer = bytearray((len(digits.encode("utf-8")) + 1) // 2)
    _decode_hex_into(digits, buffer, stripped)
    return bytes(buffer)


class ExpectedLen:
    """Target buffer for a length-checked decode.

    Without ``minimum`` the input must fill ``buffer`` exactly; with it the
    input length must lie in ``(minimum, len(buffer)]``.
    """

    def __init__(self, buffer: bytearray | memoryview, minimum: int | None = None) -> None:
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("the target buffer must be writable")
        if minimum is not None and minimum < 0:
            raise ValueError("the minimum length cannot be negative")
        self.buffer = buffer
        self.minimum = minimum

    def accepts(self, length: int) -> bool:
        """True when ``length`` bytes are an acceptable input size."""
        if self.minimum is None:
            return length == len(self.buffer)
        return self.minimum < length <= len(self.buffer)

    def _accepts_hex(self, digits: int) -> bool:
        if self.minimum is None:
            return digits == 2 * len(self.buffer)
        return 2 * self.minimum < digits <= 2 * len(self.buffer)

    def __str__(self) -> str:
        if self.minimum is None:
            return f"{len(self.buffer)} bytes"
        return f"between ({self.minimum}; {len(self.buffer)}] bytes"

    def __repr__(self) -> str:
        return f"ExpectedLen({str(self)!r})"


def _invalid_length(length: int, expected: ExpectedLen) -> ValueError:
    return ValueError(f"invalid length {length}, expected {_EXPECTING} containing {expected}")


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Iterable) and not isinstance(value, str):
        items = list(value)
        if not all(isinstance(item, int) and not isinstance(item, bool) for item in items):
            raise TypeError(f"expected {_EXPECTING}")
        return bytes(items)
    raise TypeError(f"expected {_EXPECTING}, got {type(value).__name__}")


def serialize(data: bytes | bytearray | memoryview) -> str:
    """Serialize bytes as a ``0x``-prefixed hex string; empty input gives ``0x``."""
    return to_hex(data, False)


def serialize_uint(data: bytes | bytearray | memoryview) -> str:
    """Serialize big-endian integer bytes as hex without leading zeros."""
    return to_hex(data, True)


def deserialize(value: Any) -> bytes:
    """Decode a hex string, a byte string or a sequence of byte values."""
    if isinstance(value, str):
        return from_hex(value)
    return _as_bytes(value)


def deserialize_check_len(value: Any, expected: ExpectedLen) -> int:
    """Decode ``value`` into ``expected.buffer`` after checking its length.

    Returns the number of bytes written.
    """
    if isinstance(value, str):
        digits, stripped = _strip_prefix(value)
        size = len(digits.encode("utf-8"))
        if not expected._accepts_hex(size):
            raise _invalid_length(size, expected)
        return _decode_hex_into(digits, expected.buffer, stripped)
    raw = _as_bytes(value)
    if not expected.accepts(len(raw)):
        raise _invalid_length(len(raw), expected)
    expected.buffer[: len(raw)] = raw
    return len(raw)


def uint_to_hex(value: UInt) -> str:
    """Hex form of a fixed-width integer, without leading zeros."""
    return serialize_uint(value.to_big_endian())


def uint_from_hex(cls: type[U], value: Any) -> U:
    """Parse a fixed-width integer of type ``cls`` from hex or bytes."""
    buffer = bytearray(cls.BITS // 8)
    wrote = deserialize_check_len(value, ExpectedLen(buffer, 0))
    return cls.from_big_endian(buffer[:wrote])


def hash_to_hex(value: FixedHash) -> str:
    """Full hex form of a fixed-size hash."""
    return serialize(bytes(value))


def hash_from_hex(cls: type[H], value: Any) -> H:
    """Parse a fixed-size hash of type ``cls`` from hex or bytes of exact size."""
    buffer = bytearray(cls.SIZE)
    deserialize_check_len(value, ExpectedLen(buffer))
    return cls(buffer)