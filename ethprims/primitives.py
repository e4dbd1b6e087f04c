"""Fixed-width unsigned integers and fixed-size hashes."""

from __future__ import annotations

import functools
import math
import struct
from typing import TYPE_CHECKING, Any, ClassVar

from .errors import DecoderError, DecoderErrorKind

if TYPE_CHECKING:
    from .stream import RlpStream
    from .view import Rlp

__all__ = [
    "UInt",
    "U128",
    "U256",
    "U512",
    "FixedHash",
    "H128",
    "H160",
    "H256",
    "H384",
    "H512",
    "H768",
]

BytesLike = "bytes | bytearray | memoryview"


@functools.total_ordering
class UInt:
    """Unsigned integer of a fixed bit width.

    Addition, subtraction and multiplication raise :class:`OverflowError` when
    the result does not fit; shifting left discards the bits shifted out.
    """

    BITS: ClassVar[int]
    __slots__ = ("_value",)

    def __init__(self, value: int | UInt = 0) -> None:
        if type(self) is UInt:
            raise TypeError("UInt is abstract; use U128, U256 or U512")
        if isinstance(value, UInt):
            number = int(value)
        elif isinstance(value, int):
            number = value
        else:
            raise TypeError(f"cannot build {type(self).__name__} from {type(value).__name__}")
        if number < 0:
            raise OverflowError(f"{type(self).__name__} cannot hold a negative number")
        if number > self._max():
            raise OverflowError(f"{number} does not fit in {type(self).__name__}")
        self._value = number

    @classmethod
    def _max(cls) -> int:
        return (1 << cls.BITS) - 1

    @classmethod
    def _bytes(cls) -> int:
        return cls.BITS // 8

    def _coerce(self, other: Any) -> int | None:
        if isinstance(other, UInt):
            return int(other)
        if isinstance(other, int):
            if other < 0:
                raise OverflowError("operand cannot be negative")
            return other
        return None

    def _checked(self, number: int) -> UInt:
        if number > self._max():
            raise OverflowError("arithmetic operation overflow")
        if number < 0:
            raise OverflowError("arithmetic operation underflow")
        return type(self)(number)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UInt):
            return self._value == int(other)
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, (UInt, int)):
            return self._value < int(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __add__(self, other: Any) -> UInt:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._checked(self._value + value)

    def __sub__(self, other: Any) -> UInt:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._checked(self._value - value)

    def __mul__(self, other: Any) -> UInt:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._checked(self._value * value)

    def __floordiv__(self, other: Any) -> UInt:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        if value == 0:
            raise ZeroDivisionError("division by zero")
        return type(self)(self._value // value)

    def __mod__(self, other: Any) -> UInt:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        if value == 0:
            raise ZeroDivisionError("modulo by zero")
        return type(self)(self._value % value)

    def __lshift__(self, other: Any) -> UInt:
        shift = self._coerce(other)
        if shift is None:
            return NotImplemented
        if shift >= self.BITS:
            return type(self)(0)
        return type(self)((self._value << shift) & self._max())

    def __rshift__(self, other: Any) -> UInt:
        shift = self._coerce(other)
        if shift is None:
            return NotImplemented
        return type(self)(self._value >> shift)

    @classmethod
    def zero(cls) -> UInt:
        """The value 0."""
        return cls(0)

    @classmethod
    def one(cls) -> UInt:
        """The value 1."""
        return cls(1)

    @classmethod
    def max_value(cls) -> UInt:
        """The largest value of this width."""
        return cls(cls._max())

    def is_zero(self) -> bool:
        """True for 0."""
        return self._value == 0

    def bits(self) -> int:
        """Number of significant bits."""
        return self._value.bit_length()

    def leading_zeros(self) -> int:
        """Number of zero bits above the most significant set bit."""
        return self.BITS - self._value.bit_length()

    @classmethod
    def from_big_endian(cls, data: bytes | bytearray | memoryview) -> UInt:
        """Build a value from at most ``BITS / 8`` big-endian bytes."""
        raw = bytes(data)
        if len(raw) > cls._bytes():
            raise ValueError(f"{cls.__name__} takes at most {cls._bytes()} bytes")
        return cls(int.from_bytes(raw, "big"))

    def to_big_endian(self) -> bytes:
        """Full-width big-endian bytes."""
        return self._value.to_bytes(self._bytes(), "big")

    @classmethod
    def from_little_endian(cls, data: bytes | bytearray | memoryview) -> UInt:
        """Build a value from at most ``BITS / 8`` little-endian bytes."""
        raw = bytes(data)
        if len(raw) > cls._bytes():
            raise ValueError(f"{cls.__name__} takes at most {cls._bytes()} bytes")
        return cls(int.from_bytes(raw, "little"))

    def to_little_endian(self) -> bytes:
        """Full-width little-endian bytes."""
        return self._value.to_bytes(self._bytes(), "little")

    @classmethod
    def from_str_radix(cls, text: str, radix: int) -> UInt:
        """Parse ``text`` in base 10 or 16."""
        if radix == 10:
            allowed = "0123456789"
        elif radix == 16:
            allowed = "0123456789abcdefABCDEF"
        else:
            raise ValueError(f"unsupported radix {radix}; only 10 and 16 are allowed")
        if not text or any(char not in allowed for char in text):
            raise ValueError(f"invalid digits for radix {radix}: {text!r}")
        number = int(text, radix)
        if number > cls._max():
            raise ValueError(f"{text!r} does not fit in {cls.__name__}")
        return cls(number)

    def checked_add(self, other: Any) -> UInt | None:
        """Sum, or None on overflow."""
        try:
            return self + other
        except OverflowError:
            return None

    def checked_sub(self, other: Any) -> UInt | None:
        """Difference, or None on underflow."""
        try:
            return self - other
        except OverflowError:
            return None

    def checked_mul(self, other: Any) -> UInt | None:
        """Product, or None on overflow."""
        try:
            return self * other
        except OverflowError:
            return None

    def checked_div(self, other: Any) -> UInt | None:
        """Quotient, or None when dividing by zero."""
        try:
            return self // other
        except ZeroDivisionError:
            return None

    def integer_sqrt(self) -> UInt:
        """The largest value whose square does not exceed this one."""
        return type(self)(math.isqrt(self._value))

    def rlp_append(self, stream: RlpStream) -> None:
        """Write this value as RLP data without leading zero bytes."""
        leading = self._bytes() - (self.bits() + 7) // 8
        stream.encode_value(self.to_big_endian()[leading:])

    @classmethod
    def decode(cls, rlp: Rlp) -> UInt:
        """Decode a canonical RLP integer."""

        def convert(data: bytes) -> UInt:
            if data and data[0] == 0:
                raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            if len(data) > cls._bytes():
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
            return cls.from_big_endian(data)

        return rlp.decode_value(convert)

    def scale_encode(self) -> bytes:
        """SCALE encoding: full-width little-endian bytes."""
        return self.to_little_endian()

    @classmethod
    def scale_decode(cls, data: bytes | bytearray | memoryview) -> UInt:
        """Read a value from the first ``BITS / 8`` bytes of SCALE input."""
        raw = bytes(data)
        if len(raw) < cls._bytes():
            raise ValueError("not enough data to decode")
        return cls.from_little_endian(raw[: cls._bytes()])

    @classmethod
    def max_encoded_len(cls) -> int:
        """Largest SCALE encoded size."""
        return cls._bytes()


class U128(UInt):
    """128-bit unsigned integer."""

    BITS = 128
    __slots__ = ()

    def full_mul(self, other: U128) -> U256:
        """Full 256-bit product; cannot overflow."""
        return U256(int(self) * int(U128(other)))


class U256(UInt):
    """256-bit unsigned integer."""

    BITS = 256
    __slots__ = ()

    def full_mul(self, other: U256) -> U512:
        """Full 512-bit product; cannot overflow."""
        return U512(int(self) * int(U256(other)))

    @classmethod
    def from_f64_lossy(cls, value: float) -> U256:
        """Saturating conversion from a float, truncating any fraction.

        NaN and values up to 0 give 0; values past the maximum give the maximum.
        """
        if not value >= 1.0:
            return cls(0)
        (bits,) = struct.unpack("<Q", struct.pack("<d", value))
        exponent = ((bits >> 52) & 0x7FF) - 1023
        mantissa = (bits & 0x000F_FFFF_FFFF_FFFF) | 0x0010_0000_0000_0000
        if exponent <= 52:
            return cls(mantissa >> (52 - exponent))
        if exponent >= 256:
            return cls.max_value()
        return cls(mantissa) << (exponent - 52)

    def to_f64_lossy(self) -> float:
        """Nearest float, ties to even."""
        return float(int(self))

    @classmethod
    def json_schema(cls) -> dict[str, Any]:
        """JSON schema of the decimal string form."""
        return {
            "type": "string",
            "description": "256-bit Unsigned Integer",
            "pattern": "^(0|[1-9][0-9]{0,77})$",
        }


class U512(UInt):
    """512-bit unsigned integer."""

    BITS = 512
    __slots__ = ()


class FixedHash:
    """Uninterpreted byte string of a fixed size."""

    SIZE: ClassVar[int]
    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        if type(self) is FixedHash:
            raise TypeError("FixedHash is abstract; use one of the sized hashes")
        raw = bytes(data)
        if len(raw) != self.SIZE:
            raise ValueError(f"{type(self).__name__} needs {self.SIZE} bytes, got {len(raw)}")
        self._data = raw

    @classmethod
    def zero(cls) -> FixedHash:
        """The all-zero hash."""
        return cls(bytes(cls.SIZE))

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return self.SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedHash):
            return NotImplemented
        return type(self) is type(other) and self._data == other._data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}('0x{self._data.hex()}')"

    def __str__(self) -> str:
        return f"0x{self._data.hex()}"

    def rlp_append(self, stream: RlpStream) -> None:
        """Write the bytes as one RLP data item."""
        stream.encode_value(self._data)

    @classmethod
    def decode(cls, rlp: Rlp) -> FixedHash:
        """Decode RLP data of exactly ``SIZE`` bytes."""

        def convert(data: bytes) -> FixedHash:
            if len(data) < cls.SIZE:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
            if len(data) > cls.SIZE:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
            return cls(data)

        return rlp.decode_value(convert)

    def scale_encode(self) -> bytes:
        """SCALE encoding: the raw bytes."""
        return self._data

    @classmethod
    def scale_decode(cls, data: bytes | bytearray | memoryview) -> FixedHash:
        """Read a hash from the first ``SIZE`` bytes of SCALE input."""
        raw = bytes(data)
        if len(raw) < cls.SIZE:
            raise ValueError("not enough data to decode")
        return cls(raw[: cls.SIZE])

    @classmethod
    def max_encoded_len(cls) -> int:
        """Largest SCALE encoded size."""
        return cls.SIZE


class H128(FixedHash):
    """16-byte hash."""

    SIZE = 16
    __slots__ = ()


class H160(FixedHash):
    """20-byte hash."""

    SIZE = 20
    __slots__ = ()

    @classmethod
    def from_h256(cls, value: H256) -> H160:
        """The last 20 bytes of a 32-byte hash."""
        return cls(bytes(value)[H256.SIZE - cls.SIZE :])

    @classmethod
    def json_schema(cls) -> dict[str, Any]:
        """JSON schema of the 0x-prefixed hex form."""
        return {
            "type": "string",
            "description": "Hex encoded 20 bytes",
            "pattern": "^0(x|X)[a-fA-F0-9]{40}$",
        }


class H256(FixedHash):
    """32-byte hash."""

    SIZE = 32
    __slots__ = ()

    @classmethod
    def from_h160(cls, value: H160) -> H256:
        """A 20-byte hash placed in the last bytes, zero padded in front."""
        return cls(bytes(cls.SIZE - H160.SIZE) + bytes(value))


class H384(FixedHash):
    """48-byte hash."""

    SIZE = 48
    __slots__ = ()


class H512(FixedHash):
    """64-byte hash."""

    SIZE = 64
    __slots__ = ()


class H768(FixedHash):
    """96-byte hash."""

    SIZE = 96
    __slots__ = ()