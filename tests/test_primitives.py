import math
import sys

import jsonschema
import pytest

from ethprims.codec import decode, encode
from ethprims.errors import DecoderError, DecoderErrorKind
from ethprims.primitives import H160, H256, U128, U256, U512

BIG_HEX = "8090a0b0c0d0e0f00910203040506077000000000000000100000000000012f0"
ADDRESS_HEX = "0123456789abcdef0123456789abcdef01234567"


def test_convert_u256_to_f64():
    assert U256(0).to_f64_lossy() == 0.0
    assert U256(42).to_f64_lossy() == 42.0
    assert U256(1_000_000_000_000_000_000).to_f64_lossy() == 1_000_000_000_000_000_000.0


def test_convert_u256_to_f64_precision_loss():
    assert U256(2**64 - 1).to_f64_lossy() == 18446744073709551616.0
    assert (
        U256.max_value().to_f64_lossy()
        == 115792089237316195423570985008687907853269984665640564039457584007913129639935.0
    )
    assert (
        U256.max_value().to_f64_lossy()
        == 115792089237316200000000000000000000000000000000000000000000000000000000000000.0
    )


def test_convert_f64_to_u256():
    assert U256.from_f64_lossy(0.0) == U256(0)
    assert U256.from_f64_lossy(13.37) == U256(13)
    assert U256.from_f64_lossy(42.0) == U256(42)
    assert U256.from_f64_lossy(999.999) == U256(999)
    assert U256.from_f64_lossy(1_000_000_000_000_000_000.0) == U256(1_000_000_000_000_000_000)


def test_convert_f64_to_u256_large():
    value = U256(1) << U256(255)
    assert U256.from_f64_lossy(float(str(value))) == value


def test_convert_f64_to_u256_overflow():
    assert (
        U256.from_f64_lossy(
            115792089237316200000000000000000000000000000000000000000000000000000000000000.0
        )
        == U256.max_value()
    )
    assert (
        U256.from_f64_lossy(
            999999999999999999999999999999999999999999999999999999999999999999999999999999.0
        )
        == U256.max_value()
    )


def test_convert_f64_to_u256_non_normal():
    assert U256.from_f64_lossy(sys.float_info.epsilon) == U256(0)
    assert U256.from_f64_lossy(0.0) == U256(0)
    assert U256.from_f64_lossy(math.nan) == U256(0)
    assert U256.from_f64_lossy(-math.inf) == U256(0)
    assert U256.from_f64_lossy(math.inf) == U256.max_value()


def test_f64_to_u256_truncation():
    assert U256.from_f64_lossy(10.5) == U256(10)


def test_u256_isqrt():
    assert U256.max_value().integer_sqrt() == U256(2**128 - 1)
    assert U256(17).integer_sqrt() == U256(4)


def test_u256_checked_operations():
    zero, one, top = U256.zero(), U256.one(), U256.max_value()
    assert top.checked_add(one) is None
    assert zero.checked_add(one) == one
    assert zero.checked_sub(one) is None
    assert one.checked_sub(zero) == one
    assert top.checked_div(zero) is None
    assert top.checked_div(one) == top
    assert top.checked_mul(top) is None
    assert top.checked_mul(zero) == zero


def test_arithmetic_overflow_raises():
    with pytest.raises(OverflowError):
        U256.max_value() + 1
    with pytest.raises(OverflowError):
        U256(0) - 1
    with pytest.raises(ZeroDivisionError):
        U256(5) // 0


def test_arithmetic_results():
    assert U256(7) + U256(5) == 12
    assert U256(7) - 5 == U256(2)
    assert U256(7) * 6 == U256(42)
    assert U256(7) // 2 == U256(3)
    assert U256(7) % 4 == U256(3)
    assert U256(1) << 256 == U256(0)
    assert (U256.max_value() << 8) >> 248 == U256(0xFF)


def test_ordering_and_hash():
    assert U256(3) < U256(4)
    assert U256(4) >= 4
    assert hash(U256(9)) == hash(9)


def test_bits_and_leading_zeros():
    assert U256(0).bits() == 0
    assert U256(0).leading_zeros() == 256
    assert U256(0x100).bits() == 9
    assert U128(1).leading_zeros() == 127
    assert U256(0).is_zero()


def test_endian_roundtrip():
    value = U256.from_big_endian(bytes.fromhex(BIG_HEX))
    assert value.to_big_endian().hex() == BIG_HEX
    assert U256.from_little_endian(value.to_little_endian()) == value
    assert U128(1).to_little_endian() == b"\x01" + bytes(15)


def test_from_big_endian_too_long():
    with pytest.raises(ValueError):
        U128.from_big_endian(bytes(17))


def test_from_str_radix():
    assert U256.from_str_radix("255", 10) == U256(255)
    assert U256.from_str_radix("fF", 16) == U256(255)
    with pytest.raises(ValueError):
        U256.from_str_radix("12", 8)
    with pytest.raises(ValueError):
        U256.from_str_radix("12x", 10)
    with pytest.raises(ValueError):
        U128.from_str_radix("1" + "0" * 32, 16)


def test_width_conversions():
    assert U512(U256(5)) == U512(5)
    assert U256(U128(7)) == U256(7)
    assert U128(U256(2**128 - 1)) == U128(2**128 - 1)
    assert U256(U512(2**256 - 1)) == U256.max_value()
    with pytest.raises(OverflowError):
        U128(U256(2**128))
    with pytest.raises(OverflowError):
        U256(U512(2**256))
    with pytest.raises(OverflowError):
        U128(U512(2**200))


def test_full_mul():
    top128 = U128.max_value()
    product = top128.full_mul(top128)
    assert isinstance(product, U256)
    assert int(product) == 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFE00000000000000000000000000000001
    wide = U256.max_value().full_mul(U256(2))
    assert isinstance(wide, U512)
    assert int(wide) == 2**257 - 2


@pytest.mark.parametrize(
    "value, expected",
    [
        (U256(0), "80"),
        (U256(0x0100_0000), "8401000000"),
        (U256(0xFFFF_FFFF), "84ffffffff"),
        (U256.from_big_endian(bytes.fromhex(BIG_HEX)), "a0" + BIG_HEX),
    ],
)
def test_rlp_u256_roundtrip(value, expected):
    assert encode(value).hex() == expected
    assert decode(bytes.fromhex(expected), U256) == value


def test_rlp_uint_errors():
    with pytest.raises(DecoderError) as err:
        decode(bytes.fromhex("820001"), U256)
    assert err.value.kind is DecoderErrorKind.RLP_INVALID_INDIRECTION
    with pytest.raises(DecoderError) as err:
        decode(bytes.fromhex("91" + "01" * 17), U128)
    assert err.value.kind is DecoderErrorKind.RLP_IS_TOO_BIG


def test_rlp_address_roundtrip():
    address = H160(bytes.fromhex(ADDRESS_HEX))
    assert encode(address).hex() == "94" + ADDRESS_HEX
    assert decode(bytes.fromhex("94" + ADDRESS_HEX), H160) == address


def test_rlp_hash_wrong_length():
    with pytest.raises(DecoderError) as err:
        decode(bytes.fromhex("93" + ADDRESS_HEX[:38]), H160)
    assert err.value.kind is DecoderErrorKind.RLP_IS_TOO_SHORT
    with pytest.raises(DecoderError) as err:
        decode(bytes.fromhex("95" + ADDRESS_HEX + "ff"), H160)
    assert err.value.kind is DecoderErrorKind.RLP_IS_TOO_BIG


def test_fixed_hash_basics():
    assert bytes(H160.zero()) == bytes(20)
    assert repr(H160.zero()) == "H160('0x" + "00" * 20 + "')"
    with pytest.raises(ValueError):
        H160(bytes(19))
    assert H160(bytes(20)) == H160.zero()
    assert hash(H160(bytes(20))) == hash(H160.zero())


def test_hash_conversions():
    small = H160(bytes.fromhex(ADDRESS_HEX))
    big = H256.from_h160(small)
    assert bytes(big) == bytes(12) + bytes(small)
    assert H160.from_h256(big) == small


def test_scale_codec():
    assert U256(1).scale_encode() == b"\x01" + bytes(31)
    assert U256.scale_decode(U256(258).scale_encode()) == U256(258)
    assert U256.max_encoded_len() == 32
    assert H256.max_encoded_len() == 32
    address = H160(bytes.fromhex(ADDRESS_HEX))
    assert H160.scale_decode(address.scale_encode()) == address
    with pytest.raises(ValueError):
        U256.scale_decode(bytes(31))
    with pytest.raises(ValueError):
        H160.scale_decode(bytes(19))


def test_h160_json_schema():
    validator = jsonschema.Draft7Validator(H160.json_schema())
    assert validator.is_valid("0x" + ADDRESS_HEX)
    assert validator.is_valid("0X" + ADDRESS_HEX.upper())
    assert not validator.is_valid("42")


def test_u256_json_schema():
    validator = jsonschema.Draft7Validator(U256.json_schema())
    assert validator.is_valid("42")
    assert not validator.is_valid("1" * 79)