import pytest

from ethprims.bytesutil import FixedBytesRef, FlexibleBytesRef, pretty, to_hex


def test_should_write_bytes_to_fixed_bytesref():
    data1 = bytearray([0, 0, 0])
    data2 = bytearray([0, 0, 0])
    bytes1 = FixedBytesRef(data1)
    bytes2 = FixedBytesRef(memoryview(data2)[1:2])

    res1 = bytes1.write(1, [1, 1, 1])
    res2 = bytes2.write(3, [1, 1, 1])

    assert data1 == bytearray([0, 1, 1])
    assert res1 == 2
    assert data2 == bytearray([0, 0, 0])
    assert res2 == 0


def test_should_write_bytes_to_flexible_bytesref():
    data1 = bytearray([0, 0, 0])
    data2 = bytearray([0, 0, 0])
    data3 = bytearray([0, 0, 0])

    res1 = FlexibleBytesRef(data1).write(1, bytes([1, 1, 1]))
    res2 = FlexibleBytesRef(data2).write(3, bytes([1, 1, 1]))
    res3 = FlexibleBytesRef(data3).write(5, bytes([1, 1, 1]))

    assert data1 == bytearray([0, 1, 1, 1])
    assert res1 == 3
    assert data2 == bytearray([0, 0, 0, 1, 1, 1])
    assert res2 == 3
    assert data3 == bytearray([0, 0, 0, 0, 0, 1, 1, 1])
    assert res3 == 5


def test_fixed_ref_bytes_and_len():
    ref = FixedBytesRef(bytearray([0, 0, 0]))
    ref.write(0, b"\x07")
    assert bytes(ref) == b"\x07\x00\x00"
    assert len(ref) == 3


def test_flexible_ref_bytes_and_len():
    ref = FlexibleBytesRef(bytearray(b"ab"))
    ref.write(2, b"cd")
    assert bytes(ref) == b"abcd"
    assert len(ref) == 4


def test_fixed_ref_rejects_readonly():
    with pytest.raises(TypeError):
        FixedBytesRef(b"abc")


def test_flexible_ref_rejects_bytes():
    with pytest.raises(TypeError):
        FlexibleBytesRef(b"abc")


def test_pretty_separates_bytes():
    assert pretty(bytes([0x01, 0xAB, 0x00])) == "01·ab·00"
    assert pretty(b"") == ""


def test_to_hex():
    assert to_hex(bytes([0x00, 0xFF, 0x10])) == "00ff10"
    assert to_hex(b"") == ""


def test_pretty_and_hex_agree():
    data = bytes(range(20))
    assert pretty(data).replace("·", "") == to_hex(data)