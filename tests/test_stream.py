import pytest

from ethprims.stream import RlpStream
from ethprims.view import Rlp


def test_append_empty_data_twice():
    stream = RlpStream.new_list(2)
    stream.append_empty_data().append_empty_data()
    assert stream.out() == bytes([0xC2, 0x80, 0x80])


def test_append_chain():
    stream = RlpStream.new_list(2)
    stream.append("cat").append("dog")
    assert stream.out() == bytes([0xC8, 0x83]) + b"cat" + b"\x83dog"


def test_append_iter():
    stream = RlpStream.new_list(2)
    stream.append("cat").append_iter(iter(b"dog"))
    assert stream.out() == bytes([0xC8, 0x83]) + b"cat" + b"\x83dog"


def test_begin_list_nested():
    stream = RlpStream.new_list(2)
    stream.begin_list(2).append("cat").append("dog")
    stream.append("")
    assert stream.out() == bytes([0xCA, 0xC8, 0x83]) + b"cat\x83dog\x80"


def test_clear_on_list():
    stream = RlpStream.new_list(3)
    stream.append("cat")
    stream.clear()
    stream.append("dog")
    assert stream.out() == b"\x83dog"


def test_is_finished():
    stream = RlpStream.new_list(2)
    stream.append("cat")
    assert stream.is_finished() is False
    stream.append("dog")
    assert stream.is_finished() is True
    assert stream.out() == bytes([0xC8, 0x83]) + b"cat\x83dog"


def test_encode_into_existing_buffer():
    buffer = bytearray(b"junk")
    inner = RlpStream(bytearray(b"!"))
    inner.append("cat")
    buffer.extend(inner.out())
    buffer.extend(b" and ")
    stream = RlpStream(buffer)
    stream.append("dog")
    assert stream.out() == b"junk!\x83cat and \x83dog"


def test_clear_keeps_existing_prefix():
    stream = RlpStream(bytearray(b"junk"))
    stream.append("parrot")
    stream.clear()
    stream.append("cat")
    assert stream.out() == b"junk\x83cat"


def test_nested_empty_list_encode():
    stream = RlpStream.new_list(2)
    stream.append_list([])
    stream.append(0x28)
    assert stream.out() == bytes.fromhex("c2c028")


def test_nested_empty_lists():
    stream = RlpStream.new_list(3)
    stream.begin_list(0)
    stream.begin_list(1).begin_list(0)
    stream.begin_list(2).begin_list(0).begin_list(1).begin_list(0)
    assert stream.out() == bytes([0xC7, 0xC0, 0xC1, 0xC0, 0xC3, 0xC0, 0xC1, 0xC0])


def test_thousand_empty_lists():
    stream = RlpStream.new_list(1000)
    for _ in range(1000):
        stream.begin_list(0)
    out = stream.out()
    assert out[:3] == bytes.fromhex("f903e8")
    assert len(out) == 1003
    assert Rlp(out).item_count() == 1000


def test_long_list_header():
    stream = RlpStream.new_list(20)
    for _ in range(19):
        stream.append("abc")
    assert stream.estimate_size(0) == 78
    stream.append("abc")
    out = stream.out()
    assert out[:2] == bytes([0xF8, 0x50])
    assert len(out) == 82


def test_stream_size_limit():
    for limit in range(40, 270):
        stream = RlpStream()
        while stream.append_raw_checked(b"\x00", 1, limit):
            pass
        assert len(stream.out()) == limit


def test_unbounded_list():
    stream = RlpStream()
    stream.begin_unbounded_list()
    stream.append(40)
    stream.append(41)
    assert not stream.is_finished()
    stream.finalize_unbounded_list()
    assert stream.is_finished()
    assert stream.out() == bytes([0xC2, 40, 41])


def test_estimate_size_for_long_unbounded_list():
    stream = RlpStream()
    stream.begin_unbounded_list()
    stream.append_raw(bytes(56), 56)
    assert stream.estimate_size(0) == 58
    assert len(stream) == 58
    stream.finalize_unbounded_list()
    out = stream.out()
    assert out[:2] == bytes([0xF8, 0x38])
    assert len(out) == 58


def test_finalize_without_open_list():
    with pytest.raises(ValueError):
        RlpStream().finalize_unbounded_list()


def test_finalize_bounded_list_fails():
    stream = RlpStream.new_list(2)
    with pytest.raises(ValueError):
        stream.finalize_unbounded_list()


def test_too_many_items():
    stream = RlpStream.new_list(1)
    with pytest.raises(ValueError):
        stream.append_raw(b"\x01\x02", 2)


def test_out_of_unfinished_stream():
    stream = RlpStream.new_list(2)
    stream.append("cat")
    with pytest.raises(ValueError):
        stream.out()


def test_as_raw_includes_prefix():
    stream = RlpStream(bytearray(b"ab"))
    stream.append(1)
    assert stream.as_raw() == b"ab\x01"


def test_encode_value_long():
    stream = RlpStream()
    text = b"Lorem ipsum dolor sit amet, consectetur adipisicing elit"
    stream.encode_value(text)
    assert stream.as_raw() == bytes([0xB8, 0x38]) + text


def test_append_internal_does_not_count():
    stream = RlpStream.new_list(1)
    stream.append_internal("cat")
    assert not stream.is_finished()
    stream.append("dog")
    assert stream.out() == bytes([0xC8, 0x83]) + b"cat\x83dog"


def test_append_unsupported_type():
    with pytest.raises(TypeError):
        RlpStream().append(1.5)


def test_append_negative_int():
    with pytest.raises(ValueError):
        RlpStream().append(-1)


def test_new_list_with_buffer():
    stream = RlpStream.new_list(1, bytearray(b"x"))
    stream.append(b"\x05")
    assert stream.out() == b"x\xc1\x05"