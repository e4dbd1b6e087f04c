# ethprims

A library for working with Recursive Length Prefix (RLP) data and
fixed-width binary values. It has no runtime dependencies.

## Modules

- `ethprims.stream` has `RlpStream`, an encoder you build up piece by piece.
  It writes into a `bytearray`. Any bytes already in that buffer stay in front
  of the output, and `clear()` does not remove them. It supports bounded lists
  (`begin_list`, `new_list`), unbounded lists (`begin_unbounded_list` /
  `finalize_unbounded_list`), raw appends (`append_raw`) and raw appends with a
  size limit (`append_raw_checked`). `out()` raises `ValueError` if a list is
  still open.
- `ethprims.view` has `Rlp`, a read-only view over encoded bytes. It offers
  `at`, `at_with_offset`, `item_count`, iteration, `is_list` / `is_data` /
  `is_int`, `prototype`, `payload_info` and `decode_value`, which checks that the
  data is in canonical form. Malformed input raises
  `ethprims.errors.DecoderError`; its `kind` is a `DecoderErrorKind`.
- `ethprims.codec` has `encode`, `encode_list`, `decode` and `decode_list`.
  A "sedes" is any object with a `decode(rlp)` method. The module provides
  these sedes: `BigEndianInt(bits)`, `Binary`, `Text`, `Boolean`,
  `OptionalOf(inner)` and `ListOf(inner)`. When encoding, `int`, `bool`, `str`,
  byte strings, `None` (empty list), lists and tuples, and any object with an
  `rlp_append(stream)` method are accepted.
- `ethprims.primitives` has the unsigned integers `U128`, `U256` and `U512`.
  Addition, subtraction and multiplication raise `OverflowError` on overflow.
  The `checked_*` methods return `None` instead. The integers also have
  `integer_sqrt`, big- and little-endian conversion and `full_mul`.
  `U256.from_f64_lossy` / `to_f64_lossy` convert to and from floats.
  The module also has the fixed hashes `H128`, `H160`, `H256`, `H384`, `H512`
  and `H768`. All of these types encode and decode as RLP, and also support
  SCALE (`scale_encode`, `scale_decode`, `max_encoded_len`).
  `U256.json_schema()` and `H160.json_schema()` return JSON schema dictionaries.
- `ethprims.hexser` converts between bytes and `0x`-prefixed hex: `to_hex`,
  `from_hex`, `serialize`, `serialize_uint`, `deserialize`, and
  `deserialize_check_len` with an `ExpectedLen` target. It also has helpers for
  the integer and hash types: `uint_to_hex`, `uint_from_hex`, `hash_to_hex`
  and `hash_from_hex`. A bad hex character raises `FromHexError`.
- `ethprims.derive` has class decorators that add RLP support to dataclasses.
  `rlp_encodable` and `rlp_decodable` treat the instance as a list of its
  fields. `rlp_encodable_wrapper` and `rlp_decodable_wrapper` are for a
  dataclass with a single field, which is encoded on its own. `rlp_field`
  sets a field's sedes explicitly or marks the field as defaulted.
- `ethprims.bytesutil` has `pretty` and `to_hex` for displaying bytes, and two
  writable buffer references, `FlexibleBytesRef` and `FixedBytesRef`.
- `ethprims.kvdb` has `DBTransaction`, with operations `Insert`, `Delete` and
  `DeletePrefix`. It also has `IoStats` / `IoStatsKind`, the abstract
  `KeyValueDB` base class and `end_prefix`.

## Examples

```python
from ethprims.codec import encode, decode, Text

assert encode("cat") == b"\x83cat"
assert decode(b"\x83cat", Text()) == "cat"
```

```python
from ethprims.stream import RlpStream

stream = RlpStream.new_list(2)
stream.append("cat").append("dog")
assert stream.out() == b"\xc8\x83cat\x83dog"
```

```python
from ethprims.view import Rlp

rlp = Rlp(b"\xc8\x83cat\x83dog")
assert rlp.is_list()
assert rlp.item_count() == 2
assert rlp.at(1).as_raw() == b"\x83dog"
```

```python
from dataclasses import dataclass

from ethprims.codec import decode, encode
from ethprims.derive import rlp_decodable, rlp_encodable


@rlp_decodable
@rlp_encodable
@dataclass
class Item:
    a: str


assert encode(Item("cat")) == b"\xc4\x83cat"
assert decode(b"\xc4\x83cat", Item) == Item("cat")
```

```python
from ethprims.primitives import U256
from ethprims.hexser import to_hex, from_hex

assert U256.from_f64_lossy(13.37) == U256(13)
assert to_hex(b"\x00\x01\x02", True) == "0x102"
assert from_hex("0x0102") == b"\x01\x02"
```

```python
from ethprims.kvdb import end_prefix

assert end_prefix(b"\x05\x06\xff") == b"\x05\x07"
assert end_prefix(b"\xff") is None
```

## What it does not do

`ethprims.kvdb` defines only the interface of a key-value database. It has no
storage backend. To use it, subclass `KeyValueDB` and implement `get`,
`get_by_prefix`, `write`, `iter` and `iter_with_prefix`. The package has no
command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```