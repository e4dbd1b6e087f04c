"""Class decorators that give dataclasses RLP encoding and decoding."""

from __future__ import annotations

import dataclasses
from typing import Any

from .codec import (
    BigEndianInt,
    Binary,
    Boolean,
    ListOf,
    OptionalOf,
    Text,
    binary,
    boolean,
    text,
)
from .errors import DecoderError
from .stream import RlpStream
from .view import Rlp

__all__ = [
    "rlp_field",
    "rlp_encodable",
    "rlp_encodable_wrapper",
    "rlp_decodable",
    "rlp_decodable_wrapper",
]

_SEDES = "rlp_sedes"
_DEFAULT = "rlp_default"

_SCALARS: dict[Any, Any] = {
    str: text,
    bytes: binary,
    bool: boolean,
    int: BigEndianInt(64),
}

_NAMED_SCALARS: dict[str, Any] = {
    "str": str,
    "bytes": bytes,
    "bool": bool,
    "int": int,
}


def rlp_field(sedes: Any = None, default: bool = False) -> Any:
    """A dataclass field with an explicit RLP sedes.

    With ``default`` the field falls back to the empty value of its sedes
    when its item cannot be decoded. At most one such field is allowed, and
    fields after it are read one position earlier, since the defaulted item
    is taken to be absent from the encoding.
    """
    return dataclasses.field(metadata={_SEDES: sedes, _DEFAULT: bool(default)})


def _init_fields(cls: type, decorator: str) -> list[dataclasses.Field]:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{decorator} is only defined for dataclasses")
    return [field for field in dataclasses.fields(cls) if field.init]


def _resolve_annotation(field: dataclasses.Field) -> Any:
    annotation = field.type
    if isinstance(annotation, str):
        try:
            return _NAMED_SCALARS[annotation.strip()]
        except KeyError:
            raise TypeError(
                f"cannot resolve the type of field {field.name!r}; use rlp_field"
            ) from None
    return annotation


def _sedes_for(field: dataclasses.Field) -> Any:
    sedes = field.metadata.get(_SEDES)
    if sedes is not None:
        return sedes
    annotation = _resolve_annotation(field)
    if annotation in _SCALARS:
        return _SCALARS[annotation]
    if isinstance(annotation, type) and callable(getattr(annotation, "decode", None)):
        return annotation
    raise TypeError(f"cannot infer an RLP sedes for field {field.name!r}; use rlp_field")


def _empty_value(sedes: Any) -> Any:
    """The value a defaulted field takes when its item cannot be decoded."""
    if isinstance(sedes, OptionalOf):
        return None
    if isinstance(sedes, ListOf):
        return []
    if isinstance(sedes, BigEndianInt):
        return 0
    if isinstance(sedes, Binary):
        return b""
    if isinstance(sedes, Text):
        return ""
    if isinstance(sedes, Boolean):
        return False
    return None


def _append(stream: RlpStream, value: Any, sedes: Any, counted: bool = True) -> None:
    if isinstance(sedes, OptionalOf):
        if value is None:
            stream.begin_list(0)
        else:
            stream.begin_list(1)
            _append(stream, value, sedes.inner)
    elif isinstance(sedes, ListOf):
        stream.begin_list(len(value))
        for item in value:
            _append(stream, item, sedes.inner)
    elif counted:
        stream.append(value)
    else:
        stream.append_internal(value)


def rlp_encodable(cls: type) -> type:
    """Encode instances as a list of their fields, in declaration order."""
    layout = [(field.name, field.metadata.get(_SEDES)) for field in _init_fields(cls, "rlp_encodable")]

    def rlp_append(self: Any, stream: RlpStream) -> None:
        stream.begin_list(len(layout))
        for name, sedes in layout:
            _append(stream, getattr(self, name), sedes)

    cls.rlp_append = rlp_append
    return cls


def rlp_encodable_wrapper(cls: type) -> type:
    """Encode instances of a one-field dataclass as that field alone."""
    fields = _init_fields(cls, "rlp_encodable_wrapper")
    if len(fields) != 1:
        raise TypeError("rlp_encodable_wrapper is only defined for dataclasses with one field")
    name, sedes = fields[0].name, fields[0].metadata.get(_SEDES)

    def rlp_append(self: Any, stream: RlpStream) -> None:
        _append(stream, getattr(self, name), sedes, counted=False)

    cls.rlp_append = rlp_append
    return cls


def rlp_decodable(cls: type) -> type:
    """Decode instances from a list holding their fields in declaration order."""
    layout = []
    default_seen = False
    for index, field in enumerate(_init_fields(cls, "rlp_decodable")):
        if default_seen:
            index -= 1
        is_default = bool(field.metadata.get(_DEFAULT, False))
        if is_default:
            if default_seen:
                raise TypeError("only one rlp_field(default=True) is allowed in a dataclass")
            default_seen = True
        layout.append((field.name, index, _sedes_for(field), is_default))

    def decode(klass: type, rlp: Rlp) -> Any:
        values = {}
        for name, index, sedes, is_default in layout:
            if is_default:
                try:
                    values[name] = rlp.val_at(index, sedes)
                except DecoderError:
                    values[name] = _empty_value(sedes)
            else:
                values[name] = rlp.val_at(index, sedes)
        return klass(**values)

    cls.decode = classmethod(decode)
    return cls


def rlp_decodable_wrapper(cls: type) -> type:
    """Decode instances of a one-field dataclass from that field's encoding."""
    fields = _init_fields(cls, "rlp_decodable_wrapper")
    if len(fields) != 1:
        raise TypeError("rlp_decodable_wrapper is only defined for dataclasses with one field")
    name, sedes = fields[0].name, _sedes_for(fields[0])

    def decode(klass: type, rlp: Rlp) -> Any:
        return klass(**{name: rlp.as_val(sedes)})

    cls.decode = classmethod(decode)
    return cls