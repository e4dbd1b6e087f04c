"""Errors raised while decoding RLP data."""

from __future__ import annotations

import enum


class DecoderErrorKind(enum.Enum):
    """The ways in which RLP decoding can fail."""

    RLP_IS_TOO_BIG = "RlpIsTooBig"
    """Data has additional bytes at the end of the valid RLP fragment."""
    RLP_IS_TOO_SHORT = "RlpIsTooShort"
    """Data has too few bytes for valid RLP."""
    RLP_EXPECTED_TO_BE_LIST = "RlpExpectedToBeList"
    """An encoded list was expected, the RLP was something else."""
    RLP_EXPECTED_TO_BE_DATA = "RlpExpectedToBeData"
    """Encoded data was expected, the RLP was something else."""
    RLP_INCORRECT_LIST_LEN = "RlpIncorrectListLen"
    """A list of a different size was expected."""
    RLP_DATA_LEN_WITH_ZERO_PREFIX = "RlpDataLenWithZeroPrefix"
    """Data length number has a leading zero byte."""
    RLP_LIST_LEN_WITH_ZERO_PREFIX = "RlpListLenWithZeroPrefix"
    """List length number has a leading zero byte."""
    RLP_INVALID_INDIRECTION = "RlpInvalidIndirection"
    """Non-canonical (longer than necessary) representation."""
    RLP_INCONSISTENT_LENGTH_AND_DATA = "RlpInconsistentLengthAndData"
    """Declared length is inconsistent with the data that follows."""
    RLP_INVALID_LENGTH = "RlpInvalidLength"
    """Declared length is invalid and results in overflow."""
    CUSTOM = "Custom"
    """A decoding error described by a message."""


class DecoderError(Exception):
    """An error concerning the RLP decoder."""

    def __init__(self, kind: DecoderErrorKind, message: str | None = None) -> None:
        if not isinstance(kind, DecoderErrorKind):
            raise TypeError(f"expected a DecoderErrorKind, got {kind!r}")
        if kind is DecoderErrorKind.CUSTOM and message is None:
            raise ValueError("a custom decoder error needs a message")
        if kind is not DecoderErrorKind.CUSTOM and message is not None:
            raise ValueError("only custom decoder errors carry a message")
        self.kind = kind
        self.message = message
        super().__init__(self.__str__())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecoderError):
            return NotImplemented
        return (self.kind, self.message) == (other.kind, other.message)

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __str__(self) -> str:
        if self.kind is DecoderErrorKind.CUSTOM:
            return f'Custom("{self.message}")'
        return self.kind.value

    def __repr__(self) -> str:
        if self.message is None:
            return f"DecoderError({self.kind})"
        return f"DecoderError({self.kind}, {self.message!r})"