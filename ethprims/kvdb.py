"""Key-value store abstraction with column families and I/O statistics."""

from __future__ import annotations

import abc
import enum
import time
from dataclasses import dataclass, field
from typing import Iterator, Union

__all__ = [
    "PREFIX_LEN",
    "IoStatsKind",
    "IoStats",
    "Insert",
    "Delete",
    "DeletePrefix",
    "DBOp",
    "DBTransaction",
    "KeyValueDB",
    "end_prefix",
]

PREFIX_LEN = 12
"""Required length of prefixes."""

BytesLike = Union[bytes, bytearray, memoryview]


class IoStatsKind(enum.Enum):
    """Which statistics to query."""

    OVERALL = "overall"
    """Statistics since start."""
    SINCE_PREVIOUS = "since_previous"
    """Statistics since the previous query."""


@dataclass
class IoStats:
    """I/O statistics over a period of ``span`` seconds."""

    transactions: int = 0
    reads: int = 0
    cache_reads: int = 0
    writes: int = 0
    bytes_read: int = 0
    cache_read_bytes: int = 0
    bytes_written: int = 0
    started: float = field(default_factory=time.monotonic)
    span: float = 0.0

    @classmethod
    def empty(cls) -> IoStats:
        """An empty report starting now."""
        return cls()

    def _per_sec(self, count: float) -> float:
        if self.span == 0.0:
            return 0.0
        return count / self.span

    def avg_batch_size(self) -> float:
        """Transactions per write."""
        if self.writes == 0:
            return 0.0
        return self.transactions / self.writes

    def reads_per_sec(self) -> float:
        """Read operations per second."""
        return self._per_sec(self.reads)

    def byte_reads_per_sec(self) -> float:
        """Bytes read per second."""
        return self._per_sec(self.bytes_read)

    def writes_per_sec(self) -> float:
        """Write operations per second."""
        return self._per_sec(self.writes)

    def byte_writes_per_sec(self) -> float:
        """Bytes written per second."""
        return self._per_sec(self.bytes_written)

    def ops_per_sec(self) -> float:
        """Reads and writes per second."""
        return self._per_sec(self.writes + self.reads)

    def transactions_per_sec(self) -> float:
        """Transactions per second."""
        return self._per_sec(self.transactions)

    def avg_transaction_size(self) -> float:
        """Bytes written per transaction."""
        if self.transactions == 0:
            return 0.0
        return self.bytes_written / self.transactions

    def cache_hit_ratio(self) -> float:
        """Share of reads served from cache."""
        if self.reads == 0:
            return 0.0
        return self.cache_reads / self.reads


@dataclass(frozen=True)
class Insert:
    """Store ``value`` under ``key``."""

    col: int
    key: bytes
    value: bytes


@dataclass(frozen=True)
class Delete:
    """Remove ``key``."""

    col: int
    key: bytes


@dataclass(frozen=True)
class DeletePrefix:
    """Remove every key starting with ``prefix``."""

    col: int
    prefix: bytes

    @property
    def key(self) -> bytes:
        """The prefix, which plays the role of the key."""
        return self.prefix


DBOp = Union[Insert, Delete, DeletePrefix]


@dataclass
class DBTransaction:
    """A batch of put and delete operations."""

    ops: list[DBOp] = field(default_factory=list)

    def put(self, col: int, key: BytesLike, value: BytesLike) -> None:
        """Insert a key-value pair; an existing value is overwritten on write."""
        self.ops.append(Insert(col, bytes(key), bytes(value)))

    def delete(self, col: int, key: BytesLike) -> None:
        """Delete the value under ``key``."""
        self.ops.append(Delete(col, bytes(key)))

    def delete_prefix(self, col: int, prefix: BytesLike) -> None:
        """Delete every value whose key starts with ``prefix``; empty removes all."""
        self.ops.append(DeletePrefix(col, bytes(prefix)))


class KeyValueDB(abc.ABC):
    """A key-value database with distinct column families.

    Implementations raise :class:`OSError` on I/O failure.
    """

    def transaction(self) -> DBTransaction:
        """A new, empty transaction."""
        return DBTransaction()

    @abc.abstractmethod
    def get(self, col: int, key: bytes) -> bytes | None:
        """The value under ``key``, or None."""

    @abc.abstractmethod
    def get_by_prefix(self, col: int, prefix: bytes) -> bytes | None:
        """The first value whose key starts with ``prefix``, or None."""

    @abc.abstractmethod
    def write(self, transaction: DBTransaction) -> None:
        """Apply a transaction to the backing store."""

    @abc.abstractmethod
    def iter(self, col: int) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over the key-value pairs of a column."""

    @abc.abstractmethod
    def iter_with_prefix(self, col: int, prefix: bytes) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over the pairs of a column whose key starts with ``prefix``."""

    def io_stats(self, kind: IoStatsKind) -> IoStats:
        """Statistics; empty unless the implementation collects them."""
        return IoStats.empty()

    def has_key(self, col: int, key: bytes) -> bool:
        """True when a value exists under ``key``."""
        return self.get(col, key) is not None

    def has_prefix(self, col: int, prefix: bytes) -> bool:
        """True when some key starts with ``prefix``."""
        return self.get_by_prefix(col, prefix) is not None


def end_prefix(prefix: BytesLike) -> bytes | None:
    """The exclusive upper bound of keys starting with ``prefix``.

    None when there is no bound, as for an empty or all-0xff prefix.
    """
    trimmed = bytes(prefix).rstrip(b"\xff")
    if not trimmed:
        return None
    return trimmed[:-1] + bytes([trimmed[-1] + 1])