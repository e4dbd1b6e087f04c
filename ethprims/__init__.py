"""RLP encoding and decoding, fixed-width integers and hashes, hex serialization and a key-value store interface."""

__version__ = "0.1.0"