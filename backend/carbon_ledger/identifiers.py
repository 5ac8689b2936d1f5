"""
Deterministic identifier derivation.

Identifiers are SHA-256 digests over the concatenated canonical encoding of
their parts. Callers include a ledger tick among the parts wherever two
records with otherwise equal fields must still get distinct ids.
"""

import hashlib
from typing import Union

IdentifierPart = Union[bytes, str, int, bool]

INT_WIDTH = 32


def encode_part(part: IdentifierPart) -> bytes:
    """
    Canonical byte encoding of one identifier part.

    - bytes are used as is
    - str is UTF-8
    - bool is a single byte
    - int is 32-byte big-endian two's complement
    """
    if isinstance(part, bytes):
        return part
    if isinstance(part, str):
        return part.encode('utf-8')
    # bool before int: bool is an int subclass
    if isinstance(part, bool):
        return b'\x01' if part else b'\x00'
    if isinstance(part, int):
        return part.to_bytes(INT_WIDTH, 'big', signed=True)
    raise TypeError(f"Cannot encode identifier part of type {type(part).__name__}")


def derive_digest(*parts: IdentifierPart) -> bytes:
    """Return the raw 32-byte identifier for ``parts``."""
    hasher = hashlib.sha256()
    for part in parts:
        hasher.update(encode_part(part))
    return hasher.digest()


def derive_identifier(*parts: IdentifierPart) -> str:
    """Return the identifier for ``parts`` as 64 lower-case hex characters."""
    return derive_digest(*parts).hex()


def derive_child(base_id: str, tag: str) -> str:
    """Derive a record id paired with ``base_id`` (e.g. a satellite measurement)."""
    return derive_identifier(bytes.fromhex(base_id), tag)
