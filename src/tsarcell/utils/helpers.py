# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: RFC7693-BLAKE2; CKB-RFC0022-Transaction-Structure
from __future__ import annotations
import hashlib

from ..utils import config as CFG


# -----------------------------
# BYTES / HEX
# -----------------------------

def to_bytes(x) -> bytes:
    if isinstance(x, (bytes, bytearray, memoryview)):
        return bytes(x)
    if isinstance(x, str):
        return from_hex(x)
    if x is None:
        return b""
    raise TypeError(f"cannot convert {type(x).__name__} to bytes")

def from_hex(s: str) -> bytes:
    s = s.strip()
    if s[:2].lower() == "0x":
        s = s[2:]
    return bytes.fromhex(s)

def to_hex(b: bytes) -> str:
    return "0x" + bytes(b).hex()

def require_len(b: bytes, n: int, what: str) -> bytes:
    if not isinstance(b, (bytes, bytearray)) or len(b) != n:
        raise ValueError(f"{what} must be {n}-byte bytes")
    return bytes(b)


# -----------------------------
# ENDIANNESS
# -----------------------------

def int_to_little_endian(n: int, length: int) -> bytes:
    return n.to_bytes(length, 'little')

def little_endian_to_int(b: bytes) -> int:
    return int.from_bytes(b, 'little')

def uint32_le(n: int) -> bytes:
    return int_to_little_endian(int(n), 4)

def uint64_le(n: int) -> bytes:
    return int_to_little_endian(int(n), CFG.UINT64_LENGTH)


# -----------------------------
# HASHING
# -----------------------------

def new_blake2b(person: bytes | None = None):
    """Streaming blake2b-256; `person` defaults to the content-hash domain."""
    if person is None:
        person = CFG.HASH_PERSONALIZATION
    if len(person) > 16:
        raise ValueError("blake2b personalization is at most 16 bytes")
    return hashlib.blake2b(digest_size=CFG.HASH_LENGTH, person=person)

def blake2b_256(data: bytes, person: bytes | None = None) -> bytes:
    h = new_blake2b(person)
    h.update(data)
    return h.digest()

def blake160(data: bytes) -> bytes:
    return blake2b_256(data)[:CFG.BLAKE160_LENGTH]
