# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: RFC6979; SEC1-v2-4.1.6 (public key recovery); libsecp256k1; LowS-Policy
from __future__ import annotations
import hashlib
from typing import List

from ecdsa import SECP256k1, SigningKey, VerifyingKey, util, numbertheory
from ecdsa.errors import MalformedPointError
from ecdsa.util import MalformedSignature

from ..utils import config as CFG
from ..utils.helpers import blake160, to_bytes

SECP256K1_N = SECP256k1.order
HALF_N = SECP256K1_N // 2
RECOVERABLE_SIG_LEN = CFG.SIGNATURE_LENGTH


# ---------------- Keys ----------------

def signing_key(priv) -> SigningKey:
    raw = to_bytes(priv)
    if len(raw) != 32:
        raise ValueError("private key must be 32 bytes")
    d = int.from_bytes(raw, "big")
    if not (1 <= d < SECP256K1_N):
        raise ValueError("private key out of range")
    return SigningKey.from_string(raw, curve=SECP256k1)

def pubkey_from_privkey(priv) -> bytes:
    """Compressed SEC1 public key (33 bytes)."""
    return signing_key(priv).get_verifying_key().to_string("compressed")

def pubkey_blake160(pubkey: bytes) -> bytes:
    return blake160(pubkey)

def verifying_key(pubkey: bytes) -> VerifyingKey:
    try:
        return VerifyingKey.from_string(bytes(pubkey), curve=SECP256k1)
    except MalformedPointError as e:
        raise ValueError(f"invalid public key: {e}") from e


# ---------------- Recoverable signatures ----------------

def _recover_candidates(digest32: bytes, rs: bytes) -> List[VerifyingKey]:
    try:
        return VerifyingKey.from_public_key_recovery_with_digest(
            rs, digest32, SECP256k1, hashfunc=hashlib.sha256, sigdecode=util.sigdecode_string)
    except (numbertheory.Error, MalformedPointError, MalformedSignature) as e:
        # r is not the x-coordinate of a curve point, or the encoding is off
        raise ValueError(f"unrecoverable signature: {e}") from e

def sign_recoverable(digest32: bytes, priv) -> bytes:
    """RFC6979 low-S signature as r(32) | s(32) | recid(1)."""
    if not isinstance(digest32, (bytes, bytearray)) or len(digest32) != CFG.HASH_LENGTH:
        raise ValueError("sign_recoverable expects a 32-byte digest")
    sk = signing_key(priv)
    r_b, s_b = sk.sign_digest_deterministic(
        bytes(digest32),
        hashfunc=hashlib.sha256,
        sigencode=util.sigencode_strings,
        allow_truncate=False,)

    s = int.from_bytes(s_b, "big")
    if s > HALF_N:
        s = SECP256K1_N - s
    rs = r_b + s.to_bytes(32, "big")

    expected = sk.get_verifying_key().to_string()
    for recid, candidate in enumerate(_recover_candidates(bytes(digest32), rs)):
        if candidate.to_string() == expected:
            return rs + bytes([recid])
    raise ValueError("unable to derive recovery id for signature")

def recover_pubkey(digest32: bytes, signature: bytes) -> bytes:
    """Compressed public key recovered from a 65-byte recoverable signature."""
    if len(signature) != RECOVERABLE_SIG_LEN:
        raise ValueError(f"signature must be {RECOVERABLE_SIG_LEN} bytes")
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    if not (1 <= r < SECP256K1_N) or not (1 <= s < SECP256K1_N):
        raise ValueError("r or s out of range")
    recid = signature[64]
    candidates = _recover_candidates(bytes(digest32), bytes(signature[:64]))
    if recid >= len(candidates):
        raise ValueError(f"recovery id {recid} out of range")
    return candidates[recid].to_string("compressed")

def verify_recoverable(pubkey: bytes, digest32: bytes, signature: bytes) -> bool:
    try:
        return recover_pubkey(digest32, signature) == verifying_key(pubkey).to_string("compressed")
    except ValueError:
        return False
