# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: RFC7914-scrypt; NIST-800-38D-AES-GCM
"""
Password-protected private key blobs.

A blob is a plain dict so callers can store it however they like; this module
never touches the filesystem. The blake160 lock args of the key are bound as
AES-GCM associated data, so a blob cannot be swapped under another lock.
"""
from __future__ import annotations
import os
from typing import Dict

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..utils import config as CFG
from ..utils.helpers import from_hex
from .keys import pubkey_from_privkey, pubkey_blake160

KEYSTORE_VERSION = 1


def _derive_key(password: str, salt: bytes, n: int, r: int, p: int) -> bytes:
    """Scrypt KDF"""
    kdf = Scrypt(salt=salt, length=32, n=n, r=r, p=p, backend=default_backend())
    return kdf.derive(password.encode())

def encrypt_privkey(priv: bytes, password: str) -> Dict:
    priv = bytes(priv)
    lock_args = pubkey_blake160(pubkey_from_privkey(priv))
    salt = os.urandom(16)
    n, r, p = CFG.KEYSTORE_KDF_N, CFG.KEYSTORE_KDF_R, CFG.KEYSTORE_KDF_P
    aes = AESGCM(_derive_key(password, salt, n, r, p))
    nonce = os.urandom(12)
    ct = aes.encrypt(nonce, priv, lock_args)
    return {
        "version": KEYSTORE_VERSION,
        "kdf": "scrypt",
        "kdf_salt": salt.hex(),
        "kdf_n": n,
        "kdf_r": r,
        "kdf_p": p,
        "cipher": "AESGCM",
        "lock_args": lock_args.hex(),
        "nonce": nonce.hex(),
        "ct": ct.hex()
    }

def decrypt_privkey(enc_blob: Dict, password: str) -> bytearray:
    if enc_blob.get("kdf") != "scrypt" or enc_blob.get("cipher") != "AESGCM":
        raise ValueError("unsupported keystore blob")
    salt = bytes.fromhex(enc_blob["kdf_salt"])
    key = _derive_key(password, salt,
                      n=int(enc_blob.get("kdf_n", CFG.KEYSTORE_KDF_N)),
                      r=int(enc_blob.get("kdf_r", CFG.KEYSTORE_KDF_R)),
                      p=int(enc_blob.get("kdf_p", CFG.KEYSTORE_KDF_P)))
    aes = AESGCM(key)
    nonce = bytes.fromhex(enc_blob["nonce"])
    ct = bytes.fromhex(enc_blob["ct"])
    lock_args = from_hex(enc_blob["lock_args"])
    try:
        return bytearray(aes.decrypt(nonce, ct, lock_args))
    except InvalidTag:
        raise ValueError("wrong password or corrupted keystore blob") from None
