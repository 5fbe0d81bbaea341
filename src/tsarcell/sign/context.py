# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md
from __future__ import annotations
from typing import Dict, Optional

from ..crypto.keystore import decrypt_privkey
from ..utils.helpers import to_bytes
from .errors import ContextClosedError


class SigningContext:
    """
    Credential for one signing pass.

    Use it as a context manager; the key buffer is overwritten with zeros on
    exit and the context refuses to hand it out afterwards.

        with SigningContext(priv) as ctx:
            sign_transaction(tx, signers, ctx)
    """

    def __init__(self, private_key=None):
        self._key: Optional[bytearray] = bytearray(to_bytes(private_key)) if private_key is not None else None
        self._closed = False

    @classmethod
    def from_keystore(cls, enc_blob: Dict, password: str) -> "SigningContext":
        key = decrypt_privkey(enc_blob, password)
        try:
            return cls(key)
        finally:
            key[:] = b"\x00" * len(key)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_credential(self) -> bool:
        return not self._closed and self._key is not None

    @property
    def private_key(self) -> Optional[bytes]:
        """
        Immutable copy of the key for one primitive call.

        Only the internal buffer is wiped by `close()`; copies handed out here
        (and the ones `ecdsa` makes internally) live until garbage collected,
        so callers should not keep them past the call that needs them.
        """
        if self._closed:
            raise ContextClosedError("signing context already released")
        return bytes(self._key) if self._key is not None else None

    def close(self) -> None:
        if self._key is not None:
            self._key[:] = b"\x00" * len(self._key)
            self._key = None
        self._closed = True

    def __enter__(self) -> "SigningContext":
        if self._closed:
            raise ContextClosedError("signing context already released")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self):
        state = "closed" if self._closed else ("loaded" if self._key is not None else "empty")
        return f"<SigningContext {state}>"
