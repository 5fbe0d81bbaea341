# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0024-secp256k1-blake160-sighash-all; RFC6979; libsecp256k1; LowS-Policy
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from ..core.tx import Script, Transaction
from ..crypto.keys import pubkey_from_privkey, pubkey_blake160, sign_recoverable, recover_pubkey, verifying_key
from ..utils import config as CFG
from ..utils.helpers import new_blake2b, uint64_le
from .context import SigningContext
from .errors import MalformedWitnessError, MalformedTransactionError
from .script_group import ScriptGroup

# ---------------- Logger ----------------
from ..utils.tsar_logging import get_ctx_logger
log = get_ctx_logger("tsarcell.sign.signer")


class ScriptSigner(ABC):
    """
    Capability for one lock script family.

    `matches` never raises and `build_witness` never mutates the transaction;
    `sign` combines both and writes the representative witness slot.
    """

    name = "signer"

    @abstractmethod
    def matches(self, context: SigningContext, script: Optional[Script]) -> bool:
        ...

    @abstractmethod
    def build_witness(self, tx: Transaction, group: ScriptGroup, context: SigningContext,
                      witnesses: Optional[Sequence[bytes]] = None) -> bytes:
        ...

    def sign(self, tx: Transaction, group: ScriptGroup, context: SigningContext) -> bool:
        if not self.matches(context, group.script):
            return False
        witness = self.build_witness(tx, group, context)
        tx.witnesses[group.representative_index] = witness
        return True

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name}>"


# ========== secp256k1 / blake160 / sighash-all ==========

def splice_signature(original: bytes, signature: bytes, index: int = -1) -> bytes:
    """original[:OFFSET] + signature + original[OFFSET:], byte for byte."""
    offset = CFG.WITNESS_OFFSET
    if len(original) < offset:
        raise MalformedWitnessError(index, len(original), offset)
    if len(signature) != CFG.SIGNATURE_LENGTH:
        raise ValueError(f"signature must be {CFG.SIGNATURE_LENGTH} bytes")
    return bytes(original[:offset]) + bytes(signature) + bytes(original[offset:])

def unsplice_signature(witness: bytes, index: int = -1) -> Tuple[bytes, bytes]:
    """Inverse of `splice_signature`: returns (signature, original witness)."""
    offset = CFG.WITNESS_OFFSET
    end = offset + CFG.SIGNATURE_LENGTH
    if len(witness) < end:
        raise MalformedWitnessError(index, len(witness), end)
    return bytes(witness[offset:end]), bytes(witness[:offset]) + bytes(witness[end:])


class Secp256k1Blake160SighashAllSigner(ScriptSigner):
    name = "secp256k1_blake160_sighash_all"

    def __init__(self, personalization: Optional[bytes] = None):
        self.personalization = personalization or CFG.SIGHASH_PERSONALIZATION

    # -------- Matching ----------

    def matches(self, context: SigningContext, script: Optional[Script]) -> bool:
        if script is None or not script.args:
            return False
        if context is None or not context.has_credential:
            return False
        try:
            lock_args = pubkey_blake160(pubkey_from_privkey(context.private_key))
        except ValueError as e:
            log.debug("Credential cannot derive a public key: %s", e)
            return False
        return lock_args == script.args

    # -------- Digest ----------

    def compute_signing_message(self, tx: Transaction, group: ScriptGroup,
                                witnesses: Optional[Sequence[bytes]] = None) -> bytes:
        if witnesses is None:
            witnesses = tx.witnesses
        if len(witnesses) < len(tx.inputs):
            raise MalformedTransactionError(
                f"transaction has {len(witnesses)} witnesses for {len(tx.inputs)} inputs")

        h = new_blake2b(self.personalization)
        h.update(tx.compute_hash())
        for i in group.input_indices:
            witness = witnesses[i]
            h.update(uint64_le(len(witness)))
            h.update(witness)
        for i in range(len(tx.inputs), len(witnesses)):
            witness = witnesses[i]
            h.update(uint64_le(len(witness)))
            h.update(witness)
        return h.digest()

    # -------- Signing ----------

    def build_witness(self, tx: Transaction, group: ScriptGroup, context: SigningContext,
                      witnesses: Optional[Sequence[bytes]] = None) -> bytes:
        if witnesses is None:
            witnesses = tx.witnesses
        index = group.representative_index
        if index >= len(witnesses):
            raise MalformedTransactionError(f"no witness at representative index {index}")
        original = witnesses[index]
        if len(original) < CFG.WITNESS_OFFSET:
            raise MalformedWitnessError(index, len(original), CFG.WITNESS_OFFSET)

        message = self.compute_signing_message(tx, group, witnesses)
        signature = sign_recoverable(message, context.private_key)
        log.trace("Signed group at #%d: message=%s", index, message.hex())
        return splice_signature(original, signature, index)

    # -------- Verification ----------

    def recover_signer(self, tx: Transaction, group: ScriptGroup) -> bytes:
        """Compressed public key behind an already spliced group signature."""
        index = group.representative_index
        signature, original = unsplice_signature(tx.witnesses[index], index)
        witnesses = list(tx.witnesses)
        witnesses[index] = original
        message = self.compute_signing_message(tx, group, witnesses)
        return recover_pubkey(message, signature)

    def verify(self, tx: Transaction, group: ScriptGroup, pubkey: bytes) -> bool:
        try:
            recovered = self.recover_signer(tx, group)
        except ValueError as e:
            log.debug("Signature verification failed for group at #%d: %s", group.input_indices[0], e)
            return False
        return recovered == verifying_key(pubkey).to_string("compressed")
