# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md

from .context import SigningContext
from .errors import SigningError, MalformedWitnessError, MalformedTransactionError, ContextClosedError
from .script_group import ScriptGroup, group_by_lock_script
from .signer import ScriptSigner, Secp256k1Blake160SighashAllSigner, splice_signature, unsplice_signature
from .orchestrator import GroupResult, SigningReport, TransactionSigner, sign_transaction
__all__ = [
    "SigningContext", "SigningError", "MalformedWitnessError", "MalformedTransactionError", "ContextClosedError",
    "ScriptGroup", "group_by_lock_script", "ScriptSigner", "Secp256k1Blake160SighashAllSigner",
    "splice_signature", "unsplice_signature", "GroupResult", "SigningReport", "TransactionSigner",
    "sign_transaction",
]
