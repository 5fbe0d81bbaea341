# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md

import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(PROJECT_ROOT, "src")
for path in (PROJECT_ROOT, SRC_ROOT):
    if path not in sys.path:
        sys.path.append(path)

from tsarcell.core.molecule import witness_placeholder  # noqa: E402
from tsarcell.core.tx import CellInput, CellOutput, OutPoint, Script, Transaction  # noqa: E402
from tsarcell.crypto.keys import pubkey_from_privkey, pubkey_blake160  # noqa: E402

# well-known dev chain keys, never funded outside local test nets
KEY_A = bytes.fromhex("e79f3207ea4980b7fed79956d5934249ceac4751a4fae01a0f7c4a96884bc4e3")
KEY_B = bytes.fromhex("d00c06bfd800d27397002dca6fb0993d5ba6399b4238b2f29ee9deb97593d2bc")

SECP_CODE_HASH = bytes.fromhex("9bd7e06f3ecf4be0f2fcd2188b23f1b9fcc88e5d4b65a8637b17723bbda3cce8")
OTHER_CODE_HASH = bytes.fromhex("5c5069eb0857efc65e1bca0c07df34c31663b3622fd3876c876320fc9634e2a8")


def lock_for(priv: bytes, code_hash: bytes = SECP_CODE_HASH) -> Script:
    return Script(code_hash=code_hash, hash_type="type", args=pubkey_blake160(pubkey_from_privkey(priv)))

def out_point(n: int) -> OutPoint:
    return OutPoint(tx_hash=bytes([n]) * 32, index=n)

def make_tx(locks, witnesses=None, extra_witnesses=()) -> Transaction:
    inputs = [CellInput(previous_output=out_point(i + 1), lock=lock) for i, lock in enumerate(locks)]
    outputs = [CellOutput(capacity=61_00000000, lock=locks[0])] if locks else []
    if witnesses is None:
        witnesses = [witness_placeholder() for _ in locks]
    return Transaction(version=0, inputs=inputs, outputs=outputs, witnesses=list(witnesses) + list(extra_witnesses))


@pytest.fixture
def lock_a():
    return lock_for(KEY_A)

@pytest.fixture
def lock_b():
    return lock_for(KEY_B)
