# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0008-Serialization (molecule)

import pytest

from tsarcell.core.molecule import (encode_bytes, encode_dynvec, serialize_script, serialize_witness_args,
                                    witness_placeholder)
from tsarcell.core.tx import CellInput, OutPoint, Script, Transaction
from tsarcell.utils import config as CFG
from tsarcell.utils.helpers import blake160, blake2b_256, little_endian_to_int

from conftest import SECP_CODE_HASH, lock_for, make_tx, KEY_A


def test_witness_placeholder_is_empty_lock_witness_args():
    expected = bytes.fromhex("14000000" "10000000" "14000000" "14000000" "00000000")
    assert witness_placeholder() == expected
    assert len(witness_placeholder()) == CFG.WITNESS_OFFSET


def test_witness_args_with_lock_and_output_type():
    raw = serialize_witness_args(lock=b"\x00" * 65, output_type=b"\xaa\xbb")
    # header 16 + lock (4 + 65) + output_type (4 + 2)
    assert len(raw) == 16 + 69 + 6
    assert little_endian_to_int(raw[:4]) == len(raw)
    assert little_endian_to_int(raw[4:8]) == 16
    assert little_endian_to_int(raw[8:12]) == 16 + 69
    assert little_endian_to_int(raw[12:16]) == 16 + 69
    assert raw[-2:] == b"\xaa\xbb"


def test_containers():
    assert encode_bytes(b"") == b"\x00\x00\x00\x00"
    assert encode_bytes(b"\x01\x02") == b"\x02\x00\x00\x00\x01\x02"
    assert encode_dynvec([]) == b"\x04\x00\x00\x00"


def test_script_layout():
    script = Script(code_hash=SECP_CODE_HASH, hash_type="type", args=b"\x11" * 20)
    raw = serialize_script(script)
    assert len(raw) == 16 + 32 + 1 + 4 + 20
    assert little_endian_to_int(raw[:4]) == len(raw)
    assert raw[16:48] == SECP_CODE_HASH
    assert raw[48] == CFG.HASH_TYPES["type"]
    assert script.compute_hash() == blake2b_256(raw)


def test_script_structural_equality():
    a = Script(code_hash=SECP_CODE_HASH, hash_type="type", args=b"\x01")
    b = Script(code_hash="0x" + SECP_CODE_HASH.hex(), hash_type=1, args=bytearray(b"\x01"))
    assert a == b
    assert hash(a) == hash(b)
    assert a != Script(code_hash=SECP_CODE_HASH, hash_type="data", args=b"\x01")


def test_script_rejects_bad_fields():
    with pytest.raises(ValueError):
        Script(code_hash=b"\x00" * 31, hash_type="type")
    with pytest.raises(ValueError):
        Script(code_hash=SECP_CODE_HASH, hash_type="bogus")


def test_empty_raw_transaction_layout():
    raw = Transaction().serialize_raw()
    # 7 header words + six empty containers of 4 bytes each
    assert len(raw) == 28 + 24
    assert little_endian_to_int(raw[:4]) == len(raw)


def test_tx_hash_ignores_witnesses_and_lock():
    tx = make_tx([lock_for(KEY_A)])
    h = tx.compute_hash()
    tx.witnesses[0] = b"\xff" * 90
    assert tx.compute_hash() == h
    tx.inputs[0] = CellInput(tx.inputs[0].previous_output,
                             lock=Script(code_hash=SECP_CODE_HASH, hash_type="data", args=b"\x02"))
    assert tx.compute_hash() == h
    tx.inputs[0].since = 5
    assert tx.compute_hash() != h


def test_tx_dict_roundtrip_preserves_hash():
    tx = make_tx([lock_for(KEY_A)], extra_witnesses=[b"\x01\x02"])
    restored = Transaction.from_dict(tx.to_dict())
    assert restored.compute_hash() == tx.compute_hash()
    assert restored.witnesses == tx.witnesses
    assert restored.inputs[0].lock == tx.inputs[0].lock


def test_outputs_data_must_match_outputs():
    tx = make_tx([lock_for(KEY_A)])
    with pytest.raises(ValueError):
        Transaction(outputs=tx.outputs, outputs_data=[])


def test_out_point_validation():
    with pytest.raises(ValueError):
        OutPoint(tx_hash=b"\x00" * 32, index=-1)


def test_blake160_is_prefix_of_hash():
    assert blake160(b"abc") == blake2b_256(b"abc")[:20]
    assert blake2b_256(b"abc") != blake2b_256(b"abc", person=CFG.SIGHASH_PERSONALIZATION)
