# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0008-Serialization (molecule); CKB-RFC0022-Transaction-Structure
"""
Molecule encoding of the transaction pieces that get hashed.

Only the subset needed to compute script and transaction hashes and to build
`WitnessArgs` placeholders is implemented. All integers are little-endian.

    fixvec   : item_count(u32) + items
    dynvec   : total_size(u32) + offsets(u32 * n) + items
    table    : total_size(u32) + offsets(u32 * n) + fields
    option   : empty when None, otherwise the inner value
"""
from __future__ import annotations
from typing import Iterable, Optional

from ..utils import config as CFG
from ..utils.helpers import uint32_le, uint64_le, require_len

HEADER_UNIT = 4


# ========== Containers ===========

def encode_bytes(data: bytes) -> bytes:
    data = bytes(data)
    return uint32_le(len(data)) + data

def encode_fixvec(items: Iterable[bytes]) -> bytes:
    items = list(items)
    return uint32_le(len(items)) + b"".join(items)

def encode_dynvec(items: Iterable[bytes]) -> bytes:
    items = list(items)
    header_size = HEADER_UNIT * (len(items) + 1)
    return _pack_with_offsets(header_size, items)

def encode_table(fields: Iterable[bytes]) -> bytes:
    fields = list(fields)
    header_size = HEADER_UNIT * (len(fields) + 1)
    return _pack_with_offsets(header_size, fields)

def encode_option(value: Optional[bytes]) -> bytes:
    return b"" if value is None else value

def _pack_with_offsets(header_size: int, parts: list) -> bytes:
    offsets = []
    cursor = header_size
    for p in parts:
        offsets.append(uint32_le(cursor))
        cursor += len(p)
    if not parts:
        return uint32_le(HEADER_UNIT)
    return uint32_le(cursor) + b"".join(offsets) + b"".join(parts)


# ========== Codes ===========

def hash_type_code(hash_type) -> int:
    if isinstance(hash_type, int):
        if hash_type not in CFG.HASH_TYPES.values():
            raise ValueError(f"unknown hash_type code: {hash_type}")
        return hash_type
    try:
        return CFG.HASH_TYPES[str(hash_type)]
    except KeyError:
        raise ValueError(f"unknown hash_type: {hash_type!r}") from None

def dep_type_code(dep_type) -> int:
    if isinstance(dep_type, int):
        if dep_type not in CFG.DEP_TYPES.values():
            raise ValueError(f"unknown dep_type code: {dep_type}")
        return dep_type
    try:
        return CFG.DEP_TYPES[str(dep_type)]
    except KeyError:
        raise ValueError(f"unknown dep_type: {dep_type!r}") from None


# ========== Ledger structures ===========

def serialize_script(script) -> bytes:
    return encode_table([
        require_len(script.code_hash, CFG.HASH_LENGTH, "code_hash"),
        bytes([hash_type_code(script.hash_type)]),
        encode_bytes(script.args),
    ])

def serialize_out_point(out_point) -> bytes:
    return require_len(out_point.tx_hash, CFG.HASH_LENGTH, "tx_hash") + uint32_le(out_point.index)

def serialize_cell_input(cell_input) -> bytes:
    # struct: since(u64) + previous_output(OutPoint); the lock is not serialized
    return uint64_le(cell_input.since) + serialize_out_point(cell_input.previous_output)

def serialize_cell_dep(cell_dep) -> bytes:
    return serialize_out_point(cell_dep.out_point) + bytes([dep_type_code(cell_dep.dep_type)])

def serialize_cell_output(cell_output) -> bytes:
    type_script = cell_output.type
    return encode_table([
        uint64_le(cell_output.capacity),
        serialize_script(cell_output.lock),
        encode_option(serialize_script(type_script) if type_script is not None else None),
    ])

def serialize_raw_transaction(tx) -> bytes:
    return encode_table([
        uint32_le(tx.version),
        encode_fixvec(serialize_cell_dep(d) for d in tx.cell_deps),
        encode_fixvec(require_len(h, CFG.HASH_LENGTH, "header_dep") for h in tx.header_deps),
        encode_fixvec(serialize_cell_input(i) for i in tx.inputs),
        encode_dynvec(serialize_cell_output(o) for o in tx.outputs),
        encode_dynvec(encode_bytes(d) for d in tx.outputs_data),
    ])


# ========== WitnessArgs ===========

def serialize_witness_args(lock: Optional[bytes] = None,
                           input_type: Optional[bytes] = None,
                           output_type: Optional[bytes] = None) -> bytes:
    return encode_table([
        encode_option(encode_bytes(lock) if lock is not None else None),
        encode_option(encode_bytes(input_type) if input_type is not None else None),
        encode_option(encode_bytes(output_type) if output_type is not None else None),
    ])

def witness_placeholder() -> bytes:
    """`WitnessArgs` with an empty lock; exactly WITNESS_OFFSET bytes long."""
    return serialize_witness_args(lock=b"")
