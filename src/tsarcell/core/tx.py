# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0022-Transaction-Structure; CKB-RFC0008-Serialization
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..utils import config as CFG
from ..utils.helpers import blake2b_256, to_bytes, to_hex, require_len
from .molecule import serialize_script, serialize_raw_transaction, hash_type_code, dep_type_code


# ========== Script ==========

@dataclass(frozen=True)
class Script:
    code_hash: bytes
    hash_type: str
    args: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "code_hash", require_len(to_bytes(self.code_hash), CFG.HASH_LENGTH, "code_hash"))
        object.__setattr__(self, "args", to_bytes(self.args))
        code = hash_type_code(self.hash_type)
        name = next(k for k, v in CFG.HASH_TYPES.items() if v == code)
        object.__setattr__(self, "hash_type", name)

    def serialize(self) -> bytes:
        return serialize_script(self)

    def compute_hash(self) -> bytes:
        return blake2b_256(self.serialize())

    def to_dict(self) -> dict:
        return {
            "code_hash": to_hex(self.code_hash),
            "hash_type": self.hash_type,
            "args": to_hex(self.args),}

    @classmethod
    def from_dict(cls, data: dict):
        if isinstance(data, Script):
            return data
        if not isinstance(data, dict):
            raise TypeError("Script.from_dict expects dict")
        return cls(code_hash=data["code_hash"], hash_type=data["hash_type"], args=data.get("args", b""))

    def __repr__(self):
        return f"<Script {self.code_hash.hex()[:16]}… {self.hash_type} args={self.args.hex()}>"


# ========== OutPoint / CellDep ==========

class OutPoint:
    def __init__(self, tx_hash: bytes, index: int):
        if not isinstance(index, int) or index < 0:
            raise ValueError("index must be an integer >= 0")
        self.tx_hash = require_len(to_bytes(tx_hash), CFG.HASH_LENGTH, "tx_hash")
        self.index = int(index)

    def to_dict(self) -> dict:
        return {"tx_hash": to_hex(self.tx_hash), "index": self.index}

    @classmethod
    def from_dict(cls, data: dict):
        return cls(tx_hash=data["tx_hash"], index=int(data["index"], 0) if isinstance(data["index"], str) else int(data["index"]))

    def __eq__(self, other):
        return isinstance(other, OutPoint) and (self.tx_hash, self.index) == (other.tx_hash, other.index)

    def __hash__(self):
        return hash((self.tx_hash, self.index))

    def __repr__(self):
        return f"<OutPoint {self.tx_hash.hex()[:16]}…:{self.index}>"


class CellDep:
    def __init__(self, out_point: OutPoint, dep_type: str = "code"):
        if not isinstance(out_point, OutPoint):
            raise TypeError("out_point must be OutPoint instance")
        dep_type_code(dep_type)
        self.out_point = out_point
        self.dep_type = dep_type

    def to_dict(self) -> dict:
        return {"out_point": self.out_point.to_dict(), "dep_type": self.dep_type}

    @classmethod
    def from_dict(cls, data: dict):
        return cls(out_point=OutPoint.from_dict(data["out_point"]), dep_type=data.get("dep_type", "code"))

    def __repr__(self):
        return f"<CellDep {self.out_point!r} {self.dep_type}>"


# ========== Inputs / Outputs ==========

class CellInput:
    def __init__(self, previous_output: OutPoint, lock: Script, since: int = 0):
        if not isinstance(previous_output, OutPoint):
            raise TypeError("previous_output must be OutPoint instance")
        if not isinstance(lock, Script):
            raise TypeError("lock must be Script instance")
        if not isinstance(since, int) or since < 0:
            raise ValueError("since must be an integer >= 0")
        self.previous_output = previous_output
        self.lock = lock
        self.since = int(since)

    def to_dict(self) -> dict:
        return {
            "previous_output": self.previous_output.to_dict(),
            "since": hex(self.since),
            "lock": self.lock.to_dict(),}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict):
            raise TypeError("CellInput.from_dict expects dict")
        since = data.get("since", 0)
        return cls(
            previous_output=OutPoint.from_dict(data["previous_output"]),
            lock=Script.from_dict(data["lock"]),
            since=int(since, 0) if isinstance(since, str) else int(since),)

    def __repr__(self):
        return f"<CellInput {self.previous_output!r} since={self.since}>"


class CellOutput:
    def __init__(self, capacity: int, lock: Script, type: Optional[Script] = None):
        if not isinstance(capacity, int) or capacity < 0:
            raise ValueError("capacity must be integer >= 0")
        if not isinstance(lock, Script):
            raise TypeError("lock must be Script instance")
        if type is not None and not isinstance(type, Script):
            raise TypeError("type must be Script instance or None")
        self.capacity = capacity
        self.lock = lock
        self.type = type

    def to_dict(self) -> dict:
        return {
            "capacity": hex(self.capacity),
            "lock": self.lock.to_dict(),
            "type": self.type.to_dict() if self.type is not None else None,}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict):
            raise TypeError("CellOutput.from_dict expects dict")
        cap = data["capacity"]
        type_ = data.get("type")
        return cls(
            capacity=int(cap, 0) if isinstance(cap, str) else int(cap),
            lock=Script.from_dict(data["lock"]),
            type=Script.from_dict(type_) if type_ else None,)

    def __repr__(self):
        return f"<CellOutput cap={self.capacity}>"


# ========== Transaction ==========

class Transaction:
    def __init__(self, version: int = 0, cell_deps=None, header_deps=None, inputs=None,
                 outputs=None, outputs_data=None, witnesses=None):
        self.version = int(version)
        self.cell_deps = list(cell_deps or [])
        self.header_deps = [to_bytes(h) for h in (header_deps or [])]
        self.inputs = list(inputs or [])
        self.outputs = list(outputs or [])
        if outputs_data is None:
            outputs_data = [b""] * len(self.outputs)
        self.outputs_data = [to_bytes(d) for d in outputs_data]
        self.witnesses = [to_bytes(w) for w in (witnesses or [])]
        if len(self.outputs_data) != len(self.outputs):
            raise ValueError("outputs_data must have one entry per output")

    # -------- IDs ----------

    def serialize_raw(self) -> bytes:
        return serialize_raw_transaction(self)

    def compute_hash(self) -> bytes:
        """Content hash of the raw transaction; witnesses are not covered."""
        return blake2b_256(self.serialize_raw())

    # -------- Serde ----------

    def to_dict(self) -> dict:
        return {
            "version": hex(self.version),
            "cell_deps": [d.to_dict() for d in self.cell_deps],
            "header_deps": [to_hex(h) for h in self.header_deps],
            "inputs": [i.to_dict() for i in self.inputs],
            "outputs": [o.to_dict() for o in self.outputs],
            "outputs_data": [to_hex(d) for d in self.outputs_data],
            "witnesses": [to_hex(w) for w in self.witnesses],}

    @classmethod
    def from_dict(cls, data: dict):
        if isinstance(data, Transaction):
            return data
        if not isinstance(data, dict):
            raise TypeError("from_dict expects dict or Transaction")
        version = data.get("version", 0)
        return cls(
            version=int(version, 0) if isinstance(version, str) else int(version),
            cell_deps=[CellDep.from_dict(x) for x in data.get("cell_deps", [])],
            header_deps=data.get("header_deps", []),
            inputs=[CellInput.from_dict(x) for x in data.get("inputs", [])],
            outputs=[CellOutput.from_dict(x) for x in data.get("outputs", [])],
            outputs_data=data.get("outputs_data"),
            witnesses=data.get("witnesses", []),)

    def __repr__(self):
        return f"<Transaction v={self.version} vin={len(self.inputs)} vout={len(self.outputs)} wit={len(self.witnesses)}>"
