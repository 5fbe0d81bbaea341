# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0022-Transaction-Structure (script groups)
from __future__ import annotations
from typing import Dict, List

from ..core.tx import Script, Transaction

# ---------------- Logger ----------------
from ..utils.tsar_logging import get_ctx_logger
log = get_ctx_logger("tsarcell.sign.script_group")


class ScriptGroup:
    def __init__(self, script: Script, input_indices=None):
        if not isinstance(script, Script):
            raise TypeError("script must be Script instance")
        self.script = script
        self.input_indices: List[int] = list(input_indices or [])

    @property
    def representative_index(self) -> int:
        if not self.input_indices:
            raise ValueError("script group has no inputs")
        return self.input_indices[0]

    def __eq__(self, other):
        return (isinstance(other, ScriptGroup)
                and self.script == other.script
                and self.input_indices == other.input_indices)

    def __repr__(self):
        return f"<ScriptGroup {self.script!r} inputs={self.input_indices}>"


def group_by_lock_script(tx: Transaction) -> List[ScriptGroup]:
    """Partition input indices by lock script, in order of first occurrence."""
    groups: Dict[Script, ScriptGroup] = {}
    for index, cell_input in enumerate(tx.inputs):
        group = groups.get(cell_input.lock)
        if group is None:
            group = groups[cell_input.lock] = ScriptGroup(cell_input.lock)
        group.input_indices.append(index)
    log.trace("Grouped %d inputs into %d lock script groups", len(tx.inputs), len(groups))
    return list(groups.values())
