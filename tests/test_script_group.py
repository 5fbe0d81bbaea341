# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md

import random

import pytest

from tsarcell.core.tx import Script
from tsarcell.sign.script_group import ScriptGroup, group_by_lock_script

from conftest import SECP_CODE_HASH, OTHER_CODE_HASH, make_tx


def _script(n: int, code_hash: bytes = SECP_CODE_HASH) -> Script:
    return Script(code_hash=code_hash, hash_type="type", args=bytes([n]) * 20)


def test_empty_transaction_has_no_groups():
    assert group_by_lock_script(make_tx([])) == []


def test_non_contiguous_equal_scripts_share_group():
    a, b = _script(1), _script(2)
    groups = group_by_lock_script(make_tx([a, b, a, b, a]))
    assert [g.script for g in groups] == [a, b]
    assert groups[0].input_indices == [0, 2, 4]
    assert groups[1].input_indices == [1, 3]
    assert groups[1].representative_index == 1


def test_code_hash_is_part_of_identity():
    a, a_other = _script(1), _script(1, OTHER_CODE_HASH)
    groups = group_by_lock_script(make_tx([a, a_other]))
    assert len(groups) == 2


def test_two_shared_one_distinct():
    a, b = _script(1), _script(2)
    groups = group_by_lock_script(make_tx([a, a, b]))
    assert groups == [ScriptGroup(a, [0, 1]), ScriptGroup(b, [2])]


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_grouping_is_a_partition(seed):
    rng = random.Random(seed)
    scripts = [_script(n) for n in range(4)]
    locks = [rng.choice(scripts) for _ in range(rng.randint(1, 30))]
    groups = group_by_lock_script(make_tx(locks))

    seen = [i for g in groups for i in g.input_indices]
    assert sorted(seen) == list(range(len(locks)))
    assert len(seen) == len(set(seen))
    for g in groups:
        assert g.input_indices == sorted(g.input_indices)
        assert all(locks[i] == g.script for i in g.input_indices)
    firsts = [g.representative_index for g in groups]
    assert firsts == sorted(firsts)


def test_empty_group_has_no_representative():
    with pytest.raises(ValueError):
        ScriptGroup(_script(1)).representative_index
