# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from ..core.tx import Transaction
from ..utils import config as CFG
from .context import SigningContext
from .errors import MalformedWitnessError, MalformedTransactionError
from .script_group import ScriptGroup, group_by_lock_script
from .signer import ScriptSigner, Secp256k1Blake160SighashAllSigner

# ---------------- Logger ----------------
from ..utils.tsar_logging import get_ctx_logger
log = get_ctx_logger("tsarcell.sign.orchestrator")

SIGNED = "signed"
UNSIGNED = "unsigned"
FAILED = "failed"


class GroupResult:
    def __init__(self, group: ScriptGroup, status: str, signer_name: Optional[str] = None,
                 error: Optional[Exception] = None):
        self.group = group
        self.status = status
        self.signer_name = signer_name
        self.error = error

    @property
    def signed(self) -> bool:
        return self.status == SIGNED

    def __repr__(self):
        return f"<GroupResult {self.status} inputs={self.group.input_indices} signer={self.signer_name}>"


class SigningReport:
    def __init__(self):
        self.results: List[GroupResult] = []
        self.original_witnesses: Dict[int, bytes] = {}

    def add(self, result: GroupResult) -> None:
        self.results.append(result)

    @property
    def signed_groups(self) -> List[ScriptGroup]:
        return [r.group for r in self.results if r.status == SIGNED]

    @property
    def unsigned_groups(self) -> List[ScriptGroup]:
        return [r.group for r in self.results if r.status == UNSIGNED]

    @property
    def failed_groups(self) -> List[ScriptGroup]:
        return [r.group for r in self.results if r.status == FAILED]

    @property
    def complete(self) -> bool:
        return bool(self.results) and all(r.status == SIGNED for r in self.results)

    def rollback(self, tx: Transaction) -> None:
        """Put back every witness this pass replaced."""
        for index, witness in self.original_witnesses.items():
            tx.witnesses[index] = witness
        self.original_witnesses.clear()
        for r in self.results:
            if r.status == SIGNED:
                r.status = UNSIGNED
                r.signer_name = None

    def __iter__(self):
        return iter(self.results)

    def __len__(self):
        return len(self.results)

    def __repr__(self):
        return (f"<SigningReport signed={len(self.signed_groups)} unsigned={len(self.unsigned_groups)} "
                f"failed={len(self.failed_groups)}>")


def _select_signer(signers: Sequence[ScriptSigner], context: SigningContext, group: ScriptGroup) -> Optional[ScriptSigner]:
    for signer in signers:
        if signer.matches(context, group.script):
            return signer
    return None


class TransactionSigner:
    def __init__(self, signers: Optional[Sequence[ScriptSigner]] = None):
        if signers is None:
            signers = [Secp256k1Blake160SighashAllSigner()]
        self.signers = list(signers)

    def sign(self, tx: Transaction, context: SigningContext, *, parallel: Optional[bool] = None,
             max_workers: Optional[int] = None) -> SigningReport:
        if len(tx.witnesses) < len(tx.inputs):
            raise MalformedTransactionError(
                f"transaction has {len(tx.witnesses)} witnesses for {len(tx.inputs)} inputs")
        if parallel is None:
            parallel = bool(CFG.SIGN_PARALLEL)

        tlog = log.bind(tx=tx.compute_hash().hex()[:16])
        report = SigningReport()
        planned = []
        for group in group_by_lock_script(tx):
            signer = _select_signer(self.signers, context, group)
            if signer is None:
                tlog.debug("No signer matches group at #%d", group.representative_index)
                report.add(GroupResult(group, UNSIGNED))
                continue
            result = GroupResult(group, UNSIGNED, signer.name)
            report.add(result)
            planned.append((result, signer))

        if parallel and len(planned) > 1:
            self._sign_parallel(tx, context, planned, report, tlog, max_workers)
        else:
            try:
                for result, signer in planned:
                    self._sign_one(tx, context, result, signer, report, tlog)
            except Exception:
                tlog.exception("Signing pass aborted, restoring %d witnesses", len(report.original_witnesses))
                report.rollback(tx)
                raise

        tlog.info("Signing pass done: %d signed, %d unsigned, %d failed",
                  len(report.signed_groups), len(report.unsigned_groups), len(report.failed_groups))
        return report

    def _sign_one(self, tx, context, result: GroupResult, signer: ScriptSigner, report: SigningReport, tlog) -> None:
        index = result.group.representative_index
        glog = tlog.bind(group=index, signer=signer.name)
        report.original_witnesses[index] = original = tx.witnesses[index]
        try:
            ok = signer.sign(tx, result.group, context)
        except MalformedWitnessError as e:
            ok, result.error = False, e
        if not ok:
            del report.original_witnesses[index]
            tx.witnesses[index] = original
            result.status = FAILED
            glog.warning("Group left unsigned: %s", result.error or "signer declined after matching")
            return
        result.status = SIGNED
        glog.debug("Group signed, witness #%d now %d bytes", index, len(tx.witnesses[index]))

    def _sign_parallel(self, tx, context, planned, report: SigningReport, tlog, max_workers: Optional[int]) -> None:
        # Workers call build_witness on a frozen snapshot; only this thread writes tx.witnesses.
        arena = tuple(tx.witnesses)
        workers = max(1, min(int(max_workers or CFG.SIGN_MAX_WORKERS), len(planned)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tsarcell-sign") as pool:
            futures = [(result, signer, pool.submit(signer.build_witness, tx, result.group, context, arena))
                       for result, signer in planned]
            built = []
            for result, signer, fut in futures:
                index = result.group.representative_index
                try:
                    built.append((result, fut.result()))
                except MalformedWitnessError as e:
                    tlog.bind(group=index, signer=signer.name).warning("Group left unsigned: %s", e)
                    result.status, result.error = FAILED, e
        for result, witness in built:
            index = result.group.representative_index
            report.original_witnesses[index] = arena[index]
            tx.witnesses[index] = witness
            result.status = SIGNED
        tlog.debug("Committed %d witnesses built on %d workers", len(built), workers)


def sign_transaction(tx: Transaction, signers: Optional[Sequence[ScriptSigner]], context: SigningContext,
                     *, parallel: Optional[bool] = None, max_workers: Optional[int] = None) -> SigningReport:
    """
    Sign every lock script group some signer can unlock.

    Sequential passes go through each signer's `sign`; parallel passes call
    `build_witness` on a snapshot instead, so signers that only override
    `sign` should be run with parallel=False.
    """
    return TransactionSigner(signers).sign(tx, context, parallel=parallel, max_workers=max_workers)
