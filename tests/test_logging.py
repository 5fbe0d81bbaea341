# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md

import json
import logging

from tsarcell.utils.tsar_logging import (TRACE, JsonFormatter, RedactFilter, SafeFormatter, get_ctx_logger,
                                         setup_logging)

from conftest import KEY_A


def _record(msg, *args, **extra):
    rec = logging.LogRecord("tsarcell.test", logging.INFO, __file__, 1, msg, args, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_redact_private_key():
    rec = _record("loaded priv_key=%s for signing", KEY_A.hex())
    assert RedactFilter().filter(rec)
    assert KEY_A.hex() not in rec.getMessage()
    assert "[REDACTED_PRIVKEY]" in rec.getMessage()


def test_json_formatter_carries_context():
    out = json.loads(JsonFormatter().format(_record("signed", tx="abcd", group=2, signer="-")))
    assert out["msg"] == "signed"
    assert out["tx"] == "abcd"
    assert out["group"] == 2
    assert "signer" not in out


def test_safe_formatter_fills_missing_context():
    fmt = SafeFormatter("%(tx)s|%(group)s|%(message)s")
    assert fmt.format(_record("hello")) == "-|-|hello"


def test_ctx_logger_binds_fields(caplog):
    log = get_ctx_logger("tsarcell.test", tx="feed")
    with caplog.at_level(TRACE, logger="tsarcell.test"):
        log.bind(group=3).info("group done")
        log.trace("low level")
    first, second = caplog.records[-2:]
    assert (first.tx, first.group, first.signer) == ("feed", 3, "-")
    assert second.levelname == "TRACE"
    assert second.group == "-"


def test_setup_logging_writes_file(tmp_path):
    path = tmp_path / "logs" / "tsarcell.log"
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    for h in saved[0]:
        root.removeHandler(h)
    try:
        setup_logging(log_file=path, level="DEBUG", to_console=False)
        logging.getLogger("tsarcell.test").info("private key: %s", KEY_A.hex())
        for h in root.handlers:
            h.flush()
        text = path.read_text(encoding="utf-8")
        assert "[REDACTED_PRIVKEY]" in text
        assert KEY_A.hex() not in text
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
