# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: CKB-RFC0022-Transaction-Structure; CKB-RFC0008-Serialization; RFC7693-BLAKE2

'''
=============================================================================
 -------- !!! SIGNATURE-CRITICAL REMINDER - READ BEFORE EDITING !!! --------
=============================================================================

The values below **MUST MATCH** whatever verifies the witnesses we produce.
Changing them makes every signature produced afterwards unverifiable.

  1) HASHING
   - HASH_PERSONALIZATION, SIGHASH_PERSONALIZATION
   - HASH_LENGTH, BLAKE160_LENGTH

  2) WITNESS LAYOUT
   - WITNESS_OFFSET, SIGNATURE_LENGTH

  3) SERIALIZATION CODES
   - HASH_TYPES, DEP_TYPES

NOT SIGNATURE-CRITICAL (safe to differ between deployments):
   parallel signing, keystore KDF cost, logging/path.

=============================================================================
'''

import os
import appdirs


# =============================================================================
# 1. MODE & APPLICATION
# =============================================================================
# ---- RUNTIME PROFILE ----
MODE   = "dev"  # default runtime profile, switch to "prod" for deployed signers
IS_DEV = (MODE.lower() == "dev")  # cached boolean to simplify dev/prod toggles

# ---- APP METADATA ----
APP_NAME   = "TsarCell"  # display name used for user data directories
APP_AUTHOR = "TsarStudio"  # vendor string passed into platform dir helpers
DATA_DIR   = appdirs.user_data_dir(APP_NAME, APP_AUTHOR)  # OS-specific data folder resolved via appdirs


# =============================================================================
# 2. HASHING
# =============================================================================
# ---- BLAKE2B PERSONALIZATION (16 bytes each) ----
HASH_PERSONALIZATION    = b"ckb-default-hash"  # content hash of scripts and raw transactions
SIGHASH_PERSONALIZATION = b"ckb-sighash-v1.0"  # sighash-all digest, kept apart from the content domain

# ---- DIGEST SIZES ----
HASH_LENGTH     = 32  # blake2b-256 output
BLAKE160_LENGTH = 20  # short hash of a public key, used as lock args


# =============================================================================
# 3. WITNESS LAYOUT
# =============================================================================
WITNESS_OFFSET   = 20  # placeholder header kept in front of the spliced signature
SIGNATURE_LENGTH = 65  # r(32) + s(32) + recid(1)
UINT64_LENGTH    = 8  # little-endian length prefix fed before each witness


# =============================================================================
# 4. SERIALIZATION CODES
# =============================================================================
HASH_TYPES = {
    "data":  0,  # code_hash matches the data hash of a dep cell
    "type":  1,  # code_hash matches the type script hash of a dep cell
    "data1": 2,  # data hash, executed on VM version 1
    "data2": 4,  # data hash, executed on VM version 2
}
DEP_TYPES = {
    "code":      0,  # dep cell is the script binary itself
    "dep_group": 1,  # dep cell lists further out points
}


# =============================================================================
# 5. SIGNING
# =============================================================================
SIGN_PARALLEL    = False  # build group witnesses on a thread pool by default
SIGN_MAX_WORKERS = min(8, (os.cpu_count() or 1))  # worker cap for parallel signing


# =============================================================================
# 6. KEYSTORE
# =============================================================================
KEYSTORE_KDF_N = 2**15  # scrypt cost factor
KEYSTORE_KDF_R = 8  # scrypt block size
KEYSTORE_KDF_P = 1  # scrypt parallelization


# =============================================================================
# 7. LOGGING
# =============================================================================
# ---- BASE OUTPUT ----
LOG_DIR              = os.path.join(DATA_DIR, "logging")  # folder receiving rotated log files
LOG_PATH             = os.path.join(LOG_DIR, "tsarcell.log")  # canonical log file path before format-specific override
LOG_SHOW_PROCESS     = False  # include process metadata in log context when True
LOG_PROC_PLACEHOLDER = "-"  # value used when process info is hidden

# ---- MODE PROFILES ----
if IS_DEV:
    # ---- DEV PROFILE ----
    LOG_LEVEL                   = "TRACE"  # very verbose logging for development
    LOG_FORMAT                  = "plain"  # plain text logs ease local debugging
    LOG_TO_CONSOLE              = True  # mirror logs to stdout for dev loops
    LOG_RATE_LIMIT_SECONDS      = 0.0  # disable console throttling in dev
    LOG_FILE_RATE_LIMIT_SECONDS = 0.0  # disable file throttling in dev
    LOG_ROTATE_MAX_BYTES        = 5_000_000  # rollover log files after ~5MB in dev
    LOG_BACKUP_COUNT            = 3  # retain a few rotated dev log files
else:
    # ---- PROD PROFILE ----
    LOG_LEVEL                   = "INFO"  # balanced verbosity for production
    LOG_FORMAT                  = "json"  # JSON logs simplify ingestion in prod
    LOG_TO_CONSOLE              = False  # suppress console spam for daemons
    LOG_RATE_LIMIT_SECONDS      = 2.0  # throttle console spam in prod
    LOG_FILE_RATE_LIMIT_SECONDS = 1.0  # throttle file spam in prod
    LOG_ROTATE_MAX_BYTES        = 10_000_000  # rollover log files after ~10MB in prod
    LOG_BACKUP_COUNT            = 7  # keep more history on production signers

# ---- LOG PATH NORMALIZATION ----
_LOG_BASE = os.path.join(LOG_DIR, "tsarcell")  # base path used to pick extension
if str(LOG_FORMAT).lower().strip() == "json":
    LOG_PATH = _LOG_BASE + ".jsonl"  # JSON lines extension to aid parsing
else:
    LOG_PATH = _LOG_BASE + ".log"  # plain-text log extension fallback
