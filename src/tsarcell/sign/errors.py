# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of TsarCell — see LICENSE
# Refs: see REFERENCES.md


class SigningError(ValueError):
    pass

class MalformedWitnessError(SigningError):
    def __init__(self, index: int, length: int, required: int):
        super().__init__(f"witness #{index} is {length} bytes, placeholder needs at least {required}")
        self.index = index
        self.length = length
        self.required = required

class MalformedTransactionError(SigningError):
    pass

class ContextClosedError(SigningError):
    pass
