# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Metadata script schemas."""

from metadata_scripts.schemas.script import (
    Phase,
    RunSummary,
    ScriptKind,
    ScriptOutcome,
    ScriptRecord,
)

__all__ = [
    "Phase",
    "ScriptKind",
    "ScriptRecord",
    "ScriptOutcome",
    "RunSummary",
]
