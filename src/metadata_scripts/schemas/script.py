# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Script schemas for metadata_scripts.

Follows the run pattern:
- Phase → key set → raw metadata → ScriptRecord → run → ScriptOutcome
- URL records are resolved into a concrete kind right before they run
- RunSummary collects the outcomes of one invocation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ScriptKind(Enum):
    """Script formats a metadata entry can hold.

    Declaration order is run order: ps1, cmd, bat, then url.
    """

    PS1 = 0
    CMD = 1
    BAT = 2
    URL = 3

    @property
    def suffix(self) -> str:
        """Metadata key suffix, also the temp file extension for concrete kinds."""
        return self.name.lower()

    @property
    def is_concrete(self) -> bool:
        return self is not ScriptKind.URL

    @classmethod
    def from_suffix(cls, suffix: str) -> Optional["ScriptKind"]:
        """Return the concrete kind for a file extension, or None."""
        for kind in cls:
            if kind.is_concrete and kind.suffix == suffix:
                return kind
        return None


class Phase(Enum):
    """Instance lifecycle phases that carry metadata scripts."""

    SPECIALIZE = "specialize"
    STARTUP = "startup"
    SHUTDOWN = "shutdown"

    @property
    def key_prefix(self) -> str:
        """Prefix shared by every metadata key queried for this phase."""
        if self is Phase.SPECIALIZE:
            return f"sysprep-{self.value}"
        return f"windows-{self.value}"


@dataclass(frozen=True)
class ScriptRecord:
    """A script pulled from metadata.

    label is the metadata attribute name the script came from. It names the
    temp file and tags log lines, nothing else.
    """
    kind: ScriptKind
    body: str
    label: str


@dataclass
class ScriptOutcome:
    """Result of running a single script."""
    label: str
    status: str  # "completed", "failed"
    exit_code: Optional[int] = None
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Result of running every script for a phase."""
    phase: Phase
    outcomes: List[ScriptOutcome] = field(default_factory=list)

    @property
    def completed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "completed")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")
