# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Orchestrator - Find and run the metadata scripts for a phase.

Validates the phase, queries the metadata server once, then runs each
script found in kind order (ps1, cmd, bat, url), one at a time.
A failing script is logged and the next one still runs.
"""

import logging
from functools import partial
from typing import Dict, List, Sequence

from metadata_scripts import __version__
from metadata_scripts.config import Config
from metadata_scripts.metadata import get_metadata
from metadata_scripts.schemas import Phase, RunSummary, ScriptKind, ScriptOutcome, ScriptRecord
from metadata_scripts.scripts import (
    FetchError,
    ResolveError,
    RunError,
    fetch_script,
    resolve,
    run_script,
)

logger = logging.getLogger(__name__)

KEY_TEMPLATE = "{prefix}-script-{suffix}"


class ArgumentError(Exception):
    """Raised when the command line does not name exactly one known phase."""

    pass


def validate_args(args: Sequence[str]) -> Phase:
    """Validate the positional arguments and return the selected phase.

    Raises:
        ArgumentError: Unless args is exactly one known phase name.
    """
    options = "[" + " ".join(p.value for p in Phase) + "]"
    if len(args) != 1:
        raise ArgumentError(f"No valid arguments specified. Options: {options}")
    try:
        return Phase(args[0])
    except ValueError:
        raise ArgumentError(f"No valid arguments specified. Options: {options}") from None


def build_key_set(phase: Phase) -> Dict[ScriptKind, str]:
    """Map every script kind to the metadata key queried for it in this phase."""
    return {
        kind: KEY_TEMPLATE.format(prefix=phase.key_prefix, suffix=kind.suffix)
        for kind in ScriptKind
    }


def parse_metadata(key_set: Dict[ScriptKind, str], metadata: Dict[str, str]) -> List[ScriptRecord]:
    """Collect scripts present in metadata, in kind order.

    Absent and empty attributes are skipped. URL entries stay unresolved.
    """
    records = []
    for kind in sorted(key_set, key=lambda k: k.value):
        name = key_set[kind]
        value = metadata.get(name)
        if not value:
            continue
        records.append(ScriptRecord(kind=kind, body=value, label=name))
    return records


def get_scripts(key_set: Dict[ScriptKind, str], config: Config) -> List[ScriptRecord]:
    """Query the metadata server and collect the scripts for key_set.

    Raises:
        MetadataFetchError: If the metadata server query fails.
    """
    return parse_metadata(key_set, get_metadata(config))


def run_scripts(records: List[ScriptRecord], config: Config) -> List[ScriptOutcome]:
    """Resolve and run each record in order.

    A non-zero exit is reported but is not a failure. Resolve, download and
    launch errors mark the script failed; the remaining scripts still run.
    """
    fetch = partial(fetch_script, timeout=config.download_timeout)
    outcomes = []

    for record in records:
        logger.info("Found %s in metadata.", record.label)
        try:
            resolved = resolve(record.body, record.kind, record.label, fetch=fetch)
            exit_code = run_script(
                resolved,
                powershell=config.powershell,
                temp_prefix=config.temp_prefix,
            )
        except (ResolveError, FetchError, RunError) as e:
            logger.error("%s: %s", record.label, e)
            outcomes.append(ScriptOutcome(label=record.label, status="failed", error=str(e)))
            continue

        logger.info("%s exit status %d", record.label, exit_code)
        outcomes.append(ScriptOutcome(label=record.label, status="completed", exit_code=exit_code))

    return outcomes


def run_phase(phase: Phase, config: Config) -> RunSummary:
    """Run every metadata script configured for phase.

    Raises:
        MetadataFetchError: If the metadata server query fails.
    """
    logger.info("Starting %s scripts (version %s).", phase.value, __version__)
    summary = RunSummary(phase=phase)

    records = get_scripts(build_key_set(phase), config)
    if not records:
        logger.info("No %s scripts to run.", phase.value)
        return summary

    summary.outcomes = run_scripts(records, config)
    logger.info(
        "Finished running %s scripts (%d completed, %d failed).",
        phase.value,
        summary.completed,
        summary.failed,
    )
    return summary
