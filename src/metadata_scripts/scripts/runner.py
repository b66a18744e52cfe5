"""Script runner.

Writes a resolved script to a private temp directory, runs it with the right
interpreter and streams its combined output to the log.

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List

from metadata_scripts.schemas import ScriptKind, ScriptRecord

logger = logging.getLogger(__name__)

POWERSHELL_ARGS = ["-NoProfile", "-NoLogo", "-ExecutionPolicy", "Unrestricted", "-File"]


class RunError(Exception):
    """Raised when a script cannot be written or started."""

    pass


def build_command(record: ScriptRecord, script_path: Path, powershell: str = "powershell.exe") -> List[str]:
    """Build the argv that runs script_path for the record's kind.

    Raises:
        RunError: If the record is not of a concrete kind.
    """
    if record.kind is ScriptKind.PS1:
        return [powershell, *POWERSHELL_ARGS, str(script_path)]
    elif record.kind in (ScriptKind.CMD, ScriptKind.BAT):
        return [str(script_path)]
    else:
        raise RunError(f"cannot run {record.label}: unresolved script type {record.kind.name}")


def write_script(record: ScriptRecord, directory: Path) -> Path:
    """Write the record body to <label>.<ext> inside directory."""
    script_path = directory / f"{record.label}.{record.kind.suffix}"
    script_path.write_bytes(record.body.encode("utf-8", errors="surrogateescape"))
    script_path.chmod(0o755)
    return script_path


def stream_output(process: subprocess.Popen, label: str) -> None:
    """Log each line of the process's merged output until it closes."""
    for raw in process.stdout:
        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        logger.info("%s: %s", label, line)


def run_script(
    record: ScriptRecord,
    powershell: str = "powershell.exe",
    temp_prefix: str = "metadata-scripts",
) -> int:
    """Run a resolved script and wait for it to exit.

    Args:
        record: Script of kind ps1, cmd or bat.
        powershell: PowerShell executable used for ps1 scripts.
        temp_prefix: Prefix for the temp directory name.

    Returns:
        Exit code of the script process.

    Raises:
        RunError: If the script is unresolved, or cannot be written or started.
    """
    if not record.kind.is_concrete:
        raise RunError(f"cannot run {record.label}: unresolved script type {record.kind.name}")

    try:
        temp_dir = Path(tempfile.mkdtemp(prefix=temp_prefix))
    except OSError as e:
        raise RunError(f"failed to create temp directory: {e}") from e

    try:
        try:
            script_path = write_script(record, temp_dir)
        except (OSError, UnicodeError) as e:
            raise RunError(f"failed to write {record.label}: {e}") from e

        command = build_command(record, script_path, powershell=powershell)
        logger.debug("Executing: %s", " ".join(command))

        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
            )
        except OSError as e:
            raise RunError(f"failed to start {record.label}: {e}") from e

        # Output must be drained before wait()
        with process:
            stream_output(process, record.label)
            return process.wait()
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
