# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Main CLI entry point for metadata-scripts.

Dumb trigger: validates the phase, loads config, sets up logging and hands
off to the orchestrator. Script failures never change the exit code.
"""

import logging
import sys
from typing import List, Optional

import typer

from metadata_scripts import __version__
from metadata_scripts.config import Config, ConfigError, load_config
from metadata_scripts.metadata import MetadataFetchError
from metadata_scripts.orchestrator import ArgumentError, run_phase, validate_args

LOG_FORMAT = "%(asctime)s GCEMetadataScripts: %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="metadata-scripts",
    help="Run the specialize, startup or shutdown scripts set in instance metadata",
    add_completion=False,
)


def setup_logging(config: Config) -> None:
    """Send package logs to stdout and, if configured, to log_file.

    Safe to call more than once; handlers from an earlier call are replaced.
    """
    pkg_logger = logging.getLogger("metadata_scripts")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    pkg_logger.setLevel(config.log_level.upper())
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    pkg_logger.addHandler(console)

    if config.log_file:
        try:
            file_handler = logging.FileHandler(config.log_file)
        except OSError as e:
            pkg_logger.warning("Cannot open log file %s: %s", config.log_file, e)
        else:
            file_handler.setFormatter(formatter)
            pkg_logger.addHandler(file_handler)


def _version_callback(value: bool):
    if value:
        typer.echo(f"metadata-scripts version {__version__}")
        raise typer.Exit()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    args: Optional[List[str]] = typer.Argument(None, help="Phase: specialize, startup or shutdown"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version information.",
    ),
):
    """Run the metadata scripts for a phase."""
    try:
        phase = validate_args(args or [])
    except ArgumentError as e:
        typer.echo(str(e))
        raise typer.Exit(1)

    try:
        config = load_config()
        setup_logging(config)
    except (ConfigError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Configuration error: {e}")
        raise typer.Exit(1)

    try:
        run_phase(phase, config)
    except MetadataFetchError as e:
        logger.critical("%s", e)
        raise typer.Exit(1)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
