# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Main entry point for running metadata_scripts as a module."""

from metadata_scripts.cli import main

if __name__ == "__main__":
    main()
