# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Run startup, shutdown and specialize scripts published in instance metadata."""

__version__ = "0.1.0"
