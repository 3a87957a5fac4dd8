# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

__all__ = [
    "config",
    "catalog",
    "guidance",
    "ask",
    "cli",
]
