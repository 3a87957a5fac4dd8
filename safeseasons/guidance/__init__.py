# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from .engine import RuleEngine
from .rules import NarrativeStore, RuleEntry, RuleTable, load_narrative_store, load_rule_table
from .tips import ContextualTipsService, active_hazards

__all__ = [
    "ContextualTipsService",
    "NarrativeStore",
    "RuleEngine",
    "RuleEntry",
    "RuleTable",
    "active_hazards",
    "load_narrative_store",
    "load_rule_table",
]
