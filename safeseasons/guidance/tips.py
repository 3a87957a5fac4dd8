# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Contextual "this month" tips for a region."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from safeseasons.catalog.regions import Region
from safeseasons.guidance.engine import RuleEngine
from safeseasons.guidance.rules import NarrativeStore, load_narrative_store

logger = logging.getLogger(__name__)


def active_hazards(region: Region, month: str) -> List[str]:
    """Return the hazards active for ``region`` in ``month``.

    Baseline hazards come first in declared order, then the hazards of each
    seasonal window covering ``month`` (or marked "All Year"), in window
    order. Duplicates keep their first position.
    """

    ordered: Dict[str, None] = dict.fromkeys(region.hazards)
    for window in region.seasonal:
        if window.applies_to(month):
            for hazard in window.hazards:
                ordered.setdefault(hazard, None)
    return list(ordered)


class ContextualTipsService:
    def __init__(self, engine: Optional[RuleEngine] = None, narratives: Optional[NarrativeStore] = None):
        self.engine = engine or RuleEngine()
        self.narratives = narratives if narratives is not None else load_narrative_store()

    def tips(self, region: Optional[Region], month: str) -> List[str]:
        if region is None:
            return []
        hazards = active_hazards(region, month)
        if not hazards:
            return []
        texts: List[str] = []
        for nid in self.engine.narrative_ids(region.code, month, hazards):
            text = self.narratives.text(nid)
            if text is None:
                logger.warning("Narrative %s has no text; skipping", nid)
                continue
            texts.append(text)
        return texts
