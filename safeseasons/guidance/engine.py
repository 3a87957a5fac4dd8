# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from safeseasons.guidance.rules import RuleTable, load_rule_table

logger = logging.getLogger(__name__)


class RuleEngine:
    """Map (region, month, hazards) to an ordered, de-duplicated list of narrative ids."""

    def __init__(self, table: Optional[RuleTable] = None):
        self.table = table if table is not None else load_rule_table()

    def narrative_ids(self, region_code: str, month: str, hazards: Iterable[str]) -> List[str]:
        """Evaluate the rule table.

        Hazards are visited in the order given; for each one every matching
        entry contributes its ids in entry order. An id is emitted only the
        first time it is seen across the whole call. Unknown regions, months
        or hazards contribute nothing.
        """

        out: List[str] = []
        seen: set[str] = set()
        for hazard in hazards:
            for entry in self.table:
                if not entry.matches(region_code, month, hazard):
                    continue
                for nid in entry.narrative_ids:
                    if nid in seen:
                        continue
                    seen.add(nid)
                    out.append(nid)
        logger.debug("rules %s/%s -> %d narratives", region_code, month, len(out))
        return out
