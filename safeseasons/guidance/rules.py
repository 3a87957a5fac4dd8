# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Guidance rule table and narrative store.

The rule table is read from ``safeseasons/data/guidance_rules.csv``::

    region,month,hazard,narratives
    TX,April,Tornadoes,tornado_season;shelter_interior;know_watch_vs_warning
    CA,All Year,Earthquakes,earthquake_any_time;drop_cover_hold;gas_shut_off

Row order is significant: when several rows match the same
(region, month, hazard) their narrative ids are concatenated in file
order. Narrative ids are resolved to text through ``narratives.yaml``.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from safeseasons.catalog.regions import ALL_YEAR

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_RULES_PATH = _DATA_DIR / "guidance_rules.csv"
_NARRATIVES_PATH = _DATA_DIR / "narratives.yaml"


@dataclass(frozen=True)
class RuleEntry:
    region: str
    month: str
    hazard: str
    narrative_ids: Tuple[str, ...]

    def matches(self, region: str, month: str, hazard: str) -> bool:
        return (
            self.region == region
            and (self.month == month or self.month == ALL_YEAR)
            and self.hazard == hazard
        )


class RuleTable:
    """Immutable, ordered list of :class:`RuleEntry`."""

    def __init__(self, entries: Iterable[RuleEntry]):
        self._entries: Tuple[RuleEntry, ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def entries(self) -> List[RuleEntry]:
        return list(self._entries)

    def narrative_ids(self) -> List[str]:
        seen: Dict[str, None] = {}
        for entry in self._entries:
            for nid in entry.narrative_ids:
                seen.setdefault(nid, None)
        return list(seen)


class NarrativeStore:
    """Fixed mapping from narrative id to advisory text."""

    def __init__(self, texts: Mapping[str, str]):
        self._texts: Dict[str, str] = dict(texts)

    def __contains__(self, narrative_id: object) -> bool:
        return narrative_id in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    def ids(self) -> List[str]:
        return list(self._texts)

    def text(self, narrative_id: str) -> Optional[str]:
        return self._texts.get(narrative_id)


def _split_ids(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in (raw or "").split(";") if part.strip())


@lru_cache(maxsize=4)
def load_rule_table(path: Optional[Path] = None) -> RuleTable:
    csv_path = Path(path) if path else _RULES_PATH
    entries: List[RuleEntry] = []
    if not csv_path.exists():
        logger.warning("guidance_rules.csv not found at %s", csv_path)
        return RuleTable(entries)

    with open(csv_path, "r", encoding="utf-8", errors="replace") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            region = (row.get("region") or "").strip().upper()
            month = (row.get("month") or "").strip()
            hazard = (row.get("hazard") or "").strip()
            ids = _split_ids(row.get("narratives") or "")
            if not region or not month or not hazard or not ids:
                logger.warning("Skipping incomplete rule at %s:%d", csv_path.name, line_no)
                continue
            entries.append(RuleEntry(region=region, month=month, hazard=hazard, narrative_ids=ids))

    logger.info("Loaded guidance rules: %d entries", len(entries))
    return RuleTable(entries)


@lru_cache(maxsize=4)
def load_narrative_store(path: Optional[Path] = None) -> NarrativeStore:
    yaml_path = Path(path) if path else _NARRATIVES_PATH
    if not yaml_path.exists():
        logger.warning("narratives.yaml not found at %s", yaml_path)
        return NarrativeStore({})

    with yaml_path.open("r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh) or {}
    raw = doc.get("narratives") if isinstance(doc, dict) else None
    texts: Dict[str, str] = {}
    for key, value in (raw or {}).items():
        if not isinstance(value, str) or not value.strip():
            logger.warning("Skipping narrative %r with empty text", key)
            continue
        texts[str(key)] = value.strip()
    logger.info("Loaded narrative store: %d narratives", len(texts))
    return NarrativeStore(texts)
