# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Disaster reference catalog (descriptions, steps, supplies)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "disasters.yaml"
_WORD_RE = re.compile(r"[a-z0-9']+")


def _alias_in(alias: str, text: str, words: set) -> bool:
    if " " in alias:
        return alias in text
    return alias in words


class Severity(IntEnum):
    LOW = 1
    MODERATE = 2
    HIGH = 3
    EXTREME = 4

    @property
    def label(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Disaster:
    name: str
    description: str
    steps: Tuple[str, ...] = ()
    supplies: Tuple[str, ...] = ()
    severity: Severity = Severity.MODERATE
    category: str = ""
    aliases: Tuple[str, ...] = ()

    def match_terms(self) -> Tuple[str, ...]:
        """Lowercased name plus its singular stem ("tornadoes" -> "tornado")."""

        lowered = self.name.lower()
        if lowered.endswith("es"):
            return (lowered, lowered[:-2])
        if lowered.endswith("s"):
            return (lowered, lowered[:-1])
        return (lowered,)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "steps": list(self.steps),
            "supplies": list(self.supplies),
            "severity": self.severity.label,
            "category": self.category,
        }


@dataclass(frozen=True)
class DisasterCategory:
    name: str
    disasters: Tuple[Disaster, ...] = field(default_factory=tuple)


class DisasterCatalog:
    def __init__(self, categories: Iterable[DisasterCategory]):
        self._categories: Tuple[DisasterCategory, ...] = tuple(categories)
        self._disasters: Tuple[Disaster, ...] = tuple(
            d for c in self._categories for d in c.disasters
        )

    @classmethod
    def from_disasters(cls, disasters: Iterable[Disaster], category: str = "General") -> "DisasterCatalog":
        return cls([DisasterCategory(name=category, disasters=tuple(disasters))])

    def categories(self) -> List[DisasterCategory]:
        return list(self._categories)

    def all_disasters(self) -> List[Disaster]:
        return list(self._disasters)

    def disaster(self, name: str) -> Optional[Disaster]:
        """Exact name lookup, case-insensitive."""

        wanted = (name or "").strip().lower()
        for item in self._disasters:
            if item.name.lower() == wanted:
                return item
        return None

    def mentioned_in(self, question: str) -> Optional[Disaster]:
        """First disaster (catalog order) whose name appears in ``question``.

        Also matches when the disaster name contains the whole question,
        so a bare "flood" finds "Flooding". Aliases ("twister") are only
        tried when no name matched, and must appear as whole words.
        """

        q = (question or "").strip().lower()
        if not q:
            return None
        for item in self._disasters:
            if any(term in q for term in item.match_terms()) or q in item.name.lower():
                return item
        words = set(_WORD_RE.findall(q))
        for item in self._disasters:
            if any(_alias_in(alias, q, words) for alias in item.aliases):
                return item
        return None

    def search(self, query: str) -> List[Disaster]:
        """Free-text search over names, aliases and descriptions."""

        q = (query or "").strip().lower()
        if not q:
            return self.all_disasters()
        words = set(_WORD_RE.findall(q))
        hits: List[Disaster] = []
        for item in self._disasters:
            if (
                q in item.name.lower()
                or any(_alias_in(alias, q, words) for alias in item.aliases)
                or q in item.description.lower()
            ):
                hits.append(item)
        return hits


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


def _parse_disaster(raw: Any, category: str) -> Disaster:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise ValueError("disaster entry needs a name")
    severity_key = str(raw.get("severity") or "moderate").strip().upper()
    try:
        severity = Severity[severity_key]
    except KeyError:
        raise ValueError(f"unknown severity {raw.get('severity')!r}") from None
    return Disaster(
        name=str(raw["name"]).strip(),
        description=str(raw.get("description") or "").strip(),
        steps=_str_tuple(raw.get("steps")),
        supplies=_str_tuple(raw.get("supplies")),
        severity=severity,
        category=category,
        aliases=tuple(a.lower() for a in _str_tuple(raw.get("aliases"))),
    )


@lru_cache(maxsize=4)
def load_disaster_catalog(path: Optional[Path] = None) -> DisasterCatalog:
    data_path = Path(path) if path else _DATA_PATH
    if not data_path.exists():
        logger.warning("disasters.yaml not found at %s", data_path)
        return DisasterCatalog([])

    with data_path.open("r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh) or {}

    categories: List[DisasterCategory] = []
    for raw_cat in (doc.get("categories") if isinstance(doc, dict) else None) or []:
        if not isinstance(raw_cat, dict):
            logger.warning("Skipping malformed disaster category: %r", raw_cat)
            continue
        cat_name = str(raw_cat.get("name") or "").strip()
        disasters: List[Disaster] = []
        for raw in raw_cat.get("disasters") or []:
            try:
                disasters.append(_parse_disaster(raw, cat_name))
            except ValueError as exc:
                logger.warning("Skipping disaster in %s: %s", cat_name or "?", exc)
        categories.append(DisasterCategory(name=cat_name, disasters=tuple(disasters)))

    catalog = DisasterCatalog(categories)
    logger.info("Loaded disaster catalog: %d disasters", len(catalog.all_disasters()))
    return catalog
