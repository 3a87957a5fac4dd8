# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Region hazard catalog.

Reads ``safeseasons/data/regions.yaml`` into immutable :class:`Region`
records. Each region carries an ordered list of baseline hazards and a
list of seasonal windows; a window whose month list contains
``"All Year"`` applies in every month.

Hazard names are free text and are compared verbatim (case-sensitive)
with the guidance rule table. Nothing here canonicalizes them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "regions.yaml"

ALL_YEAR = "All Year"

MONTHS: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def current_month(today: Optional[date] = None) -> str:
    """Return the English month name for ``today`` (defaults to now)."""

    today = today or date.today()
    return MONTHS[today.month - 1]


def normalize_month(raw: str) -> Optional[str]:
    """Map ``"apr"``, ``"April"`` or ``"4"`` to ``"April"``; ``None`` if unknown."""

    text = (raw or "").strip()
    if not text:
        return None
    if text.isdigit():
        idx = int(text)
        return MONTHS[idx - 1] if 1 <= idx <= 12 else None
    lowered = text.lower()
    for name in MONTHS:
        if name.lower() == lowered or (len(lowered) >= 3 and name.lower().startswith(lowered)):
            return name
    return None


class RiskLevel(IntEnum):
    LOW = 1
    MODERATE = 2
    HIGH = 3
    VERY_HIGH = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @classmethod
    def parse(cls, raw: Any) -> "RiskLevel":
        key = str(raw or "").strip().upper().replace(" ", "_").replace("-", "_")
        if key == "VERYHIGH":
            key = "VERY_HIGH"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown risk level: {raw!r}") from None


@dataclass(frozen=True)
class SeasonalWindow:
    label: str
    months: Tuple[str, ...]
    hazards: Tuple[str, ...]
    risk: RiskLevel = RiskLevel.MODERATE

    def applies_to(self, month: str) -> bool:
        return month in self.months or ALL_YEAR in self.months

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "months": list(self.months),
            "hazards": list(self.hazards),
            "risk": self.risk.label,
        }


@dataclass(frozen=True)
class Region:
    code: str
    name: str
    risk: RiskLevel
    hazards: Tuple[str, ...] = ()
    seasonal: Tuple[SeasonalWindow, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "risk": self.risk.label,
            "hazards": list(self.hazards),
            "seasonal": [w.to_dict() for w in self.seasonal],
        }


class HazardCatalog:
    """Read-only lookup over a fixed list of regions."""

    def __init__(self, regions: Iterable[Region]):
        self._regions: Tuple[Region, ...] = tuple(regions)
        self._by_code: Dict[str, Region] = {}
        for region in self._regions:
            self._by_code.setdefault(region.code.upper(), region)

    def __len__(self) -> int:
        return len(self._regions)

    def all_regions(self) -> List[Region]:
        return list(self._regions)

    def region(self, code: Optional[str]) -> Optional[Region]:
        if not code:
            return None
        return self._by_code.get(code.strip().upper())

    def find_by_name(self, name: str) -> Optional[Region]:
        wanted = (name or "").strip().lower()
        for region in self._regions:
            if region.name.lower() == wanted:
                return region
        return None


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


def _parse_window(raw: Any) -> SeasonalWindow:
    if not isinstance(raw, dict):
        raise ValueError("seasonal window must be a mapping")
    return SeasonalWindow(
        label=str(raw.get("label") or "").strip(),
        months=_str_tuple(raw.get("months")),
        hazards=_str_tuple(raw.get("hazards")),
        risk=RiskLevel.parse(raw.get("risk", "moderate")),
    )


def _parse_region(raw: Any) -> Region:
    if not isinstance(raw, dict):
        raise ValueError("region entry must be a mapping")
    code = str(raw.get("code") or "").strip().upper()
    name = str(raw.get("name") or "").strip()
    if not code or not name:
        raise ValueError("region entry needs code and name")
    windows = raw.get("seasonal") or []
    return Region(
        code=code,
        name=name,
        risk=RiskLevel.parse(raw.get("risk", "moderate")),
        hazards=_str_tuple(raw.get("hazards")),
        seasonal=tuple(_parse_window(w) for w in windows),
    )


def parse_regions(entries: Iterable[Any]) -> List[Region]:
    """Build regions from raw mappings, skipping (and logging) bad entries."""

    regions: List[Region] = []
    for idx, raw in enumerate(entries):
        try:
            regions.append(_parse_region(raw))
        except ValueError as exc:
            logger.warning("Skipping region entry %d: %s", idx, exc)
    return regions


@lru_cache(maxsize=4)
def load_hazard_catalog(path: Optional[Path] = None) -> HazardCatalog:
    data_path = Path(path) if path else _DATA_PATH
    if not data_path.exists():
        logger.warning("regions.yaml not found at %s", data_path)
        return HazardCatalog([])

    with data_path.open("r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh) or {}
    entries = doc.get("regions") if isinstance(doc, dict) else None
    regions = parse_regions(entries or [])
    logger.info("Loaded hazard catalog: %d regions", len(regions))
    return HazardCatalog(regions)
