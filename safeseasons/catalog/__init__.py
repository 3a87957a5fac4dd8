# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from .disasters import Disaster, DisasterCatalog, DisasterCategory, Severity, load_disaster_catalog
from .regions import (
    ALL_YEAR,
    MONTHS,
    HazardCatalog,
    Region,
    RiskLevel,
    SeasonalWindow,
    current_month,
    load_hazard_catalog,
    normalize_month,
)

__all__ = [
    "ALL_YEAR",
    "MONTHS",
    "Disaster",
    "DisasterCatalog",
    "DisasterCategory",
    "HazardCatalog",
    "Region",
    "RiskLevel",
    "SeasonalWindow",
    "Severity",
    "current_month",
    "load_disaster_catalog",
    "load_hazard_catalog",
    "normalize_month",
]
