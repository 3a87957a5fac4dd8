# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import pytest

from safeseasons import config
from safeseasons.catalog.disasters import Disaster, DisasterCatalog
from safeseasons.catalog.regions import ALL_YEAR, HazardCatalog, Region, RiskLevel, SeasonalWindow
from safeseasons.guidance.engine import RuleEngine
from safeseasons.guidance.rules import NarrativeStore, RuleEntry, RuleTable
from safeseasons.guidance.tips import ContextualTipsService


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate tests from a developer's SAFESEASONS_* environment."""

    for name in (
        "SAFESEASONS_CONFIG_PATH",
        "SAFESEASONS_DEFAULT_REGION",
        "SAFESEASONS_STREAM_WORD_DELAY_MS",
        "SAFESEASONS_LLM_ENABLED",
        "SAFESEASONS_LLM_MODEL",
        "SAFESEASONS_LLM_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    config.load.cache_clear()
    yield
    config.load.cache_clear()


@pytest.fixture
def texas() -> Region:
    return Region(
        code="TX",
        name="Texas",
        risk=RiskLevel.HIGH,
        hazards=("Hurricanes", "Tornadoes", "Flooding", "Heat"),
        seasonal=(
            SeasonalWindow("Tornado", ("March", "April", "May"), ("Tornadoes", "Severe Storms"), RiskLevel.HIGH),
            SeasonalWindow("Summer", ("June", "July", "August"), ("Extreme Heat",), RiskLevel.HIGH),
        ),
    )


@pytest.fixture
def quake_state() -> Region:
    return Region(
        code="QS",
        name="Quakeland",
        risk=RiskLevel.VERY_HIGH,
        hazards=(),
        seasonal=(SeasonalWindow("Earthquake", (ALL_YEAR,), ("Earthquakes",), RiskLevel.VERY_HIGH),),
    )


@pytest.fixture
def rule_table() -> RuleTable:
    return RuleTable([
        RuleEntry("TX", "April", "Tornadoes", ("tornado_season", "shelter_interior", "know_watch_vs_warning")),
        RuleEntry("TX", "April", "Severe Storms", ("tornado_season", "avoid_underpasses")),
        RuleEntry("TX", "April", "Flooding", ("flash_flood_common", "avoid_underpasses", "waterproof_docs")),
        RuleEntry("TX", "July", "Extreme Heat", ("heat_hydrate", "check_vulnerable")),
        RuleEntry("QS", ALL_YEAR, "Earthquakes", ("earthquake_any_time", "drop_cover_hold")),
    ])


@pytest.fixture
def narratives() -> NarrativeStore:
    return NarrativeStore({
        "tornado_season": "Tornado season is active; stay weather-aware.",
        "shelter_interior": "Identify a safe room (basement or interior, no windows).",
        "know_watch_vs_warning": "Know the difference between watch and warning.",
        "avoid_underpasses": "Avoid underpasses and low-water crossings.",
        "flash_flood_common": "Flash flooding is common this month.",
        "waterproof_docs": "Emergency kit should include waterproof documents.",
        "heat_hydrate": "Extreme heat: stay hydrated and limit outdoor activity.",
        "check_vulnerable": "Check on neighbors, especially older or vulnerable people.",
        "earthquake_any_time": "Earthquakes can happen anytime; prepare now.",
        "drop_cover_hold": "Drop, Cover, Hold On: practice your drill.",
    })


@pytest.fixture
def tips_service(rule_table, narratives) -> ContextualTipsService:
    return ContextualTipsService(RuleEngine(rule_table), narratives)


@pytest.fixture
def disasters() -> DisasterCatalog:
    return DisasterCatalog.from_disasters([
        Disaster(
            name="Hurricanes",
            description="Tropical cyclones with sustained winds over 74 mph.",
            steps=("Know evacuation routes", "Stock 3+ days of supplies"),
            supplies=("Water", "Flashlights"),
        ),
        Disaster(
            name="Tornadoes",
            description="Violently rotating columns of air.",
            steps=("Identify safe room", "Practice tornado drills", "Stay informed", "Know watch vs warning"),
            supplies=("Helmet", "Sturdy shoes", "Whistle"),
        ),
        Disaster(
            name="Flooding",
            description="Overflow of water onto normally dry land.",
            steps=("Know your flood zone",),
            supplies=("Sandbags",),
        ),
    ])


@pytest.fixture
def regions(texas, quake_state) -> HazardCatalog:
    return HazardCatalog([texas, quake_state])
