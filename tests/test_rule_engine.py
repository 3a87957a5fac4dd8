# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

from safeseasons.catalog.regions import ALL_YEAR
from safeseasons.guidance.engine import RuleEngine
from safeseasons.guidance.rules import RuleEntry, RuleTable


def test_hazard_order_decides_which_narratives_surface_first(rule_table):
    engine = RuleEngine(rule_table)

    ids = engine.narrative_ids("TX", "April", ["Tornadoes", "Severe Storms"])

    assert ids == ["tornado_season", "shelter_interior", "know_watch_vs_warning", "avoid_underpasses"]


def test_reversed_hazard_order_changes_priority(rule_table):
    engine = RuleEngine(rule_table)

    ids = engine.narrative_ids("TX", "April", ["Severe Storms", "Tornadoes"])

    assert ids == ["tornado_season", "avoid_underpasses", "shelter_interior", "know_watch_vs_warning"]


def test_ids_are_never_duplicated_across_hazards(rule_table):
    engine = RuleEngine(rule_table)

    ids = engine.narrative_ids("TX", "April", ["Tornadoes", "Severe Storms", "Flooding", "Tornadoes"])

    assert len(ids) == len(set(ids))
    assert ids.count("avoid_underpasses") == 1


def test_unmatched_inputs_contribute_nothing(rule_table):
    engine = RuleEngine(rule_table)

    assert engine.narrative_ids("ZZ", "April", ["Tornadoes"]) == []
    assert engine.narrative_ids("TX", "January", ["Tornadoes"]) == []
    assert engine.narrative_ids("TX", "April", ["Volcanoes"]) == []
    assert engine.narrative_ids("TX", "April", []) == []


def test_hazard_names_match_case_sensitively(rule_table):
    engine = RuleEngine(rule_table)

    assert engine.narrative_ids("TX", "April", ["tornadoes"]) == []


def test_all_year_entries_match_every_month(rule_table):
    engine = RuleEngine(rule_table)

    for month in ("January", "July", "December"):
        assert engine.narrative_ids("QS", month, ["Earthquakes"]) == ["earthquake_any_time", "drop_cover_hold"]


def test_entries_with_same_key_concatenate_in_table_order():
    table = RuleTable([
        RuleEntry("OK", "June", "Tornadoes", ("tornado_season", "shelter_interior")),
        RuleEntry("OK", ALL_YEAR, "Tornadoes", ("know_watch_vs_warning", "tornado_season")),
    ])

    ids = RuleEngine(table).narrative_ids("OK", "June", ["Tornadoes"])

    assert ids == ["tornado_season", "shelter_interior", "know_watch_vs_warning"]


def test_results_are_deterministic(rule_table):
    engine = RuleEngine(rule_table)
    hazards = ["Flooding", "Tornadoes", "Severe Storms"]

    first = engine.narrative_ids("TX", "April", hazards)
    for _ in range(5):
        assert engine.narrative_ids("TX", "April", hazards) == first
