# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import asyncio

from safeseasons.ask.rule_based import (
    EMPTY_QUESTION_PROMPT,
    GENERIC_ANSWER,
    RuleBasedAskProvider,
    format_disaster,
)
from safeseasons.ask.types import AskContext
from safeseasons.catalog.disasters import load_disaster_catalog


def _provider(disasters, tips_service):
    return RuleBasedAskProvider(disasters, tips_service)


def test_never_reports_preferred_availability(disasters, tips_service):
    assert _provider(disasters, tips_service).is_preferred_available() is False


def test_empty_question_gets_example_prompt(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)
    ctx = AskContext(region=texas, month="April")

    assert provider.answer("", ctx) == EMPTY_QUESTION_PROMPT
    assert provider.answer("   \n", ctx) == EMPTY_QUESTION_PROMPT


def test_disaster_match_uses_canonical_name_regardless_of_casing(disasters, tips_service):
    provider = _provider(disasters, tips_service)
    ctx = AskContext(region=None, month="April")

    for question in ("What should I do during a Tornado?", "TORNADOES!!", "tornado"):
        answer = asyncio.run(provider.ask(question, ctx))
        assert answer.splitlines()[0] == "Tornadoes"


def test_disaster_block_layout(disasters, tips_service):
    provider = _provider(disasters, tips_service)

    answer = provider.answer("hurricanes", AskContext(region=None, month="June"))

    assert answer == (
        "Hurricanes\n\n"
        "Tropical cyclones with sustained winds over 74 mph.\n\n"
        "Preparedness steps:\n"
        "• Know evacuation routes\n"
        "• Stock 3+ days of supplies\n\n"
        "Supplies: Water, Flashlights"
    )


def test_name_containing_the_question_matches(disasters, tips_service):
    provider = _provider(disasters, tips_service)

    answer = provider.answer("flood", AskContext(region=None, month="June"))

    assert answer.startswith("Flooding\n")


def test_disaster_match_beats_location_cue(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)

    answer = provider.answer("tornado risk in my state?", AskContext(region=texas, month="April"))

    assert answer.startswith("Tornadoes\n")


def test_location_cue_returns_this_month_tips(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)

    answer = provider.answer("What should I watch for in my state?", AskContext(region=texas, month="April"))

    assert answer.startswith("This month in Texas:\n\n• Tornado season is active; stay weather-aware.")
    assert answer.count("• ") == 6


def test_region_name_and_code_are_location_cues(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)
    ctx = AskContext(region=texas, month="April")

    assert provider.answer("anything for texas?", ctx).startswith("This month in Texas:")
    assert provider.answer("any advice for TX", ctx).startswith("This month in Texas:")


def test_no_cue_gives_generic_answer(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)

    answer = provider.answer("tell me about mouse", AskContext(region=texas, month="April"))

    assert answer == GENERIC_ANSWER


def test_code_inside_a_word_is_not_a_cue(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)

    assert provider.answer("can you read a txt file", AskContext(region=texas, month="April")) == GENERIC_ANSWER


def test_cue_without_region_or_tips_falls_through(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)

    assert provider.answer("what about my state", AskContext(region=None, month="April")) == GENERIC_ANSWER
    assert provider.answer("what about my state", AskContext(region=texas, month="October")) == GENERIC_ANSWER


def test_bundled_catalog_answers_tornado_question(tips_service):
    catalog = load_disaster_catalog()
    provider = RuleBasedAskProvider(catalog, tips_service)

    answer = provider.answer("What should I do during a Tornado?", AskContext(region=None, month="May"))

    assert answer == format_disaster(catalog.disaster("Tornadoes"))
    assert "Supplies: Helmet, Sturdy shoes, Whistle, Battery-powered radio, Emergency kit" in answer


def test_session_keeps_turns(disasters, tips_service, texas):
    provider = _provider(disasters, tips_service)
    session = provider.open_session(AskContext(region=texas, month="April"))

    first = asyncio.run(session.ask("tornado"))
    second = asyncio.run(session.ask("and in my state?"))

    assert first.startswith("Tornadoes")
    assert second.startswith("This month in Texas:")
    assert [q for q, _ in session.history] == ["tornado", "and in my state?"]

    asyncio.run(session.aclose())
    assert session.closed and session.history == []


def test_alias_in_question_finds_the_disaster(tips_service):
    provider = RuleBasedAskProvider(load_disaster_catalog(), tips_service)

    answer = provider.answer("what about a twister?", AskContext(region=None, month="May"))

    assert answer.startswith("Tornadoes\n")


def test_stream_ask_yields_growing_snapshots_of_the_answer(disasters, tips_service):
    provider = _provider(disasters, tips_service)
    ctx = AskContext(region=None, month="May")

    async def collect():
        return [s async for s in provider.stream_ask("tornado", ctx)]

    snapshots = asyncio.run(collect())

    assert snapshots[0] == "Tornadoes\n\nViolently"
    assert snapshots[-1] == provider.answer("tornado", ctx)
    assert all(later.startswith(earlier) for earlier, later in zip(snapshots, snapshots[1:]))
