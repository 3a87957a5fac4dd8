# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import pytest

from safeseasons.ask.cleaner import clean_response, strip_artifact_lead, strip_artifact_prefix


def test_artifact_stripped_and_repeat_collapsed():
    assert clean_response("null Hello. Hello. World!") == "Hello. World!"


def test_short_text_is_returned_unchanged():
    assert clean_response("ok") == "ok"
    assert clean_response("  Hi there  ") == "Hi there"
    assert clean_response("") == ""


def test_repeated_sentences_collapse_ignoring_case_and_spacing():
    text = "Stay indoors during storms. stay   indoors during STORMS! Keep a radio nearby."

    assert clean_response(text) == "Stay indoors during storms. Keep a radio nearby."


def test_short_noise_fragments_are_dropped_and_final_punctuation_kept():
    assert clean_response("Hi. Keep your go-bag by the door!") == "Keep your go-bag by the door!"


def test_missing_terminal_punctuation_is_added():
    assert clean_response("Keep water stored in a cool place") == "Keep water stored in a cool place."


def test_newlines_split_sentences():
    text = "Line one is long enough\nLine two is long enough\n"

    assert clean_response(text) == "Line one is long enough. Line two is long enough."


def test_artifact_prefix_is_case_insensitive_and_whole_word():
    assert strip_artifact_prefix("NULL  Stay safe") == "Stay safe"
    assert strip_artifact_prefix("null\nnull Stay safe") == "Stay safe"
    assert strip_artifact_prefix("nullable values") == "nullable values"
    assert clean_response("nullable values are fine here.") == "nullable values are fine here."


def test_artifact_lead_strip_keeps_trailing_whitespace():
    assert strip_artifact_lead("null Stay ") == "Stay "
    assert strip_artifact_lead("  Stay ") == "Stay "
    assert strip_artifact_lead("null ") == ""


@pytest.mark.parametrize(
    "text",
    [
        "null Hello. Hello. World!",
        "Hello. null thing long enough here",
        "null null   ok",
        "Know your evacuation routes.\n\nKnow your evacuation routes.\nStock three days of water...",
        "What should I pack? Pack water, food and a flashlight! Pack water, food and a flashlight",
        "a.b.c",
        "   ",
        "Tornadoes\n\nViolently rotating columns of air.\n\n• Identify safe room",
    ],
)
def test_cleaning_is_idempotent(text):
    once = clean_response(text)

    assert clean_response(once) == once
