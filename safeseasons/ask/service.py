# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Wiring of the bundled catalogs, rules and providers."""

from __future__ import annotations

from typing import Optional

from safeseasons.ask.llm import ChatCompletionsProvider, LLMConfig
from safeseasons.ask.rule_based import RuleBasedAskProvider
from safeseasons.ask.streaming import StreamingAskOrchestrator
from safeseasons.catalog.disasters import load_disaster_catalog
from safeseasons.guidance.engine import RuleEngine
from safeseasons.guidance.rules import load_narrative_store, load_rule_table
from safeseasons.guidance.tips import ContextualTipsService


def build_tips_service() -> ContextualTipsService:
    return ContextualTipsService(RuleEngine(load_rule_table()), load_narrative_store())


def build_orchestrator(
    llm_config: Optional[LLMConfig] = None,
    word_delay: Optional[float] = None,
) -> StreamingAskOrchestrator:
    tips = build_tips_service()
    fallback = RuleBasedAskProvider(load_disaster_catalog(), tips)
    preferred = ChatCompletionsProvider(llm_config or LLMConfig.from_config(), tips=tips)
    return StreamingAskOrchestrator(fallback, preferred=preferred, word_delay=word_delay)
