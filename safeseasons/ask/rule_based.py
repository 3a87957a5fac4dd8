# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Offline keyword-matching answer provider.

Answers are chosen by a fixed relevance ladder, first hit wins:

1. empty question -> example prompt
2. a disaster named in the question -> that disaster's steps and supplies
3. a location or time cue plus a selected region -> this month's tips
4. anything else -> generic browse / 911 guidance

Changing the order of the ladder changes which answer ambiguous
questions receive.
"""

from __future__ import annotations

import logging
import re
from typing import AsyncIterator, List, Optional

from safeseasons.ask.types import AskContext
from safeseasons.catalog.disasters import Disaster, DisasterCatalog, load_disaster_catalog
from safeseasons.catalog.regions import Region
from safeseasons.guidance.tips import ContextualTipsService

logger = logging.getLogger(__name__)

EMPTY_QUESTION_PROMPT = (
    'Ask something like "What should I do during a tornado?" or '
    '"How do I prepare for a hurricane?" Try "safeseasons plan <hazard>" for hazard-specific steps.'
)

GENERIC_ANSWER = (
    "Ask about a specific hazard (tornadoes, floods, hurricanes, etc.) to get its preparedness steps. "
    'Set your state to get "This month" tips. For life-threatening emergencies, call 911.'
)

LOCATION_CUES = ("state", "this month", "my area", "my state")


def format_disaster(disaster: Disaster) -> str:
    steps = "\n".join(f"• {step}" for step in disaster.steps)
    return (
        f"{disaster.name}\n\n{disaster.description}\n\n"
        f"Preparedness steps:\n{steps}\n\n"
        f"Supplies: {', '.join(disaster.supplies)}"
    )


def format_tips(region: Region, tips: List[str]) -> str:
    bullets = "\n".join(f"• {tip}" for tip in tips)
    return f"This month in {region.name}:\n\n{bullets}"


def mentions_region(question: str, region: Region) -> bool:
    """True when the lowercased question names the region or its code as a word."""

    if region.name.lower() in question:
        return True
    code = region.code.lower()
    return bool(code) and re.search(rf"\b{re.escape(code)}\b", question) is not None


def has_location_cue(question: str, region: Optional[Region]) -> bool:
    if any(cue in question for cue in LOCATION_CUES):
        return True
    return region is not None and mentions_region(question, region)


class RuleBasedSession:
    """Conversation handle for the rule-based provider.

    Each turn is answered independently with the session's context; the
    history is kept so callers can inspect the exchange.
    """

    def __init__(self, provider: "RuleBasedAskProvider", context: AskContext):
        self.provider = provider
        self.context = context
        self.history: List[tuple[str, str]] = []
        self.closed = False

    async def ask(self, question: str) -> str:
        answer = self.provider.answer(question, self.context)
        self.history.append((question, answer))
        return answer

    async def aclose(self) -> None:
        self.history.clear()
        self.closed = True


class RuleBasedAskProvider:
    name = "rules"
    supports_streaming = False

    def __init__(
        self,
        disasters: Optional[DisasterCatalog] = None,
        tips: Optional[ContextualTipsService] = None,
    ):
        self.disasters = disasters if disasters is not None else load_disaster_catalog()
        self.tips = tips or ContextualTipsService()

    def is_preferred_available(self) -> bool:
        return False

    def answer(self, question: str, context: AskContext) -> str:
        q = (question or "").strip().lower()
        if not q:
            return EMPTY_QUESTION_PROMPT

        disaster = self.disasters.mentioned_in(q)
        if disaster is not None:
            logger.debug("rule answer: disaster %s", disaster.name)
            return format_disaster(disaster)

        region = context.region
        if region is not None and has_location_cue(q, region):
            tips = self.tips.tips(region, context.month)
            if tips:
                logger.debug("rule answer: %d tips for %s", len(tips), region.code)
                return format_tips(region, tips)

        return GENERIC_ANSWER

    async def ask(self, question: str, context: AskContext) -> str:
        return self.answer(question, context)

    async def stream_ask(self, question: str, context: AskContext) -> AsyncIterator[str]:
        """Cumulative snapshots of :meth:`answer`, one word longer each time."""

        text = ""
        for index, word in enumerate(self.answer(question, context).split(" ")):
            text = f"{text} {word}" if index else word
            yield text

    def open_session(self, context: AskContext) -> RuleBasedSession:
        return RuleBasedSession(self, context)
