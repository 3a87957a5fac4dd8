# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Preferred-provider-with-fallback dispatch for questions.

Every call re-checks the preferred provider's availability and sends the
question to exactly one provider. A failure from the chosen provider is
raised to the caller; it is never retried against the other provider.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from safeseasons.ask.types import Answer, AskContext, AskProvider, GenerationFailedError, ProviderError

logger = logging.getLogger(__name__)


class AskOrchestrator:
    def __init__(self, fallback: AskProvider, preferred: Optional[AskProvider] = None):
        self.fallback = fallback
        self.preferred = preferred

    def is_preferred_available(self) -> bool:
        return self.preferred is not None and bool(self.preferred.is_preferred_available())

    def active_provider(self) -> AskProvider:
        if self.preferred is not None and self.preferred.is_preferred_available():
            return self.preferred
        return self.fallback

    async def answer(self, question: str, context: AskContext) -> Answer:
        provider = self.active_provider()
        used_preferred = provider is self.preferred
        logger.debug("ask -> %s (preferred=%s)", provider.name, used_preferred)
        started = time.time()
        try:
            text = await provider.ask(question, context)
        except ProviderError:
            raise
        except Exception as exc:
            logger.warning("Provider %s failed: %s", provider.name, exc)
            raise GenerationFailedError(f"{type(exc).__name__}: {exc}") from exc
        logger.debug("ask answered by %s in %d ms", provider.name, int((time.time() - started) * 1000))
        return Answer(text=text, provider=provider.name, used_preferred=used_preferred)

    async def ask(self, question: str, context: AskContext) -> str:
        return (await self.answer(question, context)).text
