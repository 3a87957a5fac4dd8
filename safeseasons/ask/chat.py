# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from safeseasons.ask.cleaner import clean_response
from safeseasons.ask.streaming import StreamingAskOrchestrator
from safeseasons.ask.types import AskContext, ChatRecord, GenerationFailedError, ProviderError
from safeseasons.catalog.regions import Region, current_month

logger = logging.getLogger(__name__)

ERROR_PLACEHOLDER = "Sorry, I encountered an error: {detail}"


class ChatController:
    """In-memory chat history around a :class:`StreamingAskOrchestrator`.

    A fresh :class:`AskContext` is built for every question from the
    injected region getter and month provider. Answers produced by the
    preferred (generative) provider are cleaned before they are stored.
    Provider errors are not raised: a placeholder answer is stored instead
    and the detail is kept on ``last_error``.
    """

    def __init__(
        self,
        orchestrator: StreamingAskOrchestrator,
        region_getter: Callable[[], Optional[Region]] = lambda: None,
        month_provider: Callable[[], str] = current_month,
    ):
        self.orchestrator = orchestrator
        self.region_getter = region_getter
        self.month_provider = month_provider
        self.history: List[ChatRecord] = []
        self.last_error: Optional[str] = None

    def context(self) -> AskContext:
        return AskContext(region=self.region_getter(), month=self.month_provider())

    def clear(self) -> None:
        self.history = []
        self.last_error = None

    def _record_error(self, exc: ProviderError) -> ChatRecord:
        detail = exc.detail if isinstance(exc, GenerationFailedError) else str(exc)
        logger.warning("Answer failed: %s", detail)
        self.last_error = detail
        record = ChatRecord(content=ERROR_PLACEHOLDER.format(detail=detail), is_user=False)
        self.history.append(record)
        return record

    def _begin(self, question: str) -> Optional[str]:
        text = (question or "").strip()
        if not text:
            return None
        self.last_error = None
        self.history.append(ChatRecord(content=text, is_user=True))
        return text

    async def send(self, question: str) -> Optional[ChatRecord]:
        text = self._begin(question)
        if text is None:
            return None
        try:
            answer = await self.orchestrator.answer(text, self.context())
        except ProviderError as exc:
            return self._record_error(exc)
        record = ChatRecord(
            content=clean_response(answer.text) if answer.used_preferred else answer.text,
            is_user=False,
            used_preferred=answer.used_preferred,
        )
        self.history.append(record)
        return record

    async def send_streaming(
        self,
        question: str,
        on_chunk: Optional[Callable[[str], None]] = None,
    ) -> Optional[ChatRecord]:
        text = self._begin(question)
        if text is None:
            return None
        provider, chunks = self.orchestrator.open_stream(text, self.context())
        used_preferred = provider is self.orchestrator.preferred
        parts: List[str] = []
        try:
            async for chunk in chunks:
                parts.append(chunk)
                if on_chunk is not None:
                    on_chunk(chunk)
        except ProviderError as exc:
            return self._record_error(exc)
        finally:
            await chunks.aclose()
        answer_text = "".join(parts)
        record = ChatRecord(
            content=clean_response(answer_text) if used_preferred else answer_text,
            is_user=False,
            used_preferred=used_preferred,
        )
        self.history.append(record)
        return record
