# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Streaming answers and conversation sessions.

Providers that stream natively emit cumulative snapshots ("He", "Hello",
"Hello there"); :func:`diff_cumulative` turns those into increments.
Providers that cannot stream have their full answer replayed word by
word by :func:`replay_words`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, AsyncIterator, Optional, Tuple

from safeseasons.ask.cleaner import strip_artifact_lead
from safeseasons.ask.orchestrator import AskOrchestrator
from safeseasons.ask.types import (
    AskContext,
    AskProvider,
    ConversationSession,
    GenerationFailedError,
    NoActiveSessionError,
    ProviderError,
)
from safeseasons.config import stream_word_delay

logger = logging.getLogger(__name__)


async def _aclose(stream: AsyncIterator[str]) -> None:
    closer = getattr(stream, "aclose", None)
    if closer is not None:
        await closer()


async def diff_cumulative(snapshots: AsyncIterator[str]) -> AsyncIterator[str]:
    """Yield only the newly appended text of each cumulative snapshot.

    A snapshot that does not extend the previous one is emitted whole.
    Empty and repeated snapshots produce nothing and leave the baseline
    untouched, so a later snapshot is still diffed against the last text
    that was emitted.
    """

    previous = ""
    try:
        async for current in snapshots:
            if len(current) > len(previous) and current.startswith(previous):
                delta = current[len(previous):]
            elif current and current != previous:
                delta = current
            else:
                continue
            previous = current
            yield delta
    finally:
        await _aclose(snapshots)


async def strip_leading_artifact(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Apply the artifact-prefix strip to the first non-empty chunk only."""

    pending = True
    try:
        async for chunk in chunks:
            if pending and chunk.strip():
                chunk = strip_artifact_lead(chunk)
                if not chunk:
                    continue
                pending = False
            if chunk:
                yield chunk
    finally:
        await _aclose(chunks)


async def replay_words(text: str, delay: float = 0.0) -> AsyncIterator[str]:
    """Yield ``text`` one word at a time: "first", " second", " third"."""

    for index, word in enumerate(text.split(" ")):
        if index and delay > 0:
            await asyncio.sleep(delay)
        yield word if index == 0 else f" {word}"


class StreamingAskOrchestrator(AskOrchestrator):
    """:class:`AskOrchestrator` with incremental delivery and one conversation session."""

    def __init__(
        self,
        fallback: AskProvider,
        preferred: Optional[AskProvider] = None,
        word_delay: Optional[float] = None,
    ):
        super().__init__(fallback, preferred)
        self.word_delay = stream_word_delay() if word_delay is None else max(0.0, word_delay)
        self._session: Optional[ConversationSession] = None

    async def _replay(self, provider: AskProvider, question: str, context: AskContext) -> AsyncIterator[str]:
        text = await provider.ask(question, context)
        async for chunk in replay_words(text, self.word_delay):
            yield chunk

    def open_stream(self, question: str, context: AskContext) -> Tuple[AskProvider, AsyncGenerator[str, None]]:
        """Pick the provider once and return it with its increment stream."""

        provider = self.active_provider()
        return provider, self._stream_from(provider, question, context)

    async def stream_ask(self, question: str, context: AskContext) -> AsyncIterator[str]:
        _, chunks = self.open_stream(question, context)
        try:
            async for chunk in chunks:
                yield chunk
        finally:
            await _aclose(chunks)

    async def _stream_from(self, provider: AskProvider, question: str, context: AskContext) -> AsyncIterator[str]:
        if provider.supports_streaming:
            logger.debug("stream -> %s (native)", provider.name)
            chunks = strip_leading_artifact(diff_cumulative(provider.stream_ask(question, context)))
        else:
            logger.debug("stream -> %s (word replay)", provider.name)
            chunks = self._replay(provider, question, context)

        try:
            async for chunk in chunks:
                yield chunk
        except ProviderError:
            raise
        except Exception as exc:
            logger.warning("Streaming from %s failed: %s", provider.name, exc)
            raise GenerationFailedError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            await _aclose(chunks)

    # -- conversation session -------------------------------------------------

    @property
    def has_active_session(self) -> bool:
        return self._session is not None

    async def start_session(self, context: AskContext) -> None:
        await self.clear_session()
        provider = self.active_provider()
        self._session = provider.open_session(context)
        logger.debug("session opened on %s", provider.name)

    async def ask_in_session(self, question: str) -> str:
        if self._session is None:
            raise NoActiveSessionError()
        try:
            return await self._session.ask(question)
        except ProviderError:
            raise
        except Exception as exc:
            raise GenerationFailedError(f"{type(exc).__name__}: {exc}") from exc

    async def clear_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await session.aclose()
