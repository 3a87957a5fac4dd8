# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Optional, Protocol, runtime_checkable

from safeseasons.catalog.regions import Region, current_month


class ProviderError(Exception):
    """Base class for answer provider failures."""


class PreferredUnavailableError(ProviderError):
    """Raised when the preferred provider is asked to answer while unavailable."""

    def __init__(self, message: str = "The preferred answer provider is not available."):
        super().__init__(message)


class GenerationFailedError(ProviderError):
    """Raised when the active provider fails while generating an answer."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NoActiveSessionError(ProviderError):
    """Raised when a session operation is called before ``start_session``."""

    def __init__(self, message: str = "No active conversation session."):
        super().__init__(message)


@dataclass(frozen=True)
class AskContext:
    region: Optional[Region]
    month: str

    @classmethod
    def now(cls, region: Optional[Region] = None) -> "AskContext":
        return cls(region=region, month=current_month())


@dataclass(frozen=True)
class Answer:
    text: str
    provider: str
    used_preferred: bool


@dataclass(frozen=True)
class ChatRecord:
    content: str
    is_user: bool
    timestamp: datetime = field(default_factory=datetime.now)
    used_preferred: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "is_user": self.is_user,
            "timestamp": self.timestamp.isoformat(),
            "used_preferred": self.used_preferred,
        }


@runtime_checkable
class ConversationSession(Protocol):
    """A multi-turn conversation bound to one :class:`AskContext`."""

    async def ask(self, question: str) -> str:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class AskProvider(Protocol):
    """Contract shared by the preferred and the rule-based providers.

    ``stream_ask`` is only called when ``supports_streaming`` is true and
    yields cumulative snapshots of the answer generated so far.
    """

    name: str
    supports_streaming: bool

    def is_preferred_available(self) -> bool:
        ...

    async def ask(self, question: str, context: AskContext) -> str:
        ...

    def stream_ask(self, question: str, context: AskContext) -> AsyncIterator[str]:
        ...

    def open_session(self, context: AskContext) -> ConversationSession:
        ...
