# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from .chat import ChatController
from .cleaner import clean_response, strip_artifact_prefix
from .orchestrator import AskOrchestrator
from .rule_based import RuleBasedAskProvider
from .streaming import StreamingAskOrchestrator, diff_cumulative, replay_words
from .types import (
    Answer,
    AskContext,
    AskProvider,
    ChatRecord,
    ConversationSession,
    GenerationFailedError,
    NoActiveSessionError,
    PreferredUnavailableError,
    ProviderError,
)

__all__ = [
    "Answer",
    "AskContext",
    "AskOrchestrator",
    "AskProvider",
    "ChatController",
    "ChatRecord",
    "ConversationSession",
    "GenerationFailedError",
    "NoActiveSessionError",
    "PreferredUnavailableError",
    "ProviderError",
    "RuleBasedAskProvider",
    "StreamingAskOrchestrator",
    "clean_response",
    "diff_cumulative",
    "replay_words",
    "strip_artifact_prefix",
]
