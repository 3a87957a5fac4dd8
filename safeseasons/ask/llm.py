# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Preferred answer provider backed by an OpenAI-compatible chat server.

Defaults target a local server (LM Studio on ``127.0.0.1:1234``; Ollama
and vLLM expose the same ``/chat/completions`` route), so answers stay on
the device. The provider only reports itself available when it is
enabled and a model id is configured; settings come from the ``llm``
section of ``safeseasons/config.yaml`` with ``SAFESEASONS_LLM_*``
environment overrides.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
import weakref
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import httpx

from safeseasons.ask.types import AskContext, GenerationFailedError, PreferredUnavailableError
from safeseasons.config import env_bool, env_float, env_int, env_str, section
from safeseasons.guidance.tips import ContextualTipsService

logger = logging.getLogger(__name__)

_HTTP_CLIENTS_BY_LOOP: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, httpx.AsyncClient]" = (
    weakref.WeakKeyDictionary()
)


async def aclose_http_client() -> None:
    """Close and forget the running loop's shared client, if one was opened."""

    client = _HTTP_CLIENTS_BY_LOOP.pop(asyncio.get_running_loop(), None)
    if client is not None:
        await client.aclose()


GENERAL_PREPAREDNESS = (
    "General preparedness tips: Maintain an emergency kit with water (1 gallon per person per day), "
    "non-perishable food, first aid supplies, important documents, flashlight, batteries, and a "
    "communication plan. Know your evacuation routes and have a family emergency plan."
)


@dataclass
class LLMConfig:
    enabled: bool = False
    base_url: str = "http://127.0.0.1:1234/v1"
    model: str = ""
    api_key: str = ""
    temperature: float = 0.4
    max_tokens: int = 400
    timeout_sec: float = 60.0

    @classmethod
    def from_config(cls) -> "LLMConfig":
        cfg = section("llm")
        defaults = cls()
        key_env = str(cfg.get("api_key_env") or "SAFESEASONS_LLM_API_KEY")

        def _num(key: str, fallback: float) -> float:
            try:
                return float(cfg.get(key, fallback))
            except (TypeError, ValueError):
                return fallback

        return cls(
            enabled=env_bool("SAFESEASONS_LLM_ENABLED", bool(cfg.get("enabled", defaults.enabled))),
            base_url=env_str("SAFESEASONS_LLM_BASE_URL", str(cfg.get("base_url") or defaults.base_url)),
            model=env_str("SAFESEASONS_LLM_MODEL", str(cfg.get("model") or "")),
            api_key=os.getenv(key_env, "").strip(),
            temperature=env_float("SAFESEASONS_LLM_TEMPERATURE", _num("temperature", defaults.temperature)),
            max_tokens=env_int("SAFESEASONS_LLM_MAX_TOKENS", int(_num("max_tokens", defaults.max_tokens))),
            timeout_sec=env_float("SAFESEASONS_LLM_TIMEOUT_SEC", _num("timeout_sec", defaults.timeout_sec)),
        )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


def build_instructions(context: AskContext, tips: List[str]) -> str:
    """System prompt grounding the model in the user's region and month."""

    lines = [
        "You are SafeSeasons, a helpful disaster preparedness assistant.",
        "Answer clearly and briefly, with practical safety steps.",
        "",
    ]
    region = context.region
    if region is not None:
        lines.append(f"User location: {region.name} ({region.code}).")
        if region.hazards:
            lines.append(f"Top hazards: {', '.join(region.hazards)}.")
    if context.month:
        lines.append(f"Current month: {context.month}.")
    if tips:
        lines.append("Relevant tips for this month:")
        lines.extend(f"- {tip}" for tip in tips)
    else:
        lines.append(GENERAL_PREPAREDNESS)
    lines += [
        "",
        "Critical rules:",
        '1. Never include the word "null" in your response.',
        "2. Never repeat the same sentence.",
        "3. Do not invent phone numbers, addresses or shelter locations.",
        "4. For life-threatening emergencies, tell the user to call 911.",
    ]
    return "\n".join(lines)


def _error_message(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    message = ""
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            message = str(err.get("message", ""))
        elif isinstance(err, str):
            message = err
    return message or resp.text[:400]


def _completion_text(payload: Any) -> str:
    if isinstance(payload, dict):
        choices = payload.get("choices") or []
        if choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
            if isinstance(message, dict):
                return str(message.get("content") or "").strip()
    return ""


def parse_sse_line(line: str) -> Optional[str]:
    """Return the content delta carried by one ``data:`` line.

    ``None`` means the line carries no text (comments, keep-alives, role
    headers); ``"[DONE]"`` is returned verbatim for the terminator.
    """

    line = line.strip()
    if not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if data == "[DONE]":
        return data
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise GenerationFailedError(f"malformed stream event: {data[:200]}") from exc
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return str(content) if content else None


class ChatCompletionsSession:
    """Multi-turn conversation; the whole message list is sent on every turn."""

    def __init__(self, provider: "ChatCompletionsProvider", context: AskContext):
        self.provider = provider
        self.context = context
        self.messages: List[Dict[str, str]] = [
            {"role": "system", "content": provider.instructions(context)}
        ]
        self.closed = False

    async def ask(self, question: str) -> str:
        self.provider.require_available()
        self.messages.append({"role": "user", "content": question})
        text = await self.provider.complete(self.messages)
        self.messages.append({"role": "assistant", "content": text})
        return text

    async def aclose(self) -> None:
        self.messages = []
        self.closed = True


class ChatCompletionsProvider:
    name = "llm"
    supports_streaming = True

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        *,
        tips: Optional[ContextualTipsService] = None,
        availability: Optional[Callable[[], bool]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or LLMConfig.from_config()
        self.tips = tips or ContextualTipsService()
        self._availability = availability
        self._client = client

    # -- availability ---------------------------------------------------------

    def is_preferred_available(self) -> bool:
        if self._availability is not None:
            return bool(self._availability())
        return bool(self.config.enabled and self.config.model)

    def require_available(self) -> None:
        if not self.is_preferred_available():
            raise PreferredUnavailableError()

    # -- http -----------------------------------------------------------------

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        loop = asyncio.get_running_loop()
        client = _HTTP_CLIENTS_BY_LOOP.get(loop)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(timeout=self.config.timeout_sec)
            _HTTP_CLIENTS_BY_LOOP[loop] = client
        return client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _body(self, messages: List[Dict[str, str]], stream: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": float(self.config.temperature),
            "max_tokens": int(self.config.max_tokens),
        }
        if stream:
            body["stream"] = True
        return body

    def instructions(self, context: AskContext) -> str:
        tips = self.tips.tips(context.region, context.month) if context.region else []
        return build_instructions(context, tips)

    def _messages(self, question: str, context: AskContext) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.instructions(context)},
            {"role": "user", "content": question},
        ]

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        started = time.time()
        try:
            resp = await self._get_client().post(
                self.config.completions_url,
                headers=self._headers(),
                json=self._body(messages, stream=False),
                timeout=self.config.timeout_sec,
            )
        except httpx.HTTPError as exc:
            logger.warning("LLM request to %s failed: %s", self.config.base_url, exc)
            raise GenerationFailedError(f"request error: {exc}") from exc

        elapsed_ms = int((time.time() - started) * 1000)
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("LLM HTTP %s after %d ms: %s", resp.status_code, elapsed_ms, message)
            raise GenerationFailedError(f"HTTP {resp.status_code}: {message}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise GenerationFailedError("invalid JSON in completion response") from exc
        text = _completion_text(payload)
        if not text:
            raise GenerationFailedError("empty completion")
        logger.info("LLM call model=%s ms=%d chars=%d", self.config.model, elapsed_ms, len(text))
        return text

    # -- provider contract ----------------------------------------------------

    async def ask(self, question: str, context: AskContext) -> str:
        self.require_available()
        return await self.complete(self._messages(question, context))

    async def stream_ask(self, question: str, context: AskContext) -> AsyncIterator[str]:
        """Yield cumulative snapshots of the streamed completion."""

        self.require_available()
        started = time.time()
        text = ""
        try:
            async with self._get_client().stream(
                "POST",
                self.config.completions_url,
                headers=self._headers(),
                json=self._body(self._messages(question, context), stream=True),
                timeout=self.config.timeout_sec,
            ) as resp:
                if resp.status_code >= 400:
                    await resp.aread()
                    raise GenerationFailedError(f"HTTP {resp.status_code}: {_error_message(resp)}")
                async for line in resp.aiter_lines():
                    delta = parse_sse_line(line)
                    if delta is None:
                        continue
                    if delta == "[DONE]":
                        break
                    text += delta
                    yield text
        except httpx.HTTPError as exc:
            logger.warning("LLM stream from %s failed: %s", self.config.base_url, exc)
            raise GenerationFailedError(f"stream error: {exc}") from exc
        logger.info(
            "LLM stream model=%s ms=%d chars=%d",
            self.config.model,
            int((time.time() - started) * 1000),
            len(text),
        )

    def open_session(self, context: AskContext) -> ChatCompletionsSession:
        return ChatCompletionsSession(self, context)
