# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Post-processing for generated answers.

Generative backends occasionally prefix their output with a literal
``null`` and repeat whole sentences. :func:`clean_response` strips the
prefix, drops short noise fragments and collapses repeats. It never
raises and is idempotent.
"""

from __future__ import annotations

import re
from typing import List, Tuple

_ARTIFACT_RE = re.compile(r"^(?:null\b\s*)+", re.IGNORECASE)
_FRAGMENT_RE = re.compile(r"[^.!?\n]+[.!?\n]*")
_TERMINATORS = ".!?"
_MIN_FRAGMENT_LEN = 10  # fragments this short or shorter are noise


def strip_artifact_prefix(text: str) -> str:
    """Remove a leading ``null`` token (any casing, repeated) and trim."""

    return _ARTIFACT_RE.sub("", (text or "").strip()).strip()


def strip_artifact_lead(text: str) -> str:
    """Like :func:`strip_artifact_prefix` but leaves trailing whitespace alone.

    Used on the first chunk of a stream, where a trailing space separates
    it from the next chunk.
    """

    return _ARTIFACT_RE.sub("", (text or "").lstrip())


def _normalize(fragment: str) -> str:
    return " ".join(fragment.lower().split())


def _fragments(text: str) -> List[Tuple[str, str]]:
    """Split into (body, trailing punctuation) pairs, dropping empty bodies."""

    out: List[Tuple[str, str]] = []
    for match in _FRAGMENT_RE.finditer(text):
        raw = match.group(0)
        body = raw.rstrip(_TERMINATORS + "\n")
        punct = raw[len(body):]
        body = body.strip()
        if body:
            out.append((body, punct))
    return out


def _dedupe(fragments: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    seen: set[str] = set()
    unique: List[Tuple[str, str]] = []
    for body, punct in fragments:
        key = _normalize(body)
        if key in seen:
            continue
        seen.add(key)
        unique.append((body, punct))
    return unique


def _terminator(punct: str) -> str:
    for ch in reversed(punct):
        if ch in _TERMINATORS:
            return ch
    return "."


def _clean_once(text: str) -> str:
    stripped = strip_artifact_prefix(text)
    fragments = _fragments(stripped)
    kept = [f for f in fragments if len(f[0]) > _MIN_FRAGMENT_LEN]
    if kept:
        unique = _dedupe(kept)
    else:
        # Nothing sentence-sized survived; only collapse exact repeats.
        unique = _dedupe(fragments)
        if len(unique) == len(fragments):
            return stripped
    joined = ". ".join(body for body, _ in unique)
    return (joined + _terminator(unique[-1][1])).strip()


def clean_response(text: str) -> str:
    """Return ``text`` without the artifact prefix and repeated sentences."""

    current = text or ""
    while True:
        cleaned = _clean_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned
