# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

from safeseasons import config


def test_missing_config_file_loads_empty(monkeypatch, tmp_path):
    monkeypatch.setenv("SAFESEASONS_CONFIG_PATH", str(tmp_path / "absent.yaml"))
    config.load.cache_clear()

    assert config.load() == {}
    assert config.section("llm") == {}


def test_non_mapping_config_is_ignored(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SAFESEASONS_CONFIG_PATH", str(path))
    config.load.cache_clear()

    assert config.load() == {}


def test_bundled_defaults():
    assert config.stream_word_delay() == 0.05
    assert config.default_region() == ""
    assert config.section("llm")["base_url"].startswith("http://127.0.0.1")


def test_stream_delay_env_override_and_bad_values(monkeypatch, tmp_path):
    monkeypatch.setenv("SAFESEASONS_STREAM_WORD_DELAY_MS", "0")
    assert config.stream_word_delay() == 0.0

    monkeypatch.setenv("SAFESEASONS_STREAM_WORD_DELAY_MS", "fast")
    assert config.stream_word_delay() == 0.05

    path = tmp_path / "config.yaml"
    path.write_text("ask:\n  stream_word_delay_ms: 10\n", encoding="utf-8")
    monkeypatch.setenv("SAFESEASONS_CONFIG_PATH", str(path))
    monkeypatch.delenv("SAFESEASONS_STREAM_WORD_DELAY_MS")
    config.load.cache_clear()
    assert config.stream_word_delay() == 0.01


def test_env_helpers_fall_back_on_blank_or_malformed(monkeypatch):
    monkeypatch.setenv("X_INT", "nope")
    monkeypatch.setenv("X_STR", "   ")
    monkeypatch.setenv("X_BOOL", "yes")
    monkeypatch.setenv("X_FLOAT", "0.25")

    assert config.env_int("X_INT", 7) == 7
    assert config.env_str("X_STR", "dflt") == "dflt"
    assert config.env_bool("X_BOOL", False) is True
    assert config.env_bool("X_MISSING", True) is True
    assert config.env_float("X_FLOAT", 1.0) == 0.25
