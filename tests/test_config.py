from __future__ import annotations

import importlib

import pytest

import stock_profit_engine.config as config_mod


def test_defaults():
    cfg = config_mod.EngineConfig(api_key="x")
    assert cfg.series_key == "Time Series (Daily)"
    assert cfg.open_field == "1. open"
    assert cfg.close_field == "4. close"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SPE_API_KEY", "secret")
    monkeypatch.setenv("SPE_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("SPE_PORT", "not-a-number")
    monkeypatch.setenv("SPE_INVALID_BAR_POLICY", "skip")
    try:
        mod = importlib.reload(config_mod)
        cfg = mod.EngineConfig()
        assert cfg.api_key == "secret"
        assert cfg.timeout_sec == 2.5
        assert cfg.port == 3001
        assert cfg.invalid_bar_policy == "skip"
    finally:
        monkeypatch.undo()
        importlib.reload(config_mod)


def test_bad_invalid_bar_policy_rejected():
    with pytest.raises(ValueError, match="SPE_INVALID_BAR_POLICY"):
        config_mod.EngineConfig(invalid_bar_policy="bogus")
