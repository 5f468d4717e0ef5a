from __future__ import annotations

import pytest

from pypowerdash.config import PowerDashConfig
from pypowerdash.exceptions import PowerDashConfigError


def test_defaults() -> None:
    config = PowerDashConfig()

    assert config.base_url == "http://localhost:8080"
    assert config.request_timeout is None


def test_trailing_slash_is_dropped() -> None:
    assert PowerDashConfig(base_url=" https://api.example.com/ ").base_url == "https://api.example.com"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POWERDASH_API_BASE", "https://power.example.com")
    monkeypatch.setenv("POWERDASH_REQUEST_TIMEOUT", "7.5")

    config = PowerDashConfig.from_env()

    assert config.base_url == "https://power.example.com"
    assert config.request_timeout == 7.5


def test_from_env_blank_base_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POWERDASH_API_BASE", "   ")
    monkeypatch.delenv("POWERDASH_REQUEST_TIMEOUT", raising=False)

    assert PowerDashConfig.from_env().base_url == "http://localhost:8080"


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POWERDASH_API_BASE", "https://env.example.com")
    monkeypatch.setenv("POWERDASH_REQUEST_TIMEOUT", "not-a-number")

    config = PowerDashConfig.from_env(base_url="https://explicit.example.com", request_timeout=3.0)

    assert config.base_url == "https://explicit.example.com"
    assert config.request_timeout == 3.0


def test_invalid_values_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(PowerDashConfigError):
        PowerDashConfig(base_url="")
    with pytest.raises(PowerDashConfigError):
        PowerDashConfig(request_timeout=0)

    monkeypatch.setenv("POWERDASH_REQUEST_TIMEOUT", "soon")
    with pytest.raises(PowerDashConfigError):
        PowerDashConfig.from_env()
