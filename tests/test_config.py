from __future__ import annotations

import logging

import pytest

from ankidroid_bridge.core.config import BridgeSettings, write_user_env_vars
from ankidroid_bridge.core.logging import resolve_level


def test_defaults():
    settings = BridgeSettings(_env_file=None)

    assert settings.collaborator_url == "http://127.0.0.1:8765"
    assert settings.force_platform_support is False
    assert settings.request_permission_on_demand is True


def test_env_vars_override(monkeypatch):
    monkeypatch.setenv("ANKIDROID_BRIDGE_COLLABORATOR_URL", "http://10.0.2.2:9000")
    monkeypatch.setenv("ANKIDROID_BRIDGE_FORCE_PLATFORM_SUPPORT", "true")

    settings = BridgeSettings(_env_file=None)

    assert settings.collaborator_url == "http://10.0.2.2:9000"
    assert settings.force_platform_support is True


def test_write_user_env_vars_merges_existing(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"ANKIDROID_BRIDGE_COLLABORATOR_URL": "http://a:1"}, env_path)
    write_user_env_vars({"ANKIDROID_BRIDGE_LOG_LEVEL": "DEBUG"}, env_path)

    text = env_path.read_text(encoding="utf-8")
    assert "ANKIDROID_BRIDGE_COLLABORATOR_URL=http://a:1" in text
    assert "ANKIDROID_BRIDGE_LOG_LEVEL=DEBUG" in text

    settings = BridgeSettings(_env_file=env_path)
    assert settings.collaborator_url == "http://a:1"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), ("ERROR", logging.ERROR), ("loud", logging.WARNING), (None, logging.WARNING)],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected
