from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.models import NotePayload, PermissionResult
from ankidroid_bridge.core.services.bridge import AnkiDroidBridge

PERMISSION_NAME = "com.ichi2.anki.permission.READ_WRITE_DATABASE"


def make_payload(**overrides) -> NotePayload:
    values = {
        "model_field_names": ["Word", "Meaning"],
        "field_values": ["사랑", "love"],
        "card_template_names": ["A", "B"],
        "question_templates": ["Q1", "Q2"],
        "answer_templates": ["A1", "A2"],
    }
    values.update(overrides)
    return NotePayload(**values)


@pytest.fixture
def settings() -> BridgeSettings:
    return BridgeSettings(
        _env_file=None,
        force_platform_support=False,
        request_permission_on_demand=True,
    )


@pytest.fixture
def collaborator() -> AsyncMock:
    fake = AsyncMock()
    fake.get_permission_name.return_value = PERMISSION_NAME
    fake.is_api_available.return_value = True
    fake.get_deck_list.return_value = [{"id": 1, "name": "Default"}]
    fake.get_model_list.return_value = [{"id": "1600000000000", "name": "Basic"}]
    fake.get_field_list.return_value = ["Front", "Back"]
    fake.get_selected_deck_name.return_value = "Korean"
    fake.add_note.return_value = "1700000000001"
    fake.upload_media_from_uri.return_value = '<img src="cat.png">'
    return fake


@pytest.fixture
def host() -> AsyncMock:
    fake = AsyncMock()
    fake.check.return_value = True
    fake.request.return_value = PermissionResult.GRANTED
    return fake


@pytest.fixture
def bridge(collaborator, host, settings) -> AnkiDroidBridge:
    return AnkiDroidBridge(collaborator, host, settings, platform_check=lambda: True)
