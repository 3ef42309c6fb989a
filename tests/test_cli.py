from __future__ import annotations

import pytest
from typer.testing import CliRunner

from ankidroid_bridge.cli import doctor
from ankidroid_bridge.cli import main as cli_main
from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import Failure, IdentifierRecord, PermissionResult, Success

runner = CliRunner()


class StubBridge:
    def __init__(self) -> None:
        self.payloads = []

    async def list_decks(self):
        return Success([IdentifierRecord(id="1", name="Default"), IdentifierRecord(id="2", name="Korean")])

    async def list_models(self):
        return Success([IdentifierRecord(id="9", name="Basic")])

    async def list_fields(self, model_name=None, model_id=None):
        if not model_name and not model_id:
            return Failure(BridgeError.IDENTIFIER_MISSING)
        return Success(["Front", "Back"])

    async def get_selected_deck_name(self):
        return Success("Korean")

    async def add_note(self, payload):
        self.payloads.append(payload)
        return Success(1700000000001)

    async def upload_media_from_uri(self, file_uri, preferred_name, mime_type):
        return Success(f'<img src="{preferred_name}.png">')

    async def request_permission(self, rationale=None):
        return PermissionResult.GRANTED


@pytest.fixture
def stub(monkeypatch) -> StubBridge:
    bridge = StubBridge()
    monkeypatch.setattr(cli_main, "AnkiDroidBridge", lambda *args, **kwargs: bridge)
    return bridge


def test_decks_lists_names(stub):
    result = runner.invoke(cli_main.app, ["-q", "decks"])

    assert result.exit_code == 0
    assert "Default" in result.output
    assert "Korean" in result.output


def test_fields_without_identifier_exits_with_error(stub):
    result = runner.invoke(cli_main.app, ["-q", "fields"])

    assert result.exit_code == 1
    assert BridgeError.IDENTIFIER_MISSING.value in result.output


def test_fields_by_model_name(stub):
    result = runner.invoke(cli_main.app, ["-q", "fields", "--model-name", "Basic"])

    assert result.exit_code == 0
    assert "Front" in result.output


def test_selected_deck(stub):
    result = runner.invoke(cli_main.app, ["-q", "selected-deck"])

    assert result.exit_code == 0
    assert "Korean" in result.output


def test_add_note_builds_payload(stub):
    result = runner.invoke(
        cli_main.app,
        [
            "-q",
            "add-note",
            "-f", "Word", "-v", "사랑",
            "-f", "Meaning", "-v", "love",
            "--card-name", "A", "--card-name", "B",
            "--question", "Q1", "--question", "Q2",
            "--answer", "A1", "--answer", "A2",
            "--deck-name", "Korean",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "1700000000001" in result.output
    payload = stub.payloads[0]
    assert list(payload.model_field_names) == ["Word", "Meaning"]
    assert list(payload.field_values) == ["사랑", "love"]
    assert payload.tags is None
    assert payload.deck_name == "Korean"


def test_upload_media(stub):
    result = runner.invoke(cli_main.app, ["-q", "upload-media", "file:///sdcard/cat.png", "--name", "cat"])

    assert result.exit_code == 0
    assert '<img src="cat.png">' in result.output


def test_permission(stub):
    result = runner.invoke(cli_main.app, ["-q", "permission"])

    assert result.exit_code == 0
    assert "granted" in result.output


class StubCollaborator:
    instances = 0

    def __init__(self, settings=None) -> None:
        StubCollaborator.instances += 1

    async def is_api_available(self):
        return True

    async def get_permission_name(self):
        return "anki.permission.RW"


def test_doctor_run_uses_one_collaborator(monkeypatch):
    StubCollaborator.instances = 0
    monkeypatch.setattr(doctor, "HttpCollaborator", StubCollaborator)
    monkeypatch.setenv("ANKIDROID_BRIDGE_FORCE_PLATFORM_SUPPORT", "true")

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "AnkiDroid API reachable" in result.output
    assert "anki.permission.RW" in result.output
    assert StubCollaborator.instances == 1
