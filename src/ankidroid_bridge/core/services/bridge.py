"""Caller-facing facade over the AnkiDroid API.

Every public coroutine follows the same template:

    platform check -> permission -> (validation) -> collaborator call -> normalize

and resolves to a single `Outcome`. Nothing raised by the collaborator escapes:
transport errors become `BridgeError.REMOTE_UNKNOWN_ERROR` with the original
text logged. Read operations go through `retry_once`; writes run once.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import ValidationError

from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import (
    Failure,
    Identifier,
    IdentifierRecord,
    MediaMimeType,
    NotePayload,
    Outcome,
    PermissionResult,
    Success,
)
from ankidroid_bridge.core.interfaces.collaborator import FlashcardCollaborator, PermissionHost
from ankidroid_bridge.core.services.payload_validator import validate
from ankidroid_bridge.core.services.permission_gate import PermissionGate, host_is_android, retry_once

logger = logging.getLogger(__name__)

T = TypeVar("T")


def id_as_text(value: Identifier | None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _as_list(values: Any) -> list[Any] | None:
    return list(values) if values is not None else None


def parse_note_id(raw: Any) -> Outcome[int]:
    """Turn the collaborator's untyped `add_note` answer into an outcome.

    A numeric answer is the note id; anything else is a symbolic failure token.
    """

    if isinstance(raw, int) and not isinstance(raw, bool):
        return Success(raw)
    if isinstance(raw, str):
        try:
            return Success(int(raw.strip()))
        except ValueError:
            pass
    logger.warning("add note answered %r", raw)
    return Failure(BridgeError.from_wire(raw), detail=str(raw))


class AnkiDroidBridge:
    """Facade combining the permission gate, the validator and the collaborator."""

    def __init__(
        self,
        collaborator: FlashcardCollaborator,
        permissions: PermissionHost,
        settings: BridgeSettings | None = None,
        *,
        rationale: str | None = None,
        platform_check: Callable[[], bool] = host_is_android,
    ) -> None:
        self._collaborator = collaborator
        self._settings = settings or BridgeSettings()
        self._rationale = rationale
        self.gate = PermissionGate(
            collaborator,
            permissions,
            self._settings,
            platform_check=platform_check,
        )

    async def _guard(self) -> Failure | None:
        if not self.gate.has_capability():
            return Failure(BridgeError.UNSUPPORTED_PLATFORM)
        if not await self.gate.ensure_permission(self._rationale):
            return Failure(BridgeError.PERMISSION_DENIED)
        return None

    async def _call(self, operation: str, call: Callable[[], Awaitable[T]]) -> Outcome[T]:
        try:
            return Success(await call())
        except Exception as exc:
            logger.warning("%s failed: %s", operation, exc)
            return Failure(BridgeError.REMOTE_UNKNOWN_ERROR, detail=str(exc))

    async def is_api_available(self) -> bool:
        if not self.gate.has_capability():
            return False
        try:
            return bool(await self._collaborator.is_api_available())
        except Exception as exc:
            logger.warning("error checking for API on device: %s", exc)
            return False

    async def request_permission(self, rationale: str | None = None) -> PermissionResult:
        return await self.gate.request_permission(rationale or self._rationale)

    async def list_decks(self) -> Outcome[list[IdentifierRecord]]:
        return await retry_once(lambda: self._list_records("deck list", self._collaborator.get_deck_list))

    async def list_models(self) -> Outcome[list[IdentifierRecord]]:
        return await retry_once(lambda: self._list_records("model list", self._collaborator.get_model_list))

    async def _list_records(
        self,
        operation: str,
        fetch: Callable[[], Awaitable[list[dict[str, Any]]]],
    ) -> Outcome[list[IdentifierRecord]]:
        denied = await self._guard()
        if denied:
            return denied
        outcome = await self._call(operation, fetch)
        if isinstance(outcome, Failure):
            return outcome
        try:
            return Success([IdentifierRecord.model_validate(item) for item in outcome.value or []])
        except (ValidationError, TypeError) as exc:
            logger.warning("%s returned malformed records: %s", operation, exc)
            return Failure(BridgeError.REMOTE_UNKNOWN_ERROR, detail=str(exc))

    async def list_fields(
        self,
        model_name: str | None = None,
        model_id: Identifier | None = None,
    ) -> Outcome[list[str]]:
        return await retry_once(lambda: self._list_fields(model_name, model_id))

    async def _list_fields(self, model_name: str | None, model_id: Identifier | None) -> Outcome[list[str]]:
        if not self.gate.has_capability():
            return Failure(BridgeError.UNSUPPORTED_PLATFORM)
        model_id_text = id_as_text(model_id)
        # Checked before the permission lookup so nothing reaches the collaborator.
        if not model_name and not model_id_text:
            logger.warning("model name or model id is required")
            return Failure(BridgeError.IDENTIFIER_MISSING)
        denied = await self._guard()
        if denied:
            return denied
        outcome = await self._call(
            "field list",
            lambda: self._collaborator.get_field_list(model_name or None, model_id_text),
        )
        if isinstance(outcome, Failure):
            return outcome
        return Success(list(outcome.value or []))

    async def get_selected_deck_name(self) -> Outcome[str]:
        return await retry_once(self._get_selected_deck_name)

    async def _get_selected_deck_name(self) -> Outcome[str]:
        denied = await self._guard()
        if denied:
            return denied
        return await self._call("selected deck name", self._collaborator.get_selected_deck_name)

    async def add_note(self, payload: NotePayload) -> Outcome[int]:
        denied = await self._guard()
        if denied:
            return denied
        invalid = validate(payload)
        if invalid:
            return Failure(invalid)
        outcome = await self._call(
            "add note",
            lambda: self._collaborator.add_note(
                payload.deck_name,
                id_as_text(payload.deck_id),
                payload.model_name,
                id_as_text(payload.model_id),
                payload.deck_reference,
                payload.model_reference,
                list(payload.model_field_names),
                list(payload.field_values),
                _as_list(payload.tags),
                _as_list(payload.card_template_names),
                _as_list(payload.question_templates),
                _as_list(payload.answer_templates),
                payload.style_sheet,
            ),
        )
        if isinstance(outcome, Failure):
            return outcome
        return parse_note_id(outcome.value)

    async def upload_media_from_uri(
        self,
        file_uri: str,
        preferred_name: str,
        mime_type: MediaMimeType | str,
    ) -> Outcome[str]:
        """Upload a file and get the string to place in a note field.

        The URI should carry the ``file://`` prefix; AnkiDroid must be able to
        read the location.
        """

        denied = await self._guard()
        if denied:
            return denied
        try:
            mime = MediaMimeType(mime_type)
        except ValueError:
            logger.warning("argument type error: mime_type must be one of %s", [m.value for m in MediaMimeType])
            return Failure(BridgeError.TYPE_ERROR)
        if not (isinstance(file_uri, str) and file_uri and isinstance(preferred_name, str) and preferred_name):
            logger.warning("argument type error: file_uri and preferred_name must be non-empty strings")
            return Failure(BridgeError.TYPE_ERROR)
        return await self._call(
            "media upload",
            lambda: self._collaborator.upload_media_from_uri(file_uri, preferred_name, mime.value),
        )
