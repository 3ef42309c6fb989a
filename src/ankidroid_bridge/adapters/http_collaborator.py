"""Collaborator adapter: AnkiDroid API through a loopback companion service.

Protocol:
- Each call is one POST of a JSON envelope
  ``{"action": <method>, "version": 1, "params": {...}}``.
- The service answers ``{"result": ..., "error": null}`` or
  ``{"result": null, "error": "<text>"}``.

Notes:
- Any transport problem, non-2xx status, malformed body or non-null `error`
  raises `CollaboratorError`; the facade turns it into an outcome.
- A fresh client is opened per call. Nothing is pooled or cached.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from ankidroid_bridge.adapters.http_client import build_async_client
from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.errors import CollaboratorError
from ankidroid_bridge.core.interfaces.collaborator import FlashcardCollaborator

logger = logging.getLogger(__name__)

API_VERSION = 1


class HttpCollaborator(FlashcardCollaborator):
    """Talks to the on-device companion service over HTTP."""

    _endpoint = "/"

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or BridgeSettings()
        self._transport = transport

    async def invoke(self, action: str, **params: Any) -> Any:
        envelope = {"action": action, "version": API_VERSION, "params": params}
        logger.debug("invoking %s", action)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.post(self._endpoint, json=envelope)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise CollaboratorError(f"{action}: HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise CollaboratorError(f"{action}: {exc}") from exc
        except ValueError as exc:
            raise CollaboratorError(f"{action}: invalid JSON response") from exc

        if not isinstance(body, dict) or "result" not in body:
            raise CollaboratorError(f"{action}: unexpected response shape")
        if body.get("error"):
            raise CollaboratorError(f"{action}: {body['error']}")
        return body["result"]

    async def get_permission_name(self) -> str | None:
        return await self.invoke("getPermissionName")

    async def is_api_available(self) -> bool:
        return bool(await self.invoke("isApiAvailable"))

    async def get_deck_list(self) -> list[dict[str, Any]]:
        return await self.invoke("getDeckList") or []

    async def get_model_list(self) -> list[dict[str, Any]]:
        return await self.invoke("getModelList") or []

    async def get_field_list(self, model_name: str | None, model_id: str | None) -> list[str]:
        return await self.invoke("getFieldList", modelName=model_name, modelId=model_id) or []

    async def get_selected_deck_name(self) -> str:
        return await self.invoke("getSelectedDeckName")

    async def add_note(
        self,
        deck_name: str | None,
        deck_id: str | None,
        model_name: str | None,
        model_id: str | None,
        deck_reference: str | None,
        model_reference: str | None,
        model_fields: Sequence[str],
        value_fields: Sequence[str],
        tags: Sequence[str] | None,
        card_names: Sequence[str],
        question_format: Sequence[str],
        answer_format: Sequence[str],
        css: str | None,
    ) -> str:
        result = await self.invoke(
            "addNote",
            deckName=deck_name,
            deckId=deck_id,
            modelName=model_name,
            modelId=model_id,
            dbDeckReference=deck_reference,
            dbModelReference=model_reference,
            modelFields=model_fields,
            valueFields=value_fields,
            tags=tags,
            cardNames=card_names,
            questionFormat=question_format,
            answerFormat=answer_format,
            css=css,
        )
        return "" if result is None else str(result)

    async def upload_media_from_uri(self, file_uri: str, preferred_name: str, mime_type: str) -> str:
        return await self.invoke(
            "uploadMediaFromUri",
            fileUri=file_uri,
            preferredName=preferred_name,
            mimeType=mime_type,
        )
