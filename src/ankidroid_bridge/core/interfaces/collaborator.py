"""Contracts for the external flashcard application and the host permission subsystem.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Concrete transports (HTTP companion service, test fakes) stay swappable and
  the core never couples to one of them.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ankidroid_bridge.core.domain.models import PermissionResult


@runtime_checkable
class FlashcardCollaborator(Protocol):
    """Minimal surface of the AnkiDroid API as seen from the bridge.

    Design rules:
    - Every method is async because it crosses a process boundary.
    - Methods return raw values; normalization into `Outcome` happens in the
      facade. Transport problems are raised, semantic failures of `add_note`
      come back as symbolic strings.
    """

    async def get_permission_name(self) -> str | None: ...

    async def is_api_available(self) -> bool: ...

    async def get_deck_list(self) -> list[dict[str, Any]]: ...

    async def get_model_list(self) -> list[dict[str, Any]]: ...

    async def get_field_list(self, model_name: str | None, model_id: str | None) -> list[str]: ...

    async def get_selected_deck_name(self) -> str: ...

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
        """Return the new note id as text, or a symbolic failure token."""

        ...

    async def upload_media_from_uri(self, file_uri: str, preferred_name: str, mime_type: str) -> str:
        """Return the field-ready media reference (e.g. ``<img src="...">``)."""

        ...


@runtime_checkable
class PermissionHost(Protocol):
    """The host's runtime permission subsystem."""

    async def check(self, permission_name: str) -> bool: ...

    async def request(self, permission_name: str, rationale: str | None = None) -> PermissionResult: ...
