"""Bridge to the AnkiDroid flashcard API.

Typical use::

    bridge = AnkiDroidBridge(HttpCollaborator(), ConsolePermissionHost())
    outcome = await bridge.list_decks()
    if isinstance(outcome, Success):
        ...
"""

from ankidroid_bridge.adapters import ConsolePermissionHost, HttpCollaborator
from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.errors import BridgeError, CollaboratorError
from ankidroid_bridge.core.domain.models import (
    DeckProperties,
    Failure,
    IdentifierRecord,
    MediaMimeType,
    ModelProperties,
    NotePayload,
    NoteTarget,
    Outcome,
    PermissionResult,
    Success,
)
from ankidroid_bridge.core.services.bridge import AnkiDroidBridge
from ankidroid_bridge.core.services.note_composer import NoteComposer
from ankidroid_bridge.core.services.payload_validator import validate

__version__ = "0.1.0"

__all__ = [
    "AnkiDroidBridge",
    "BridgeError",
    "BridgeSettings",
    "CollaboratorError",
    "ConsolePermissionHost",
    "DeckProperties",
    "Failure",
    "HttpCollaborator",
    "IdentifierRecord",
    "MediaMimeType",
    "ModelProperties",
    "NoteComposer",
    "NotePayload",
    "NoteTarget",
    "Outcome",
    "PermissionResult",
    "Success",
    "validate",
]
