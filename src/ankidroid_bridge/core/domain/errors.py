"""Error classification for bridge outcomes.

This module centralizes the closed set of failures a bridge call can end in.
The enum values double as the symbolic tokens the collaborator reports on the
wire (``FAILED_TO_ADD_NOTE`` etc.), so remote failures map onto the same
enumeration as locally detected ones.
"""

from __future__ import annotations

from enum import Enum


class BridgeError(str, Enum):
    """Closed enumeration of failure classifications."""

    UNSUPPORTED_PLATFORM = "ANDROID_USE_ONLY"
    PERMISSION_DENIED = "PERMISSION_DENIED_BY_USER"
    IDENTIFIER_MISSING = "IDENTIFIER_MISSING"
    TYPE_ERROR = "INPUT_TYPE_ERROR"
    MODEL_FIELDS_MISMATCH = "MODEL_FIELDS_MISMATCH"
    REMOTE_UNKNOWN_ERROR = "UNKNOWN_ERROR"
    FAILED_TO_CREATE_DECK = "FAILED_TO_CREATE_DECK"
    FAILED_TO_CREATE_MODEL = "FAILED_TO_CREATE_MODEL"
    FAILED_TO_ADD_NOTE = "FAILED_TO_ADD_NOTE"

    @classmethod
    def from_wire(cls, token: object) -> "BridgeError":
        """Map a symbolic token returned by the collaborator.

        Unknown or non-string tokens map to ``REMOTE_UNKNOWN_ERROR``.
        """

        if isinstance(token, str):
            normalized = token.strip()
            for member in cls:
                if member.value == normalized or member.name == normalized:
                    return member
        return cls.REMOTE_UNKNOWN_ERROR

    def label(self) -> str:
        """Human readable text for CLI output and logging."""

        return _LABELS[self]


_LABELS: dict[BridgeError, str] = {
    BridgeError.UNSUPPORTED_PLATFORM: "AnkiDroid is only reachable from Android",
    BridgeError.PERMISSION_DENIED: "AnkiDroid API permission was not granted",
    BridgeError.IDENTIFIER_MISSING: "a name or id is required",
    BridgeError.TYPE_ERROR: "invalid note or property types",
    BridgeError.MODEL_FIELDS_MISMATCH: "note fields differ from the model fields",
    BridgeError.REMOTE_UNKNOWN_ERROR: "unknown error from AnkiDroid",
    BridgeError.FAILED_TO_CREATE_DECK: "AnkiDroid failed to create the deck",
    BridgeError.FAILED_TO_CREATE_MODEL: "AnkiDroid failed to create the model",
    BridgeError.FAILED_TO_ADD_NOTE: "AnkiDroid failed to add the note",
}


class CollaboratorError(Exception):
    """Raised by adapters when the collaborator cannot be reached or answers garbage."""
