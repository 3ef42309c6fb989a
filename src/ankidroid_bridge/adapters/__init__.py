"""Concrete adapters for the core interfaces.

- `HttpCollaborator` implements `FlashcardCollaborator` over the companion service.
- `ConsolePermissionHost` implements `PermissionHost` for terminal sessions.
"""

from ankidroid_bridge.adapters.console_permissions import ConsolePermissionHost
from ankidroid_bridge.adapters.http_collaborator import HttpCollaborator

__all__ = [
    "ConsolePermissionHost",
    "HttpCollaborator",
]
