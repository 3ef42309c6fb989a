"""Permission gate in front of every privileged collaborator call.

Responsibility:
- Decide whether the host can reach AnkiDroid at all (platform capability).
- Resolve the symbolic permission name through the collaborator and ask the
  host whether it is granted; request it when needed.
- Provide the retry-once helper used by the read operations.

Rules:
- A permission name that cannot be obtained means "not granted". The gate
  fails closed; it never assumes a permission it could not name.
- Host or collaborator errors are logged and turned into a negative answer.
"""

from __future__ import annotations

import logging
import sys
from typing import Awaitable, Callable, TypeVar

from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import Failure, Outcome, PermissionResult
from ankidroid_bridge.core.interfaces.collaborator import FlashcardCollaborator, PermissionHost

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_READ_ATTEMPTS = 2

# Answers a second attempt cannot change; retrying them would prompt the user again.
FINAL_ERRORS = frozenset(
    {
        BridgeError.UNSUPPORTED_PLATFORM,
        BridgeError.PERMISSION_DENIED,
        BridgeError.IDENTIFIER_MISSING,
        BridgeError.TYPE_ERROR,
    }
)


def host_is_android() -> bool:
    return sys.platform == "android" or hasattr(sys, "getandroidapilevel")


async def retry_once(attempt: Callable[[], Awaitable[Outcome[T]]]) -> Outcome[T]:
    """Run `attempt`; on a remote failure run it exactly once more.

    The collaborator's permission check and its data fetch race on some
    Android versions, so the second outcome is returned whatever it is.
    Failures listed in `FINAL_ERRORS` are returned without a second attempt.
    """

    outcome = await attempt()
    for _ in range(MAX_READ_ATTEMPTS - 1):
        if not isinstance(outcome, Failure) or outcome.error in FINAL_ERRORS:
            break
        logger.info("retrying after %s", outcome.error.value)
        outcome = await attempt()
    return outcome


class PermissionGate:
    def __init__(
        self,
        collaborator: FlashcardCollaborator,
        host: PermissionHost,
        settings: BridgeSettings | None = None,
        *,
        platform_check: Callable[[], bool] = host_is_android,
    ) -> None:
        self._collaborator = collaborator
        self._host = host
        self._settings = settings or BridgeSettings()
        self._platform_check = platform_check

    def has_capability(self) -> bool:
        if self._settings.force_platform_support or self._platform_check():
            return True
        logger.warning("host platform is not Android, AnkiDroid is unreachable")
        return False

    async def permission_name(self) -> str | None:
        try:
            name = await self._collaborator.get_permission_name()
        except Exception as exc:
            logger.warning("failed to get permission name: %s", exc)
            return None
        if not isinstance(name, str) or not name:
            return None
        return name

    async def current_permission_status(self) -> bool:
        """Whether the API permission is granted right now (False when unknown)."""

        if not self.has_capability():
            return False
        name = await self.permission_name()
        if name is None:
            return False
        try:
            return bool(await self._host.check(name))
        except Exception as exc:
            logger.warning("error checking permissions: %s", exc)
            return False

    async def request_permission(self, rationale: str | None = None) -> PermissionResult:
        if not self.has_capability():
            return PermissionResult.DENIED
        name = await self.permission_name()
        if name is None:
            return PermissionResult.DENIED
        try:
            result = await self._host.request(name, rationale)
        except Exception as exc:
            logger.warning("error requesting permissions: %s", exc)
            return PermissionResult.DENIED
        try:
            return PermissionResult(result)
        except ValueError:
            logger.warning("unexpected permission answer: %r", result)
            return PermissionResult.DENIED

    async def ensure_permission(self, rationale: str | None = None) -> bool:
        """Check, then request once if configured to; True only when granted."""

        if await self.current_permission_status():
            return True
        if not self._settings.request_permission_on_demand:
            logger.warning("permission not granted and on-demand requests are disabled")
            return False
        result = await self.request_permission(rationale)
        if result is not PermissionResult.GRANTED:
            logger.warning("permission request answered %s", result.value)
            return False
        return True
