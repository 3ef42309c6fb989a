"""Permission host for terminal sessions.

Stands in for the Android runtime permission dialog when the bridge is driven
from the CLI: the rationale is shown in a Rich panel and the user answers with
typer's prompt. Answers live as long as the host object.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from ankidroid_bridge.core.domain.models import PermissionResult
from ankidroid_bridge.core.interfaces.collaborator import PermissionHost

_ANSWERS: dict[str, PermissionResult] = {
    "y": PermissionResult.GRANTED,
    "yes": PermissionResult.GRANTED,
    "n": PermissionResult.DENIED,
    "no": PermissionResult.DENIED,
    "never": PermissionResult.NEVER_ASK_AGAIN,
}


class ConsolePermissionHost(PermissionHost):
    def __init__(self, console: Console | None = None, *, assume_yes: bool = False) -> None:
        self._console = console or Console(stderr=True)
        self._assume_yes = assume_yes
        self._granted: set[str] = set()
        self._blocked: set[str] = set()

    async def check(self, permission_name: str) -> bool:
        return permission_name in self._granted

    async def request(self, permission_name: str, rationale: str | None = None) -> PermissionResult:
        if permission_name in self._granted:
            return PermissionResult.GRANTED
        if permission_name in self._blocked:
            return PermissionResult.NEVER_ASK_AGAIN
        if self._assume_yes:
            result = PermissionResult.GRANTED
        else:
            result = await asyncio.to_thread(self._prompt, permission_name, rationale)

        if result is PermissionResult.GRANTED:
            self._granted.add(permission_name)
        elif result is PermissionResult.NEVER_ASK_AGAIN:
            self._blocked.add(permission_name)
        return result

    def _prompt(self, permission_name: str, rationale: str | None) -> PermissionResult:
        if rationale:
            self._console.print(Panel(rationale, title="Permission requested", border_style="yellow"))
        answer = typer.prompt(
            f"Allow access to {permission_name}? [y/n/never]",
            default="n",
            show_default=False,
        )
        return _ANSWERS.get(answer.strip().lower(), PermissionResult.DENIED)
