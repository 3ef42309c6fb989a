"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ankidroid_bridge.adapters.console_permissions import ConsolePermissionHost
from ankidroid_bridge.adapters.http_collaborator import HttpCollaborator
from ankidroid_bridge.core.config import BridgeSettings, write_user_env_vars
from ankidroid_bridge.core.services.permission_gate import PermissionGate

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_collaborator(
    collaborator: HttpCollaborator, gate: PermissionGate
) -> tuple[bool, str, bool, str]:
    try:
        available = await collaborator.is_api_available()
        api_detail = "AnkiDroid API reachable" if available else "service up, AnkiDroid API unavailable"
    except Exception as exc:
        available, api_detail = False, str(exc)

    name = await gate.permission_name()
    if name is None:
        return available, api_detail, False, "permission name unavailable (treated as not granted)"
    return available, api_detail, True, name


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = BridgeSettings()
    collaborator = HttpCollaborator(settings)
    gate = PermissionGate(collaborator, ConsolePermissionHost(assume_yes=True), settings)

    table = Table(title="ankidroid-bridge doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    capable = gate.has_capability()
    table.add_row(
        "Platform",
        "OK" if capable else "FAIL",
        "Android or forced" if capable else "set ANKIDROID_BRIDGE_FORCE_PLATFORM_SUPPORT=true to bridge remotely",
    )
    table.add_row("Companion URL", "OK", settings.collaborator_url)

    if capable:
        available, api_detail, named, name_detail = asyncio.run(_check_collaborator(collaborator, gate))
        table.add_row("AnkiDroid API", "OK" if available else "FAIL", api_detail)
        table.add_row("Permission name", "OK" if named else "FAIL", name_detail)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = BridgeSettings()
    url = typer.prompt("Companion service URL", default=settings.collaborator_url, show_default=True).strip()
    force = typer.confirm("Bridge from a non-Android host?", default=settings.force_platform_support)

    if not url:
        raise typer.BadParameter("url is required")

    env_path = write_user_env_vars(
        {
            "ANKIDROID_BRIDGE_COLLABORATOR_URL": url,
            "ANKIDROID_BRIDGE_FORCE_PLATFORM_SUPPORT": "true" if force else "false",
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
