"""Typer application exposing the bridge operations.

Every command builds one `AnkiDroidBridge`, runs a single coroutine with
`asyncio.run` and renders the outcome. A `Failure` prints a red panel and exits
with status 1.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, List, Optional, TypeVar

import typer
from rich.console import Console

from ankidroid_bridge.adapters.console_permissions import ConsolePermissionHost
from ankidroid_bridge.adapters.http_collaborator import HttpCollaborator
from ankidroid_bridge.cli import doctor
from ankidroid_bridge.cli.ui_components import (
    build_failure_panel,
    build_fields_table,
    build_records_table,
    print_banner,
)
from ankidroid_bridge.core.config import BridgeSettings
from ankidroid_bridge.core.domain.models import Failure, MediaMimeType, NotePayload, Outcome
from ankidroid_bridge.core.logging import configure_logging
from ankidroid_bridge.core.services.bridge import AnkiDroidBridge

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Talk to AnkiDroid from the command line.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    assume_yes: bool = typer.Option(False, "--yes", "-y", help="Grant the API permission without prompting."),
    rationale: Optional[str] = typer.Option(None, help="Text shown when the permission is requested."),
    force_platform: bool = typer.Option(False, help="Bridge even when this host is not Android."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the banner."),
) -> None:
    settings = BridgeSettings()
    if force_platform:
        settings = settings.model_copy(update={"force_platform_support": True})
    configure_logging(settings.log_level)
    if not quiet and ctx.invoked_subcommand != "doctor":
        print_banner(_console)
    ctx.obj = AnkiDroidBridge(
        HttpCollaborator(settings),
        ConsolePermissionHost(assume_yes=assume_yes),
        settings,
        rationale=rationale,
    )


def _bridge(ctx: typer.Context) -> AnkiDroidBridge:
    return ctx.obj


def _resolve(coro: Coroutine[Any, Any, Outcome[T]]) -> T:
    outcome = asyncio.run(coro)
    if isinstance(outcome, Failure):
        _console.print(build_failure_panel(outcome))
        raise typer.Exit(code=1)
    return outcome.value


@app.command()
def decks(ctx: typer.Context) -> None:
    """List every deck (id and name)."""

    records = _resolve(_bridge(ctx).list_decks())
    _console.print(build_records_table("Decks", records))


@app.command()
def models(ctx: typer.Context) -> None:
    """List every note type (id and name)."""

    records = _resolve(_bridge(ctx).list_models())
    _console.print(build_records_table("Models", records))


@app.command()
def fields(
    ctx: typer.Context,
    model_name: Optional[str] = typer.Option(None, help="Model name."),
    model_id: Optional[str] = typer.Option(None, help="Model id."),
) -> None:
    """List the field names of one model."""

    names = _resolve(_bridge(ctx).list_fields(model_name, model_id))
    _console.print(build_fields_table(model_name or model_id or "", names))


@app.command(name="selected-deck")
def selected_deck(ctx: typer.Context) -> None:
    """Print the deck currently selected in AnkiDroid."""

    _console.print(_resolve(_bridge(ctx).get_selected_deck_name()))


@app.command(name="add-note")
def add_note(
    ctx: typer.Context,
    field: List[str] = typer.Option(..., "--field", "-f", help="Model field name, repeat in order."),
    value: List[str] = typer.Option(..., "--value", "-v", help="Field value, repeat in the same order."),
    card_name: Optional[List[str]] = typer.Option(None, help="Card template name (twice)."),
    question: Optional[List[str]] = typer.Option(None, help="Question template (twice)."),
    answer: Optional[List[str]] = typer.Option(None, help="Answer template (twice)."),
    tag: Optional[List[str]] = typer.Option(None, help="Tag, repeatable."),
    css: Optional[str] = typer.Option(None, help="Card stylesheet."),
    deck_name: Optional[str] = typer.Option(None, help="Deck name (created if missing)."),
    deck_id: Optional[str] = typer.Option(None, help="Existing deck id."),
    model_name: Optional[str] = typer.Option(None, help="Model name (created if missing)."),
    model_id: Optional[str] = typer.Option(None, help="Existing model id."),
    deck_reference: Optional[str] = typer.Option(None, help="Storage name for the created deck id."),
    model_reference: Optional[str] = typer.Option(None, help="Storage name for the created model id."),
) -> None:
    """Add one note and print its id."""

    payload = NotePayload(
        model_field_names=field,
        field_values=value,
        card_template_names=card_name or None,
        question_templates=question or None,
        answer_templates=answer or None,
        tags=tag or None,
        style_sheet=css,
        deck_name=deck_name,
        deck_id=deck_id,
        model_name=model_name,
        model_id=model_id,
        deck_reference=deck_reference,
        model_reference=model_reference,
    )
    note_id = _resolve(_bridge(ctx).add_note(payload))
    _console.print(f"[green]Added note[/green] {note_id}")


@app.command(name="upload-media")
def upload_media(
    ctx: typer.Context,
    file_uri: str = typer.Argument(..., help="file:// URI readable by AnkiDroid."),
    name: str = typer.Option(..., help="Preferred media file name."),
    mime_type: MediaMimeType = typer.Option(MediaMimeType.IMAGE, help="audio or image."),
) -> None:
    """Upload a media file and print the string to paste into a field."""

    _console.print(_resolve(_bridge(ctx).upload_media_from_uri(file_uri, name, mime_type)), markup=False)


@app.command()
def permission(ctx: typer.Context) -> None:
    """Request the AnkiDroid API permission and print the answer."""

    result = asyncio.run(_bridge(ctx).request_permission())
    _console.print(result.value)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
