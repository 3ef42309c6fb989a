"""Note creation against a fixed deck/model target.

A `NoteComposer` is set up once with a deck (existing id or properties of one
to create) and a model (same choice). Afterwards notes are added from just
their field names and values; the composer fills in the rest of the payload.

When the model is declared by properties rather than id, every note must use
exactly the declared set of field names.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import (
    DeckProperties,
    Failure,
    Identifier,
    ModelProperties,
    NotePayload,
    NoteTarget,
    Outcome,
)
from ankidroid_bridge.core.services.bridge import AnkiDroidBridge, id_as_text
from ankidroid_bridge.core.services.payload_validator import model_fields_match, validate_properties

logger = logging.getLogger(__name__)


def resolve_target(
    kind: str,
    identifier: Identifier | None,
    properties: DeckProperties | ModelProperties | None,
) -> BridgeError | None:
    """Check that an id or a valid declaration is available for `kind`."""

    if id_as_text(identifier) is not None:
        return None
    if properties is None:
        logger.warning("%s id or %s properties are required", kind, kind)
        return BridgeError.IDENTIFIER_MISSING
    return validate_properties(properties)


class NoteComposer:
    def __init__(self, bridge: AnkiDroidBridge, target: NoteTarget) -> None:
        self._bridge = bridge
        self.target = target

    async def add_note(self, value_fields: Sequence[str], model_fields: Sequence[str]) -> Outcome[int]:
        """Add one note; `value_fields` lines up with `model_fields` position by position."""

        target = self.target
        error = resolve_target("deck", target.deck_id, target.deck_properties)
        if error is None:
            error = resolve_target("model", target.model_id, target.model_properties)
        if error is not None:
            return Failure(error)

        deck = target.deck_properties if id_as_text(target.deck_id) is None else None
        model = target.model_properties if id_as_text(target.model_id) is None else None

        if model is not None:
            mismatch = model_fields_match(model.field_names, model_fields)
            if mismatch is not None:
                return Failure(mismatch)

        payload = NotePayload(
            model_field_names=model_fields,
            field_values=value_fields,
            card_template_names=model.card_names if model else None,
            question_templates=model.question_format if model else None,
            answer_templates=model.answer_format if model else None,
            tags=model.tags if model else None,
            style_sheet=model.css if model else None,
            deck_name=deck.name if deck else None,
            deck_id=id_as_text(target.deck_id),
            model_name=model.name if model else None,
            model_id=id_as_text(target.model_id),
            deck_reference=deck.reference if deck else None,
            model_reference=model.reference if model else None,
        )
        return await self._bridge.add_note(payload)
