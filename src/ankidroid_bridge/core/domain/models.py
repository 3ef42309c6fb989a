"""Domain models (Pydantic v2 + frozen dataclasses).

Why two flavours:
- Records coming back from the collaborator (decks, models) and the deck/model
  declarations are validated at the edge with Pydantic.
- `NotePayload` and the `Outcome` variants are plain frozen dataclasses: a
  payload must hold whatever the caller passed so that the validator, not a
  constructor, reports type problems.

Note:
- These models describe *what* crosses the bridge, not *how* it travels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Sequence, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ankidroid_bridge.core.domain.errors import BridgeError

T = TypeVar("T")

Identifier = Union[str, int]


class PermissionResult(str, Enum):
    """Answers the host permission subsystem can give to a request."""

    GRANTED = "granted"
    DENIED = "denied"
    NEVER_ASK_AGAIN = "never_ask_again"


class MediaMimeType(str, Enum):
    AUDIO = "audio"
    IMAGE = "image"


class IdentifierRecord(BaseModel):
    """An existing deck or model as listed by the collaborator."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Collaborator-side id, always carried as text.")
    name: str = Field(..., description="Display name of the deck or model.")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class DeckProperties(BaseModel):
    """A deck to create when no deck id is known yet."""

    model_config = ConfigDict(frozen=True)

    name: Any = Field(..., description="Deck name shown in AnkiDroid.")
    reference: Any = Field(
        ...,
        description="Storage name under which the collaborator records the created deck id.",
    )


class ModelProperties(BaseModel):
    """A note type to create when no model id is known yet.

    Values stay `Any`: a wrong type surfaces as `BridgeError.TYPE_ERROR` from
    the payload validator rather than as a Pydantic exception.
    """

    model_config = ConfigDict(frozen=True)

    name: Any = Field(..., description="Model name shown in AnkiDroid.")
    reference: Any = Field(
        ...,
        description="Storage name under which the collaborator records the created model id.",
    )
    field_names: Any = Field(..., description="Ordered field names of the model.")
    card_names: Any = Field(..., description="Exactly two card template names.")
    question_format: Any = Field(..., description="Exactly two question templates (HTML).")
    answer_format: Any = Field(..., description="Exactly two answer templates (HTML).")
    tags: Any = Field(default=None, description="Tags applied to every note, or None.")
    css: Any = Field(default=None, description="Card stylesheet, or None for the default.")


class NoteTarget(BaseModel):
    """Where notes go: an existing deck/model by id, or ones to create."""

    # Missing pairs are reported per call as IDENTIFIER_MISSING, not at construction.
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    deck_id: Identifier | None = None
    deck_properties: DeckProperties | None = None
    model_id: Identifier | None = None
    model_properties: ModelProperties | None = None


@dataclass(frozen=True)
class NotePayload:
    """Everything the collaborator needs to add one note."""

    model_field_names: Sequence[Any]
    field_values: Sequence[Any]
    # Templates may be None only when the note targets an existing model_id.
    card_template_names: Sequence[Any] | None
    question_templates: Sequence[Any] | None
    answer_templates: Sequence[Any] | None
    tags: Sequence[Any] | None = None
    style_sheet: Any = None
    deck_name: Any = None
    deck_id: Identifier | None = None
    model_name: Any = None
    model_id: Identifier | None = None
    deck_reference: Any = None
    model_reference: Any = None


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: BridgeError
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success[T], Failure]
