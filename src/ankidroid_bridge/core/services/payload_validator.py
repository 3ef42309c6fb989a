"""Structural validation of note payloads and deck/model declarations.

Everything here runs before a single byte crosses the process boundary. Each
payload field has one entry in a static rule table, evaluated in table order,
first failure wins:

1. model field names and field values must be sequences of equal length;
2. `None` is accepted only for fields marked optional (templates count as
   optional once the note names an existing `model_id`);
3. template fields must be sequences of exactly two items;
4. textual fields must be strings, or sequences (recursively) of strings.

The offending field and the expectation are written to the log; callers only
receive the `BridgeError` classification. Inputs are never mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import DeckProperties, ModelProperties, NotePayload

logger = logging.getLogger(__name__)

TEMPLATE_ARITY = 2

STRING = "must be a string"
STRING_OR_NULL = "must be a string (or null)"
IDENTIFIER_OR_NULL = "must be a string or integer id (or null)"
ARRAY_OF_STRING = "must be an array of strings"
ARRAY_OF_STRING_OR_NULL = "must be an array of strings or null"
ARRAY_LENGTH_2 = "must be an array with a length of 2"
ARRAY_SAME_LENGTH = "model and value fields must be the same length"
MODEL_FIELDS_DIFFERENT = "note fields must match the fields the model was declared with"


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_valid_string(value: Any) -> bool:
    """True for a string or an array whose items are all (recursively) valid strings."""

    if is_array(value):
        return all(is_valid_string(item) for item in value)
    return isinstance(value, str)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_string_array(value: Any) -> bool:
    return is_array(value) and is_valid_string(value)


def _is_identifier(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int))


@dataclass(frozen=True)
class FieldRule:
    name: str
    check: Callable[[Any], bool]
    expectation: str
    optional: bool = False
    arity: int | None = None
    # Name of a sibling field whose presence makes this one optional.
    optional_with: str | None = None

    def may_be_absent(self, subject: object) -> bool:
        if self.optional:
            return True
        if self.optional_with is None:
            return False
        return getattr(subject, self.optional_with, None) not in (None, "")


_NOTE_RULES: tuple[FieldRule, ...] = (
    FieldRule("deck_name", _is_string, STRING_OR_NULL, optional=True),
    FieldRule("deck_id", _is_identifier, IDENTIFIER_OR_NULL, optional=True),
    FieldRule("model_name", _is_string, STRING_OR_NULL, optional=True),
    FieldRule("model_id", _is_identifier, IDENTIFIER_OR_NULL, optional=True),
    FieldRule("deck_reference", _is_string, STRING_OR_NULL, optional=True),
    FieldRule("model_reference", _is_string, STRING_OR_NULL, optional=True),
    FieldRule("model_field_names", _is_string_array, ARRAY_OF_STRING),
    FieldRule("field_values", _is_string_array, ARRAY_OF_STRING),
    FieldRule("tags", _is_string_array, ARRAY_OF_STRING_OR_NULL, optional=True),
    FieldRule("card_template_names", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY, optional_with="model_id"),
    FieldRule("question_templates", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY, optional_with="model_id"),
    FieldRule("answer_templates", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY, optional_with="model_id"),
    FieldRule("style_sheet", _is_string, STRING_OR_NULL, optional=True),
)

_DECK_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", _is_string, STRING),
    FieldRule("reference", _is_string, STRING),
)

_MODEL_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", _is_string, STRING),
    FieldRule("reference", _is_string, STRING),
    FieldRule("field_names", _is_string_array, ARRAY_OF_STRING),
    FieldRule("card_names", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY),
    FieldRule("question_format", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY),
    FieldRule("answer_format", _is_string_array, ARRAY_OF_STRING, arity=TEMPLATE_ARITY),
    FieldRule("tags", _is_string_array, ARRAY_OF_STRING_OR_NULL, optional=True),
    FieldRule("css", _is_string, STRING_OR_NULL, optional=True),
)


def _log_type_error(field: str, expectation: str) -> None:
    logger.warning("argument type error: %s %s", field, expectation)


def _apply_rules(subject: object, rules: Iterable[FieldRule]) -> BridgeError | None:
    for rule in rules:
        value = getattr(subject, rule.name, None)
        if value is None and rule.may_be_absent(subject):
            continue
        if rule.arity is not None and not (is_array(value) and len(value) == rule.arity):
            _log_type_error(rule.name, ARRAY_LENGTH_2)
            return BridgeError.TYPE_ERROR
        if not rule.check(value):
            _log_type_error(rule.name, rule.expectation)
            return BridgeError.TYPE_ERROR
    return None


def fields_have_same_length(model_fields: Any, value_fields: Any) -> bool:
    if not (is_array(model_fields) and is_array(value_fields)):
        _log_type_error("model_field_names/field_values", ARRAY_OF_STRING)
        return False
    if len(model_fields) != len(value_fields):
        logger.warning("argument type error: %s", ARRAY_SAME_LENGTH)
        return False
    return True


def validate(payload: NotePayload) -> BridgeError | None:
    """Return the first classification a note payload fails with, or None."""

    if not fields_have_same_length(payload.model_field_names, payload.field_values):
        return BridgeError.TYPE_ERROR
    return _apply_rules(payload, _NOTE_RULES)


def validate_properties(properties: DeckProperties | ModelProperties) -> BridgeError | None:
    """Validate a deck or model declaration (tags and css may be absent)."""

    rules = _MODEL_RULES if isinstance(properties, ModelProperties) else _DECK_RULES
    return _apply_rules(properties, rules)


def model_fields_match(declared: Sequence[Any], supplied: Sequence[Any]) -> BridgeError | None:
    """Order-insensitive equality of declared and supplied model field names."""

    same = is_array(declared) and is_array(supplied) and len(declared) == len(supplied)
    if same:
        try:
            same = set(declared) == set(supplied)
        except TypeError:
            same = False
    if not same:
        logger.warning("argument type error: %s", MODEL_FIELDS_DIFFERENT)
        return BridgeError.MODEL_FIELDS_MISMATCH
    return None
