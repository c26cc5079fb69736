"""Validation rules for submitted text.

The same messages are produced whether the failure is caught by the request
schema (missing field, wrong type, malformed JSON) or by the length rules
applied before analysis.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from app.core.config import settings
from app.core.errors import ValidationAppError

logger = logging.getLogger(__name__)

TEXT_REQUIRED_MESSAGE = "Text is required"
TEXT_TOO_LONG_MESSAGE = "Text is too long"
TEXT_NOT_STRING_MESSAGE = "Text must be a string"
INVALID_JSON_MESSAGE = "Invalid JSON body"
INVALID_BODY_MESSAGE = "Request body must be a JSON object"

_MESSAGES_BY_ERROR_TYPE = {
    "missing": TEXT_REQUIRED_MESSAGE,
    "string_too_short": TEXT_REQUIRED_MESSAGE,
    "string_too_long": TEXT_TOO_LONG_MESSAGE,
    "string_type": TEXT_NOT_STRING_MESSAGE,
    "json_invalid": INVALID_JSON_MESSAGE,
    "model_attributes_type": INVALID_BODY_MESSAGE,
    "dict_type": INVALID_BODY_MESSAGE,
    "model_type": INVALID_BODY_MESSAGE,
}


def first_error_message(errors: Sequence[Mapping[str, Any]]) -> str:
    """Translate the first schema error into a client-facing message.

    Args:
        errors: Error dicts as returned by pydantic/FastAPI ``errors()``.

    Returns:
        Message for the first failing rule; the raw pydantic message for
        error types without a dedicated translation.
    """

    if not errors:
        return "Invalid request"

    error = errors[0]
    message = _MESSAGES_BY_ERROR_TYPE.get(str(error.get("type", "")))
    if message:
        return message
    return str(error.get("msg") or "Invalid request")


def validate_text(text: Any, max_chars: int | None = None) -> str:
    """Check submitted text against the length rules.

    Args:
        text: Candidate text.
        max_chars: Upper bound in characters; defaults to APP_MAX_TEXT_CHARS.

    Returns:
        The text unchanged when valid.

    Raises:
        ValidationAppError: With the message of the first failing rule.
    """

    limit = max_chars if max_chars is not None else settings.app.max_text_chars

    if not isinstance(text, str):
        raise ValidationAppError(code="text_not_string", message=TEXT_NOT_STRING_MESSAGE)

    if len(text) < 1:
        raise ValidationAppError(
            code="text_required",
            message=TEXT_REQUIRED_MESSAGE,
            details={"actual_value": 0},
        )

    if len(text) > limit:
        logger.info(
            "validation.text_too_long",
            extra={"char_count": len(text), "max_chars": limit},
        )
        raise ValidationAppError(
            code="text_too_long",
            message=TEXT_TOO_LONG_MESSAGE,
            details={"max_value": limit, "actual_value": len(text)},
        )

    return text
