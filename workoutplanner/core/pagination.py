import base64
import json
from typing import Any

from workoutplanner.core.exceptions import ValidationError


def encode_cursor(value: Any, field: str) -> str:
    """Encode the last-seen sort key as an opaque base64 cursor."""
    data = json.dumps({"field": field, "value": value})
    return base64.urlsafe_b64encode(data.encode()).decode()


def decode_cursor(cursor: str, expected_field: str) -> Any:
    """Decode a cursor produced by :func:`encode_cursor` for ``expected_field``."""
    try:
        decoded = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        field, value = decoded["field"], decoded["value"]
    except (ValueError, KeyError, TypeError):
        raise ValidationError("cursor", "Invalid cursor format")
    if field != expected_field:
        raise ValidationError("cursor", f"Cursor is not valid for ordering by {expected_field}")
    return value
