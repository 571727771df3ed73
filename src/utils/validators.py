"""Request payload validation for the JSON handlers."""

import json
from datetime import date
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from models.records import DataSnapshot
from utils.dates import parse_date
from utils.error_handling import ValidationError


def load_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON body of a proxy event."""
    raw = event.get("body") or "{}"
    try:
        body = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as exc:
        raise ValidationError("Body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise ValidationError("Body must be a JSON object")
    return body


def parse_snapshot(body: Dict[str, Any]) -> Tuple[DataSnapshot, Optional[date]]:
    """Validate a snapshot payload and its optional `today` override."""
    try:
        snapshot = DataSnapshot.model_validate(body.get("snapshot", body))
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid snapshot", details=exc.errors(include_url=False, include_context=False)
        ) from exc

    today = None
    if body.get("today") is not None:
        today = parse_date(body["today"])
        if today is None:
            raise ValidationError("today must be an ISO-8601 date")
    return snapshot, today
