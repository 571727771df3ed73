"""Error types for the JSON adapters and their proxy-response mapping.

The computation layer itself never raises for data problems; these are only
used at the request boundary.
"""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for adapter errors."""

    def __init__(self, message: str, status_code: int = 400, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class NotFoundError(AppError):
    """Raised when a requested customer is not part of the snapshot."""

    def __init__(self, message: str = "Customer not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when a snapshot payload cannot be validated."""

    def __init__(self, message: str = "Invalid snapshot", details: Optional[Any] = None):
        super().__init__(message, status_code=422, details=details)


def json_response(status: int, body: Any) -> Dict[str, Any]:
    """Format an API Gateway proxy response with a JSON body."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": body if isinstance(body, str) else json.dumps(body, default=str),
    }


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a proxy integration response."""
    body: Dict[str, Any] = {"message": str(error), "status": "error"}
    if error.details is not None:
        body["details"] = error.details
    return json_response(error.status_code, body)
