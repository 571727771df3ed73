"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Keeping one function keeps the memoized reports warm across routes.
"""

from typing import Callable, Tuple

from . import balances, health_check, insights
from utils.error_handling import json_response


def _matches(route: str, route_key: str) -> bool:
    """Routes ending in "/" take a trailing path segment; others match exactly."""
    if route.endswith("/"):
        return route_key.startswith(route) and route_key.rstrip("/") != route.rstrip("/")
    return route_key.rstrip("/") == route


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event carries the HTTP method and path; routes are checked in order so
    more specific paths come first.
    """
    http = event.get("requestContext", {}).get("http", {})
    route_key = f"{http.get('method', '').upper()} {http.get('path', '')}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /insights", insights.lambda_handler),
        ("POST /balances/", balances.customer_handler),
        ("POST /balances", balances.lambda_handler),
    )

    for route, handler in route_table:
        if _matches(route, route_key):
            return handler(event, context)

    return json_response(404, {"message": "Route not found", "route": route_key})
