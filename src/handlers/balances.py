"""
Handlers for POST /balances and POST /balances/{customerId}.

Returns customer balances with collection risk, and the portfolio summary.
"""

from __future__ import annotations

import json
import uuid
from datetime import date
from typing import List, Optional

from config.settings import EngineConfig
from models.balance import CustomerBalance
from services.balance_service import calculate_balances_summary, calculate_customer_balances
from utils.cache_service import LRUCache, fingerprint
from utils.error_handling import AppError, NotFoundError, json_response, to_response
from utils.logging_config import get_logger
from utils.validators import load_body, parse_snapshot

logger = get_logger(__name__)

_config: Optional[EngineConfig] = None
_cache: Optional[LRUCache] = None


def _get_config() -> EngineConfig:
    """Lazy-load configuration from the environment."""
    global _config, _cache
    if _config is None:
        _config = EngineConfig.from_environment()
        _cache = LRUCache(max_size=_config.cache_max_size, ttl_seconds=_config.cache_ttl_seconds)
    return _config


def _balances_for(event) -> List[CustomerBalance]:
    config = _get_config()
    snapshot, today = parse_snapshot(load_body(event))
    today = today or date.today()
    key = fingerprint("balances", snapshot.model_dump_json(), today.isoformat())
    return _cache.get_or_compute(key, lambda: calculate_customer_balances(snapshot, today, config))


def lambda_handler(event, context):
    """Return every active customer's balance plus the summary."""
    correlation_id = str(uuid.uuid4())
    try:
        balances = _balances_for(event)
    except AppError as exc:
        logger.warning(
            "Rejected balances request",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc)

    summary = calculate_balances_summary(balances)
    logger.info(
        "Balances served",
        extra={"correlation_id": correlation_id, "customer_count": len(balances)},
    )
    body = {
        "balances": [json.loads(b.model_dump_json()) for b in balances],
        "summary": summary.model_dump(),
    }
    return json_response(200, body)


def customer_handler(event, context):
    """Return one customer's balance, 404 when the customer is not active."""
    path_params = event.get("pathParameters") or {}
    customer_id = path_params.get("customerId") or path_params.get("id")
    if not customer_id:
        path = event.get("requestContext", {}).get("http", {}).get("path", "")
        customer_id = path.rstrip("/").rpartition("/balances/")[2] or None
    try:
        if not customer_id:
            raise AppError("customerId is required")
        balances = _balances_for(event)
        match = next((b for b in balances if b.customer.id == customer_id), None)
        if match is None:
            raise NotFoundError()
    except AppError as exc:
        return to_response(exc)

    return json_response(200, match.model_dump_json())
