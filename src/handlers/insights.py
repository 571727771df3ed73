"""
Handler for POST /insights.

Accepts a record snapshot and returns the intelligence report: ranked daily
actions, customer profiles, the monthly forecast and at-risk customers.
"""

from __future__ import annotations

import time
import uuid
from datetime import date
from typing import Optional

from config.settings import EngineConfig
from services.intelligence_service import calculate_intelligence
from utils.cache_service import LRUCache, fingerprint
from utils.error_handling import AppError, json_response, to_response
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


def lambda_handler(event, context):
    """Compute (or reuse) the intelligence report for the posted snapshot."""
    start = time.perf_counter()
    correlation_id = str(uuid.uuid4())
    config = _get_config()

    try:
        snapshot, today = parse_snapshot(load_body(event))
    except AppError as exc:
        logger.warning(
            "Rejected insights request",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc)

    today = today or date.today()
    key = fingerprint("insights", snapshot.model_dump_json(), today.isoformat())
    report = _cache.get_or_compute(key, lambda: calculate_intelligence(snapshot, today, config))

    logger.info(
        "Insights served",
        extra={
            "correlation_id": correlation_id,
            "duration_ms": int((time.perf_counter() - start) * 1000),
        },
    )
    return json_response(200, report.model_dump_json())
