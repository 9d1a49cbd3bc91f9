"""
One-line JSON logs around persona API requests.

Each line carries the event name, endpoint, caller and persona ids; end and
error lines add the HTTP status and the elapsed time in milliseconds.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


def _log(level: int, event: str, endpoint: str, user_id: Optional[str], persona_id: Optional[str], fields: Dict[str, Any]) -> None:
    record: Dict[str, Any] = {
        "event": event,
        "endpoint": endpoint,
        "user_id": user_id,
        "persona_id": persona_id,
    }
    record.update(fields)
    logger.log(level, json.dumps(record, default=str))


def request_start(endpoint: str, user_id: Optional[str] = None, persona_id: Optional[str] = None, **fields: Any) -> float:
    """Log the start of a request; returns the clock value request_end expects."""
    _log(logging.INFO, "request_start", endpoint, user_id, persona_id, fields)
    return time.perf_counter()


def request_end(endpoint: str, start_time: float, user_id: Optional[str] = None, persona_id: Optional[str] = None, http_status: int = 200, **fields: Any) -> None:
    fields.update(http_status=http_status, response_time_ms=_elapsed_ms(start_time))
    _log(logging.INFO, "request_end", endpoint, user_id, persona_id, fields)


def request_error(endpoint: str, start_time: float, user_id: Optional[str] = None, persona_id: Optional[str] = None, http_status: int = 500, error: Optional[str] = None, **fields: Any) -> None:
    """Log a failed request: WARNING for client errors, ERROR otherwise."""
    fields.update(http_status=http_status, response_time_ms=_elapsed_ms(start_time))
    if error is not None:
        fields["error"] = error
    level = logging.WARNING if 400 <= http_status < 500 else logging.ERROR
    _log(level, "request_error", endpoint, user_id, persona_id, fields)
