import json
import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("api.stage")


def _norm(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return value
    return str(value)


def log_stage(
    *,
    submission_id: str,
    stage: str,
    event: str,
    relay_mode: str | None = None,
    request_id: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "submission_id": submission_id,
        "stage": stage,
        "event": event.upper(),
    }

    if relay_mode:
        payload["relay_mode"] = relay_mode
    if request_id:
        payload["request_id"] = request_id
    if error:
        payload["error"] = error

    for key, value in extra.items():
        norm = _norm(value)
        if norm is not None:
            payload[key] = norm

    msg = json.dumps(payload, ensure_ascii=False)
    if error or payload["event"] == "FAILED":
        logger.error("stage_event %s", msg)
    else:
        logger.info("stage_event %s", msg)
