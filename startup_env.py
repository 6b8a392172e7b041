import logging
import math
import os
from typing import List

from schemas.job_contract import RELAY_MODE_URL, RELAY_MODES

logger = logging.getLogger("api.startup")


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def _validate_relay_mode(value: str | None, errors: List[str]) -> str:
    mode = (value or "raw").strip().lower()
    if mode not in RELAY_MODES:
        errors.append(f"RELAY_MODE must be one of {', '.join(RELAY_MODES)} (got {value!r})")
    return mode


def _validate_http_url(value: str | None, key: str, errors: List[str]) -> None:
    if _is_blank(value):
        return
    if not (value.startswith("http://") or value.startswith("https://")):
        errors.append(f"{key} must start with http:// or https://")


def _validate_positive_number(value: str | None, key: str, errors: List[str]) -> None:
    if _is_blank(value):
        return
    try:
        parsed = float(value)
    except ValueError:
        errors.append(f"{key} must be a number")
        return
    if parsed <= 0:
        errors.append(f"{key} must be greater than 0")


def _validate_positive_int(value: str | None, key: str, errors: List[str]) -> None:
    if _is_blank(value):
        return
    try:
        parsed = float(value)
    except ValueError:
        errors.append(f"{key} must be a whole number of seconds")
        return
    if not math.isfinite(parsed) or not parsed.is_integer() or parsed <= 0:
        errors.append(f"{key} must be a whole number of seconds greater than 0")


def _validate_cors_allow_origins(value: str | None, errors: List[str], warnings: List[str]) -> None:
    if _is_blank(value):
        warnings.append("CORS_ALLOW_ORIGINS is not set; cross-origin clients will be refused")
        return

    origins = [x.strip() for x in str(value).split(",") if x.strip()]
    for origin in origins:
        if origin == "*":
            errors.append("CORS_ALLOW_ORIGINS must not contain '*' in strict allowlist mode")
            continue
        if not (origin.startswith("http://") or origin.startswith("https://")):
            errors.append(f"CORS origin must start with http:// or https://: {origin}")


def validate_startup_env() -> None:
    errors: List[str] = []
    warnings: List[str] = []

    mode = _validate_relay_mode(os.getenv("RELAY_MODE"), errors)
    _validate_http_url(os.getenv("N8N_WEBHOOK_URL"), "N8N_WEBHOOK_URL", errors)
    _validate_positive_number(os.getenv("WORKER_TIMEOUT_SEC"), "WORKER_TIMEOUT_SEC", errors)
    _validate_positive_int(os.getenv("GCS_SIGNED_URL_TTL_SEC"), "GCS_SIGNED_URL_TTL_SEC", errors)
    _validate_cors_allow_origins(os.getenv("CORS_ALLOW_ORIGINS"), errors, warnings)

    if _is_blank(os.getenv("N8N_WEBHOOK_URL")):
        warnings.append("N8N_WEBHOOK_URL is not set; using the default local webhook URL")

    if mode == RELAY_MODE_URL:
        if _is_blank(os.getenv("GCS_BUCKET_NAME")):
            errors.append("GCS_BUCKET_NAME is required when RELAY_MODE=url")
        if _is_blank(os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")):
            warnings.append(
                "GOOGLE_APPLICATION_CREDENTIALS_JSON is not set; relying on ambient ADC credentials"
            )

    if errors:
        for err in errors:
            logger.error("startup_env_invalid %s", err)
        raise RuntimeError("Startup env validation failed: " + "; ".join(errors))

    for warning in warnings:
        logger.warning("startup_env_warning %s", warning)

    logger.info("startup_env_validated relay_mode=%s", mode)
