import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_WORKER_URL = "http://localhost:5678/webhook/clothswap"
DEFAULT_RELAY_URL = "http://localhost:8000"


def _optional_float(raw: Optional[str]) -> Optional[float]:
    value = (raw or "").strip()
    if not value:
        return None
    return float(value)


def positive_int(raw: Optional[str], default: int) -> int:
    value = (raw or "").strip()
    if not value:
        return default
    try:
        parsed = int(float(value))
    except (ValueError, OverflowError):
        return default
    return parsed if parsed > 0 else default


class RelayConfig(BaseModel):
    """Everything the relay reads from the environment, resolved once at construction."""

    mode: Literal["raw", "url"] = "raw"
    worker_url: str = DEFAULT_WORKER_URL
    worker_timeout_sec: Optional[float] = Field(default=None, gt=0)
    gcs_bucket_name: Optional[str] = None
    gcs_credentials_json: Optional[str] = None
    storage_prefix: str = "clothswap"
    signed_url_ttl_sec: int = Field(default=3600, gt=0)

    @classmethod
    def from_env(cls) -> "RelayConfig":
        return cls(
            mode=(os.getenv("RELAY_MODE") or "raw").strip().lower(),
            worker_url=(os.getenv("N8N_WEBHOOK_URL") or "").strip() or DEFAULT_WORKER_URL,
            worker_timeout_sec=_optional_float(os.getenv("WORKER_TIMEOUT_SEC")),
            gcs_bucket_name=(os.getenv("GCS_BUCKET_NAME") or "").strip() or None,
            gcs_credentials_json=os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON") or None,
            storage_prefix=(os.getenv("GCS_OBJECT_PREFIX") or "clothswap").strip("/ ") or "clothswap",
            signed_url_ttl_sec=positive_int(os.getenv("GCS_SIGNED_URL_TTL_SEC"), 3600),
        )


def client_relay_url() -> str:
    return (os.getenv("CLOTHSWAP_RELAY_URL") or "").strip().rstrip("/") or DEFAULT_RELAY_URL
