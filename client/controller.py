# User value: This file drives one ClothSwap attempt from file pick to result so users only ever see a clear outcome.
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from config import client_relay_url
from schemas.assets import ImageAsset, normalize_prompt
from schemas.job_contract import (
    BUSY_STATES,
    ERROR_GENERIC,
    ERROR_NO_RESULT_URL,
    ERROR_SOURCE_NOT_SELECTED,
    FIELD_PROMPT,
    FIELD_REFERENCE_GARMENT,
    FIELD_SOURCE_IMAGE,
    JOB_STATE_DONE,
    JOB_STATE_ERROR,
    JOB_STATE_IDLE,
    JOB_STATE_PROCESSING,
    JOB_STATE_UPLOADING,
    RESULT_DOWNLOAD_FILENAME,
)
from services.errors import InvalidTransitionError
from services.result_extraction import Found, extract_result_url
from services.upload_validation import validate_asset, validation_message
from utils.status_machine import transition

logger = logging.getLogger("client.controller")

RELAY_PATH = "/api/clothswap"


@dataclass(frozen=True)
class DownloadLink:
    url: str
    filename: str = RESULT_DOWNLOAD_FILENAME


class JobController:
    """
    Lifecycle of a single ClothSwap request:
    idle -> uploading -> processing -> done | error, back to idle on reset().
    """

    def __init__(self, relay_url: Optional[str] = None, *, session: Optional[requests.Session] = None):
        self.relay_url = (relay_url or client_relay_url()).rstrip("/")
        self.session = session or requests.Session()
        self.state = JOB_STATE_IDLE
        self.source_image: Optional[ImageAsset] = None
        self.reference_garment: Optional[ImageAsset] = None
        self.prompt = ""
        self.result_url = ""
        self.error = ""

    @property
    def is_processing(self) -> bool:
        return self.state in BUSY_STATES

    @property
    def can_submit(self) -> bool:
        return self.state == JOB_STATE_IDLE and self.source_image is not None

    def _move(self, target: str, context: str) -> None:
        self.state = transition(self.state, target, context=context)

    def _require_idle(self, action: str) -> None:
        if self.state != JOB_STATE_IDLE:
            raise InvalidTransitionError(self.state, action)

    # -----------------------------------------------------------------
    # Inputs (idle only, never change state)
    # -----------------------------------------------------------------
    def _select(self, slot: str, asset: Optional[ImageAsset]) -> bool:
        self._require_idle(f"select_{slot}")
        if asset is not None:
            result = validate_asset(asset)
            if not result.is_valid:
                setattr(self, slot, None)
                self.error = validation_message(result) or ERROR_GENERIC
                logger.info("selection_rejected slot=%s reason=%s size_bytes=%s", slot, result.value, asset.size)
                return False
        self.error = ""
        setattr(self, slot, asset)
        return True

    def select_source(self, asset: Optional[ImageAsset]) -> bool:
        return self._select("source_image", asset)

    def select_reference(self, asset: Optional[ImageAsset]) -> bool:
        return self._select("reference_garment", asset)

    def clear_source(self) -> None:
        self._select("source_image", None)

    def clear_reference(self) -> None:
        self._select("reference_garment", None)

    def set_prompt(self, text: Optional[str]) -> None:
        self._require_idle("set_prompt")
        self.prompt = text or ""

    # -----------------------------------------------------------------
    # Submission
    # -----------------------------------------------------------------
    def _build_request(self) -> tuple[dict, dict]:
        files = {FIELD_SOURCE_IMAGE: self.source_image.as_multipart()}
        if self.reference_garment is not None:
            files[FIELD_REFERENCE_GARMENT] = self.reference_garment.as_multipart()
        data = {}
        prompt = normalize_prompt(self.prompt)
        if prompt:
            data[FIELD_PROMPT] = prompt
        return files, data

    def _fail(self, message: str) -> bool:
        self.error = message or ERROR_GENERIC
        self._move(JOB_STATE_ERROR, "submit_failed")
        logger.warning("job_failed error=%s", self.error)
        return False

    def submit(self) -> bool:
        """Run one submission to a terminal state. Returns True when a result URL was obtained."""
        if self.state != JOB_STATE_IDLE:
            logger.info("submit_ignored state=%s", self.state)
            return False

        self.error = ""
        if self.source_image is None:
            self.error = ERROR_SOURCE_NOT_SELECTED
            return False

        self._move(JOB_STATE_UPLOADING, "submit")
        files, data = self._build_request()
        self._move(JOB_STATE_PROCESSING, "submit_dispatched")

        try:
            resp = self.session.post(f"{self.relay_url}{RELAY_PATH}", files=files, data=data)
        except requests.RequestException as exc:
            return self._fail(str(exc))

        if not resp.ok:
            return self._fail(describe_http_failure(resp))

        try:
            body = resp.json()
        except ValueError:
            return self._fail("Relay returned a non-JSON response")

        extracted = extract_result_url(body)
        if not isinstance(extracted, Found):
            return self._fail(ERROR_NO_RESULT_URL)

        self.result_url = extracted.url
        self._move(JOB_STATE_DONE, "result_received")
        logger.info("job_done result_url=%s", self.result_url)
        return True

    # -----------------------------------------------------------------
    # Terminal views
    # -----------------------------------------------------------------
    def reset(self) -> None:
        if self.state != JOB_STATE_IDLE:
            self._move(JOB_STATE_IDLE, "reset")
        self.source_image = None
        self.reference_garment = None
        self.prompt = ""
        self.result_url = ""
        self.error = ""

    def download_link(self) -> Optional[DownloadLink]:
        if not self.result_url:
            return None
        return DownloadLink(url=self.result_url)

    def view(self) -> dict:
        return {
            "state": self.state,
            "error": self.error,
            "result_url": self.result_url,
            "can_submit": self.can_submit,
            "is_processing": self.is_processing,
            "source_filename": self.source_image.filename if self.source_image else None,
            "reference_filename": self.reference_garment.filename if self.reference_garment else None,
            "prompt": self.prompt,
        }


# User value: prefers the relay's own message so users see why the swap failed, not just a status code.
def describe_http_failure(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"].strip():
        return body["error"].strip()
    if resp.status_code:
        reason = (resp.reason or "").strip()
        return f"HTTP {resp.status_code}: {reason}" if reason else f"HTTP {resp.status_code}"
    return ERROR_GENERIC
