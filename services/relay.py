# User value: This file turns a ClothSwap upload into exactly the call the deployed transformation worker expects.
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from config import RelayConfig
from schemas.assets import ClothSwapSubmission, normalize_prompt
from schemas.job_contract import (
    ERROR_GARMENT_REQUIRED,
    ERROR_SOURCE_REQUIRED,
    FIELD_GARMENT_IMAGE,
    FIELD_HUMAN_IMAGE,
    RELAY_MODE_RAW,
    RELAY_MODE_URL,
)
from schemas.payloads import RawOutboundPayload, UrlOutboundPayload
from services.errors import ClothSwapError, RelayValidationError
from services.storage import GcsObjectStorage, ObjectStorage, build_object_path
from services.worker_client import WorkerClient
from utils.metrics import incr
from utils.request_id import get_request_id
from utils.stage_logging import log_stage

logger = logging.getLogger("api.relay")


class WorkerRelay(ABC):
    """
    Forwards one submission to the worker and returns its JSON untouched.

    Subclasses decide which inbound files are required and which outbound
    shape is built; ``forward`` validates before any network call.
    """

    mode: str = ""

    def __init__(self, worker: WorkerClient):
        self.worker = worker

    @abstractmethod
    def validate(self, submission: ClothSwapSubmission) -> None:
        ...

    @abstractmethod
    def _dispatch(self, submission: ClothSwapSubmission, *, submission_id: str) -> Any:
        ...

    def forward(self, submission: ClothSwapSubmission, *, submission_id: Optional[str] = None) -> Any:
        submission_id = submission_id or uuid.uuid4().hex
        request_id = get_request_id() or ""

        try:
            self.validate(submission)
        except RelayValidationError as exc:
            incr("relay_requests_total", mode=self.mode, outcome="invalid")
            log_stage(
                submission_id=submission_id,
                stage="RELAY_VALIDATION",
                event="FAILED",
                relay_mode=self.mode,
                request_id=request_id,
                error=exc.message,
            )
            raise

        log_stage(
            submission_id=submission_id,
            stage="WORKER_CALL",
            event="STARTED",
            relay_mode=self.mode,
            request_id=request_id,
            worker_url=self.worker.url,
            has_garment=submission.reference_garment is not None,
        )
        try:
            data = self._dispatch(submission, submission_id=submission_id)
        except ClothSwapError as exc:
            incr("relay_requests_total", mode=self.mode, outcome="upstream_error")
            log_stage(
                submission_id=submission_id,
                stage="WORKER_CALL",
                event="FAILED",
                relay_mode=self.mode,
                request_id=request_id,
                error=f"{exc.__class__.__name__}: {exc.message}",
            )
            raise

        incr("relay_requests_total", mode=self.mode, outcome="ok")
        log_stage(
            submission_id=submission_id,
            stage="WORKER_CALL",
            event="COMPLETED",
            relay_mode=self.mode,
            request_id=request_id,
            response_type=type(data).__name__,
        )
        return data


class RawForwardingRelay(WorkerRelay):
    """Re-emits the uploaded files unchanged as ``human_image``/``garment_image``."""

    mode = RELAY_MODE_RAW

    def validate(self, submission: ClothSwapSubmission) -> None:
        if submission.source_image is None:
            raise RelayValidationError(ERROR_SOURCE_REQUIRED)

    def build_payload(self, submission: ClothSwapSubmission) -> RawOutboundPayload:
        return RawOutboundPayload(
            human_image=submission.source_image,
            garment_image=submission.reference_garment,
            prompt=normalize_prompt(submission.prompt),
        )

    def _dispatch(self, submission: ClothSwapSubmission, *, submission_id: str) -> Any:
        payload = self.build_payload(submission)
        return self.worker.post_multipart(files=payload.multipart_files(), data=payload.form_fields())


class UrlForwardingRelay(WorkerRelay):
    """Stores both images first and sends the worker their URLs as JSON."""

    mode = RELAY_MODE_URL

    def __init__(self, worker: WorkerClient, storage: ObjectStorage, *, storage_prefix: str = "clothswap"):
        super().__init__(worker)
        self.storage = storage
        self.storage_prefix = storage_prefix

    def validate(self, submission: ClothSwapSubmission) -> None:
        if submission.source_image is None:
            raise RelayValidationError(ERROR_SOURCE_REQUIRED)
        if submission.reference_garment is None:
            raise RelayValidationError(ERROR_GARMENT_REQUIRED)

    def _store(self, asset, *, role: str, submission_id: str) -> str:
        path = build_object_path(
            prefix=self.storage_prefix,
            submission_id=submission_id,
            role=role,
            filename=asset.filename,
        )
        log_stage(
            submission_id=submission_id,
            stage="ASSET_STORED",
            event="STARTED",
            relay_mode=self.mode,
            role=role,
            size_bytes=asset.size,
        )
        url = self.storage.upload_bytes(content=asset.content, destination_path=path, content_type=asset.content_type)
        log_stage(
            submission_id=submission_id,
            stage="ASSET_STORED",
            event="COMPLETED",
            relay_mode=self.mode,
            role=role,
            object_path=path,
        )
        return url

    def build_payload(self, submission: ClothSwapSubmission, *, submission_id: str) -> UrlOutboundPayload:
        human_url = self._store(submission.source_image, role=FIELD_HUMAN_IMAGE, submission_id=submission_id)
        garment_url = self._store(submission.reference_garment, role=FIELD_GARMENT_IMAGE, submission_id=submission_id)
        return UrlOutboundPayload(
            human_image_url=human_url,
            garment_image_url=garment_url,
            prompt=normalize_prompt(submission.prompt),
        )

    def _dispatch(self, submission: ClothSwapSubmission, *, submission_id: str) -> Any:
        payload = self.build_payload(submission, submission_id=submission_id)
        return self.worker.post_json(payload.to_json())


def build_relay(config: RelayConfig, *, storage: Optional[ObjectStorage] = None, session=None) -> WorkerRelay:
    worker = WorkerClient(config.worker_url, timeout=config.worker_timeout_sec, session=session)
    if config.mode == RELAY_MODE_URL:
        if storage is None:
            storage = GcsObjectStorage(
                bucket_name=config.gcs_bucket_name or "",
                credentials_json_b64=config.gcs_credentials_json,
                signed_url_ttl_sec=config.signed_url_ttl_sec,
            )
        relay: WorkerRelay = UrlForwardingRelay(worker, storage, storage_prefix=config.storage_prefix)
    else:
        relay = RawForwardingRelay(worker)

    logger.info("relay_configured mode=%s worker_url=%s", relay.mode, config.worker_url)
    return relay
