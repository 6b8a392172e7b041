# User value: This endpoint accepts the person/garment upload and hands the worker's answer straight back to the user.
import logging
import uuid
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from config import RelayConfig
from schemas.assets import ClothSwapSubmission, ImageAsset
from schemas.job_contract import FIELD_PROMPT, FIELD_REFERENCE_GARMENT, FIELD_SOURCE_IMAGE
from services.errors import ClothSwapError
from services.relay import WorkerRelay, build_relay
from utils.request_id import get_request_id
from utils.stage_logging import log_stage

router = APIRouter()
logger = logging.getLogger("api.clothswap")


@lru_cache(maxsize=1)
def get_relay() -> WorkerRelay:
    return build_relay(RelayConfig.from_env())


# User value: treats an untouched picker or a plain-text field as "no file" instead of an empty image.
async def read_upload(file: Any) -> Optional[ImageAsset]:
    if not isinstance(file, UploadFile):
        return None
    content = await file.read()
    if not file.filename and not content:
        return None
    return ImageAsset(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type or "application/octet-stream",
    )


def error_response(exc: ClothSwapError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@router.post("/api/clothswap")
# User value: relays one ClothSwap submission to the worker with no retries and no partial success.
async def clothswap(request: Request, relay: WorkerRelay = Depends(get_relay)):
    submission_id = uuid.uuid4().hex
    request_id = get_request_id() or ""

    form = await request.form()
    prompt = form.get(FIELD_PROMPT)
    if not isinstance(prompt, str):
        prompt = None
    submission = ClothSwapSubmission(
        source_image=await read_upload(form.get(FIELD_SOURCE_IMAGE)),
        reference_garment=await read_upload(form.get(FIELD_REFERENCE_GARMENT)),
        prompt=prompt,
    )
    log_stage(
        submission_id=submission_id,
        stage="RELAY_REQUEST",
        event="STARTED",
        relay_mode=relay.mode,
        request_id=request_id,
        source_filename=submission.source_image.filename if submission.source_image else None,
        garment_filename=submission.reference_garment.filename if submission.reference_garment else None,
        has_prompt=bool((prompt or "").strip()),
    )

    try:
        data = await run_in_threadpool(relay.forward, submission, submission_id=submission_id)
    except ClothSwapError as exc:
        log_stage(
            submission_id=submission_id,
            stage="RELAY_REQUEST",
            event="FAILED",
            relay_mode=relay.mode,
            request_id=request_id,
            status_code=exc.status_code,
            error=exc.message,
        )
        return error_response(exc)

    log_stage(
        submission_id=submission_id,
        stage="RELAY_REQUEST",
        event="COMPLETED",
        relay_mode=relay.mode,
        request_id=request_id,
    )
    return JSONResponse(status_code=200, content=data)
