# User value: This file publishes the ClothSwap contract so front ends know which fields the deployed relay requires.
from fastapi import APIRouter, Depends

from routes.clothswap import get_relay
from schemas.job_contract import (
    CONTRACT_VERSION,
    FIELD_PROMPT,
    FIELD_REFERENCE_GARMENT,
    FIELD_SOURCE_IMAGE,
    JOB_STATES,
    MAX_UPLOAD_BYTES,
    REQUIRED_FIELDS_BY_MODE,
    RESULT_URL_PATHS,
    TERMINAL_STATES,
)
from schemas.responses import ClothSwapContractResponse
from services.relay import WorkerRelay

router = APIRouter()


@router.get("/contract/clothswap", response_model=ClothSwapContractResponse)
# User value: keeps client validation and relay validation in agreement.
def clothswap_contract(relay: WorkerRelay = Depends(get_relay)):
    return ClothSwapContractResponse(
        contract_version=CONTRACT_VERSION,
        relay_mode=relay.mode,
        inbound_fields=[FIELD_SOURCE_IMAGE, FIELD_REFERENCE_GARMENT, FIELD_PROMPT],
        required_fields=list(REQUIRED_FIELDS_BY_MODE[relay.mode]),
        job_states=list(JOB_STATES),
        terminal_states=list(TERMINAL_STATES),
        result_url_paths=[".".join(p) for p in RESULT_URL_PATHS],
        max_upload_bytes=MAX_UPLOAD_BYTES,
    )
