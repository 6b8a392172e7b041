from fastapi import APIRouter, Depends

from routes.clothswap import get_relay
from schemas.responses import HealthResponse
from services.relay import WorkerRelay

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(relay: WorkerRelay = Depends(get_relay)):
    return HealthResponse(status="OK", relay_mode=relay.mode)
