# User value: This file keeps a ClothSwap job moving through one legal lifecycle so users never see a mixed state.
import logging
from typing import Optional

from schemas.job_contract import (
    JOB_STATE_IDLE,
    JOB_STATE_UPLOADING,
    JOB_STATE_PROCESSING,
    JOB_STATE_DONE,
    JOB_STATE_ERROR,
    TERMINAL_STATES,
)
from services.errors import InvalidTransitionError

logger = logging.getLogger("api.status_machine")

_ALLOWED = {
    JOB_STATE_IDLE: {JOB_STATE_IDLE, JOB_STATE_UPLOADING},
    JOB_STATE_UPLOADING: {JOB_STATE_PROCESSING, JOB_STATE_ERROR},
    JOB_STATE_PROCESSING: {JOB_STATE_DONE, JOB_STATE_ERROR},
    JOB_STATE_DONE: {JOB_STATE_IDLE},
    JOB_STATE_ERROR: {JOB_STATE_IDLE},
}


# User value: This step keeps the user ClothSwap flow accurate and dependable.
def _norm(state: Optional[str]) -> Optional[str]:
    if state is None:
        return None
    s = str(state).strip().lower()
    return s or None


# User value: This step keeps the user ClothSwap flow accurate and dependable.
def is_allowed_transition(current: Optional[str], target: Optional[str]) -> bool:
    target_n = _norm(target)
    current_n = _norm(current) or JOB_STATE_IDLE
    if target_n is None:
        return False
    return target_n in _ALLOWED.get(current_n, set())


def is_terminal(state: Optional[str]) -> bool:
    return _norm(state) in TERMINAL_STATES


def transition(current: Optional[str], target: str, *, context: str) -> str:
    """Return the normalized target state or raise InvalidTransitionError."""
    current_n = _norm(current) or JOB_STATE_IDLE
    target_n = _norm(target)
    if not is_allowed_transition(current_n, target_n):
        logger.warning(
            "state_transition_blocked context=%s current=%s target=%s",
            context,
            current_n,
            target_n,
        )
        raise InvalidTransitionError(current_n, str(target_n))

    logger.info("state_transition context=%s current=%s target=%s", context, current_n, target_n)
    return target_n
