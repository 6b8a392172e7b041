# User value: This file describes what the relay answers so clients can render results and errors consistently.
from pydantic import BaseModel, Field
from typing import List, Literal


class ErrorResponse(BaseModel):
    # User value: a single human-readable message the client can show inline.
    error: str


class HealthResponse(BaseModel):
    status: str = "OK"
    relay_mode: Literal["raw", "url"]


class ClothSwapContractResponse(BaseModel):
    # User value: lets a front end discover which fields the deployed relay requires.
    contract_version: str
    relay_mode: Literal["raw", "url"]
    inbound_fields: List[str]
    required_fields: List[str]
    job_states: List[str]
    terminal_states: List[str]
    result_url_paths: List[str]
    max_upload_bytes: int = Field(..., gt=0)
