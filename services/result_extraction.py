# User value: This file finds the finished image in whatever shape the worker answers with.
from dataclasses import dataclass
from typing import Any, Union

from schemas.job_contract import RESULT_URL_PATHS


@dataclass(frozen=True)
class Found:
    url: str


@dataclass(frozen=True)
class NotFound:
    searched: tuple = tuple(".".join(p) for p in RESULT_URL_PATHS)


ExtractionResult = Union[Found, NotFound]


def _lookup(data: Any, path: tuple) -> Any:
    node = data
    for part in path:
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def extract_result_url(response: Any) -> ExtractionResult:
    """
    Search the worker response for the result image URL.

    Locations are tried in order: ``image_url``, ``result.image_url``,
    ``outputUrl``. The first non-empty string wins.
    """
    for path in RESULT_URL_PATHS:
        value = _lookup(response, path)
        if isinstance(value, str) and value.strip():
            return Found(url=value.strip())
    return NotFound()
