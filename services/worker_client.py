# User value: This file makes the single call to the transformation worker and turns every failure into one message.
import logging
import time
from typing import Any, Optional

import requests

from services.errors import UpstreamTransportError
from utils.metrics import incr, observe_ms
from utils.request_id import propagation_headers

logger = logging.getLogger("api.worker")


class WorkerClient:
    """
    One POST per call to the configured worker endpoint. No retries.
    """

    def __init__(self, url: str, *, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def post_multipart(self, *, files: dict, data: Optional[dict] = None) -> Any:
        return self._post(kind="multipart", files=files, data=data or {})

    def post_json(self, payload: dict) -> Any:
        return self._post(kind="json", json=payload)

    def _post(self, *, kind: str, **kwargs) -> Any:
        started = time.perf_counter()
        try:
            resp = self.session.post(
                self.url,
                headers=propagation_headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            incr("worker_calls_total", kind=kind, outcome="transport_error")
            logger.error("worker_call_failed url=%s kind=%s error=%s: %s", self.url, kind, exc.__class__.__name__, exc)
            raise UpstreamTransportError(f"Failed to reach transformation worker: {exc}") from exc
        finally:
            observe_ms("worker_call_latency_ms", (time.perf_counter() - started) * 1000.0, kind=kind)

        if not resp.ok:
            incr("worker_calls_total", kind=kind, outcome="http_error")
            logger.error(
                "worker_call_failed url=%s kind=%s status=%s body=%s",
                self.url,
                kind,
                resp.status_code,
                (resp.text or "")[:200],
            )
            raise UpstreamTransportError(f"Worker returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            incr("worker_calls_total", kind=kind, outcome="invalid_json")
            logger.error("worker_response_unparseable url=%s kind=%s body=%s", self.url, kind, (resp.text or "")[:200])
            raise UpstreamTransportError("Worker returned a non-JSON response") from exc

        incr("worker_calls_total", kind=kind, outcome="ok")
        logger.info("worker_raw_response kind=%s body=%s", kind, data)
        return data
