# User value: This test validates the /api/clothswap endpoint so users get the worker's answer or one clear error.
import asyncio
import unittest
from io import BytesIO
from unittest.mock import MagicMock

from fastapi import FastAPI, UploadFile
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from routes.clothswap import get_relay, read_upload, router
from services.relay import RawForwardingRelay, UrlForwardingRelay
from services.worker_client import WorkerClient

WORKER_URL = "http://worker.test/webhook/clothswap"
ENDPOINT = "/api/clothswap"


def _upload(filename: str, content: bytes, content_type: str = "image/png") -> UploadFile:
    return UploadFile(file=BytesIO(content), filename=filename, headers=Headers({"content-type": content_type}))


def _session(body) -> MagicMock:
    resp = MagicMock()
    resp.ok = True
    resp.status_code = 200
    resp.json.return_value = body
    session = MagicMock()
    session.post.return_value = resp
    return session


def _client(relay) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_relay] = lambda: relay
    return TestClient(app)


class ClothSwapEndpointUnitTests(unittest.TestCase):
    def test_success_passes_worker_json_through(self):
        session = _session({"result": {"image_url": "https://x/2.png"}, "took_ms": 900})
        relay = RawForwardingRelay(WorkerClient(WORKER_URL, session=session))

        resp = _client(relay).post(
            ENDPOINT,
            files={"source_image": ("me.png", b"person", "image/png")},
            data={"prompt": "blue shirt"},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"result": {"image_url": "https://x/2.png"}, "took_ms": 900})
        kwargs = session.post.call_args.kwargs
        self.assertEqual(kwargs["files"]["human_image"], ("me.png", b"person", "image/png"))
        self.assertEqual(kwargs["data"], {"prompt": "blue shirt"})

    # User value: no source image means no worker call and a plain 400 message.
    def test_missing_source_returns_400(self):
        session = _session({})
        relay = RawForwardingRelay(WorkerClient(WORKER_URL, session=session))

        resp = _client(relay).post(ENDPOINT, files={"reference_garment": ("shirt.png", b"g", "image/png")})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "source_image file is required"})
        session.post.assert_not_called()

    # User value: a text value where a file belongs gets the same plain 400, not a validation dump.
    def test_text_source_image_treated_as_missing(self):
        session = _session({})
        relay = RawForwardingRelay(WorkerClient(WORKER_URL, session=session))

        resp = _client(relay).post(
            ENDPOINT,
            data={"source_image": "not-a-file"},
            files={"reference_garment": ("shirt.png", b"g", "image/png")},
        )

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "source_image file is required"})
        session.post.assert_not_called()

    def test_non_form_body_returns_400(self):
        session = _session({})
        relay = RawForwardingRelay(WorkerClient(WORKER_URL, session=session))

        resp = _client(relay).post(ENDPOINT, json={"source_image": "me.png"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "source_image file is required"})
        session.post.assert_not_called()

    def test_url_mode_missing_garment_returns_400(self):
        session = _session({})
        storage = MagicMock()
        relay = UrlForwardingRelay(WorkerClient(WORKER_URL, session=session), storage)

        resp = _client(relay).post(ENDPOINT, files={"source_image": ("me.png", b"person", "image/png")})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "reference_garment file is required"})
        storage.upload_bytes.assert_not_called()
        session.post.assert_not_called()

    def test_worker_failure_returns_500(self):
        session = _session({})
        session.post.return_value.json.side_effect = ValueError("Expecting value")
        relay = RawForwardingRelay(WorkerClient(WORKER_URL, session=session))

        resp = _client(relay).post(ENDPOINT, files={"source_image": ("me.png", b"person", "image/png")})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Worker returned a non-JSON response"})

    # User value: an untouched optional picker is treated as "no garment", not an empty image.
    def test_empty_picker_treated_as_absent(self):
        async def run_case():
            self.assertIsNone(await read_upload(_upload("", b"", "application/octet-stream")))
            self.assertIsNone(await read_upload(None))
            self.assertIsNone(await read_upload("shirt.jpg"))
            asset = await read_upload(_upload("shirt.jpg", b"garment", "image/jpeg"))
            self.assertEqual(asset.filename, "shirt.jpg")
            self.assertEqual(asset.content, b"garment")
            self.assertEqual(asset.content_type, "image/jpeg")

        asyncio.run(run_case())


if __name__ == "__main__":
    unittest.main()
