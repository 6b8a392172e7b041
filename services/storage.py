# -*- coding: utf-8 -*-

import base64
import datetime
import json
import logging
import os
import re
import unicodedata
from typing import Optional, Protocol

from google.cloud import storage

from services.errors import StorageUploadError

logger = logging.getLogger("api.storage")


class ObjectStorage(Protocol):
    def upload_bytes(self, *, content: bytes, destination_path: str, content_type: str) -> str:
        """Store bytes and return a URL the worker can fetch."""
        ...


# =========================================================
# OBJECT NAMES
# =========================================================
def safe_object_name(filename: str | None, fallback: str = "image") -> str:
    base = os.path.basename(filename or "")
    stem, ext = os.path.splitext(base)
    stem = unicodedata.normalize("NFKC", stem)
    stem = re.sub(r"[^A-Za-z0-9]+", "_", stem).strip("_") or fallback
    ext = re.sub(r"[^A-Za-z0-9.]", "", ext.lower())
    return f"{stem}{ext}"


def build_object_path(*, prefix: str, submission_id: str, role: str, filename: str | None) -> str:
    return f"{prefix.strip('/')}/{submission_id}/{role}/{safe_object_name(filename, fallback=role)}"


# =========================================================
# GCS BACKEND
# =========================================================
class GcsObjectStorage:
    def __init__(
        self,
        *,
        bucket_name: str,
        credentials_json_b64: Optional[str] = None,
        signed_url_ttl_sec: int = 3600,
        client=None,
    ):
        if not bucket_name:
            raise RuntimeError("GCS_BUCKET_NAME not set")
        self.bucket_name = bucket_name
        self.signed_url_ttl_sec = signed_url_ttl_sec
        self._credentials_json_b64 = credentials_json_b64
        self._client = client

    # LAZY CLIENT
    def _get_client(self):
        if self._client is not None:
            return self._client

        if self._credentials_json_b64:
            creds = json.loads(base64.b64decode(self._credentials_json_b64))
            self._client = storage.Client.from_service_account_info(creds)
        else:
            self._client = storage.Client()

        return self._client

    def upload_bytes(self, *, content: bytes, destination_path: str, content_type: str) -> str:
        """
        Upload in-memory bytes and return a V4 signed GET URL.
        """
        try:
            bucket = self._get_client().bucket(self.bucket_name)
            blob = bucket.blob(destination_path)
            blob.upload_from_string(content, content_type=content_type)
            url = blob.generate_signed_url(
                version="v4",
                expiration=datetime.timedelta(seconds=self.signed_url_ttl_sec),
                method="GET",
            )
        except Exception as exc:
            logger.error(
                "storage_upload_failed bucket=%s blob=%s error=%s: %s",
                self.bucket_name,
                destination_path,
                exc.__class__.__name__,
                exc,
            )
            raise StorageUploadError(f"Failed to store {os.path.basename(destination_path)}") from exc

        logger.info(
            "storage_upload_completed bucket=%s blob=%s size_bytes=%s",
            self.bucket_name,
            destination_path,
            len(content),
        )
        return url
