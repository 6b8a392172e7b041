# User value: This file rejects oversized or non-image files at pick time so users fix input before submitting.
from enum import Enum
from typing import Optional

from schemas.assets import ImageAsset
from schemas.job_contract import MAX_UPLOAD_BYTES

IMAGE_MIME_PREFIX = "image/"


class UploadValidationResult(str, Enum):
    VALID = "valid"
    TOO_LARGE = "too_large"
    NOT_AN_IMAGE = "not_an_image"

    @property
    def is_valid(self) -> bool:
        return self is UploadValidationResult.VALID


_MESSAGES = {
    UploadValidationResult.TOO_LARGE: "File size must be less than 10MB",
    UploadValidationResult.NOT_AN_IMAGE: "Please select an image file",
}


# User value: checks size before type so users learn about the hard limit first.
def validate_upload(
    *,
    size_bytes: int,
    content_type: Optional[str],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> UploadValidationResult:
    if int(size_bytes) > max_bytes:
        return UploadValidationResult.TOO_LARGE
    mime = str(content_type or "").strip().lower()
    if not mime.startswith(IMAGE_MIME_PREFIX):
        return UploadValidationResult.NOT_AN_IMAGE
    return UploadValidationResult.VALID


def validate_asset(asset: ImageAsset) -> UploadValidationResult:
    return validate_upload(size_bytes=asset.size, content_type=asset.content_type)


def validation_message(result: UploadValidationResult) -> Optional[str]:
    return _MESSAGES.get(result)
