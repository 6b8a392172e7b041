# User value: This file pins the two payload shapes the transformation worker accepts.
from dataclasses import dataclass
from typing import Optional

from schemas.assets import ImageAsset
from schemas.job_contract import (
    FIELD_GARMENT_IMAGE,
    FIELD_GARMENT_IMAGE_URL,
    FIELD_HUMAN_IMAGE,
    FIELD_HUMAN_IMAGE_URL,
    FIELD_PROMPT,
)


@dataclass(frozen=True)
class RawOutboundPayload:
    human_image: ImageAsset
    garment_image: Optional[ImageAsset] = None
    prompt: Optional[str] = None

    def multipart_files(self) -> dict:
        files = {FIELD_HUMAN_IMAGE: self.human_image.as_multipart()}
        if self.garment_image is not None:
            files[FIELD_GARMENT_IMAGE] = self.garment_image.as_multipart()
        return files

    def form_fields(self) -> dict:
        if self.prompt:
            return {FIELD_PROMPT: self.prompt}
        return {}


@dataclass(frozen=True)
class UrlOutboundPayload:
    human_image_url: str
    garment_image_url: Optional[str] = None
    prompt: Optional[str] = None

    def to_json(self) -> dict:
        body = {FIELD_HUMAN_IMAGE_URL: self.human_image_url}
        if self.garment_image_url:
            body[FIELD_GARMENT_IMAGE_URL] = self.garment_image_url
        if self.prompt:
            body[FIELD_PROMPT] = self.prompt
        return body
