# User value: This file gives client and relay one shape for an uploaded image so bytes pass through untouched.
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageAsset:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    def as_multipart(self) -> tuple[str, bytes, str]:
        # (filename, content, content_type) as expected by requests' `files=`
        return self.filename, self.content, self.content_type


@dataclass(frozen=True)
class ClothSwapSubmission:
    """Parsed inbound form; every field may be absent until the relay validates it."""

    source_image: Optional[ImageAsset] = None
    reference_garment: Optional[ImageAsset] = None
    prompt: Optional[str] = None


# User value: treats blank prompts as "no prompt" so users never send stray whitespace to the worker.
def normalize_prompt(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None
