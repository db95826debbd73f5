"""Request, result and upstream payload models for design generation.

The upstream payload is a tagged union keyed on ``kind``. Which variant is
used depends only on whether the caller supplied an image:

    image present  -> ImageEditPayload   (generateContent)
    prompt only    -> TextToImagePayload (predict)
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_EDIT_INSTRUCTION = (
    "Generate a high-resolution, unique t-shirt design based on the content and style of this image."
)


def _image_string(value: Any) -> str | None:
    # Only a non-empty string is usable as base64 image data
    return value if isinstance(value, str) and value else None


class InlineImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(..., alias="mimeType", min_length=1)
    base64_data: str = Field(..., alias="base64Data", min_length=1)


class GenerationRequest(BaseModel):
    """Inbound body: a prompt, an image, or both."""

    prompt: str | None = None
    image: InlineImage | None = None

    @property
    def is_empty(self) -> bool:
        # An empty prompt counts as no prompt at all
        return not self.prompt and self.image is None


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base64_data: str = Field(..., alias="base64Data")


class ErrorBody(BaseModel):
    error: str
    details: str | None = None


# ---------------------------------------------------------------------------
# Upstream payload variants
# ---------------------------------------------------------------------------


class TextToImagePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint_method: ClassVar[str] = "predict"

    kind: Literal["text_to_image"] = "text_to_image"
    prompt: str
    sample_count: Literal[1] = 1

    def to_request_json(self) -> dict[str, Any]:
        return {
            "instances": {"prompt": self.prompt},
            "parameters": {"sampleCount": self.sample_count},
        }

    @staticmethod
    def extract_image(result: Any) -> str | None:
        """Return ``predictions[0].bytesBase64Encoded`` if present."""
        if not isinstance(result, dict):
            return None
        predictions = result.get("predictions")
        if not isinstance(predictions, list) or not predictions or not isinstance(predictions[0], dict):
            return None
        return _image_string(predictions[0].get("bytesBase64Encoded"))


class ImageEditPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint_method: ClassVar[str] = "generateContent"

    kind: Literal["image_edit"] = "image_edit"
    prompt: str
    image: InlineImage
    response_modalities: tuple[str, ...] = ("TEXT", "IMAGE")

    def to_request_json(self) -> dict[str, Any]:
        parts = [
            {"text": self.prompt},
            {"inlineData": {"mimeType": self.image.mime_type, "data": self.image.base64_data}},
        ]
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {"responseModalities": list(self.response_modalities)},
        }

    @staticmethod
    def extract_image(result: Any) -> str | None:
        """Return the data of the first inlineData part of the first candidate.

        Text parts returned next to the image are dropped.
        """
        try:
            parts = result["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return None
        if not isinstance(parts, list):
            return None

        for part in parts:
            if not isinstance(part, dict):
                continue
            inline = part.get("inlineData")
            if inline:
                return _image_string(inline.get("data")) if isinstance(inline, dict) else None
            if part.get("text"):
                logger.debug("Discarding text part from image edit response: %s", part["text"])
        return None


UpstreamPayload = Annotated[Union[TextToImagePayload, ImageEditPayload], Field(discriminator="kind")]


def build_payload(request: GenerationRequest) -> TextToImagePayload | ImageEditPayload:
    """Select the upstream payload variant for *request*."""
    if request.image is not None:
        return ImageEditPayload(prompt=request.prompt or DEFAULT_EDIT_INSTRUCTION, image=request.image)
    return TextToImagePayload(prompt=request.prompt or "")
