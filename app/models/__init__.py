from .generation import (
    DEFAULT_EDIT_INSTRUCTION,
    ErrorBody,
    GenerationRequest,
    GenerationResult,
    ImageEditPayload,
    InlineImage,
    TextToImagePayload,
    UpstreamPayload,
    build_payload,
)

__all__ = [
    "DEFAULT_EDIT_INSTRUCTION",
    "ErrorBody",
    "GenerationRequest",
    "GenerationResult",
    "ImageEditPayload",
    "InlineImage",
    "TextToImagePayload",
    "UpstreamPayload",
    "build_payload",
]
