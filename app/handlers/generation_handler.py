"""Design generation endpoint proxying to the Google image models."""
from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.models import ErrorBody, GenerationRequest, GenerationResult, build_payload
from app.services.gemini import GeminiAPIError, GeminiClient

router = APIRouter()
logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Server configuration error: GEMINI_API_KEY is missing."
MISSING_INPUT_MESSAGE = "Missing prompt or image data."
INVALID_BODY_MESSAGE = "Invalid request body."
REJECTED_MESSAGE = (
    "Google API Rejected Request. Check that your Google Cloud Project has "
    "**Billing Enabled** and the Gemini API is active."
)
IMAGE_NOT_FOUND_MESSAGE = "Image data not found in API response."
INTERNAL_ERROR_MESSAGE = "Internal server error during image generation."


class GenerationError(Exception):
    """Terminal failure of a generation request, rendered as ``{error, details?}``."""

    def __init__(self, status_code: int, error: str, details: str | None = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_body(self) -> dict[str, str]:
        return ErrorBody(error=self.error, details=self.details).model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


async def get_gemini_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[GeminiClient]:
    client = GeminiClient.from_settings(settings)
    try:
        yield client
    finally:
        await client.close()


async def parse_generation_request(request: Request) -> GenerationRequest:
    try:
        body = await request.json()
    except ValueError as exc:
        raise GenerationError(400, INVALID_BODY_MESSAGE) from exc

    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise GenerationError(400, INVALID_BODY_MESSAGE)

    try:
        job = GenerationRequest.model_validate(body)
    except ValidationError as exc:
        logger.info("Rejected generation body: %s", exc.errors())
        raise GenerationError(400, INVALID_BODY_MESSAGE) from exc

    if job.is_empty:
        raise GenerationError(400, MISSING_INPUT_MESSAGE)
    return job


# ---------------------------------------------------------------------------
# POST endpoint
# ---------------------------------------------------------------------------


@router.post(
    "/api/design-generator",
    response_model=GenerationResult,
    responses={code: {"model": ErrorBody} for code in (400, 403, 405, 500)},
)
async def generate_design(
    request: Request,
    settings: Settings = Depends(get_settings),
    gemini: GeminiClient = Depends(get_gemini_client),
):
    if not settings.gemini_api_key:
        raise GenerationError(500, MISSING_KEY_MESSAGE)

    job = await parse_generation_request(request)
    payload = build_payload(job)

    try:
        base64_data = await gemini.generate(payload)
    except GeminiAPIError as exc:
        logger.error("Google API Error %s: %s", exc.status, exc.response_json)
        if exc.is_rejection:
            raise GenerationError(exc.status, REJECTED_MESSAGE, details=exc.details) from exc
        raise GenerationError(500, INTERNAL_ERROR_MESSAGE) from exc
    except Exception as exc:
        logger.exception("Image generation failed: %s", exc)
        raise GenerationError(500, INTERNAL_ERROR_MESSAGE) from exc

    if not base64_data:
        raise GenerationError(500, IMAGE_NOT_FOUND_MESSAGE)

    logger.info("Generated %s image (%d base64 chars)", payload.kind, len(base64_data))
    return GenerationResult(base64_data=base64_data)
