"""Google Generative Language API wrapper.

Async client for the two image endpoints used by the design generator:
``models/{model}:predict`` for text-to-image and
``models/{model}:generateContent`` for image editing. The API key travels as
the ``key`` query parameter.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.config import Settings
from app.models.generation import UpstreamPayload

logger = logging.getLogger(__name__)


class GeminiAPIError(Exception):
    """Raised when the Generative Language API returns a non-success status."""

    REJECTION_STATUSES = (400, 403)
    UNKNOWN_REJECTION = "Unknown rejection reason."

    def __init__(self, status: int, message: str, response_json: Optional[Any] = None):
        super().__init__(f"Gemini API error {status}: {message}")
        self.status = status
        self.response_json = response_json

    @property
    def is_rejection(self) -> bool:
        """True for statuses where billing or quota problems surface."""
        return self.status in self.REJECTION_STATUSES

    @property
    def details(self) -> str:
        error = self.response_json.get("error") if isinstance(self.response_json, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return self.UNKNOWN_REJECTION


class GeminiClient:
    """Minimal async client for Gemini and Imagen image generation."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str,
        image_edit_model: str,
        text_to_image_model: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._models = {
            "image_edit": image_edit_model,
            "text_to_image": text_to_image_model,
        }
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            image_edit_model=settings.image_edit_model,
            text_to_image_model=settings.text_to_image_model,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def endpoint_for(self, payload: UpstreamPayload) -> str:
        model = self._models[payload.kind]
        return f"{self._base_url}/models/{model}:{payload.endpoint_method}"

    async def generate(self, payload: UpstreamPayload) -> str | None:
        """Send *payload* upstream and return the base64 image, or None if absent.

        Raises GeminiAPIError on a non-success status. Transport errors and
        undecodable JSON bodies propagate unchanged.
        """
        url = self.endpoint_for(payload)
        logger.debug("POST %s (%s)", url, payload.kind)
        resp = await self._client.post(
            url,
            params={"key": self._api_key},
            json=payload.to_request_json(),
            headers={"Content-Type": "application/json"},
        )
        if not resp.is_success:
            raise GeminiAPIError(resp.status_code, resp.text, resp.json())
        return payload.extract_image(resp.json())

    async def close(self) -> None:
        await self._client.aclose()
