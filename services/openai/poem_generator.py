"""Description: Image inspiration and poem generation using OpenAI's Responses API."""

import logging
import os
import time
from typing import Any, List, Optional

from openai import AsyncOpenAI

from models.poem_types import PoemStyle
from services.errors import ConfigurationError, GenerationError
from services.openai.media_inputs import build_inputs, to_image_data_url
from services.openai.poem_prompts import build_inspiration_prompt, build_poem_prompt, build_system_prompt
from services.openai.response_parser import extract_text, extract_usage

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-5"

INSPIRATION_FALLBACK = "A silent moment captured in light."
INSPIRATION_FAILURE = "Could not glean inspiration from this image."
POEM_FAILURE = "The muses are silent. Please try again."


class PoemGenerator:
    """Request inspiration text and styled poems for a photograph."""

    def __init__(self, client: Optional[AsyncOpenAI], model: Optional[str] = None) -> None:
        """Initialize with a shared OpenAI client.

        A missing client is accepted here so the app can start without a
        credential; each call then fails with ConfigurationError.
        """
        self.client = client
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
        self.system_prompt = build_system_prompt()

    async def describe_image(self, image_b64: str, mime_type: str) -> str:
        """Return a short evocative description of the photo.

        An empty response yields `INSPIRATION_FALLBACK` rather than an error.

        Raises:
            ConfigurationError: If no OpenAI client is configured.
            GenerationError: If the remote call fails.
        """
        client = self._require_client()
        inputs = build_inputs(
            self.system_prompt,
            build_inspiration_prompt(),
            image_url=to_image_data_url(image_b64, mime_type),
        )
        try:
            response = await self._create_response(client, inputs, purpose="inspiration")
        except Exception as exc:
            raise GenerationError(INSPIRATION_FAILURE) from exc
        return extract_text(response).strip() or INSPIRATION_FALLBACK

    async def compose_poem(self, image_b64: str, mime_type: str, style: PoemStyle) -> str:
        """Return poem text in the requested style. May be an empty string.

        Raises:
            ConfigurationError: If no OpenAI client is configured.
            GenerationError: If the remote call fails.
        """
        client = self._require_client()
        inputs = build_inputs(
            self.system_prompt,
            build_poem_prompt(style),
            image_url=to_image_data_url(image_b64, mime_type),
        )
        try:
            response = await self._create_response(client, inputs, purpose=f"poem ({style.value})")
        except Exception as exc:
            raise GenerationError(POEM_FAILURE) from exc
        return extract_text(response).strip()

    def _require_client(self) -> AsyncOpenAI:
        if self.client is None:
            raise ConfigurationError("API Key is not configured.")
        return self.client

    async def _create_response(self, client: AsyncOpenAI, inputs: List[dict], *, purpose: str) -> Any:
        """Send the multimodal request and log latency and token usage."""
        start = time.time()
        try:
            response = await client.responses.create(model=self.model, input=inputs)
        except Exception as exc:
            LOGGER.error("Error during OpenAI Responses API call for %s: %s", purpose, exc)
            raise

        usage = extract_usage(response)
        LOGGER.info(
            "OpenAI %s latency: %.3fs (input_tokens=%s, output_tokens=%s)",
            purpose,
            time.time() - start,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return response
