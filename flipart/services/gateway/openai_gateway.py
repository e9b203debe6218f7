"""AI gateway backed by the OpenAI async client.

Workflows only see `AIGateway`: a text `generate` call taking ordered,
role-tagged multi-part entries, and an image `generate_image` call. This
module maps those shapes onto the Responses and Images APIs.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any, Dict, List, Protocol

from openai import AsyncOpenAI

from flipart.config import IMAGE_MODEL
from flipart.models.artifact import AspectRatio
from flipart.models.gateway_models import GatewayRequest, GatewayResponse, InlineBinaryPart, RequestEntry, TextPart
from flipart.models.session_models import ASSISTANT
from flipart.services.gateway.response_parser import extract_image_ref, extract_text, extract_usage

LOGGER = logging.getLogger(__name__)

# Closest supported output size for each aspect ratio.
IMAGE_SIZES: Dict[AspectRatio, str] = {
    AspectRatio.SQUARE: "1024x1024",
    AspectRatio.CLASSIC: "1536x1024",
    AspectRatio.WIDE: "1536x1024",
    AspectRatio.PORTRAIT: "1024x1536",
    AspectRatio.STORY: "1024x1536",
}

AUDIO_FORMATS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
}


class GatewayError(RuntimeError):
    """A gateway call failed; `str(exc)` is safe to show to the user."""


class AIGateway(Protocol):
    async def generate(self, request: GatewayRequest) -> GatewayResponse: ...

    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> str: ...


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


def _audio_format(mime_type: str) -> str:
    """Return the inline audio format for `mime_type` or raise ValueError."""
    mime = (mime_type or "").lower().split(";", 1)[0].strip()
    try:
        return AUDIO_FORMATS[mime]
    except KeyError:
        raise ValueError(f"Unsupported audio MIME type for analysis: '{mime_type}'") from None


def _part_content(role: str, part: Any) -> Dict[str, Any]:
    if isinstance(part, TextPart):
        kind = "output_text" if role == ASSISTANT else "input_text"
        return {"type": kind, "text": part.text}
    if isinstance(part, InlineBinaryPart):
        if role == ASSISTANT:
            raise ValueError("Inline binary content is only supported in user turns.")
        encoded = base64.b64encode(part.data).decode("ascii")
        if part.mime_type.startswith("image/"):
            return {"type": "input_image", "image_url": f"data:{part.mime_type};base64,{encoded}"}
        if part.mime_type.startswith("audio/"):
            return {"type": "input_audio", "input_audio": {"data": encoded, "format": _audio_format(part.mime_type)}}
        raise ValueError(f"Unsupported inline MIME type: '{part.mime_type}'")
    raise TypeError(f"Unknown request part: {part!r}")


def build_inputs(entries: List[RequestEntry]) -> List[Dict[str, Any]]:
    """Build the Responses API input array, one message per entry."""
    return [
        {
            "type": "message",
            "role": entry.role,
            "content": [_part_content(entry.role, part) for part in entry.parts],
        }
        for entry in entries
    ]


class OpenAIGateway:
    """`AIGateway` implementation over a shared `AsyncOpenAI` client."""

    def __init__(self, client: AsyncOpenAI, image_model: str = IMAGE_MODEL) -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.image_model = image_model

    async def generate(self, request: GatewayRequest) -> GatewayResponse:
        """Send one multi-part request and return the model's text."""
        inputs = build_inputs(list(request.entries))
        kwargs: Dict[str, Any] = {"model": request.model, "input": inputs}
        if request.system_instruction:
            kwargs["instructions"] = request.system_instruction

        start = time.time()
        try:
            response = await self.client.responses.create(**kwargs)
        except Exception as exc:
            LOGGER.error("OpenAI Responses API error: %s", exc)
            raise GatewayError(_error_message(exc)) from exc

        latency = time.time() - start
        usage = extract_usage(response)
        LOGGER.info(
            "Gateway generate (%s) latency: %.3fs, input_tokens=%s, output_tokens=%s",
            request.model, latency, usage["input_tokens"], usage["output_tokens"],
        )
        return GatewayResponse(
            text=extract_text(response),
            input_tokens=usage["input_tokens"],
            output_tokens=usage["output_tokens"],
            latency=latency,
        )

    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> str:
        """Synthesize one image and return it as a PNG data URL."""
        size = IMAGE_SIZES[AspectRatio.parse(aspect_ratio)]

        start = time.time()
        try:
            response = await self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                size=size,
                n=1,
            )
        except Exception as exc:
            LOGGER.error("OpenAI Images API error: %s", exc)
            raise GatewayError(_error_message(exc)) from exc

        ref = extract_image_ref(response)
        if not ref:
            data = getattr(response, "data", None) or []
            if data and getattr(data[0], "url", None):
                LOGGER.error("Image model %s returned a hosted URL instead of base64 data", self.image_model)
                raise GatewayError("The image model returned a hosted URL instead of image data.")
            raise GatewayError("No image was returned by the model.")
        LOGGER.info("Gateway image (%s, %s) latency: %.3fs", self.image_model, size, time.time() - start)
        return ref
