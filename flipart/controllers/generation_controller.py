"""Image generation and gallery history helpers."""

from __future__ import annotations

import asyncio
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.responses import Response

from flipart.controllers.outcomes import outcome_payload
from flipart.models.artifact import Artifact, AspectRatio, now_millis
from flipart.models.session_models import Outcome
from flipart.services.context_builder import decode_data_url
from flipart.services.studio import Studio
from flipart.services.thumbnail_generator import ThumbnailGenerator

SUGGESTIONS = [
	"Cyberpunk cityscape at night with neon lights and flying cars",
	"A majestic dragon made of iridescent glass breathing frost",
	"Minimalist architectural house in a desert under a pink sky",
	"A tiny hamster wearing a knight's armor and holding a strawberry sword",
	"Retro-futuristic posters of space travel to Mars, 1960s style",
]

ASPECT_RATIO_LABELS = [
	(AspectRatio.SQUARE, "1:1 Square"),
	(AspectRatio.CLASSIC, "4:3 Classic"),
	(AspectRatio.PORTRAIT, "3:4 Portrait"),
	(AspectRatio.WIDE, "16:9 Wide"),
	(AspectRatio.STORY, "9:16 Story"),
]


def artifact_payload(artifact: Artifact) -> Dict[str, Any]:
	return artifact.to_dict()


def _find(studio: Studio, artifact_id: str) -> Artifact:
	try:
		return studio.find_artifact(artifact_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=f"Artifact {artifact_id} not found") from exc


def _artifact_bytes(artifact: Artifact) -> bytes:
	try:
		return decode_data_url(artifact.url)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc


async def get_options() -> Dict[str, Any]:
	"""Return prompt suggestions and the selectable aspect ratios."""
	return {
		"suggestions": list(SUGGESTIONS),
		"aspect_ratios": [{"value": ratio.value, "label": label} for ratio, label in ASPECT_RATIO_LABELS],
	}


async def generate(request: Request, prompt: str, aspect_ratio: str) -> Dict[str, Any]:
	"""Run one generation and return the outcome with the newest artifact."""
	studio: Studio = request.app.state.studio
	try:
		outcome = await studio.generation.submit(prompt, aspect_ratio)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	result = outcome_payload(outcome, studio.generation.state)
	result["artifact"] = artifact_payload(studio.history[0]) if outcome is Outcome.COMPLETED else None
	return result


async def get_state(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	state = studio.generation.state
	return {"busy": state.busy, "error": state.last_error, "prompt": studio.generation.prompt_text}


async def dismiss_error(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	studio.generation.guard.dismiss_error()
	return await get_state(request)


async def list_history(request: Request) -> Dict[str, Any]:
	"""Return the gallery, newest first."""
	studio: Studio = request.app.state.studio
	return {"items": [artifact_payload(artifact) for artifact in studio.history]}


async def download_artifact(request: Request, artifact_id: str) -> Response:
	"""Return the artifact's PNG bytes as a file download."""
	studio: Studio = request.app.state.studio
	data = _artifact_bytes(_find(studio, artifact_id))
	filename = f"flipart-{now_millis()}.png"
	return Response(
		content=data,
		media_type="image/png",
		headers={"Content-Disposition": f'attachment; filename="{filename}"'},
	)


async def get_thumbnail(request: Request, artifact_id: str) -> Response:
	"""Return a small PNG preview for the assistant's context gallery."""
	studio: Studio = request.app.state.studio
	data = _artifact_bytes(_find(studio, artifact_id))
	try:
		thumbnail = await asyncio.to_thread(ThumbnailGenerator().create_thumbnail, data)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	return Response(content=thumbnail, media_type="image/png")
