"""FastAPI routes for image generation and the history gallery."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from flipart.controllers import generation_controller
from flipart.models.artifact import AspectRatio

router = APIRouter(prefix="/api")


class GeneratePayload(BaseModel):
	prompt: str
	aspect_ratio: str = AspectRatio.SQUARE.value


@router.get("/generation/options")
async def options_route():
	return await generation_controller.get_options()


@router.post("/generation")
async def generate_route(request: Request, payload: GeneratePayload):
	try:
		return await generation_controller.generate(request, payload.prompt, payload.aspect_ratio)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/generation/state")
async def generation_state_route(request: Request):
	return await generation_controller.get_state(request)


@router.delete("/generation/error")
async def dismiss_generation_error_route(request: Request):
	return await generation_controller.dismiss_error(request)


@router.get("/history")
async def history_route(request: Request):
	return await generation_controller.list_history(request)


@router.get("/history/{artifact_id}/download")
async def download_route(request: Request, artifact_id: str):
	"""Return the artifact as a PNG attachment."""
	try:
		return await generation_controller.download_artifact(request, artifact_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/history/{artifact_id}/thumbnail")
async def thumbnail_route(request: Request, artifact_id: str):
	"""Return the PNG thumbnail bytes for the specified artifact."""
	try:
		return await generation_controller.get_thumbnail(request, artifact_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
