"""FastAPI routes for audio upload and analysis."""

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from flipart.controllers import audio_controller

router = APIRouter(prefix="/api/audio")


@router.post("/file")
async def upload_audio_route(request: Request, file: UploadFile = File(...)):
	try:
		return await audio_controller.upload_audio(request, file)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/file")
async def unstage_audio_route(request: Request):
	return await audio_controller.unstage_audio(request)


@router.post("/enhance")
async def enhance_route(request: Request):
	try:
		return await audio_controller.enhance(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/state")
async def audio_state_route(request: Request):
	return await audio_controller.get_state(request)


@router.get("/enhanced/download")
async def download_enhanced_route(request: Request):
	try:
		return await audio_controller.download_enhanced(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/error")
async def dismiss_audio_error_route(request: Request):
	return await audio_controller.dismiss_error(request)
