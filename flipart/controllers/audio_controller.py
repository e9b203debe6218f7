"""Audio staging and analysis helpers."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from flipart.controllers.outcomes import outcome_payload
from flipart.services.context_builder import decode_data_url
from flipart.services.studio import Studio
from flipart.utils.media_validation import read_audio_upload


async def get_state(request: Request) -> Dict[str, Any]:
	"""Return the staged file, workflow state and latest analysis."""
	studio: Studio = request.app.state.studio
	audio = studio.audio
	staged = audio.staged
	result = audio.result
	return {
		"file": (
			{"filename": staged.filename, "mime_type": staged.mime_type, "size": len(staged.data)}
			if staged
			else None
		),
		"busy": audio.state.busy,
		"error": audio.state.last_error,
		"result": {"transcription": result.transcription} if result else None,
	}


async def upload_audio(request: Request, file: UploadFile) -> Dict[str, Any]:
	"""Stage an uploaded recording, replacing any previous file and result."""
	studio: Studio = request.app.state.studio
	data, content_type = await read_audio_upload(file)
	try:
		studio.audio.stage(data, content_type, file.filename or "recording")
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	return await get_state(request)


async def unstage_audio(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	studio.audio.unstage()
	return await get_state(request)


async def enhance(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	outcome = await studio.audio.enhance()
	result = outcome_payload(outcome, studio.audio.state)
	result.update(await get_state(request))
	return result


async def dismiss_error(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	studio.audio.guard.dismiss_error()
	return await get_state(request)


async def download_enhanced(request: Request) -> Response:
	"""Return the enhanced recording of the latest analysis."""
	studio: Studio = request.app.state.studio
	result = studio.audio.result
	if result is None:
		raise HTTPException(status_code=404, detail="No enhanced audio available.")
	mime_type = result.enhanced_ref[len("data:"):].split(";", 1)[0]
	staged = studio.audio.staged
	filename = f"enhanced-{staged.filename if staged else 'recording'}"
	return Response(
		content=decode_data_url(result.enhanced_ref),
		media_type=mime_type,
		headers={"Content-Disposition": f'attachment; filename="{filename}"'},
	)
