"""Assistant conversation helpers."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request

from flipart.controllers.outcomes import outcome_payload
from flipart.services.studio import Studio


async def list_messages(request: Request) -> Dict[str, Any]:
	"""Return the conversation log and the staged attachment id."""
	studio: Studio = request.app.state.studio
	conversation = studio.conversation
	pending = conversation.pending_attachment
	return {
		"messages": [
			{"role": message.role, "text": message.text, "attachment": message.attachment}
			for message in conversation.log
		],
		"pending_attachment": pending.id if pending else None,
		"busy": conversation.state.busy,
	}


async def send_message(request: Request, text: str) -> Dict[str, Any]:
	"""Send a turn and return the outcome with the updated log."""
	studio: Studio = request.app.state.studio
	outcome = await studio.conversation.send(text)
	result = outcome_payload(outcome, studio.conversation.state)
	result.update(await list_messages(request))
	return result


async def clear_messages(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	studio.conversation.clear()
	return await list_messages(request)


async def attach(request: Request, artifact_id: str) -> Dict[str, Any]:
	"""Stage a gallery artifact for the next turn."""
	studio: Studio = request.app.state.studio
	try:
		artifact = studio.find_artifact(artifact_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=f"Artifact {artifact_id} not found") from exc
	studio.conversation.attach(artifact)
	return {"pending_attachment": artifact.id}


async def detach(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	studio.conversation.detach()
	return {"pending_attachment": None}
