"""FastAPI routes for the assistant conversation."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from flipart.controllers import assistant_controller

router = APIRouter(prefix="/api/assistant")


class MessagePayload(BaseModel):
	text: str = ""


class AttachmentPayload(BaseModel):
	artifact_id: str


@router.get("/messages")
async def list_messages_route(request: Request):
	return await assistant_controller.list_messages(request)


@router.post("/messages")
async def send_message_route(request: Request, payload: MessagePayload):
	try:
		return await assistant_controller.send_message(request, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/messages")
async def clear_messages_route(request: Request):
	return await assistant_controller.clear_messages(request)


@router.put("/attachment")
async def attach_route(request: Request, payload: AttachmentPayload):
	try:
		return await assistant_controller.attach(request, payload.artifact_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/attachment")
async def detach_route(request: Request):
	return await assistant_controller.detach(request)
