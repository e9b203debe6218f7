"""FastAPI routes for signing in and out."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from flipart.controllers.auth_controller import current_session, sign_in, sign_out, sign_up

router = APIRouter(prefix="/api/auth")


class SignInPayload(BaseModel):
	email: str
	password: str


class SignUpPayload(BaseModel):
	name: str
	email: str
	password: str


@router.post("/sign-in")
async def sign_in_route(request: Request, payload: SignInPayload):
	try:
		return await sign_in(request, payload.email, payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/sign-up")
async def sign_up_route(request: Request, payload: SignUpPayload):
	try:
		return await sign_up(request, payload.name, payload.email, payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/sign-out")
async def sign_out_route(request: Request):
	try:
		return await sign_out(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/session")
async def session_route(request: Request):
	return await current_session(request)
