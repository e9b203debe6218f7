"""Sign-in lifecycle for the local user."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request

from flipart.models.session_models import SessionProfile
from flipart.services.studio import Studio


def _profile_payload(profile: Optional[SessionProfile]) -> Dict[str, Any]:
	return {"signed_in": profile is not None, "user": profile.to_dict() if profile else None}


async def sign_in(request: Request, email: str, password: str) -> Dict[str, Any]:
	"""Start a session for `email`."""
	studio: Studio = request.app.state.studio
	try:
		profile = await studio.sign_in(email, password)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	return _profile_payload(profile)


async def sign_up(request: Request, name: str, email: str, password: str) -> Dict[str, Any]:
	"""Register and start a session under the supplied display name."""
	studio: Studio = request.app.state.studio
	try:
		profile = await studio.sign_up(name, email, password)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	return _profile_payload(profile)


async def sign_out(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	await studio.sign_out()
	return _profile_payload(None)


async def current_session(request: Request) -> Dict[str, Any]:
	studio: Studio = request.app.state.studio
	return _profile_payload(studio.session)
