"""Process-wide state for one local FlipArt user."""

from __future__ import annotations

import logging
from typing import List, Optional

from flipart.config import GATEWAY_TIMEOUT_SECONDS
from flipart.models.artifact import Artifact
from flipart.models.session_models import SessionProfile
from flipart.services.gateway.openai_gateway import AIGateway
from flipart.services.persistent_store import PersistentStore
from flipart.services.workflows.audio import AudioWorkflow
from flipart.services.workflows.conversation import ConversationWorkflow
from flipart.services.workflows.generation import GenerationWorkflow

LOGGER = logging.getLogger(__name__)


def _validate_credentials(email: str, password: str) -> str:
	email = (email or "").strip()
	local, sep, domain = email.partition("@")
	if not sep or not local or not domain:
		raise ValueError("A valid email address is required.")
	if not password:
		raise ValueError("Password is required.")
	return email


class Studio:
	"""Own the history, the session and the three workflows.

	The history list object is shared with the generation workflow and only
	ever mutated in place.
	"""

	def __init__(self, gateway: AIGateway, store: PersistentStore, timeout: Optional[float] = GATEWAY_TIMEOUT_SECONDS) -> None:
		self.store = store
		self.history: List[Artifact] = []
		self.session: Optional[SessionProfile] = None
		self.generation = GenerationWorkflow(gateway, self.history, store, self.current_session, timeout=timeout)
		self.conversation = ConversationWorkflow(gateway, self.current_session, timeout=timeout)
		self.audio = AudioWorkflow(gateway, self.current_session, timeout=timeout)

	def current_session(self) -> Optional[SessionProfile]:
		return self.session

	async def load(self) -> None:
		"""Restore history and session from the store."""
		history, session = await self.store.load()
		self.history[:] = history
		self.session = session
		LOGGER.info("Loaded %d artifacts; signed in: %s", len(history), session is not None)

	async def sign_in(self, email: str, password: str) -> SessionProfile:
		"""Start a session named after the email's local part."""
		email = _validate_credentials(email, password)
		return await self._start_session(SessionProfile(display_name=email.split("@")[0], email=email))

	async def sign_up(self, name: str, email: str, password: str) -> SessionProfile:
		email = _validate_credentials(email, password)
		name = (name or "").strip()
		if not name:
			raise ValueError("Name is required.")
		return await self._start_session(SessionProfile(display_name=name, email=email))

	async def sign_out(self) -> None:
		"""End the session and reset the assistant to its signed-out greeting."""
		self.session = None
		self.conversation.reset()
		try:
			await self.store.clear_session()
		except Exception:
			LOGGER.exception("Failed to clear stored session")

	def find_artifact(self, artifact_id: str) -> Artifact:
		"""Return an artifact from the history or raise KeyError if missing."""
		for artifact in self.history:
			if artifact.id == artifact_id:
				return artifact
		raise KeyError(f"Artifact {artifact_id} not found")

	async def _start_session(self, profile: SessionProfile) -> SessionProfile:
		self.session = profile
		try:
			await self.store.save_session(profile)
		except Exception:
			LOGGER.exception("Failed to persist session")
		return profile
