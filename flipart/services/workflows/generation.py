"""Text-to-image generation appending artifacts to the shared history."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional
from uuid import uuid4

from flipart.config import GATEWAY_TIMEOUT_SECONDS
from flipart.models.artifact import Artifact, AspectRatio, now_millis
from flipart.models.session_models import Outcome, SessionProfile, WorkflowState
from flipart.services.gateway.openai_gateway import AIGateway
from flipart.services.persistent_store import PersistentStore
from flipart.services.single_flight import SingleFlightGuard
from flipart.services.workflows.timeouts import bounded_call

LOGGER = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to generate image."


class GenerationWorkflow:
	"""Submit prompts for image synthesis, one at a time.

	`history` is the shared, newest-first artifact list; it is mutated in
	place so every holder of the list sees new artifacts.
	"""

	def __init__(
		self,
		gateway: AIGateway,
		history: List[Artifact],
		store: PersistentStore,
		session: Callable[[], Optional[SessionProfile]],
		*,
		timeout: Optional[float] = GATEWAY_TIMEOUT_SECONDS,
		id_factory: Callable[[], str] = lambda: uuid4().hex,
		clock: Callable[[], int] = now_millis,
	) -> None:
		self.gateway = gateway
		self.history = history
		self.store = store
		self._session = session
		self.timeout = timeout
		self._new_id = id_factory
		self._now = clock
		self.guard = SingleFlightGuard("generation")
		self.prompt_text = ""

	@property
	def state(self) -> WorkflowState:
		return self.guard.state

	async def submit(self, prompt_text: str, aspect_ratio: AspectRatio | str = AspectRatio.SQUARE) -> Outcome:
		"""Generate one image for `prompt_text` and prepend it to the history.

		Raises:
			ValueError: If `aspect_ratio` is not a supported ratio.
		"""
		ratio = AspectRatio.parse(aspect_ratio)
		prompt = prompt_text or ""
		if not prompt.strip():
			return Outcome.EMPTY
		if self.guard.busy:
			return Outcome.BUSY
		if self._session() is None:
			return Outcome.NEEDS_SIGN_IN
		if not self.guard.try_enter():
			return Outcome.BUSY

		self.prompt_text = prompt
		error: Optional[str] = None
		try:
			url = await bounded_call(self.gateway.generate_image(prompt, ratio), self.timeout)
			artifact = Artifact(
				id=self._new_id(),
				url=url,
				prompt=prompt,
				created_at=self._now(),
				aspect_ratio=ratio,
			)
			self.history.insert(0, artifact)
			self.prompt_text = ""
			await self._persist()
			LOGGER.info("Generated artifact %s (%s)", artifact.id, ratio.value)
			return Outcome.COMPLETED
		except Exception as exc:
			LOGGER.error("Image generation failed: %s", exc)
			error = str(exc) or GENERATION_FAILED
			return Outcome.FAILED
		finally:
			self.guard.exit(error)

	async def _persist(self) -> None:
		try:
			await self.store.save_history(self.history)
		except Exception:
			LOGGER.exception("Failed to persist history after generation")
