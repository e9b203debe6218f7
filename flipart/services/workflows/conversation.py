"""Multi-turn assistant conversation with optional image attachments."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from flipart.config import CHAT_MODEL, GATEWAY_TIMEOUT_SECONDS
from flipart.models.artifact import Artifact
from flipart.models.gateway_models import GatewayRequest
from flipart.models.session_models import (
	ASSISTANT,
	USER,
	ConversationMessage,
	Outcome,
	SessionProfile,
	WorkflowState,
	attachment_ref,
)
from flipart.services.context_builder import build_conversation_entries
from flipart.services.gateway.openai_gateway import AIGateway
from flipart.services.gateway.prompts import assistant_system_prompt
from flipart.services.single_flight import SingleFlightGuard
from flipart.services.workflows.timeouts import bounded_call

LOGGER = logging.getLogger(__name__)

GREETING = (
	"Hello! I am your FlipArt AI Assistant. I can help you craft better prompts "
	"or analyze your generated art. How can I assist you today?"
)
SIGNED_OUT_GREETING = "Hello! I am your FlipArt Assistant. How can I help you today?"
EMPTY_REPLY = "I'm sorry, I couldn't process that request."
ERROR_REPLY = "I encountered an error analyzing your request. Please try again."


class ConversationWorkflow:
	"""Drive the assistant chat and keep its log.

	The user turn is appended before the gateway answers; the reply (or a
	fixed apology on failure) is appended right after it, so the log is always
	the complete transcript the user sees.
	"""

	def __init__(
		self,
		gateway: AIGateway,
		session: Callable[[], Optional[SessionProfile]],
		*,
		model: str = CHAT_MODEL,
		timeout: Optional[float] = GATEWAY_TIMEOUT_SECONDS,
	) -> None:
		self.gateway = gateway
		self._session = session
		self.model = model
		self.timeout = timeout
		self.guard = SingleFlightGuard("conversation")
		self.log: List[ConversationMessage] = [ConversationMessage(role=ASSISTANT, text=GREETING)]
		self.pending_attachment: Optional[Artifact] = None

	@property
	def state(self) -> WorkflowState:
		return self.guard.state

	def attach(self, artifact: Artifact) -> None:
		"""Stage `artifact` for the next outgoing turn, replacing any other."""
		self.pending_attachment = artifact

	def detach(self) -> None:
		self.pending_attachment = None

	def clear(self) -> None:
		"""Empty the log. No greeting is reseeded."""
		self.log.clear()

	def reset(self, greeting: str = SIGNED_OUT_GREETING) -> None:
		self.log[:] = [ConversationMessage(role=ASSISTANT, text=greeting)]

	async def send(self, user_text: str) -> Outcome:
		"""Send `user_text` plus the staged attachment and record the reply."""
		text = (user_text or "").strip()
		if not text and self.pending_attachment is None:
			return Outcome.EMPTY
		if self.guard.busy:
			return Outcome.BUSY
		session = self._session()
		if session is None:
			return Outcome.NEEDS_SIGN_IN
		if not self.guard.try_enter():
			return Outcome.BUSY

		error: Optional[str] = None
		try:
			ref = attachment_ref(self.pending_attachment)
			self.pending_attachment = None

			try:
				entries = build_conversation_entries(self.log, text, ref)
			except ValueError as exc:
				LOGGER.error("Could not encode conversation context: %s", exc)
				error = str(exc)
				return Outcome.FAILED

			self.log.append(ConversationMessage(role=USER, text=text, attachment=ref))
			request = GatewayRequest(
				model=self.model,
				entries=entries,
				system_instruction=assistant_system_prompt(session.display_name),
			)
			try:
				response = await bounded_call(self.gateway.generate(request), self.timeout)
			except Exception as exc:
				LOGGER.error("Assistant error: %s", exc)
				self.log.append(ConversationMessage(role=ASSISTANT, text=ERROR_REPLY))
				return Outcome.FAILED

			self.log.append(ConversationMessage(role=ASSISTANT, text=response.text or EMPTY_REPLY))
			return Outcome.COMPLETED
		finally:
			self.guard.exit(error)
