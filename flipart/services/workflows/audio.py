"""Audio upload and analysis.

The gateway describes and transcribes the recording; no signal processing is
performed, so the "enhanced" reference is the original file.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from flipart.config import AUDIO_MODEL, GATEWAY_TIMEOUT_SECONDS
from flipart.models.gateway_models import GatewayRequest, InlineBinaryPart, RequestEntry, TextPart
from flipart.models.session_models import (
	USER,
	AudioAnalysisResult,
	Outcome,
	SessionProfile,
	StagedAudio,
	WorkflowState,
)
from flipart.services.context_builder import to_data_url
from flipart.services.gateway.openai_gateway import AIGateway
from flipart.services.gateway.prompts import audio_instruction, audio_system_prompt
from flipart.services.single_flight import SingleFlightGuard
from flipart.services.workflows.timeouts import bounded_call

LOGGER = logging.getLogger(__name__)

FAILURE_PREFIX = "Audio processing failed: "
TRANSCRIPTION_FALLBACK = "Processing complete."


class AudioWorkflow:
	"""Stage one audio file and analyse it through the gateway."""

	def __init__(
		self,
		gateway: AIGateway,
		session: Callable[[], Optional[SessionProfile]],
		*,
		model: str = AUDIO_MODEL,
		timeout: Optional[float] = GATEWAY_TIMEOUT_SECONDS,
	) -> None:
		self.gateway = gateway
		self._session = session
		self.model = model
		self.timeout = timeout
		self.guard = SingleFlightGuard("audio")
		self.staged: Optional[StagedAudio] = None
		self.result: Optional[AudioAnalysisResult] = None

	@property
	def state(self) -> WorkflowState:
		return self.guard.state

	def stage(self, data: bytes, mime_type: str, filename: str = "recording") -> StagedAudio:
		"""Stage a new file and drop the previous analysis."""
		if not data:
			raise ValueError("Audio file is empty.")
		if not mime_type or not mime_type.lower().startswith("audio/"):
			raise ValueError(f"Unsupported audio content type: '{mime_type}'")
		self.staged = StagedAudio(data=data, mime_type=mime_type, filename=filename)
		self.result = None
		return self.staged

	def unstage(self) -> None:
		self.staged = None

	async def enhance(self) -> Outcome:
		"""Analyse the staged file and publish an AudioAnalysisResult."""
		staged = self.staged
		if staged is None:
			return Outcome.EMPTY
		if self.guard.busy:
			return Outcome.BUSY
		if self._session() is None:
			return Outcome.NEEDS_SIGN_IN
		if not self.guard.try_enter():
			return Outcome.BUSY

		error: Optional[str] = None
		try:
			source_ref = to_data_url(staged.data, staged.mime_type)
			request = GatewayRequest(
				model=self.model,
				entries=(
					RequestEntry(
						role=USER,
						parts=(
							InlineBinaryPart(staged.data, staged.mime_type),
							TextPart(audio_instruction()),
						),
					),
				),
				system_instruction=audio_system_prompt(),
			)
			response = await bounded_call(self.gateway.generate(request), self.timeout)

			if self.staged is not staged:
				# A different file was staged while this one was being analysed.
				LOGGER.info("Discarding analysis of %s; staged file changed", staged.filename)
				return Outcome.COMPLETED
			self.result = AudioAnalysisResult(
				original_ref=source_ref,
				enhanced_ref=source_ref,
				transcription=response.text or TRANSCRIPTION_FALLBACK,
			)
			return Outcome.COMPLETED
		except Exception as exc:
			LOGGER.error("Audio analysis failed: %s", exc)
			error = FAILURE_PREFIX + (str(exc) or exc.__class__.__name__)
			return Outcome.FAILED
		finally:
			self.guard.exit(error)
