"""Session and workflow domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from flipart.models.artifact import Artifact


USER = "user"
ASSISTANT = "assistant"


@dataclass(frozen=True)
class SessionProfile:
	"""Signed-in user shown to the assistant by display name."""

	display_name: str
	email: str

	def to_dict(self) -> Dict[str, str]:
		return {"name": self.display_name, "email": self.email}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "SessionProfile":
		"""Build a profile from its persisted form or raise ValueError."""
		if not isinstance(data, dict):
			raise ValueError("Session payload must be an object.")
		name = data.get("name")
		email = data.get("email")
		if not isinstance(name, str) or not isinstance(email, str):
			raise ValueError("Session name and email must be strings.")
		return cls(display_name=name, email=email)


@dataclass(frozen=True)
class ConversationMessage:
	"""One chat turn. `attachment` is the image reference echoed for display."""

	role: str
	text: str
	attachment: Optional[str] = None


@dataclass(frozen=True)
class StagedAudio:
	"""Audio file waiting for analysis."""

	data: bytes
	mime_type: str
	filename: str


@dataclass(frozen=True)
class AudioAnalysisResult:
	"""Outcome of one audio analysis.

	Both references point at the unmodified source file; no signal processing
	is applied.
	"""

	original_ref: str
	enhanced_ref: str
	transcription: str


@dataclass
class WorkflowState:
	"""Observable state of one workflow kind."""

	busy: bool = False
	last_error: Optional[str] = None


class Outcome(str, Enum):
	"""Result of invoking a workflow operation."""

	COMPLETED = "completed"
	FAILED = "failed"
	BUSY = "busy"
	EMPTY = "empty"
	NEEDS_SIGN_IN = "needs_sign_in"


def attachment_ref(artifact: Optional[Artifact]) -> Optional[str]:
	return artifact.url if artifact is not None else None
