"""Prompt helpers for the assistant and audio workflows."""

from __future__ import annotations


def assistant_system_prompt(display_name: str) -> str:
	"""Return the assistant persona instruction addressed to the signed-in user."""
	return (
		"You are the FlipArt AI Assistant. You help users with prompt engineering and art analysis. "
		"When an image is provided, analyze its composition, style, and quality. "
		"If the user asks for prompt improvements, give them clear, descriptive keywords. "
		f"Current user: {display_name}."
	)


def audio_system_prompt() -> str:
	"""Return the audio engineer persona instruction."""
	return (
		"You are an AI Audio Engineer. "
		"You specialize in noise reduction, speech enhancement, and audio analysis."
	)


def audio_instruction() -> str:
	"""Return the fixed request sent alongside an uploaded recording."""
	return (
		"Remove the background noise from this voice recording. "
		"Describe the audio quality, transcribe the spoken words accurately, "
		"and simulate an 'enhanced' version summary."
	)
