"""Helpers to extract data from Responses and Images API output."""

from __future__ import annotations

from typing import Any, Dict, Optional


def extract_text(response: Any) -> str:
	"""Return the aggregated output text, or the first output_text entry."""
	text = getattr(response, "output_text", None)
	if text:
		return text
	for item in getattr(response, "output", None) or []:
		if getattr(item, "type", None) != "message":
			continue
		for content in getattr(item, "content", None) or []:
			if getattr(content, "type", None) == "output_text":
				return getattr(content, "text", "") or ""
	return ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
	"""Return token usage if present."""
	usage = getattr(response, "usage", None)
	return {
		"input_tokens": getattr(usage, "input_tokens", None) if usage else None,
		"output_tokens": getattr(usage, "output_tokens", None) if usage else None,
	}


def extract_image_ref(response: Any) -> Optional[str]:
	"""Return a renderable reference for the first generated image.

	Only base64 payloads are accepted; they become PNG data URLs. A result
	carrying just a hosted URL yields None.
	"""
	data = getattr(response, "data", None) or []
	if not data:
		return None
	first = data[0]
	b64 = getattr(first, "b64_json", None)
	if b64:
		return f"data:image/png;base64,{b64}"
	return None
