from __future__ import annotations

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class AspectRatio(str, Enum):
    """Aspect ratios supported by the image generator."""

    SQUARE = "1:1"
    PORTRAIT = "3:4"
    CLASSIC = "4:3"
    STORY = "9:16"
    WIDE = "16:9"

    @classmethod
    def parse(cls, value: str | AspectRatio) -> AspectRatio:
        """Return the enum member for `value` or raise ValueError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported aspect ratio '{value}'. Supported: {allowed}") from exc


@dataclass(frozen=True)
class Artifact:
    """A generated image kept in the history list.

    Attributes:
        id: Opaque unique identifier (uuid4 hex).
        url: Image reference, normally a `data:image/png;base64,...` URL.
        prompt: Prompt text the image was generated from.
        created_at: Epoch milliseconds when the artifact was created.
        aspect_ratio: Aspect ratio requested for the generation.
    """

    id: str
    url: str
    prompt: str
    created_at: int
    aspect_ratio: AspectRatio

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted wire keys."""
        return {
            "id": self.id,
            "url": self.url,
            "prompt": self.prompt,
            "timestamp": self.created_at,
            "aspectRatio": self.aspect_ratio.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artifact":
        """Build an Artifact from its persisted form.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("Artifact payload must be an object.")
        try:
            artifact_id = data["id"]
            url = data["url"]
            prompt = data["prompt"]
            created_at = data["timestamp"]
            ratio = data["aspectRatio"]
        except KeyError as exc:
            raise ValueError(f"Artifact payload missing field {exc}") from exc
        if not isinstance(artifact_id, str) or not artifact_id:
            raise ValueError("Artifact id must be a non-empty string.")
        if not isinstance(url, str) or not isinstance(prompt, str):
            raise ValueError("Artifact url and prompt must be strings.")
        if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
            raise ValueError("Artifact timestamp must be numeric.")
        if isinstance(created_at, float) and not math.isfinite(created_at):
            raise ValueError("Artifact timestamp must be finite.")
        return cls(
            id=artifact_id,
            url=url,
            prompt=prompt,
            created_at=int(created_at),
            aspect_ratio=AspectRatio.parse(ratio),
        )


def now_millis(clock: Optional[float] = None) -> int:
    """Return the current (or given) time as epoch milliseconds."""
    return int((time.time() if clock is None else clock) * 1000)
