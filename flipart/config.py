"""Runtime configuration resolved from the environment.

Values are read once at import time, after `.env` (if present) has been
loaded, and consumed as module constants by the gateway, the workflows and
the application factory.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _timeout_from_env(raw: Optional[str], default: float = 120.0) -> Optional[float]:
    """Parse a timeout in seconds; zero or negative disables the bound."""
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"GATEWAY_TIMEOUT_SECONDS must be a number, got {raw!r}") from exc
    return value if value > 0 else None


# Model used by the conversational assistant.
CHAT_MODEL = os.getenv("OPENAI_MODEL", "gpt-5")

# Model used for audio analysis; must accept inline audio input.
AUDIO_MODEL = os.getenv("OPENAI_AUDIO_MODEL", "gpt-4o-audio-preview")

# Model used for text-to-image synthesis.
IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1")

# Upper bound for one gateway call. None means wait indefinitely.
GATEWAY_TIMEOUT_SECONDS = _timeout_from_env(os.getenv("GATEWAY_TIMEOUT_SECONDS"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
