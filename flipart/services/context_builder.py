"""Serialize conversation history into an ordered multi-part request.

Every prior message becomes exactly one entry, in log order, followed by a
single `user` entry for the turn being sent. Nothing is reordered, merged or
dropped, so the payload grows with every turn of the conversation; callers
that need a bound must truncate the log themselves.
"""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional, Sequence, Tuple

from flipart.models.gateway_models import InlineBinaryPart, Part, RequestEntry, TextPart
from flipart.models.session_models import USER, ConversationMessage

ATTACHMENT_MIME_TYPE = "image/png"
ATTACHMENT_TEXT_FALLBACK = "Analyze this image."
NEW_ATTACHMENT_PROMPT = "What do you think of this generation?"


def decode_data_url(ref: str) -> bytes:
    """Return the raw payload bytes of a base64 data URL.

    Raises:
        ValueError: If `ref` is not a base64 data URL (for example a plain
            http(s) locator) or its payload is not valid base64.
    """
    if not isinstance(ref, str) or not ref.startswith("data:") or "," not in ref:
        raise ValueError("Reference is not a data URL and cannot be inlined.")
    header, encoded = ref.split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URLs can be inlined.")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Data URL payload is not valid base64.") from exc


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _message_parts(message: ConversationMessage) -> Tuple[Part, ...]:
    if message.attachment:
        return (
            InlineBinaryPart(decode_data_url(message.attachment), ATTACHMENT_MIME_TYPE),
            TextPart(message.text or ATTACHMENT_TEXT_FALLBACK),
        )
    return (TextPart(message.text),)


def build_conversation_entries(
    log: Sequence[ConversationMessage],
    user_input: str,
    attachment: Optional[str] = None,
) -> Tuple[RequestEntry, ...]:
    """Build the request entries for sending `user_input` after `log`.

    Args:
        log: Conversation as it stood before the new turn was appended.
        user_input: Text of the new turn (may be empty when an image is attached).
        attachment: Data URL of the staged image, if any.

    Returns:
        `len(log) + 1` entries; the last one always has role `user`.

    Raises:
        ValueError: If any attachment cannot be decoded into inline bytes.
    """
    entries: List[RequestEntry] = [
        RequestEntry(role=message.role, parts=_message_parts(message)) for message in log
    ]

    current: List[Part] = []
    if attachment:
        current.append(InlineBinaryPart(decode_data_url(attachment), ATTACHMENT_MIME_TYPE))
    current.append(TextPart(user_input or (NEW_ATTACHMENT_PROMPT if attachment else "")))
    entries.append(RequestEntry(role=USER, parts=tuple(current)))

    return tuple(entries)
