"""Provider-agnostic request/response shapes exchanged with the AI gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class TextPart:
    """Plain text content."""

    text: str


@dataclass(frozen=True)
class InlineBinaryPart:
    """Raw bytes sent inline, tagged with their MIME type."""

    data: bytes
    mime_type: str

    def __repr__(self) -> str:
        return f"InlineBinaryPart(mime_type={self.mime_type!r}, size={len(self.data)})"


Part = Union[TextPart, InlineBinaryPart]


@dataclass(frozen=True)
class RequestEntry:
    """One role-tagged turn of a multi-part request."""

    role: str
    parts: Tuple[Part, ...]


@dataclass(frozen=True)
class GatewayRequest:
    """A single generate call.

    Attributes:
        model: Model identifier passed to the provider.
        entries: Ordered turns, oldest first.
        system_instruction: Optional free-text instruction for the model.
    """

    model: str
    entries: Tuple[RequestEntry, ...]
    system_instruction: Optional[str] = None


@dataclass(frozen=True)
class GatewayResponse:
    text: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    latency: float = field(default=0.0, compare=False)
