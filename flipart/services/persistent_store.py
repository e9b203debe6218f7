"""Durable storage for the artifact history and the active session profile.

Values are JSON strings kept under two keys of the KV table:

- `history`: array of artifacts, newest first.
- `session`: the signed-in profile, absent when signed out.

Each save overwrites the whole value. Anything that cannot be parsed back
into the expected structure is treated as absent so a corrupted value only
loses that field and never blocks startup.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence, Tuple

from flipart.dal.kv_dal import KeyValueDAL
from flipart.models.artifact import Artifact
from flipart.models.session_models import SessionProfile

LOGGER = logging.getLogger(__name__)

HISTORY_KEY = "history"
SESSION_KEY = "session"

# Raised by json.loads or model parsing for corrupted values: deep nesting
# exhausts the decoder's recursion, non-finite numbers overflow int().
UNREADABLE_ERRORS = (ValueError, TypeError, OverflowError, RecursionError)


class PersistentStore:
    """Load and save history/session through a `KeyValueDAL`."""

    def __init__(self, dal: KeyValueDAL) -> None:
        self._dal = dal

    async def load(self) -> Tuple[List[Artifact], Optional[SessionProfile]]:
        """Return `(history, session)`, falling back to empty/absent values."""
        return await self.load_history(), await self.load_session()

    async def load_history(self) -> List[Artifact]:
        raw = await self._dal.get(HISTORY_KEY)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Stored history is not a list.")
            history = [Artifact.from_dict(item) for item in payload]
        except UNREADABLE_ERRORS as exc:
            LOGGER.warning("Discarding unreadable stored history: %s", exc)
            return []

        seen = set()
        unique: List[Artifact] = []
        for artifact in history:
            if artifact.id in seen:
                LOGGER.warning("Dropping duplicate artifact id %s from stored history", artifact.id)
                continue
            seen.add(artifact.id)
            unique.append(artifact)
        return unique

    async def load_session(self) -> Optional[SessionProfile]:
        raw = await self._dal.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            return SessionProfile.from_dict(json.loads(raw))
        except UNREADABLE_ERRORS as exc:
            LOGGER.warning("Discarding unreadable stored session: %s", exc)
            return None

    async def save_history(self, history: Sequence[Artifact]) -> None:
        """Overwrite the stored history with `history`."""
        payload = json.dumps([artifact.to_dict() for artifact in history], ensure_ascii=False)
        await self._dal.put(HISTORY_KEY, payload)

    async def save_session(self, profile: SessionProfile) -> None:
        await self._dal.put(SESSION_KEY, json.dumps(profile.to_dict(), ensure_ascii=False))

    async def clear_session(self) -> None:
        await self._dal.delete(SESSION_KEY)
