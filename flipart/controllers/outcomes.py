"""Translate workflow outcomes into HTTP responses."""

from typing import Any, Dict

from fastapi import HTTPException

from flipart.models.session_models import Outcome, WorkflowState

SIGN_IN_REQUIRED = "Sign in to continue."


def outcome_payload(outcome: Outcome, state: WorkflowState) -> Dict[str, Any]:
    """Return the outcome plus workflow state, or raise 401 when signed out."""
    if outcome is Outcome.NEEDS_SIGN_IN:
        raise HTTPException(status_code=401, detail=SIGN_IN_REQUIRED)
    return {"outcome": outcome.value, "busy": state.busy, "error": state.last_error}
