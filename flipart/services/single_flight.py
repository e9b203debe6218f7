"""Per-workflow busy flag guarding against overlapping runs."""

from __future__ import annotations

import logging
from typing import Optional

from flipart.models.session_models import WorkflowState

LOGGER = logging.getLogger(__name__)


class SingleFlightGuard:
	"""Allow at most one in-flight operation for one workflow kind.

	All callers run on the same event loop, so a plain flag is enough: there is
	no await between checking and setting it.
	"""

	def __init__(self, name: str) -> None:
		self.name = name
		self.state = WorkflowState()

	@property
	def busy(self) -> bool:
		return self.state.busy

	@property
	def last_error(self) -> Optional[str]:
		return self.state.last_error

	def try_enter(self) -> bool:
		"""Mark the workflow busy. Returns False, changing nothing, if it already is."""
		if self.state.busy:
			LOGGER.debug("%s workflow busy; ignoring new request", self.name)
			return False
		self.state.busy = True
		self.state.last_error = None
		return True

	def exit(self, error: Optional[str] = None) -> None:
		"""Release the workflow and record the outcome's error, if any."""
		self.state.busy = False
		self.state.last_error = error

	def dismiss_error(self) -> None:
		self.state.last_error = None
