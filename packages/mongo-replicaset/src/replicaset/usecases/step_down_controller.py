"""Step-down controller use case."""

from __future__ import annotations

import logging

from replicaset.adapters.ports import AdminSessionPort
from replicaset.domain.retry import is_connection_error

logger = logging.getLogger(__name__)


class StepDownController:
    """Asks the connected primary to relinquish leadership.

    The stepped-down node stays ineligible for ``step_down_seconds``.
    The connection used for the command is very likely to be severed as
    the set elects a new primary; that is the expected outcome, not an
    error. Reconnecting afterwards is the caller's job.
    """

    def __init__(self, session: AdminSessionPort, step_down_seconds: int = 60) -> None:
        """Initialize the controller.

        Args:
            session: Caller-owned admin session attached to the primary.
            step_down_seconds: Minimum time before the node may be re-elected.
        """
        self._session = session
        self._step_down_seconds = step_down_seconds

    def step_down_primary(self) -> None:
        """Step down the primary.

        Raises:
            CommandFailedError: If the node is not primary or no secondary
                can take over.
        """
        logger.info(
            "Asking primary to step down for at least %d seconds",
            self._step_down_seconds,
        )
        try:
            self._session.run_command("replSetStepDown", self._step_down_seconds)
        except Exception as e:
            if not is_connection_error(e):
                raise
            logger.debug("connection dropped after replSetStepDown: %s", e)
