"""Cooperative cancellation for the blocking steps of a session."""

import logging
import signal
from typing import Optional

from .errors import OperationCancelled


logger = logging.getLogger(__name__)


class CancelToken:
    """
    Flag checked at each blocking-step boundary.

    Cancellation is all-or-nothing: once set, the next checkpoint raises
    OperationCancelled and the session ends without attempting anything else.
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def check(self, step: str = "") -> None:
        """Raise OperationCancelled if cancellation was requested."""
        if self._cancelled:
            logger.info(f"Cancelled before {step or 'next step'}")
            raise OperationCancelled()


def install_sigint_handler(token: CancelToken):
    """
    Route Ctrl-C through the token.

    The flag is set first so later checkpoints refuse to run, then
    KeyboardInterrupt interrupts whatever call is currently blocking.
    """
    def _handler(signum, frame):
        token.cancel()
        raise KeyboardInterrupt

    return signal.signal(signal.SIGINT, _handler)


def restore_sigint_handler(handler) -> None:
    if handler is not None:
        signal.signal(signal.SIGINT, handler)


def checkpoint(token: Optional[CancelToken], step: str = "") -> None:
    if token is not None:
        token.check(step)
