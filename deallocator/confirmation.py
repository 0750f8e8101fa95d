"""Operator confirmation before any resource is touched."""

import logging
import time
from collections.abc import Callable

import typer

from deallocator.utils.config import DEFAULT_CONFIRMATION_TOKEN

logger = logging.getLogger(__name__)


class ConfirmationGate:
    """Asks the operator to confirm a run with an exact token.

    The answer must match the token exactly, including case. Anything else,
    an empty answer or an interrupted prompt aborts the run.
    """

    def __init__(
        self,
        token: str = DEFAULT_CONFIRMATION_TOKEN,
        prompt: Callable[[str], str] | None = None,
        grace_period_seconds: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.token = token
        self._prompt = prompt or self._typer_prompt
        self.grace_period_seconds = grace_period_seconds
        self._sleep = sleep

    @staticmethod
    def _typer_prompt(message: str) -> str:
        return typer.prompt(message, default="", show_default=False)

    def confirm_proceed(self) -> bool:
        """Block for operator input; True only on an exact token match."""
        try:
            answer = self._prompt(f"Type {self.token} to proceed")
        except (EOFError, KeyboardInterrupt, typer.Abort):
            logger.warning("Confirmation prompt interrupted")
            return False

        if answer != self.token:
            logger.warning("Confirmation not given, aborting without changes")
            return False

        logger.info("Confirmation received")
        return True

    def grace_pause(self) -> None:
        """Wait the configured grace period before the first action."""
        if self.grace_period_seconds <= 0:
            return
        logger.info(
            f"Starting in {self.grace_period_seconds}s, press Ctrl+C to interrupt"
        )
        self._sleep(self.grace_period_seconds)


class PresetConfirmation(ConfirmationGate):
    """Gate answered up front, e.g. from a ``--yes`` option."""

    def __init__(self, answer: str, token: str = DEFAULT_CONFIRMATION_TOKEN, **kwargs):
        super().__init__(token=token, prompt=lambda _message: answer, **kwargs)
