"""Bounded retry for model calls.

Contains:
- root_cause: Walk an exception chain down to its origin
- is_transient: Decide whether a failure is worth retrying
- diagnose: Turn a failure into a hint for the user
- summarize: One-line "Type: message" description of the root cause
- RetryingInvoker: Retry a call on transient network failures
"""

import logging
import socket
import threading
import time
from typing import Callable, Optional, TypeVar

import httpx
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from diffscribe import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Root causes that usually succeed on a second try
TRANSIENT_ERRORS = (
    ConnectionRefusedError,
    TimeoutError,
    httpx.ConnectError,
    httpx.TimeoutException,
)


def root_cause(exc: BaseException) -> BaseException:
    """Follow __cause__ (then __context__) to the innermost exception."""
    seen = {id(exc)}
    current = exc
    while True:
        following = current.__cause__ or current.__context__
        if following is None or id(following) in seen:
            return current
        seen.add(id(following))
        current = following


def is_transient(exc: BaseException) -> bool:
    """Check whether the root cause of a failure is a refused connection or a timeout."""
    return isinstance(root_cause(exc), TRANSIENT_ERRORS)


def diagnose(exc: BaseException) -> str:
    """Translate a model failure into a troubleshooting hint.

    Args:
        exc: The failure raised by the model call.

    Returns:
        A human-readable hint.
    """
    root = root_cause(exc)
    message = f"{exc} {root}"

    if isinstance(root, socket.gaierror) or (
        isinstance(root, httpx.ConnectError) and "name" in str(root).lower()
    ):
        return (
            "Probable cause: the host name could not be resolved. "
            "Verify the base URL of the model server."
        )
    if isinstance(root, (ConnectionRefusedError, httpx.ConnectError)):
        return (
            "Probable cause: cannot connect to the server (connection refused). "
            "Check that the model server is running and listening on the configured port."
        )
    if isinstance(root, (TimeoutError, httpx.TimeoutException)):
        return (
            "Probable cause: the server responded too slowly (timeout). "
            "The model may be loading or the server busy; raise the timeout or retry."
        )
    if "not found" in message:
        return (
            "Probable cause: the requested model is not available on the server. "
            "Pull the model or switch to an existing model name."
        )
    return "Check the model server and application logs for details."


def summarize(exc: BaseException) -> str:
    root = root_cause(exc)
    return f"{type(root).__name__}: {root}"


class RetryCancelled(Exception):
    """Raised internally when the cancel event is set during a backoff sleep."""


class RetryingInvoker:
    """Invoke a callable, retrying transient network failures.

    Failures are retried only when their root cause is transient (see
    is_transient); anything else propagates on the spot. After the last
    attempt the final failure propagates unchanged. Backoff before retry n is
    ``base_backoff * 2 ** (n - 1)`` seconds.

    Setting ``cancel_event`` during a backoff sleep stops the loop and
    re-raises the failure that triggered the sleep.

    Attributes:
        attempts: Number of calls made by the latest invoke().
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        base_backoff: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.max_attempts = max_attempts or config.RETRY_MAX_ATTEMPTS
        self.base_backoff = config.RETRY_BASE_BACKOFF if base_backoff is None else base_backoff
        self.cancel_event = cancel_event
        self.attempts = 0
        self._last_error: Optional[BaseException] = None

    def _sleep(self, seconds: float) -> None:
        if self.cancel_event is None:
            time.sleep(seconds)
        elif self.cancel_event.wait(seconds):
            raise RetryCancelled()

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.warning(
            "Transient model failure (attempt %d/%d), retrying in %.2fs: %s",
            retry_state.attempt_number,
            self.max_attempts,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
            summarize(retry_state.outcome.exception()),
        )

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception(is_transient),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_backoff),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _attempt(self, fn: Callable[[], T]) -> T:
        self.attempts += 1
        try:
            return fn()
        except Exception as e:
            self._last_error = e
            raise

    def invoke(self, fn: Callable[[], T]) -> T:
        """Call fn, retrying on transient failures.

        Args:
            fn: Zero-argument callable performing the model call.

        Returns:
            The value returned by the first successful call.

        Raises:
            Exception: The original failure, when it is not transient, when
                attempts are exhausted, or when the retry was cancelled.
        """
        self.attempts = 0
        self._last_error = None
        try:
            return self._retrying()(self._attempt, fn)
        except RetryCancelled:
            logger.info("Retry cancelled after %d attempt(s)", self.attempts)
        # Raised outside the except block so the original chain stays intact
        raise self._last_error
