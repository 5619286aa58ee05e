"""
Cancellable research requests.

The Gemini call itself cannot be interrupted once sent. Cancelling a request
therefore only guarantees that its outcome is never applied: the token is
checked when the call returns, and the completion guard refuses any result
that arrives after cancellation.
"""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Optional

from . import research
from .errors import AnalysisCancelled

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


class CancellationToken:
    """Cooperative cancellation signal shared between caller and worker."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnalysisCancelled()


class CompletionGuard:
    """
    Single-assignment slot for a request outcome.

    The first successful ``try_complete``/``try_fail`` wins. Once the token
    is cancelled, every later attempt is rejected.
    """

    def __init__(self, token: CancellationToken) -> None:
        self._token = token
        self._lock = threading.Lock()
        self._settled = False
        self._value: Any = None
        self._error: Optional[BaseException] = None

    def _settle(self, value: Any, error: Optional[BaseException]) -> bool:
        with self._lock:
            if self._settled or self._token.cancelled:
                return False
            self._settled = True
            self._value = value
            self._error = error
            return True

    def try_complete(self, value: Any) -> bool:
        return self._settle(value, None)

    def try_fail(self, error: BaseException) -> bool:
        return self._settle(None, error)

    @property
    def settled(self) -> bool:
        with self._lock:
            return self._settled

    def result(self) -> Any:
        """Return the settled value, or raise the settled error."""
        with self._lock:
            if not self._settled:
                if self._token.cancelled:
                    raise AnalysisCancelled()
                raise RuntimeError("Request has not completed yet.")
            if self._error is not None:
                raise self._error
            return self._value


class ResearchTask:
    """A request running in the background with a token and a completion guard."""

    def __init__(
        self,
        fn: Callable[[CancellationToken], Any],
        executor: ThreadPoolExecutor,
        request_id: Optional[str] = None,
    ) -> None:
        self.request_id = request_id or uuid.uuid4().hex
        self.token = CancellationToken()
        self.guard = CompletionGuard(self.token)
        self._future: Future = executor.submit(self._run, fn)

    def _run(self, fn: Callable[[CancellationToken], Any]) -> None:
        try:
            value = fn(self.token)
        except AnalysisCancelled:
            logger.info("Request %s cancelled, discarding response", self.request_id)
            return
        except Exception as exc:
            if not self.guard.try_fail(exc):
                logger.info("Request %s failed after cancellation, ignoring: %s", self.request_id, exc)
            return
        if not self.guard.try_complete(value):
            logger.info("Request %s finished after cancellation, discarding result", self.request_id)

    def cancel(self) -> None:
        logger.info("Cancelling request %s", self.request_id)
        self.token.cancel()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def done(self) -> bool:
        """True once an outcome is available or the request was cancelled."""
        return self.token.cancelled or self.guard.settled

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker returns; returns False on timeout."""
        try:
            self._future.result(timeout=timeout)
        except FuturesTimeoutError:
            return False
        return True

    def outcome(self) -> Any:
        return self.guard.result()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="research")
        return _executor


def start_research(
    query: str,
    output_format: str = "detailed",
    *,
    executor: Optional[ThreadPoolExecutor] = None,
    request_id: Optional[str] = None,
    **kwargs: Any,
) -> ResearchTask:
    """Submit ``research.analyse_topic`` in the background and return its task."""
    def _call(token: CancellationToken) -> Any:
        return research.analyse_topic(query, output_format, cancel_token=token, **kwargs)

    return ResearchTask(_call, executor or _get_executor(), request_id=request_id)


__all__ = [
    "CancellationToken",
    "CompletionGuard",
    "ResearchTask",
    "start_research",
]
