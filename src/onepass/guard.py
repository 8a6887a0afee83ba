"""Best-effort protection of the vault file against interrupts.

A signal that arrives while the vault is being rewritten should not cut the
write short. :class:`OperationGuard` tracks two flags, *prompting* (blocked on
user input, nothing to protect) and *operation in flight* (the file may be
mid-rewrite). Its signal handler exits at once in the first case and, in the
second, waits a bounded time for the operation to finish.

Python only runs signal handlers on the main thread, so vault operations are
executed on a worker thread through :meth:`OperationGuard.run`; the main
thread stays free to run the handler while the worker completes the rewrite.

This is not a transaction log. A rewrite that outlasts the wait can still be
lost, and the handler then tells the operator to purge and re-initialise.
"""

from __future__ import annotations

import logging
import signal
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Sequence, TypeVar

from . import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class OperationGuard:
    """Shared, thread-safe in-flight state for vault operations."""

    def __init__(
        self,
        poll_interval: float = config.INTERRUPT_POLL_INTERVAL,
        max_polls: int = config.INTERRUPT_MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep
        self._prompting = threading.Event()
        self._in_flight = threading.Event()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def prompting_active(self) -> bool:
        return self._prompting.is_set()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.is_set()

    @contextmanager
    def prompting(self) -> Iterator[None]:
        """Mark the process as blocked on user input."""
        self._prompting.set()
        try:
            yield
        finally:
            self._prompting.clear()

    @contextmanager
    def operation(self) -> Iterator[None]:
        """Mark a vault read-modify-rewrite as in flight."""
        self._in_flight.set()
        try:
            yield
        finally:
            self._in_flight.clear()

    def wait_for_idle(self) -> bool:
        """Poll until no operation is in flight; ``False`` if it never clears."""
        for _ in range(self.max_polls):
            if not self._in_flight.is_set():
                return True
            self._sleep(self.poll_interval)
        return not self._in_flight.is_set()

    # ------------------------------------------------------------------
    # Signal handling
    # ------------------------------------------------------------------

    def handle_interrupt(self, signum: int, frame: Any = None) -> None:
        code = 128 + signum
        if self._prompting.is_set():
            logger.debug("Interrupted while waiting for input; exiting")
            raise SystemExit(code)

        if not self.wait_for_idle():
            logger.warning(
                "The vault operation did not finish within %.0f seconds; the vault file may be "
                "corrupt. If later commands fail, run 'onepass purge' and 'onepass init'.",
                self.poll_interval * self.max_polls,
            )
        raise SystemExit(code)

    @contextmanager
    def installed(self, signals: Sequence[int] = DEFAULT_SIGNALS) -> Iterator["OperationGuard"]:
        """Route *signals* to :meth:`handle_interrupt`, restoring the old handlers after."""
        previous = {sig: signal.signal(sig, self.handle_interrupt) for sig in signals}
        try:
            yield self
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run *func* on a worker thread and return its result.

        Exceptions raised by *func* are re-raised in the calling thread.
        """
        outcome: dict[str, Any] = {}

        def target() -> None:
            try:
                outcome["result"] = func(*args, **kwargs)
            except BaseException as exc:  # noqa: BLE001 - re-raised below
                outcome["error"] = exc

        worker = threading.Thread(target=target, name="onepass-worker", daemon=True)
        worker.start()
        # Short joins keep the main thread responsive to signals.
        while worker.is_alive():
            worker.join(0.1)

        error: Optional[BaseException] = outcome.get("error")
        if error is not None:
            raise error
        return outcome["result"]
