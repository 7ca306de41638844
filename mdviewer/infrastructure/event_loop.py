"""
Background Event Loop

Runs one asyncio event loop in a daemon thread for the lifetime of the
process. The synchronous Flask layer hands coroutines to it, either waiting
for the result (viewer, health, admin API) or fire-and-forget (inbound
events, which must be acknowledged before the work finishes).

Keeping a single loop matters: redis.asyncio and httpx connection pools are
bound to the loop they were created on.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Coroutine, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundEventLoop:
    """Owns an event loop running in a dedicated thread."""

    def __init__(self, name: str = "mdviewer-loop"):
        self.name = name
        self.loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "BackgroundEventLoop":
        """Start the loop thread (idempotent)."""
        if self.is_running:
            return self

        ready = threading.Event()

        def _run() -> None:
            asyncio.set_event_loop(self.loop)
            self.loop.call_soon(ready.set)
            self.loop.run_forever()

        self._thread = threading.Thread(target=_run, name=self.name, daemon=True)
        self._thread.start()
        ready.wait()
        logger.debug(f"Background event loop {self.name} started")
        return self

    def run(self, coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        """
        Run a coroutine on the loop and block until it finishes.

        Args:
            coro: Coroutine to run
            timeout: Seconds to wait for the result (default: no limit)

        Returns:
            The coroutine's result; its exceptions propagate unchanged
        """
        if not self.is_running:
            coro.close()
            raise RuntimeError("Background event loop is not running")
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout)

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """
        Schedule a coroutine without waiting for it.

        Unhandled exceptions are logged when the coroutine finishes.
        """
        if not self.is_running:
            coro.close()
            raise RuntimeError("Background event loop is not running")

        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._on_done)
        return future

    def _on_done(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Background task failed", exc_info=error)

    def drain(self, timeout: float = 10.0) -> None:
        """Wait (up to `timeout` per task) for submitted coroutines to finish."""
        with self._lock:
            pending = list(self._pending)
        for future in pending:
            try:
                future.result(timeout)
            except Exception:
                # already logged by _on_done
                pass

    def stop(self, timeout: float = 10.0) -> None:
        """
        Let in-flight tasks finish (up to `timeout`), then stop the loop.
        """
        if not self.is_running:
            return

        self.drain(timeout)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout)
        self._thread = None
        if not self.loop.is_running():
            self.loop.close()
        logger.debug(f"Background event loop {self.name} stopped")
