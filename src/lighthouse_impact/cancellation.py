from __future__ import annotations

import asyncio
import signal
from typing import Awaitable, Iterable, Optional, TypeVar

from .errors import OperationCancelled

T = TypeVar("T")


class CancellationContext:
    """
    Cooperative cancellation passed explicitly down the call chain.

    Every suspension point (process, HTTP call) goes through ``guard`` so a
    cancel request abandons the pending operation instead of waiting for it.
    """

    def __init__(self) -> None:
        self._event: Optional[asyncio.Event] = None
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def _get_event(self) -> asyncio.Event:
        if self._event is None:
            self._event = asyncio.Event()
            if self._reason is not None:
                self._event.set()
        return self._event

    def cancel(self, reason: str = "cancelled") -> None:
        if self._reason is not None:
            return
        self._reason = reason
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._reason is not None:
            raise OperationCancelled(self._reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless cancellation fires first."""
        if self._reason is not None:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCancelled(self._reason)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._get_event().wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            raise OperationCancelled(self._reason or "cancelled")
        return task.result()

    def install_signal_handlers(
        self, signals: Iterable[signal.Signals] = (signal.SIGINT, signal.SIGTERM)
    ) -> None:
        loop = asyncio.get_running_loop()
        for sig in signals:
            try:
                loop.add_signal_handler(sig, self.cancel, f"received {sig.name}")
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform/loop; leave default handling.
                continue
