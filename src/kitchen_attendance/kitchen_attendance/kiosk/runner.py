from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KioskRunner:
    """Owns the kiosk event loop on a daemon thread.

    Flask request threads hand coroutines over with `run()`, so the workflow,
    its device tasks and the stores are only ever touched from this one loop.
    """

    def __init__(self, *, call_timeout: float = 60.0) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None
        self._call_timeout = call_timeout

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._worker, name="kiosk-loop", daemon=True)
        self._thread.start()

    def _worker(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run(self, call: Awaitable[T], *, timeout: float | None = None) -> T:
        if self._thread is None:
            raise RuntimeError("KioskRunner is not started")
        future = asyncio.run_coroutine_threadsafe(call, self._loop)
        return future.result(timeout if timeout is not None else self._call_timeout)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._thread = None
        self._loop.close()
        logger.info("kiosk loop stopped")
