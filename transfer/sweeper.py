import threading
from datetime import datetime, UTC
from typing import Optional, TYPE_CHECKING

from logging_config import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from transfer.store import TransferStore

logger = get_logger(__name__)


class SweepWorker:
    """
    Periodically evicts expired transfers.

    IMPORTANT:
    - The store remains the single source of truth; this worker only calls store.sweep().
    - A failing tick is logged and the next tick still runs.
    """

    INTERVAL = 60 * 60  # seconds
    MAX_AGE = 24 * 60 * 60  # seconds

    def __init__(
            self,
            store: "TransferStore",
            interval: float | None = None,
            max_age: float | None = None,
    ):
        self._store = store
        self.interval = interval or self.INTERVAL
        self.max_age = max_age or self.MAX_AGE
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="TransferSweep", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running = False
        self._stop_event.set()

    def is_running(self) -> bool:
        return self._running

    def tick(self) -> list:
        try:
            removed = self._store.sweep(datetime.now(UTC), self.max_age)
        except Exception:
            logger.exception("Transfer sweep failed")
            return []
        if removed:
            logger.info("Sweep removed %d expired transfer(s)", len(removed))
        return removed

    def _run(self) -> None:
        # wait() returns True once stop() is called
        while self._running and not self._stop_event.wait(self.interval):
            self.tick()
