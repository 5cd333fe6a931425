# File: src/ledger_gateway/monitoring/supervisor.py

import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

@dataclass(frozen=True)
class ThreadEvent:
    """Termination report sent by a background thread."""
    thread_name: str
    failed: bool
    error: Optional[str] = None

class Supervisor:
    """Consumes termination reports from background threads.

    Threads hold the `events` queue and put exactly one ThreadEvent on it when
    they stop. A failure event invokes `on_failure`; restarting the process is
    left to whatever runs it.
    """

    def __init__(self, on_failure: Optional[Callable[[ThreadEvent], None]] = None):
        self.events: "queue.Queue[Optional[ThreadEvent]]" = queue.Queue()
        self.on_failure = on_failure
        self.received: List[ThreadEvent] = []
        self._thread: Optional[threading.Thread] = None

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self.watch, name="thread-supervisor", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0):
        if self._thread is None:
            return
        self.events.put(None)
        self._thread.join(timeout)
        self._thread = None

    def watch(self):
        """Block on the event queue until a None sentinel arrives."""
        while True:
            event = self.events.get()
            if event is None:
                return
            self.handle(event)

    def handle(self, event: ThreadEvent):
        self.received.append(event)
        if not event.failed:
            logger.info(f"Thread {event.thread_name} stopped")
            return

        logger.critical(f"Thread {event.thread_name} terminated: {event.error}")
        if self.on_failure is not None:
            self.on_failure(event)
