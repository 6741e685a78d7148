import logging
import threading

import pytest


class WaitingCallers(logging.Handler):
    """Counts callers the store has parked behind an in-flight construction."""

    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.count = 0
        self._changed = threading.Condition()

    def emit(self, record: logging.LogRecord) -> None:
        if record.getMessage().startswith("Waiting on in-flight construction"):
            with self._changed:
                self.count += 1
                self._changed.notify_all()

    def wait_for(self, n: int, timeout: float = 5) -> bool:
        with self._changed:
            return self._changed.wait_for(lambda: self.count >= n, timeout)


@pytest.fixture
def waiting_callers():
    logger = logging.getLogger("ctxbind._store")
    handler = WaitingCallers()
    level = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(level)
