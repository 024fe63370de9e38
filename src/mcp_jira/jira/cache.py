"""Compute-once cache for the instance-specific Epic Link field id."""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("mcp-jira.cache")


class EpicLinkFieldCache:
    """Lock-guarded cell holding the resolved Epic Link field id.

    The first ``resolve`` call runs discovery; concurrent callers wait on the
    lock instead of running their own discovery. A failed discovery leaves
    the cell empty so the next call tries again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._field_id: str | None = None

    @property
    def value(self) -> str | None:
        return self._field_id

    def resolve(self, loader: Callable[[], str]) -> str:
        if self._field_id is not None:
            return self._field_id
        with self._lock:
            if self._field_id is None:
                self._field_id = loader()
                logger.debug(f"Cached Epic Link field id {self._field_id}")
            return self._field_id

    def clear(self) -> None:
        with self._lock:
            self._field_id = None
