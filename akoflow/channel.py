"""Process-wide queue that hands activities from the orchestrator to workers."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_CAPACITY = 1000


@dataclass
class DataChannel:
    """A message sent through the workflow channel."""

    namespace: str = ""
    job: Any = None
    id: int = 0


class Manager:
    """Owns the bounded workflow channel."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.workflow_channel: queue.Queue[DataChannel] = queue.Queue(maxsize=capacity)


_instance: Optional[Manager] = None
_lock = threading.Lock()


def get_instance() -> Manager:
    """Return the shared :class:`Manager`, creating it on first use."""
    global _instance
    if _instance is None:
        with _lock:
            if _instance is None:
                _instance = Manager()
    return _instance