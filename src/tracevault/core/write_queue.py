"""Per-project serialization of artifact store writes.

Commits and baseline creation for one project run strictly one at a time so a
baseline never observes a half-finished commit.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Registry of write queues: project_id -> WriteQueue
_queues: dict[str, "WriteQueue"] = {}


class WriteQueue:
    """FIFO gate allowing one in-flight write operation."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        self._lock = asyncio.Lock()
        self._waiting = 0

    @property
    def waiting(self) -> int:
        """Operations queued behind the one currently running."""
        return self._waiting

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "write") -> T:
        """Run operation once all earlier queued operations have finished."""
        self._waiting += 1
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1
        try:
            logger.debug("Project %s: running %s", self.project_id, label)
            return await operation()
        finally:
            self._lock.release()


def write_queue_for(project_id: str) -> WriteQueue:
    """Get the write queue for a project, creating it on first use."""
    queue = _queues.get(project_id)
    if queue is None:
        queue = WriteQueue(project_id)
        _queues[project_id] = queue
    return queue
