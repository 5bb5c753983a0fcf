"""Background replication of the wiki with its remote.

The service runs `Store.sync` as an asyncio task that can be stopped
deterministically, e.g. on shutdown or at the end of a test:

```python
async with SyncService(store, interval=30):
    await serve_wiki(store)
```
"""

import asyncio
import logging
from types import TracebackType

from .store import Store

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "SyncService",
]

TASK_NAME = "exocortex-sync"


class SyncService:
    """Owns the background task that periodically pulls and pushes a store."""

    def __init__(self, store: Store, interval: float) -> None:
        """Initialize the service for the store and interval in seconds."""
        if interval <= 0:
            raise ValueError(f"Sync interval must be positive: {interval}")
        self._store = store
        self._interval = interval
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Return True while the sync task is active."""
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        """Start syncing in the background and return the task."""
        if self.running:
            raise RuntimeError("Sync is already running")
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(
            self._store.sync(self._interval, self._stop), name=TASK_NAME
        )
        self._task.add_done_callback(self._task_done)
        _LOGGER.debug(
            "Started sync of %s every %ss", self._store.repo, self._interval
        )
        return self._task

    def _task_done(self, task: asyncio.Task[None]) -> None:
        """Callback when the sync task exits."""
        try:
            # This will raise any exception that occurred in the task
            task.result()
        except asyncio.CancelledError:
            pass
        except Exception as e:
            _LOGGER.error("Sync task failed: %s", e)

    async def stop(self) -> None:
        """Signal the sync loop to exit and wait for the current cycle to finish."""
        if self._task is None:
            return
        self._stop.set()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
        _LOGGER.debug("Stopped sync of %s", self._store.repo)

    async def __aenter__(self) -> "SyncService":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
