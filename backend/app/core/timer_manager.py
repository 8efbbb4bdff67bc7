import asyncio
import logging
from typing import Dict, List, Optional

from ..models.recipe import Recipe
from .config import get_settings
from .session_store import SessionStore
from .timer_driver import Announce, TimerDriver

log = logging.getLogger(__name__)


class TimerManager:
    """Runs one polling driver task per attached observer."""

    def __init__(self, store: SessionStore):
        self.store = store
        self.settings = get_settings()
        self.tasks: Dict[str, asyncio.Task] = {}

    @property
    def observers(self) -> List[str]:
        return [name for name, task in self.tasks.items() if not task.done()]

    def attach(self, observer_id: str, recipe: Recipe, announce: Optional[Announce] = None) -> asyncio.Task:
        self.detach(observer_id)
        driver = TimerDriver(
            self.store,
            recipe,
            poll_interval=self.settings.poll_interval_ms / 1000,
            min_elapsed_ms=self.settings.min_tick_ms,
            announce=announce,
            name=observer_id,
        )
        task = asyncio.create_task(driver.run())
        self.tasks[observer_id] = task
        log.info("Observer %s attached to %s", observer_id, recipe.id)
        return task

    def detach(self, observer_id: str) -> None:
        # Only the polling stops; the shared session is left as is.
        task = self.tasks.pop(observer_id, None)
        if task is not None:
            task.cancel()
            log.info("Observer %s detached", observer_id)

    async def cancel_all(self):
        for task in self.tasks.values():
            task.cancel()
        await asyncio.gather(*self.tasks.values(), return_exceptions=True)
        self.tasks.clear()
