"""
One polling observer of a cooking session.

A driver never keeps its own notion of elapsed time: every poll asks the
store to apply whatever has passed since the stored timestamp, then hands a
finished step back to the store as a check-and-transition command. Any
number of drivers may watch the same session.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..models.recipe import Recipe
from .session_store import SessionStore

log = logging.getLogger(__name__)

Announce = Callable[[str], Awaitable[None]]


class PollResult(str, Enum):
    ABSENT = "absent"
    IDLE = "idle"
    TICKED = "ticked"
    ADVANCED = "advanced"
    ENDED = "ended"


class TimerDriver:
    def __init__(
        self,
        store: SessionStore,
        recipe: Recipe,
        poll_interval: float = 0.1,
        min_elapsed_ms: int = 1000,
        announce: Optional[Announce] = None,
        name: str = "driver",
    ):
        self.store = store
        self.recipe = recipe
        self.poll_interval = poll_interval
        self.min_elapsed_ms = min_elapsed_ms
        self.announce = announce
        self.name = name

    def poll_once(self) -> PollResult:
        recipe_id = self.recipe.id
        view = self.store.get(recipe_id)
        if view is None:
            return PollResult.ABSENT
        if not view.is_running:
            return PollResult.IDLE

        ticked = self.store.tick_elapsed(recipe_id, self.min_elapsed_ms) > 0

        view = self.store.get(recipe_id)
        if view is None:
            return PollResult.ABSENT
        if view.step_remaining_seconds > 0 or not view.is_running:
            return PollResult.TICKED if ticked else PollResult.IDLE

        index = view.current_step_index
        if self.recipe.is_last_step(index):
            if self.store.expire_step(recipe_id, index):
                log.info("[%s] Final step of %s finished", self.name, recipe_id)
                return PollResult.ENDED
        else:
            nxt = index + 1
            if self.store.expire_step(
                recipe_id,
                index,
                self.recipe.step_duration_seconds(nxt),
                self.recipe.remaining_from(nxt),
            ):
                log.info("[%s] %s moved on to step %d", self.name, recipe_id, nxt + 1)
                return PollResult.ADVANCED
        return PollResult.TICKED if ticked else PollResult.IDLE

    async def run(self) -> None:
        """Poll until cancelled. An absent session is simply waited on."""
        log.debug("[%s] polling %s every %.3fs", self.name, self.recipe.id, self.poll_interval)
        while True:
            result = self.poll_once()
            if result is PollResult.ADVANCED:
                await self._say(self._step_line())
            elif result is PollResult.ENDED:
                await self._say("Recipe session complete!")
            await asyncio.sleep(self.poll_interval)

    def _step_line(self) -> str:
        view = self.store.get(self.recipe.id)
        if view is None:
            return "Recipe session complete!"
        step = self.recipe.steps[view.current_step_index]
        return f"Step {view.current_step_index + 1}: {step.description}"

    async def _say(self, text: str) -> None:
        if self.announce is not None:
            await self.announce(text)
