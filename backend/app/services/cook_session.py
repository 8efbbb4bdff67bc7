"""
Recipe-aware front for the session store.

The store trusts its callers for step durations; this is the caller that
derives them from the recipe.
"""

from typing import Optional

from ..core.session_store import SessionStore
from ..models.recipe import Recipe
from ..models.session import SessionView, StartOutcome


class AnotherSessionActive(Exception):
    def __init__(self, active_recipe_id: Optional[str]):
        super().__init__("Another recipe is currently active. Please stop it first.")
        self.active_recipe_id = active_recipe_id


class CookSession:
    def __init__(self, store: SessionStore, recipe: Recipe):
        self.store = store
        self.recipe = recipe

    @property
    def recipe_id(self) -> str:
        return self.recipe.id

    def view(self) -> Optional[SessionView]:
        return self.store.get(self.recipe_id)

    def start(self) -> StartOutcome:
        outcome = self.store.start(
            self.recipe_id,
            self.recipe.total_duration_seconds,
            self.recipe.step_duration_seconds(0),
        )
        if outcome is StartOutcome.BLOCKED:
            raise AnotherSessionActive(self.store.active_recipe_id)
        return outcome

    def pause(self) -> None:
        self.store.pause(self.recipe_id)

    def resume(self) -> None:
        self.store.resume(self.recipe_id)

    def toggle(self) -> None:
        view = self.view()
        if view is None:
            return
        if view.is_running:
            self.pause()
        else:
            self.resume()

    def skip(self) -> bool:
        """Stop the current step early. Returns True when the session ended."""
        view = self.view()
        if view is None:
            return False
        index = view.current_step_index
        if self.recipe.is_last_step(index):
            self.store.stop_current_step(self.recipe_id, is_last_step=True)
            return True
        nxt = index + 1
        self.store.stop_current_step(
            self.recipe_id,
            is_last_step=False,
            next_step_duration_seconds=self.recipe.step_duration_seconds(nxt),
            overall_remaining_seconds=self.recipe.remaining_from(nxt),
        )
        return False

    def end(self) -> None:
        self.store.end_session(self.recipe_id)
