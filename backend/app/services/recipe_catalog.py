import logging
import threading
from typing import Dict, List, Optional

from ..models.recipe import Recipe

log = logging.getLogger(__name__)


class RecipeCatalog:
    """In-memory recipe lookup. Lives as long as the app does."""

    def __init__(self):
        self._lock = threading.Lock()
        self._recipes: Dict[str, Recipe] = {}

    def add(self, recipe: Recipe) -> Recipe:
        with self._lock:
            self._recipes[recipe.id] = recipe
        log.info("Recipe %s added: %s (%d steps)", recipe.id, recipe.title, len(recipe.steps))
        return recipe

    def get(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            return self._recipes.get(recipe_id)

    def list(self) -> List[Recipe]:
        with self._lock:
            return list(self._recipes.values())

    def toggle_favorite(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                return None
            recipe = recipe.model_copy(update={"is_favorite": not recipe.is_favorite})
            self._recipes[recipe_id] = recipe
            return recipe

    def remove(self, recipe_id: str) -> None:
        with self._lock:
            self._recipes.pop(recipe_id, None)
