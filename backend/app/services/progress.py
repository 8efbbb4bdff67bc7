"""Derived, read-only figures for whoever is rendering a session."""

from typing import Any, Dict, Optional

from ..models.recipe import Recipe
from ..models.session import SessionState, SessionView


def format_clock(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def _percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(max(0, min(done, total)) / total * 100)


def step_progress(view: SessionView, recipe: Recipe) -> int:
    duration = recipe.step_duration_seconds(view.current_step_index)
    return _percent(duration - view.step_remaining_seconds, duration)


def overall_progress(view: SessionView, recipe: Recipe) -> int:
    total = recipe.total_duration_seconds
    return _percent(total - view.overall_remaining_seconds, total)


def minute_announcement(minutes: int) -> str:
    if minutes <= 0:
        return "Step time remaining: less than 1 minute"
    return f"Step time remaining: {minutes} minute{'s' if minutes != 1 else ''}"


def describe(view: Optional[SessionView], recipe: Recipe) -> Dict[str, Any]:
    if view is None:
        return {"recipe_id": recipe.id, "state": SessionState.ABSENT.value}

    step = recipe.steps[view.current_step_index]
    return {
        "recipe_id": recipe.id,
        "title": recipe.title,
        "state": view.state.value,
        "step_number": view.current_step_index + 1,
        "step_count": len(recipe.steps),
        "step_description": step.description,
        "step_remaining_seconds": view.step_remaining_seconds,
        "overall_remaining_seconds": view.overall_remaining_seconds,
        "step_remaining": format_clock(view.step_remaining_seconds),
        "overall_remaining": format_clock(view.overall_remaining_seconds),
        "step_progress": step_progress(view, recipe),
        "overall_progress": overall_progress(view, recipe),
    }
