from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, conint


class SessionState(str, Enum):
    ABSENT = "absent"
    RUNNING = "running"
    PAUSED = "paused"


class StartOutcome(str, Enum):
    STARTED = "started"
    ALREADY_ACTIVE = "already_active"
    BLOCKED = "blocked"


class SessionRecord(BaseModel):
    """Live, store-owned countdown for one recipe. Never handed to callers."""

    current_step_index: conint(ge=0) = 0
    is_running: bool = True
    step_remaining_seconds: conint(ge=0) = 0
    overall_remaining_seconds: conint(ge=0) = 0
    # ms since epoch of the last authoritative counter update
    last_tick_timestamp: Optional[int] = None


class SessionView(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipe_id: str
    current_step_index: int
    is_running: bool
    step_remaining_seconds: int
    overall_remaining_seconds: int
    last_tick_timestamp: Optional[int] = None

    @property
    def state(self) -> SessionState:
        return SessionState.RUNNING if self.is_running else SessionState.PAUSED

    @classmethod
    def of(cls, recipe_id: str, record: SessionRecord) -> "SessionView":
        return cls(recipe_id=recipe_id, **record.model_dump())


class SessionTableView(BaseModel):
    model_config = ConfigDict(frozen=True)

    active_recipe_id: Optional[str] = None
    by_recipe_id: Dict[str, SessionView] = {}
