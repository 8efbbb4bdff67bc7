from __future__ import annotations

import uuid
from typing import List

from pydantic import BaseModel, Field, conint


class Step(BaseModel):
    description: str
    duration_minutes: conint(gt=0) = 1

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60


class Recipe(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str = "Untitled"
    steps: List[Step] = Field(min_length=1)
    is_favorite: bool = False

    @property
    def total_duration_seconds(self) -> int:
        return sum(step.duration_seconds for step in self.steps)

    def step_duration_seconds(self, index: int) -> int:
        if 0 <= index < len(self.steps):
            return self.steps[index].duration_seconds
        return 0

    def remaining_from(self, index: int) -> int:
        """Seconds for step `index` and every step after it."""
        return sum(step.duration_seconds for step in self.steps[max(index, 0):])

    def is_last_step(self, index: int) -> bool:
        return index >= len(self.steps) - 1
