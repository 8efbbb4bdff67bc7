"""
Prototype – regex first, falling back to one step per line.
Each step carries its own duration, e.g. "2. Simmer the stock (20 min)".
"""

import re
from typing import List, Optional, Tuple

from ..models.recipe import Recipe, Step


class RecipeParser:
    step_pattern = re.compile(r"^\s*\d+[.\)]\s*(.*)$", re.M)
    title_pattern = re.compile(r"^\s*(?:#+|title:)\s*(.+)$", re.I)
    hours_pattern = re.compile(r"(\d+)\s*(?:h|hr|hrs|hour|hours)\b", re.I)
    minutes_pattern = re.compile(r"(\d+)\s*(?:m|min|mins|minute|minutes)\b", re.I)
    default_minutes = 1

    @classmethod
    async def parse(cls, raw: str) -> Recipe:
        lines = [line for line in raw.splitlines() if line.strip()]
        title, lines = cls._split_title(lines)
        body = "\n".join(lines)

        texts: List[str] = []
        for match in cls.step_pattern.finditer(body):
            texts.append(match.group(1).strip())

        if not texts:
            # Fallback to trivial split
            texts = [line.strip() for line in lines]

        if not texts:
            raise ValueError("Recipe has no steps")

        steps = [
            Step(description=text, duration_minutes=cls.extract_minutes(text) or cls.default_minutes)
            for text in texts
        ]
        return Recipe(title=title or "Untitled", steps=steps)

    @classmethod
    def extract_minutes(cls, text: str) -> Optional[int]:
        hours = sum(int(h) for h in cls.hours_pattern.findall(text))
        minutes = sum(int(m) for m in cls.minutes_pattern.findall(text))
        total = hours * 60 + minutes
        return total or None

    @classmethod
    def _split_title(cls, lines: List[str]) -> Tuple[Optional[str], List[str]]:
        if lines:
            match = cls.title_pattern.match(lines[0])
            if match:
                return match.group(1).strip(), lines[1:]
        return None, lines
