import logging
from enum import Enum
from typing import Awaitable, Callable

from ..services.cook_session import AnotherSessionActive, CookSession
from ..models.session import StartOutcome
from ..services.progress import format_clock

log = logging.getLogger(__name__)


class Intent(str, Enum):
    START = "start"
    NEXT = "next"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    REPEAT = "repeat"
    TIMER_QUERY = "timer_query"
    STEP_QUESTION = "step_question"
    RECIPE_QUESTION = "recipe_question"
    UNKNOWN = "unknown"


# Checked in order; the first keyword hit wins.
_KEYWORDS = [
    (Intent.RESUME, ["resume", "continue", "keep going", "unpause"]),
    (Intent.PAUSE, ["pause", "hold on", "wait"]),
    (Intent.STOP, ["stop cooking", "end session", "quit", "finish"]),
    (Intent.NEXT, ["next step", "next", "skip", "done with this"]),
    (Intent.START, ["start", "begin", "let's cook", "let's go"]),
    (Intent.TIMER_QUERY, ["timer", "how long", "how much time", "time left", "remaining"]),
    (Intent.STEP_QUESTION, ["which step", "what step", "where are we", "progress"]),
    (Intent.REPEAT, ["repeat", "again", "say that again", "current"]),
    (Intent.RECIPE_QUESTION, ["how many steps", "recipe", "overview"]),
]


def classify_intent(text: str) -> Intent:
    """Simple keyword-based intent classification for English cooking commands"""
    text = text.lower().strip()
    for intent, keywords in _KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return intent
    return Intent.UNKNOWN


class CookingAssistant:
    """
    Voice front for a cooking session: turns intents into session commands
    and speaks back what happened.
    """

    def __init__(self, session: CookSession, tts_callback: Callable[[str], Awaitable[None]]):
        self.session = session
        self.recipe = session.recipe
        self.tts = tts_callback

    def _current_step(self) -> str:
        view = self.session.view()
        if view is None:
            return "There is no cooking session running."
        return self.recipe.steps[view.current_step_index].description

    async def handle(self, intent: Intent) -> None:
        view = self.session.view()

        if intent == Intent.START:
            try:
                outcome = self.session.start()
            except AnotherSessionActive as exc:
                await self.tts(str(exc))
                return
            current = self.session.view()
            if outcome is StartOutcome.ALREADY_ACTIVE and current is not None:
                await self.tts(f"Already cooking. Step {current.current_step_index + 1}: " + self._current_step())
            else:
                await self.tts("Step one: " + self._current_step())

        elif view is None and intent in (Intent.NEXT, Intent.PAUSE, Intent.RESUME, Intent.STOP, Intent.REPEAT):
            await self.tts("We haven't started cooking yet. Say 'start' when you're ready.")

        elif intent == Intent.NEXT:
            if self.session.skip():
                await self.tts("Step ended. Recipe session complete!")
            else:
                await self.tts("Next step: " + self._current_step())

        elif intent == Intent.PAUSE:
            self.session.pause()
            await self.tts("Timer paused.")

        elif intent == Intent.RESUME:
            self.session.resume()
            await self.tts("Timer running again.")

        elif intent == Intent.STOP:
            self.session.end()
            await self.tts("Cooking session ended.")

        elif intent == Intent.REPEAT:
            await self.tts("The current step is: " + self._current_step())

        elif intent == Intent.TIMER_QUERY:
            if view is None:
                await self.tts("No timer is running.")
            else:
                await self.tts(
                    f"{format_clock(view.step_remaining_seconds)} left on this step, "
                    f"{format_clock(view.overall_remaining_seconds)} overall."
                )

        elif intent == Intent.STEP_QUESTION:
            if view is None:
                await self.tts(f"This recipe has {len(self.recipe.steps)} steps. We haven't started yet.")
            else:
                await self.tts(
                    f"We're currently on step {view.current_step_index + 1} of {len(self.recipe.steps)}. "
                    + self._current_step()
                )

        elif intent == Intent.RECIPE_QUESTION:
            minutes = self.recipe.total_duration_seconds // 60
            await self.tts(f"{self.recipe.title} has {len(self.recipe.steps)} steps and takes about {minutes} minutes.")

        else:
            log.warning("Unknown intent")
            await self.tts("Sorry, I didn't understand that. You can say 'start', 'pause', 'resume', 'next step', or ask how much time is left.")

    async def reset(self):
        """Initial greeting - don't automatically start the timer"""
        await self.tts(f"Hello! I'm ready to help you cook {self.recipe.title}. Say 'start' when you're ready to begin.")
