import asyncio

import pytest

from backend.app.core.assistant import CookingAssistant, Intent, classify_intent
from backend.app.models.recipe import Recipe, Step
from backend.app.services.cook_session import CookSession


@pytest.mark.parametrize(
    "text, intent",
    [
        ("Let's start", Intent.START),
        ("next step please", Intent.NEXT),
        ("pause the timer", Intent.PAUSE),
        ("ok continue", Intent.RESUME),
        ("unpause", Intent.RESUME),
        ("how much time is left", Intent.TIMER_QUERY),
        ("which step are we on", Intent.STEP_QUESTION),
        ("say that again", Intent.REPEAT),
        ("stop cooking", Intent.STOP),
        ("sing me a song", Intent.UNKNOWN),
    ],
)
def test_classify_intent(text, intent):
    assert classify_intent(text) == intent


def test_next_intent_advances_step(store, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    async def run():
        sm = CookingAssistant(CookSession(store, two_step_recipe), cb)
        await sm.reset()
        await sm.handle(Intent.START)
        await sm.handle(Intent.NEXT)

    asyncio.run(run())

    assert spoken[-1] == "Next step: Simmer"
    assert store.get("soup").current_step_index == 1


def test_timer_query_reads_live_remaining(store, clock, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    async def run():
        sm = CookingAssistant(CookSession(store, two_step_recipe), cb)
        await sm.handle(Intent.START)
        clock.advance(61_000)
        store.tick_elapsed("soup")
        await sm.handle(Intent.TIMER_QUERY)

    asyncio.run(run())

    assert spoken[-1] == "03:59 left on this step, 13:59 overall."


def test_start_while_other_recipe_active_is_spoken(store, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    other = Recipe(id="eggs", title="Eggs", steps=[Step(description="Boil", duration_minutes=8)])
    store.start("eggs", 480, 480)

    async def run():
        await CookingAssistant(CookSession(store, two_step_recipe), cb).handle(Intent.START)

    asyncio.run(run())

    assert spoken == ["Another recipe is currently active. Please stop it first."]
    assert store.active_recipe_id == other.id
    assert store.get("soup") is None


def test_commands_before_start(store, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    async def run():
        sm = CookingAssistant(CookSession(store, two_step_recipe), cb)
        await sm.handle(Intent.PAUSE)
        await sm.handle(Intent.TIMER_QUERY)

    asyncio.run(run())

    assert spoken[0].startswith("We haven't started cooking yet")
    assert spoken[1] == "No timer is running."
    assert store.snapshot().by_recipe_id == {}


def test_next_on_last_step_completes_session(store, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    async def run():
        sm = CookingAssistant(CookSession(store, two_step_recipe), cb)
        await sm.handle(Intent.START)
        await sm.handle(Intent.NEXT)
        await sm.handle(Intent.NEXT)

    asyncio.run(run())

    assert spoken[-1] == "Step ended. Recipe session complete!"
    assert store.active_recipe_id is None


def test_start_again_reports_current_step(store, two_step_recipe):
    spoken = []

    async def cb(text):
        spoken.append(text)

    async def run():
        sm = CookingAssistant(CookSession(store, two_step_recipe), cb)
        await sm.handle(Intent.START)
        await sm.handle(Intent.NEXT)
        await sm.handle(Intent.START)

    asyncio.run(run())

    assert spoken[-1] == "Already cooking. Step 2: Simmer"
    view = store.get("soup")
    assert view.current_step_index == 1
    assert view.step_remaining_seconds == 600
