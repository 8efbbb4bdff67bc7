import asyncio

from backend.app.core.timer_driver import PollResult, TimerDriver


def test_poll_absent_and_paused(store, two_step_recipe):
    driver = TimerDriver(store, two_step_recipe)
    assert driver.poll_once() is PollResult.ABSENT

    store.start("soup", 900, 300)
    store.pause("soup")
    assert driver.poll_once() is PollResult.IDLE


def test_poll_ticks_only_after_a_second(store, clock, two_step_recipe):
    driver = TimerDriver(store, two_step_recipe)
    store.start("soup", 900, 300)

    clock.advance(400)
    assert driver.poll_once() is PollResult.IDLE
    clock.advance(700)
    assert driver.poll_once() is PollResult.TICKED
    assert store.get("soup").step_remaining_seconds == 299


def test_many_observers_count_time_once(store, clock, two_step_recipe):
    drivers = [TimerDriver(store, two_step_recipe, name=f"obs{i}") for i in range(3)]
    store.start("soup", 900, 300)

    for _ in range(50):
        clock.advance(100)
        for driver in drivers:
            driver.poll_once()

    view = store.get("soup")
    assert view.step_remaining_seconds == 295
    assert view.overall_remaining_seconds == 895


def test_expiry_advances_exactly_once(store, clock, two_step_recipe):
    first, second = TimerDriver(store, two_step_recipe), TimerDriver(store, two_step_recipe)
    store.start("soup", 900, 300)

    clock.advance(300_000)
    assert first.poll_once() is PollResult.ADVANCED
    assert second.poll_once() is PollResult.IDLE

    view = store.get("soup")
    assert view.current_step_index == 1
    assert view.step_remaining_seconds == 600
    assert view.overall_remaining_seconds == 600


def test_expiry_of_last_step_ends_session(store, clock, two_step_recipe):
    driver = TimerDriver(store, two_step_recipe)
    store.start("soup", 900, 300)

    clock.advance(300_000)
    driver.poll_once()
    clock.advance(600_000)
    assert driver.poll_once() is PollResult.ENDED
    assert driver.poll_once() is PollResult.ABSENT
    assert store.active_recipe_id is None


def test_no_expiry_while_paused(store, clock, two_step_recipe):
    driver = TimerDriver(store, two_step_recipe)
    store.start("soup", 900, 300)
    clock.advance(300_000)
    store.tick_elapsed("soup")
    store.pause("soup")

    assert driver.poll_once() is PollResult.IDLE
    assert store.get("soup").current_step_index == 0

    store.resume("soup")
    assert driver.poll_once() is PollResult.ADVANCED


def test_catches_up_after_idle_gap(store, clock, two_step_recipe):
    store.start("soup", 900, 300)
    # nobody polling for a while
    clock.advance(42_000)

    TimerDriver(store, two_step_recipe).poll_once()
    assert store.get("soup").step_remaining_seconds == 258


def test_run_announces_transitions(store, clock, two_step_recipe):
    spoken = []

    async def announce(text):
        spoken.append(text)

    async def run():
        driver = TimerDriver(store, two_step_recipe, poll_interval=0.001, announce=announce)
        task = asyncio.create_task(driver.run())
        store.start("soup", 900, 300)
        clock.advance(300_000)
        await asyncio.sleep(0.05)
        clock.advance(600_000)
        await asyncio.sleep(0.05)
        task.cancel()

    asyncio.run(run())

    assert spoken == ["Step 2: Simmer", "Recipe session complete!"]
    assert store.get("soup") is None
