"""
Authoritative holder of the cooking session table.

Every command is a total function: unknown recipe ids are silently ignored,
because pollers and UI surfaces routinely race with a session ending.
All mutation happens under a single lock, so commands are applied one at a
time in submission order and no reader ever sees a half-applied transition.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional

from ..models.session import (
    SessionRecord,
    SessionState,
    SessionTableView,
    SessionView,
    StartOutcome,
)

log = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    def __init__(self, clock: Clock = wall_clock_ms, carry_subsecond_remainder: bool = False):
        self._clock = clock
        self._carry = carry_subsecond_remainder
        self._lock = threading.RLock()
        self._active_recipe_id: Optional[str] = None
        self._by_recipe_id: Dict[str, SessionRecord] = {}

    def now(self) -> int:
        return self._clock()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(
        self,
        recipe_id: str,
        total_duration_seconds: int,
        first_step_duration_seconds: int,
    ) -> StartOutcome:
        with self._lock:
            if self._active_recipe_id is not None:
                if self._active_recipe_id != recipe_id:
                    log.info(
                        "Start of %s ignored: session for %s is active",
                        recipe_id,
                        self._active_recipe_id,
                    )
                    return StartOutcome.BLOCKED
                return StartOutcome.ALREADY_ACTIVE

            first = max(0, first_step_duration_seconds)
            self._active_recipe_id = recipe_id
            self._by_recipe_id[recipe_id] = SessionRecord(
                current_step_index=0,
                is_running=True,
                step_remaining_seconds=first,
                overall_remaining_seconds=max(first, total_duration_seconds),
                last_tick_timestamp=self.now(),
            )
            log.info("Session started for %s (%ss total)", recipe_id, total_duration_seconds)
            return StartOutcome.STARTED

    def pause(self, recipe_id: str) -> None:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None:
                return
            # timestamp stays frozen until resume
            record.is_running = False
            log.debug("Paused %s at %ss", recipe_id, record.step_remaining_seconds)

    def resume(self, recipe_id: str) -> None:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None:
                return
            record.is_running = True
            record.last_tick_timestamp = self.now()
            log.debug("Resumed %s", recipe_id)

    def tick(self, recipe_id: str, elapsed_ms: int) -> None:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None or not record.is_running:
                return
            elapsed_ms = max(0, int(elapsed_ms))
            elapsed_seconds = elapsed_ms // 1000

            record.step_remaining_seconds = max(0, record.step_remaining_seconds - elapsed_seconds)
            record.overall_remaining_seconds = max(0, record.overall_remaining_seconds - elapsed_seconds)

            now = self.now()
            if self._carry:
                now -= elapsed_ms % 1000
            record.last_tick_timestamp = now

    def tick_elapsed(self, recipe_id: str, min_elapsed_ms: int = 1000) -> int:
        """
        Apply whatever wall-clock time has passed since the stored timestamp.

        The read of `last_tick_timestamp` and the tick that moves it happen in
        one critical section, so any number of pollers can call this
        concurrently without counting the same interval twice.
        Returns the elapsed milliseconds that were applied.
        """
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None or not record.is_running:
                return 0
            now = self.now()
            last = record.last_tick_timestamp if record.last_tick_timestamp is not None else now
            elapsed = now - last
            if elapsed < min_elapsed_ms:
                return 0
            self.tick(recipe_id, elapsed)
            return elapsed

    def advance_step(
        self,
        recipe_id: str,
        next_step_duration_seconds: int,
        overall_remaining_seconds: int,
    ) -> None:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None or record.step_remaining_seconds > 0:
                return
            self._advance(recipe_id, record, next_step_duration_seconds, overall_remaining_seconds)

    def stop_current_step(
        self,
        recipe_id: str,
        is_last_step: bool,
        next_step_duration_seconds: Optional[int] = None,
        overall_remaining_seconds: Optional[int] = None,
    ) -> None:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if record is None:
                return
            if is_last_step:
                self.end_session(recipe_id)
                return
            if next_step_duration_seconds is None:
                return
            self._advance(recipe_id, record, next_step_duration_seconds, overall_remaining_seconds)

    def expire_step(
        self,
        recipe_id: str,
        step_index: int,
        next_step_duration_seconds: Optional[int] = None,
        overall_remaining_seconds: Optional[int] = None,
    ) -> bool:
        """
        Check-and-transition for a step whose countdown ran out.

        Applies only while the record is running, still on `step_index` and
        exhausted. With no next step given the session ends. Returns True for
        the single caller whose transition landed.
        """
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            if (
                record is None
                or not record.is_running
                or record.current_step_index != step_index
                or record.step_remaining_seconds > 0
            ):
                return False
            if next_step_duration_seconds is None:
                self.end_session(recipe_id)
            else:
                self._advance(recipe_id, record, next_step_duration_seconds, overall_remaining_seconds)
            return True

    def end_session(self, recipe_id: str) -> None:
        with self._lock:
            removed = self._by_recipe_id.pop(recipe_id, None)
            if self._active_recipe_id == recipe_id:
                self._active_recipe_id = None
            if removed is not None:
                log.info("Session for %s ended at step %d", recipe_id, removed.current_step_index + 1)

    def _advance(
        self,
        recipe_id: str,
        record: SessionRecord,
        next_step_duration_seconds: int,
        overall_remaining_seconds: Optional[int],
    ) -> None:
        step_remaining = max(0, next_step_duration_seconds)
        if overall_remaining_seconds is None:
            overall_remaining_seconds = record.overall_remaining_seconds
        record.current_step_index += 1
        record.step_remaining_seconds = step_remaining
        record.overall_remaining_seconds = max(step_remaining, overall_remaining_seconds)
        record.is_running = True
        record.last_tick_timestamp = self.now()
        log.debug("Advanced %s to step %d", recipe_id, record.current_step_index + 1)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def active_recipe_id(self) -> Optional[str]:
        with self._lock:
            return self._active_recipe_id

    def get(self, recipe_id: str) -> Optional[SessionView]:
        with self._lock:
            record = self._by_recipe_id.get(recipe_id)
            return SessionView.of(recipe_id, record) if record is not None else None

    def state_of(self, recipe_id: str) -> SessionState:
        view = self.get(recipe_id)
        return view.state if view is not None else SessionState.ABSENT

    def snapshot(self) -> SessionTableView:
        with self._lock:
            return SessionTableView(
                active_recipe_id=self._active_recipe_id,
                by_recipe_id={
                    recipe_id: SessionView.of(recipe_id, record)
                    for recipe_id, record in self._by_recipe_id.items()
                },
            )
