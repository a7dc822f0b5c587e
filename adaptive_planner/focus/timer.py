"""
FocusTimer: Pomodoro cycle with persisted work sessions

The timer is driven by the wall clock rather than a ticking thread: every
public call first runs ``sync()``, which persists grown work minutes and
performs any phase transitions that became due since the last call.

Cycle:
    idle -> work -> short_break | long_break -> idle
    every ``long_break_interval``-th completed work block earns a long break
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .models import UserFocusPrefs
from .repository import FocusRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class PomodoroPhase(str, Enum):
    IDLE = "idle"
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class FocusTimer:
    """Per-user Pomodoro state machine"""

    def __init__(
        self,
        user_id: str,
        repository: FocusRepository,
        prefs: Optional[UserFocusPrefs] = None,
        clock: Optional[Clock] = None,
    ):
        self.user_id = user_id
        self.repository = repository
        self.prefs = prefs or repository.get_prefs(user_id)
        self.clock: Clock = clock or datetime.now
        self._lock = threading.RLock()

        self.phase = PomodoroPhase.IDLE
        self.completed_blocks = 0
        self.is_paused = False
        self.active_session_id: Optional[int] = None
        self._phase_start: Optional[datetime] = None
        self._phase_seconds = self.prefs.work_minutes * 60
        self._paused_at: Optional[datetime] = None
        self._paused_seconds = 0.0
        self._last_persisted_minutes = 0
        self._last_persisted_date: Optional[datetime] = None
        self.last_sync: Optional[datetime] = None

    # --- derived state -------------------------------------------------

    def _elapsed_seconds(self, now: datetime) -> float:
        if self._phase_start is None:
            return 0.0
        reference = self._paused_at if self._paused_at is not None else now
        return max(0.0, (reference - self._phase_start).total_seconds() - self._paused_seconds)

    def remaining_seconds(self) -> int:
        with self._lock:
            self.sync()
            if self.phase is PomodoroPhase.IDLE:
                return self._phase_seconds
            return max(0, int(self._phase_seconds - self._elapsed_seconds(self.clock())))

    @property
    def saved_current_block_minutes(self) -> int:
        """Last persisted work minutes, but only on the day they were saved."""
        saved_on = self._last_persisted_date
        if saved_on is None or saved_on.date() != self.clock().date():
            return 0
        return self._last_persisted_minutes

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            remaining = self.remaining_seconds()
            return {
                "phase": self.phase.value,
                "remaining_seconds": remaining,
                "is_paused": self.is_paused,
                "completed_blocks": self.completed_blocks,
                "active_session_id": self.active_session_id,
                "saved_current_block_minutes": self.saved_current_block_minutes,
                "last_sync": self.last_sync.isoformat() if self.last_sync else None,
            }

    # --- commands --------------------------------------------------------

    def start_work(self) -> None:
        with self._lock:
            now = self.clock()
            self._begin_phase(PomodoroPhase.WORK, self.prefs.work_minutes, now)
            session = self.repository.create_session(self.user_id, now)
            self.active_session_id = session.id
            self._last_persisted_minutes = 0
            self.last_sync = None
            logger.info("Work block started for %s (session %s)", self.user_id, session.id)

    def pause(self) -> None:
        with self._lock:
            self.sync()
            if self.phase is PomodoroPhase.IDLE or self.is_paused:
                return
            self._save_progress(self.clock())
            self.is_paused = True
            self._paused_at = self.clock()

    def resume(self) -> None:
        with self._lock:
            if self.phase is PomodoroPhase.IDLE or not self.is_paused:
                return
            if self._paused_at is not None:
                self._paused_seconds += (self.clock() - self._paused_at).total_seconds()
            self._paused_at = None
            self.is_paused = False

    def reset(self, clear_saved: bool = True) -> None:
        with self._lock:
            self.phase = PomodoroPhase.IDLE
            self._phase_seconds = self.prefs.work_minutes * 60
            self._phase_start = None
            self._paused_at = None
            self._paused_seconds = 0.0
            self.is_paused = False
            self.completed_blocks = 0
            self.active_session_id = None
            if clear_saved:
                self._last_persisted_minutes = 0
                self._last_persisted_date = None
                self.last_sync = None

    def save_and_end(self) -> None:
        """Persist the running session and go idle, keeping today's saved minutes."""
        with self._lock:
            self.sync()
            if self.phase is not PomodoroPhase.IDLE:
                self._save_progress(self.clock())
            self.reset(clear_saved=False)

    def sync(self) -> None:
        """Persist grown work minutes and run due phase transitions."""
        with self._lock:
            now = self.clock()
            while self.phase is not PomodoroPhase.IDLE and not self.is_paused:
                elapsed = self._elapsed_seconds(now)
                if elapsed < self._phase_seconds:
                    if self.phase is PomodoroPhase.WORK:
                        minutes = int(elapsed // 60)
                        if minutes > self._last_persisted_minutes:
                            self._persist_minutes(minutes, now)
                    return
                phase_end = self._phase_start + timedelta(
                    seconds=self._paused_seconds + self._phase_seconds
                )
                self._on_phase_complete(phase_end)

    # --- internals -------------------------------------------------------

    def _begin_phase(self, phase: PomodoroPhase, minutes: int, start: datetime) -> None:
        self.phase = phase
        self.is_paused = False
        self._phase_seconds = minutes * 60
        self._phase_start = start
        self._paused_at = None
        self._paused_seconds = 0.0

    def _persist_minutes(self, minutes: int, now: datetime) -> None:
        if self.active_session_id is None:
            return
        self.repository.update_session(self.active_session_id, end=now, duration_minutes=minutes)
        self._last_persisted_minutes = minutes
        self._last_persisted_date = now
        self.last_sync = now

    def _save_progress(self, now: datetime) -> None:
        if self.phase is not PomodoroPhase.WORK:
            return
        minutes = min(int(self._elapsed_seconds(now) // 60), self.prefs.work_minutes)
        self._persist_minutes(minutes, now)

    def _on_phase_complete(self, phase_end: datetime) -> None:
        if self.phase is PomodoroPhase.WORK:
            self._save_progress(phase_end)
            self.completed_blocks += 1
            self.active_session_id = None
            if self.completed_blocks % max(self.prefs.long_break_interval, 1) == 0:
                self._begin_phase(PomodoroPhase.LONG_BREAK, self.prefs.long_break_minutes, phase_end)
            else:
                self._begin_phase(PomodoroPhase.SHORT_BREAK, self.prefs.short_break_minutes, phase_end)
            logger.info(
                "Work block %d done for %s, starting %s",
                self.completed_blocks,
                self.user_id,
                self.phase.value,
            )
        else:
            logger.info("%s finished for %s", self.phase.value, self.user_id)
            # completed_blocks survives so the long break comes round
            blocks = self.completed_blocks
            self.reset(clear_saved=False)
            self.completed_blocks = blocks


class FocusTimerRegistry:
    """One FocusTimer per user, created lazily"""

    def __init__(self, repository: FocusRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock
        self._timers: Dict[str, FocusTimer] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> FocusTimer:
        with self._lock:
            timer = self._timers.get(user_id)
            if timer is None:
                timer = FocusTimer(user_id, self.repository, clock=self.clock)
                self._timers[user_id] = timer
            return timer

    def reload_prefs(self, user_id: str) -> None:
        with self._lock:
            timer = self._timers.get(user_id)
        if timer is not None:
            timer.prefs = self.repository.get_prefs(user_id)

    def discard(self, user_id: str) -> None:
        with self._lock:
            self._timers.pop(user_id, None)
