"""
ReminderScheduler: fires planned daily reminders into per-user queues

A background thread wakes every ``check_interval_seconds`` and moves due
reminders into a bounded queue per user; clients drain it with
``get_pending``. Each fired reminder is re-armed for its next daily slot.
"""

import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

from ..tasks.filters import tasks_due_on, tasks_due_within
from .models import NotificationPreference
from .planner import (
    TASKS_DUE_IN_REMINDER_ID,
    TASKS_DUE_TODAY_REMINDER_ID,
    TEST_NOTIFICATION_ID,
    Reminder,
    following_occurrence,
    plan_reminders,
)


class ReminderScheduler:
    """Background reminder dispatcher"""

    def __init__(
        self,
        task_repository: Optional[Any] = None,
        check_interval_seconds: int = 30,
        max_queue_size: int = 20,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            task_repository: optional TaskRepository; when given, task
                reminders mention how many tasks are due
            check_interval_seconds: wake-up interval of the loop
            max_queue_size: pending notifications kept per user
            clock: current time source
        """
        self.task_repository = task_repository
        self.check_interval_seconds = check_interval_seconds
        self.max_queue_size = max_queue_size
        self.clock = clock or datetime.now
        self.logger = logging.getLogger(__name__)

        self._running = False
        self._lock = threading.Lock()
        self._reminders: Dict[str, List[Reminder]] = {}
        self._due_in_days: Dict[str, int] = {}
        self._queues: Dict[str, Deque[Dict[str, Any]]] = {}
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        with self._lock:
            if self._running:
                self.logger.warning("Reminder scheduler is already running")
                return
            self._running = True
            self._thread = threading.Thread(target=self._run_loop, daemon=True)
            self._thread.start()
            self.logger.info("Reminder scheduler started")

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self.logger.info("Stopping reminder scheduler...")

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
            self.logger.info("Reminder scheduler stopped")

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def reschedule(self, user_id: str, prefs: NotificationPreference) -> List[Reminder]:
        """Cancel the user's reminders and plan them again from ``prefs``."""
        reminders = plan_reminders(prefs, self.clock())
        with self._lock:
            self._reminders[user_id] = reminders
            self._due_in_days[user_id] = prefs.task_due_in_days
        self.logger.info("Scheduled %d reminders for %s", len(reminders), user_id)
        return list(reminders)

    def cancel(self, user_id: str) -> None:
        with self._lock:
            self._reminders.pop(user_id, None)
            self._due_in_days.pop(user_id, None)
            self._queues.pop(user_id, None)

    def upcoming(self, user_id: str) -> List[Reminder]:
        with self._lock:
            return sorted(self._reminders.get(user_id, []), key=lambda r: r.next_fire)

    def send_test_notification(self, user_id: str) -> Dict[str, Any]:
        message = self._message(
            user_id,
            TEST_NOTIFICATION_ID,
            "test",
            "Test Notification",
            "Your notification settings are working!",
        )
        self._enqueue(user_id, message)
        return message

    def get_pending(self, user_id: str) -> List[Dict[str, Any]]:
        """Drain the user's queue."""
        with self._lock:
            queue = self._queues.get(user_id)
            if not queue:
                return []
            messages = list(queue)
            queue.clear()
        self.logger.debug("Retrieved %d pending notifications for %s", len(messages), user_id)
        return messages

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "running": self._running,
                "check_interval_seconds": self.check_interval_seconds,
                "users": len(self._reminders),
                "pending_count": sum(len(q) for q in self._queues.values()),
            }

    def fire_due(self, now: Optional[datetime] = None) -> int:
        """Queue every reminder due at ``now`` and re-arm it; returns the count."""
        now = now or self.clock()
        due: List[tuple] = []
        with self._lock:
            for user_id, reminders in self._reminders.items():
                for reminder in reminders:
                    if reminder.next_fire <= now:
                        due.append((user_id, reminder, self._due_in_days.get(user_id, 2)))
                        # a missed day is skipped, not replayed
                        while reminder.next_fire <= now:
                            reminder.next_fire = following_occurrence(reminder)

        for user_id, reminder, due_in_days in due:
            body = self._reminder_body(user_id, reminder, due_in_days, now)
            self._enqueue(
                user_id,
                self._message(user_id, reminder.id, reminder.kind, reminder.title, body, now),
            )
        if due:
            self.logger.info("Fired %d reminders", len(due))
        return len(due)

    def _run_loop(self) -> None:
        self.logger.info("Reminder loop started")
        while True:
            for _ in range(self.check_interval_seconds):
                with self._lock:
                    if not self._running:
                        self.logger.info("Reminder loop exited")
                        return
                time.sleep(1)
            try:
                self.fire_due()
            except Exception as e:
                self.logger.error("Reminder dispatch failed: %s", e, exc_info=True)

    def _reminder_body(self, user_id: str, reminder: Reminder, due_in_days: int, now: datetime) -> str:
        if self.task_repository is None:
            return reminder.body
        if reminder.id == TASKS_DUE_TODAY_REMINDER_ID:
            count = len(tasks_due_on(self.task_repository.list(user_id), now.date()))
            return f"You have {count} task(s) due today"
        if reminder.id == TASKS_DUE_IN_REMINDER_ID:
            count = len(tasks_due_within(self.task_repository.list(user_id), due_in_days, now))
            return f"{count} task(s) due within {due_in_days} days - start planning!"
        return reminder.body

    def _message(
        self,
        user_id: str,
        notification_id: int,
        kind: str,
        title: str,
        body: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        return {
            "id": notification_id,
            "user_id": user_id,
            "kind": kind,
            "title": title,
            "body": body,
            "timestamp": (now or self.clock()).isoformat(),
        }

    def _enqueue(self, user_id: str, message: Dict[str, Any]) -> None:
        with self._lock:
            queue = self._queues.setdefault(user_id, deque(maxlen=self.max_queue_size))
            queue.append(message)
            self.logger.info(
                "Notification %s queued for %s (size: %d)", message["id"], user_id, len(queue)
            )
