"""
AccountDeletionService: removes everything a user owns

Deletion order: tasks, mood check-ins, journal entries, focus sessions,
focus preferences, categories, notification preferences, avatar, profile.
The first failing step is logged and re-raised; steps already done stay done.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "DELETE"


class AccountDeletionService:
    """Per-user data wipe across every store"""

    def __init__(
        self,
        task_repository: Any,
        mood_repository: Any,
        journal_repository: Any,
        focus_repository: Any,
        category_repository: Any,
        notification_repository: Any,
        avatar_store: Any,
        profile_repository: Any,
        on_deleted: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            on_deleted: called with the user id after a successful wipe, e.g.
                to drop in-memory timers and reminders
        """
        self.task_repository = task_repository
        self.mood_repository = mood_repository
        self.journal_repository = journal_repository
        self.focus_repository = focus_repository
        self.category_repository = category_repository
        self.notification_repository = notification_repository
        self.avatar_store = avatar_store
        self.profile_repository = profile_repository
        self.on_deleted = on_deleted

    def _steps(self) -> List[Tuple[str, Callable[[str], Any]]]:
        return [
            ("tasks", self.task_repository.delete_all_for_user),
            ("mood_check_ins", self.mood_repository.delete_all_for_user),
            ("journals", self.journal_repository.delete_all_for_user),
            ("focus_sessions", self.focus_repository.delete_all_for_user),
            ("focus_prefs", self.focus_repository.delete_prefs),
            ("categories", self.category_repository.delete_all_for_user),
            ("notification_preferences", self.notification_repository.delete),
            ("avatar", self.avatar_store.delete),
            ("profile", self.profile_repository.delete_all_for_user),
        ]

    def delete_user_data(self, user_id: str) -> Dict[str, int]:
        """Returns the number of removed records per collection."""
        if not user_id:
            raise AuthenticationError("no user to delete")

        counts: Dict[str, int] = {}
        for name, step in self._steps():
            try:
                counts[name] = int(step(user_id))
            except Exception:
                logger.exception("Account deletion for %s failed at %s", user_id, name)
                raise
        logger.info("Deleted account data for %s: %s", user_id, counts)

        if self.on_deleted is not None:
            self.on_deleted(user_id)
        return counts

    def delete_account(self, user_id: str, confirmation: str) -> Dict[str, int]:
        if confirmation != DELETE_CONFIRMATION:
            raise ValidationError(f'Type "{DELETE_CONFIRMATION}" to confirm account deletion')
        return self.delete_user_data(user_id)
