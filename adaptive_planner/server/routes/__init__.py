"""Route registration helpers."""

from .account import register_account_routes
from .analytics import register_analytics_routes
from .categories import register_category_routes
from .focus import register_focus_routes
from .journals import register_journal_routes
from .moods import register_mood_routes
from .notifications import register_notification_routes
from .tasks import register_task_routes

__all__ = [
    "register_account_routes",
    "register_analytics_routes",
    "register_category_routes",
    "register_focus_routes",
    "register_journal_routes",
    "register_mood_routes",
    "register_notification_routes",
    "register_task_routes",
]
