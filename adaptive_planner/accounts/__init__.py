"""User profile, avatar and account deletion."""

from .deletion import DELETE_CONFIRMATION, AccountDeletionService
from .profile import AvatarStore, UserProfile, UserProfileRepository

__all__ = [
    "DELETE_CONFIRMATION",
    "AccountDeletionService",
    "AvatarStore",
    "UserProfile",
    "UserProfileRepository",
]
