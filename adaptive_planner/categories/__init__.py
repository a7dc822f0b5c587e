"""Default and user-defined task categories."""

from .service import CategoryRepository, CategoryService, is_custom_category

__all__ = ["CategoryRepository", "CategoryService", "is_custom_category"]
