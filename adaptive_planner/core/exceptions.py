"""Planner exception hierarchy

Raised by repositories and services; the server routes translate them into
HTTP status codes.
"""


class PlannerError(Exception):
    """Base planner exception"""

    pass


class AuthenticationError(PlannerError):
    """No signed-in user for an operation that needs one"""

    pass


class NotFoundError(PlannerError):
    """Requested document does not exist"""

    pass


class ValidationError(PlannerError):
    """Invalid input value"""

    pass


class DuplicateCategoryError(ValidationError):
    """Category name already exists (case-insensitive)"""

    pass


class ProtectedCategoryError(ValidationError):
    """Default categories cannot be edited or deleted"""

    pass


class AIServiceError(PlannerError):
    """AI provider request failed or returned an unusable payload"""

    pass
