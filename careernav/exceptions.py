"""
Domain errors for the course status engine.

Services raise these; API routers translate them into HTTP responses.
"""

from typing import Optional


class CareerNavError(Exception):
    """Base class for engine errors."""


class MalformedScheduleItem(CareerNavError, ValueError):
    """A schedule item has an unparseable wall-clock time or no date."""

    def __init__(self, message: str, *, schedule_item_id: Optional[int] = None):
        super().__init__(message)
        self.schedule_item_id = schedule_item_id


class RecalculationFailure(CareerNavError):
    """Recalculating one enrollment failed; nothing was written for it."""

    def __init__(self, student_id: int, mentor_id: int, skill_name: str, cause: Exception):
        super().__init__(
            f"Recalculation failed for enrollment "
            f"{student_id}/{mentor_id}/{skill_name!r}: {cause}"
        )
        self.student_id = student_id
        self.mentor_id = mentor_id
        self.skill_name = skill_name
        self.cause = cause


class ScheduleItemNotFound(CareerNavError, LookupError):
    pass


class PaymentNotFound(CareerNavError, LookupError):
    pass


class PermissionDenied(CareerNavError):
    pass


class InvalidScheduleTransition(CareerNavError, ValueError):
    pass
