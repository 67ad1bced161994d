# careernav/models/__init__.py
# Import models in dependency order
from .enums import SessionStatus, PaymentStatus, ScheduleStatus, CourseStatus
from .user import User
from .session import MentorshipSession
from .payment import Payment
from .schedule import ScheduleItem
from .enrollment import EnrollmentStatus

__all__ = [
    "User",
    "MentorshipSession",
    "Payment",
    "ScheduleItem",
    "EnrollmentStatus",
    "SessionStatus",
    "PaymentStatus",
    "ScheduleStatus",
    "CourseStatus",
]
