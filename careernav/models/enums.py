# careernav/models/enums.py
import enum


class SessionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class ScheduleStatus(str, enum.Enum):
    LOCKED = "LOCKED"
    UPCOMING = "UPCOMING"
    COMPLETED = "COMPLETED"


class CourseStatus(str, enum.Enum):
    PAYMENT_PENDING = "PAYMENT_PENDING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"


# Sessions in these states never take part in an enrollment.
INACTIVE_SESSION_STATUSES = (SessionStatus.CANCELLED, SessionStatus.REJECTED)

# Session lifecycle states that already imply a captured payment.
PAID_SESSION_STATUSES = (SessionStatus.PAID, SessionStatus.SCHEDULED)
