# careernav/services/status_classifier.py
"""
Status Classifier

The one place that decides whether an enrollment is payment-pending,
ongoing or completed. Every read and write path goes through classify();
nothing else re-derives the rule.
"""

from typing import Any

from careernav.models.enums import (
    CourseStatus,
    PaymentStatus,
    PAID_SESSION_STATUSES,
    ScheduleStatus,
    SessionStatus,
)
from careernav.services.enrollment_grouping import EnrollmentGroup, payment_records


def is_session_paid(session: Any) -> bool:
    if getattr(session, "status", None) in PAID_SESSION_STATUSES:
        return True
    return any(
        getattr(payment, "status", None) == PaymentStatus.SUCCESS
        for payment in payment_records(session)
    )


def passes_payment_gate(group: EnrollmentGroup) -> bool:
    return any(is_session_paid(session) for session in group.sessions)


def classify(group: EnrollmentGroup) -> CourseStatus:
    """
    Classify one enrollment group.

    1. No paid session -> PAYMENT_PENDING.
    2. Schedule items exist -> COMPLETED iff every item's stored flag is
       COMPLETED. Elapsed time is not consulted here; the schedule sweep
       keeps the flags current.
    3. No schedule items -> COMPLETED iff every session is COMPLETED.
    """
    if not passes_payment_gate(group):
        return CourseStatus.PAYMENT_PENDING

    items = group.schedule_items
    if items:
        all_completed = all(item.status == ScheduleStatus.COMPLETED for item in items)
    else:
        all_completed = all(
            session.status == SessionStatus.COMPLETED for session in group.sessions
        )

    return CourseStatus.COMPLETED if all_completed else CourseStatus.ONGOING
