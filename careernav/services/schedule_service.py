# careernav/services/schedule_service.py
"""
Schedule and payment mutations that feed the status store.

Every change to a schedule item's flag or a payment's status is followed
by a recalculation of the owning enrollment. The in-request recalculation
is best-effort; the periodic sweep catches anything it missed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set

from sqlalchemy.orm import Session

from careernav import models
from careernav.crud import session as session_crud
from careernav.exceptions import (
    InvalidScheduleTransition,
    PaymentNotFound,
    PermissionDenied,
    RecalculationFailure,
    ScheduleItemNotFound,
)
from careernav.models.enums import CourseStatus, PaymentStatus, ScheduleStatus
from careernav.services import course_status_service
from careernav.services.course_status_service import EnrollmentKey, RecalculationReport
from careernav.services.day_window import item_window
from careernav.utils.business_time import as_utc, business_now, civil_date

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    items_completed: int = 0
    items_unlocked: int = 0
    items_locked: int = 0
    enrollments_touched: int = 0
    recalculation: RecalculationReport = field(default_factory=RecalculationReport)


def _enrollment_key(session: models.MentorshipSession) -> EnrollmentKey:
    return session.student_id, session.mentor_id, session.skill_name


def _recalculate_quietly(
    db: Session,
    session: models.MentorshipSession,
    now: datetime,
) -> Optional[CourseStatus]:
    try:
        return course_status_service.recalculate_one(db, *_enrollment_key(session), now=now)
    except RecalculationFailure:
        logger.exception(
            "Course status update failed for session %s; the status sweep will retry",
            session.id,
        )
        return None


# =====================================
# MUTATIONS
# =====================================

def complete_schedule_item(
    db: Session,
    *,
    session_id: int,
    schedule_item_id: int,
    mentor_id: int,
    now: Optional[datetime] = None,
):
    """
    Mark an UPCOMING schedule item as COMPLETED (mentor only).

    Returns:
        (schedule item, recalculated course status or None)

    Raises:
        ScheduleItemNotFound: unknown session or item
        PermissionDenied: mentor does not own the session
        InvalidScheduleTransition: item is not UPCOMING
    """
    now = now or business_now()

    session = session_crud.get_session(db, session_id)
    if session is None:
        raise ScheduleItemNotFound(f"Session {session_id} not found")
    if session.mentor_id != mentor_id:
        raise PermissionDenied("You don't have permission to complete this session")

    item = session_crud.get_schedule_item(db, schedule_item_id)
    if item is None or item.session_id != session.id:
        raise ScheduleItemNotFound(f"Schedule item {schedule_item_id} not found")

    if item.status != ScheduleStatus.UPCOMING:
        raise InvalidScheduleTransition(
            f"Cannot complete session. Current status is {getattr(item.status, 'value', item.status)}. "
            "Only UPCOMING sessions can be completed."
        )

    item.status = ScheduleStatus.COMPLETED
    db.commit()
    logger.info("Schedule item %s of session %s marked completed", item.id, session.id)

    course_status = _recalculate_quietly(db, session, now)
    db.refresh(item)
    return item, course_status


def record_payment_status(
    db: Session,
    *,
    payment_id: int,
    status: PaymentStatus,
    now: Optional[datetime] = None,
):
    """
    Store a payment status reported by the payment service.

    Returns:
        (payment, recalculated course status or None)

    Raises:
        PaymentNotFound: unknown payment id
    """
    now = now or business_now()

    payment = session_crud.get_payment(db, payment_id)
    if payment is None:
        raise PaymentNotFound(f"Payment {payment_id} not found")

    previous = payment.status
    payment.status = status
    db.commit()
    logger.info(
        "Payment %s status changed %s -> %s",
        payment.id,
        getattr(previous, "value", previous),
        status.value,
    )

    course_status = _recalculate_quietly(db, payment.session, now)
    db.refresh(payment)
    return payment, course_status


# =====================================
# TIME-BASED MAINTENANCE
# =====================================

def refresh_schedule_statuses(db: Session, *, now: datetime) -> SweepReport:
    """
    Bring schedule item flags in line with the clock.

    - end time passed         -> COMPLETED
    - scheduled business-today -> UPCOMING
    - scheduled later          -> LOCKED
    COMPLETED items are never touched. Commits once at the end.
    """
    now = as_utc(now)
    report = SweepReport()
    today = civil_date(now)
    touched: Set[EnrollmentKey] = set()

    for item in session_crud.list_open_schedule_items(db):
        window = item_window(item)
        if window is None:
            continue
        start, end = window

        if now >= end:
            new_status = ScheduleStatus.COMPLETED
        elif civil_date(start) <= today:
            new_status = ScheduleStatus.UPCOMING
        else:
            new_status = ScheduleStatus.LOCKED

        if new_status == item.status:
            continue

        item.status = new_status
        if new_status == ScheduleStatus.COMPLETED:
            report.items_completed += 1
            touched.add(_enrollment_key(item.session))
            logger.info("Auto-completed schedule item %s (ended %s)", item.id, end.isoformat())
        elif new_status == ScheduleStatus.UPCOMING:
            report.items_unlocked += 1
        else:
            report.items_locked += 1

    db.commit()
    report.enrollments_touched = len(touched)
    report.recalculation = course_status_service.recalculate_many(
        db, sorted(touched), now=now
    )
    return report


def run_status_sweep(
    db: Session,
    *,
    now: Optional[datetime] = None,
    full: bool = False,
) -> SweepReport:
    """
    Periodic repair pass.

    Refreshes schedule flags and recalculates the enrollments they touched.
    With ``full`` the whole status store is rebuilt afterwards.
    """
    now = now or business_now()
    report = refresh_schedule_statuses(db, now=now)
    logger.info(
        "Status sweep: %d completed, %d unlocked, %d locked, %d enrollments recalculated",
        report.items_completed,
        report.items_unlocked,
        report.items_locked,
        report.recalculation.total,
    )

    if full:
        report.recalculation = course_status_service.recalculate_all(db, now=now)
    return report
