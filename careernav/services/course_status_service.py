# careernav/services/course_status_service.py
"""
Course Status Service - Status Store & Recalculator

The enrollment_statuses table is the single source of truth for every
dashboard read. Rows are rebuilt here, and only here, from current raw
session, payment and schedule data:

    raw rows -> group_sessions -> classify -> upsert

An enrollment is identified by (student_id, mentor_id, skill_name).
Recalculation is a pure function of raw state followed by an idempotent
upsert, so it is safe to run as often as needed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from careernav.config import settings
from careernav.crud import enrollment as enrollment_crud
from careernav.crud import session as session_crud
from careernav.exceptions import RecalculationFailure
from careernav.models.enums import CourseStatus
from careernav.services.enrollment_grouping import EnrollmentGroup, group_key, group_sessions
from careernav.services.status_classifier import classify
from careernav.utils.business_time import business_now

logger = logging.getLogger(__name__)

EnrollmentKey = Tuple[int, int, str]


@dataclass
class RecalculationReport:
    total: int = 0
    persisted: int = 0
    payment_pending: int = 0
    failed: int = 0
    failed_keys: List[EnrollmentKey] = field(default_factory=list)


@dataclass
class StatusDrift:
    """A stored row that disagrees with what classify() computes now."""

    student_id: int
    mentor_id: int
    skill_name: str
    stored_status: Optional[CourseStatus]
    live_status: CourseStatus

    @property
    def repairable(self) -> bool:
        # Payment-pending enrollments are never stored, so recalculating
        # cannot bring an existing row in line with them.
        return self.live_status != CourseStatus.PAYMENT_PENDING


# =====================================
# SINGLE ENROLLMENT
# =====================================

def build_enrollment_group(
    db: Session,
    student_id: int,
    mentor_id: int,
    skill_name: str,
) -> EnrollmentGroup:
    """Load current raw data for one enrollment and group it."""
    sessions = session_crud.list_sessions(
        db,
        student_id=student_id,
        mentor_id=mentor_id,
        skill_name=skill_name,
    )
    groups = group_sessions(sessions)
    return groups.get(group_key(mentor_id, skill_name)) or EnrollmentGroup(
        student_id=student_id,
        mentor_id=mentor_id,
        skill_name=skill_name,
    )


def recalculate_one(
    db: Session,
    student_id: int,
    mentor_id: int,
    skill_name: str,
    *,
    now: Optional[datetime] = None,
) -> CourseStatus:
    """
    Recompute and store the status of one enrollment.

    PAYMENT_PENDING results are returned but not written.

    Raises:
        RecalculationFailure: anything went wrong; the transaction is
            rolled back so no partial row is left behind
    """
    calculated_at = now or business_now()
    try:
        group = build_enrollment_group(db, student_id, mentor_id, skill_name)
        status = classify(group)

        if status == CourseStatus.PAYMENT_PENDING:
            logger.debug(
                "Enrollment %s/%s/%r is payment pending, store untouched",
                student_id, mentor_id, skill_name,
            )
            return status

        enrollment_crud.upsert_enrollment_status(
            db,
            student_id=student_id,
            mentor_id=mentor_id,
            skill_name=skill_name,
            course_status=status,
            calculated_at=calculated_at,
        )
        db.commit()
    except Exception as exc:
        db.rollback()
        raise RecalculationFailure(student_id, mentor_id, skill_name, exc) from exc

    logger.debug(
        "Enrollment %s/%s/%r recalculated as %s",
        student_id, mentor_id, skill_name, status.value,
    )
    return status


# =====================================
# MUTATION TRIGGERS
# =====================================

def recalculate_for_session(
    db: Session,
    session_id: int,
    *,
    now: Optional[datetime] = None,
) -> Optional[CourseStatus]:
    """Recalculate the enrollment a session belongs to."""
    session = session_crud.get_session(db, session_id)
    if session is None:
        logger.warning("Session %s not found, nothing to recalculate", session_id)
        return None
    return recalculate_one(
        db,
        session.student_id,
        session.mentor_id,
        session.skill_name,
        now=now,
    )


def recalculate_for_payment(
    db: Session,
    payment_id: int,
    *,
    now: Optional[datetime] = None,
) -> Optional[CourseStatus]:
    payment = session_crud.get_payment(db, payment_id)
    if payment is None:
        logger.warning("Payment %s not found, nothing to recalculate", payment_id)
        return None
    return recalculate_for_session(db, payment.session_id, now=now)


def recalculate_for_schedule_item(
    db: Session,
    schedule_item_id: int,
    *,
    now: Optional[datetime] = None,
) -> Optional[CourseStatus]:
    item = session_crud.get_schedule_item(db, schedule_item_id)
    if item is None:
        logger.warning("Schedule item %s not found, nothing to recalculate", schedule_item_id)
        return None
    return recalculate_for_session(db, item.session_id, now=now)


# =====================================
# BATCH
# =====================================

def recalculate_many(
    db: Session,
    keys: List[EnrollmentKey],
    *,
    now: Optional[datetime] = None,
) -> RecalculationReport:
    """
    Recalculate each enrollment in ``keys``.

    A failing enrollment is logged and counted; the rest still run. Every
    write is independent, so stopping midway leaves finished rows valid.
    """
    calculated_at = now or business_now()
    report = RecalculationReport(total=len(keys))
    progress_every = max(settings.RECALC_PROGRESS_EVERY, 1)

    for index, (student_id, mentor_id, skill_name) in enumerate(keys, start=1):
        try:
            status = recalculate_one(
                db, student_id, mentor_id, skill_name, now=calculated_at
            )
        except RecalculationFailure as exc:
            report.failed += 1
            report.failed_keys.append((student_id, mentor_id, skill_name))
            logger.error(
                "Error recalculating enrollment %s/%s/%r: %s",
                student_id, mentor_id, skill_name, exc.cause,
                exc_info=exc.cause,
            )
        else:
            if status == CourseStatus.PAYMENT_PENDING:
                report.payment_pending += 1
            else:
                report.persisted += 1

        if index % progress_every == 0:
            logger.info("Recalculated %d/%d enrollments", index, report.total)

    return report


def recalculate_all(
    db: Session,
    *,
    now: Optional[datetime] = None,
) -> RecalculationReport:
    """Rebuild the status store for every enrollment with an active session."""
    keys = session_crud.list_enrollment_keys(db)
    logger.info("Starting recalculation of %d enrollments", len(keys))

    report = recalculate_many(db, keys, now=now)

    logger.info(
        "Recalculation complete: %d total, %d stored, %d payment pending, %d failed",
        report.total, report.persisted, report.payment_pending, report.failed,
    )
    return report


# =====================================
# CONSISTENCY CHECK
# =====================================

def find_status_drift(
    db: Session,
    *,
    student_id: Optional[int] = None,
) -> List[StatusDrift]:
    """
    Compare stored rows with a fresh classification.

    Reports rows whose status differs and paid enrollments with no row.
    Nothing is written.
    """
    stored = {
        (row.student_id, row.mentor_id, row.skill_name): row.course_status
        for row in enrollment_crud.list_all_enrollments(db, student_id=student_id)
    }

    keys = set(stored)
    for key in session_crud.list_enrollment_keys(db):
        if student_id is None or key[0] == student_id:
            keys.add(key)

    drifts: List[StatusDrift] = []
    for key in sorted(keys):
        live = classify(build_enrollment_group(db, *key))
        current = stored.get(key)
        if current is None and live == CourseStatus.PAYMENT_PENDING:
            continue
        if current != live:
            drifts.append(StatusDrift(*key, stored_status=current, live_status=live))

    if drifts:
        logger.warning("Found %d enrollments out of sync with the status store", len(drifts))
    return drifts


def repair_status_drift(
    db: Session,
    drifts: List[StatusDrift],
    *,
    now: Optional[datetime] = None,
) -> RecalculationReport:
    keys = [(d.student_id, d.mentor_id, d.skill_name) for d in drifts if d.repairable]
    return recalculate_many(db, keys, now=now)
