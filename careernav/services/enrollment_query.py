# careernav/services/enrollment_query.py
"""
Query Facade - read-only views for dashboards.

Ongoing / completed lists come straight from the status store; the
classifier is never re-run here, so two screens cannot disagree about an
enrollment. Only today's schedule looks at live schedule data, through the
day-window splitter.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from careernav import models
from careernav.crud import enrollment as enrollment_crud
from careernav.crud import session as session_crud
from careernav.models.enums import CourseStatus, SessionStatus
from careernav.schemas.enrollment import (
    EnrollmentSummary,
    MentorEnrollmentSummary,
    PendingSessionEntry,
    TodayEnrollmentEntry,
    TodaySchedule,
    TodayScheduleItem,
)
from careernav.services.day_window import (
    SESSION_DURATION,
    is_item_completed,
    item_start_time,
    item_window,
    split_today,
)
from careernav.services.enrollment_grouping import (
    GROUP_BY_MENTOR,
    GROUP_BY_STUDENT,
    EnrollmentGroup,
    group_sessions,
)
from careernav.services.status_classifier import is_session_paid, passes_payment_gate
from careernav.utils.business_time import (
    as_utc,
    civil_date,
    format_wall_clock,
)

logger = logging.getLogger(__name__)

UNKNOWN_MENTOR = "Unknown Mentor"
UNKNOWN_STUDENT = "Unknown Student"


# =====================================
# ENROLLMENT LISTS (STATUS STORE)
# =====================================

def _course_dates(sessions: List[models.MentorshipSession]) -> Dict[str, Any]:
    """Start/end date and time of a course, in business time."""
    items = [
        item
        for session in sessions
        for item in session.schedule_items
        if item.scheduled_date is not None
    ]
    dates: Dict[str, Any] = {
        "start_date": None,
        "end_date": None,
        "start_time": None,
        "end_time": None,
    }

    if items:
        windows = sorted(
            (window for window in (item_window(item) for item in items) if window),
            key=lambda window: window[0],
        )
        first_start, _ = windows[0]
        last_start, last_end = windows[-1]
        dates["start_date"] = civil_date(first_start)
        dates["start_time"] = format_wall_clock(first_start)
        dates["end_date"] = civil_date(last_start)
        dates["end_time"] = format_wall_clock(last_end)
        return dates

    scheduled = [s.scheduled_at for s in sessions if s.scheduled_at is not None]
    if scheduled:
        start = min(as_utc(value) for value in scheduled)
        dates["start_date"] = dates["end_date"] = civil_date(start)
        dates["start_time"] = format_wall_clock(start)
        dates["end_time"] = format_wall_clock(start + SESSION_DURATION)
    return dates


def _sessions_per_week(sessions: List[models.MentorshipSession]) -> Optional[int]:
    for session in sessions:
        if session.sessions_per_week:
            return session.sessions_per_week
    return None


def _describe(db: Session, row: models.EnrollmentStatus) -> Dict[str, Any]:
    sessions = session_crud.list_sessions(
        db,
        student_id=row.student_id,
        mentor_id=row.mentor_id,
        skill_name=row.skill_name,
    )
    details = _course_dates(sessions)
    details.update(
        skill_name=row.skill_name,
        course_status=row.course_status,
        sessions_per_week=_sessions_per_week(sessions),
        last_status_calculated_at=row.last_status_calculated_at,
    )
    return details


def student_enrollments(
    db: Session,
    student_id: int,
    course_status: CourseStatus,
) -> List[EnrollmentSummary]:
    rows = enrollment_crud.list_student_enrollments(db, student_id, course_status)
    return [
        EnrollmentSummary(
            mentor_id=row.mentor_id,
            mentor_name=row.mentor.name if row.mentor else UNKNOWN_MENTOR,
            **_describe(db, row),
        )
        for row in rows
    ]


def ongoing_enrollments(db: Session, student_id: int) -> List[EnrollmentSummary]:
    return student_enrollments(db, student_id, CourseStatus.ONGOING)


def completed_enrollments(db: Session, student_id: int) -> List[EnrollmentSummary]:
    return student_enrollments(db, student_id, CourseStatus.COMPLETED)


def mentor_enrollments(
    db: Session,
    mentor_id: int,
    course_status: CourseStatus,
) -> List[MentorEnrollmentSummary]:
    rows = enrollment_crud.list_mentor_enrollments(db, mentor_id, course_status)
    return [
        MentorEnrollmentSummary(
            student_id=row.student_id,
            student_name=row.student.name if row.student else UNKNOWN_STUDENT,
            **_describe(db, row),
        )
        for row in rows
    ]


# =====================================
# TODAY'S SCHEDULE (LIVE)
# =====================================

def _item_view(item: models.ScheduleItem, now: datetime) -> TodayScheduleItem:
    window = item_window(item)
    hour, minute = item_start_time(item)
    return TodayScheduleItem(
        id=item.id,
        session_id=item.session_id,
        scheduled_date=civil_date(item.scheduled_date) if item.scheduled_date else None,
        scheduled_time=f"{hour:02d}:{minute:02d}",
        starts_at=window[0] if window else None,
        ends_at=window[1] if window else None,
        status=item.status,
        is_completed=is_item_completed(item, now),
        topic_title=item.topic_title,
        week_number=item.week_number,
        session_number=item.session_number,
    )


def _counterpart_name(group: EnrollmentGroup, as_mentor: bool) -> str:
    if as_mentor:
        return group.student_name or UNKNOWN_STUDENT
    return group.mentor_name or UNKNOWN_MENTOR


def _entry(
    group: EnrollmentGroup,
    items: List[models.ScheduleItem],
    now: datetime,
    as_mentor: bool,
) -> TodayEnrollmentEntry:
    return TodayEnrollmentEntry(
        student_id=group.student_id,
        mentor_id=group.mentor_id,
        counterpart_name=_counterpart_name(group, as_mentor),
        skill_name=group.skill_name,
        session_ids=[session.id for session in group.sessions],
        has_payment=passes_payment_gate(group),
        today_schedule_items=[_item_view(item, now) for item in items],
    )


def todays_schedule(
    db: Session,
    user_id: int,
    *,
    now: datetime,
    as_mentor: bool = False,
) -> TodaySchedule:
    """
    Today's sessions for a student (grouped by mentor) or a mentor
    (grouped by student).

    Buckets:
        pending_approval: sessions still waiting for the mentor
        pending_payment:  enrollments that fail the payment gate
        ongoing:          today's items not finished yet
        completed:        today's items already finished
    """
    now = as_utc(now)
    if as_mentor:
        sessions = session_crud.list_sessions(db, mentor_id=user_id)
        groups = group_sessions(sessions, by=GROUP_BY_STUDENT)
    else:
        sessions = session_crud.list_sessions(db, student_id=user_id)
        groups = group_sessions(sessions, by=GROUP_BY_MENTOR)

    schedule = TodaySchedule(business_date=civil_date(now))

    for group in groups.values():
        for session in group.sessions:
            if session.status == SessionStatus.PENDING:
                schedule.pending_approval.append(
                    PendingSessionEntry(
                        session_id=session.id,
                        student_id=session.student_id,
                        mentor_id=session.mentor_id,
                        counterpart_name=_counterpart_name(group, as_mentor),
                        skill_name=session.skill_name,
                        status=session.status,
                        has_payment=is_session_paid(session),
                        scheduled_at=session.scheduled_at,
                        last_updated=session.updated_at or session.created_at,
                    )
                )

        if not passes_payment_gate(group):
            if any(session.status != SessionStatus.PENDING for session in group.sessions):
                schedule.pending_payment.append(_entry(group, [], now, as_mentor))
            continue

        split = split_today(group, now)
        if split.ongoing_items:
            schedule.ongoing.append(_entry(group, split.ongoing_items, now, as_mentor))
        if split.completed_items:
            schedule.completed.append(_entry(group, split.completed_items, now, as_mentor))

    logger.debug(
        "Today's schedule for user %s: %d ongoing, %d completed, %d pending payment",
        user_id,
        len(schedule.ongoing),
        len(schedule.completed),
        len(schedule.pending_payment),
    )
    return schedule
