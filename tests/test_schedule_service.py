# tests/test_schedule_service.py
"""
Schedule item completion, payment updates and the status sweep
"""

from datetime import date

import pytest

from careernav.crud import enrollment as enrollment_crud
from careernav.exceptions import (
    InvalidScheduleTransition,
    PaymentNotFound,
    PermissionDenied,
    RecalculationFailure,
    ScheduleItemNotFound,
)
from careernav.models.enums import CourseStatus, PaymentStatus, ScheduleStatus, SessionStatus
from careernav.services import course_status_service, schedule_service
from careernav.utils.business_time import business_datetime

NOW = business_datetime(2026, 3, 10, 10, 30)
MONDAY = date(2026, 3, 9)
TUESDAY = date(2026, 3, 10)
WEDNESDAY = date(2026, 3, 11)


def stored_status(db, student, mentor, skill="Python"):
    row = enrollment_crud.get_enrollment_status(db, student.id, mentor.id, skill)
    return row.course_status if row else None


# ======================
# COMPLETE SCHEDULE ITEM
# ======================

def test_completing_last_item_completes_course(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.paid_session(student, mentor)
    seed.item(session, MONDAY, status=ScheduleStatus.COMPLETED)
    today = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)

    item, course_status = schedule_service.complete_schedule_item(
        db_session,
        session_id=session.id,
        schedule_item_id=today.id,
        mentor_id=mentor.id,
        now=NOW,
    )

    assert item.status == ScheduleStatus.COMPLETED
    assert course_status == CourseStatus.COMPLETED
    assert stored_status(db_session, student, mentor) == CourseStatus.COMPLETED


def test_completing_item_keeps_course_ongoing_when_more_remain(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.paid_session(student, mentor)
    today = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)
    seed.item(session, WEDNESDAY)

    _, course_status = schedule_service.complete_schedule_item(
        db_session,
        session_id=session.id,
        schedule_item_id=today.id,
        mentor_id=mentor.id,
        now=NOW,
    )

    assert course_status == CourseStatus.ONGOING
    assert stored_status(db_session, student, mentor) == CourseStatus.ONGOING


def test_only_owning_mentor_can_complete(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"])
    today = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)

    with pytest.raises(PermissionDenied):
        schedule_service.complete_schedule_item(
            db_session,
            session_id=session.id,
            schedule_item_id=today.id,
            mentor_id=people["other_mentor"].id,
            now=NOW,
        )


def test_locked_item_cannot_be_completed(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"])
    later = seed.item(session, WEDNESDAY, status=ScheduleStatus.LOCKED)

    with pytest.raises(InvalidScheduleTransition, match="Only UPCOMING"):
        schedule_service.complete_schedule_item(
            db_session,
            session_id=session.id,
            schedule_item_id=later.id,
            mentor_id=people["mentor"].id,
            now=NOW,
        )


def test_item_must_belong_to_session(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    first = seed.paid_session(student, mentor)
    second = seed.paid_session(student, mentor, skill="Rust")
    foreign = seed.item(second, TUESDAY, status=ScheduleStatus.UPCOMING)

    with pytest.raises(ScheduleItemNotFound):
        schedule_service.complete_schedule_item(
            db_session,
            session_id=first.id,
            schedule_item_id=foreign.id,
            mentor_id=mentor.id,
            now=NOW,
        )
    with pytest.raises(ScheduleItemNotFound):
        schedule_service.complete_schedule_item(
            db_session,
            session_id=999,
            schedule_item_id=foreign.id,
            mentor_id=mentor.id,
            now=NOW,
        )


def test_completion_stands_when_recalculation_fails(db_session, seed, people, monkeypatch):
    student, mentor = people["student"], people["mentor"]
    session = seed.paid_session(student, mentor)
    today = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)

    def failing(db, student_id, mentor_id, skill_name, now=None):
        raise RecalculationFailure(student_id, mentor_id, skill_name, RuntimeError("boom"))

    monkeypatch.setattr(course_status_service, "recalculate_one", failing)

    item, course_status = schedule_service.complete_schedule_item(
        db_session,
        session_id=session.id,
        schedule_item_id=today.id,
        mentor_id=mentor.id,
        now=NOW,
    )

    assert item.status == ScheduleStatus.COMPLETED
    assert course_status is None
    assert stored_status(db_session, student, mentor) is None


# ======================
# PAYMENT STATUS
# ======================

def test_successful_payment_makes_course_ongoing(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.session(student, mentor)
    payment = seed.payment(session, status=PaymentStatus.PENDING)
    seed.item(session, WEDNESDAY)

    payment, course_status = schedule_service.record_payment_status(
        db_session, payment_id=payment.id, status=PaymentStatus.SUCCESS, now=NOW
    )

    assert payment.status == PaymentStatus.SUCCESS
    assert course_status == CourseStatus.ONGOING
    assert stored_status(db_session, student, mentor) == CourseStatus.ONGOING


def test_failed_payment_writes_nothing(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.session(student, mentor)
    payment = seed.payment(session, status=PaymentStatus.PENDING)

    _, course_status = schedule_service.record_payment_status(
        db_session, payment_id=payment.id, status=PaymentStatus.FAILED, now=NOW
    )

    assert course_status == CourseStatus.PAYMENT_PENDING
    assert stored_status(db_session, student, mentor) is None


def test_unknown_payment(db_session):
    with pytest.raises(PaymentNotFound):
        schedule_service.record_payment_status(
            db_session, payment_id=42, status=PaymentStatus.SUCCESS, now=NOW
        )


# ======================
# STATUS SWEEP
# ======================

def test_refresh_moves_flags_with_the_clock(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.paid_session(student, mentor)
    yesterday = seed.item(session, MONDAY, time="09:00", status=ScheduleStatus.LOCKED)
    this_morning = seed.item(session, TUESDAY, time="09:00", status=ScheduleStatus.UPCOMING)
    this_afternoon = seed.item(session, TUESDAY, time="14:00", status=ScheduleStatus.LOCKED)
    tomorrow = seed.item(session, WEDNESDAY, time="09:00", status=ScheduleStatus.UPCOMING)

    report = schedule_service.refresh_schedule_statuses(db_session, now=NOW)

    assert report.items_completed == 2
    assert report.items_unlocked == 1
    assert report.items_locked == 1
    assert report.enrollments_touched == 1
    assert report.recalculation.persisted == 1

    for item in (yesterday, this_morning, this_afternoon, tomorrow):
        db_session.refresh(item)
    assert yesterday.status == ScheduleStatus.COMPLETED
    assert this_morning.status == ScheduleStatus.COMPLETED
    assert this_afternoon.status == ScheduleStatus.UPCOMING
    assert tomorrow.status == ScheduleStatus.LOCKED
    assert stored_status(db_session, student, mentor) == CourseStatus.ONGOING


def test_refresh_skips_cancelled_sessions(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"], status=SessionStatus.CANCELLED)
    old = seed.item(session, MONDAY, status=ScheduleStatus.LOCKED)

    report = schedule_service.refresh_schedule_statuses(db_session, now=NOW)

    db_session.refresh(old)
    assert old.status == ScheduleStatus.LOCKED
    assert report.items_completed == 0


def test_sweep_completes_finished_course(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.paid_session(student, mentor)
    seed.item(session, MONDAY, status=ScheduleStatus.UPCOMING)
    course_status_service.recalculate_one(db_session, student.id, mentor.id, "Python", now=NOW)
    assert stored_status(db_session, student, mentor) == CourseStatus.ONGOING

    report = schedule_service.run_status_sweep(db_session, now=NOW)

    assert report.items_completed == 1
    assert stored_status(db_session, student, mentor) == CourseStatus.COMPLETED


def test_full_sweep_rebuilds_whole_store(db_session, seed, people):
    student = people["student"]
    seed.paid_session(student, people["mentor"], skill="Python")
    seed.paid_session(student, people["other_mentor"], skill="Rust")

    report = schedule_service.run_status_sweep(db_session, now=NOW, full=True)

    assert report.items_completed == 0
    assert report.recalculation.total == 2
    assert report.recalculation.persisted == 2
