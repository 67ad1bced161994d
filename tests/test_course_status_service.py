# tests/test_course_status_service.py
"""
Status store recalculation, batch runs and drift detection
"""

from datetime import date

import pytest

from careernav import models
from careernav.crud import enrollment as enrollment_crud
from careernav.exceptions import RecalculationFailure
from careernav.models.enums import CourseStatus, PaymentStatus, ScheduleStatus, SessionStatus
from careernav.services import course_status_service
from careernav.utils.business_time import business_datetime

NOW = business_datetime(2026, 3, 10, 10, 30)
MONDAY = date(2026, 3, 9)
TUESDAY = date(2026, 3, 10)


def stored_rows(db):
    return db.query(models.EnrollmentStatus).all()


# ======================
# SINGLE ENROLLMENT
# ======================

def test_unpaid_enrollment_is_not_stored(db_session, seed, people):
    session = seed.session(people["student"], people["mentor"])
    seed.payment(session, status=PaymentStatus.PENDING)
    seed.item(session, MONDAY, status=ScheduleStatus.COMPLETED)

    status = course_status_service.recalculate_one(
        db_session, people["student"].id, people["mentor"].id, "Python", now=NOW
    )

    assert status == CourseStatus.PAYMENT_PENDING
    assert stored_rows(db_session) == []


def test_recalculate_one_is_idempotent(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"])
    seed.item(session, MONDAY, status=ScheduleStatus.COMPLETED)
    seed.item(session, TUESDAY, time="14:00", status=ScheduleStatus.UPCOMING)
    key = (people["student"].id, people["mentor"].id, "Python")

    first = course_status_service.recalculate_one(db_session, *key, now=NOW)
    second = course_status_service.recalculate_one(db_session, *key, now=NOW)

    assert first == second == CourseStatus.ONGOING
    rows = stored_rows(db_session)
    assert len(rows) == 1
    assert rows[0].course_status == CourseStatus.ONGOING


def test_recalculation_updates_existing_row(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"])
    last = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)
    key = (people["student"].id, people["mentor"].id, "Python")

    course_status_service.recalculate_one(db_session, *key, now=NOW)
    row_id = enrollment_crud.get_enrollment_status(db_session, *key).id

    last.status = ScheduleStatus.COMPLETED
    db_session.commit()
    assert course_status_service.recalculate_one(db_session, *key, now=NOW) == CourseStatus.COMPLETED

    row = enrollment_crud.get_enrollment_status(db_session, *key)
    assert row.id == row_id
    assert row.course_status == CourseStatus.COMPLETED


def test_merged_sessions_share_one_row(db_session, seed, people):
    paid = seed.paid_session(people["student"], people["mentor"], status=SessionStatus.SCHEDULED)
    seed.item(paid, MONDAY, status=ScheduleStatus.COMPLETED)
    seed.item(paid, TUESDAY, status=ScheduleStatus.COMPLETED)
    seed.session(people["student"], people["mentor"], status=SessionStatus.APPROVED)

    status = course_status_service.recalculate_one(
        db_session, people["student"].id, people["mentor"].id, "Python", now=NOW
    )

    assert status == CourseStatus.COMPLETED
    assert len(stored_rows(db_session)) == 1


def test_upsert_refuses_payment_pending(db_session, people):
    with pytest.raises(ValueError):
        enrollment_crud.upsert_enrollment_status(
            db_session,
            student_id=people["student"].id,
            mentor_id=people["mentor"].id,
            skill_name="Python",
            course_status=CourseStatus.PAYMENT_PENDING,
            calculated_at=NOW,
        )


def test_failure_is_wrapped_and_rolled_back(db_session, seed, people, monkeypatch):
    seed.paid_session(people["student"], people["mentor"])

    def broken(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(enrollment_crud, "upsert_enrollment_status", broken)

    with pytest.raises(RecalculationFailure) as exc_info:
        course_status_service.recalculate_one(
            db_session, people["student"].id, people["mentor"].id, "Python", now=NOW
        )

    assert isinstance(exc_info.value.cause, RuntimeError)
    assert exc_info.value.skill_name == "Python"
    assert stored_rows(db_session) == []


# ======================
# MUTATION TRIGGERS
# ======================

def test_trigger_helpers_resolve_enrollment(db_session, seed, people):
    session = seed.paid_session(people["student"], people["mentor"])
    item = seed.item(session, TUESDAY, status=ScheduleStatus.UPCOMING)
    payment = session.payments[0]

    assert course_status_service.recalculate_for_session(db_session, session.id, now=NOW) == CourseStatus.ONGOING
    assert course_status_service.recalculate_for_payment(db_session, payment.id, now=NOW) == CourseStatus.ONGOING
    assert course_status_service.recalculate_for_schedule_item(db_session, item.id, now=NOW) == CourseStatus.ONGOING
    assert len(stored_rows(db_session)) == 1


def test_trigger_helpers_ignore_unknown_ids(db_session, people):
    assert course_status_service.recalculate_for_session(db_session, 999, now=NOW) is None
    assert course_status_service.recalculate_for_payment(db_session, 999, now=NOW) is None
    assert course_status_service.recalculate_for_schedule_item(db_session, 999, now=NOW) is None


# ======================
# BATCH
# ======================

def test_recalculate_all_covers_every_active_enrollment(db_session, seed, people):
    student, mentor, other = people["student"], people["mentor"], people["other_mentor"]
    seed.paid_session(student, mentor, skill="Python")
    seed.paid_session(student, other, skill="Rust", status=SessionStatus.COMPLETED)
    seed.session(student, mentor, skill="Go")
    seed.paid_session(student, other, skill="Elixir", status=SessionStatus.CANCELLED)

    report = course_status_service.recalculate_all(db_session, now=NOW)

    assert report.total == 3
    assert report.persisted == 2
    assert report.payment_pending == 1
    assert report.failed == 0

    statuses = {row.skill_name: row.course_status for row in stored_rows(db_session)}
    assert statuses == {"Python": CourseStatus.ONGOING, "Rust": CourseStatus.COMPLETED}


def test_batch_continues_past_failing_enrollment(db_session, seed, people, monkeypatch):
    student, mentor = people["student"], people["mentor"]
    for skill in ("Go", "Python", "Rust"):
        seed.paid_session(student, mentor, skill=skill)

    real_classify = course_status_service.classify

    def flaky_classify(group):
        if group.skill_name == "Python":
            raise RuntimeError("corrupt schedule")
        return real_classify(group)

    monkeypatch.setattr(course_status_service, "classify", flaky_classify)

    report = course_status_service.recalculate_all(db_session, now=NOW)

    assert report.total == 3
    assert report.persisted == 2
    assert report.failed == 1
    assert report.failed_keys == [(student.id, mentor.id, "Python")]
    assert sorted(row.skill_name for row in stored_rows(db_session)) == ["Go", "Rust"]


# ======================
# DRIFT
# ======================

def test_drift_finds_stale_and_missing_rows(db_session, seed, people):
    student, mentor, other = people["student"], people["mentor"], people["other_mentor"]
    python = seed.paid_session(student, mentor, skill="Python")
    lesson = seed.item(python, TUESDAY, status=ScheduleStatus.UPCOMING)
    course_status_service.recalculate_one(db_session, student.id, mentor.id, "Python", now=NOW)

    # raw data moves on without a recalculation
    lesson.status = ScheduleStatus.COMPLETED
    seed.paid_session(student, other, skill="Rust")
    db_session.commit()

    drifts = course_status_service.find_status_drift(db_session)

    by_skill = {d.skill_name: d for d in drifts}
    assert set(by_skill) == {"Python", "Rust"}
    assert by_skill["Python"].stored_status == CourseStatus.ONGOING
    assert by_skill["Python"].live_status == CourseStatus.COMPLETED
    assert by_skill["Rust"].stored_status is None
    assert by_skill["Rust"].live_status == CourseStatus.ONGOING

    report = course_status_service.repair_status_drift(db_session, drifts, now=NOW)
    assert report.persisted == 2
    assert course_status_service.find_status_drift(db_session) == []


def test_drift_to_payment_pending_is_reported_not_repaired(db_session, seed, people):
    student, mentor = people["student"], people["mentor"]
    session = seed.session(student, mentor)
    payment = seed.payment(session)
    course_status_service.recalculate_one(db_session, student.id, mentor.id, "Python", now=NOW)

    payment.status = PaymentStatus.REFUNDED
    db_session.commit()

    drifts = course_status_service.find_status_drift(db_session, student_id=student.id)
    assert len(drifts) == 1
    assert drifts[0].live_status == CourseStatus.PAYMENT_PENDING
    assert not drifts[0].repairable

    report = course_status_service.repair_status_drift(db_session, drifts, now=NOW)
    assert report.total == 0
    row = enrollment_crud.get_enrollment_status(db_session, student.id, mentor.id, "Python")
    assert row.course_status == CourseStatus.ONGOING


def test_unpaid_enrollment_without_row_is_not_drift(db_session, seed, people):
    seed.session(people["student"], people["mentor"])
    assert course_status_service.find_status_drift(db_session) == []
