# careernav/crud/enrollment.py
"""
Status Store operations.

The upsert is a single INSERT ... ON CONFLICT statement keyed by the
(student, mentor, skill) unique constraint, so concurrent recalculations of
the same enrollment cannot interleave a read and a write.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload

from careernav import models
from careernav.models.enums import CourseStatus

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def get_enrollment_status(
    db: Session,
    student_id: int,
    mentor_id: int,
    skill_name: str,
) -> Optional[models.EnrollmentStatus]:
    return db.query(models.EnrollmentStatus).filter(
        models.EnrollmentStatus.student_id == student_id,
        models.EnrollmentStatus.mentor_id == mentor_id,
        models.EnrollmentStatus.skill_name == skill_name,
    ).first()


def upsert_enrollment_status(
    db: Session,
    *,
    student_id: int,
    mentor_id: int,
    skill_name: str,
    course_status: CourseStatus,
    calculated_at: datetime,
) -> None:
    """
    Create or update the row for one enrollment. Does not commit.

    Raises:
        ValueError: for PAYMENT_PENDING, which is never stored
    """
    if course_status == CourseStatus.PAYMENT_PENDING:
        raise ValueError("PAYMENT_PENDING is not persisted in the status store")

    insert_factory = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert_factory is None:
        _upsert_portable(
            db,
            student_id=student_id,
            mentor_id=mentor_id,
            skill_name=skill_name,
            course_status=course_status,
            calculated_at=calculated_at,
        )
        return

    table = models.EnrollmentStatus.__table__
    stmt = insert_factory(table).values(
        student_id=student_id,
        mentor_id=mentor_id,
        skill_name=skill_name,
        course_status=course_status,
        last_status_calculated_at=calculated_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.student_id, table.c.mentor_id, table.c.skill_name],
        set_={
            "course_status": stmt.excluded.course_status,
            "last_status_calculated_at": stmt.excluded.last_status_calculated_at,
            "updated_at": func.now(),
        },
    )
    db.execute(stmt)
    # Rows already in the identity map would otherwise keep the old status.
    db.expire_all()


def _upsert_portable(db: Session, **values) -> None:
    row = db.execute(
        select(models.EnrollmentStatus).where(
            models.EnrollmentStatus.student_id == values["student_id"],
            models.EnrollmentStatus.mentor_id == values["mentor_id"],
            models.EnrollmentStatus.skill_name == values["skill_name"],
        ).with_for_update()
    ).scalar_one_or_none()
    if row is None:
        row = models.EnrollmentStatus(
            student_id=values["student_id"],
            mentor_id=values["mentor_id"],
            skill_name=values["skill_name"],
        )
        db.add(row)
    row.course_status = values["course_status"]
    row.last_status_calculated_at = values["calculated_at"]
    db.flush()


def list_student_enrollments(
    db: Session,
    student_id: int,
    course_status: Optional[CourseStatus] = None,
) -> List[models.EnrollmentStatus]:
    query = db.query(models.EnrollmentStatus).options(
        joinedload(models.EnrollmentStatus.mentor)
    ).filter(models.EnrollmentStatus.student_id == student_id)
    if course_status is not None:
        query = query.filter(models.EnrollmentStatus.course_status == course_status)
    return query.order_by(
        models.EnrollmentStatus.skill_name.asc(),
        models.EnrollmentStatus.id.asc(),
    ).all()


def list_mentor_enrollments(
    db: Session,
    mentor_id: int,
    course_status: Optional[CourseStatus] = None,
) -> List[models.EnrollmentStatus]:
    query = db.query(models.EnrollmentStatus).options(
        joinedload(models.EnrollmentStatus.student)
    ).filter(models.EnrollmentStatus.mentor_id == mentor_id)
    if course_status is not None:
        query = query.filter(models.EnrollmentStatus.course_status == course_status)
    return query.order_by(
        models.EnrollmentStatus.skill_name.asc(),
        models.EnrollmentStatus.id.asc(),
    ).all()


def list_all_enrollments(
    db: Session,
    student_id: Optional[int] = None,
) -> List[models.EnrollmentStatus]:
    query = db.query(models.EnrollmentStatus)
    if student_id is not None:
        query = query.filter(models.EnrollmentStatus.student_id == student_id)
    return query.order_by(models.EnrollmentStatus.id.asc()).all()


def count_by_status(db: Session) -> dict:
    rows = db.query(
        models.EnrollmentStatus.course_status,
        func.count(models.EnrollmentStatus.id),
    ).group_by(models.EnrollmentStatus.course_status).all()
    return {
        (status.value if hasattr(status, "value") else str(status)): count
        for status, count in rows
    }
