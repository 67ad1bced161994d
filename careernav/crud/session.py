# careernav/crud/session.py
"""
Read access to raw session, payment and schedule data.

Sessions are returned with payments, schedule items and both parties
eager-loaded so grouping and classification never issue lazy queries.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from careernav import models
from careernav.models.enums import INACTIVE_SESSION_STATUSES


def _with_relations(query):
    return query.options(
        selectinload(models.MentorshipSession.payments),
        selectinload(models.MentorshipSession.schedule_items),
        joinedload(models.MentorshipSession.mentor),
        joinedload(models.MentorshipSession.student),
    )


def list_sessions(
    db: Session,
    *,
    student_id: Optional[int] = None,
    mentor_id: Optional[int] = None,
    skill_name: Optional[str] = None,
    include_inactive: bool = False,
) -> List[models.MentorshipSession]:
    """
    List sessions matching the given filters.

    Args:
        db: Database session
        student_id: Only sessions bought by this student
        mentor_id: Only sessions taught by this mentor
        skill_name: Only sessions for this skill
        include_inactive: Keep CANCELLED and REJECTED sessions

    Returns:
        Sessions ordered by creation, oldest first
    """
    query = _with_relations(db.query(models.MentorshipSession))

    if student_id is not None:
        query = query.filter(models.MentorshipSession.student_id == student_id)
    if mentor_id is not None:
        query = query.filter(models.MentorshipSession.mentor_id == mentor_id)
    if skill_name is not None:
        query = query.filter(models.MentorshipSession.skill_name == skill_name)
    if not include_inactive:
        query = query.filter(models.MentorshipSession.status.notin_(INACTIVE_SESSION_STATUSES))

    return query.order_by(
        models.MentorshipSession.created_at.asc(),
        models.MentorshipSession.id.asc(),
    ).all()


def get_session(db: Session, session_id: int) -> Optional[models.MentorshipSession]:
    return db.query(models.MentorshipSession).filter(
        models.MentorshipSession.id == session_id
    ).first()


def get_payment(db: Session, payment_id: int) -> Optional[models.Payment]:
    return db.query(models.Payment).filter(models.Payment.id == payment_id).first()


def get_schedule_item(db: Session, schedule_item_id: int) -> Optional[models.ScheduleItem]:
    return db.query(models.ScheduleItem).filter(
        models.ScheduleItem.id == schedule_item_id
    ).first()


def list_open_schedule_items(db: Session) -> List[models.ScheduleItem]:
    """Schedule items not yet COMPLETED, on sessions that are still active."""
    return db.query(models.ScheduleItem).join(
        models.MentorshipSession,
        models.ScheduleItem.session_id == models.MentorshipSession.id,
    ).options(
        joinedload(models.ScheduleItem.session)
    ).filter(
        models.ScheduleItem.status != models.ScheduleStatus.COMPLETED,
        models.MentorshipSession.status.notin_(INACTIVE_SESSION_STATUSES),
    ).order_by(models.ScheduleItem.id.asc()).all()


def list_enrollment_keys(db: Session) -> List[Tuple[int, int, str]]:
    """Distinct (student, mentor, skill) triples with at least one active session."""
    rows = db.query(
        models.MentorshipSession.student_id,
        models.MentorshipSession.mentor_id,
        models.MentorshipSession.skill_name,
    ).filter(
        models.MentorshipSession.status.notin_(INACTIVE_SESSION_STATUSES)
    ).distinct().order_by(
        models.MentorshipSession.student_id,
        models.MentorshipSession.mentor_id,
        models.MentorshipSession.skill_name,
    ).all()
    return [(row[0], row[1], row[2]) for row in rows]
