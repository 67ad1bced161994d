# careernav/services/enrollment_grouping.py
"""
Enrollment Grouper

An enrollment is the (student, mentor, skill) relationship. A student may
buy several sessions for the same mentor and skill over time; all of them
roll up into one EnrollmentGroup before any status is decided.

Works on ORM rows or any object exposing the same attributes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from careernav.models.enums import INACTIVE_SESSION_STATUSES

GROUP_BY_MENTOR = "mentor"
GROUP_BY_STUDENT = "student"

_KEY_SEPARATOR = "\u0000"


def group_key(counterpart_id: Any, skill_name: str) -> str:
    return f"{counterpart_id}{_KEY_SEPARATOR}{skill_name}"


def is_active_session(session: Any) -> bool:
    return getattr(session, "status", None) not in INACTIVE_SESSION_STATUSES


def payment_records(session: Any) -> List[Any]:
    """Payments of a session as a list, whether stored as one record or many."""
    payments = getattr(session, "payments", None)
    if payments is None:
        return []
    if isinstance(payments, (list, tuple, set)):
        return [p for p in payments if p is not None]
    return [payments]


@dataclass
class EnrollmentGroup:
    student_id: Any
    mentor_id: Any
    skill_name: str
    sessions: List[Any] = field(default_factory=list)

    @property
    def key(self) -> str:
        return group_key(self.mentor_id, self.skill_name)

    @property
    def schedule_items(self) -> List[Any]:
        items: List[Any] = []
        for session in self.sessions:
            items.extend(getattr(session, "schedule_items", None) or [])
        return items

    @property
    def mentor_name(self) -> Optional[str]:
        return _related_name(self.sessions, "mentor")

    @property
    def student_name(self) -> Optional[str]:
        return _related_name(self.sessions, "student")


def _related_name(sessions: List[Any], attr: str) -> Optional[str]:
    for session in sessions:
        user = getattr(session, attr, None)
        if user is not None and getattr(user, "name", None):
            return user.name
    return None


def group_sessions(
    sessions: Iterable[Any],
    *,
    by: str = GROUP_BY_MENTOR,
) -> Dict[str, EnrollmentGroup]:
    """
    Partition sessions into enrollment groups.

    Args:
        sessions: one student's sessions (by="mentor") or one mentor's
            sessions (by="student"), with payments and schedule items loaded
        by: which counterpart id goes into the group key

    Returns:
        Mapping of group key to EnrollmentGroup, in first-seen order.
        Cancelled and rejected sessions are left out.
    """
    if by not in (GROUP_BY_MENTOR, GROUP_BY_STUDENT):
        raise ValueError(f"Unknown grouping {by!r}")

    groups: Dict[str, EnrollmentGroup] = {}
    for session in sessions:
        if not is_active_session(session):
            continue
        counterpart = session.mentor_id if by == GROUP_BY_MENTOR else session.student_id
        key = group_key(counterpart, session.skill_name)
        group = groups.get(key)
        if group is None:
            group = EnrollmentGroup(
                student_id=session.student_id,
                mentor_id=session.mentor_id,
                skill_name=session.skill_name,
            )
            groups[key] = group
        group.sessions.append(session)
    return groups
