# careernav/api/enrollments.py
"""
Enrollment lists for dashboards.

Everything here is read from the status store; nothing is reclassified on
the read path.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from careernav.database import get_db
from careernav.models.enums import CourseStatus
from careernav.models.user import User
from careernav.schemas.enrollment import EnrollmentSummary, MentorEnrollmentSummary
from careernav.services import enrollment_query
from careernav.utils.security import require_mentor, require_student

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("/ongoing", response_model=List[EnrollmentSummary])
def list_ongoing_enrollments(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    """Courses the student has paid for and not finished yet."""
    return enrollment_query.ongoing_enrollments(db, current_user.id)


@router.get("/completed", response_model=List[EnrollmentSummary])
def list_completed_enrollments(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    return enrollment_query.completed_enrollments(db, current_user.id)


@router.get("/mentoring", response_model=List[MentorEnrollmentSummary])
def list_mentoring_enrollments(
    status: CourseStatus = Query(CourseStatus.ONGOING),
    current_user: User = Depends(require_mentor),
    db: Session = Depends(get_db),
):
    """Students the mentor is teaching (or has taught), one row per skill."""
    return enrollment_query.mentor_enrollments(db, current_user.id, status)
