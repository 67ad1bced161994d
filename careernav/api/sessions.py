# careernav/api/sessions.py
"""
Session day view and schedule item completion.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from careernav.database import get_db
from careernav.exceptions import (
    InvalidScheduleTransition,
    PermissionDenied,
    ScheduleItemNotFound,
)
from careernav.models.user import User
from careernav.schemas.enrollment import ScheduleItemCompletion, TodaySchedule
from careernav.services import enrollment_query, schedule_service
from careernav.utils.business_time import business_now
from careernav.utils.security import get_current_user, require_mentor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/today", response_model=TodaySchedule)
def get_todays_sessions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Today's sessions in business time.

    Students see one entry per mentor and skill; mentors see one entry per
    student and skill.
    """
    if current_user.role not in ("student", "mentor"):
        raise HTTPException(status_code=403, detail="Only students and mentors have a schedule")

    return enrollment_query.todays_schedule(
        db,
        current_user.id,
        now=business_now(),
        as_mentor=current_user.role == "mentor",
    )


@router.post(
    "/{session_id}/schedule/{schedule_id}/complete",
    response_model=ScheduleItemCompletion,
)
def complete_schedule_item(
    session_id: int,
    schedule_id: int,
    current_user: User = Depends(require_mentor),
    db: Session = Depends(get_db),
):
    try:
        item, course_status = schedule_service.complete_schedule_item(
            db,
            session_id=session_id,
            schedule_item_id=schedule_id,
            mentor_id=current_user.id,
        )
    except ScheduleItemNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except InvalidScheduleTransition as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return ScheduleItemCompletion(
        schedule_item_id=item.id,
        session_id=item.session_id,
        status=item.status,
        course_status=course_status,
    )
