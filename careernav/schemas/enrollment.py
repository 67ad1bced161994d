from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Tuple
from datetime import date, datetime

from careernav.models.enums import CourseStatus, PaymentStatus, ScheduleStatus, SessionStatus

# ======================
# ENROLLMENT SUMMARIES
# ======================

class EnrollmentSummary(BaseModel):
    """One row of the student's Ongoing / Completed learning lists."""
    mentor_id: int
    mentor_name: str
    skill_name: str
    course_status: CourseStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None  # "HH:MM" business time
    end_time: Optional[str] = None
    sessions_per_week: Optional[int] = None
    last_status_calculated_at: Optional[datetime] = None


class MentorEnrollmentSummary(BaseModel):
    student_id: int
    student_name: str
    skill_name: str
    course_status: CourseStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    sessions_per_week: Optional[int] = None
    last_status_calculated_at: Optional[datetime] = None

# ======================
# TODAY'S SCHEDULE
# ======================

class TodayScheduleItem(BaseModel):
    id: int
    session_id: int
    scheduled_date: Optional[date] = None  # business date
    scheduled_time: str
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    status: ScheduleStatus
    is_completed: bool
    topic_title: Optional[str] = None
    week_number: Optional[int] = None
    session_number: Optional[int] = None


class TodayEnrollmentEntry(BaseModel):
    """One enrollment in a bucket, carrying only the items of that bucket."""
    student_id: int
    mentor_id: int
    counterpart_name: str
    skill_name: str
    session_ids: List[int]
    has_payment: bool
    today_schedule_items: List[TodayScheduleItem] = []


class PendingSessionEntry(BaseModel):
    session_id: int
    student_id: int
    mentor_id: int
    counterpart_name: str
    skill_name: str
    status: SessionStatus
    has_payment: bool
    scheduled_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class TodaySchedule(BaseModel):
    business_date: date
    pending_approval: List[PendingSessionEntry] = []
    pending_payment: List[TodayEnrollmentEntry] = []
    ongoing: List[TodayEnrollmentEntry] = []
    completed: List[TodayEnrollmentEntry] = []

# ======================
# MUTATIONS & ADMIN
# ======================

class ScheduleItemCompletion(BaseModel):
    schedule_item_id: int
    session_id: int
    status: ScheduleStatus
    course_status: Optional[CourseStatus] = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus


class PaymentStatusResult(BaseModel):
    payment_id: int
    session_id: int
    status: PaymentStatus
    course_status: Optional[CourseStatus] = None


class RecalculationReportOut(BaseModel):
    total: int
    persisted: int
    payment_pending: int
    failed: int
    failed_keys: List[Tuple[int, int, str]] = []

    model_config = ConfigDict(from_attributes=True)


class StatusDriftOut(BaseModel):
    student_id: int
    mentor_id: int
    skill_name: str
    stored_status: Optional[CourseStatus] = None
    live_status: CourseStatus
    repairable: bool

    model_config = ConfigDict(from_attributes=True)


class StatusDriftResponse(BaseModel):
    drifts: List[StatusDriftOut]
    repaired: Optional[RecalculationReportOut] = None
