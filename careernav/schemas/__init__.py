# careernav/schemas/__init__.py

from .enrollment import (
    EnrollmentSummary,
    MentorEnrollmentSummary,
    TodayScheduleItem,
    TodayEnrollmentEntry,
    PendingSessionEntry,
    TodaySchedule,
    ScheduleItemCompletion,
    PaymentStatusUpdate,
    PaymentStatusResult,
    RecalculationReportOut,
    StatusDriftOut,
    StatusDriftResponse,
)

__all__ = [
    "EnrollmentSummary",
    "MentorEnrollmentSummary",
    "TodayScheduleItem",
    "TodayEnrollmentEntry",
    "PendingSessionEntry",
    "TodaySchedule",
    "ScheduleItemCompletion",
    "PaymentStatusUpdate",
    "PaymentStatusResult",
    "RecalculationReportOut",
    "StatusDriftOut",
    "StatusDriftResponse",
]
