# careernav/api/admin.py
"""
Admin maintenance endpoints for the status store.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from careernav.database import get_db
from careernav.exceptions import PaymentNotFound
from careernav.models.user import User
from careernav.schemas.enrollment import (
    PaymentStatusResult,
    PaymentStatusUpdate,
    RecalculationReportOut,
    StatusDriftOut,
    StatusDriftResponse,
)
from careernav.services import course_status_service, schedule_service
from careernav.utils.business_time import business_now
from careernav.utils.security import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])


# ─────────────────────────────────────────
# POST /admin/enrollments/recalculate
# ─────────────────────────────────────────
@router.post("/enrollments/recalculate", response_model=RecalculationReportOut)
def recalculate_enrollments(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    report = course_status_service.recalculate_all(db, now=business_now())
    return RecalculationReportOut(**asdict(report))


# ─────────────────────────────────────────
# GET /admin/enrollments/drift
# ─────────────────────────────────────────
@router.get("/enrollments/drift", response_model=StatusDriftResponse)
def get_status_drift(
    repair: bool = Query(False),
    student_id: Optional[int] = Query(None),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List stored statuses that disagree with raw data; optionally fix them."""
    drifts = course_status_service.find_status_drift(db, student_id=student_id)
    response = StatusDriftResponse(
        drifts=[StatusDriftOut.model_validate(drift) for drift in drifts]
    )
    if repair and drifts:
        report = course_status_service.repair_status_drift(db, drifts, now=business_now())
        response.repaired = RecalculationReportOut(**asdict(report))
    return response


# ─────────────────────────────────────────
# PATCH /admin/payments/{payment_id}/status
# ─────────────────────────────────────────
@router.patch("/payments/{payment_id}/status", response_model=PaymentStatusResult)
def update_payment_status(
    payment_id: int,
    payload: PaymentStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        payment, course_status = schedule_service.record_payment_status(
            db,
            payment_id=payment_id,
            status=payload.status,
        )
    except PaymentNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return PaymentStatusResult(
        payment_id=payment.id,
        session_id=payment.session_id,
        status=payment.status,
        course_status=course_status,
    )
