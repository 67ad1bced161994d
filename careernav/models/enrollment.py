# careernav/models/enrollment.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship
from careernav.database import Base
from careernav.models.enums import CourseStatus


class EnrollmentStatus(Base):
    """
    Persisted course status per (student, mentor, skill).

    Read model for every dashboard. Rows are written only by the
    recalculator in careernav.services.course_status_service and hold
    ONGOING or COMPLETED; payment-pending enrollments have no row.
    """

    __tablename__ = "enrollment_statuses"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_name = Column(String(150), nullable=False)
    course_status = Column(Enum(CourseStatus, name="course_status"), nullable=False)
    last_status_calculated_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("student_id", "mentor_id", "skill_name", name="uq_enrollment_student_mentor_skill"),
    )

    student = relationship("User", foreign_keys=[student_id])
    mentor = relationship("User", foreign_keys=[mentor_id])
