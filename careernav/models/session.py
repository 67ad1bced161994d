# careernav/models/session.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, Enum, func
from sqlalchemy.orm import relationship
from careernav.database import Base
from careernav.models.enums import SessionStatus
from careernav.models.schedule import ScheduleItem


class MentorshipSession(Base):
    """One purchased engagement between a student and a mentor for one skill."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_name = Column(String(150), nullable=False, index=True)
    status = Column(Enum(SessionStatus, name="session_status"), default=SessionStatus.PENDING, nullable=False)
    scheduled_at = Column(TIMESTAMP(timezone=True))
    sessions_per_week = Column(Integer)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    # Relationships
    student = relationship("User", foreign_keys=[student_id], back_populates="student_sessions")
    mentor = relationship("User", foreign_keys=[mentor_id], back_populates="mentor_sessions")
    payments = relationship("Payment", back_populates="session", cascade="all, delete-orphan")
    schedule_items = relationship(
        "ScheduleItem",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by=[ScheduleItem.scheduled_date, ScheduleItem.scheduled_time, ScheduleItem.id],
    )
