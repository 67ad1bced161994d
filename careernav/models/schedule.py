# careernav/models/schedule.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, Enum, func
from sqlalchemy.orm import relationship
from careernav.database import Base
from careernav.models.enums import ScheduleStatus


class ScheduleItem(Base):
    """One dated, timed occurrence within a mentorship session."""

    __tablename__ = "session_schedule"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    # UTC instant of business-midnight for the item's date.
    scheduled_date = Column(TIMESTAMP(timezone=True))
    scheduled_time = Column(String(5), nullable=False, default="00:00")  # "HH:MM" business time
    status = Column(Enum(ScheduleStatus, name="schedule_status"), default=ScheduleStatus.LOCKED, nullable=False)
    week_number = Column(Integer, default=1)
    session_number = Column(Integer, default=1)
    topic_title = Column(String(255))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    session = relationship("MentorshipSession", back_populates="schedule_items")
