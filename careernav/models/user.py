from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, func
from sqlalchemy.orm import relationship
from careernav.database import Base


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False)  # 'student', 'mentor' or 'admin'
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    student_sessions = relationship(
        "MentorshipSession",
        foreign_keys="MentorshipSession.student_id",
        back_populates="student",
        passive_deletes=True,
    )
    mentor_sessions = relationship(
        "MentorshipSession",
        foreign_keys="MentorshipSession.mentor_id",
        back_populates="mentor",
        passive_deletes=True,
    )
