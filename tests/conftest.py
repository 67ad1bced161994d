"""Pytest bootstrap and shared fixtures."""

from pathlib import Path
import sys

# Ensure project root is on sys.path so `import careernav` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from careernav import models  # noqa: E402
from careernav.database import Base  # noqa: E402
from careernav.models.enums import PaymentStatus, ScheduleStatus, SessionStatus  # noqa: E402
from careernav.utils.business_time import business_datetime  # noqa: E402


# ======================
# TEST DATABASE SETUP
# ======================

@pytest.fixture
def db_session():
    """In-memory database per test"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    engine.dispose()


class Seed:
    """Small helpers for building raw session data."""

    def __init__(self, db):
        self.db = db

    def user(self, name, role, email=None):
        user = models.User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@test.com",
            role=role,
            is_active=True,
        )
        self.db.add(user)
        self.db.commit()
        return user

    def session(
        self,
        student,
        mentor,
        skill="Python",
        status=SessionStatus.APPROVED,
        sessions_per_week=None,
        scheduled_at=None,
    ):
        session = models.MentorshipSession(
            student_id=student.id,
            mentor_id=mentor.id,
            skill_name=skill,
            status=status,
            sessions_per_week=sessions_per_week,
            scheduled_at=scheduled_at,
        )
        self.db.add(session)
        self.db.commit()
        return session

    def payment(self, session, status=PaymentStatus.SUCCESS, amount=100):
        payment = models.Payment(session_id=session.id, status=status, amount=amount)
        self.db.add(payment)
        self.db.commit()
        return payment

    def item(
        self,
        session,
        day: date,
        time="09:00",
        status=ScheduleStatus.LOCKED,
        week_number=1,
        session_number=1,
        topic_title=None,
    ):
        item = models.ScheduleItem(
            session_id=session.id,
            scheduled_date=business_datetime(day.year, day.month, day.day),
            scheduled_time=time,
            status=status,
            week_number=week_number,
            session_number=session_number,
            topic_title=topic_title,
        )
        self.db.add(item)
        self.db.commit()
        return item

    def paid_session(self, student, mentor, skill="Python", **kwargs):
        session = self.session(student, mentor, skill=skill, **kwargs)
        self.payment(session)
        return session


@pytest.fixture
def seed(db_session):
    return Seed(db_session)


@pytest.fixture
def people(seed):
    """A student, two mentors and an admin"""
    return {
        "student": seed.user("Asha Student", "student"),
        "mentor": seed.user("Ravi Mentor", "mentor"),
        "other_mentor": seed.user("Meera Mentor", "mentor"),
        "admin": seed.user("Ops Admin", "admin"),
    }
