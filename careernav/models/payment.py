# careernav/models/payment.py
from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, Enum, Numeric, func
from sqlalchemy.orm import relationship
from careernav.database import Base
from careernav.models.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    # Not unique: legacy data holds retried payments for the same session.
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(PaymentStatus, name="payment_status"), default=PaymentStatus.PENDING, nullable=False)
    amount = Column(Numeric(10, 2))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    session = relationship("MentorshipSession", back_populates="payments")
