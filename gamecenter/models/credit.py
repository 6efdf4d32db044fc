
import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from gamecenter.db.session import Base

class CreditAccount(Base):
    __tablename__ = "credit_accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_name = Column(String(255), nullable=False)
    whatsapp_number = Column(String(20), unique=True, nullable=False, index=True)
    current_balance = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_credit_issued = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_paid = Column(DECIMAL(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    entries = relationship(
        "CreditEntry", back_populates="account", cascade="all, delete-orphan",
        order_by="CreditEntry.created_at",
    )
    payments = relationship(
        "CreditPayment", back_populates="account", cascade="all, delete-orphan",
        order_by="CreditPayment.paid_at",
    )

class CreditEntry(Base):
    __tablename__ = "credit_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, ForeignKey("credit_accounts.id"), nullable=False, index=True)
    booking_id = Column(Uuid, nullable=True) # live booking id; survives archival as BookingHistory.booking_id
    total_amount = Column(DECIMAL(10, 2), nullable=False)
    non_credit_paid = Column(DECIMAL(10, 2), nullable=False, default=0) # paid up front in cash/UPI
    credit_issued = Column(DECIMAL(10, 2), nullable=False)
    remaining_amount = Column(DECIMAL(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending") # pending, paid
    created_at = Column(DateTime, nullable=False)

    account = relationship("CreditAccount", back_populates="entries")

class CreditPayment(Base):
    __tablename__ = "credit_payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, ForeignKey("credit_accounts.id"), nullable=False, index=True)
    amount = Column(DECIMAL(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False) # cash, upi, split
    cash_amount = Column(DECIMAL(10, 2), nullable=True)
    upi_amount = Column(DECIMAL(10, 2), nullable=True)
    paid_at = Column(DateTime, nullable=False)

    account = relationship("CreditAccount", back_populates="payments")
