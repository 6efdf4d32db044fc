
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, Integer, DECIMAL, Uuid, UniqueConstraint
from gamecenter.db.session import Base

class DiscountPromotion(Base):
    __tablename__ = "discount_promotions"
    __table_args__ = (
        UniqueConstraint("category", "duration", "person_count", name="uq_discount_promotion_key"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True)
    duration = Column(String(50), nullable=False)
    person_count = Column(Integer, nullable=False, default=1)
    discount_percentage = Column(DECIMAL(5, 2), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    total_savings = Column(DECIMAL(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

class BonusHoursPromotion(Base):
    __tablename__ = "bonus_hours_promotions"
    __table_args__ = (
        UniqueConstraint("category", "duration", "person_count", name="uq_bonus_hours_promotion_key"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True)
    duration = Column(String(50), nullable=False)
    person_count = Column(Integer, nullable=False, default=1)
    bonus_hours = Column(DECIMAL(5, 2), nullable=False) # 0.5 = thirty free minutes
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    total_hours_given = Column(DECIMAL(10, 2), default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
