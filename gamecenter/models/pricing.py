
import uuid
from sqlalchemy import Column, String, Boolean, Integer, DECIMAL, Time, Uuid, UniqueConstraint
from gamecenter.db.session import Base

class PricingConfig(Base):
    __tablename__ = "pricing_configs"
    __table_args__ = (
        UniqueConstraint("category", "duration", "person_count", name="uq_pricing_key"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True)
    duration = Column(String(50), nullable=False) # "30 mins", "1 hour", ...
    person_count = Column(Integer, nullable=False, default=1)
    price = Column(DECIMAL(10, 2), nullable=False)

class HappyHoursConfig(Base):
    __tablename__ = "happy_hours_configs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False) # may be earlier than start_time for windows past midnight
    enabled = Column(Boolean, default=True, nullable=False)

class HappyHoursPricing(Base):
    __tablename__ = "happy_hours_pricing"
    __table_args__ = (
        UniqueConstraint("category", "duration", "person_count", name="uq_happy_hours_pricing_key"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True)
    duration = Column(String(50), nullable=False)
    person_count = Column(Integer, nullable=False, default=1)
    price = Column(DECIMAL(10, 2), nullable=False)
