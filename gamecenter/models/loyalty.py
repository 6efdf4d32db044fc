
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, DECIMAL, Integer, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from gamecenter.db.session import Base

TIERS = ("bronze", "silver", "gold", "platinum")

class LoyaltyConfig(Base):
    __tablename__ = "loyalty_config"

    id = Column(String(20), primary_key=True, default="global")
    enabled = Column(Boolean, default=True, nullable=False)
    points_per_visit = Column(Integer, nullable=False, default=10)
    # Bronze always starts at 0
    silver_threshold = Column(Integer, nullable=False, default=100)
    gold_threshold = Column(Integer, nullable=False, default=500)
    platinum_threshold = Column(Integer, nullable=False, default=1000)
    updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

class LoyaltySpendBracket(Base):
    __tablename__ = "loyalty_spend_brackets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    min_spent = Column(DECIMAL(10, 2), nullable=False)
    max_spent = Column(DECIMAL(10, 2), nullable=True) # NULL = unbounded
    points = Column(Integer, nullable=False)

class LoyaltyMember(Base):
    __tablename__ = "loyalty_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    whatsapp_number = Column(String(20), unique=True, nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    points = Column(Integer, nullable=False, default=0) # available to redeem
    lifetime_points = Column(Integer, nullable=False, default=0) # drives the tier
    tier = Column(String(20), nullable=False, default="bronze")
    total_visits = Column(Integer, nullable=False, default=0)
    total_spent = Column(DECIMAL(12, 2), nullable=False, default=0)
    last_visit_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    redemptions = relationship("LoyaltyRedemption", back_populates="member", cascade="all, delete-orphan")

class LoyaltyReward(Base):
    __tablename__ = "loyalty_rewards"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    points_cost = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

class LoyaltyRedemption(Base):
    __tablename__ = "loyalty_redemptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id = Column(Uuid, ForeignKey("loyalty_members.id"), nullable=False, index=True)
    reward_id = Column(Uuid, ForeignKey("loyalty_rewards.id"), nullable=False)
    points_spent = Column(Integer, nullable=False)
    redeemed_at = Column(DateTime, nullable=False)

    member = relationship("LoyaltyMember", back_populates="redemptions")
    reward = relationship("LoyaltyReward")
