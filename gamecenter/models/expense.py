
import uuid
from sqlalchemy import Column, String, Date, DateTime, func, DECIMAL, Text, Uuid
from gamecenter.db.session import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), nullable=False, index=True) # rent, electricity, maintenance, ...
    description = Column(Text, nullable=False)
    amount = Column(DECIMAL(10, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
