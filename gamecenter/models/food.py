
import uuid
from sqlalchemy import Column, String, Integer, DECIMAL, Uuid
from gamecenter.db.session import Base

class FoodItem(Base):
    __tablename__ = "food_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    category = Column(String(50), nullable=True) # snacks, drinks, meals
    current_stock = Column(Integer, nullable=True) # NULL = stock not tracked
