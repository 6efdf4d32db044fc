
import uuid
from sqlalchemy import Column, String, Integer, JSON, Uuid
from gamecenter.db.session import Base

class DeviceConfig(Base):
    __tablename__ = "device_configs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String(50), unique=True, nullable=False, index=True) # PC, PS5, VR, ...
    count = Column(Integer, nullable=False)
    seats = Column(JSON, nullable=False, default=list) # ["PC-1", "PC-2", ...]
