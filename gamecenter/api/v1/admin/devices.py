from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.device import DeviceConfig
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.device import DeviceConfig as DeviceConfigSchema, DeviceConfigUpsert

router = APIRouter(prefix="/admin/devices", tags=["Admin - Devices"])


@router.get("/", response_model=List[DeviceConfigSchema])
def list_devices(db: Session = Depends(get_db)):
    return db.query(DeviceConfig).order_by(DeviceConfig.category).all()


@router.put("/", response_model=DeviceConfigSchema)
def upsert_device(data: DeviceConfigUpsert, db: Session = Depends(get_db)):
    """
    Create or replace the device list of a category. Seat names default to
    `<category>-1 .. <category>-<count>` when none are given.
    """
    device = db.query(DeviceConfig).filter(DeviceConfig.category == data.category).first()
    if device is None:
        device = DeviceConfig(category=data.category)
        db.add(device)
    device.count = data.count
    device.seats = list(data.seats)
    db.commit()
    db.refresh(device)
    return device


@router.delete("/{category}", response_model=MessageResponse)
def delete_device(category: str, db: Session = Depends(get_db)):
    device = db.query(DeviceConfig).filter(DeviceConfig.category == category).first()
    if not device:
        raise NotFoundError(f"No devices configured for category '{category}'")
    db.delete(device)
    db.commit()
    return MessageResponse(message=f"Removed {category} devices")
