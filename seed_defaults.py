import logging

from gamecenter.core.config import settings
from gamecenter.db.base import Base
from gamecenter.db.init_db import create_database
from gamecenter.db.seed import initialize_defaults
from gamecenter.db.session import SessionLocal, engine


def seed_defaults():
    create_database()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if initialize_defaults(db):
            print("Loaded default devices, pricing, food menu and loyalty config.")
        else:
            print("Devices already configured; nothing to do.")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    seed_defaults()
