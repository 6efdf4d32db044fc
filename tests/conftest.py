"""Pytest configuration and fixtures."""

import os

# Must be set before gamecenter.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_BACKGROUND_SWEEPS"] = "false"

import pytest
from datetime import datetime
from decimal import Decimal
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import FixedClock
from gamecenter.db.base import Base
from gamecenter.db.session import get_db
from gamecenter.main import app
from gamecenter.models.device import DeviceConfig
from gamecenter.models.food import FoodItem
from gamecenter.schemas.booking import BookingCreate
from gamecenter.schemas.pricing import PriceRowIn
from gamecenter.services import lifecycle, pricing

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Wednesday, noon
START = datetime(2025, 1, 1, 12, 0)


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture(scope="function")
def client(db_session: Session, clock: FixedClock) -> Generator[TestClient, None, None]:
    """Create a test client with database and clock overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def devices(db_session: Session):
    """PC x5 and PS5 x3, as on a fresh install."""
    rows = [
        DeviceConfig(category="PC", count=5, seats=[f"PC-{i}" for i in range(1, 6)]),
        DeviceConfig(category="PS5", count=3, seats=[f"PS5-{i}" for i in range(1, 4)]),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def price_tables(db_session: Session, devices):
    """Regular prices for PC and PS5 (PS5 also priced for two players)."""
    pricing.replace_pricing(db_session, "PC", [
        PriceRowIn(duration="30 mins", price=Decimal("60")),
        PriceRowIn(duration="1 hour", price=Decimal("100")),
        PriceRowIn(duration="2 hours", price=Decimal("180")),
    ])
    pricing.replace_pricing(db_session, "PS5", [
        PriceRowIn(duration="1 hour", person_count=1, price=Decimal("120")),
        PriceRowIn(duration="1 hour", person_count=2, price=Decimal("200")),
        PriceRowIn(duration="2 hours", person_count=1, price=Decimal("220")),
    ])


@pytest.fixture
def snack(db_session: Session) -> FoodItem:
    item = FoodItem(name="Nachos", price=Decimal("80"), category="snacks", current_stock=5)
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def book(db_session: Session, price_tables, clock: FixedClock):
    """Create a booking through the lifecycle service at the fixture clock's time."""
    def _book(seat_name="PC-1", duration="1 hour", category="PC", **kwargs):
        kwargs.setdefault("customer_name", "Ravi")
        data = BookingCreate(category=category, seat_name=seat_name, duration=duration, **kwargs)
        return lifecycle.create_booking(db_session, data, clock.now())
    return _book
