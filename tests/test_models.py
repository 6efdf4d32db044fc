from sqlalchemy import inspect
from sqlalchemy.orm import configure_mappers

from gamecenter.db.base import Base
from gamecenter.models.booking import Booking, BookingHistory


def test_mappers_configure():
    configure_mappers()


def test_all_tables_registered():
    expected = {
        "device_configs",
        "pricing_configs",
        "happy_hours_configs",
        "happy_hours_pricing",
        "discount_promotions",
        "bonus_hours_promotions",
        "food_items",
        "bookings",
        "booking_history",
        "loyalty_config",
        "loyalty_spend_brackets",
        "loyalty_members",
        "loyalty_rewards",
        "loyalty_redemptions",
        "credit_accounts",
        "credit_entries",
        "credit_payments",
        "expenses",
    }
    assert expected <= set(Base.metadata.tables)


def test_history_keeps_every_booking_column():
    booking_columns = {c.name for c in Booking.__table__.columns}
    history_columns = {c.name for c in BookingHistory.__table__.columns}
    assert booking_columns <= history_columns
    assert {"booking_id", "archived_at"} <= history_columns


def test_tables_created(db_engine):
    assert "bookings" in inspect(db_engine).get_table_names()
