import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from gamecenter.models.device import DeviceConfig
from gamecenter.models.food import FoodItem
from gamecenter.models.pricing import PricingConfig
from gamecenter.services.loyalty import get_config

logger = logging.getLogger(__name__)

DEFAULT_DEVICES = {
    "PC": 5,
    "PS5": 3,
}

DEFAULT_PRICING = [
    ("PC", "30 mins", "10"),
    ("PC", "1 hour", "18"),
    ("PC", "2 hours", "30"),
    ("PS5", "30 mins", "15"),
    ("PS5", "1 hour", "25"),
    ("PS5", "2 hours", "45"),
]

DEFAULT_FOOD = [
    ("Pizza", "8", "meals"),
    ("Burger", "6", "meals"),
    ("Fries", "3", "snacks"),
    ("Soda", "2", "drinks"),
    ("Water", "1", "drinks"),
    ("Sandwich", "5", "meals"),
    ("Hot Dog", "4", "meals"),
    ("Coffee", "3", "drinks"),
    ("Energy Drink", "4", "drinks"),
    ("Nachos", "5", "snacks"),
]


def initialize_defaults(db: Session) -> bool:
    """
    Load the starter devices, price table and food menu into an empty
    database. Returns False without touching anything once devices exist.
    """
    if db.query(DeviceConfig).first():
        return False

    for category, count in DEFAULT_DEVICES.items():
        db.add(DeviceConfig(
            category=category,
            count=count,
            seats=[f"{category}-{i}" for i in range(1, count + 1)],
        ))
    for category, duration, price in DEFAULT_PRICING:
        db.add(PricingConfig(category=category, duration=duration, person_count=1, price=Decimal(price)))
    for name, price, category in DEFAULT_FOOD:
        db.add(FoodItem(name=name, price=Decimal(price), category=category))
    db.commit()

    # Creates the loyalty row with default thresholds
    get_config(db)

    logger.info("Database initialized with default data")
    return True
