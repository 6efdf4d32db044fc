from gamecenter.models.device import DeviceConfig
from gamecenter.models.pricing import PricingConfig, HappyHoursConfig, HappyHoursPricing
from gamecenter.models.promotion import DiscountPromotion, BonusHoursPromotion
from gamecenter.models.food import FoodItem
from gamecenter.models.booking import Booking, BookingHistory
from gamecenter.models.loyalty import (
    LoyaltyConfig, LoyaltySpendBracket, LoyaltyMember, LoyaltyReward, LoyaltyRedemption,
)
from gamecenter.models.credit import CreditAccount, CreditEntry, CreditPayment
from gamecenter.models.expense import Expense
