
from gamecenter.schemas.common import PaginatedResponse, ErrorResponse, MessageResponse
from gamecenter.schemas.device import DeviceConfig, DeviceConfigUpsert
from gamecenter.schemas.pricing import (
    PriceRow, PriceRowIn, PriceTableReplace,
    HappyHoursWindow, HappyHoursWindowIn, HappyHoursWindowsReplace, HappyHoursStatus,
    ResolvedPrice,
)
from gamecenter.schemas.promotion import (
    DiscountPromotion, DiscountPromotionCreate, DiscountPromotionUpdate,
    BonusHoursPromotion, BonusHoursPromotionCreate, BonusHoursPromotionUpdate,
    DiscountPromotionDetails, BonusHoursPromotionDetails, PromotionDetails, ActivePromotion,
)
from gamecenter.schemas.loyalty import (
    LoyaltyConfig, LoyaltyConfigUpdate, SpendBracket, SpendBracketIn, SpendBracketsReplace,
    LoyaltyMember, AccrualResult,
    LoyaltyReward, LoyaltyRewardCreate, LoyaltyRewardUpdate, RedeemRequest, LoyaltyRedemption,
)
from gamecenter.schemas.credit import (
    CreditAccount, CreditAccountDetail, CreditEntry, CreditPayment, CreditPaymentCreate,
)
from gamecenter.schemas.food import FoodItem, FoodItemCreate, FoodItemUpdate
from gamecenter.schemas.expense import Expense, ExpenseCreate, ExpenseUpdate
from gamecenter.schemas.booking import (
    Booking, BookingCreate, BookingUpdate, BookingHistory, FoodOrder, FoodOrderRequest,
    ExtendRequest, PaymentRequest, CompleteRequest, CompletionResult,
    SweepResult, ArchiveReport, ArchiveFailure,
)
from gamecenter.schemas.report import BookingStats, ExpenseCategoryTotal, ExpenseSummary
